"""
Valuation - Pure inventory costing engines (weighted average and FIFO).

Lots and histories are kernel domain values; see garage_kernel.domain.lots.
"""

from garage_engines.valuation.fifo import (
    FifoResult,
    FifoValuationCalculator,
    GapFillMethod,
)
from garage_engines.valuation.weighted_average import (
    DEFAULT_COST_EPSILON,
    WeightedAverageCalculator,
    WeightedAverageResult,
)

__all__ = [
    "DEFAULT_COST_EPSILON",
    "FifoResult",
    "FifoValuationCalculator",
    "GapFillMethod",
    "WeightedAverageCalculator",
    "WeightedAverageResult",
]
