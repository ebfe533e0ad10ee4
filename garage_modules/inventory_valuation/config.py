"""
Inventory Valuation Configuration Schema.

Precision, fallbacks and display labels for the inventory valuation
report.  Defaults reproduce the report as garages have always seen it:
quantities and money at 2 places, unit costs at 4, the last three
purchases in the history column, and gap stock valued at average cost.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Self

from garage_engines.valuation import DEFAULT_COST_EPSILON, GapFillMethod
from garage_kernel.db.types import (
    COST_DECIMAL_PLACES,
    MONEY_DECIMAL_PLACES,
    QUANTITY_DECIMAL_PLACES,
)
from garage_kernel.exceptions import ConfigurationError
from garage_kernel.logging_config import get_logger

logger = get_logger("modules.inventory_valuation.config")


@dataclass
class InventoryValuationConfig:
    """
    Configuration schema for the inventory valuation report.

    Controls rounding, the weighted-average fallback threshold, FIFO
    gap-fill policy, and the labels used for missing data.
    """

    # Rounding precision
    quantity_decimal_places: int = QUANTITY_DECIMAL_PLACES
    cost_decimal_places: int = COST_DECIMAL_PLACES
    money_decimal_places: int = MONEY_DECIMAL_PLACES

    # Purchased quantity at or below this uses the part's standard cost
    cost_epsilon: Decimal = DEFAULT_COST_EPSILON

    # How stock not covered by purchase lots is valued under FIFO
    gap_fill_method: GapFillMethod = GapFillMethod.AVERAGE_COST

    # Purchase history column
    history_entries: int = 3
    history_separator: str = " | "
    empty_history_label: str = "-"

    # Parts without a category
    uncategorized_label: str = "Uncategorized"

    # CSV file names are <prefix>_<YYYYMMDD>_<HHMMSS>.csv
    export_filename_prefix: str = "inventory_valuation"

    def __post_init__(self):
        for name in ("quantity_decimal_places", "cost_decimal_places", "money_decimal_places"):
            if getattr(self, name) < 0:
                raise ConfigurationError(name, "cannot be negative")

        if not isinstance(self.cost_epsilon, Decimal):
            try:
                self.cost_epsilon = Decimal(str(self.cost_epsilon))
            except InvalidOperation:
                raise ConfigurationError(
                    "cost_epsilon", f"not a decimal value: {self.cost_epsilon!r}"
                ) from None
        if self.cost_epsilon < 0:
            raise ConfigurationError("cost_epsilon", "cannot be negative")

        try:
            self.gap_fill_method = GapFillMethod(self.gap_fill_method)
        except ValueError:
            allowed = ", ".join(m.value for m in GapFillMethod)
            raise ConfigurationError(
                "gap_fill_method",
                f"unknown method {self.gap_fill_method!r} (expected one of: {allowed})",
            ) from None

        if self.history_entries < 0:
            raise ConfigurationError("history_entries", "cannot be negative")
        if not self.export_filename_prefix:
            raise ConfigurationError("export_filename_prefix", "cannot be empty")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("inventory_valuation_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g. a parsed YAML config set)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                "inventory_valuation", f"unknown settings: {', '.join(unknown)}"
            )
        logger.info(
            "inventory_valuation_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
