"""Pure domain values for the garage reporting kernel (no I/O)."""

from garage_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from garage_kernel.domain.lots import EMPTY_HISTORY, PurchaseHistory, PurchaseLot
from garage_kernel.domain.scope import ScopeFilter

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EMPTY_HISTORY",
    "PurchaseHistory",
    "PurchaseLot",
    "ScopeFilter",
]
