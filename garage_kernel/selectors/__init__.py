"""Read-only query selectors for the garage kernel."""

from garage_kernel.selectors.base import BaseSelector, end_of_day, scope_predicate
from garage_kernel.selectors.garage_selector import GarageDTO, GarageSelector
from garage_kernel.selectors.part_selector import PartDTO, PartSelector
from garage_kernel.selectors.purchase_selector import PurchaseSelector
from garage_kernel.selectors.stock_selector import StockSelector

__all__ = [
    "BaseSelector",
    "end_of_day",
    "scope_predicate",
    "GarageDTO",
    "GarageSelector",
    "PartDTO",
    "PartSelector",
    "PurchaseSelector",
    "StockSelector",
]
