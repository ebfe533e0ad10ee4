"""ORM models for the records the reporting kernel reads."""

from garage_kernel.models.garage import Garage
from garage_kernel.models.inventory_movement import InventoryMovement, MovementType
from garage_kernel.models.part import Part, PartCategory, PartStatus
from garage_kernel.models.purchase import Purchase, PurchaseItem, PurchaseStatus

__all__ = [
    "Garage",
    "InventoryMovement",
    "MovementType",
    "Part",
    "PartCategory",
    "PartStatus",
    "Purchase",
    "PurchaseItem",
    "PurchaseStatus",
]
