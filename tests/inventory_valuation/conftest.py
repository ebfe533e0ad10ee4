"""
Inventory valuation test fixtures.

Provides:
- InventoryValuationConfig with defaults
- InventoryValuationService wired to the test session and clock
"""

import pytest

from garage_modules.inventory_valuation.config import InventoryValuationConfig
from garage_modules.inventory_valuation.service import InventoryValuationService


@pytest.fixture
def valuation_config() -> InventoryValuationConfig:
    """Standard valuation configuration for tests."""
    return InventoryValuationConfig.with_defaults()


@pytest.fixture
def valuation_service(session, deterministic_clock, valuation_config) -> InventoryValuationService:
    """InventoryValuationService wired to the test session."""
    return InventoryValuationService(
        session=session,
        clock=deterministic_clock,
        config=valuation_config,
    )
