"""
Module: garage_kernel.db.types
Responsibility: Annotated column types and the sanctioned rounding helpers
    for quantities, unit costs and money.  Centralizes precision so that
    selectors, engines and report assemblers round identically.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    selectors/ and engines.  MUST NOT import from any of those layers.

Precision scales:
    QUANTITY_DECIMAL_PLACES = 2  -- stock quantities on reports
    COST_DECIMAL_PLACES     = 4  -- unit costs feeding a multiplication
    MONEY_DECIMAL_PLACES    = 2  -- displayed values and totals

Unit costs keep four places because they are multiplied by quantities
downstream; rounding them to two places first compounds error across
many parts.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Quantity / amount with high precision
Amount = Annotated[Decimal, Numeric(38, 9)]

# Short identifier strings
ShortCode = Annotated[str, String(50)]

# Names and labels
Label = Annotated[str, String(255)]


QUANTITY_DECIMAL_PLACES = 2
COST_DECIMAL_PLACES = 4
MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def quantize(
    value: Decimal,
    decimal_places: int,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a Decimal to a fixed number of places.

    This is the ONLY rounding primitive used by the engine.  The helpers
    below bind it to the three report scales.

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    if decimal_places == 0:
        return value.quantize(Decimal("1"), rounding=rounding)
    quantize_str = "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def round_quantity(value: Decimal, decimal_places: int = QUANTITY_DECIMAL_PLACES) -> Decimal:
    """Round a stock quantity to report precision."""
    return quantize(value, decimal_places)


def round_cost(value: Decimal, decimal_places: int = COST_DECIMAL_PLACES) -> Decimal:
    """Round a unit cost to the higher cost precision."""
    return quantize(value, decimal_places)


def round_money(value: Decimal, decimal_places: int = MONEY_DECIMAL_PLACES) -> Decimal:
    """Round a monetary value to display precision."""
    return quantize(value, decimal_places)


def to_decimal(value) -> Decimal:
    """
    Coerce a database value to Decimal.

    SQLite returns aggregates as float or int; PostgreSQL returns Decimal.
    Going through ``str`` keeps float noise out of the Decimal.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
