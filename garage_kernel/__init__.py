"""
Garage Kernel - read-side core for garage inventory reporting.

Provides:
- ORM mappings for parts, garages, purchases and stock movements
- Read-only selectors that aggregate them under a tenant/garage scope
- Decimal rounding helpers, an injectable clock and structured logging
"""

__version__ = "0.1.0"
