"""Decimal amount helpers.

Intents carry human amounts ("1.5 SOL"); aggregators and contracts take
integer base units (lamports, wei).  All conversion goes through Decimal
so that 0.1 + 0.2 style float drift never reaches a transaction.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any


def parse_amount(value: Any) -> Decimal:
    """Parse a user/LLM supplied amount. Returns Decimal(0) when unparseable."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        amount = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not amount.is_finite():
        return Decimal(0)
    return amount


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Scale a native amount to the asset's smallest unit, truncating dust."""
    scaled = amount * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_base_units(units: int, decimals: int) -> Decimal:
    return Decimal(units) / (Decimal(10) ** decimals)
