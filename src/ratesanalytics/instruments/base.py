"""Instrument type tags used by the generic calculator."""

from enum import Enum


class InstrumentType(Enum):
    """Closed set of instrument shapes the pricing methods support."""
    SWAP_FIXED_IBOR = "SWAP_FIXED_IBOR"
    SWAP_FIXED_COMPOUNDED_ON = "SWAP_FIXED_COMPOUNDED_ON"
    SWAPTION_PHYSICAL_FIXED_IBOR = "SWAPTION_PHYSICAL_FIXED_IBOR"
    SWAPTION_PHYSICAL_FIXED_COMPOUNDED_ON = "SWAPTION_PHYSICAL_FIXED_COMPOUNDED_ON"
    SWAPTION_CASH_FIXED_COMPOUNDED_ON = "SWAPTION_CASH_FIXED_COMPOUNDED_ON"
    FIXED_COUPON_BOND = "FIXED_COUPON_BOND"
    BILL = "BILL"


__all__ = ["InstrumentType"]
