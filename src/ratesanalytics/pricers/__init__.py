"""
Pricers package - discounting methods and the generic calculator.

Provides:
- Swap discounting methods (fixed-vs-Ibor, fixed-vs-overnight compounded)
- Bond and bill discounting methods
- Dispatch on the instrument type tag
"""

from .swaps import (
    SwapFixedIborDiscountingMethod,
    SwapFixedCompoundedONCompoundedDiscountingMethod,
    cash_flow_equivalent,
    SWAP_FIXED_IBOR_METHOD,
    SWAP_FIXED_COMPOUNDED_ON_METHOD,
)
from .bonds import (
    BondSecurityDiscountingMethod,
    BillSecurityDiscountingMethod,
    BOND_METHOD,
    BILL_METHOD,
)
from .dispatcher import (
    PricerOutput,
    present_value,
    present_value_curve_sensitivity,
    present_value_black_sensitivity,
    par_rate,
    price_trade,
    risk_trade,
)

__all__ = [
    "SwapFixedIborDiscountingMethod",
    "SwapFixedCompoundedONCompoundedDiscountingMethod",
    "cash_flow_equivalent",
    "SWAP_FIXED_IBOR_METHOD",
    "SWAP_FIXED_COMPOUNDED_ON_METHOD",
    "BondSecurityDiscountingMethod",
    "BillSecurityDiscountingMethod",
    "BOND_METHOD",
    "BILL_METHOD",
    "PricerOutput",
    "present_value",
    "present_value_curve_sensitivity",
    "present_value_black_sensitivity",
    "par_rate",
    "price_trade",
    "risk_trade",
]
