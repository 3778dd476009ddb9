"""
Instruments package - time-based instrument representations.

Provides:
- Payments and coupons (fixed, Ibor, compounded fixed, overnight compounded)
- Swaps (fixed vs Ibor, fixed compounded vs overnight compounded)
- Swaptions (physical Ibor, physical and cash settled overnight compounded)
- Fixed coupon bonds and bills, with date-based definitions
"""

from .base import InstrumentType
from .payments import (
    PaymentFixed,
    CouponFixed,
    CouponIbor,
    CouponFixedAccruedCompounding,
    CouponONCompounded,
    Annuity,
)
from .swaps import Swap, SwapFixedIbor, SwapFixedCompoundedON
from .swaptions import (
    SwaptionPhysicalFixedIbor,
    SwaptionPhysicalFixedCompoundedON,
    SwaptionCashFixedCompoundedON,
)
from .bonds import (
    FixedCouponBond,
    FixedCouponBondDefinition,
    Bill,
    BillDefinition,
)

__all__ = [
    "InstrumentType",
    "PaymentFixed",
    "CouponFixed",
    "CouponIbor",
    "CouponFixedAccruedCompounding",
    "CouponONCompounded",
    "Annuity",
    "Swap",
    "SwapFixedIbor",
    "SwapFixedCompoundedON",
    "SwaptionPhysicalFixedIbor",
    "SwaptionPhysicalFixedCompoundedON",
    "SwaptionCashFixedCompoundedON",
    "FixedCouponBond",
    "FixedCouponBondDefinition",
    "Bill",
    "BillDefinition",
]
