"""
Options module - Rates option pricing.

Provides:
- Black price function, its adjoint and the Black formula repository
- Swaption Black methods (physical Ibor, physical and cash overnight compounded)
- G2++ model and swaption approximation method
"""

from .black import BlackFormulaRepository, black_price, black_price_adjoint
from .swaption import (
    SwaptionPhysicalFixedIborBlackMethod,
    SwaptionPhysicalFixedCompoundedONCompoundedBlackMethod,
    SwaptionCashFixedCompoundedONCompoundedBlackMethod,
    SWAPTION_PHYSICAL_IBOR_METHOD,
    SWAPTION_PHYSICAL_ON_METHOD,
    SWAPTION_CASH_ON_METHOD,
)
from .g2pp import (
    G2ppParameters,
    G2ppModel,
    SwaptionPhysicalFixedIborG2ppApproximationMethod,
    SWAPTION_G2PP_APPROXIMATION_METHOD,
)

__all__ = [
    "BlackFormulaRepository",
    "black_price",
    "black_price_adjoint",
    "SwaptionPhysicalFixedIborBlackMethod",
    "SwaptionPhysicalFixedCompoundedONCompoundedBlackMethod",
    "SwaptionCashFixedCompoundedONCompoundedBlackMethod",
    "SWAPTION_PHYSICAL_IBOR_METHOD",
    "SWAPTION_PHYSICAL_ON_METHOD",
    "SWAPTION_CASH_ON_METHOD",
    "G2ppParameters",
    "G2ppModel",
    "SwaptionPhysicalFixedIborG2ppApproximationMethod",
    "SWAPTION_G2PP_APPROXIMATION_METHOD",
]
