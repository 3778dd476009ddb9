"""
RatesAnalytics: Swaption, Bond and Bill Pricing & Sensitivity Library

A modular library for:
- Pricing European swaptions with Black (physical and cash settled, Ibor
  and overnight compounded underlyings) and the G2++ approximation
- Bond and bill yield/price conversions, durations, convexity and z-spread
- Curve (zero-rate point) sensitivities and Black vega
- Multi-curve, issuer and volatility providers over interpolated curves

Scope: pricing and risk from already-built curves and surfaces; no curve
construction or market data sourcing.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Core modules
from .config import PricingConfig, configure_logging
from .errors import ArgumentError, FxMatrixError, RootFindingError
from .conventions import (
    DayCount,
    BusinessDayConvention,
    YieldConvention,
    Calendar,
    Conventions,
    year_fraction,
    day_count_fraction,
)
from .dates import DateUtils, ScheduleInfo

# Curves and providers
from .curves import Curve, LinearInterpolator, CubicSplineInterpolator, create_flat_curve
from .fx import FxMatrix, FxMatrixBuilder
from .providers import (
    MulticurveProvider,
    IssuerProvider,
    GeneratorSwap,
    BlackSwaptionVolatilityProvider,
    G2ppProvider,
)

# Results
from .sensitivities import (
    CurrencyAmount,
    MultipleCurrencyAmount,
    MulticurveSensitivity,
    MultipleCurrencyMulticurveSensitivity,
    PresentValueBlackSwaptionSensitivity,
    parameter_sensitivity,
)

# Instruments
from .instruments import (
    InstrumentType,
    SwapFixedIbor,
    SwapFixedCompoundedON,
    SwaptionPhysicalFixedIbor,
    SwaptionPhysicalFixedCompoundedON,
    SwaptionCashFixedCompoundedON,
    FixedCouponBond,
    FixedCouponBondDefinition,
    Bill,
    BillDefinition,
)

# Pricers (before options: the swaption methods use the swap methods)
from .pricers import (
    SWAP_FIXED_IBOR_METHOD,
    SWAP_FIXED_COMPOUNDED_ON_METHOD,
    BOND_METHOD,
    BILL_METHOD,
    price_trade,
    risk_trade,
    PricerOutput,
)

# Options
from .options import (
    BlackFormulaRepository,
    black_price,
    black_price_adjoint,
    SWAPTION_PHYSICAL_IBOR_METHOD,
    SWAPTION_PHYSICAL_ON_METHOD,
    SWAPTION_CASH_ON_METHOD,
    G2ppParameters,
    SWAPTION_G2PP_APPROXIMATION_METHOD,
)

__all__ = [
    # Version
    "__version__",
    # Configuration and errors
    "PricingConfig",
    "configure_logging",
    "ArgumentError",
    "FxMatrixError",
    "RootFindingError",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "YieldConvention",
    "Calendar",
    "Conventions",
    "year_fraction",
    "day_count_fraction",
    # Dates
    "DateUtils",
    "ScheduleInfo",
    # Curves and providers
    "Curve",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_flat_curve",
    "FxMatrix",
    "FxMatrixBuilder",
    "MulticurveProvider",
    "IssuerProvider",
    "GeneratorSwap",
    "BlackSwaptionVolatilityProvider",
    "G2ppProvider",
    # Results
    "CurrencyAmount",
    "MultipleCurrencyAmount",
    "MulticurveSensitivity",
    "MultipleCurrencyMulticurveSensitivity",
    "PresentValueBlackSwaptionSensitivity",
    "parameter_sensitivity",
    # Instruments
    "InstrumentType",
    "SwapFixedIbor",
    "SwapFixedCompoundedON",
    "SwaptionPhysicalFixedIbor",
    "SwaptionPhysicalFixedCompoundedON",
    "SwaptionCashFixedCompoundedON",
    "FixedCouponBond",
    "FixedCouponBondDefinition",
    "Bill",
    "BillDefinition",
    # Pricers
    "SWAP_FIXED_IBOR_METHOD",
    "SWAP_FIXED_COMPOUNDED_ON_METHOD",
    "BOND_METHOD",
    "BILL_METHOD",
    "price_trade",
    "risk_trade",
    "PricerOutput",
    # Options
    "BlackFormulaRepository",
    "black_price",
    "black_price_adjoint",
    "SWAPTION_PHYSICAL_IBOR_METHOD",
    "SWAPTION_PHYSICAL_ON_METHOD",
    "SWAPTION_CASH_ON_METHOD",
    "G2ppParameters",
    "SWAPTION_G2PP_APPROXIMATION_METHOD",
]
