"""
Generic calculator: pricing and risk dispatch on the instrument type tag.

Every instrument carries an InstrumentType; each entry point branches on it
and calls the dedicated method, so results are identical to calling the
method directly.

Markets per instrument family:
    swaps:     MulticurveProvider
    swaptions: BlackSwaptionVolatilityProvider
    bonds:     IssuerProvider
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from ..instruments.base import InstrumentType
from ..options.swaption import (
    SWAPTION_CASH_ON_METHOD,
    SWAPTION_PHYSICAL_IBOR_METHOD,
    SWAPTION_PHYSICAL_ON_METHOD
)
from ..sensitivities import (
    MultipleCurrencyAmount,
    MultipleCurrencyMulticurveSensitivity,
    PresentValueBlackSwaptionSensitivity
)
from .bonds import BILL_METHOD, BOND_METHOD
from .swaps import SWAP_FIXED_COMPOUNDED_ON_METHOD, SWAP_FIXED_IBOR_METHOD

logger = logging.getLogger(__name__)

_SWAPTION_METHODS = {
    InstrumentType.SWAPTION_PHYSICAL_FIXED_IBOR: SWAPTION_PHYSICAL_IBOR_METHOD,
    InstrumentType.SWAPTION_PHYSICAL_FIXED_COMPOUNDED_ON: SWAPTION_PHYSICAL_ON_METHOD,
    InstrumentType.SWAPTION_CASH_FIXED_COMPOUNDED_ON: SWAPTION_CASH_ON_METHOD,
}


@dataclass
class PricerOutput:
    """Container for pricing outputs to keep return type consistent."""

    instrument_type: str
    pv: float
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"instrument_type": self.instrument_type, "pv": self.pv, **self.details}


def _tag(instrument: Any) -> InstrumentType:
    tag = getattr(instrument, "instrument_type", None)
    if not isinstance(tag, InstrumentType):
        logger.warning("No instrument type tag on %s", type(instrument).__name__)
        raise NotImplementedError(f"Unsupported instrument {type(instrument).__name__}")
    logger.debug("Dispatching %s", tag.value)
    return tag


def _unsupported(operation: str, tag: InstrumentType) -> NotImplementedError:
    logger.warning("%s is not available for %s", operation, tag.value)
    return NotImplementedError(f"{operation} is not available for {tag.value}")


def present_value(instrument: Any, market: Any) -> MultipleCurrencyAmount:
    """Present value of any supported instrument."""
    tag = _tag(instrument)
    if tag == InstrumentType.SWAP_FIXED_IBOR:
        return SWAP_FIXED_IBOR_METHOD.present_value(instrument, market)
    if tag == InstrumentType.SWAP_FIXED_COMPOUNDED_ON:
        return SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value(instrument, market)
    if tag in _SWAPTION_METHODS:
        return MultipleCurrencyAmount.of_currency_amount(_SWAPTION_METHODS[tag].present_value(instrument, market))
    if tag == InstrumentType.FIXED_COUPON_BOND:
        return BOND_METHOD.present_value(instrument, market)
    if tag == InstrumentType.BILL:
        return BILL_METHOD.present_value(instrument, market)
    raise _unsupported("present_value", tag)


def present_value_curve_sensitivity(instrument: Any, market: Any) -> MultipleCurrencyMulticurveSensitivity:
    """Zero-rate point sensitivities of the present value."""
    tag = _tag(instrument)
    if tag == InstrumentType.SWAP_FIXED_IBOR:
        return SWAP_FIXED_IBOR_METHOD.present_value_curve_sensitivity(instrument, market)
    if tag == InstrumentType.SWAP_FIXED_COMPOUNDED_ON:
        return SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value_curve_sensitivity(instrument, market)
    if tag in _SWAPTION_METHODS:
        return _SWAPTION_METHODS[tag].present_value_curve_sensitivity(instrument, market)
    if tag == InstrumentType.FIXED_COUPON_BOND:
        return BOND_METHOD.present_value_curve_sensitivity(instrument, market)
    if tag == InstrumentType.BILL:
        return BILL_METHOD.present_value_curve_sensitivity(instrument, market)
    raise _unsupported("present_value_curve_sensitivity", tag)


def present_value_black_sensitivity(instrument: Any, market: Any) -> PresentValueBlackSwaptionSensitivity:
    """Black volatility sensitivity (swaptions only)."""
    tag = _tag(instrument)
    if tag in _SWAPTION_METHODS:
        return _SWAPTION_METHODS[tag].present_value_black_sensitivity(instrument, market)
    raise _unsupported("present_value_black_sensitivity", tag)


def par_rate(instrument: Any, market: Any) -> float:
    """
    Rate that sets the underlying to par.

    Swaps return their forward rate, swaptions the forward of the underlying.
    Bonds return the yield implied by the curves; bills as well.
    """
    tag = _tag(instrument)
    if tag == InstrumentType.SWAP_FIXED_IBOR:
        return SWAP_FIXED_IBOR_METHOD.forward(instrument, market)
    if tag == InstrumentType.SWAP_FIXED_COMPOUNDED_ON:
        return SWAP_FIXED_COMPOUNDED_ON_METHOD.forward(instrument, market)
    if tag in _SWAPTION_METHODS:
        return _SWAPTION_METHODS[tag].forward(instrument, market)
    if tag == InstrumentType.FIXED_COUPON_BOND:
        return BOND_METHOD.yield_from_curves(instrument, market)
    if tag == InstrumentType.BILL:
        return BILL_METHOD.yield_from_curves(instrument, market)
    raise _unsupported("par_rate", tag)


def price_trade(instrument: Any, market: Any) -> PricerOutput:
    """
    Price an instrument and collect the headline measures.

    Details per family:
        swaps: par_rate
        swaptions: forward, implied_vol
        bonds: dirty, clean, yield, modified_duration
        bills: price, yield
    """
    tag = _tag(instrument)
    pv = present_value(instrument, market).get_amount(instrument.currency)

    if tag in (InstrumentType.SWAP_FIXED_IBOR, InstrumentType.SWAP_FIXED_COMPOUNDED_ON):
        details = {"par_rate": par_rate(instrument, market)}
    elif tag in _SWAPTION_METHODS:
        method = _SWAPTION_METHODS[tag]
        details = {
            "forward": method.forward(instrument, market),
            "implied_vol": method.implied_volatility(instrument, market),
        }
    elif tag == InstrumentType.FIXED_COUPON_BOND:
        y = BOND_METHOD.yield_from_curves(instrument, market)
        details = {
            "dirty": BOND_METHOD.dirty_price_from_curves(instrument, market),
            "clean": BOND_METHOD.clean_price_from_curves(instrument, market),
            "yield": y,
            "modified_duration": BOND_METHOD.modified_duration_from_yield(instrument, y),
        }
    else:
        details = {
            "price": BILL_METHOD.price_from_curves(instrument, market),
            "yield": BILL_METHOD.yield_from_curves(instrument, market),
        }
    return PricerOutput(instrument_type=tag.value, pv=pv, details=details)


def risk_trade(instrument: Any, market: Any) -> Dict[str, Any]:
    """
    Curve and volatility risk of an instrument.

    Returns:
        Dict with "curve_sensitivity" (DataFrame) and, for swaptions,
        "black_sensitivity" (DataFrame). A sensitivity the method does not
        derive is left out and listed under "unavailable" with its reason.
    """
    tag = _tag(instrument)
    result: Dict[str, Any] = {}
    unavailable: Dict[str, str] = {}
    try:
        result["curve_sensitivity"] = present_value_curve_sensitivity(instrument, market).to_frame()
    except NotImplementedError as exc:
        logger.debug("No curve sensitivity for %s: %s", tag.value, exc)
        unavailable["curve_sensitivity"] = str(exc)
    if tag in _SWAPTION_METHODS:
        try:
            result["black_sensitivity"] = present_value_black_sensitivity(instrument, market).to_frame()
        except NotImplementedError as exc:
            logger.debug("No Black sensitivity for %s: %s", tag.value, exc)
            unavailable["black_sensitivity"] = str(exc)
    if unavailable:
        result["unavailable"] = unavailable
    return result


__all__ = [
    "PricerOutput",
    "present_value",
    "present_value_curve_sensitivity",
    "present_value_black_sensitivity",
    "par_rate",
    "price_trade",
    "risk_trade",
]
