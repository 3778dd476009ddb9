"""
European swaption instruments.

A swaption holds the underlying swap starting at settlement. A payer
swaption (right to pay fixed) is a call on the swap rate.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..errors import ArgumentError, not_none
from .base import InstrumentType
from .swaps import Swap, SwapFixedCompoundedON, SwapFixedIbor


@dataclass(frozen=True)
class _Swaption:
    """
    Fields shared by every swaption shape.

    Attributes:
        underlying_swap: Swap entered at exercise
        strike: Fixed rate of the underlying
        time_to_expiry: Option expiry (years)
        settlement_time: Swap start / cash settlement time (years)
        maturity_time: Underlying tenor (years), the vol surface's second axis
        is_call: True for a payer swaption
        is_long: True when the option is held
    """
    underlying_swap: Swap
    strike: float
    time_to_expiry: float
    settlement_time: float
    maturity_time: float
    is_call: bool
    is_long: bool = True

    def __post_init__(self):
        not_none(self.underlying_swap, "underlying_swap")
        if self.time_to_expiry < 0:
            raise ArgumentError("time_to_expiry must be non-negative")
        if self.settlement_time < self.time_to_expiry:
            raise ArgumentError("settlement_time must not precede time_to_expiry")

    @property
    def currency(self) -> str:
        return self.underlying_swap.currency

    @property
    def sign(self) -> float:
        """+1 for a long position, -1 for a short one."""
        return 1.0 if self.is_long else -1.0

    @classmethod
    def from_swap(
        cls,
        swap: Swap,
        time_to_expiry: float,
        is_long: bool = True,
        settlement_time: Optional[float] = None,
        maturity_time: Optional[float] = None
    ):
        """
        Swaption on an existing swap; strike and payer/receiver side follow the swap.

        Args:
            swap: Underlying swap
            time_to_expiry: Option expiry (years)
            is_long: Option held or written
            settlement_time: Defaults to the time to expiry
            maturity_time: Defaults to last fixed payment time minus settlement time

        Returns:
            Swaption of the calling class
        """
        not_none(swap, "swap")
        settle = time_to_expiry if settlement_time is None else settlement_time
        tenor = maturity_time if maturity_time is not None else swap.first_leg[-1].payment_time - settle
        return cls(
            underlying_swap=swap,
            strike=swap.fixed_rate,
            time_to_expiry=time_to_expiry,
            settlement_time=settle,
            maturity_time=tenor,
            is_call=swap.is_payer,
            is_long=is_long,
        )


@dataclass(frozen=True)
class SwaptionPhysicalFixedIbor(_Swaption):
    """Physically settled swaption on a fixed-vs-Ibor swap."""
    instrument_type: ClassVar[InstrumentType] = InstrumentType.SWAPTION_PHYSICAL_FIXED_IBOR

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.underlying_swap, SwapFixedIbor):
            raise ArgumentError("Underlying must be a SwapFixedIbor")


@dataclass(frozen=True)
class SwaptionPhysicalFixedCompoundedON(_Swaption):
    """Physically settled swaption on a fixed-compounded vs overnight-compounded swap."""
    instrument_type: ClassVar[InstrumentType] = InstrumentType.SWAPTION_PHYSICAL_FIXED_COMPOUNDED_ON

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.underlying_swap, SwapFixedCompoundedON):
            raise ArgumentError("Underlying must be a SwapFixedCompoundedON")


@dataclass(frozen=True)
class SwaptionCashFixedCompoundedON(_Swaption):
    """Cash settled swaption on a fixed-compounded vs overnight-compounded swap."""
    instrument_type: ClassVar[InstrumentType] = InstrumentType.SWAPTION_CASH_FIXED_COMPOUNDED_ON

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.underlying_swap, SwapFixedCompoundedON):
            raise ArgumentError("Underlying must be a SwapFixedCompoundedON")


__all__ = [
    "SwaptionPhysicalFixedIbor",
    "SwaptionPhysicalFixedCompoundedON",
    "SwaptionCashFixedCompoundedON",
]
