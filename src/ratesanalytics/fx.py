"""
FX matrix: an immutable set of exchange rates built through a validating builder.

Rates are quoted as fx_rate(ccy1, ccy2) = units of ccy2 per one unit of ccy1.
Every currency is stored against the first (reference) currency; cross rates
are derived from those.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple

from .errors import FxMatrixError, not_none
from .sensitivities import MultipleCurrencyAmount


@dataclass(frozen=True)
class FxMatrix:
    """
    Immutable FX matrix.

    Attributes:
        reference_currency: Currency every rate is expressed against
        rates_to_reference: Mapping currency -> value of one unit in the reference currency
    """
    reference_currency: str
    rates_to_reference: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def builder(cls) -> "FxMatrixBuilder":
        return FxMatrixBuilder()

    @property
    def currencies(self) -> List[str]:
        return list(self.rates_to_reference)

    def contains(self, currency: str) -> bool:
        return currency in self.rates_to_reference

    def fx_rate(self, ccy1: str, ccy2: str) -> float:
        """
        Exchange rate between two currencies.

        Args:
            ccy1: Base currency
            ccy2: Quote currency

        Returns:
            Units of ccy2 for one unit of ccy1
        """
        for ccy in (ccy1, ccy2):
            if ccy not in self.rates_to_reference:
                raise FxMatrixError(f"Currency {ccy} not in FX matrix")
        return self.rates_to_reference[ccy1] / self.rates_to_reference[ccy2]

    def convert(self, amount: MultipleCurrencyAmount, currency: str) -> float:
        """Total of a multi-currency amount expressed in one currency."""
        not_none(amount, "amount")
        return sum(a * self.fx_rate(ccy, currency) for ccy, a in amount.amounts.items())


class FxMatrixBuilder:
    """
    Collects FX rates and validates them before building an FxMatrix.

    The first pair added fixes the reference currency; every later pair must
    connect a new currency to one already present.
    """

    def __init__(self):
        self._pairs: List[Tuple[str, str, float]] = []

    def add(self, ccy1: str, ccy2: str, rate: float) -> "FxMatrixBuilder":
        """
        Add a rate (units of ccy2 per unit of ccy1).

        Raises:
            FxMatrixError: Same currency twice, non-positive rate or duplicate pair
        """
        not_none(ccy1, "ccy1")
        not_none(ccy2, "ccy2")
        if ccy1 == ccy2:
            raise FxMatrixError(f"Currency pair must contain two currencies, got {ccy1}/{ccy2}")
        if rate is None or rate <= 0:
            raise FxMatrixError(f"FX rate for {ccy1}/{ccy2} must be positive, got {rate}")
        pair = frozenset((ccy1, ccy2))
        if any(frozenset((a, b)) == pair for a, b, _ in self._pairs):
            raise FxMatrixError(f"Duplicate currency pair {ccy1}/{ccy2}")
        self._pairs.append((ccy1, ccy2, float(rate)))
        return self

    def build(self) -> FxMatrix:
        if not self._pairs:
            raise FxMatrixError("FX matrix needs at least one rate")

        reference = self._pairs[0][0]
        to_reference: Dict[str, float] = {reference: 1.0}
        for ccy1, ccy2, rate in self._pairs:
            if ccy1 in to_reference and ccy2 in to_reference:
                raise FxMatrixError(f"Pair {ccy1}/{ccy2} would over-determine the matrix")
            if ccy1 in to_reference:
                to_reference[ccy2] = to_reference[ccy1] / rate
            elif ccy2 in to_reference:
                to_reference[ccy1] = to_reference[ccy2] * rate
            else:
                raise FxMatrixError(f"Pair {ccy1}/{ccy2} has no currency already in the matrix")
        return FxMatrix(reference, to_reference)


__all__ = [
    "FxMatrix",
    "FxMatrixBuilder",
]
