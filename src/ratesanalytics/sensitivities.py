"""
Result types for present values and sensitivities.

- CurrencyAmount: single-currency amount
- MultipleCurrencyAmount: currency -> amount, summed on collision
- MulticurveSensitivity: curve name -> [(time, dPV/dz(time))], where z is the
  continuously compounded zero rate of the curve at that time
- MultipleCurrencyMulticurveSensitivity: currency -> MulticurveSensitivity
- PresentValueBlackSwaptionSensitivity: (expiry, tenor) -> vega, with the
  swap generator of the volatility surface

All types are immutable: their mappings are read-only copies of what they
were built from, and plus, multiplied_by and cleaned return new objects.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .errors import ArgumentError, not_none

Point = Tuple[float, float]


@dataclass(frozen=True)
class CurrencyAmount:
    """An amount in one currency."""
    currency: str
    amount: float

    def multiplied_by(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, self.amount * factor)

    def plus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        if other.currency != self.currency:
            raise ArgumentError(f"Currency mismatch: {self.currency} vs {other.currency}")
        return CurrencyAmount(self.currency, self.amount + other.amount)


@dataclass(frozen=True)
class MultipleCurrencyAmount:
    """
    Amounts in several currencies.

    Attributes:
        amounts: Mapping currency -> amount
    """
    amounts: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "amounts", MappingProxyType(dict(self.amounts)))

    @classmethod
    def of(cls, currency: str, amount: float) -> "MultipleCurrencyAmount":
        return cls({currency: float(amount)})

    @classmethod
    def of_pairs(cls, pairs: Iterable[Tuple[str, float]]) -> "MultipleCurrencyAmount":
        """Build from (currency, amount) pairs; repeated currencies are summed."""
        amounts: Dict[str, float] = {}
        for ccy, amount in pairs:
            amounts[ccy] = amounts.get(ccy, 0.0) + float(amount)
        return cls(amounts)

    @classmethod
    def of_currency_amount(cls, ca: CurrencyAmount) -> "MultipleCurrencyAmount":
        return cls.of(ca.currency, ca.amount)

    def plus(self, other: "MultipleCurrencyAmount") -> "MultipleCurrencyAmount":
        return MultipleCurrencyAmount.of_pairs(list(self.amounts.items()) + list(other.amounts.items()))

    def plus_amount(self, currency: str, amount: float) -> "MultipleCurrencyAmount":
        return MultipleCurrencyAmount.of_pairs(list(self.amounts.items()) + [(currency, amount)])

    def multiplied_by(self, factor: float) -> "MultipleCurrencyAmount":
        return MultipleCurrencyAmount({ccy: a * factor for ccy, a in self.amounts.items()})

    def get_amount(self, currency: str) -> float:
        """Amount in a currency (0 if absent)."""
        return self.amounts.get(currency, 0.0)

    @property
    def currencies(self) -> List[str]:
        return sorted(self.amounts)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"currency": ccy, "amount": self.amounts[ccy]} for ccy in self.currencies],
            columns=["currency", "amount"]
        )


@dataclass(frozen=True)
class MulticurveSensitivity:
    """
    Point sensitivities to continuously compounded zero rates, by curve.

    Attributes:
        sensitivities: Mapping curve name -> tuple of (time, value) pairs
    """
    sensitivities: Mapping[str, Tuple[Point, ...]] = field(default_factory=dict)

    def __post_init__(self):
        frozen = {name: tuple(pts) for name, pts in self.sensitivities.items()}
        object.__setattr__(self, "sensitivities", MappingProxyType(frozen))

    @classmethod
    def of(cls, curve_name: str, points: Iterable[Point]) -> "MulticurveSensitivity":
        return cls({curve_name: tuple((float(t), float(v)) for t, v in points)})

    @classmethod
    def of_map(cls, sensitivities: Mapping[str, Iterable[Point]]) -> "MulticurveSensitivity":
        return cls({name: tuple((float(t), float(v)) for t, v in pts) for name, pts in sensitivities.items()})

    @property
    def curve_names(self) -> List[str]:
        return sorted(self.sensitivities)

    def points(self, curve_name: str) -> Tuple[Point, ...]:
        """Points for one curve (empty if the curve is absent)."""
        return self.sensitivities.get(curve_name, ())

    def plus(self, other: "MulticurveSensitivity") -> "MulticurveSensitivity":
        merged: Dict[str, Tuple[Point, ...]] = dict(self.sensitivities)
        for name, pts in other.sensitivities.items():
            merged[name] = merged.get(name, ()) + tuple(pts)
        return MulticurveSensitivity(merged)

    def multiplied_by(self, factor: float) -> "MulticurveSensitivity":
        return MulticurveSensitivity({
            name: tuple((t, v * factor) for t, v in pts) for name, pts in self.sensitivities.items()
        })

    def cleaned(self) -> "MulticurveSensitivity":
        """Sum values sharing a curve and time; points sorted by time."""
        result: Dict[str, Tuple[Point, ...]] = {}
        for name in self.curve_names:
            by_time: Dict[float, float] = {}
            for t, v in self.sensitivities[name]:
                by_time[t] = by_time.get(t, 0.0) + v
            result[name] = tuple(sorted(by_time.items()))
        return MulticurveSensitivity(result)

    def total(self, curve_name: Optional[str] = None) -> float:
        """Sum of all values (parallel shift sensitivity), optionally for one curve."""
        names = [curve_name] if curve_name is not None else self.curve_names
        return float(sum(v for name in names for _, v in self.points(name)))

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"curve": name, "time": t, "sensitivity": v}
            for name in self.curve_names
            for t, v in self.sensitivities[name]
        ]
        return pd.DataFrame(rows, columns=["curve", "time", "sensitivity"])


@dataclass(frozen=True)
class MultipleCurrencyMulticurveSensitivity:
    """
    Curve sensitivities by currency.

    Attributes:
        sensitivities: Mapping currency -> MulticurveSensitivity
    """
    sensitivities: Mapping[str, MulticurveSensitivity] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "sensitivities", MappingProxyType(dict(self.sensitivities)))

    @classmethod
    def of(cls, currency: str, sensitivity: MulticurveSensitivity) -> "MultipleCurrencyMulticurveSensitivity":
        return cls({currency: sensitivity})

    @property
    def currencies(self) -> List[str]:
        return sorted(self.sensitivities)

    def get(self, currency: str) -> MulticurveSensitivity:
        return self.sensitivities.get(currency, MulticurveSensitivity())

    def plus(self, other: "MultipleCurrencyMulticurveSensitivity") -> "MultipleCurrencyMulticurveSensitivity":
        merged = dict(self.sensitivities)
        for ccy, sens in other.sensitivities.items():
            merged[ccy] = merged[ccy].plus(sens) if ccy in merged else sens
        return MultipleCurrencyMulticurveSensitivity(merged)

    def plus_currency(self, currency: str, sensitivity: MulticurveSensitivity) -> "MultipleCurrencyMulticurveSensitivity":
        return self.plus(MultipleCurrencyMulticurveSensitivity.of(currency, sensitivity))

    def multiplied_by(self, factor: float) -> "MultipleCurrencyMulticurveSensitivity":
        return MultipleCurrencyMulticurveSensitivity({
            ccy: sens.multiplied_by(factor) for ccy, sens in self.sensitivities.items()
        })

    def cleaned(self) -> "MultipleCurrencyMulticurveSensitivity":
        return MultipleCurrencyMulticurveSensitivity({
            ccy: self.sensitivities[ccy].cleaned() for ccy in self.currencies
        })

    def to_frame(self) -> pd.DataFrame:
        frames = []
        for ccy in self.currencies:
            df = self.sensitivities[ccy].to_frame()
            df.insert(0, "currency", ccy)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=["currency", "curve", "time", "sensitivity"])
        return pd.concat(frames, ignore_index=True)


@dataclass(frozen=True)
class PresentValueBlackSwaptionSensitivity:
    """
    Sensitivity of a present value to Black volatilities.

    Attributes:
        sensitivity: Mapping (expiry, tenor) -> dPV/dsigma
        generator: Swap generator of the volatility surface the points belong to
    """
    sensitivity: Mapping[Tuple[float, float], float]
    generator: Any = None

    def __post_init__(self):
        object.__setattr__(self, "sensitivity", MappingProxyType(dict(self.sensitivity)))

    @classmethod
    def of(cls, expiry: float, tenor: float, value: float, generator: Any = None) -> "PresentValueBlackSwaptionSensitivity":
        return cls({(float(expiry), float(tenor)): float(value)}, generator)

    def get(self, expiry: float, tenor: float) -> float:
        return self.sensitivity.get((expiry, tenor), 0.0)

    def plus(self, other: "PresentValueBlackSwaptionSensitivity") -> "PresentValueBlackSwaptionSensitivity":
        not_none(other, "other")
        if other.generator != self.generator:
            raise ArgumentError("Cannot add Black sensitivities on different swap generators")
        merged = dict(self.sensitivity)
        for point, value in other.sensitivity.items():
            merged[point] = merged.get(point, 0.0) + value
        return PresentValueBlackSwaptionSensitivity(merged, self.generator)

    def multiplied_by(self, factor: float) -> "PresentValueBlackSwaptionSensitivity":
        return PresentValueBlackSwaptionSensitivity(
            {point: value * factor for point, value in self.sensitivity.items()}, self.generator
        )

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {"expiry": expiry, "tenor": tenor, "vega": value}
            for (expiry, tenor), value in sorted(self.sensitivity.items())
        ]
        return pd.DataFrame(rows, columns=["expiry", "tenor", "vega"])


def parameter_sensitivity(sensitivity: MulticurveSensitivity, curves: Mapping[str, Any]) -> Dict[str, np.ndarray]:
    """
    Project point sensitivities on the node zero rates of each curve.

    Args:
        sensitivity: Point sensitivities
        curves: Mapping curve name -> Curve (anything with node_weights(t))

    Returns:
        Mapping curve name -> array of dPV/dz_node, one entry per curve node
    """
    result: Dict[str, np.ndarray] = {}
    for name in sensitivity.curve_names:
        if name not in curves:
            raise ArgumentError(f"No curve named {name} for parameter sensitivity")
        curve = curves[name]
        total = np.zeros(len(curve.node_times))
        for t, v in sensitivity.points(name):
            total += v * curve.node_weights(t)
        result[name] = total
    return result


__all__ = [
    "CurrencyAmount",
    "MultipleCurrencyAmount",
    "MulticurveSensitivity",
    "MultipleCurrencyMulticurveSensitivity",
    "PresentValueBlackSwaptionSensitivity",
    "parameter_sensitivity",
]
