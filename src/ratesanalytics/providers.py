"""
Market data providers consumed by the pricing methods.

Provides a clean separation between market data and pricing logic:
- MulticurveProvider: discount curves by currency, forward curves by index
- IssuerProvider: multicurve provider plus issuer-specific discount curves
- BlackSwaptionVolatilityProvider: Black volatility surface by (expiry, tenor)
  with the swap generator used to quote it
- G2ppProvider: multicurve provider plus G2++ parameters

Providers are read-only; the with_* methods return new providers, which is
how scenario and finite-difference bumps are built.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from .conventions import Calendar, DayCount
from .curves.curve import Curve
from .dates import DateUtils
from .errors import ArgumentError
from .fx import FxMatrix


@dataclass(frozen=True)
class MulticurveProvider:
    """
    Discount and forward curves.

    Attributes:
        discount_curves: Currency -> discounting curve
        forward_curves: Index name -> forward projection curve
        fx_matrix: Optional FX rates between the currencies
    """
    discount_curves: Mapping[str, Curve]
    forward_curves: Mapping[str, Curve] = field(default_factory=dict)
    fx_matrix: Optional[FxMatrix] = None

    def discount_curve(self, currency: str) -> Curve:
        if currency not in self.discount_curves:
            raise ArgumentError(f"No discount curve for currency {currency}")
        return self.discount_curves[currency]

    def forward_curve(self, index_name: str) -> Curve:
        if index_name not in self.forward_curves:
            raise ArgumentError(f"No forward curve for index {index_name}")
        return self.forward_curves[index_name]

    def discount_factor(self, currency: str, time: float) -> float:
        """Discount factor for a cash flow paid at time in currency."""
        return self.discount_curve(currency).discount_factor(time)

    def name(self, currency: str) -> str:
        """Name of the discounting curve of a currency."""
        return self.discount_curve(currency).name

    def forward_curve_name(self, index_name: str) -> str:
        return self.forward_curve(index_name).name

    def forward_rate(self, index_name: str, start_time: float, end_time: float, accrual_factor: float) -> float:
        """Simply compounded forward (P(s)/P(e) - 1) / accrual."""
        curve = self.forward_curve(index_name)
        return (curve.discount_factor(start_time) / curve.discount_factor(end_time) - 1) / accrual_factor

    def annually_compounded_forward_rate(
        self,
        index_name: str,
        start_time: float,
        end_time: float,
        accrual_factor: float
    ) -> float:
        """Annually compounded forward (P(s)/P(e))^(1/accrual) - 1."""
        curve = self.forward_curve(index_name)
        ratio = curve.discount_factor(start_time) / curve.discount_factor(end_time)
        return ratio ** (1.0 / accrual_factor) - 1

    def curves(self) -> Dict[str, Curve]:
        """All curves by name."""
        result = {c.name: c for c in self.discount_curves.values()}
        result.update({c.name: c for c in self.forward_curves.values()})
        return result

    def with_curve(self, curve: Curve) -> "MulticurveProvider":
        """New provider with every curve named like curve replaced by it."""
        return replace(
            self,
            discount_curves={k: curve if c.name == curve.name else c for k, c in self.discount_curves.items()},
            forward_curves={k: curve if c.name == curve.name else c for k, c in self.forward_curves.items()},
        )


@dataclass(frozen=True)
class IssuerProvider:
    """
    Multicurve provider decorated with issuer discount curves.

    Attributes:
        multicurve: Currency discounting and forward curves
        issuer_curves: Issuer name -> discount curve for that issuer's securities
    """
    multicurve: MulticurveProvider
    issuer_curves: Mapping[str, Curve]

    def issuer_curve(self, issuer: str) -> Curve:
        if issuer not in self.issuer_curves:
            raise ArgumentError(f"No curve for issuer {issuer}")
        return self.issuer_curves[issuer]

    def issuer_discount_factor(self, issuer: str, time: float) -> float:
        return self.issuer_curve(issuer).discount_factor(time)

    def issuer_curve_name(self, issuer: str) -> str:
        return self.issuer_curve(issuer).name

    def discount_factor(self, currency: str, time: float) -> float:
        return self.multicurve.discount_factor(currency, time)

    def name(self, currency: str) -> str:
        return self.multicurve.name(currency)

    def curves(self) -> Dict[str, Curve]:
        result = self.multicurve.curves()
        result.update({c.name: c for c in self.issuer_curves.values()})
        return result

    def with_curve(self, curve: Curve) -> "IssuerProvider":
        return IssuerProvider(
            self.multicurve.with_curve(curve),
            {k: curve if c.name == curve.name else c for k, c in self.issuer_curves.items()},
        )

    def with_issuer_curve(self, issuer: str, curve: Curve) -> "IssuerProvider":
        curves = dict(self.issuer_curves)
        curves[issuer] = curve
        return IssuerProvider(self.multicurve, curves)


@dataclass(frozen=True)
class GeneratorSwap:
    """
    Swap generator: conventions of the swaps a volatility surface is quoted on.

    Attributes:
        name: Generator identifier (e.g. "USD6MLIBOR3M")
        fixed_leg_day_count: Day count of the fixed leg
        calendar: Business day calendar
        fixed_leg_period_months: Fixed leg payment period
        currency: Currency of the swaps
    """
    name: str
    fixed_leg_day_count: DayCount = DayCount.THIRTY_360
    calendar: Calendar = Calendar()
    fixed_leg_period_months: int = 6
    currency: str = "USD"


@dataclass(frozen=True, eq=False)
class BlackSwaptionVolatilityProvider:
    """
    Black swaption volatility surface with its curves.

    Volatilities are interpolated bilinearly in (expiry, tenor) with flat
    extrapolation and floored at zero.

    Attributes:
        multicurve: Curves used to compute forwards and annuities
        expiries: Sorted expiry times (years)
        tenors: Sorted underlying swap tenors (years)
        volatilities: Array of shape (len(expiries), len(tenors))
        generator: Swap generator of the quoted swaps
    """
    multicurve: MulticurveProvider
    expiries: np.ndarray
    tenors: np.ndarray
    volatilities: np.ndarray
    generator: GeneratorSwap

    def __post_init__(self):
        expiries = np.asarray(self.expiries, dtype=np.float64)
        tenors = np.asarray(self.tenors, dtype=np.float64)
        vols = np.asarray(self.volatilities, dtype=np.float64)
        if vols.shape != (len(expiries), len(tenors)):
            raise ArgumentError(
                f"Volatility grid shape {vols.shape} does not match "
                f"{len(expiries)} expiries x {len(tenors)} tenors"
            )
        if np.any(np.diff(expiries) <= 0) or np.any(np.diff(tenors) <= 0):
            raise ArgumentError("Expiries and tenors must be strictly increasing")
        object.__setattr__(self, "expiries", expiries)
        object.__setattr__(self, "tenors", tenors)
        object.__setattr__(self, "volatilities", vols)

    @classmethod
    def flat(
        cls,
        multicurve: MulticurveProvider,
        volatility: float,
        generator: GeneratorSwap
    ) -> "BlackSwaptionVolatilityProvider":
        """Surface with the same volatility everywhere."""
        return cls(multicurve, np.array([1.0]), np.array([1.0]), np.array([[volatility]]), generator)

    @classmethod
    def from_dataframe(
        cls,
        vol_quotes_df: pd.DataFrame,
        multicurve: MulticurveProvider,
        generator: GeneratorSwap
    ) -> "BlackSwaptionVolatilityProvider":
        """
        Build the surface from a table of quotes.

        Args:
            vol_quotes_df: Quotes with columns:
                - expiry: str tenor (e.g., "1Y") or float years
                - tenor: str tenor (e.g., "5Y") or float years
                - vol: float Black volatility
            multicurve: Curves
            generator: Swap generator of the quotes

        Returns:
            Volatility provider on the full expiry x tenor grid
        """
        df = vol_quotes_df.copy()
        df["expiry"] = df["expiry"].map(_to_years)
        df["tenor"] = df["tenor"].map(_to_years)
        grid = df.pivot_table(index="expiry", columns="tenor", values="vol", aggfunc="mean")
        if grid.isnull().to_numpy().any():
            raise ArgumentError("Volatility quotes do not cover the full expiry x tenor grid")
        grid = grid.sort_index().sort_index(axis=1)
        return cls(
            multicurve,
            grid.index.to_numpy(dtype=float),
            grid.columns.to_numpy(dtype=float),
            grid.to_numpy(dtype=float),
            generator,
        )

    def volatility(self, expiry: float, tenor: float) -> float:
        """Black volatility at (expiry, tenor)."""
        we = _linear_weights(self.expiries, expiry)
        wt = _linear_weights(self.tenors, tenor)
        return float(max(we @ self.volatilities @ wt, 0.0))

    def with_volatility_shift(self, shift: float) -> "BlackSwaptionVolatilityProvider":
        """New surface with every volatility shifted by an absolute amount."""
        return replace(self, volatilities=self.volatilities + shift)

    def with_multicurve(self, multicurve: MulticurveProvider) -> "BlackSwaptionVolatilityProvider":
        return replace(self, multicurve=multicurve)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.volatilities, index=self.expiries, columns=self.tenors)


@dataclass(frozen=True)
class G2ppProvider:
    """
    Curves with G2++ model parameters.

    Attributes:
        multicurve: Curves
        parameters: G2ppParameters
        currency: Currency the parameters apply to
    """
    multicurve: MulticurveProvider
    parameters: Any
    currency: str = "USD"


def _to_years(value) -> float:
    if isinstance(value, str):
        return DateUtils.tenor_to_years(value)
    return float(value)


def _linear_weights(grid: np.ndarray, x: float) -> np.ndarray:
    w = np.zeros(len(grid))
    if len(grid) == 1 or x <= grid[0]:
        w[0] = 1.0
        return w
    if x >= grid[-1]:
        w[-1] = 1.0
        return w
    idx = int(np.searchsorted(grid, x, side='right') - 1)
    u = (x - grid[idx]) / (grid[idx + 1] - grid[idx])
    w[idx] = 1.0 - u
    w[idx + 1] = u
    return w


__all__ = [
    "MulticurveProvider",
    "IssuerProvider",
    "GeneratorSwap",
    "BlackSwaptionVolatilityProvider",
    "G2ppProvider",
]
