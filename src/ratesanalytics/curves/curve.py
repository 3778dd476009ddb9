"""
Yield curve representation and operations.

The Curve class provides:
- Discount factor P(0,t)
- Zero rate z(t) (continuously compounded)
- Simply compounded forward rate f(t1, t2)
- Node weights dz(t)/dz_j used to project point sensitivities on nodes

Internal representation uses year fractions from the anchor date and
interpolates continuously compounded zero rates.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple
import numpy as np

from .interpolation import Interpolator, create_interpolator


@dataclass(frozen=True)
class CurveNode:
    """A single point on the curve."""
    time: float  # Year fraction from anchor
    discount_factor: float
    zero_rate: float  # Continuously compounded

    @classmethod
    def from_discount_factor(cls, time: float, df: float) -> "CurveNode":
        """Create node from discount factor."""
        zr = -np.log(df) / time
        return cls(time=time, discount_factor=df, zero_rate=zr)

    @classmethod
    def from_zero_rate(cls, time: float, zr: float) -> "CurveNode":
        """Create node from continuously compounded zero rate."""
        return cls(time=time, discount_factor=float(np.exp(-zr * time)), zero_rate=zr)


class Curve:
    """
    Interpolated zero-rate curve.

    Attributes:
        name: Curve identifier used as the key of curve sensitivities
        currency: Currency code
        anchor_date: Valuation date (time 0), informational
        interpolation_method: Name of interpolation method

    Conventions:
        - Zero rates are continuously compounded
        - Times are year fractions from anchor date
        - Flat extrapolation of zero rates on both sides
    """

    def __init__(
        self,
        name: str,
        currency: str = "USD",
        anchor_date: Optional[date] = None,
        interpolation_method: str = "linear"
    ):
        self.name = name
        self.currency = currency
        self.anchor_date = anchor_date
        self.interpolation_method = interpolation_method

        self._nodes: List[CurveNode] = []
        self._interpolator: Optional[Interpolator] = None
        self._is_fitted = False

    @classmethod
    def from_zero_rates(
        cls,
        name: str,
        times: Sequence[float],
        zero_rates: Sequence[float],
        currency: str = "USD",
        anchor_date: Optional[date] = None,
        interpolation_method: str = "linear"
    ) -> "Curve":
        """Build a curve from node times and continuously compounded zero rates."""
        curve = cls(name, currency, anchor_date, interpolation_method)
        for t, zr in zip(times, zero_rates):
            curve._insert(CurveNode.from_zero_rate(float(t), float(zr)))
        curve.build()
        return curve

    def add_node(self, time: float, discount_factor: float) -> None:
        """
        Add a discount factor node to the curve.

        Args:
            time: Year fraction from anchor date (strictly positive)
            discount_factor: Discount factor P(0,t)
        """
        if time <= 0:
            raise ValueError("Time must be positive")
        if discount_factor <= 0:
            raise ValueError(f"Invalid discount factor: {discount_factor}")
        self._insert(CurveNode.from_discount_factor(time, discount_factor))

    def _insert(self, node: CurveNode) -> None:
        for i, existing in enumerate(self._nodes):
            if abs(existing.time - node.time) < 1e-10:
                self._nodes[i] = node
                self._is_fitted = False
                return
        self._nodes.append(node)
        self._nodes.sort(key=lambda n: n.time)
        self._is_fitted = False

    def build(self) -> None:
        """
        Build the interpolator from current nodes.

        Must be called after adding nodes and before querying the curve.
        """
        if not self._nodes:
            raise ValueError("Need at least 1 node to build curve")

        self._interpolator = create_interpolator(self.interpolation_method)
        self._interpolator.fit(self.node_times, self.node_rates)
        self._is_fitted = True

    def _ensure_fitted(self) -> None:
        if not self._is_fitted or self._interpolator is None:
            if self._nodes:
                self.build()
            else:
                raise RuntimeError("Curve not fitted - add nodes and call build()")

    def zero_rate(self, t: float) -> float:
        """Continuously compounded zero rate z(t)."""
        self._ensure_fitted()
        return self._interpolator.interpolate(t)

    def discount_factor(self, t: float) -> float:
        """
        Get discount factor P(0,t) = exp(-z(t) t).

        Args:
            t: Year fraction

        Returns:
            Discount factor
        """
        if t == 0:
            return 1.0
        return float(np.exp(-self.zero_rate(t) * t))

    def forward_rate(self, t1: float, t2: float) -> float:
        """Simply compounded forward rate between t1 and t2."""
        if t2 <= t1:
            raise ValueError("t2 must be greater than t1")
        return (self.discount_factor(t1) / self.discount_factor(t2) - 1) / (t2 - t1)

    def node_weights(self, t: float) -> np.ndarray:
        """Derivative of z(t) with respect to each node zero rate."""
        self._ensure_fitted()
        return self._interpolator.weights(t)

    def get_nodes(self) -> List[Tuple[float, float, float]]:
        """
        Get all curve nodes.

        Returns:
            List of (time, discount_factor, zero_rate) tuples
        """
        return [(n.time, n.discount_factor, n.zero_rate) for n in self._nodes]

    @property
    def node_times(self) -> np.ndarray:
        return np.array([n.time for n in self._nodes])

    @property
    def node_rates(self) -> np.ndarray:
        return np.array([n.zero_rate for n in self._nodes])

    def _with_rates(self, rates: np.ndarray, name: Optional[str] = None) -> "Curve":
        return Curve.from_zero_rates(
            name or self.name,
            self.node_times,
            rates,
            currency=self.currency,
            anchor_date=self.anchor_date,
            interpolation_method=self.interpolation_method,
        )

    def bump_parallel(self, bp: float) -> "Curve":
        """
        Create a new curve with all node zero rates shifted.

        Args:
            bp: Bump size in basis points

        Returns:
            New bumped curve (same name)
        """
        return self._with_rates(self.node_rates + bp / 10000.0)

    def bump_node(self, node_index: int, bp: float) -> "Curve":
        """
        Create a new curve with a single node zero rate bumped.

        Args:
            node_index: Index of node to bump (0-based)
            bp: Bump size in basis points

        Returns:
            New bumped curve (same name)
        """
        if node_index < 0 or node_index >= len(self._nodes):
            raise IndexError(f"Invalid node index: {node_index}")
        rates = self.node_rates.copy()
        rates[node_index] += bp / 10000.0
        return self._with_rates(rates)

    def shifted(self, spread: float) -> "Curve":
        """New curve with a continuously compounded spread (decimal) added to every zero rate."""
        return self._with_rates(self.node_rates + spread)

    def __repr__(self) -> str:
        return (f"Curve(name={self.name}, currency={self.currency}, "
                f"nodes={len(self._nodes)}, method={self.interpolation_method})")


def create_flat_curve(
    name: str,
    rate: float,
    currency: str = "USD",
    max_tenor_years: float = 30.0,
    anchor_date: Optional[date] = None
) -> Curve:
    """
    Create a flat yield curve.

    Args:
        name: Curve name
        rate: Flat continuously compounded rate
        currency: Currency code
        max_tenor_years: Maximum tenor in years
        anchor_date: Valuation date

    Returns:
        Flat curve
    """
    times = [t for t in (0.25, 0.5, 1, 2, 5, 10, 20) if t < max_tenor_years] + [max_tenor_years]
    return Curve.from_zero_rates(
        name, times, [rate] * len(times), currency=currency, anchor_date=anchor_date
    )


__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
]
