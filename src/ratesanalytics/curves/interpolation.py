"""
Interpolation methods for zero-rate curves.

Provides:
- LinearInterpolator: Linear interpolation on zero rates
- CubicSplineInterpolator: Natural cubic spline on zero rates

Both extrapolate flat and expose node weights (the derivative of the
interpolated value with respect to each node value), which is what turns
point sensitivities into node sensitivities.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions
            values: Array of zero rates
        """
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        idx = np.argsort(times)
        self.times = np.asarray(times, dtype=np.float64)[idx]
        self.values = np.asarray(values, dtype=np.float64)[idx]
        self._prepare()

    def _prepare(self) -> None:
        pass

    def interpolate(self, t: float) -> float:
        """Interpolated value at t."""
        return float(self.weights(t) @ self.values)

    def __call__(self, t: float) -> float:
        return self.interpolate(t)

    @abstractmethod
    def weights(self, t: float) -> np.ndarray:
        """
        Sensitivity of the interpolated value at t to each node value.

        Returns:
            Array with one weight per node (sums to one)
        """

    def _check_fitted(self) -> None:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

    def _bracket(self, t: float) -> int:
        idx = np.searchsorted(self.times, t, side='right') - 1
        return int(max(0, min(idx, len(self.times) - 2)))


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Extrapolates flat beyond boundaries.
    """

    def weights(self, t: float) -> np.ndarray:
        self._check_fitted()
        w = np.zeros(len(self.times))
        if t <= self.times[0]:
            w[0] = 1.0
            return w
        if t >= self.times[-1]:
            w[-1] = 1.0
            return w

        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        u = (t - t0) / (t1 - t0)
        w[idx] = 1.0 - u
        w[idx + 1] = u
        return w


class CubicSplineInterpolator(Interpolator):
    """
    Natural cubic spline interpolation (second derivative = 0 at boundaries).

    The second derivatives M solve a tridiagonal system that is linear in
    the node values, so the spline is stored as the operator y -> M.
    """

    def __init__(self):
        super().__init__()
        self._moment_operator: Optional[np.ndarray] = None

    def _prepare(self) -> None:
        n = len(self.times)
        self._moment_operator = np.zeros((n, n))
        if n < 3:
            return

        h = np.diff(self.times)
        A = np.zeros((n, n))
        R = np.zeros((n, n))
        A[0, 0] = 1.0
        A[n - 1, n - 1] = 1.0
        for i in range(1, n - 1):
            A[i, i - 1] = h[i - 1]
            A[i, i] = 2 * (h[i - 1] + h[i])
            A[i, i + 1] = h[i]
            R[i, i + 1] = 6.0 / h[i]
            R[i, i] = -6.0 / h[i] - 6.0 / h[i - 1]
            R[i, i - 1] = 6.0 / h[i - 1]
        self._moment_operator = np.linalg.solve(A, R)

    def weights(self, t: float) -> np.ndarray:
        self._check_fitted()
        n = len(self.times)
        w = np.zeros(n)
        if n == 1 or t <= self.times[0]:
            w[0] = 1.0
            return w
        if t >= self.times[-1]:
            w[-1] = 1.0
            return w

        idx = self._bracket(t)
        h = self.times[idx + 1] - self.times[idx]
        dx = t - self.times[idx]
        m0 = self._moment_operator[idx]
        m1 = self._moment_operator[idx + 1]

        # S(x) = y_i + b dx + c dx^2 + d dx^3 with every coefficient linear in y
        w[idx] += 1.0 - dx / h
        w[idx + 1] += dx / h
        w += -dx * h * (m1 + 2 * m0) / 6.0
        w += dx ** 2 * m0 / 2.0
        w += dx ** 3 * (m1 - m0) / (6.0 * h)
        return w


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an interpolator by name.

    Args:
        method: One of "linear", "cubic_spline"

    Returns:
        Interpolator instance
    """
    method = method.lower().replace("-", "_").replace(" ", "_")

    if method in ("linear", "lin"):
        return LinearInterpolator()
    elif method in ("cubic_spline", "cubic", "spline"):
        return CubicSplineInterpolator()
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
]
