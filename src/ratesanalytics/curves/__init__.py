"""
Curves package - interpolated zero-rate curves.

Provides:
- Curve: Discount factors, zero rates and forwards from interpolated nodes
- Interpolators: Linear and natural cubic spline on zero rates
"""

from .curve import Curve, CurveNode, create_flat_curve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    CubicSplineInterpolator,
    create_interpolator
)

__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
    "Interpolator",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "create_interpolator",
]
