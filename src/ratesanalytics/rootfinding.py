"""Root-finding utilities (bracket expansion followed by Brent's method)."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from scipy.optimize import brentq

from .config import PricingConfig, resolve_config
from .errors import RootFindingError

logger = logging.getLogger(__name__)

Func = Callable[[float], float]


@dataclass
class RootResult:
    root: float
    iterations: int
    converged: bool
    method: str


def find_bracket(
    func: Func,
    lower: float,
    upper: float,
    expansion: float = 1.6,
    max_iter: int = 50,
    lower_limit: Optional[float] = None,
    upper_limit: Optional[float] = None,
) -> Tuple[float, float]:
    """
    Widen [lower, upper] until func changes sign on it.

    Args:
        func: Function whose root is sought
        lower: Initial lower bound
        upper: Initial upper bound
        expansion: Growth factor applied to the bracket width
        max_iter: Maximum number of expansions
        lower_limit: Bounds never cross this value (exclusive)
        upper_limit: Bounds never cross this value (exclusive)

    Returns:
        Tuple (a, b) with func(a) * func(b) <= 0

    Raises:
        RootFindingError: If no sign change is found
    """
    a, b = float(lower), float(upper)
    f_a, f_b = func(a), func(b)
    for iteration in range(max_iter):
        if f_a * f_b <= 0.0:
            return a, b
        width = (b - a) * expansion
        logger.debug("Bracket iter %s: [%s, %s] f=(%s, %s)", iteration, a, b, f_a, f_b)
        if abs(f_a) < abs(f_b):
            a = a - width
            if lower_limit is not None and a <= lower_limit:
                a = 0.5 * (lower_limit + a + width)
            f_a = func(a)
        else:
            b = b + width
            if upper_limit is not None and b >= upper_limit:
                b = 0.5 * (upper_limit + b - width)
            f_b = func(b)
    if f_a * f_b <= 0.0:
        return a, b
    logger.warning("Failed to bracket root after %s expansions: [%s, %s]", max_iter, a, b)
    raise RootFindingError(f"Failed to bracket the root after {max_iter} expansions")


def find_root(
    func: Func,
    bracket: Tuple[float, float],
    config: Optional[PricingConfig] = None,
    lower_limit: Optional[float] = None,
    upper_limit: Optional[float] = None,
) -> RootResult:
    """
    Solve func(x) = 0 with Brent's method on an expanded bracket.

    Raises:
        RootFindingError: If the root cannot be bracketed or Brent does not converge
    """
    config = resolve_config(config)
    a, b = find_bracket(
        func,
        bracket[0],
        bracket[1],
        expansion=config.bracket_expansion,
        max_iter=config.max_bracket_expansions,
        lower_limit=lower_limit,
        upper_limit=upper_limit,
    )
    if a == b:
        return RootResult(a, 0, True, "bracket")
    try:
        root, info = brentq(
            func,
            a,
            b,
            xtol=config.root_tolerance,
            maxiter=config.max_iterations,
            full_output=True,
            disp=False,
        )
    except ValueError as exc:
        raise RootFindingError(f"Brent solver failed on [{a}, {b}]: {exc}") from exc
    if not info.converged:
        logger.warning("Brent did not converge after %s iterations (%s)", info.iterations, info.flag)
        raise RootFindingError(
            f"Brent solver did not converge after {info.iterations} iterations: {info.flag}"
        )
    logger.debug("Brent converged to %s in %s iterations", root, info.iterations)
    return RootResult(float(root), info.iterations, True, "brent")


__all__ = [
    "RootResult",
    "find_bracket",
    "find_root",
]
