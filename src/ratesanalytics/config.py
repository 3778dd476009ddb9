"""
Numerical configuration for the pricing methods.

PricingConfig holds the root-finder tolerances and brackets used by the
yield and z-spread solvers. Methods accept an optional config and fall back
to PricingConfig.default().
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class PricingConfig:
    """
    Container for solver settings.

    Attributes:
        root_tolerance: Absolute tolerance on the root (xtol)
        max_iterations: Iteration budget for the solver
        yield_bracket: Initial bracket for yield solves
        z_spread_bracket: Initial bracket for z-spread solves
        bracket_expansion: Growth factor when searching for a bracket
        max_bracket_expansions: Number of bracket expansions before failing
    """
    root_tolerance: float = 1e-12
    max_iterations: int = 100
    yield_bracket: Tuple[float, float] = (-0.05, 0.20)
    z_spread_bracket: Tuple[float, float] = (-0.05, 0.10)
    bracket_expansion: float = 1.6
    max_bracket_expansions: int = 50

    @classmethod
    def default(cls) -> "PricingConfig":
        """Standard settings."""
        return cls()

    @classmethod
    def high_precision(cls) -> "PricingConfig":
        """Tighter tolerance and a larger iteration budget."""
        return cls(root_tolerance=1e-15, max_iterations=500)


def resolve_config(config: Optional[PricingConfig]) -> PricingConfig:
    return config if config is not None else PricingConfig.default()


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stream handler to the package logger (for scripts)."""
    logger = logging.getLogger("ratesanalytics")
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)


__all__ = [
    "PricingConfig",
    "resolve_config",
    "configure_logging",
]
