"""
Exception types and argument checks shared by the pricing methods.

Error kinds:
- ArgumentError: a required argument is missing or invalid
- RootFindingError: a numerical solver failed to bracket or converge
- FxMatrixError: an FX matrix invariant was violated at build time

Operations whose closed form has not been derived raise the builtin
NotImplementedError.
"""

from typing import Any, Iterable, TypeVar

T = TypeVar("T")


class ArgumentError(ValueError):
    """Raised when a required argument is None or outside its domain."""


class RootFindingError(RuntimeError):
    """Raised when root-finding fails to bracket or converge."""


class FxMatrixError(ValueError):
    """Raised when an FX matrix is built with inconsistent data."""


def not_none(value: T, name: str) -> T:
    """Return value, raising ArgumentError if it is None."""
    if value is None:
        raise ArgumentError(f"{name} must not be None")
    return value


def not_empty(values: Iterable[Any], name: str) -> Iterable[Any]:
    """Return values, raising ArgumentError if None or empty."""
    if values is None or len(values) == 0:
        raise ArgumentError(f"{name} must not be empty")
    return values


def positive(value: float, name: str) -> float:
    if value is None or value <= 0:
        raise ArgumentError(f"{name} must be positive, got {value}")
    return value


__all__ = [
    "ArgumentError",
    "RootFindingError",
    "FxMatrixError",
    "not_none",
    "not_empty",
    "positive",
]
