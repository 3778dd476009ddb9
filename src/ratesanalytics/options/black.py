"""
Black'76 price function and formula repository.

Implements:
- black_price / black_price_adjoint: numeraire-scaled Black price with its
  analytic derivatives with respect to forward and volatility
- BlackFormulaRepository: per-unit Black price and Greeks (delta, gamma,
  vega, theta, driftless theta) plus an implied volatility solver

Conventions:
    omega = +1 for a call (payer), -1 for a put (receiver).
    Zero volatility, zero expiry or a non-positive strike/forward reduce
    to the intrinsic value N * max(omega * (F - K), 0).
"""

from typing import Tuple
import numpy as np
from scipy.stats import norm


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf

SMALL = 1e-13


def _omega(is_call: bool) -> float:
    return 1.0 if is_call else -1.0


def _is_degenerate(forward: float, strike: float, time_to_expiry: float, volatility: float) -> bool:
    return (
        time_to_expiry <= 0
        or volatility * np.sqrt(max(time_to_expiry, 0.0)) < SMALL
        or forward <= 0
        or strike <= 0
    )


def _d1_d2(forward: float, strike: float, time_to_expiry: float, volatility: float) -> Tuple[float, float]:
    sigma_root_t = volatility * np.sqrt(time_to_expiry)
    d1 = np.log(forward / strike) / sigma_root_t + 0.5 * sigma_root_t
    return d1, d1 - sigma_root_t


def black_price(
    forward: float,
    numeraire: float,
    volatility: float,
    strike: float,
    time_to_expiry: float,
    is_call: bool = True
) -> float:
    """
    Black'76 option price scaled by a numeraire.

    Args:
        forward: Forward rate F
        numeraire: Numeraire (annuity, discount factor times notional, ...)
        volatility: Black (lognormal) volatility
        strike: Strike K
        time_to_expiry: Time to expiry in years
        is_call: True for call (payer), False for put (receiver)

    Returns:
        N * Black(F, K, sigma, T)
    """
    return black_price_adjoint(forward, numeraire, volatility, strike, time_to_expiry, is_call)[0]


def black_price_adjoint(
    forward: float,
    numeraire: float,
    volatility: float,
    strike: float,
    time_to_expiry: float,
    is_call: bool = True
) -> Tuple[float, float, float]:
    """
    Black'76 price with its first derivatives.

    Returns:
        Tuple (price, dprice/dforward, dprice/dvolatility)
    """
    omega = _omega(is_call)

    if _is_degenerate(forward, strike, time_to_expiry, volatility):
        x = omega * (forward - strike)
        if x > 0:
            return numeraire * x, numeraire * omega, 0.0
        return 0.0, 0.0, 0.0

    sqrt_t = np.sqrt(time_to_expiry)
    d1, d2 = _d1_d2(forward, strike, time_to_expiry, volatility)
    n_d1 = N(omega * d1)
    n_d2 = N(omega * d2)

    price = numeraire * omega * (forward * n_d1 - strike * n_d2)
    forward_bar = numeraire * omega * n_d1
    volatility_bar = numeraire * forward * n(d1) * sqrt_t
    return float(price), float(forward_bar), float(volatility_bar)


class BlackFormulaRepository:
    """
    Per-unit-numeraire Black formula and Greeks.

    All methods take (forward, strike, time_to_expiry, volatility) in that order.
    """

    @staticmethod
    def price(forward: float, strike: float, time_to_expiry: float, volatility: float,
              is_call: bool = True) -> float:
        return black_price(forward, 1.0, volatility, strike, time_to_expiry, is_call)

    @staticmethod
    def delta(forward: float, strike: float, time_to_expiry: float, volatility: float,
              is_call: bool = True) -> float:
        """dPrice/dForward: N(d1) for a call, N(d1) - 1 for a put."""
        return black_price_adjoint(forward, 1.0, volatility, strike, time_to_expiry, is_call)[1]

    @staticmethod
    def gamma(forward: float, strike: float, time_to_expiry: float, volatility: float) -> float:
        """Second derivative with respect to the forward (same for calls and puts)."""
        if _is_degenerate(forward, strike, time_to_expiry, volatility):
            return 0.0
        d1, _ = _d1_d2(forward, strike, time_to_expiry, volatility)
        return float(n(d1) / (forward * volatility * np.sqrt(time_to_expiry)))

    @staticmethod
    def vega(forward: float, strike: float, time_to_expiry: float, volatility: float) -> float:
        return black_price_adjoint(forward, 1.0, volatility, strike, time_to_expiry, True)[2]

    @staticmethod
    def driftless_theta(forward: float, strike: float, time_to_expiry: float, volatility: float) -> float:
        """
        Minus the derivative of the undiscounted price with respect to expiry.

        Returns:
            -F * n(d1) * sigma / (2 sqrt(T))
        """
        if _is_degenerate(forward, strike, time_to_expiry, volatility):
            return 0.0
        d1, _ = _d1_d2(forward, strike, time_to_expiry, volatility)
        return float(-forward * n(d1) * volatility / (2 * np.sqrt(time_to_expiry)))

    @staticmethod
    def theta(forward: float, strike: float, time_to_expiry: float, volatility: float,
              is_call: bool = True, interest_rate: float = 0.0) -> float:
        """
        Time decay of the discounted price exp(-rT) * Black(F, K, sigma, T).

        Args:
            forward: Forward rate
            strike: Strike
            time_to_expiry: Time to expiry
            volatility: Black volatility
            is_call: True for call, False for put
            interest_rate: Continuously compounded discount rate r

        Returns:
            r * V - exp(-rT) * F * n(d1) * sigma / (2 sqrt(T))
        """
        df = np.exp(-interest_rate * time_to_expiry)
        undiscounted = BlackFormulaRepository.price(forward, strike, time_to_expiry, volatility, is_call)
        return float(
            interest_rate * df * undiscounted
            + df * BlackFormulaRepository.driftless_theta(forward, strike, time_to_expiry, volatility)
        )

    @staticmethod
    def implied_volatility(
        price: float,
        forward: float,
        strike: float,
        time_to_expiry: float,
        is_call: bool = True,
        tol: float = 1e-12,
        max_iter: int = 100
    ) -> float:
        """
        Compute implied Black volatility from a per-unit option price.

        Uses Newton-Raphson iteration.

        Args:
            price: Option price per unit numeraire
            forward: Forward rate
            strike: Strike
            time_to_expiry: Time to expiry
            is_call: True for call, False for put
            tol: Convergence tolerance on the price
            max_iter: Maximum iterations

        Returns:
            Implied Black volatility
        """
        if time_to_expiry <= 0:
            raise ValueError("Cannot compute implied vol for expired option")
        if forward <= 0 or strike <= 0:
            raise ValueError("Forward and strike must be positive")

        intrinsic = max(_omega(is_call) * (forward - strike), 0.0)
        if price <= intrinsic:
            return 0.0

        # Brenner-Subrahmanyam initial guess
        sigma = max(np.sqrt(2 * np.pi / time_to_expiry) * price / forward, 0.01)

        for _ in range(max_iter):
            p, _, vega = black_price_adjoint(forward, 1.0, sigma, strike, time_to_expiry, is_call)
            diff = p - price
            if abs(diff) < tol or abs(vega) < 1e-15:
                break
            sigma = max(sigma - diff / vega, 1e-10)

        return float(sigma)


__all__ = [
    "black_price",
    "black_price_adjoint",
    "BlackFormulaRepository",
]
