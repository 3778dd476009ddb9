"""
G2++ two-factor Gaussian short-rate model.

    r(t) = phi(t) + x1(t) + x2(t)
    dx_k = -a_k x_k dt + sigma_k(t) dW_k,   d<W_0, W_1> = rho dt

The volatilities are piecewise constant on the intervals given by
volatility_time (the last piece extends to infinity).

The swaption method is the efficient approximation of Henrard (2010),
"Swaptions in Libor Market Model with local volatility", Wilmott Journal:
the swap is replaced by its cash-flow equivalent and the exercise boundary
is linearised, which reduces the price to a single Black formula.
"""

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..errors import ArgumentError, not_none
from ..instruments.swaptions import SwaptionPhysicalFixedIbor
from ..pricers.swaps import cash_flow_equivalent
from ..providers import G2ppProvider
from ..sensitivities import CurrencyAmount
from .black import black_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class G2ppParameters:
    """
    G2++ parameters with piecewise constant volatilities.

    Attributes:
        mean_reversion: (a0, a1), both strictly positive
        volatility: Two volatility sequences, one value per volatility_time piece
        volatility_time: Start of each volatility piece, beginning with 0
        correlation: Factor correlation, strictly inside (-1, 1)
    """
    mean_reversion: Tuple[float, float]
    volatility: Tuple[Tuple[float, ...], Tuple[float, ...]]
    volatility_time: Tuple[float, ...]
    correlation: float

    def __post_init__(self):
        not_none(self.mean_reversion, "mean_reversion")
        not_none(self.volatility, "volatility")
        not_none(self.volatility_time, "volatility_time")
        if len(self.mean_reversion) != 2 or len(self.volatility) != 2:
            raise ArgumentError("G2++ needs two mean reversions and two volatility sequences")
        if min(self.mean_reversion) <= 0:
            raise ArgumentError(f"mean_reversion must be positive, got {self.mean_reversion}")
        if not -1.0 < self.correlation < 1.0:
            raise ArgumentError(f"correlation must be in (-1, 1), got {self.correlation}")
        times = tuple(float(t) for t in self.volatility_time)
        if not times or times[0] != 0.0:
            raise ArgumentError("volatility_time must start at 0")
        if any(t1 <= t0 for t0, t1 in zip(times[:-1], times[1:])):
            raise ArgumentError("volatility_time must be strictly increasing")
        vols = tuple(tuple(float(s) for s in v) for v in self.volatility)
        for v in vols:
            if len(v) != len(times):
                raise ArgumentError("Each volatility sequence needs one value per volatility_time")
            if min(v) < 0:
                raise ArgumentError("volatility must be non-negative")
        object.__setattr__(self, "mean_reversion", tuple(float(a) for a in self.mean_reversion))
        object.__setattr__(self, "volatility", vols)
        object.__setattr__(self, "volatility_time", times)

    @classmethod
    def constant(cls, mean_reversion: Tuple[float, float], volatility: Tuple[float, float],
                 correlation: float) -> "G2ppParameters":
        """Parameters with constant volatilities."""
        return cls(mean_reversion, ((volatility[0],), (volatility[1],)), (0.0,), correlation)


class G2ppModel:
    """Closed-form building blocks of the G2++ model."""

    @staticmethod
    def volatility_maturity_part(parameters: G2ppParameters, u: float, v: Sequence[float]) -> np.ndarray:
        """
        H[k][i] = (exp(-a_k u) - exp(-a_k v_i)) / a_k

        Args:
            parameters: Model parameters
            u: Reference time
            v: Cash flow times

        Returns:
            Array of shape (2, len(v))
        """
        a = np.asarray(parameters.mean_reversion)[:, None]
        v = np.asarray(v, dtype=float)[None, :]
        return (np.exp(-a * u) - np.exp(-a * v)) / a

    @staticmethod
    def gamma(parameters: G2ppParameters, theta0: float, theta1: float) -> np.ndarray:
        """
        Gamma_kl = integral over [theta0, theta1] of sigma_k sigma_l exp((a_k + a_l) s) ds

        Returns:
            2x2 symmetric matrix
        """
        a = parameters.mean_reversion
        sigma = parameters.volatility
        bounds = list(parameters.volatility_time) + [math.inf]
        result = np.zeros((2, 2))
        for j in range(len(parameters.volatility_time)):
            lo = max(bounds[j], theta0)
            hi = min(bounds[j + 1], theta1)
            if hi <= lo:
                continue
            for k in range(2):
                for l in range(k, 2):
                    a_sum = a[k] + a[l]
                    result[k, l] += sigma[k][j] * sigma[l][j] * (math.exp(a_sum * hi) - math.exp(a_sum * lo)) / a_sum
        result[1, 0] = result[0, 1]
        return result


class SwaptionPhysicalFixedIborG2ppApproximationMethod:
    """
    Approximated present value of physical fixed-vs-Ibor swaptions in G2++.

    Steps:
    1. Cash-flow equivalent c_i at t_i; cfa_i = -sign(c_0) c_i
    2. p0_i = DF(t_i) / DF(t_0), strike k = -cfa_0, forward b0 = sum_{i>=1} cfa_i p0_i
    3. tau_i^2 = Gamma00 H0i^2 + Gamma11 H1i^2 + 2 rho Gamma01 H0i H1i, with H_i = H(t_0, t_i)
    4. x_bar = sum_{i>=0} cfa_i p0_i (1 - tau_i^2 / 2) / sum_{i>=0} cfa_i p0_i tau_i
       and pK_i = p0_i (1 - x_bar tau_i - tau_i^2 / 2)
    5. beta0 = sum_{i>=1} cfa_i p0_i H_i / b0, betaK = sum_{i>=1} cfa_i pK_i H_i / k,
       sigma_bar from the average of beta0 and betaK
    6. PV = sign * Black(b0, DF(t_0), sigma_bar, k, 1, not is_call)
    """

    def present_value(self, swaption: SwaptionPhysicalFixedIbor, g2_provider: G2ppProvider) -> CurrencyAmount:
        """
        Present value of the swaption.

        Args:
            swaption: Physical fixed-vs-Ibor swaption
            g2_provider: Curves and G2++ parameters

        Returns:
            PV in the swaption currency
        """
        not_none(swaption, "swaption")
        not_none(g2_provider, "g2_provider")
        multicurve = g2_provider.multicurve
        parameters = g2_provider.parameters
        ccy = swaption.currency

        cfe = cash_flow_equivalent(swaption.underlying_swap, multicurve)
        times = np.array([p.payment_time for p in cfe])
        amounts = np.array([p.amount for p in cfe])
        cfa = -np.sign(amounts[0]) * amounts

        df = np.array([multicurve.discount_factor(ccy, t) for t in times])
        p0 = df / df[0]
        cp = cfa * p0
        strike = -cfa[0]
        b0 = float(cp[1:].sum())

        h = G2ppModel.volatility_maturity_part(parameters, times[0], times)
        gamma = G2ppModel.gamma(parameters, 0.0, swaption.time_to_expiry)
        rho = parameters.correlation
        tau2 = gamma[0, 0] * h[0] ** 2 + gamma[1, 1] * h[1] ** 2 + 2.0 * rho * gamma[0, 1] * h[0] * h[1]
        tau = np.sqrt(tau2)

        beta0 = h[:, 1:] @ cp[1:] / b0

        # Boundary over every flow, the strike flow included (tau_0 = 0)
        x_bar = float(np.dot(cp, 1.0 - tau2 / 2.0) / np.dot(cp, tau))
        pk = p0 * (1.0 - x_bar * tau - tau2 / 2.0)
        beta_k = h[:, 1:] @ (cfa[1:] * pk[1:]) / strike

        beta_bar = (beta0 + beta_k) / 2.0
        sigma_bar2 = (gamma[0, 0] * beta_bar[0] ** 2 + gamma[1, 1] * beta_bar[1] ** 2
                      + 2.0 * rho * gamma[0, 1] * beta_bar[0] * beta_bar[1])
        sigma_bar = math.sqrt(max(sigma_bar2, 0.0))
        logger.debug("G2++ approximation: b0=%s k=%s x_bar=%s sigma_bar=%s", b0, strike, x_bar, sigma_bar)

        pv = black_price(b0, df[0], sigma_bar, strike, 1.0, not swaption.is_call)
        return CurrencyAmount(ccy, pv * swaption.sign)


SWAPTION_G2PP_APPROXIMATION_METHOD = SwaptionPhysicalFixedIborG2ppApproximationMethod()


__all__ = [
    "G2ppParameters",
    "G2ppModel",
    "SwaptionPhysicalFixedIborG2ppApproximationMethod",
    "SWAPTION_G2PP_APPROXIMATION_METHOD",
]
