"""
Tests for the G2++ model and swaption approximation.
"""

import math

import numpy as np
import pytest
from scipy.optimize import brentq
from scipy.stats import norm

from conftest import make_ibor_swap
from ratesanalytics.errors import ArgumentError
from ratesanalytics.instruments import SwaptionPhysicalFixedIbor
from ratesanalytics.options.g2pp import (
    SWAPTION_G2PP_APPROXIMATION_METHOD,
    G2ppModel,
    G2ppParameters,
)
from ratesanalytics.pricers.swaps import SWAP_FIXED_IBOR_METHOD, cash_flow_equivalent
from ratesanalytics.providers import G2ppProvider

EXPIRY = 366 / 365.0


@pytest.fixture
def parameters():
    return G2ppParameters(
        mean_reversion=(0.01, 0.30),
        volatility=((0.010, 0.011, 0.012), (0.004, 0.004, 0.005)),
        volatility_time=(0.0, 1.0, 5.0),
        correlation=-0.40,
    )


@pytest.fixture
def g2_provider(multicurve, parameters):
    return G2ppProvider(multicurve, parameters)


def g2_swaption(is_payer=True, is_long=True, rate=0.04):
    return SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(rate=rate, is_payer=is_payer), EXPIRY, is_long)


def exact_payer_price(swaption, g2_provider, n_nodes=64):
    """
    Payer swaption price by integration over both factors.

    At expiry the cash-flow equivalent is worth
    sum_i cfa_i p0_i exp(-H_i.Z - tau_i^2 / 2) with Z ~ N(0, Sigma). The
    second factor is integrated by Gauss-Hermite quadrature; conditional on
    it, the payoff is integrated in closed form past the exercise boundary.
    """
    multicurve, parameters = g2_provider.multicurve, g2_provider.parameters
    cfe = cash_flow_equivalent(swaption.underlying_swap, multicurve)
    times = np.array([p.payment_time for p in cfe])
    cfa = -np.array([p.amount for p in cfe])
    df = np.array([multicurve.discount_factor("USD", t) for t in times])
    c = cfa[1:] * df[1:] / df[0]
    strike = -cfa[0]

    h = G2ppModel.volatility_maturity_part(parameters, times[0], times[1:])
    gamma = G2ppModel.gamma(parameters, 0.0, swaption.time_to_expiry)
    rho = parameters.correlation
    s0, s1 = math.sqrt(gamma[0, 0]), math.sqrt(gamma[1, 1])
    r = rho * gamma[0, 1] / (s0 * s1)
    a = h[0] * s0 + h[1] * s1 * r
    b = h[1] * s1 * math.sqrt(1.0 - r * r)
    tau2 = a * a + b * b

    nodes, weights = np.polynomial.hermite.hermgauss(n_nodes)
    total = 0.0
    for x, w in zip(nodes, weights):
        e1 = math.sqrt(2.0) * x
        scale = c * np.exp(-b * e1 - tau2 / 2.0)
        boundary = brentq(lambda e0: strike - np.sum(scale * np.exp(-a * e0)), -60.0, 60.0, xtol=1e-14)
        conditional = (strike * norm.cdf(-boundary)
                       - np.sum(scale * np.exp(a * a / 2.0) * norm.cdf(-boundary - a)))
        total += w * conditional
    return df[0] * total / math.sqrt(math.pi)


class TestG2ppParameters:

    def test_constant(self):
        params = G2ppParameters.constant((0.05, 0.2), (0.01, 0.005), 0.3)
        assert params.volatility == ((0.01,), (0.005,))
        assert params.volatility_time == (0.0,)

    @pytest.mark.parametrize("kwargs", [
        dict(mean_reversion=(0.0, 0.2)),
        dict(correlation=1.0),
        dict(correlation=-1.0),
        dict(volatility_time=(0.5,)),
        dict(volatility=((0.01, 0.02), (0.01,))),
        dict(volatility=((-0.01,), (0.01,))),
    ])
    def test_invalid(self, kwargs):
        base = dict(mean_reversion=(0.05, 0.2), volatility=((0.01,), (0.01,)), volatility_time=(0.0,), correlation=0.0)
        base.update(kwargs)
        with pytest.raises(ArgumentError):
            G2ppParameters(**base)

    def test_times_must_increase(self):
        with pytest.raises(ArgumentError):
            G2ppParameters((0.05, 0.2), ((0.01, 0.01), (0.01, 0.01)), (0.0, 0.0), 0.0)


class TestG2ppModel:

    def test_volatility_maturity_part(self, parameters):
        h = G2ppModel.volatility_maturity_part(parameters, 1.0, [2.0, 5.0])
        assert h.shape == (2, 2)
        a = parameters.mean_reversion[1]
        assert h[1, 1] == pytest.approx((math.exp(-a) - math.exp(-5 * a)) / a)

    def test_gamma_constant_closed_form(self):
        a0, a1, s0, s1 = 0.05, 0.2, 0.01, 0.006
        params = G2ppParameters.constant((a0, a1), (s0, s1), 0.0)
        gamma = G2ppModel.gamma(params, 0.0, 2.0)
        assert gamma[0, 0] == pytest.approx(s0 * s0 * (math.exp(2 * a0 * 2.0) - 1) / (2 * a0))
        assert gamma[0, 1] == pytest.approx(s0 * s1 * (math.exp((a0 + a1) * 2.0) - 1) / (a0 + a1))
        assert gamma[1, 0] == gamma[0, 1]

    def test_gamma_piecewise_matches_constant(self):
        constant = G2ppParameters.constant((0.05, 0.2), (0.01, 0.006), 0.0)
        split = G2ppParameters((0.05, 0.2), ((0.01, 0.01), (0.006, 0.006)), (0.0, 0.7), 0.0)
        np.testing.assert_allclose(G2ppModel.gamma(split, 0.0, 3.0), G2ppModel.gamma(constant, 0.0, 3.0), rtol=1e-12)

    def test_gamma_last_piece_extends(self, parameters):
        """The last volatility piece applies beyond the last volatility time."""
        beyond = G2ppModel.gamma(parameters, 6.0, 8.0)
        a0, s0 = parameters.mean_reversion[0], parameters.volatility[0][-1]
        assert beyond[0, 0] == pytest.approx(s0 * s0 * (math.exp(2 * a0 * 8.0) - math.exp(2 * a0 * 6.0)) / (2 * a0))

    def test_gamma_additive(self, parameters):
        np.testing.assert_allclose(
            G2ppModel.gamma(parameters, 0.0, 2.0) + G2ppModel.gamma(parameters, 2.0, 7.0),
            G2ppModel.gamma(parameters, 0.0, 7.0),
            rtol=1e-12,
        )


class TestG2ppApproximation:

    def test_payer_receiver_parity(self, g2_provider, multicurve):
        payer = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(True), g2_provider)
        receiver = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(False), g2_provider)
        swap_pv = SWAP_FIXED_IBOR_METHOD.present_value(make_ibor_swap(), multicurve).get_amount("USD")
        assert payer.currency == "USD"
        np.testing.assert_allclose(payer.amount - receiver.amount, swap_pv, rtol=1e-8, atol=1e-6)

    def test_long_short(self, g2_provider):
        long = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(is_long=True), g2_provider).amount
        short = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(is_long=False), g2_provider).amount
        assert long > 0
        assert long == pytest.approx(-short)

    def test_increases_with_volatility(self, multicurve):
        low = G2ppProvider(multicurve, G2ppParameters.constant((0.01, 0.3), (0.005, 0.002), -0.4))
        high = G2ppProvider(multicurve, G2ppParameters.constant((0.01, 0.3), (0.010, 0.004), -0.4))
        swaption = g2_swaption()
        assert (SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(swaption, high).amount
                > SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(swaption, low).amount)

    def test_none_arguments(self, g2_provider):
        with pytest.raises(ArgumentError):
            SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(None, g2_provider)
        with pytest.raises(ArgumentError):
            SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(), None)

    @pytest.mark.parametrize("rate", [0.03, 0.04, 0.05])
    def test_matches_integrated_price(self, g2_provider, rate):
        """The approximation agrees with the exact two-factor value to 0.2%."""
        swaption = g2_swaption(rate=rate)
        approx = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(swaption, g2_provider).amount
        exact = exact_payer_price(swaption, g2_provider)
        assert exact > 0
        np.testing.assert_allclose(approx, exact, rtol=2e-3)

    def test_approximation_in_plausible_range(self, g2_provider, multicurve):
        """An at-the-money-ish payer is worth less than the annuity times the forward."""
        swap = make_ibor_swap()
        annuity = SWAP_FIXED_IBOR_METHOD.present_value_basis_point(swap, multicurve)
        forward = SWAP_FIXED_IBOR_METHOD.forward(swap, multicurve)
        pv = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(g2_swaption(), g2_provider).amount
        assert 0 < pv < annuity * forward
