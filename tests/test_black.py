"""
Tests for the Black price function and formula repository.
"""

import numpy as np
import pytest

from ratesanalytics.options.black import (
    BlackFormulaRepository,
    black_price,
    black_price_adjoint,
)


F = 0.04
K = 0.035
T = 2.0
VOL = 0.25
NUMERAIRE = 4.5


class TestBlackPrice:
    """Tests for the numeraire-scaled Black price."""

    def test_put_call_parity(self):
        """C - P = N * (F - K)."""
        call = black_price(F, NUMERAIRE, VOL, K, T, True)
        put = black_price(F, NUMERAIRE, VOL, K, T, False)
        np.testing.assert_allclose(call - put, NUMERAIRE * (F - K), rtol=1e-12)

    def test_numeraire_scaling(self):
        """Price is linear in the numeraire."""
        unit = black_price(F, 1.0, VOL, K, T)
        np.testing.assert_allclose(black_price(F, NUMERAIRE, VOL, K, T), NUMERAIRE * unit, rtol=1e-14)

    @pytest.mark.parametrize("is_call", [True, False])
    def test_zero_volatility_is_intrinsic(self, is_call):
        omega = 1.0 if is_call else -1.0
        expected = NUMERAIRE * max(omega * (F - K), 0.0)
        assert black_price(F, NUMERAIRE, 0.0, K, T, is_call) == pytest.approx(expected, abs=1e-15)

    def test_small_volatility_converges_to_intrinsic(self):
        price = black_price(F, NUMERAIRE, 1e-8, K, T, True)
        np.testing.assert_allclose(price, NUMERAIRE * (F - K), rtol=1e-10)

    def test_zero_expiry_is_intrinsic(self):
        assert black_price(F, 1.0, VOL, K, 0.0, False) == 0.0
        assert black_price(F, 1.0, VOL, K, 0.0, True) == pytest.approx(F - K)

    def test_zero_strike_call(self):
        """A call struck at zero is worth the forward."""
        assert black_price(F, NUMERAIRE, VOL, 0.0, T, True) == pytest.approx(NUMERAIRE * F)


class TestBlackAdjoint:
    """Analytic derivatives against finite differences."""

    @pytest.mark.parametrize("is_call", [True, False])
    def test_forward_derivative(self, is_call):
        price, forward_bar, _ = black_price_adjoint(F, NUMERAIRE, VOL, K, T, is_call)
        h = 1e-7
        up = black_price(F + h, NUMERAIRE, VOL, K, T, is_call)
        down = black_price(F - h, NUMERAIRE, VOL, K, T, is_call)
        assert price == pytest.approx(black_price(F, NUMERAIRE, VOL, K, T, is_call))
        np.testing.assert_allclose(forward_bar, (up - down) / (2 * h), rtol=1e-6)

    @pytest.mark.parametrize("is_call", [True, False])
    def test_volatility_derivative(self, is_call):
        _, _, vol_bar = black_price_adjoint(F, NUMERAIRE, VOL, K, T, is_call)
        h = 1e-6
        up = black_price(F, NUMERAIRE, VOL + h, K, T, is_call)
        down = black_price(F, NUMERAIRE, VOL - h, K, T, is_call)
        np.testing.assert_allclose(vol_bar, (up - down) / (2 * h), rtol=1e-6)

    def test_degenerate_derivatives(self):
        _, forward_bar, vol_bar = black_price_adjoint(F, NUMERAIRE, 0.0, K, T, True)
        assert forward_bar == NUMERAIRE
        assert vol_bar == 0.0
        _, forward_bar, _ = black_price_adjoint(F, NUMERAIRE, 0.0, K, T, False)
        assert forward_bar == 0.0


class TestBlackFormulaRepository:
    """Tests for the per-unit Greeks."""

    def test_delta_call_put(self):
        call = BlackFormulaRepository.delta(F, K, T, VOL, True)
        put = BlackFormulaRepository.delta(F, K, T, VOL, False)
        np.testing.assert_allclose(call - put, 1.0, rtol=1e-12)
        assert 0 < call < 1

    def test_gamma_fd(self):
        h = 1e-6
        up = BlackFormulaRepository.delta(F + h, K, T, VOL)
        down = BlackFormulaRepository.delta(F - h, K, T, VOL)
        np.testing.assert_allclose(BlackFormulaRepository.gamma(F, K, T, VOL), (up - down) / (2 * h), rtol=1e-5)

    def test_vega_positive(self):
        assert BlackFormulaRepository.vega(F, K, T, VOL) > 0

    def test_driftless_theta_fd(self):
        """Driftless theta is minus the derivative of the price with respect to expiry."""
        h = 1e-6
        up = BlackFormulaRepository.price(F, K, T + h, VOL)
        down = BlackFormulaRepository.price(F, K, T - h, VOL)
        np.testing.assert_allclose(
            BlackFormulaRepository.driftless_theta(F, K, T, VOL), -(up - down) / (2 * h), rtol=1e-5
        )

    def test_theta_without_rate_is_driftless(self):
        assert BlackFormulaRepository.theta(F, K, T, VOL, True, 0.0) == pytest.approx(
            BlackFormulaRepository.driftless_theta(F, K, T, VOL)
        )

    def test_theta_with_rate(self):
        r = 0.03
        df = np.exp(-r * T)
        expected = r * df * BlackFormulaRepository.price(F, K, T, VOL) + df * BlackFormulaRepository.driftless_theta(F, K, T, VOL)
        np.testing.assert_allclose(BlackFormulaRepository.theta(F, K, T, VOL, True, r), expected, rtol=1e-12)

    @pytest.mark.parametrize("is_call", [True, False])
    def test_implied_volatility_round_trip(self, is_call):
        price = BlackFormulaRepository.price(F, K, T, VOL, is_call)
        implied = BlackFormulaRepository.implied_volatility(price, F, K, T, is_call)
        np.testing.assert_allclose(implied, VOL, rtol=1e-8)

    def test_implied_volatility_expired(self):
        with pytest.raises(ValueError):
            BlackFormulaRepository.implied_volatility(0.01, F, K, 0.0)
