"""
Tests for the market data providers.
"""

import numpy as np
import pandas as pd
import pytest

from ratesanalytics.conventions import DayCount
from ratesanalytics.curves import Curve
from ratesanalytics.errors import ArgumentError
from ratesanalytics.fx import FxMatrix
from ratesanalytics.providers import (
    BlackSwaptionVolatilityProvider,
    IssuerProvider,
    MulticurveProvider,
)


class TestMulticurveProvider:

    def test_lookup(self, multicurve):
        assert multicurve.name("USD") == "USD-OIS"
        assert multicurve.forward_curve_name("CDI") == "BRL-CDI"
        assert set(multicurve.curves()) == {"USD-OIS", "USD-LIBOR3M", "BRL-DSC", "BRL-CDI"}

    def test_missing_curves(self, multicurve):
        with pytest.raises(ArgumentError):
            multicurve.discount_curve("JPY")
        with pytest.raises(ArgumentError):
            multicurve.forward_curve("EURIBOR6M")

    def test_forward_rates(self, multicurve):
        curve = multicurve.forward_curve("USD3M")
        ratio = curve.discount_factor(1.0) / curve.discount_factor(1.25)
        assert multicurve.forward_rate("USD3M", 1.0, 1.25, 0.25) == pytest.approx((ratio - 1) / 0.25)
        assert multicurve.annually_compounded_forward_rate("USD3M", 1.0, 1.25, 0.25) == pytest.approx(
            ratio ** 4 - 1
        )

    def test_with_curve_replaces_by_name(self, multicurve):
        bumped = multicurve.discount_curve("USD").bump_parallel(10.0)
        new = multicurve.with_curve(bumped)
        assert new.discount_curve("USD") is bumped
        assert new.forward_curve("USD3M") is multicurve.forward_curve("USD3M")
        assert multicurve.discount_curve("USD") is not bumped
        assert new.discount_factor("USD", 2.0) == pytest.approx(
            multicurve.discount_factor("USD", 2.0) * np.exp(-0.001 * 2.0)
        )

    def test_fx_matrix_attached(self, multicurve):
        fx = FxMatrix.builder().add("USD", "BRL", 5.0).build()
        provider = MulticurveProvider(multicurve.discount_curves, multicurve.forward_curves, fx)
        assert provider.fx_matrix.fx_rate("BRL", "USD") == pytest.approx(0.2)


class TestIssuerProvider:

    @pytest.fixture
    def issuer_provider(self, multicurve):
        ust = Curve.from_zero_rates("UST", [1.0, 10.0], [0.035, 0.04], currency="USD")
        return IssuerProvider(multicurve, {"UST": ust})

    def test_lookup(self, issuer_provider):
        assert issuer_provider.issuer_curve_name("UST") == "UST"
        assert issuer_provider.issuer_discount_factor("UST", 1.0) == pytest.approx(np.exp(-0.035))
        assert issuer_provider.name("USD") == "USD-OIS"
        assert "UST" in issuer_provider.curves()
        with pytest.raises(ArgumentError):
            issuer_provider.issuer_curve("BUND")

    def test_with_curve(self, issuer_provider):
        bumped = issuer_provider.issuer_curve("UST").bump_parallel(1.0)
        assert issuer_provider.with_curve(bumped).issuer_curve("UST") is bumped
        ois = issuer_provider.multicurve.discount_curve("USD").bump_parallel(1.0)
        assert issuer_provider.with_curve(ois).multicurve.discount_curve("USD") is ois

    def test_with_issuer_curve(self, issuer_provider):
        bund = Curve.from_zero_rates("BUND", [1.0], [0.02], currency="EUR")
        new = issuer_provider.with_issuer_curve("BUND", bund)
        assert new.issuer_curve_name("BUND") == "BUND"
        with pytest.raises(ArgumentError):
            issuer_provider.issuer_curve("BUND")


class TestBlackSwaptionVolatilityProvider:

    def test_grid_points(self, vol_surface):
        assert vol_surface.volatility(1.0, 5.0) == pytest.approx(0.25)
        assert vol_surface.volatility(2.0, 10.0) == pytest.approx(0.23)

    def test_bilinear(self, vol_surface):
        expected = 0.5 * (0.5 * 0.29 + 0.5 * 0.27) + 0.5 * (0.5 * 0.27 + 0.5 * 0.25)
        assert vol_surface.volatility(0.75, 3.5) == pytest.approx(expected)

    def test_flat_extrapolation(self, vol_surface):
        assert vol_surface.volatility(0.1, 0.5) == pytest.approx(0.30)
        assert vol_surface.volatility(10.0, 30.0) == pytest.approx(0.21)

    def test_shift_and_floor(self, vol_surface):
        assert vol_surface.with_volatility_shift(0.01).volatility(1.0, 5.0) == pytest.approx(0.26)
        assert vol_surface.with_volatility_shift(-1.0).volatility(1.0, 5.0) == 0.0

    def test_shape_checked(self, multicurve, generator):
        with pytest.raises(ArgumentError):
            BlackSwaptionVolatilityProvider(multicurve, [1.0, 2.0], [5.0], [[0.2, 0.2]], generator)
        with pytest.raises(ArgumentError):
            BlackSwaptionVolatilityProvider(multicurve, [2.0, 1.0], [5.0], [[0.2], [0.2]], generator)

    def test_flat(self, multicurve, generator):
        flat = BlackSwaptionVolatilityProvider.flat(multicurve, 0.2, generator)
        assert flat.volatility(0.3, 17.0) == pytest.approx(0.2)

    def test_from_dataframe(self, multicurve, generator):
        quotes = pd.DataFrame({
            "expiry": ["1Y", "1Y", "2Y", "2Y"],
            "tenor": ["5Y", "10Y", "5Y", "10Y"],
            "vol": [0.25, 0.24, 0.23, 0.22],
        })
        surface = BlackSwaptionVolatilityProvider.from_dataframe(quotes, multicurve, generator)
        np.testing.assert_allclose(surface.expiries, [1.0, 2.0])
        np.testing.assert_allclose(surface.tenors, [5.0, 10.0])
        assert surface.volatility(2.0, 5.0) == pytest.approx(0.23)
        assert surface.to_frame().shape == (2, 2)

    def test_from_dataframe_incomplete(self, multicurve, generator):
        quotes = pd.DataFrame({"expiry": ["1Y", "2Y"], "tenor": ["5Y", "10Y"], "vol": [0.25, 0.22]})
        with pytest.raises(ArgumentError):
            BlackSwaptionVolatilityProvider.from_dataframe(quotes, multicurve, generator)

    def test_generator_defaults(self, generator):
        assert generator.fixed_leg_day_count == DayCount.THIRTY_360
        assert generator.fixed_leg_period_months == 6
