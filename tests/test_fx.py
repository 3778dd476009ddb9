"""
Tests for the FX matrix and its builder.
"""

import pytest

from ratesanalytics.errors import FxMatrixError
from ratesanalytics.fx import FxMatrix, FxMatrixBuilder
from ratesanalytics.sensitivities import MultipleCurrencyAmount


@pytest.fixture
def fx_matrix():
    return (
        FxMatrix.builder()
        .add("EUR", "USD", 1.10)
        .add("USD", "BRL", 5.00)
        .add("GBP", "EUR", 1.15)
        .build()
    )


class TestFxMatrix:

    def test_reference_currency(self, fx_matrix):
        assert fx_matrix.reference_currency == "EUR"
        assert set(fx_matrix.currencies) == {"EUR", "USD", "BRL", "GBP"}
        assert fx_matrix.contains("BRL")
        assert not fx_matrix.contains("JPY")

    def test_direct_rates(self, fx_matrix):
        assert fx_matrix.fx_rate("EUR", "USD") == pytest.approx(1.10)
        assert fx_matrix.fx_rate("USD", "BRL") == pytest.approx(5.00)
        assert fx_matrix.fx_rate("GBP", "EUR") == pytest.approx(1.15)

    def test_inverse_and_cross(self, fx_matrix):
        assert fx_matrix.fx_rate("USD", "EUR") == pytest.approx(1 / 1.10)
        assert fx_matrix.fx_rate("EUR", "BRL") == pytest.approx(5.50)
        assert fx_matrix.fx_rate("GBP", "BRL") == pytest.approx(1.15 * 1.10 * 5.00)
        assert fx_matrix.fx_rate("BRL", "BRL") == 1.0

    def test_triangle_consistency(self, fx_matrix):
        for a in fx_matrix.currencies:
            for b in fx_matrix.currencies:
                for c in fx_matrix.currencies:
                    assert fx_matrix.fx_rate(a, b) * fx_matrix.fx_rate(b, c) == pytest.approx(fx_matrix.fx_rate(a, c))

    def test_unknown_currency(self, fx_matrix):
        with pytest.raises(FxMatrixError):
            fx_matrix.fx_rate("EUR", "JPY")

    def test_convert(self, fx_matrix):
        amount = MultipleCurrencyAmount.of_pairs([("USD", 110.0), ("EUR", 10.0)])
        assert fx_matrix.convert(amount, "EUR") == pytest.approx(110.0)


class TestFxMatrixBuilder:

    def test_empty(self):
        with pytest.raises(FxMatrixError):
            FxMatrixBuilder().build()

    def test_same_currency(self):
        with pytest.raises(FxMatrixError):
            FxMatrixBuilder().add("USD", "USD", 1.0)

    @pytest.mark.parametrize("rate", [0.0, -1.2, None])
    def test_non_positive_rate(self, rate):
        with pytest.raises(FxMatrixError):
            FxMatrixBuilder().add("EUR", "USD", rate)

    def test_duplicate_pair(self):
        builder = FxMatrixBuilder().add("EUR", "USD", 1.1)
        with pytest.raises(FxMatrixError):
            builder.add("USD", "EUR", 0.9)

    def test_over_determined(self):
        builder = FxMatrixBuilder().add("EUR", "USD", 1.1).add("EUR", "GBP", 0.85).add("USD", "GBP", 0.77)
        with pytest.raises(FxMatrixError):
            builder.build()

    def test_disconnected(self):
        builder = FxMatrixBuilder().add("EUR", "USD", 1.1).add("BRL", "JPY", 30.0)
        with pytest.raises(FxMatrixError):
            builder.build()
