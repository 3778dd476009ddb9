"""
Tests for dispatch on the instrument type tag.
"""

from datetime import date

import pandas as pd
import pytest

from conftest import make_ibor_swap, make_on_swap
from ratesanalytics.curves import Curve
from ratesanalytics.instruments import (
    FixedCouponBond,
    SwaptionCashFixedCompoundedON,
    SwaptionPhysicalFixedIbor,
)
from ratesanalytics.instruments.bonds import BillDefinition
from ratesanalytics.options.swaption import SWAPTION_CASH_ON_METHOD, SWAPTION_PHYSICAL_IBOR_METHOD
from ratesanalytics.pricers import dispatcher
from ratesanalytics.pricers.bonds import BILL_METHOD, BOND_METHOD
from ratesanalytics.pricers.swaps import SWAP_FIXED_COMPOUNDED_ON_METHOD, SWAP_FIXED_IBOR_METHOD
from ratesanalytics.providers import IssuerProvider

EXPIRY = 366 / 365.0


@pytest.fixture
def issuer_provider(multicurve):
    ust = Curve.from_zero_rates("UST", [0.5, 1.0, 5.0, 30.0], [0.033, 0.034, 0.038, 0.041], currency="USD")
    return IssuerProvider(multicurve, {"UST": ust})


@pytest.fixture
def bond():
    return FixedCouponBond.from_times(0.0, 0.045, 8, 2, 0.5, issuer="UST")


@pytest.fixture
def bill():
    return BillDefinition("USD", date(2024, 6, 14), 1_000_000.0, "UST").to_derivative(date(2024, 1, 15))


class TestPresentValue:

    def test_swaps(self, multicurve):
        ibor, on = make_ibor_swap(), make_on_swap()
        assert dispatcher.present_value(ibor, multicurve) == SWAP_FIXED_IBOR_METHOD.present_value(ibor, multicurve)
        assert dispatcher.present_value(on, multicurve) == SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value(on, multicurve)

    def test_swaption_wrapped(self, vol_surface):
        swaption = SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(), EXPIRY)
        pv = dispatcher.present_value(swaption, vol_surface)
        assert pv.get_amount("USD") == SWAPTION_PHYSICAL_IBOR_METHOD.present_value(swaption, vol_surface).amount

    def test_bond_and_bill(self, issuer_provider, bond, bill):
        assert dispatcher.present_value(bond, issuer_provider) == BOND_METHOD.present_value(bond, issuer_provider)
        assert dispatcher.present_value(bill, issuer_provider) == BILL_METHOD.present_value(bill, issuer_provider)

    def test_unknown_instrument(self, multicurve):
        with pytest.raises(NotImplementedError):
            dispatcher.present_value(object(), multicurve)


class TestSensitivities:

    def test_curve_sensitivity_matches_method(self, vol_surface):
        swaption = SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(), EXPIRY)
        assert (dispatcher.present_value_curve_sensitivity(swaption, vol_surface)
                == SWAPTION_PHYSICAL_IBOR_METHOD.present_value_curve_sensitivity(swaption, vol_surface))

    def test_black_sensitivity_swaptions_only(self, multicurve, vol_surface):
        swaption = SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(), EXPIRY)
        assert (dispatcher.present_value_black_sensitivity(swaption, vol_surface)
                == SWAPTION_PHYSICAL_IBOR_METHOD.present_value_black_sensitivity(swaption, vol_surface))
        with pytest.raises(NotImplementedError):
            dispatcher.present_value_black_sensitivity(make_ibor_swap(), multicurve)

    def test_cash_swaption_sensitivity_not_implemented(self, vol_surface):
        swaption = SwaptionCashFixedCompoundedON.from_swap(make_on_swap(), EXPIRY)
        with pytest.raises(NotImplementedError):
            dispatcher.present_value_curve_sensitivity(swaption, vol_surface)


class TestParRate:

    def test_swap_forward(self, multicurve):
        swap = make_ibor_swap()
        assert dispatcher.par_rate(swap, multicurve) == SWAP_FIXED_IBOR_METHOD.forward(swap, multicurve)

    def test_swaption_forward(self, vol_surface):
        swaption = SwaptionCashFixedCompoundedON.from_swap(make_on_swap(), EXPIRY)
        assert dispatcher.par_rate(swaption, vol_surface) == SWAPTION_CASH_ON_METHOD.forward(swaption, vol_surface)

    def test_bond_yield(self, issuer_provider, bond):
        assert dispatcher.par_rate(bond, issuer_provider) == pytest.approx(
            BOND_METHOD.yield_from_curves(bond, issuer_provider)
        )


class TestTradeOutputs:

    def test_price_trade_swaption(self, vol_surface):
        swaption = SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(), EXPIRY)
        output = dispatcher.price_trade(swaption, vol_surface)
        assert output.instrument_type == "SWAPTION_PHYSICAL_FIXED_IBOR"
        assert output.pv == SWAPTION_PHYSICAL_IBOR_METHOD.present_value(swaption, vol_surface).amount
        assert set(output.details) == {"forward", "implied_vol"}
        assert output.to_dict()["pv"] == output.pv

    def test_price_trade_bond(self, issuer_provider, bond):
        output = dispatcher.price_trade(bond, issuer_provider)
        assert output.details["dirty"] - output.details["clean"] == pytest.approx(bond.accrued_interest)
        assert output.details["modified_duration"] > 0

    def test_price_trade_bill(self, issuer_provider, bill):
        output = dispatcher.price_trade(bill, issuer_provider)
        assert output.instrument_type == "BILL"
        assert 0.0 < output.details["price"] < 1.0

    def test_risk_trade(self, vol_surface):
        swaption = SwaptionPhysicalFixedIbor.from_swap(make_ibor_swap(), EXPIRY)
        risk = dispatcher.risk_trade(swaption, vol_surface)
        assert isinstance(risk["curve_sensitivity"], pd.DataFrame)
        assert set(risk["curve_sensitivity"]["curve"]) == {"USD-OIS", "USD-LIBOR3M"}
        assert len(risk["black_sensitivity"]) == 1
        assert "unavailable" not in risk

    def test_risk_trade_names_unavailable_sensitivities(self, vol_surface):
        swaption = SwaptionCashFixedCompoundedON.from_swap(make_on_swap(), EXPIRY)
        risk = dispatcher.risk_trade(swaption, vol_surface)
        assert "curve_sensitivity" not in risk
        assert "black_sensitivity" not in risk
        assert set(risk["unavailable"]) == {"curve_sensitivity", "black_sensitivity"}
        assert all(reason for reason in risk["unavailable"].values())
