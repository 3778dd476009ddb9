"""
Tests for swap instruments and discounting methods.
"""

from dataclasses import replace
from datetime import date

import numpy as np
import pytest

from conftest import make_ibor_swap, make_on_swap
from ratesanalytics.errors import ArgumentError
from ratesanalytics.instruments import (
    Annuity,
    CouponFixed,
    PaymentFixed,
    SwapFixedIbor,
)
from ratesanalytics.pricers.swaps import (
    SWAP_FIXED_COMPOUNDED_ON_METHOD,
    SWAP_FIXED_IBOR_METHOD,
    annuity_present_value,
    cash_flow_equivalent,
)
from ratesanalytics.sensitivities import parameter_sensitivity


class TestSwapFixedIbor:
    """Tests for the fixed-vs-Ibor swap."""

    def test_schedule(self):
        swap = make_ibor_swap()
        assert len(swap.first_leg) == 10
        assert len(swap.second_leg) == 20
        assert swap.is_payer
        assert swap.fixed_rate == 0.04
        assert swap.notional == 1_000_000.0

    def test_payer_and_receiver_offset(self, multicurve):
        payer = SWAP_FIXED_IBOR_METHOD.present_value(make_ibor_swap(is_payer=True), multicurve)
        receiver = SWAP_FIXED_IBOR_METHOD.present_value(make_ibor_swap(is_payer=False), multicurve)
        np.testing.assert_allclose(payer.get_amount("USD"), -receiver.get_amount("USD"), atol=1e-8)

    def test_par_rate_prices_to_zero(self, multicurve):
        forward = SWAP_FIXED_IBOR_METHOD.forward(make_ibor_swap(), multicurve)
        assert 0.03 < forward < 0.06
        pv = SWAP_FIXED_IBOR_METHOD.present_value(make_ibor_swap(rate=forward), multicurve)
        assert abs(pv.get_amount("USD")) < 1e-6

    def test_pvbp_definition(self, multicurve):
        swap = make_ibor_swap()
        expected = sum(
            c.payment_year_fraction * abs(c.notional) * multicurve.discount_factor("USD", c.payment_time)
            for c in swap.first_leg
        )
        np.testing.assert_allclose(SWAP_FIXED_IBOR_METHOD.present_value_basis_point(swap, multicurve), expected)

    def test_coupon_equivalent_is_rate(self, multicurve):
        swap = make_ibor_swap()
        pvbp = SWAP_FIXED_IBOR_METHOD.present_value_basis_point(swap, multicurve)
        np.testing.assert_allclose(SWAP_FIXED_IBOR_METHOD.coupon_equivalent(swap, pvbp, multicurve), 0.04, rtol=1e-12)

    def test_curve_sensitivity_parallel(self, multicurve):
        swap = make_ibor_swap()
        sens = SWAP_FIXED_IBOR_METHOD.present_value_curve_sensitivity(swap, multicurve).get("USD")
        h = 0.01
        for name, curve in multicurve.curves().items():
            if curve.currency != "USD":
                continue
            up = SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve.with_curve(curve.bump_parallel(h)))
            down = SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve.with_curve(curve.bump_parallel(-h)))
            fd = (up.get_amount("USD") - down.get_amount("USD")) / (2 * h * 1e-4)
            np.testing.assert_allclose(sens.total(name), fd, rtol=1e-6)

    def test_curve_sensitivity_nodes(self, multicurve):
        swap = make_ibor_swap()
        sens = SWAP_FIXED_IBOR_METHOD.present_value_curve_sensitivity(swap, multicurve).get("USD")
        node_sens = parameter_sensitivity(sens, multicurve.curves())
        curve = multicurve.forward_curve("USD3M")
        h = 0.01
        for i in range(len(curve.node_times)):
            up = SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve.with_curve(curve.bump_node(i, h)))
            down = SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve.with_curve(curve.bump_node(i, -h)))
            fd = (up.get_amount("USD") - down.get_amount("USD")) / (2 * h * 1e-4)
            np.testing.assert_allclose(node_sens["USD-LIBOR3M"][i], fd, rtol=1e-5, atol=1e-3)

    def test_forward_curve_sensitivity(self, multicurve):
        swap = make_ibor_swap()
        sens = SWAP_FIXED_IBOR_METHOD.forward_curve_sensitivity(swap, multicurve)
        curve = multicurve.discount_curve("USD")
        h = 0.01
        up = SWAP_FIXED_IBOR_METHOD.forward(swap, multicurve.with_curve(curve.bump_parallel(h)))
        down = SWAP_FIXED_IBOR_METHOD.forward(swap, multicurve.with_curve(curve.bump_parallel(-h)))
        np.testing.assert_allclose(sens.total("USD-OIS"), (up - down) / (2 * h * 1e-4), rtol=1e-6)

    def test_legs_must_match_shape(self):
        fixed = Annuity.of([CouponFixed("USD", 1.0, 1.0, -1.0, 0.04)])
        with pytest.raises(ArgumentError):
            SwapFixedIbor(fixed, fixed)

    def test_mixed_currencies_rejected(self):
        with pytest.raises(ArgumentError):
            Annuity.of([PaymentFixed("USD", 1.0, 1.0), PaymentFixed("EUR", 2.0, 1.0)])


class TestCashFlowEquivalent:
    """The cash-flow equivalent reproduces the swap value."""

    def test_present_value_matches_swap(self, multicurve):
        swap = make_ibor_swap()
        cfe = cash_flow_equivalent(swap, multicurve)
        swap_pv = SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve).get_amount("USD")
        np.testing.assert_allclose(annuity_present_value(cfe, multicurve), swap_pv, rtol=1e-9)

    def test_flows_sorted_and_merged(self, multicurve):
        cfe = cash_flow_equivalent(make_ibor_swap(), multicurve)
        times = [p.payment_time for p in cfe]
        assert times == sorted(times)
        assert len(set(times)) == len(times)
        # Payer: receive the notional-like flow at start, pay notional plus coupon at the end
        assert cfe[0].amount > 0
        assert cfe[-1].amount < 0


class TestSwapFixedCompoundedON:
    """Tests for the fixed-compounded vs overnight-compounded swap."""

    def test_single_payment(self):
        swap = make_on_swap()
        assert len(swap.first_leg) == 1
        assert len(swap.second_leg) == 1
        assert swap.first_leg[0].payment_time == swap.second_leg[0].payment_time
        assert swap.is_payer

    def test_forward_prices_to_zero(self, multicurve):
        forward = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward(make_on_swap(), multicurve)
        assert 0.09 < forward < 0.13
        pv = SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value(make_on_swap(rate=forward), multicurve)
        assert abs(pv.get_amount("BRL")) < 1e-6

    def test_forward_modified_telescopes(self, multicurve):
        swap = make_on_swap()
        cpn = swap.second_leg[0]
        curve = multicurve.forward_curve("CDI")
        expected = (curve.discount_factor(cpn.fixing_period_start_times[0])
                    / curve.discount_factor(cpn.fixing_period_end_times[-1]) - 1.0)
        np.testing.assert_allclose(SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified(swap, multicurve), expected, rtol=1e-12)

    def test_strike_modified(self):
        assert SWAP_FIXED_COMPOUNDED_ON_METHOD.strike_modified(0.10, 2.0) == pytest.approx(0.21)

    def test_forward_modified_curve_sensitivity(self, multicurve):
        swap = make_on_swap()
        sens = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified_curve_sensitivity(swap, multicurve).get("BRL")
        curve = multicurve.forward_curve("CDI")
        h = 0.01
        up = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified(swap, multicurve.with_curve(curve.bump_parallel(h)))
        down = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified(swap, multicurve.with_curve(curve.bump_parallel(-h)))
        np.testing.assert_allclose(sens.total("BRL-CDI"), (up - down) / (2 * h * 1e-4), rtol=1e-6)

    def test_curve_sensitivity_parallel(self, multicurve):
        swap = make_on_swap()
        sens = SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value_curve_sensitivity(swap, multicurve).get("BRL")
        h = 0.01
        for name in ("BRL-DSC", "BRL-CDI"):
            curve = multicurve.curves()[name]
            up = SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value(swap, multicurve.with_curve(curve.bump_parallel(h)))
            down = SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value(swap, multicurve.with_curve(curve.bump_parallel(-h)))
            fd = (up.get_amount("BRL") - down.get_amount("BRL")) / (2 * h * 1e-4)
            np.testing.assert_allclose(sens.total(name), fd, rtol=1e-6)

    def test_pvbp_at_zero_forward(self, multicurve):
        swap = make_on_swap()
        cpn = swap.first_leg[0]
        expected = cpn.payment_year_fraction * abs(cpn.notional) * multicurve.discount_factor("BRL", cpn.payment_time)
        np.testing.assert_allclose(
            SWAP_FIXED_COMPOUNDED_ON_METHOD.present_value_basis_point(swap, multicurve, forward=0.0), expected
        )

    def test_annuity_cash(self):
        swap = make_on_swap(end=date(2026, 1, 15))
        delta = swap.first_leg[0].payment_year_fraction
        m = max(1, round(1.0 / delta))
        assert SWAP_FIXED_COMPOUNDED_ON_METHOD.annuity_cash(swap, 0.0) == pytest.approx(1_000_000.0 / m)
        f = 0.1
        np.testing.assert_allclose(
            SWAP_FIXED_COMPOUNDED_ON_METHOD.annuity_cash(swap, f),
            1_000_000.0 / f * (1 - (1 + f / m) ** -1),
        )

    def test_annuity_cash_rounds_half_periods_up(self):
        swap = make_on_swap(end=date(2026, 1, 15))
        coupon = replace(swap.first_leg[0], payment_year_fraction=0.4)
        short = replace(swap, first_leg=Annuity.of([coupon]))
        # 1 / 0.4 = 2.5 periods a year rounds to 3
        assert SWAP_FIXED_COMPOUNDED_ON_METHOD.annuity_cash(short, 0.0) == pytest.approx(1_000_000.0 / 3)
        f = 0.1
        np.testing.assert_allclose(
            SWAP_FIXED_COMPOUNDED_ON_METHOD.annuity_cash(short, f),
            1_000_000.0 / f * (1 - (1 + f / 3) ** -1),
        )
