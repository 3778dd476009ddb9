"""
Swap discounting methods.

Prices swaps leg by leg against a MulticurveProvider:
- Coupon present values and their curve sensitivities
- SwapFixedIborDiscountingMethod: PVBP (annuity), forward (par) rate, coupon
  equivalent and their curve sensitivities
- SwapFixedCompoundedONCompoundedDiscountingMethod: modified forward,
  forward, modified strike, PVBP at a forward level, cash annuity
- cash_flow_equivalent: deterministic flows with the same value and curve
  dependency as a fixed-vs-Ibor swap (used by the G2++ approximation)

Pricing formulas:
    PV_fixed   = sum(N_i * K * delta_i * DF(t_i))
    PV_ibor    = sum(N_i * delta_i * (F_i + spread) * DF(t_i)),
                 F_i = (P_f(s_i) / P_f(e_i) - 1) / delta_fix_i
    PV_on      = DF(t_p) * (N_acc * prod_j (1 + f_j)^delta_j - N)

Curve sensitivities are point sensitivities to continuously compounded zero
rates: dDF(t)/dz(t) = -t * DF(t).
"""

import math
from typing import Dict, List, Optional, Tuple

from ..conventions import Calendar, DayCount, day_count_fraction
from ..errors import ArgumentError, not_none
from ..instruments.payments import (
    Annuity,
    CouponFixed,
    CouponFixedAccruedCompounding,
    CouponIbor,
    CouponONCompounded,
    PaymentFixed
)
from ..instruments.swaps import Swap, SwapFixedCompoundedON, SwapFixedIbor
from ..providers import MulticurveProvider
from ..sensitivities import (
    MulticurveSensitivity,
    MultipleCurrencyAmount,
    MultipleCurrencyMulticurveSensitivity
)


def coupon_present_value(coupon, multicurve: MulticurveProvider) -> float:
    """
    Present value of a single payment or coupon.

    Args:
        coupon: PaymentFixed, CouponFixed, CouponIbor, CouponFixedAccruedCompounding or CouponONCompounded
        multicurve: Curves

    Returns:
        PV in the coupon currency
    """
    df = multicurve.discount_factor(coupon.currency, coupon.payment_time)

    if isinstance(coupon, (PaymentFixed, CouponFixed, CouponFixedAccruedCompounding)):
        return coupon.amount * df

    elif isinstance(coupon, CouponIbor):
        forward = multicurve.forward_rate(
            coupon.index_name,
            coupon.fixing_period_start_time,
            coupon.fixing_period_end_time,
            coupon.fixing_accrual_factor,
        )
        return coupon.notional * coupon.payment_year_fraction * (forward + coupon.spread) * df

    elif isinstance(coupon, CouponONCompounded):
        ratio = _compounded_ratio(coupon, multicurve)
        return df * (coupon.notional_accrued * ratio - coupon.notional)

    raise NotImplementedError(f"No discounting method for {type(coupon).__name__}")


def coupon_present_value_curve_sensitivity(coupon, multicurve: MulticurveProvider) -> MulticurveSensitivity:
    """Point sensitivities of coupon_present_value to the discount and forward curves."""
    t_p = coupon.payment_time
    df = multicurve.discount_factor(coupon.currency, t_p)
    pv = coupon_present_value(coupon, multicurve)
    result = MulticurveSensitivity.of(multicurve.name(coupon.currency), [(t_p, -t_p * pv)])

    if isinstance(coupon, (PaymentFixed, CouponFixed, CouponFixedAccruedCompounding)):
        return result

    elif isinstance(coupon, CouponIbor):
        curve = multicurve.forward_curve(coupon.index_name)
        s, e = coupon.fixing_period_start_time, coupon.fixing_period_end_time
        ratio = curve.discount_factor(s) / curve.discount_factor(e)
        forward_bar = coupon.notional * coupon.payment_year_fraction * df / coupon.fixing_accrual_factor
        forward_sens = MulticurveSensitivity.of(curve.name, [
            (s, -s * ratio * forward_bar),
            (e, e * ratio * forward_bar),
        ])
        return result.plus(forward_sens)

    elif isinstance(coupon, CouponONCompounded):
        curve = multicurve.forward_curve(coupon.index_name)
        ratio_bar = df * coupon.notional_accrued * _compounded_ratio(coupon, multicurve)
        points = []
        for s, e in zip(coupon.fixing_period_start_times, coupon.fixing_period_end_times):
            points.append((s, -s * ratio_bar))
            points.append((e, e * ratio_bar))
        return result.plus(MulticurveSensitivity.of(curve.name, points))

    raise NotImplementedError(f"No discounting method for {type(coupon).__name__}")


def _compounded_ratio(coupon: CouponONCompounded, multicurve: MulticurveProvider) -> float:
    ratio = 1.0
    for s, e, delta in zip(
        coupon.fixing_period_start_times,
        coupon.fixing_period_end_times,
        coupon.fixing_period_accrual_factors,
    ):
        f = multicurve.annually_compounded_forward_rate(coupon.index_name, s, e, delta)
        ratio *= (1.0 + f) ** delta
    return ratio


def annuity_present_value(annuity: Annuity, multicurve: MulticurveProvider) -> float:
    return sum(coupon_present_value(c, multicurve) for c in annuity)


def annuity_present_value_curve_sensitivity(annuity: Annuity, multicurve: MulticurveProvider) -> MulticurveSensitivity:
    result = MulticurveSensitivity()
    for c in annuity:
        result = result.plus(coupon_present_value_curve_sensitivity(c, multicurve))
    return result.cleaned()


def swap_present_value(swap: Swap, multicurve: MulticurveProvider) -> MultipleCurrencyAmount:
    """Present value of both legs."""
    not_none(swap, "swap")
    not_none(multicurve, "multicurve")
    pv = annuity_present_value(swap.first_leg, multicurve) + annuity_present_value(swap.second_leg, multicurve)
    return MultipleCurrencyAmount.of(swap.currency, pv)


def swap_present_value_curve_sensitivity(swap: Swap, multicurve: MulticurveProvider) -> MultipleCurrencyMulticurveSensitivity:
    not_none(swap, "swap")
    not_none(multicurve, "multicurve")
    sens = annuity_present_value_curve_sensitivity(swap.first_leg, multicurve).plus(
        annuity_present_value_curve_sensitivity(swap.second_leg, multicurve)
    )
    return MultipleCurrencyMulticurveSensitivity.of(swap.currency, sens.cleaned())


class SwapFixedIborDiscountingMethod:
    """
    Discounting method for fixed-vs-Ibor swaps.

    The optional day_count argument recomputes the fixed leg accrual
    fractions from the coupon accrual dates (the convention of the swap
    generator a volatility surface is quoted on).
    """

    def _fixed_accrual(self, coupon: CouponFixed, day_count: Optional[DayCount], calendar: Optional[Calendar]) -> float:
        if day_count is None or coupon.accrual_start_date is None or coupon.accrual_end_date is None:
            return coupon.payment_year_fraction
        holidays = set(calendar.holidays) if calendar is not None else None
        return day_count_fraction(coupon.accrual_start_date, coupon.accrual_end_date, day_count, holidays)

    def present_value(self, swap: SwapFixedIbor, multicurve: MulticurveProvider) -> MultipleCurrencyAmount:
        return swap_present_value(swap, multicurve)

    def present_value_curve_sensitivity(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        return swap_present_value_curve_sensitivity(swap, multicurve)

    def present_value_basis_point(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider,
        day_count: Optional[DayCount] = None,
        calendar: Optional[Calendar] = None
    ) -> float:
        """
        Present value of one unit of fixed rate on the fixed leg (annuity).

        Args:
            swap: Swap
            multicurve: Curves
            day_count: Fixed leg day count override
            calendar: Calendar for business-day day counts

        Returns:
            sum(delta_i * |N_i| * DF(t_i))
        """
        not_none(swap, "swap")
        not_none(multicurve, "multicurve")
        pvbp = 0.0
        for cpn in swap.first_leg:
            pvbp += (self._fixed_accrual(cpn, day_count, calendar) * abs(cpn.notional)
                     * multicurve.discount_factor(cpn.currency, cpn.payment_time))
        return pvbp

    def present_value_basis_point_curve_sensitivity(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider,
        day_count: Optional[DayCount] = None,
        calendar: Optional[Calendar] = None
    ) -> MulticurveSensitivity:
        not_none(swap, "swap")
        not_none(multicurve, "multicurve")
        points = []
        for cpn in swap.first_leg:
            t = cpn.payment_time
            df = multicurve.discount_factor(cpn.currency, t)
            points.append((t, -t * self._fixed_accrual(cpn, day_count, calendar) * abs(cpn.notional) * df))
        return MulticurveSensitivity.of(multicurve.name(swap.currency), points).cleaned()

    def forward(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider,
        day_count: Optional[DayCount] = None,
        calendar: Optional[Calendar] = None
    ) -> float:
        """
        Forward swap rate: signed floating leg PV divided by the PVBP.

        Without a day count override this is the par rate of the swap.
        """
        pvbp = self.present_value_basis_point(swap, multicurve, day_count, calendar)
        if pvbp == 0:
            raise ArgumentError("Swap has zero present value basis point")
        return self._float_sign(swap) * annuity_present_value(swap.second_leg, multicurve) / pvbp

    def forward_curve_sensitivity(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider,
        day_count: Optional[DayCount] = None,
        calendar: Optional[Calendar] = None
    ) -> MulticurveSensitivity:
        """Quotient rule: dF = dPV_float / pvbp - F / pvbp * dPVBP."""
        pvbp = self.present_value_basis_point(swap, multicurve, day_count, calendar)
        forward = self.forward(swap, multicurve, day_count, calendar)
        float_sens = annuity_present_value_curve_sensitivity(swap.second_leg, multicurve)
        pvbp_sens = self.present_value_basis_point_curve_sensitivity(swap, multicurve, day_count, calendar)
        return float_sens.multiplied_by(self._float_sign(swap) / pvbp).plus(
            pvbp_sens.multiplied_by(-forward / pvbp)
        ).cleaned()

    def parallel_shift_derivatives(
        self,
        swap: SwapFixedIbor,
        multicurve: MulticurveProvider,
        day_count: Optional[DayCount] = None,
        calendar: Optional[Calendar] = None
    ) -> Tuple[float, float, float, float, float, float]:
        """
        PVBP and forward with their first two derivatives to a parallel shift s
        of every curve (each DF(t) becomes DF(t) * exp(-s * t)).

        An Ibor coupon N * delta_p * ((R * exp(s * (e - s_f)) - 1) / delta_f + spread)
        * DF(t_p) * exp(-s * t_p), with R = P_f(s_f) / P_f(e), is a sum of two
        exponentials in s.

        Returns:
            (pvbp, dpvbp/ds, d2pvbp/ds2, forward, dforward/ds, d2forward/ds2)
        """
        not_none(swap, "swap")
        not_none(multicurve, "multicurve")
        pvbp = d_pvbp = d2_pvbp = 0.0
        for cpn in swap.first_leg:
            t = cpn.payment_time
            value = (self._fixed_accrual(cpn, day_count, calendar) * abs(cpn.notional)
                     * multicurve.discount_factor(cpn.currency, t))
            pvbp += value
            d_pvbp -= t * value
            d2_pvbp += t * t * value
        if pvbp == 0:
            raise ArgumentError("Swap has zero present value basis point")

        flt = d_flt = d2_flt = 0.0
        for cpn in swap.second_leg:
            t = cpn.payment_time
            curve = multicurve.forward_curve(cpn.index_name)
            s, e = cpn.fixing_period_start_time, cpn.fixing_period_end_time
            scale = cpn.notional * cpn.payment_year_fraction * multicurve.discount_factor(cpn.currency, t)
            projected = scale * curve.discount_factor(s) / curve.discount_factor(e) / cpn.fixing_accrual_factor
            fixed = scale * (cpn.spread - 1.0 / cpn.fixing_accrual_factor)
            rate = (e - s) - t
            flt += projected + fixed
            d_flt += projected * rate - fixed * t
            d2_flt += projected * rate * rate + fixed * t * t
        sign = self._float_sign(swap)
        flt, d_flt, d2_flt = sign * flt, sign * d_flt, sign * d2_flt

        forward = flt / pvbp
        d_forward = (d_flt - forward * d_pvbp) / pvbp
        d2_forward = (d2_flt - 2.0 * d_forward * d_pvbp - forward * d2_pvbp) / pvbp
        return pvbp, d_pvbp, d2_pvbp, forward, d_forward, d2_forward

    def coupon_equivalent(self, swap: SwapFixedIbor, pvbp: float, multicurve: MulticurveProvider) -> float:
        """Constant rate giving the fixed leg PV on an annuity of pvbp."""
        return abs(annuity_present_value(swap.first_leg, multicurve)) / pvbp

    @staticmethod
    def _float_sign(swap: SwapFixedIbor) -> float:
        return 1.0 if swap.second_leg[0].notional >= 0 else -1.0


class SwapFixedCompoundedONCompoundedDiscountingMethod:
    """
    Discounting method for fixed-compounded vs overnight-compounded swaps.

    The compounded legs are linear in the modified rates
    F_bar = prod_j (1 + f_j)^delta_j - 1 and K_bar = (1 + K)^delta - 1.
    """

    def present_value(self, swap: SwapFixedCompoundedON, multicurve: MulticurveProvider) -> MultipleCurrencyAmount:
        return swap_present_value(swap, multicurve)

    def present_value_curve_sensitivity(
        self,
        swap: SwapFixedCompoundedON,
        multicurve: MulticurveProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        return swap_present_value_curve_sensitivity(swap, multicurve)

    def forward_modified(self, swap: SwapFixedCompoundedON, multicurve: MulticurveProvider) -> float:
        """prod_j (1 + f_j)^delta_j - 1 over the first overnight coupon."""
        not_none(swap, "swap")
        not_none(multicurve, "multicurve")
        return _compounded_ratio(swap.second_leg[0], multicurve) - 1.0

    def forward_modified_curve_sensitivity(
        self,
        swap: SwapFixedCompoundedON,
        multicurve: MulticurveProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        coupon = swap.second_leg[0]
        ratio = _compounded_ratio(coupon, multicurve)
        points = []
        for s, e in zip(coupon.fixing_period_start_times, coupon.fixing_period_end_times):
            points.append((s, -s * ratio))
            points.append((e, e * ratio))
        sens = MulticurveSensitivity.of(multicurve.forward_curve_name(coupon.index_name), points).cleaned()
        return MultipleCurrencyMulticurveSensitivity.of(swap.currency, sens)

    def forward(self, swap: SwapFixedCompoundedON, multicurve: MulticurveProvider) -> float:
        """Annually compounded rate equivalent to the modified forward over the fixed period."""
        delta = swap.first_leg[0].payment_year_fraction
        return (1.0 + self.forward_modified(swap, multicurve)) ** (1.0 / delta) - 1.0

    @staticmethod
    def strike_modified(strike: float, delta: float) -> float:
        return (1.0 + strike) ** delta - 1.0

    def present_value_basis_point(
        self,
        swap: SwapFixedCompoundedON,
        multicurve: MulticurveProvider,
        forward: Optional[float] = None
    ) -> float:
        """
        Value of the compounded fixed leg per unit of rate, at a forward level.

        Returns:
            |N| * DF(t_p) * ((1 + F)^delta - 1) / F  (delta * |N| * DF(t_p) when F = 0)
        """
        not_none(swap, "swap")
        not_none(multicurve, "multicurve")
        if forward is None:
            forward = self.forward(swap, multicurve)
        pvbp = 0.0
        for cpn in swap.first_leg:
            df = multicurve.discount_factor(cpn.currency, cpn.payment_time)
            delta = cpn.payment_year_fraction
            if abs(forward) < 1e-12:
                factor = delta
            else:
                factor = ((1.0 + forward) ** delta - 1.0) / forward
            pvbp += abs(cpn.notional) * df * factor
        return pvbp

    def annuity_cash(self, swap: SwapFixedCompoundedON, forward: float) -> float:
        """
        Cash settlement annuity at a forward level.

        Returns:
            |N| / F * (1 - (1 + F/m)^(-n)), with m periods per year and n periods
            (n / m * |N| when F = 0)
        """
        not_none(swap, "swap")
        first = swap.first_leg[0]
        # Half periods round up (a 0.4 year coupon is 3 a year)
        m = max(1, int(math.floor(1.0 / first.payment_year_fraction + 0.5)))
        n = len(swap.first_leg)
        notional = abs(first.notional)
        if abs(forward) < 1e-12:
            return n / m * notional
        return notional / forward * (1.0 - (1.0 + forward / m) ** (-n))


def cash_flow_equivalent(swap: SwapFixedIbor, multicurve: MulticurveProvider) -> Annuity:
    """
    Deterministic cash flows equivalent to a fixed-vs-Ibor swap.

    Fixed coupons map to their amount at payment. An Ibor coupon maps to
    beta * N * delta_p / delta_f at the fixing period start and
    -N * delta_p / delta_f at payment, with
    beta = (1 + delta_f * F) * P_d(t_e) / P_d(t_s). Flows at the same time
    are merged.

    Returns:
        Annuity of PaymentFixed sorted by time
    """
    not_none(swap, "swap")
    not_none(multicurve, "multicurve")
    ccy = swap.currency
    flows: Dict[float, float] = {}

    def _add(t: float, amount: float) -> None:
        flows[t] = flows.get(t, 0.0) + amount

    for cpn in swap.first_leg:
        _add(cpn.payment_time, cpn.amount)

    for cpn in swap.second_leg:
        s, e = cpn.fixing_period_start_time, cpn.fixing_period_end_time
        forward = multicurve.forward_rate(cpn.index_name, s, e, cpn.fixing_accrual_factor)
        beta = ((1.0 + cpn.fixing_accrual_factor * forward)
                * multicurve.discount_factor(ccy, e) / multicurve.discount_factor(ccy, s))
        ratio = cpn.notional * cpn.payment_year_fraction / cpn.fixing_accrual_factor
        _add(s, beta * ratio)
        _add(cpn.payment_time, -ratio)
        if cpn.spread != 0:
            _add(cpn.payment_time, cpn.notional * cpn.payment_year_fraction * cpn.spread)

    payments: List[PaymentFixed] = [PaymentFixed(ccy, t, flows[t]) for t in sorted(flows)]
    return Annuity.of(payments)


SWAP_FIXED_IBOR_METHOD = SwapFixedIborDiscountingMethod()
SWAP_FIXED_COMPOUNDED_ON_METHOD = SwapFixedCompoundedONCompoundedDiscountingMethod()


__all__ = [
    "coupon_present_value",
    "coupon_present_value_curve_sensitivity",
    "annuity_present_value",
    "annuity_present_value_curve_sensitivity",
    "swap_present_value",
    "swap_present_value_curve_sensitivity",
    "SwapFixedIborDiscountingMethod",
    "SwapFixedCompoundedONCompoundedDiscountingMethod",
    "cash_flow_equivalent",
    "SWAP_FIXED_IBOR_METHOD",
    "SWAP_FIXED_COMPOUNDED_ON_METHOD",
]
