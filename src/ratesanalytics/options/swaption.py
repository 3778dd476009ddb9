"""
Swaption Black methods.

A swaption is an option to enter into an interest rate swap.
- Payer swaption: right to pay fixed, receive floating (call on the rate)
- Receiver swaption: right to receive fixed, pay floating (put on the rate)

Pricing:
    V_swaption = sign * Numeraire * Black(F, K, sigma, T)

where, per shape:
    - Physical Ibor: Numeraire = PVBP (fixed leg day count of the surface
      generator), F = forward swap rate, K = coupon equivalent
    - Physical overnight compounded: Numeraire = DF(t_pay) * |N|,
      F = modified forward, K = (1 + strike)^delta - 1
    - Cash overnight compounded: Numeraire = DF(t_settle) * cash annuity(F),
      F = forward swap rate, K = strike
    - sigma = surface volatility at (expiry, tenor)
    - sign = +1 long, -1 short

The Black adjoint (price, dprice/dF, dprice/dsigma) drives the curve
sensitivities and vega. Cash-settled curve sensitivity and vega are not
derived and raise NotImplementedError.
"""

from ..errors import not_none
from ..instruments.swaptions import (
    SwaptionCashFixedCompoundedON,
    SwaptionPhysicalFixedCompoundedON,
    SwaptionPhysicalFixedIbor
)
from ..pricers.swaps import SWAP_FIXED_COMPOUNDED_ON_METHOD, SWAP_FIXED_IBOR_METHOD
from ..providers import BlackSwaptionVolatilityProvider
from ..sensitivities import (
    CurrencyAmount,
    MulticurveSensitivity,
    MultipleCurrencyMulticurveSensitivity,
    PresentValueBlackSwaptionSensitivity
)
from .black import BlackFormulaRepository, black_price, black_price_adjoint


def _check(swaption, market: BlackSwaptionVolatilityProvider) -> None:
    not_none(swaption, "swaption")
    not_none(market, "market")


class SwaptionPhysicalFixedIborBlackMethod:
    """
    Black method for physically settled swaptions on fixed-vs-Ibor swaps.

    The annuity is computed with the fixed leg day count of the volatility
    surface's swap generator; the strike is the coupon equivalent on that
    annuity. The curve dependency of the coupon equivalent is ignored in the
    curve sensitivity.
    """

    def _inputs(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider):
        _check(swaption, market)
        swap = swaption.underlying_swap
        generator = market.generator
        pvbp = SWAP_FIXED_IBOR_METHOD.present_value_basis_point(
            swap, market.multicurve, generator.fixed_leg_day_count, generator.calendar
        )
        forward = SWAP_FIXED_IBOR_METHOD.forward(
            swap, market.multicurve, generator.fixed_leg_day_count, generator.calendar
        )
        strike = SWAP_FIXED_IBOR_METHOD.coupon_equivalent(swap, pvbp, market.multicurve)
        volatility = market.volatility(swaption.time_to_expiry, swaption.maturity_time)
        return pvbp, forward, strike, volatility

    def present_value(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        """
        Present value of the swaption.

        Args:
            swaption: Swaption
            market: Volatility surface with its curves

        Returns:
            PV in the swaption currency
        """
        pvbp, forward, strike, volatility = self._inputs(swaption, market)
        pv = black_price(forward, pvbp, volatility, strike, swaption.time_to_expiry, swaption.is_call)
        return CurrencyAmount(swaption.currency, pv * swaption.sign)

    def forward(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        return self._inputs(swaption, market)[1]

    def implied_volatility(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        _check(swaption, market)
        return market.volatility(swaption.time_to_expiry, swaption.maturity_time)

    def present_value_curve_sensitivity(
        self,
        swaption: SwaptionPhysicalFixedIbor,
        market: BlackSwaptionVolatilityProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        """sign * (dPVBP * price + dF * PVBP * dprice/dF) with a unit-numeraire price."""
        pvbp, forward, strike, volatility = self._inputs(swaption, market)
        swap = swaption.underlying_swap
        generator = market.generator
        price, forward_bar, _ = black_price_adjoint(
            forward, 1.0, volatility, strike, swaption.time_to_expiry, swaption.is_call
        )
        pvbp_dr = SWAP_FIXED_IBOR_METHOD.present_value_basis_point_curve_sensitivity(
            swap, market.multicurve, generator.fixed_leg_day_count, generator.calendar
        )
        forward_dr = SWAP_FIXED_IBOR_METHOD.forward_curve_sensitivity(
            swap, market.multicurve, generator.fixed_leg_day_count, generator.calendar
        )
        sens = pvbp_dr.multiplied_by(price).plus(forward_dr.multiplied_by(pvbp * forward_bar))
        return MultipleCurrencyMulticurveSensitivity.of(
            swaption.currency, sens.multiplied_by(swaption.sign).cleaned()
        )

    def present_value_black_sensitivity(
        self,
        swaption: SwaptionPhysicalFixedIbor,
        market: BlackSwaptionVolatilityProvider
    ) -> PresentValueBlackSwaptionSensitivity:
        """Vega, keyed by the (expiry, tenor) point of the surface."""
        pvbp, forward, strike, volatility = self._inputs(swaption, market)
        _, _, volatility_bar = black_price_adjoint(
            forward, 1.0, volatility, strike, swaption.time_to_expiry, swaption.is_call
        )
        return PresentValueBlackSwaptionSensitivity.of(
            swaption.time_to_expiry,
            swaption.maturity_time,
            swaption.sign * pvbp * volatility_bar,
            market.generator,
        )

    def present_value_second_order_curve_sensitivity(
        self,
        swaption: SwaptionPhysicalFixedIbor,
        market: BlackSwaptionVolatilityProvider
    ) -> CurrencyAmount:
        """
        Second derivative of the present value to a parallel shift of every curve.

        With PV = sign * A * P(F), A the annuity and P the unit-numeraire Black
        price at the coupon-equivalent strike (held fixed, as in the first order
        sensitivity):

            PV'' = sign * (A'' P + 2 A' F' dP/dF + A (F'' dP/dF + F'^2 d2P/dF2))

        Args:
            swaption: Swaption
            market: Volatility surface with its curves

        Returns:
            d2PV/ds2 in the swaption currency, s a continuously compounded shift
        """
        _, _, strike, volatility = self._inputs(swaption, market)
        generator = market.generator
        pvbp, d_pvbp, d2_pvbp, forward, d_forward, d2_forward = SWAP_FIXED_IBOR_METHOD.parallel_shift_derivatives(
            swaption.underlying_swap, market.multicurve, generator.fixed_leg_day_count, generator.calendar
        )
        expiry = swaption.time_to_expiry
        price = BlackFormulaRepository.price(forward, strike, expiry, volatility, swaption.is_call)
        delta = BlackFormulaRepository.delta(forward, strike, expiry, volatility, swaption.is_call)
        gamma = BlackFormulaRepository.gamma(forward, strike, expiry, volatility)
        second = (d2_pvbp * price + 2.0 * d_pvbp * d_forward * delta
                  + pvbp * (d2_forward * delta + d_forward * d_forward * gamma))
        return CurrencyAmount(swaption.currency, second * swaption.sign)

    def forward_delta_theoretical(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.delta(
            forward, strike, swaption.time_to_expiry, volatility, swaption.is_call
        ) * swaption.sign

    def forward_gamma_theoretical(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.gamma(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def forward_vega_theoretical(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.vega(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def driftless_theta_theoretical(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.driftless_theta(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def forward_theta_theoretical(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> float:
        """Driftless theta scaled by the annuity."""
        pvbp, forward, strike, volatility = self._inputs(swaption, market)
        return pvbp * BlackFormulaRepository.driftless_theta(
            forward, strike, swaption.time_to_expiry, volatility
        ) * swaption.sign

    def delta(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        _, forward, strike, volatility = self._inputs(swaption, market)
        bs_delta = BlackFormulaRepository.delta(forward, strike, swaption.time_to_expiry, volatility, swaption.is_call)
        return CurrencyAmount(swaption.currency, bs_delta * forward * swaption.sign)

    def gamma(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        _, forward, strike, volatility = self._inputs(swaption, market)
        bs_gamma = BlackFormulaRepository.gamma(forward, strike, swaption.time_to_expiry, volatility)
        return CurrencyAmount(swaption.currency, bs_gamma * forward * forward * swaption.sign)

    def theta(self, swaption: SwaptionPhysicalFixedIbor, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        return CurrencyAmount(swaption.currency, self.forward_theta_theoretical(swaption, market))


class SwaptionPhysicalFixedCompoundedONCompoundedBlackMethod:
    """
    Black method for physically settled swaptions on fixed-compounded vs
    overnight-compounded swaps.

    With K_bar = (1 + K)^delta - 1 the payoff is DF(t_pay) * |N| * (F_bar - K_bar)^+.
    """

    def _inputs(self, swaption: SwaptionPhysicalFixedCompoundedON, market: BlackSwaptionVolatilityProvider):
        _check(swaption, market)
        swap = swaption.underlying_swap
        cpn = swap.first_leg[0]
        numeraire = market.multicurve.discount_factor(cpn.currency, cpn.payment_time) * abs(cpn.notional)
        forward = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified(swap, market.multicurve)
        strike = SWAP_FIXED_COMPOUNDED_ON_METHOD.strike_modified(swaption.strike, cpn.payment_year_fraction)
        volatility = market.volatility(swaption.time_to_expiry, swaption.maturity_time)
        return numeraire, forward, strike, volatility

    def present_value(
        self,
        swaption: SwaptionPhysicalFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> CurrencyAmount:
        numeraire, forward, strike, volatility = self._inputs(swaption, market)
        pv = black_price(forward, numeraire, volatility, strike, swaption.time_to_expiry, swaption.is_call)
        return CurrencyAmount(swaption.currency, pv * swaption.sign)

    def forward(self, swaption: SwaptionPhysicalFixedCompoundedON, market: BlackSwaptionVolatilityProvider) -> float:
        _check(swaption, market)
        return SWAP_FIXED_COMPOUNDED_ON_METHOD.forward(swaption.underlying_swap, market.multicurve)

    def implied_volatility(
        self,
        swaption: SwaptionPhysicalFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> float:
        _check(swaption, market)
        return market.volatility(swaption.time_to_expiry, swaption.maturity_time)

    def present_value_curve_sensitivity(
        self,
        swaption: SwaptionPhysicalFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        numeraire, forward, strike, volatility = self._inputs(swaption, market)
        cpn = swaption.underlying_swap.first_leg[0]
        price, forward_bar, _ = black_price_adjoint(
            forward, 1.0, volatility, strike, swaption.time_to_expiry, swaption.is_call
        )
        sign = swaption.sign
        t_pay = cpn.payment_time
        numeraire_sens = MulticurveSensitivity.of(
            market.multicurve.name(swaption.currency),
            [(t_pay, -t_pay * numeraire * price * sign)],
        )
        forward_dr = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward_modified_curve_sensitivity(
            swaption.underlying_swap, market.multicurve
        )
        return forward_dr.multiplied_by(numeraire * forward_bar * sign).plus_currency(
            swaption.currency, numeraire_sens
        ).cleaned()

    def present_value_black_sensitivity(
        self,
        swaption: SwaptionPhysicalFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> PresentValueBlackSwaptionSensitivity:
        numeraire, forward, strike, volatility = self._inputs(swaption, market)
        _, _, volatility_bar = black_price_adjoint(
            forward, 1.0, volatility, strike, swaption.time_to_expiry, swaption.is_call
        )
        return PresentValueBlackSwaptionSensitivity.of(
            swaption.time_to_expiry,
            swaption.maturity_time,
            volatility_bar * numeraire * swaption.sign,
            market.generator,
        )

    def forward_delta_theoretical(self, swaption, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.delta(
            forward, strike, swaption.time_to_expiry, volatility, swaption.is_call
        ) * swaption.sign

    def forward_gamma_theoretical(self, swaption, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.gamma(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def forward_vega_theoretical(self, swaption, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.vega(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def driftless_theta_theoretical(self, swaption, market: BlackSwaptionVolatilityProvider) -> float:
        _, forward, strike, volatility = self._inputs(swaption, market)
        return BlackFormulaRepository.driftless_theta(forward, strike, swaption.time_to_expiry, volatility) * swaption.sign

    def forward_theta_theoretical(self, swaption, market: BlackSwaptionVolatilityProvider) -> float:
        """(F_bar * price + driftless theta) * sign, per unit numeraire."""
        _, forward, strike, volatility = self._inputs(swaption, market)
        expiry = swaption.time_to_expiry
        price = BlackFormulaRepository.price(forward, strike, expiry, volatility, swaption.is_call)
        driftless = BlackFormulaRepository.driftless_theta(forward, strike, expiry, volatility)
        return (forward * price + driftless) * swaption.sign

    def delta(self, swaption, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        numeraire, forward, strike, volatility = self._inputs(swaption, market)
        bs_delta = BlackFormulaRepository.delta(forward, strike, swaption.time_to_expiry, volatility, swaption.is_call)
        return CurrencyAmount(swaption.currency, bs_delta * forward * numeraire * swaption.sign)

    def gamma(self, swaption, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        numeraire, forward, strike, volatility = self._inputs(swaption, market)
        bs_gamma = BlackFormulaRepository.gamma(forward, strike, swaption.time_to_expiry, volatility)
        return CurrencyAmount(swaption.currency, bs_gamma * forward * forward * numeraire * swaption.sign)

    def theta(self, swaption, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        numeraire = self._inputs(swaption, market)[0]
        return CurrencyAmount(swaption.currency, self.forward_theta_theoretical(swaption, market) * numeraire)


class SwaptionCashFixedCompoundedONCompoundedBlackMethod:
    """
    Black method for cash settled swaptions on fixed-compounded vs
    overnight-compounded swaps.

    The payoff is annuity_cash(F) * (F - K)^+ paid at settlement. Only
    constant strikes make sense for cash settlement, so K is used directly.
    """

    def _inputs(self, swaption: SwaptionCashFixedCompoundedON, market: BlackSwaptionVolatilityProvider):
        _check(swaption, market)
        swap = swaption.underlying_swap
        forward = SWAP_FIXED_COMPOUNDED_ON_METHOD.forward(swap, market.multicurve)
        annuity = SWAP_FIXED_COMPOUNDED_ON_METHOD.annuity_cash(swap, forward)
        df_settle = market.multicurve.discount_factor(swaption.currency, swaption.settlement_time)
        volatility = market.volatility(swaption.time_to_expiry, swaption.maturity_time)
        return df_settle * annuity, forward, volatility

    def present_value(self, swaption: SwaptionCashFixedCompoundedON, market: BlackSwaptionVolatilityProvider) -> CurrencyAmount:
        numeraire, forward, volatility = self._inputs(swaption, market)
        pv = black_price(forward, numeraire, volatility, swaption.strike, swaption.time_to_expiry, swaption.is_call)
        return CurrencyAmount(swaption.currency, pv * swaption.sign)

    def forward(self, swaption: SwaptionCashFixedCompoundedON, market: BlackSwaptionVolatilityProvider) -> float:
        return self._inputs(swaption, market)[1]

    def implied_volatility(self, swaption: SwaptionCashFixedCompoundedON, market: BlackSwaptionVolatilityProvider) -> float:
        _check(swaption, market)
        return market.volatility(swaption.time_to_expiry, swaption.maturity_time)

    def present_value_curve_sensitivity(
        self,
        swaption: SwaptionCashFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        _check(swaption, market)
        raise NotImplementedError("Curve sensitivity of cash settled overnight compounded swaptions is not derived")

    def present_value_black_sensitivity(
        self,
        swaption: SwaptionCashFixedCompoundedON,
        market: BlackSwaptionVolatilityProvider
    ) -> PresentValueBlackSwaptionSensitivity:
        _check(swaption, market)
        raise NotImplementedError("Black sensitivity of cash settled overnight compounded swaptions is not derived")


SWAPTION_PHYSICAL_IBOR_METHOD = SwaptionPhysicalFixedIborBlackMethod()
SWAPTION_PHYSICAL_ON_METHOD = SwaptionPhysicalFixedCompoundedONCompoundedBlackMethod()
SWAPTION_CASH_ON_METHOD = SwaptionCashFixedCompoundedONCompoundedBlackMethod()


__all__ = [
    "SwaptionPhysicalFixedIborBlackMethod",
    "SwaptionPhysicalFixedCompoundedONCompoundedBlackMethod",
    "SwaptionCashFixedCompoundedONCompoundedBlackMethod",
    "SWAPTION_PHYSICAL_IBOR_METHOD",
    "SWAPTION_PHYSICAL_ON_METHOD",
    "SWAPTION_CASH_ON_METHOD",
]
