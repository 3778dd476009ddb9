"""
Bond and bill discounting methods.

Yield conventions for fixed coupon bonds (v = 1 + y/m, f = fraction of the
current period left to run, n = coupons left):

- US street, German bond and UK DMO:
      dirty = v^-f * (sum_i a_i v^-i + N v^-(n-1)) / N
  In the last period US street and German bonds use simple discounting
      dirty = (1 + c * delta) / (1 + f * y / m)
- Australia ex-dividend: the fractional period is discounted simply
      dirty = (sum_i a_i v^-i + N v^-(n-1)) / (1 + f * y / m) / N

The sum starts at the second coupon when the bond trades ex-coupon.

Conventions:
- Prices are expressed per unit of notional (1.0 = par)
- Yields are decimals compounded m times a year
- Curve based values discount on the issuer curve
"""

import logging
import math
from typing import List, Optional, Tuple, Union

from ..config import PricingConfig, resolve_config
from ..conventions import YieldConvention
from ..errors import not_none
from ..instruments.bonds import Bill, FixedCouponBond
from ..providers import IssuerProvider
from ..rootfinding import find_root
from ..sensitivities import (
    MulticurveSensitivity,
    MultipleCurrencyAmount,
    MultipleCurrencyMulticurveSensitivity
)

logger = logging.getLogger(__name__)

_STANDARD = (
    YieldConvention.US_STREET,
    YieldConvention.GERMAN_BOND,
    YieldConvention.UK_BUMP_DMO,
)
_SIMPLE_LAST_PERIOD = (
    YieldConvention.US_STREET,
    YieldConvention.GERMAN_BOND,
)

Amount = Union[MultipleCurrencyAmount, float]


def _unsupported(convention: YieldConvention) -> NotImplementedError:
    return NotImplementedError(f"Yield convention {convention} is not supported")


class BondSecurityDiscountingMethod:
    """
    Price, yield, duration and spread calculations for fixed coupon bonds.

    Yield based measures are closed form; inverse problems (yield from
    price, z-spread from PV) use the Brent solver configured by
    PricingConfig.
    """

    # Yield based formulas

    @staticmethod
    def _flows(bond: FixedCouponBond) -> List[Tuple[float, float]]:
        """(period index, amount / notional) of the cash flows still owned."""
        notional = bond.notional
        n = len(bond.coupons)
        first = 1 if bond.is_ex_coupon else 0
        flows = [(float(i), bond.coupons[i].amount / notional) for i in range(first, n)]
        flows.append((float(n - 1), 1.0))
        return flows

    def _is_simple_last_period(self, bond: FixedCouponBond) -> bool:
        return len(bond.coupons) == 1 and bond.yield_convention in _SIMPLE_LAST_PERIOD

    def _price_and_derivatives(self, bond: FixedCouponBond, yield_: float) -> Tuple[float, float, float]:
        """Dirty price P(y) with P'(y) and P''(y)."""
        m = bond.coupons_per_year
        f = bond.accrual_factor_to_next_coupon
        convention = bond.yield_convention

        if self._is_simple_last_period(bond):
            cpn = bond.coupons[0]
            c = 1.0 + cpn.fixed_rate * cpn.payment_year_fraction
            g = f / m
            d = 1.0 + g * yield_
            return c / d, -c * g / d ** 2, 2.0 * c * g ** 2 / d ** 3

        v = 1.0 + yield_ / m
        if convention in _STANDARD:
            price = first = second = 0.0
            for i, w in self._flows(bond):
                e = f + i
                price += w * v ** (-e)
                first -= w * e * v ** (-e - 1.0) / m
                second += w * e * (e + 1.0) * v ** (-e - 2.0) / m ** 2
            return price, first, second

        if convention == YieldConvention.AUSTRALIA_EX_DIVIDEND:
            s = s1 = s2 = 0.0
            for i, w in self._flows(bond):
                s += w * v ** (-i)
                s1 -= w * i * v ** (-i - 1.0) / m
                s2 += w * i * (i + 1.0) * v ** (-i - 2.0) / m ** 2
            g = f / m
            d = 1.0 + g * yield_
            price = s / d
            first = s1 / d - s * g / d ** 2
            second = s2 / d - 2.0 * s1 * g / d ** 2 + 2.0 * s * g ** 2 / d ** 3
            return price, first, second

        raise _unsupported(convention)

    def dirty_price_from_yield(self, bond: FixedCouponBond, yield_: float) -> float:
        """
        Dirty price (per unit notional) from the conventional yield.

        Args:
            bond: Bond
            yield_: Yield in the bond's convention

        Returns:
            Dirty price

        Raises:
            NotImplementedError: If the yield convention is not supported
        """
        not_none(bond, "bond")
        return self._price_and_derivatives(bond, yield_)[0]

    def clean_price_from_yield(self, bond: FixedCouponBond, yield_: float) -> float:
        return self.clean_price_from_dirty_price(bond, self.dirty_price_from_yield(bond, yield_))

    def clean_price_from_dirty_price(self, bond: FixedCouponBond, dirty_price: float) -> float:
        not_none(bond, "bond")
        return dirty_price - bond.accrued_interest / bond.notional

    def dirty_price_from_clean_price(self, bond: FixedCouponBond, clean_price: float) -> float:
        not_none(bond, "bond")
        return clean_price + bond.accrued_interest / bond.notional

    def yield_from_dirty_price(
        self,
        bond: FixedCouponBond,
        dirty_price: float,
        config: Optional[PricingConfig] = None
    ) -> float:
        """
        Yield that reprices the bond at dirty_price.

        Args:
            bond: Bond
            dirty_price: Dirty price per unit notional
            config: Solver settings

        Returns:
            Yield in the bond's convention

        Raises:
            RootFindingError: If the solver fails
        """
        not_none(bond, "bond")
        config = resolve_config(config)
        result = find_root(
            lambda y: self.dirty_price_from_yield(bond, y) - dirty_price,
            config.yield_bracket,
            config,
            lower_limit=-float(bond.coupons_per_year),
        )
        logger.debug("Yield from dirty price %s: %s (%s iterations)", dirty_price, result.root, result.iterations)
        return result.root

    def yield_from_clean_price(
        self,
        bond: FixedCouponBond,
        clean_price: float,
        config: Optional[PricingConfig] = None
    ) -> float:
        return self.yield_from_dirty_price(bond, self.dirty_price_from_clean_price(bond, clean_price), config)

    def modified_duration_from_yield(self, bond: FixedCouponBond, yield_: float) -> float:
        """-P'(y) / P(y)"""
        not_none(bond, "bond")
        price, first, _ = self._price_and_derivatives(bond, yield_)
        return -first / price

    def macaulay_duration_from_yield(self, bond: FixedCouponBond, yield_: float) -> float:
        """Modified duration times (1 + y/m); f/m in a simple last period."""
        not_none(bond, "bond")
        if self._is_simple_last_period(bond):
            return bond.accrual_factor_to_next_coupon / bond.coupons_per_year
        return self.modified_duration_from_yield(bond, yield_) * (1.0 + yield_ / bond.coupons_per_year)

    def convexity_from_yield(self, bond: FixedCouponBond, yield_: float) -> float:
        """P''(y) / P(y)"""
        not_none(bond, "bond")
        price, _, second = self._price_and_derivatives(bond, yield_)
        return second / price

    def modified_duration_from_dirty_price(self, bond, dirty_price: float, config: Optional[PricingConfig] = None) -> float:
        return self.modified_duration_from_yield(bond, self.yield_from_dirty_price(bond, dirty_price, config))

    def macaulay_duration_from_dirty_price(self, bond, dirty_price: float, config: Optional[PricingConfig] = None) -> float:
        return self.macaulay_duration_from_yield(bond, self.yield_from_dirty_price(bond, dirty_price, config))

    def convexity_from_dirty_price(self, bond, dirty_price: float, config: Optional[PricingConfig] = None) -> float:
        return self.convexity_from_yield(bond, self.yield_from_dirty_price(bond, dirty_price, config))

    # Curve based values

    def _discounted_flows(self, bond: FixedCouponBond) -> List[Tuple[float, float]]:
        """(payment time, amount) of the payments the buyer receives."""
        first = 1 if bond.is_ex_coupon else 0
        flows = [(c.payment_time, c.amount) for c in bond.coupons[first:]]
        flows.extend((p.payment_time, p.amount) for p in bond.nominal)
        return flows

    def _present_value(self, bond: FixedCouponBond, provider: IssuerProvider, z_spread: float = 0.0) -> float:
        pv = 0.0
        for t, amount in self._discounted_flows(bond):
            pv += amount * provider.issuer_discount_factor(bond.issuer, t) * math.exp(-z_spread * t)
        return pv

    def present_value(self, bond: FixedCouponBond, provider: IssuerProvider) -> MultipleCurrencyAmount:
        """
        Present value of nominal and coupons on the issuer curve.

        The coupon already detached by an ex-coupon settlement is excluded.
        """
        not_none(bond, "bond")
        not_none(provider, "provider")
        return MultipleCurrencyAmount.of(bond.currency, self._present_value(bond, provider))

    def present_value_curve_sensitivity(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        not_none(bond, "bond")
        not_none(provider, "provider")
        points = [
            (t, -t * amount * provider.issuer_discount_factor(bond.issuer, t))
            for t, amount in self._discounted_flows(bond)
        ]
        sens = MulticurveSensitivity.of(provider.issuer_curve_name(bond.issuer), points)
        return MultipleCurrencyMulticurveSensitivity.of(bond.currency, sens.cleaned())

    def dirty_price_from_curves(self, bond: FixedCouponBond, provider: IssuerProvider) -> float:
        """PV forwarded to settlement on the currency curve, per unit notional."""
        pv = self.present_value(bond, provider).get_amount(bond.currency)
        df_settle = provider.discount_factor(bond.currency, bond.settlement_time)
        return pv / df_settle / bond.notional

    def clean_price_from_curves(self, bond: FixedCouponBond, provider: IssuerProvider) -> float:
        return self.clean_price_from_dirty_price(bond, self.dirty_price_from_curves(bond, provider))

    def yield_from_curves(self, bond: FixedCouponBond, provider: IssuerProvider,
                          config: Optional[PricingConfig] = None) -> float:
        return self.yield_from_dirty_price(bond, self.dirty_price_from_curves(bond, provider), config)

    def modified_duration_from_curves(self, bond, provider: IssuerProvider, config: Optional[PricingConfig] = None) -> float:
        return self.modified_duration_from_yield(bond, self.yield_from_curves(bond, provider, config))

    def macaulay_duration_from_curves(self, bond, provider: IssuerProvider, config: Optional[PricingConfig] = None) -> float:
        return self.macaulay_duration_from_yield(bond, self.yield_from_curves(bond, provider, config))

    def convexity_from_curves(self, bond, provider: IssuerProvider, config: Optional[PricingConfig] = None) -> float:
        return self.convexity_from_yield(bond, self.yield_from_curves(bond, provider, config))

    def present_value_from_clean_price(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        clean_price: float
    ) -> MultipleCurrencyAmount:
        """Dirty amount paid at settlement, discounted on the currency curve."""
        not_none(bond, "bond")
        not_none(provider, "provider")
        dirty = self.dirty_price_from_clean_price(bond, clean_price)
        df_settle = provider.discount_factor(bond.currency, bond.settlement_time)
        return MultipleCurrencyAmount.of(bond.currency, dirty * bond.notional * df_settle)

    def present_value_from_yield(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        yield_: float
    ) -> MultipleCurrencyAmount:
        return self.present_value_from_clean_price(bond, provider, self.clean_price_from_yield(bond, yield_))

    # Z-spread

    def present_value_from_z_spread(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        z_spread: float
    ) -> MultipleCurrencyAmount:
        """PV with every issuer discount factor multiplied by exp(-z t)."""
        not_none(bond, "bond")
        not_none(provider, "provider")
        return MultipleCurrencyAmount.of(bond.currency, self._present_value(bond, provider, z_spread))

    def present_value_z_spread_sensitivity(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        z_spread: float
    ) -> MultipleCurrencyAmount:
        """Derivative of the z-spread PV with respect to the spread."""
        not_none(bond, "bond")
        not_none(provider, "provider")
        dpv = 0.0
        for t, amount in self._discounted_flows(bond):
            dpv -= t * amount * provider.issuer_discount_factor(bond.issuer, t) * math.exp(-z_spread * t)
        return MultipleCurrencyAmount.of(bond.currency, dpv)

    def z_spread_from_curves_and_pv(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        pv: Amount,
        config: Optional[PricingConfig] = None
    ) -> float:
        """
        Constant spread over the issuer curve that reprices the bond at pv.

        Args:
            bond: Bond
            provider: Issuer curves
            pv: Target present value
            config: Solver settings

        Returns:
            Z-spread (decimal, continuously compounded)

        Raises:
            RootFindingError: If the spread cannot be bracketed or the solver
                does not converge
        """
        not_none(bond, "bond")
        not_none(provider, "provider")
        not_none(pv, "pv")
        config = resolve_config(config)
        target = pv.get_amount(bond.currency) if isinstance(pv, MultipleCurrencyAmount) else float(pv)
        result = find_root(
            lambda z: self._present_value(bond, provider, z) - target,
            config.z_spread_bracket,
            config,
        )
        logger.debug("Z-spread for PV %s: %s (%s iterations)", target, result.root, result.iterations)
        return result.root

    def z_spread_from_curves_and_clean_price(
        self,
        bond: FixedCouponBond,
        provider: IssuerProvider,
        clean_price: float,
        config: Optional[PricingConfig] = None
    ) -> float:
        pv = self.present_value_from_clean_price(bond, provider, clean_price)
        return self.z_spread_from_curves_and_pv(bond, provider, pv, config)


class BillSecurityDiscountingMethod:
    """
    Bills: a single payment of the notional at maturity.

    Yield conventions with f the accrual factor from settlement to maturity:
    - Interest at maturity: price = 1 / (1 + f * y)
    - Discount: price = 1 - f * y
    """

    def price_from_yield(self, bill: Bill, yield_: float) -> float:
        not_none(bill, "bill")
        f = bill.accrual_factor
        if bill.yield_convention == YieldConvention.INTEREST_AT_MATURITY:
            return 1.0 / (1.0 + f * yield_)
        if bill.yield_convention == YieldConvention.DISCOUNT:
            return 1.0 - f * yield_
        raise _unsupported(bill.yield_convention)

    def yield_from_price(self, bill: Bill, price: float) -> float:
        not_none(bill, "bill")
        f = bill.accrual_factor
        if bill.yield_convention == YieldConvention.INTEREST_AT_MATURITY:
            return (1.0 / price - 1.0) / f
        if bill.yield_convention == YieldConvention.DISCOUNT:
            return (1.0 - price) / f
        raise _unsupported(bill.yield_convention)

    def yield_from_price_derivative(self, bill: Bill, price: float) -> float:
        """d yield / d price"""
        not_none(bill, "bill")
        f = bill.accrual_factor
        if bill.yield_convention == YieldConvention.INTEREST_AT_MATURITY:
            return -1.0 / (price * price * f)
        if bill.yield_convention == YieldConvention.DISCOUNT:
            return -1.0 / f
        raise _unsupported(bill.yield_convention)

    def present_value(self, bill: Bill, provider: IssuerProvider) -> MultipleCurrencyAmount:
        not_none(bill, "bill")
        not_none(provider, "provider")
        df = provider.issuer_discount_factor(bill.issuer, bill.end_time)
        return MultipleCurrencyAmount.of(bill.currency, bill.notional * df)

    def present_value_from_price(self, bill: Bill, provider: IssuerProvider, price: float) -> MultipleCurrencyAmount:
        """Notional times price paid at settlement, discounted on the currency curve."""
        not_none(bill, "bill")
        not_none(provider, "provider")
        df_settle = provider.discount_factor(bill.currency, bill.settlement_time)
        return MultipleCurrencyAmount.of(bill.currency, bill.notional * price * df_settle)

    def present_value_from_yield(self, bill: Bill, provider: IssuerProvider, yield_: float) -> MultipleCurrencyAmount:
        return self.present_value_from_price(bill, provider, self.price_from_yield(bill, yield_))

    def price_from_curves(self, bill: Bill, provider: IssuerProvider) -> float:
        pv = self.present_value(bill, provider).get_amount(bill.currency)
        df_settle = provider.discount_factor(bill.currency, bill.settlement_time)
        return pv / (bill.notional * df_settle)

    def yield_from_curves(self, bill: Bill, provider: IssuerProvider) -> float:
        return self.yield_from_price(bill, self.price_from_curves(bill, provider))

    def present_value_curve_sensitivity(
        self,
        bill: Bill,
        provider: IssuerProvider
    ) -> MultipleCurrencyMulticurveSensitivity:
        not_none(bill, "bill")
        not_none(provider, "provider")
        t = bill.end_time
        df = provider.issuer_discount_factor(bill.issuer, t)
        sens = MulticurveSensitivity.of(provider.issuer_curve_name(bill.issuer), [(t, -t * bill.notional * df)])
        return MultipleCurrencyMulticurveSensitivity.of(bill.currency, sens)


BOND_METHOD = BondSecurityDiscountingMethod()
BILL_METHOD = BillSecurityDiscountingMethod()


__all__ = [
    "BondSecurityDiscountingMethod",
    "BillSecurityDiscountingMethod",
    "BOND_METHOD",
    "BILL_METHOD",
]
