"""
Swap instruments.

- Swap: a pair of legs (first leg fixed by convention)
- SwapFixedIbor: fixed leg of CouponFixed against a leg of CouponIbor
- SwapFixedCompoundedON: compounded fixed leg against an overnight compounded
  leg (single payment at maturity, Brazilian style)

The from_dates constructors turn a trade description into the time-based
representation used by the pricing methods.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, List, Optional

from ..conventions import (
    BusinessDayConvention,
    DayCount,
    adjust_business_day,
    day_count_fraction,
    year_fraction
)
from ..dates import DateUtils
from ..errors import ArgumentError, not_none
from .base import InstrumentType
from .payments import (
    Annuity,
    CouponFixed,
    CouponFixedAccruedCompounding,
    CouponIbor,
    CouponONCompounded
)


@dataclass(frozen=True)
class Swap:
    """
    Two legs in the same currency.

    Attributes:
        first_leg: Fixed leg
        second_leg: Floating leg
    """
    first_leg: Annuity
    second_leg: Annuity

    def __post_init__(self):
        not_none(self.first_leg, "first_leg")
        not_none(self.second_leg, "second_leg")
        if self.first_leg.currency != self.second_leg.currency:
            raise ArgumentError("Swap legs must share one currency")

    @property
    def currency(self) -> str:
        return self.first_leg.currency

    @property
    def is_payer(self) -> bool:
        """True when the fixed leg is paid."""
        return self.first_leg.is_payer


@dataclass(frozen=True)
class SwapFixedIbor(Swap):
    """Fixed leg of CouponFixed against a leg of CouponIbor."""
    instrument_type: ClassVar[InstrumentType] = InstrumentType.SWAP_FIXED_IBOR

    def __post_init__(self):
        super().__post_init__()
        if not all(isinstance(c, CouponFixed) for c in self.first_leg):
            raise ArgumentError("First leg must contain CouponFixed only")
        if not all(isinstance(c, CouponIbor) for c in self.second_leg):
            raise ArgumentError("Second leg must contain CouponIbor only")

    @property
    def fixed_rate(self) -> float:
        return self.first_leg[0].fixed_rate

    @property
    def notional(self) -> float:
        return abs(self.first_leg[0].notional)

    @classmethod
    def from_dates(
        cls,
        valuation_date: date,
        start_date: date,
        tenor_years: int,
        fixed_rate: float,
        notional: float,
        is_payer: bool,
        index_name: str,
        currency: str = "USD",
        fixed_period_months: int = 6,
        float_period_months: int = 3,
        fixed_day_count: DayCount = DayCount.THIRTY_360,
        float_day_count: DayCount = DayCount.ACT_360,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> "SwapFixedIbor":
        """
        Build a vanilla fixed-vs-Ibor swap.

        Args:
            valuation_date: Date of time 0
            start_date: Effective date
            tenor_years: Swap length in years
            fixed_rate: Fixed coupon rate
            notional: Positive notional
            is_payer: True to pay the fixed leg
            index_name: Ibor index of the floating leg
            currency: Currency code
            fixed_period_months: Fixed leg period (6 = semi-annual)
            float_period_months: Floating leg period (3 = quarterly)
            fixed_day_count: Fixed leg day count
            float_day_count: Floating leg day count
            business_day: Payment date adjustment
            holidays: Holiday calendar

        Returns:
            SwapFixedIbor
        """
        end_date = DateUtils.add_months(start_date, 12 * tenor_years)
        sign = -1.0 if is_payer else 1.0

        fixed: List[CouponFixed] = []
        dates = DateUtils.generate_schedule(start_date, end_date, 12 // fixed_period_months)
        for s, e in zip(dates[:-1], dates[1:]):
            pay = adjust_business_day(e, business_day, holidays)
            fixed.append(CouponFixed(
                currency=currency,
                payment_time=DateUtils.time_between(valuation_date, pay),
                payment_year_fraction=year_fraction(s, e, fixed_day_count),
                notional=sign * notional,
                fixed_rate=fixed_rate,
                accrual_start_date=s,
                accrual_end_date=e,
            ))

        ibor: List[CouponIbor] = []
        dates = DateUtils.generate_schedule(start_date, end_date, 12 // float_period_months)
        for s, e in zip(dates[:-1], dates[1:]):
            s_adj = adjust_business_day(s, business_day, holidays)
            e_adj = adjust_business_day(e, business_day, holidays)
            accrual = year_fraction(s_adj, e_adj, float_day_count)
            ibor.append(CouponIbor(
                currency=currency,
                payment_time=DateUtils.time_between(valuation_date, e_adj),
                payment_year_fraction=accrual,
                notional=-sign * notional,
                fixing_time=DateUtils.time_between(valuation_date, s_adj),
                fixing_period_start_time=DateUtils.time_between(valuation_date, s_adj),
                fixing_period_end_time=DateUtils.time_between(valuation_date, e_adj),
                fixing_accrual_factor=accrual,
                index_name=index_name,
            ))

        return cls(Annuity.of(fixed), Annuity.of(ibor))


@dataclass(frozen=True)
class SwapFixedCompoundedON(Swap):
    """Compounded fixed leg against an overnight compounded leg."""
    instrument_type: ClassVar[InstrumentType] = InstrumentType.SWAP_FIXED_COMPOUNDED_ON

    def __post_init__(self):
        super().__post_init__()
        if not all(isinstance(c, CouponFixedAccruedCompounding) for c in self.first_leg):
            raise ArgumentError("First leg must contain CouponFixedAccruedCompounding only")
        if not all(isinstance(c, CouponONCompounded) for c in self.second_leg):
            raise ArgumentError("Second leg must contain CouponONCompounded only")

    @property
    def fixed_rate(self) -> float:
        return self.first_leg[0].fixed_rate

    @classmethod
    def from_dates(
        cls,
        valuation_date: date,
        start_date: date,
        end_date: date,
        fixed_rate: float,
        notional: float,
        is_payer: bool,
        index_name: str,
        currency: str = "BRL",
        fixing_period_months: int = 1,
        day_count: DayCount = DayCount.BUS_252,
        holidays: Optional[set] = None
    ) -> "SwapFixedCompoundedON":
        """
        Build a single-payment fixed-compounded vs overnight-compounded swap.

        The overnight leg compounds forwards over sub-periods of
        fixing_period_months; the product telescopes to P(start)/P(end).

        Args:
            valuation_date: Date of time 0
            start_date: Effective date
            end_date: Maturity (payment on the following business day)
            fixed_rate: Annually compounded fixed rate
            notional: Positive notional
            is_payer: True to pay the fixed leg
            index_name: Overnight index
            currency: Currency code
            fixing_period_months: Length of the compounding sub-periods
            day_count: Accrual day count (BUS/252)
            holidays: Holiday calendar used by the business day count

        Returns:
            SwapFixedCompoundedON
        """
        if end_date <= start_date:
            raise ArgumentError("end_date must be after start_date")
        sign = -1.0 if is_payer else 1.0
        pay = adjust_business_day(end_date, BusinessDayConvention.FOLLOWING, holidays)
        payment_time = DateUtils.time_between(valuation_date, pay)
        accrual = day_count_fraction(start_date, end_date, day_count, holidays)

        fixed = CouponFixedAccruedCompounding(
            currency=currency,
            payment_time=payment_time,
            payment_year_fraction=accrual,
            notional=sign * notional,
            fixed_rate=fixed_rate,
            accrual_start_date=start_date,
            accrual_end_date=end_date,
        )

        dates = [start_date]
        while True:
            nxt = DateUtils.add_months(start_date, fixing_period_months * len(dates))
            if nxt >= end_date:
                break
            dates.append(nxt)
        dates.append(end_date)
        starts = tuple(DateUtils.time_between(valuation_date, d) for d in dates[:-1])
        ends = tuple(DateUtils.time_between(valuation_date, d) for d in dates[1:])
        factors = tuple(day_count_fraction(s, e, day_count, holidays) for s, e in zip(dates[:-1], dates[1:]))

        on = CouponONCompounded(
            currency=currency,
            payment_time=payment_time,
            payment_year_fraction=accrual,
            notional=-sign * notional,
            index_name=index_name,
            fixing_period_start_times=starts,
            fixing_period_end_times=ends,
            fixing_period_accrual_factors=factors,
        )
        return cls(Annuity.of([fixed]), Annuity.of([on]))


__all__ = [
    "Swap",
    "SwapFixedIbor",
    "SwapFixedCompoundedON",
]
