"""
Bond and bill instruments.

Definitions carry dates and conventions; to_derivative(reference_date)
produces the time-based instrument the pricing methods consume:

- FixedCouponBondDefinition -> FixedCouponBond
- BillDefinition -> Bill

Conventions:
- Amounts are per the stated notional (1.0 by default, so prices are
  expressed per unit of face value)
- Times are ACT/365 year fractions from the reference date
"""

from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, Optional, Tuple

from ..conventions import (
    Conventions,
    DayCount,
    YieldConvention,
    accrual_factor_icma,
    day_count_fraction
)
from ..dates import DateUtils, ScheduleInfo, generate_bond_schedule
from ..errors import ArgumentError, not_empty
from .base import InstrumentType
from .payments import CouponFixed, PaymentFixed

BOND_YIELD_CONVENTIONS = (
    YieldConvention.US_STREET,
    YieldConvention.GERMAN_BOND,
    YieldConvention.UK_BUMP_DMO,
    YieldConvention.AUSTRALIA_EX_DIVIDEND,
)

BILL_YIELD_CONVENTIONS = (
    YieldConvention.INTEREST_AT_MATURITY,
    YieldConvention.DISCOUNT,
)


@dataclass(frozen=True)
class FixedCouponBond:
    """
    Fixed coupon bond seen from a reference date.

    Attributes:
        currency: Currency code
        nominal: Redemption payments
        coupons: Coupons paid after settlement (the ex-coupon one included)
        issuer: Issuer name, key of the issuer curve
        yield_convention: Price/yield formula
        settlement_time: Settlement time (years)
        accrued_interest: Accrued interest at settlement (negative when ex-coupon)
        coupons_per_year: Coupon frequency
        accrual_factor_to_next_coupon: Fraction of the current period left to run
        is_ex_coupon: True when settlement is inside the ex-dividend period
    """
    instrument_type: ClassVar[InstrumentType] = InstrumentType.FIXED_COUPON_BOND

    currency: str
    nominal: Tuple[PaymentFixed, ...]
    coupons: Tuple[CouponFixed, ...]
    issuer: str
    yield_convention: YieldConvention
    settlement_time: float
    accrued_interest: float
    coupons_per_year: int
    accrual_factor_to_next_coupon: float
    is_ex_coupon: bool = False

    def __post_init__(self):
        not_empty(self.nominal, "nominal")
        not_empty(self.coupons, "coupons")
        object.__setattr__(self, "nominal", tuple(self.nominal))
        object.__setattr__(self, "coupons", tuple(self.coupons))

    @property
    def notional(self) -> float:
        return self.nominal[-1].amount

    @classmethod
    def from_times(
        cls,
        settlement_time: float,
        coupon_rate: float,
        n_coupons: int,
        coupons_per_year: int,
        accrual_factor_to_next_coupon: float,
        yield_convention: YieldConvention = YieldConvention.US_STREET,
        issuer: str = "ISSUER",
        currency: str = "USD",
        notional: float = 1.0,
        is_ex_coupon: bool = False
    ) -> "FixedCouponBond":
        """
        Regular bond described directly in time.

        Args:
            settlement_time: Settlement time (years)
            coupon_rate: Annual coupon rate
            n_coupons: Coupons left, the next one included
            coupons_per_year: Coupon frequency
            accrual_factor_to_next_coupon: Fraction of the current period left
            yield_convention: Price/yield formula
            issuer: Issuer name
            currency: Currency code
            notional: Face value
            is_ex_coupon: Whether settlement is inside the ex-dividend period

        Returns:
            FixedCouponBond
        """
        if n_coupons < 1:
            raise ArgumentError("A bond needs at least one coupon")
        period = 1.0 / coupons_per_year
        coupons = tuple(
            CouponFixed(
                currency=currency,
                payment_time=settlement_time + (accrual_factor_to_next_coupon + i) * period,
                payment_year_fraction=period,
                notional=notional,
                fixed_rate=coupon_rate,
            )
            for i in range(n_coupons)
        )
        full_coupon = notional * coupon_rate * period
        if is_ex_coupon:
            accrued = -full_coupon * accrual_factor_to_next_coupon
        else:
            accrued = full_coupon * (1.0 - accrual_factor_to_next_coupon)
        nominal = (PaymentFixed(currency, coupons[-1].payment_time, notional),)
        return cls(
            currency=currency,
            nominal=nominal,
            coupons=coupons,
            issuer=issuer,
            yield_convention=yield_convention,
            settlement_time=settlement_time,
            accrued_interest=accrued,
            coupons_per_year=coupons_per_year,
            accrual_factor_to_next_coupon=accrual_factor_to_next_coupon,
            is_ex_coupon=is_ex_coupon,
        )


@dataclass(frozen=True)
class FixedCouponBondDefinition:
    """
    Fixed coupon bond described by dates.

    Attributes:
        currency: Currency code
        first_accrual_date: Interest accrual start (issue date)
        maturity_date: Final coupon and redemption date
        coupon_rate: Annual coupon rate (decimal)
        issuer: Issuer name
        conventions: Day count, frequency, settlement lag, ex-dividend days and yield convention
        notional: Face value
        holidays: Business day calendar
    """
    currency: str
    first_accrual_date: date
    maturity_date: date
    coupon_rate: float
    issuer: str
    conventions: Conventions = field(default_factory=Conventions.us_treasury)
    notional: float = 1.0
    holidays: frozenset = frozenset()

    def schedule(self) -> ScheduleInfo:
        return generate_bond_schedule(
            self.first_accrual_date,
            self.maturity_date,
            self.conventions.payment_frequency,
            self.conventions.day_count,
            self.conventions.business_day,
            set(self.holidays),
        )

    def settlement_date(self, reference_date: date) -> date:
        return DateUtils.add_business_days(reference_date, self.conventions.settlement_days, set(self.holidays))

    def to_derivative(self, reference_date: date, settlement_date: Optional[date] = None) -> FixedCouponBond:
        """
        Time-based bond seen from reference_date.

        Args:
            reference_date: Valuation date (time 0)
            settlement_date: Overrides the standard settlement lag

        Returns:
            FixedCouponBond
        """
        settle = settlement_date or self.settlement_date(reference_date)
        sched = self.schedule()
        freq = self.conventions.payment_frequency
        day_count = self.conventions.day_count

        current = next((i for i, end in enumerate(sched.accrual_ends) if end > settle), None)
        if current is None:
            raise ArgumentError(f"Bond matured before settlement {settle}")

        start = sched.accrual_starts[current]
        end = sched.accrual_ends[current]
        if day_count == DayCount.ACT_ACT_ICMA:
            notional_start = DateUtils.add_months(end, -12 // freq)
            elapsed = accrual_factor_icma(start, settle, notional_start, end, freq)
            remaining = accrual_factor_icma(settle, end, notional_start, end, freq)
            factor_to_next = remaining * freq
        else:
            elapsed = day_count_fraction(start, settle, day_count, set(self.holidays))
            remaining = day_count_fraction(settle, end, day_count, set(self.holidays))
            factor_to_next = remaining / (elapsed + remaining)

        ex_days = self.conventions.ex_dividend_days
        is_ex = ex_days > 0 and (end - settle).days <= ex_days
        rate_notional = self.coupon_rate * self.notional
        accrued = -rate_notional * remaining if is_ex else rate_notional * elapsed

        coupons = tuple(
            CouponFixed(
                currency=self.currency,
                payment_time=DateUtils.time_between(reference_date, sched.payment_dates[i]),
                payment_year_fraction=sched.year_fractions[i],
                notional=self.notional,
                fixed_rate=self.coupon_rate,
                accrual_start_date=sched.accrual_starts[i],
                accrual_end_date=sched.accrual_ends[i],
            )
            for i in range(current, len(sched.payment_dates))
        )
        nominal = (PaymentFixed(self.currency, coupons[-1].payment_time, self.notional),)

        return FixedCouponBond(
            currency=self.currency,
            nominal=nominal,
            coupons=coupons,
            issuer=self.issuer,
            yield_convention=self.conventions.yield_convention,
            settlement_time=DateUtils.time_between(reference_date, settle),
            accrued_interest=accrued,
            coupons_per_year=freq,
            accrual_factor_to_next_coupon=factor_to_next,
            is_ex_coupon=is_ex,
        )


@dataclass(frozen=True)
class Bill:
    """
    Zero coupon bill seen from a reference date.

    Attributes:
        currency: Currency code
        settlement_time: Settlement time (years)
        end_time: Maturity time (years)
        notional: Face value
        yield_convention: INTEREST_AT_MATURITY or DISCOUNT
        accrual_factor: Day count fraction between settlement and maturity
        issuer: Issuer name
    """
    instrument_type: ClassVar[InstrumentType] = InstrumentType.BILL

    currency: str
    settlement_time: float
    end_time: float
    notional: float
    yield_convention: YieldConvention
    accrual_factor: float
    issuer: str

    def __post_init__(self):
        if self.end_time < self.settlement_time:
            raise ArgumentError("Bill end must not precede settlement")


@dataclass(frozen=True)
class BillDefinition:
    """
    Bill described by dates.

    Attributes:
        currency: Currency code
        end_date: Maturity date
        notional: Face value
        issuer: Issuer name
        yield_convention: INTEREST_AT_MATURITY or DISCOUNT
        day_count: Accrual day count
        settlement_days: Business days from trade to settlement
        holidays: Business day calendar
    """
    currency: str
    end_date: date
    notional: float
    issuer: str
    yield_convention: YieldConvention = YieldConvention.INTEREST_AT_MATURITY
    day_count: DayCount = DayCount.ACT_360
    settlement_days: int = 2
    holidays: frozenset = frozenset()

    def __post_init__(self):
        if self.yield_convention not in BILL_YIELD_CONVENTIONS:
            raise ArgumentError(f"Unsupported bill yield convention {self.yield_convention}")

    def to_derivative(self, reference_date: date, settlement_date: Optional[date] = None) -> Bill:
        settle = settlement_date or DateUtils.add_business_days(
            reference_date, self.settlement_days, set(self.holidays)
        )
        return Bill(
            currency=self.currency,
            settlement_time=DateUtils.time_between(reference_date, settle),
            end_time=DateUtils.time_between(reference_date, self.end_date),
            notional=self.notional,
            yield_convention=self.yield_convention,
            accrual_factor=day_count_fraction(settle, self.end_date, self.day_count, set(self.holidays)),
            issuer=self.issuer,
        )


__all__ = [
    "FixedCouponBond",
    "FixedCouponBondDefinition",
    "Bill",
    "BillDefinition",
    "BOND_YIELD_CONVENTIONS",
    "BILL_YIELD_CONVENTIONS",
]
