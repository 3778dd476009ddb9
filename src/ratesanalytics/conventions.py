"""
Day count, business day and yield conventions for rates instruments.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, bills)
- ACT/365: Actual days / 365
- ACT/ACT ISDA: Actual days / actual days in year, split by calendar year
- ACT/ACT ICMA: Actual days / (frequency * days in coupon period) (government bonds)
- 30/360: 30 days per month / 360 (some swaps)
- BUS/252: Business days / 252 (Brazilian overnight-compounded swaps)

Business Day Conventions:
- Modified Following: Move to next business day, unless it falls in next month (then previous)
- Following: Move to next business day
- Preceding: Move to previous business day

Yield Conventions:
- US street, German bond, UK bump/DMO, Australian ex-dividend for coupon bonds
- Interest at maturity and discount for bills
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional
import calendar


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    ACT_ACT_ICMA = "ACT/ACT ICMA"
    THIRTY_360 = "30/360"
    BUS_252 = "BUS/252"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "ACT/ACTISDA": cls.ACT_ACT,
            "ACT/ACTICMA": cls.ACT_ACT_ICMA,
            "ACTACTICMA": cls.ACT_ACT_ICMA,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
            "BUS/252": cls.BUS_252,
            "BUS252": cls.BUS_252,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


class YieldConvention(Enum):
    """Bond and bill yield-to-maturity conventions."""
    US_STREET = "STREET CONVENTION"
    GERMAN_BOND = "GERMAN BONDS"
    UK_BUMP_DMO = "UK:BUMP/DMO METHOD"
    AUSTRALIA_EX_DIVIDEND = "AUSTRALIA EX DIVIDEND"
    INTEREST_AT_MATURITY = "INTEREST@MTY"
    DISCOUNT = "DISCOUNT"


@dataclass(frozen=True)
class Calendar:
    """
    Weekend-and-holiday business day calendar.

    Attributes:
        name: Calendar identifier
        holidays: Set of non-business dates on top of weekends
    """
    name: str = "WEEKEND"
    holidays: frozenset = frozenset()

    def is_business_day(self, d: date) -> bool:
        return is_business_day(d, self.holidays)


@dataclass
class Conventions:
    """
    Container for bond instrument conventions.

    Attributes:
        day_count: Day count convention for accrual
        business_day: Business day adjustment rule
        yield_convention: Price/yield formula
        payment_frequency: Number of payments per year (1=annual, 2=semi, 4=quarterly)
        settlement_days: Business days to settle from trade date
        ex_dividend_days: Calendar days before a coupon date when the bond trades ex-coupon
    """
    day_count: DayCount = DayCount.ACT_ACT_ICMA
    business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    yield_convention: YieldConvention = YieldConvention.US_STREET
    payment_frequency: int = 2
    settlement_days: int = 1
    ex_dividend_days: int = 0

    @classmethod
    def us_treasury(cls) -> "Conventions":
        """US Treasury note and bond conventions."""
        return cls(
            day_count=DayCount.ACT_ACT_ICMA,
            business_day=BusinessDayConvention.FOLLOWING,
            yield_convention=YieldConvention.US_STREET,
            payment_frequency=2,
            settlement_days=3,
        )

    @classmethod
    def german_bund(cls) -> "Conventions":
        """German government bond conventions."""
        return cls(
            day_count=DayCount.ACT_ACT_ICMA,
            business_day=BusinessDayConvention.FOLLOWING,
            yield_convention=YieldConvention.GERMAN_BOND,
            payment_frequency=1,
            settlement_days=3,
        )

    @classmethod
    def uk_gilt(cls) -> "Conventions":
        """UK gilt conventions (7 days ex-dividend)."""
        return cls(
            day_count=DayCount.ACT_ACT_ICMA,
            business_day=BusinessDayConvention.FOLLOWING,
            yield_convention=YieldConvention.UK_BUMP_DMO,
            payment_frequency=2,
            settlement_days=1,
            ex_dividend_days=7,
        )

    @classmethod
    def australian_government(cls) -> "Conventions":
        """Australian government bond conventions."""
        return cls(
            day_count=DayCount.ACT_ACT_ICMA,
            business_day=BusinessDayConvention.FOLLOWING,
            yield_convention=YieldConvention.AUSTRALIA_EX_DIVIDEND,
            payment_frequency=2,
            settlement_days=3,
            ex_dividend_days=7,
        )


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float

    Conventions:
        ACT/360: (end - start).days / 360
        ACT/365: (end - start).days / 365
        ACT/ACT: Actual days / actual days in period's year(s)
        30/360: Assumes 30 days per month, 360 days per year
        ACT/ACT ICMA and BUS/252 need coupon period or calendar information;
        use accrual_factor_icma or day_count_fraction.
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA ACT/ACT: split by year boundaries
        if start.year == end.year:
            return actual_days / _days_in_year(start.year)
        total = (date(start.year + 1, 1, 1) - start).days / _days_in_year(start.year)
        total += end.year - start.year - 1
        total += (end - date(end.year, 1, 1)).days / _days_in_year(end.year)
        return total

    elif day_count == DayCount.THIRTY_360:
        # 30/360 US convention
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    elif day_count == DayCount.BUS_252:
        return business_days_between(start, end) / 252.0

    elif day_count == DayCount.ACT_ACT_ICMA:
        raise ValueError("ACT/ACT ICMA requires the coupon period; use accrual_factor_icma")

    else:
        raise ValueError(f"Unknown day count: {day_count}")


def day_count_fraction(
    start: date,
    end: date,
    day_count: DayCount,
    holidays: Optional[set] = None
) -> float:
    """
    Year fraction for a coupon, with a calendar for business-day counts.

    Args:
        start: Accrual start date
        end: Accrual end date
        day_count: Day count convention
        holidays: Holiday set used by BUS/252

    Returns:
        Year fraction
    """
    if day_count == DayCount.BUS_252:
        return business_days_between(start, end, holidays) / 252.0
    return year_fraction(start, end, day_count)


def accrual_factor_icma(
    start: date,
    end: date,
    period_start: date,
    period_end: date,
    frequency: int
) -> float:
    """
    ACT/ACT ICMA accrual factor for [start, end] inside a regular coupon period.

    Args:
        start: Accrual start
        end: Accrual end
        period_start: Coupon period start
        period_end: Coupon period end
        frequency: Coupons per year

    Returns:
        Year fraction (days / (frequency * days in period))
    """
    period_days = (period_end - period_start).days
    if period_days <= 0:
        return 0.0
    return (end - start).days / (frequency * period_days)


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """
    Check if a date is a business day.

    Uses weekend-only calendar by default (Saturday/Sunday are non-business days).

    Args:
        d: Date to check
        holidays: Optional set of holiday dates

    Returns:
        True if business day, False otherwise
    """
    # Weekend check (0 = Monday, 5 = Saturday, 6 = Sunday)
    if d.weekday() >= 5:
        return False

    if holidays and d in holidays:
        return False

    return True


def business_days_between(start: date, end: date, holidays: Optional[set] = None) -> int:
    """Number of business days in [start, end)."""
    count = 0
    current = start
    while current < end:
        if is_business_day(current, holidays):
            count += 1
        current += timedelta(days=1)
    return count


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.FOLLOWING:
        return _roll(d, 1, holidays)

    elif convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    elif convention == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = _roll(d, 1, holidays)
        # If we crossed into next month, go preceding instead
        if adjusted.month != d.month:
            adjusted = _roll(d, -1, holidays)
        return adjusted

    return d


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=step)
    return adjusted


def _days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "YieldConvention",
    "Calendar",
    "Conventions",
    "year_fraction",
    "day_count_fraction",
    "accrual_factor_icma",
    "is_business_day",
    "business_days_between",
    "adjust_business_day",
]
