"""
Date utilities for rates calculations.

Provides:
- Tenor parsing and date arithmetic
- Coupon schedule generation for bonds
- Time measure (ACT/365) from a valuation date to a cash flow date
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple
import re

from .conventions import (
    BusinessDayConvention,
    DayCount,
    accrual_factor_icma,
    adjust_business_day,
    is_business_day,
    year_fraction
)


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_months(start: date, months: int) -> date:
        """Add (possibly negative) months, clipping the day to the month end."""
        year = start.year + (start.month + months - 1) // 12
        month = (start.month + months - 1) % 12 + 1
        day = min(start.day, _days_in_month(year, month))
        return date(year, month, day)

    @staticmethod
    def add_business_days(start: date, days: int, holidays: Optional[set] = None) -> date:
        """Move forward by a number of business days."""
        result = start
        added = 0
        while added < days:
            result += timedelta(days=1)
            if is_business_day(result, holidays):
                added += 1
        return result

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date.

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "1D", "3M", "2Y")
            holidays: Optional holiday calendar

        Returns:
            End date
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return DateUtils.add_business_days(start, amount, holidays)
        elif unit == 'W':
            return start + timedelta(weeks=amount)
        elif unit == 'M':
            return DateUtils.add_months(start, amount)
        elif unit == 'Y':
            return DateUtils.add_months(start, 12 * amount)
        raise ValueError(f"Unknown tenor unit: {unit}")

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        """
        Convert tenor to approximate year fraction.

        Args:
            tenor: Tenor string

        Returns:
            Approximate years as float
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return amount / 365.0
        elif unit == 'W':
            return amount * 7 / 365.0
        elif unit == 'M':
            return amount / 12.0
        elif unit == 'Y':
            return float(amount)
        raise ValueError(f"Unknown tenor unit: {unit}")

    @staticmethod
    def time_between(valuation: date, target: date) -> float:
        """Signed ACT/365 time from valuation to target, as used by the curves."""
        return (target - valuation).days / 365.0

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        frequency: int
    ) -> List[date]:
        """
        Generate unadjusted coupon dates rolling backward from the end date.

        Args:
            start: Schedule start (first accrual date)
            end: Schedule end (maturity)
            frequency: Payments per year (1=annual, 2=semi, 4=quarterly, 12=monthly)

        Returns:
            Dates [start, c_1, ..., end]; a short first period is kept as a stub
        """
        if frequency <= 0 or 12 % frequency != 0:
            raise ValueError("Frequency must divide 12")

        months_per_period = 12 // frequency
        dates = [end]
        k = 1
        while True:
            prev_date = DateUtils.add_months(end, -k * months_per_period)
            if prev_date <= start:
                break
            dates.insert(0, prev_date)
            k += 1
        dates.insert(0, start)
        return dates


@dataclass
class ScheduleInfo:
    """Container for a coupon schedule with accrual information."""
    payment_dates: List[date]
    accrual_starts: List[date]
    accrual_ends: List[date]
    year_fractions: List[float]
    day_count: DayCount


def generate_bond_schedule(
    first_accrual: date,
    maturity: date,
    coupon_freq: int,
    day_count: DayCount,
    business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
    holidays: Optional[set] = None
) -> ScheduleInfo:
    """
    Generate a bond coupon schedule with accrual periods.

    Accrual periods use unadjusted dates; payment dates are adjusted.

    Args:
        first_accrual: First accrual (issue) date
        maturity: Maturity date
        coupon_freq: Coupons per year (2 for semi-annual)
        day_count: Day count convention
        business_day: Payment date adjustment
        holidays: Holiday calendar

    Returns:
        ScheduleInfo with payment dates and accrual fractions
    """
    dates = DateUtils.generate_schedule(first_accrual, maturity, coupon_freq)
    months_per_period = 12 // coupon_freq

    accrual_starts = dates[:-1]
    accrual_ends = dates[1:]
    payment_dates = [adjust_business_day(d, business_day, holidays) for d in accrual_ends]

    yfs = []
    for start, end in zip(accrual_starts, accrual_ends):
        if day_count == DayCount.ACT_ACT_ICMA:
            # Stub periods are measured against the notional regular period
            notional_start = DateUtils.add_months(end, -months_per_period)
            yfs.append(accrual_factor_icma(start, end, notional_start, end, coupon_freq))
        else:
            yfs.append(year_fraction(start, end, day_count))

    return ScheduleInfo(
        payment_dates=payment_dates,
        accrual_starts=accrual_starts,
        accrual_ends=accrual_ends,
        year_fractions=yfs,
        day_count=day_count
    )


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


__all__ = [
    "DateUtils",
    "ScheduleInfo",
    "generate_bond_schedule",
]
