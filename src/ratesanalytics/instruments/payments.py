"""
Payments and coupons.

All times are year fractions from the valuation date. A negative notional
(or amount) means the holder pays the cash flow.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple

from ..errors import ArgumentError, not_empty


@dataclass(frozen=True)
class PaymentFixed:
    """A fixed amount paid at payment_time."""
    currency: str
    payment_time: float
    amount: float

    @property
    def notional(self) -> float:
        return self.amount


@dataclass(frozen=True)
class CouponFixed:
    """
    Fixed rate coupon.

    Attributes:
        currency: Payment currency
        payment_time: Time of payment
        payment_year_fraction: Accrual fraction used for the amount
        notional: Signed notional
        fixed_rate: Coupon rate (decimal)
        accrual_start_date: Start of the accrual period, when known
        accrual_end_date: End of the accrual period, when known
    """
    currency: str
    payment_time: float
    payment_year_fraction: float
    notional: float
    fixed_rate: float
    accrual_start_date: Optional[date] = None
    accrual_end_date: Optional[date] = None

    @property
    def amount(self) -> float:
        return self.notional * self.fixed_rate * self.payment_year_fraction


@dataclass(frozen=True)
class CouponIbor:
    """
    Ibor coupon paying notional * accrual * (index + spread).

    Attributes:
        currency: Payment currency
        payment_time: Time of payment
        payment_year_fraction: Accrual fraction of the payment
        notional: Signed notional
        fixing_time: Index fixing time
        fixing_period_start_time: Start of the index deposit period
        fixing_period_end_time: End of the index deposit period
        fixing_accrual_factor: Accrual fraction of the index deposit period
        index_name: Index whose forward curve projects the rate
        spread: Additive spread on the index
    """
    currency: str
    payment_time: float
    payment_year_fraction: float
    notional: float
    fixing_time: float
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    index_name: str
    spread: float = 0.0


@dataclass(frozen=True)
class CouponFixedAccruedCompounding:
    """Fixed coupon compounded over its period: notional * ((1 + K)^delta - 1)."""
    currency: str
    payment_time: float
    payment_year_fraction: float
    notional: float
    fixed_rate: float
    accrual_start_date: Optional[date] = None
    accrual_end_date: Optional[date] = None

    @property
    def amount(self) -> float:
        return self.notional * ((1.0 + self.fixed_rate) ** self.payment_year_fraction - 1.0)


@dataclass(frozen=True)
class CouponONCompounded:
    """
    Overnight compounded coupon.

    Pays notional_accrued * prod_j (1 + f_j)^delta_j - notional, where f_j are
    annually compounded overnight forwards over the fixing periods.
    """
    currency: str
    payment_time: float
    payment_year_fraction: float
    notional: float
    index_name: str
    fixing_period_start_times: Tuple[float, ...]
    fixing_period_end_times: Tuple[float, ...]
    fixing_period_accrual_factors: Tuple[float, ...]
    notional_accrued: Optional[float] = None

    def __post_init__(self):
        n = len(self.fixing_period_start_times)
        if n == 0:
            raise ArgumentError("Overnight coupon needs at least one fixing period")
        if len(self.fixing_period_end_times) != n or len(self.fixing_period_accrual_factors) != n:
            raise ArgumentError("Fixing period times and accrual factors must have the same length")
        if self.notional_accrued is None:
            object.__setattr__(self, "notional_accrued", self.notional)


@dataclass(frozen=True)
class Annuity:
    """
    A leg: ordered payments in a single currency.

    The leg is a payer leg when its first notional is negative.
    """
    payments: Tuple

    def __post_init__(self):
        not_empty(self.payments, "payments")
        object.__setattr__(self, "payments", tuple(self.payments))
        currencies = {p.currency for p in self.payments}
        if len(currencies) != 1:
            raise ArgumentError(f"Annuity payments must share one currency, got {sorted(currencies)}")

    @classmethod
    def of(cls, payments: Sequence) -> "Annuity":
        return cls(tuple(payments))

    @property
    def currency(self) -> str:
        return self.payments[0].currency

    @property
    def is_payer(self) -> bool:
        return self.payments[0].notional < 0

    def __len__(self) -> int:
        return len(self.payments)

    def __iter__(self):
        return iter(self.payments)

    def __getitem__(self, index):
        return self.payments[index]


__all__ = [
    "PaymentFixed",
    "CouponFixed",
    "CouponIbor",
    "CouponFixedAccruedCompounding",
    "CouponONCompounded",
    "Annuity",
]
