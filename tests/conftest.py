"""
Shared market fixtures.
"""

from datetime import date

import numpy as np
import pytest

from ratesanalytics.curves import Curve
from ratesanalytics.instruments import SwapFixedCompoundedON, SwapFixedIbor
from ratesanalytics.providers import (
    BlackSwaptionVolatilityProvider,
    GeneratorSwap,
    MulticurveProvider,
)

VALUATION_DATE = date(2024, 1, 15)
TIMES = [0.5, 1.0, 2.0, 5.0, 10.0, 20.0]


@pytest.fixture
def valuation_date():
    return VALUATION_DATE


@pytest.fixture
def multicurve():
    """USD discounting plus a 3M Ibor projection curve and a BRL CDI curve."""
    usd = Curve.from_zero_rates("USD-OIS", TIMES, [0.030, 0.032, 0.035, 0.037, 0.038, 0.039], currency="USD")
    libor = Curve.from_zero_rates("USD-LIBOR3M", TIMES, [0.033, 0.035, 0.038, 0.040, 0.041, 0.042], currency="USD")
    brl = Curve.from_zero_rates("BRL-DSC", TIMES, [0.100, 0.105, 0.110, 0.112, 0.113, 0.114], currency="BRL")
    cdi = Curve.from_zero_rates("BRL-CDI", TIMES, [0.098, 0.103, 0.108, 0.111, 0.112, 0.113], currency="BRL")
    return MulticurveProvider(
        discount_curves={"USD": usd, "BRL": brl},
        forward_curves={"USD3M": libor, "CDI": cdi},
    )


@pytest.fixture
def generator():
    return GeneratorSwap("USD6MLIBOR3M")


@pytest.fixture
def vol_surface(multicurve, generator):
    expiries = np.array([0.5, 1.0, 2.0, 5.0])
    tenors = np.array([1.0, 2.0, 5.0, 10.0])
    vols = np.array([
        [0.30, 0.29, 0.27, 0.25],
        [0.28, 0.27, 0.25, 0.24],
        [0.26, 0.25, 0.24, 0.23],
        [0.24, 0.23, 0.22, 0.21],
    ])
    return BlackSwaptionVolatilityProvider(multicurve, expiries, tenors, vols, generator)


def make_ibor_swap(rate=0.04, is_payer=True, start=date(2025, 1, 15), tenor_years=5):
    return SwapFixedIbor.from_dates(
        valuation_date=VALUATION_DATE,
        start_date=start,
        tenor_years=tenor_years,
        fixed_rate=rate,
        notional=1_000_000.0,
        is_payer=is_payer,
        index_name="USD3M",
    )


def make_on_swap(rate=0.11, is_payer=True, start=date(2025, 1, 15), end=date(2027, 1, 15)):
    return SwapFixedCompoundedON.from_dates(
        valuation_date=VALUATION_DATE,
        start_date=start,
        end_date=end,
        fixed_rate=rate,
        notional=1_000_000.0,
        is_payer=is_payer,
        index_name="CDI",
        currency="BRL",
    )


def bumped_pv(pv_func, provider, curve, bp):
    """PV with curve replaced by its parallel bump."""
    return pv_func(provider.with_curve(curve.bump_parallel(bp)))
