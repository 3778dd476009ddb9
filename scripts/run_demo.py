#!/usr/bin/env python
"""
Rates Analytics Demo Script

This script walks through the library on a small in-memory market:
1. Build discount, forward and issuer curves and a swaption volatility surface
2. Price swaps and swaptions (Black and G2++)
3. Price a Treasury bond and a bill, with yields, durations and z-spread
4. Compute curve and volatility sensitivities
5. Export the risk tables

Usage:
    python run_demo.py [--output-dir OUTPUT_DIR] [--verbose]
"""

import argparse
import logging
from datetime import date
from pathlib import Path

import numpy as np
import pandas as pd

from ratesanalytics import (
    BILL_METHOD,
    BOND_METHOD,
    SWAP_FIXED_IBOR_METHOD,
    SWAPTION_G2PP_APPROXIMATION_METHOD,
    SWAPTION_PHYSICAL_IBOR_METHOD,
    BillDefinition,
    BlackSwaptionVolatilityProvider,
    Curve,
    FixedCouponBondDefinition,
    FxMatrix,
    G2ppParameters,
    G2ppProvider,
    GeneratorSwap,
    IssuerProvider,
    MulticurveProvider,
    SwapFixedCompoundedON,
    SwapFixedIbor,
    SwaptionCashFixedCompoundedON,
    SwaptionPhysicalFixedIbor,
    configure_logging,
    price_trade,
    risk_trade,
)
from ratesanalytics.dates import DateUtils
from ratesanalytics.sensitivities import MulticurveSensitivity, parameter_sensitivity

TIMES = [0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0, 20.0, 30.0]


def build_market(valuation_date: date):
    """Curves, issuer curves and the Black surface."""
    print("\n" + "=" * 60)
    print("Building Market")
    print("=" * 60)

    ois = Curve.from_zero_rates(
        "USD-OIS", TIMES, [0.0530, 0.0520, 0.0495, 0.0445, 0.0420, 0.0400, 0.0395, 0.0395, 0.0405, 0.0400],
        currency="USD", anchor_date=valuation_date,
    )
    libor = Curve.from_zero_rates(
        "USD-LIBOR3M", TIMES, ois.node_rates + 0.0025, currency="USD", anchor_date=valuation_date,
    )
    ust = Curve.from_zero_rates(
        "UST", TIMES, [0.0535, 0.0525, 0.0490, 0.0435, 0.0410, 0.0395, 0.0400, 0.0405, 0.0430, 0.0420],
        currency="USD", anchor_date=valuation_date,
    )
    brl = Curve.from_zero_rates("BRL-DSC", TIMES, [0.112] * len(TIMES), currency="BRL", anchor_date=valuation_date)
    cdi = Curve.from_zero_rates("BRL-CDI", TIMES, [0.110] * len(TIMES), currency="BRL", anchor_date=valuation_date)

    fx = FxMatrix.builder().add("USD", "BRL", 4.95).build()
    multicurve = MulticurveProvider(
        discount_curves={"USD": ois, "BRL": brl},
        forward_curves={"USD3M": libor, "CDI": cdi},
        fx_matrix=fx,
    )
    issuers = IssuerProvider(multicurve, {"UST": ust})

    quotes = pd.DataFrame(
        [(e, t, v) for e, row in zip(["6M", "1Y", "2Y", "5Y"], [
            [0.32, 0.30, 0.27, 0.25],
            [0.30, 0.28, 0.26, 0.24],
            [0.27, 0.26, 0.24, 0.23],
            [0.24, 0.23, 0.22, 0.21],
        ]) for t, v in zip(["1Y", "2Y", "5Y", "10Y"], row)],
        columns=["expiry", "tenor", "vol"],
    )
    surface = BlackSwaptionVolatilityProvider.from_dataframe(quotes, multicurve, GeneratorSwap("USD6MLIBOR3M"))

    for name, curve in multicurve.curves().items():
        print(f"  {name:<12s} 5Y zero: {curve.zero_rate(5.0) * 100:.3f}%")
    print(f"  USD/BRL: {fx.fx_rate('USD', 'BRL'):.4f}")
    print("\nBlack volatility surface:")
    print(surface.to_frame().round(4).to_string())
    return multicurve, issuers, surface


def price_swaps_and_swaptions(valuation_date: date, multicurve, surface) -> dict:
    print("\n" + "=" * 60)
    print("Swaps and Swaptions")
    print("=" * 60)

    start = date(2025, 1, 15)
    swap = SwapFixedIbor.from_dates(
        valuation_date=valuation_date, start_date=start, tenor_years=5, fixed_rate=0.04,
        notional=10_000_000, is_payer=True, index_name="USD3M",
    )
    forward = SWAP_FIXED_IBOR_METHOD.forward(swap, multicurve)
    print(f"  1Yx5Y forward swap rate: {forward * 100:.4f}%")
    print(f"  Payer swap PV: {SWAP_FIXED_IBOR_METHOD.present_value(swap, multicurve).get_amount('USD'):,.2f}")

    expiry = DateUtils.time_between(valuation_date, start)
    swaption = SwaptionPhysicalFixedIbor.from_swap(swap, expiry)
    output = price_trade(swaption, surface)
    print(f"  Payer swaption PV (Black): {output.pv:,.2f} at {output.details['implied_vol'] * 100:.2f}% vol")
    delta = SWAPTION_PHYSICAL_IBOR_METHOD.delta(swaption, surface).amount
    print(f"  Delta: {delta:,.2f}  Theta: {SWAPTION_PHYSICAL_IBOR_METHOD.theta(swaption, surface).amount:,.2f}")

    g2 = G2ppProvider(multicurve, G2ppParameters.constant((0.02, 0.30), (0.009, 0.006), -0.50))
    g2_pv = SWAPTION_G2PP_APPROXIMATION_METHOD.present_value(swaption, g2).amount
    print(f"  Payer swaption PV (G2++):  {g2_pv:,.2f}")

    on_swap = SwapFixedCompoundedON.from_dates(
        valuation_date=valuation_date, start_date=start, end_date=date(2027, 1, 15), fixed_rate=0.115,
        notional=50_000_000, is_payer=False, index_name="CDI", currency="BRL",
    )
    cash = SwaptionCashFixedCompoundedON.from_swap(on_swap, expiry)
    cash_output = price_trade(cash, surface)
    print(f"  BRL cash receiver swaption PV: {cash_output.pv:,.2f} BRL "
          f"({multicurve.fx_matrix.fx_rate('BRL', 'USD') * cash_output.pv:,.2f} USD)")

    return {"swaption": risk_trade(swaption, surface)}


def price_bonds(valuation_date: date, issuers) -> dict:
    print("\n" + "=" * 60)
    print("Bonds and Bills")
    print("=" * 60)

    definition = FixedCouponBondDefinition("USD", date(2023, 11, 15), date(2033, 11, 15), 0.045, "UST")
    bond = definition.to_derivative(valuation_date)
    output = price_trade(bond, issuers)
    y = output.details["yield"]
    print(f"  UST 4.5% 2033: clean {output.details['clean'] * 100:.4f} dirty {output.details['dirty'] * 100:.4f}")
    print(f"    yield {y * 100:.4f}%  mod dur {output.details['modified_duration']:.4f}  "
          f"convexity {BOND_METHOD.convexity_from_yield(bond, y):.4f}")
    z = BOND_METHOD.z_spread_from_curves_and_clean_price(bond, issuers, output.details["clean"] - 0.005)
    print(f"    z-spread at clean - 0.5: {z * 1e4:.2f}bp")

    bill = BillDefinition("USD", date(2024, 7, 11), 1_000_000, "UST").to_derivative(valuation_date)
    print(f"  Bill 2024-07-11: price {BILL_METHOD.price_from_curves(bill, issuers):.6f} "
          f"yield {BILL_METHOD.yield_from_curves(bill, issuers) * 100:.4f}%")

    return {"bond": risk_trade(bond, issuers)}


def report_risk(risks: dict, multicurve, output_dir: Path) -> None:
    print("\n" + "=" * 60)
    print("Risk")
    print("=" * 60)

    output_dir.mkdir(parents=True, exist_ok=True)
    curve_sens = risks["swaption"]["curve_sensitivity"]
    print("  Swaption parallel PV01 by curve (per bp):")
    for name, total in curve_sens.groupby("curve")["sensitivity"].sum().items():
        print(f"    {name:<12s} {total * 1e-4:,.2f}")

    curves = multicurve.curves()
    rows = []
    for name, group in curve_sens.groupby("curve"):
        points = list(zip(group["time"], group["sensitivity"]))
        nodes = parameter_sensitivity(MulticurveSensitivity.of(name, points), curves)[name]
        rows.extend({"curve": name, "node": t, "pv01": v * 1e-4} for t, v in zip(curves[name].node_times, nodes))
    node_df = pd.DataFrame(rows)
    print("\n  Key rate PV01 (non-zero nodes):")
    print(node_df[np.abs(node_df["pv01"]) > 1e-6].round(2).to_string(index=False))

    curve_sens.to_csv(output_dir / "swaption_curve_sensitivity.csv", index=False)
    risks["swaption"]["black_sensitivity"].to_csv(output_dir / "swaption_vega.csv", index=False)
    risks["bond"]["curve_sensitivity"].to_csv(output_dir / "bond_curve_sensitivity.csv", index=False)
    node_df.to_csv(output_dir / "swaption_key_rate_pv01.csv", index=False)
    print(f"\nReports written to {output_dir}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Rates Analytics Demo")
    parser.add_argument(
        "--output-dir",
        type=str,
        default="./output",
        help="Output directory for reports"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log solver and dispatch details",
    )
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    valuation_date = date(2024, 1, 15)

    print("=" * 60)
    print("RATES ANALYTICS DEMO")
    print(f"Valuation Date: {valuation_date}")
    print("=" * 60)

    multicurve, issuers, surface = build_market(valuation_date)
    risks = price_swaps_and_swaptions(valuation_date, multicurve, surface)
    risks.update(price_bonds(valuation_date, issuers))
    report_risk(risks, multicurve, Path(args.output_dir))


if __name__ == "__main__":
    main()
