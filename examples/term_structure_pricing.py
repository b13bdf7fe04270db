"""Price one option under term-structured market data on every tree.

This script demonstrates the library path end to end:
1) build zero-rate and Black-vol curves from date-indexed Series,
2) wrap them in a `BlackScholesProcess`,
3) price European, Bermudan and American puts with each tree builder,
4) print a convergence table against the closed form.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass

import pandas as pd

from lattice_pricing.market import BlackScholesProcess
from lattice_pricing.options import (
    BinomialVanillaEngine,
    Exercise,
    PlainVanillaPayoff,
    VanillaOption,
    convergence_table,
)
from lattice_pricing.utils.logging_config import setup_logging


@dataclass(frozen=True)
class ExampleConfig:
    """Runtime configuration for the example."""

    valuation_date: pd.Timestamp
    spot: float
    strike: float
    steps: int


def _parse_args() -> ExampleConfig:
    parser = argparse.ArgumentParser(description="Price a put on each binomial tree.")
    parser.add_argument("--valuation-date", default="2025-01-02")
    parser.add_argument("--spot", type=float, default=100.0)
    parser.add_argument("--strike", type=float, default=105.0)
    parser.add_argument("--steps", type=int, default=300)
    args = parser.parse_args()
    return ExampleConfig(
        valuation_date=pd.Timestamp(args.valuation_date),
        spot=args.spot,
        strike=args.strike,
        steps=args.steps,
    )


def _build_process(cfg: ExampleConfig) -> BlackScholesProcess:
    ref = cfg.valuation_date
    pillars = [ref + pd.DateOffset(months=m) for m in (3, 6, 12, 24)]
    rates = pd.Series([0.042, 0.044, 0.046, 0.045], index=pillars)
    vols = pd.Series([0.24, 0.23, 0.22, 0.215], index=pillars)
    return BlackScholesProcess.from_inputs(
        spot=cfg.spot,
        rate=rates,
        volatility=vols,
        reference_date=ref,
        dividend_yield=0.012,
    )


def main() -> None:
    setup_logging("INFO", colored=True)
    cfg = _parse_args()
    process = _build_process(cfg)

    expiry = cfg.valuation_date + pd.DateOffset(years=1)
    quarterly = [cfg.valuation_date + pd.DateOffset(months=m) for m in (3, 6, 9, 12)]
    payoff = PlainVanillaPayoff("put", cfg.strike)
    options = {
        "european": VanillaOption(payoff, Exercise.european(expiry)),
        "bermudan": VanillaOption(payoff, Exercise.bermudan(quarterly)),
        "american": VanillaOption(payoff, Exercise.american(expiry)),
    }

    rows = []
    for tree in ("crr", "jarrow_rudd", "tian", "trigeorgis"):
        engine = BinomialVanillaEngine(tree=tree, steps=cfg.steps)
        for style, option in options.items():
            result = engine.calculate(process, option)
            rows.append({"tree": tree, "exercise": style, **result.as_dict()})

    print(pd.DataFrame(rows).set_index(["tree", "exercise"]).round(5).to_string())
    print()
    print(convergence_table(process, options["european"]).round(5).to_string())


if __name__ == "__main__":
    main()
