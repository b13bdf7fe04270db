#!/usr/bin/env python
"""Price one vanilla option on a binomial lattice and print value and Greeks."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Mapping
from typing import Any

import pandas as pd

from lattice_pricing.apps._cli import (
    add_dry_run_arg,
    add_print_config_arg,
    collect_logging_overrides,
    log_dry_run,
    print_json,
)
from lattice_pricing.cli import (
    DEFAULT_LOGGING,
    add_config_arg,
    add_logging_args,
    build_config,
    setup_logging_from_config,
)
from lattice_pricing.market import BlackScholesProcess, to_timestamp
from lattice_pricing.options import (
    BinomialVanillaEngine,
    Exercise,
    ExerciseStyle,
    PlainVanillaPayoff,
    VanillaOption,
    convergence_table,
)
from lattice_pricing.options.convergence import european_benchmark

DEFAULT_CONFIG: dict[str, Any] = {
    "logging": DEFAULT_LOGGING,
    "dry_run": False,
    "market": {
        "valuation_date": None,
        "spot": 100.0,
        "rate": 0.05,
        "dividend_yield": 0.0,
        "volatility": 0.2,
        "day_count": "ACT/365F",
    },
    "option": {
        "type": "call",
        "strike": 100.0,
        "expiry": None,
        "exercise": "european",
        "earliest": None,
        "exercise_dates": None,
    },
    "engine": {
        "tree": "crr",
        "steps": 100,
    },
    "report": {
        "benchmark": True,
        "convergence_steps": None,
    },
}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Price a vanilla option on a binomial lattice."
    )
    add_config_arg(parser)
    add_logging_args(parser)
    add_print_config_arg(parser)
    add_dry_run_arg(parser)

    parser.add_argument("--valuation-date", type=str, default=None)
    parser.add_argument("--spot", type=float, default=None)
    parser.add_argument("--rate", type=float, default=None)
    parser.add_argument("--dividend-yield", type=float, default=None)
    parser.add_argument("--volatility", type=float, default=None)
    parser.add_argument("--day-count", type=str, default=None)

    parser.add_argument("--option-type", choices=["call", "put"], default=None)
    parser.add_argument("--strike", type=float, default=None)
    parser.add_argument("--expiry", type=str, default=None)
    parser.add_argument(
        "--exercise",
        choices=[s.value for s in ExerciseStyle],
        default=None,
    )
    parser.add_argument("--earliest", type=str, default=None)
    parser.add_argument("--exercise-dates", nargs="+", default=None)

    parser.add_argument("--tree", type=str, default=None)
    parser.add_argument("--steps", type=int, default=None)
    parser.add_argument(
        "--convergence-steps",
        nargs="+",
        type=int,
        default=None,
        help="Also price with each of these step counts.",
    )
    parser.add_argument(
        "--no-benchmark",
        dest="benchmark",
        action="store_false",
        help="Skip the closed-form Black-Scholes reference.",
    )
    parser.set_defaults(benchmark=None)
    return parser.parse_args(argv)


def _build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    sections: dict[str, dict[str, Any]] = {
        "market": {
            "valuation_date": args.valuation_date,
            "spot": args.spot,
            "rate": args.rate,
            "dividend_yield": args.dividend_yield,
            "volatility": args.volatility,
            "day_count": args.day_count,
        },
        "option": {
            "type": args.option_type,
            "strike": args.strike,
            "expiry": args.expiry,
            "exercise": args.exercise,
            "earliest": args.earliest,
            "exercise_dates": args.exercise_dates,
        },
        "engine": {"tree": args.tree, "steps": args.steps},
        "report": {
            "benchmark": args.benchmark,
            "convergence_steps": args.convergence_steps,
        },
    }

    overrides: dict[str, Any] = {}
    for name, values in sections.items():
        present = {k: v for k, v in values.items() if v is not None}
        if present:
            overrides[name] = present

    if args.dry_run:
        overrides["dry_run"] = True

    logging_overrides = collect_logging_overrides(args)
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


def _curve_input(value: Any) -> Any:
    """Mappings of ``date -> value`` in YAML become date-indexed Series."""
    if isinstance(value, Mapping):
        return pd.Series(dict(value), dtype=float)
    return value


def build_process(market: Mapping[str, Any]) -> BlackScholesProcess:
    valuation_date = market.get("valuation_date")
    ref = (
        pd.Timestamp.today().normalize()
        if valuation_date is None
        else to_timestamp(valuation_date)
    )
    return BlackScholesProcess.from_inputs(
        spot=float(market["spot"]),
        rate=_curve_input(market["rate"]),
        volatility=_curve_input(market["volatility"]),
        reference_date=ref,
        dividend_yield=_curve_input(market.get("dividend_yield", 0.0)),
        day_count=market.get("day_count", "ACT/365F"),
    )


def build_option(option: Mapping[str, Any], valuation_date: pd.Timestamp) -> VanillaOption:
    expiry = option.get("expiry")
    expiry_ts = (
        valuation_date + pd.DateOffset(years=1)
        if expiry is None
        else to_timestamp(expiry)
    )

    style = ExerciseStyle(str(option.get("exercise", "european")).lower())
    if style == ExerciseStyle.AMERICAN:
        exercise = Exercise.american(expiry_ts, option.get("earliest"))
    elif style == ExerciseStyle.BERMUDAN:
        dates = list(option.get("exercise_dates") or [])
        if not dates:
            raise ValueError("option.exercise_dates must be set for bermudan exercise")
        exercise = Exercise.bermudan([*dates, expiry_ts])
    else:
        exercise = Exercise.european(expiry_ts)

    payoff = PlainVanillaPayoff(option.get("type", "call"), float(option["strike"]))
    return VanillaOption(payoff=payoff, exercise=exercise)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    config = build_config(DEFAULT_CONFIG, args.config, _build_overrides(args))
    if args.print_config:
        print_json(config)
        return

    setup_logging_from_config(config.get("logging"))
    logger = logging.getLogger(__name__)

    process = build_process(config["market"])
    option = build_option(config["option"], process.reference_date)
    engine_cfg = config["engine"]
    engine = BinomialVanillaEngine(
        tree=engine_cfg.get("tree", "crr"), steps=int(engine_cfg.get("steps", 100))
    )
    report = config.get("report", {})
    convergence_steps = report.get("convergence_steps")

    logger.info("Valuation:  %s", process.reference_date.date())
    logger.info("Option:     %s %s K=%s", option.exercise.style.value,
                option.payoff.option_type.value, option.payoff.strike)
    logger.info("Expiry:     %s", option.exercise.last_date.date())
    logger.info("Tree:       %s, %d steps", engine.tree.name, engine.steps)

    if config.get("dry_run", False):
        log_dry_run(
            logger,
            {
                "action": "price_option",
                "valuation_date": process.reference_date,
                "spot": process.spot,
                "option": {
                    "type": option.payoff.option_type.value,
                    "strike": option.payoff.strike,
                    "exercise": option.exercise.style.value,
                    "dates": list(option.exercise.dates),
                },
                "tree": engine.tree.name,
                "steps": engine.steps,
                "convergence_steps": convergence_steps,
            },
        )
        return

    result = engine.calculate(process, option)
    logger.info(
        "Value %.6f | delta %.6f | gamma %.6f | theta %.6f",
        result.value,
        result.delta,
        result.gamma,
        result.theta,
    )

    payload: dict[str, Any] = {
        "valuation_date": process.reference_date,
        "tree": engine.tree.name,
        "steps": engine.steps,
        "result": result.as_dict(),
    }
    if report.get("benchmark", True):
        bench = european_benchmark(process, option)
        if bench is not None:
            payload["benchmark"] = bench.as_dict()
    if convergence_steps:
        table = convergence_table(process, option, engine.tree, convergence_steps)
        payload["convergence"] = table.reset_index().to_dict(orient="records")

    print_json(payload)


if __name__ == "__main__":
    main()
