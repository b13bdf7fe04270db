"""Lattice results over increasing step counts, against the closed form."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from lattice_pricing.market.process import BlackScholesProcess
from lattice_pricing.options.engines.binomial_engine import BinomialVanillaEngine
from lattice_pricing.options.engines.bs_pricer import BlackScholesPricer
from lattice_pricing.options.instruments import VanillaOption
from lattice_pricing.options.lattice import TreeBuilder, flatten_process
from lattice_pricing.options.types import PricingResult

logger = logging.getLogger(__name__)


def european_benchmark(
    process: BlackScholesProcess, option: VanillaOption
) -> PricingResult | None:
    """Black-Scholes value and Greeks on the flattened inputs of `option`.

    None when the option may be exercised early or volatility is zero, since
    no closed form applies then.
    """
    if option.exercise.permits_early_exercise:
        return None
    snap = flatten_process(process, option.exercise.last_date, option.payoff)
    return BlackScholesPricer().benchmark(snap, option.payoff)


def convergence_table(
    process: BlackScholesProcess,
    option: VanillaOption,
    tree: TreeBuilder | str = "crr",
    steps: Iterable[int] = (25, 50, 100, 200, 400),
) -> pd.DataFrame:
    """Price `option` once per step count.

    Returns a frame indexed by ``steps`` with ``value``, ``delta``, ``gamma``
    and ``theta``. For European exercise with positive volatility it also
    carries ``bs_<greek>`` benchmark columns and ``value_error``.
    """
    rows = []
    for n in sorted(set(int(s) for s in steps)):
        result = BinomialVanillaEngine(tree=tree, steps=n).calculate(process, option)
        rows.append({"steps": n, **result.as_dict()})
    if not rows:
        raise ValueError("steps must contain at least one step count")

    table = pd.DataFrame(rows).set_index("steps")

    bench = european_benchmark(process, option)
    if bench is not None:
        for name, value in bench.as_dict().items():
            table[f"bs_{name}"] = value
        table["value_error"] = (table["value"] - table["bs_value"]).abs()

    logger.debug("Convergence table over %d step counts", len(table))
    return table
