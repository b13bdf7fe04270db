"""Binomial-tree pricing engine for `OptionSpec` / `MarketState` inputs."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from lattice_pricing.options.engines.binomial_engine import BinomialVanillaEngine
from lattice_pricing.options.instruments import PlainVanillaPayoff
from lattice_pricing.options.lattice import MarketSnapshot
from lattice_pricing.options.types import (
    ExerciseStyle,
    MarketState,
    OptionSpec,
    PricingResult,
)


@dataclass(frozen=True)
class BinomialTreePricer:
    """Tree pricer supporting American and European exercise.

    Greeks come from the same lattice pass as the price, so this engine
    satisfies both `PriceModel` and `GreeksModel`.
    """

    steps: int = 200
    american: bool = True
    tree: str = "crr"
    _engine: BinomialVanillaEngine = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_engine", BinomialVanillaEngine(tree=self.tree, steps=self.steps)
        )

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        return self.price_and_greeks(spec, state).value

    def price_and_greeks(self, spec: OptionSpec, state: MarketState) -> PricingResult:
        snapshot = MarketSnapshot(
            valuation_date=pd.Timestamp.today().normalize(),
            maturity=spec.time_to_expiry,
            spot=state.spot,
            risk_free_rate=state.rate,
            dividend_yield=state.dividend_yield,
            volatility=state.volatility,
        )
        style = ExerciseStyle.AMERICAN if self.american else ExerciseStyle.EUROPEAN
        return self._engine.price_snapshot(
            snapshot,
            PlainVanillaPayoff(spec.option_type, spec.strike),
            exercise_style=style,
        )
