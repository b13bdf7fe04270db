"""Binomial vanilla engine with Greeks taken from the valuation-date nodes.

The lattice is rooted two steps before the valuation date, so three nodes
survive the rollback to t=0. The middle one gives the value; the two side nodes
give delta and gamma by finite differences without building a second tree.
Theta then follows from the Black-Scholes PDE using the flattened inputs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lattice_pricing.market.day_count import year_fraction
from lattice_pricing.market.process import BlackScholesProcess
from lattice_pricing.options.errors import (
    InsufficientResolutionError,
    LatticeConsistencyError,
    UnsupportedPayoffError,
)
from lattice_pricing.options.instruments import (
    Exercise,
    Payoff,
    PlainVanillaPayoff,
    VanillaOption,
)
from lattice_pricing.options.lattice import (
    NODES_AT_VALUATION,
    DiscretizedVanillaOption,
    MarketSnapshot,
    PriceLattice,
    TimeGrid,
    TreeBuilder,
    black_scholes_theta,
    flatten_process,
    get_tree_builder,
    lattice_delta_gamma,
)
from lattice_pricing.options.types import ExerciseStyle, PricingResult

logger = logging.getLogger(__name__)

MIN_STEPS = 2


def exercise_times(exercise: Exercise, snapshot: MarketSnapshot) -> tuple[float, ...]:
    """Convert an exercise schedule to year fractions from the valuation date.

    American schedules map to an ``(earliest, latest)`` window, the window
    opening at t=0 when no earliest date is set or it is already past.
    """
    def _t(d) -> float:
        return year_fraction(snapshot.valuation_date, d, snapshot.day_count)

    if exercise.style == ExerciseStyle.AMERICAN:
        earliest = 0.0 if exercise.earliest is None else max(_t(exercise.earliest), 0.0)
        return (earliest, snapshot.maturity)
    return tuple(_t(d) for d in exercise.dates)


@dataclass(frozen=True)
class BinomialVanillaEngine:
    """Price vanilla options on a binomial lattice.

    Args:
        tree: Tree builder instance or registry name (``"crr"``, ``"jr"``,
            ``"tian"``, ``"trigeorgis"``).
        steps: Number of time steps between the valuation date and maturity.

    Raises:
        InsufficientResolutionError: If `steps < 2`.
    """

    tree: TreeBuilder | str = "crr"
    steps: int = 100

    def __post_init__(self) -> None:
        if self.steps < MIN_STEPS:
            raise InsufficientResolutionError(
                f"at least {MIN_STEPS} time steps required, {self.steps} provided"
            )
        object.__setattr__(self, "tree", get_tree_builder(self.tree))

    def calculate(
        self, process: BlackScholesProcess, option: VanillaOption
    ) -> PricingResult:
        """Value, delta, gamma and theta of `option` under `process`."""
        exercise = option.exercise
        snapshot = flatten_process(process, exercise.last_date, option.payoff)
        if not exercise.permits_early_exercise:
            return self.price_snapshot(snapshot, option.payoff)
        return self.price_snapshot(
            snapshot,
            option.payoff,
            exercise_style=exercise.style,
            exercise_times=exercise_times(exercise, snapshot),
        )

    def price_snapshot(
        self,
        snapshot: MarketSnapshot,
        payoff: Payoff,
        exercise_style: ExerciseStyle = ExerciseStyle.EUROPEAN,
        exercise_times: Sequence[float] | None = None,
    ) -> PricingResult:
        """Price from already flattened market inputs.

        `exercise_times` defaults to the full ``[0, maturity]`` window for
        american exercise and to maturity otherwise.
        """
        if not isinstance(payoff, PlainVanillaPayoff):
            raise UnsupportedPayoffError(
                f"non-plain payoff given: {type(payoff).__name__}"
            )
        style = ExerciseStyle(exercise_style)
        if exercise_times is None:
            if style == ExerciseStyle.AMERICAN:
                exercise_times = (0.0, snapshot.maturity)
            else:
                exercise_times = (snapshot.maturity,)

        grid = TimeGrid(snapshot.maturity, self.steps)
        geometry = self.tree.build(
            snapshot.flat_process(), snapshot.maturity, self.steps, payoff.strike
        )
        lattice = PriceLattice(geometry, grid, snapshot.spot, snapshot.risk_free_rate)

        option = DiscretizedVanillaOption(payoff, style, exercise_times, grid)
        option.initialize(lattice, snapshot.maturity)
        option.rollback(0.0)

        values = option.values
        if values.size != NODES_AT_VALUATION:
            raise LatticeConsistencyError(
                f"Expect {NODES_AT_VALUATION} nodes in grid at 0 step, got {values.size}"
            )

        value, delta, gamma = lattice_delta_gamma(values, lattice.underlying_prices(0))
        theta = black_scholes_theta(
            value,
            delta,
            gamma,
            spot=snapshot.spot,
            rate=snapshot.risk_free_rate,
            dividend_yield=snapshot.dividend_yield,
            volatility=snapshot.volatility,
        )

        result = PricingResult(value=value, delta=delta, gamma=gamma, theta=theta)
        logger.debug(
            "%s %s %s K=%.4f, %s tree, %d steps: %s",
            style.value,
            payoff.option_type,
            snapshot.valuation_date.date(),
            payoff.strike,
            self.tree.name,
            self.steps,
            result,
        )
        return result
