"""Backward induction of a vanilla option over the price lattice."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from lattice_pricing.options.instruments import Payoff
from lattice_pricing.options.lattice.price_lattice import PriceLattice
from lattice_pricing.options.lattice.time_grid import TimeGrid
from lattice_pricing.options.types import ExerciseStyle


class DiscretizedVanillaOption:
    """Node values of a vanilla option at the current lattice step.

    Values live in a single buffer sized for the terminal step; after rolling
    back to step ``k`` only the leading ``k + 3`` entries are meaningful.

    `exercise_times` are year fractions from the valuation date:

    - european: ignored;
    - american: ``(earliest, latest)`` exercise window;
    - bermudan: every exercise time, snapped to the closest grid step.
    """

    def __init__(
        self,
        payoff: Payoff,
        exercise_style: ExerciseStyle,
        exercise_times: Sequence[float],
        grid: TimeGrid,
    ) -> None:
        self.payoff = payoff
        self.exercise_style = ExerciseStyle(exercise_style)
        self.grid = grid

        times = [float(t) for t in exercise_times]
        self._window: tuple[float, float] | None = None
        self._exercise_steps: frozenset[int] = frozenset()
        if self.exercise_style == ExerciseStyle.AMERICAN:
            if len(times) != 2 or times[0] > times[1]:
                raise ValueError("american exercise needs an (earliest, latest) window")
            self._window = (times[0], times[1])
        elif self.exercise_style == ExerciseStyle.BERMUDAN:
            self._exercise_steps = frozenset(
                grid.closest_index(t) for t in times if t >= 0.0
            )

        self.lattice: PriceLattice | None = None
        self.step: int | None = None
        self._buffer = np.empty(0)
        self._size = 0

    @property
    def time(self) -> float:
        if self.step is None:
            raise RuntimeError("option not initialized")
        return self.grid[self.step]

    @property
    def values(self) -> np.ndarray:
        """Copy of the node values at the current step, lowest price first."""
        return self._buffer[: self._size].copy()

    def exercise_allowed(self, step: int) -> bool:
        """Whether the holder may exercise at `step` (before maturity)."""
        if self.exercise_style == ExerciseStyle.AMERICAN:
            earliest, latest = self._window
            t = self.grid[step]
            tol = 1e-10 * max(1.0, self.grid.end)
            return earliest - tol <= t <= latest + tol
        if self.exercise_style == ExerciseStyle.BERMUDAN:
            return step in self._exercise_steps
        return False

    def initialize(self, lattice: PriceLattice, t: float) -> None:
        """Set the payoff as boundary condition at time `t` (normally maturity)."""
        if lattice.steps != self.grid.steps:
            raise ValueError("lattice and option must share the same time grid")

        step = self.grid.index(t)
        self.lattice = lattice
        self.step = step
        self._buffer = np.empty(lattice.size(lattice.steps), dtype=float)
        self._size = lattice.size(step)
        self._buffer[: self._size] = self.payoff(lattice.underlying_prices(step))

    def rollback(self, to: float) -> None:
        """Step backward until the current time equals `to`."""
        if self.step is None:
            raise RuntimeError("option not initialized")
        target = self.grid.index(to)
        if target > self.step:
            raise ValueError(
                f"cannot roll forward from t={self.time} to t={self.grid[target]}"
            )
        while self.step > target:
            self._step_back()

    def _step_back(self) -> None:
        lattice = self.lattice
        prev = self.step - 1
        n = lattice.size(prev)
        p = lattice.probability(prev)
        values = self._buffer

        # Node j at `prev` reads nodes j and j + 1 only; the RHS is evaluated
        # before the leading slice is overwritten.
        values[:n] = lattice.discount(prev) * (p * values[1 : n + 1] + (1.0 - p) * values[:n])

        if self.exercise_allowed(prev):
            live = values[:n]
            np.maximum(live, self.payoff(lattice.underlying_prices(prev)), out=live)

        self.step = prev
        self._size = n
