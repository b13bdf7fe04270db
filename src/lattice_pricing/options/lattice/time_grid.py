"""Uniform time grid shared by the lattice and the discretized option."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class TimeGrid:
    """``steps + 1`` equally spaced times on ``[0, end]``."""

    end: float
    steps: int
    times: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if not self.end > 0:
            raise ValueError("end must be > 0")
        object.__setattr__(self, "times", np.linspace(0.0, self.end, self.steps + 1))

    @property
    def dt(self) -> float:
        return self.end / self.steps

    def __len__(self) -> int:
        return self.steps + 1

    def __getitem__(self, i: int) -> float:
        return float(self.times[i])

    def closest_index(self, t: float) -> int:
        """Index of the grid time closest to `t` (clamped to the grid)."""
        if t <= 0:
            return 0
        if t >= self.end:
            return self.steps
        return int(round(t / self.dt))

    def index(self, t: float, tol: float = 1e-10) -> int:
        """Index of `t`, which must coincide with a grid time."""
        i = self.closest_index(t)
        if abs(self.times[i] - t) > tol * max(1.0, self.end):
            raise ValueError(
                f"time {t} is not on the grid (closest: {self.times[i]} at index {i})"
            )
        return i
