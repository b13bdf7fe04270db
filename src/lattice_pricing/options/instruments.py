"""Vanilla option instrument: payoff plus exercise schedule."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
import pandas as pd

from lattice_pricing.market.day_count import DateLike, to_timestamp
from lattice_pricing.options.types import (
    ExerciseStyle,
    OptionType,
    OptionTypeInput,
    normalize_option_type,
)


@runtime_checkable
class Payoff(Protocol):
    """Cash flow received on exercise as a function of the underlying price."""

    def __call__(self, spot: np.ndarray | float) -> np.ndarray:
        """Vectorized payoff for one or many underlying prices."""

    def evaluate(self, spot: float) -> float:
        """Payoff for a single underlying price."""


@dataclass(frozen=True)
class PlainVanillaPayoff:
    """Single-strike call/put payoff ``max(±(S - K), 0)``."""

    option_type: OptionTypeInput
    strike: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "option_type", normalize_option_type(self.option_type))
        if self.strike < 0:
            raise ValueError("strike must be >= 0")
        object.__setattr__(self, "strike", float(self.strike))

    def __call__(self, spot: np.ndarray | float) -> np.ndarray:
        if self.option_type == OptionType.CALL:
            return np.maximum(np.asarray(spot, dtype=float) - self.strike, 0.0)
        return np.maximum(self.strike - np.asarray(spot, dtype=float), 0.0)

    def evaluate(self, spot: float) -> float:
        return float(self(spot))


@dataclass(frozen=True)
class Exercise:
    """Exercise schedule.

    - European: a single date (expiry).
    - American: exercisable on any date in ``[earliest, latest]``; when
      `earliest` is None the window opens at the valuation date.
    - Bermudan: exercisable on each listed date only.
    """

    style: ExerciseStyle
    dates: tuple[pd.Timestamp, ...]
    earliest: pd.Timestamp | None = None

    def __post_init__(self) -> None:
        style = ExerciseStyle(self.style)
        dates = tuple(sorted({to_timestamp(d) for d in self.dates}))
        if not dates:
            raise ValueError("exercise schedule needs at least one date")
        if style != ExerciseStyle.BERMUDAN and len(dates) != 1:
            raise ValueError(f"{style.value} exercise takes exactly one date")

        earliest = None if self.earliest is None else to_timestamp(self.earliest)
        if earliest is not None:
            if style != ExerciseStyle.AMERICAN:
                raise ValueError("earliest date only applies to american exercise")
            if earliest > dates[-1]:
                raise ValueError("earliest exercise date is after the last date")

        object.__setattr__(self, "style", style)
        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "earliest", earliest)

    @classmethod
    def european(cls, expiry: DateLike) -> Exercise:
        return cls(ExerciseStyle.EUROPEAN, (to_timestamp(expiry),))

    @classmethod
    def american(cls, latest: DateLike, earliest: DateLike | None = None) -> Exercise:
        return cls(
            ExerciseStyle.AMERICAN,
            (to_timestamp(latest),),
            None if earliest is None else to_timestamp(earliest),
        )

    @classmethod
    def bermudan(cls, dates: Iterable[DateLike]) -> Exercise:
        return cls(ExerciseStyle.BERMUDAN, tuple(to_timestamp(d) for d in dates))

    @property
    def last_date(self) -> pd.Timestamp:
        return self.dates[-1]

    @property
    def permits_early_exercise(self) -> bool:
        return self.style != ExerciseStyle.EUROPEAN


@dataclass(frozen=True)
class VanillaOption:
    """Payoff and exercise schedule priced together by an engine."""

    payoff: Payoff
    exercise: Exercise
