"""Yield and Black-volatility term structures consumed by pricing engines.

Two families share the same shape:

- yield curves return a continuously-compounded zero rate and a discount
  factor for a time measured in years from the curve's reference date;
- volatility term structures return a Black volatility (and total variance)
  for a time and strike.

Each family has a flat implementation and an interpolated one, plus a
`coerce_*` helper so config/CLI inputs may be constants, date-indexed pandas
Series, or ready-made curve objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Protocol, TypeAlias, runtime_checkable

import numpy as np
import pandas as pd

from lattice_pricing.market.day_count import (
    DateLike,
    DayCount,
    normalize_day_count,
    to_timestamp,
    year_fraction,
)


@runtime_checkable
class YieldTermStructure(Protocol):
    """Zero-rate curve anchored at a reference date."""

    reference_date: pd.Timestamp
    day_count: DayCount

    def zero_rate(self, t: float) -> float:
        """Continuously-compounded zero rate for maturity `t` (years)."""

    def discount(self, t: float) -> float:
        """Discount factor for maturity `t` (years)."""


@runtime_checkable
class BlackVolTermStructure(Protocol):
    """Black volatility as a function of maturity and strike."""

    reference_date: pd.Timestamp
    day_count: DayCount

    def black_vol(self, t: float, strike: float) -> float:
        """Annualized Black volatility for maturity `t` and `strike`."""

    def black_variance(self, t: float, strike: float) -> float:
        """Total Black variance for maturity `t` and `strike`."""


def time_from_reference(
    curve: YieldTermStructure | BlackVolTermStructure, when: DateLike
) -> float:
    """Year fraction from the curve's reference date to `when`."""
    return year_fraction(curve.reference_date, when, curve.day_count)


def _prepare_pillars(
    times: np.ndarray | list[float] | tuple[float, ...],
    values: np.ndarray | list[float] | tuple[float, ...],
    label: str,
) -> tuple[np.ndarray, np.ndarray]:
    t = np.asarray(times, dtype=float).ravel()
    v = np.asarray(values, dtype=float).ravel()
    if t.size == 0:
        raise ValueError(f"{label} must contain at least one pillar")
    if t.size != v.size:
        raise ValueError(f"{label} times and values must have the same length")
    if not np.all(np.isfinite(t)) or not np.all(np.isfinite(v)):
        raise ValueError(f"{label} pillars must be finite")
    if (t <= 0).any():
        raise ValueError(f"{label} pillar times must be > 0")
    if t.size > 1 and not np.all(np.diff(t) > 0):
        raise ValueError(f"{label} pillar times must be strictly increasing")
    return t, v


def _series_to_pillars(
    series: pd.Series,
    reference_date: pd.Timestamp,
    day_count: DayCount,
    label: str,
) -> tuple[np.ndarray, np.ndarray]:
    cleaned = pd.Series(series).dropna()
    if cleaned.empty:
        raise ValueError(f"{label} series must contain at least one non-null row")

    try:
        idx = pd.to_datetime(cleaned.index)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{label} series must be indexed by dates") from exc

    prepared = pd.Series(cleaned.astype(float).values, index=idx).sort_index()
    if prepared.index.has_duplicates:
        prepared = prepared.groupby(level=0).last()

    times = np.array(
        [year_fraction(reference_date, d, day_count) for d in prepared.index],
        dtype=float,
    )
    keep = times > 0
    if not keep.any():
        raise ValueError(f"{label} series has no pillar after the reference date")
    return times[keep], prepared.to_numpy(dtype=float)[keep]


@dataclass(frozen=True)
class FlatForward:
    """Constant continuously-compounded zero rate."""

    reference_date: pd.Timestamp
    rate: float
    day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self) -> None:
        object.__setattr__(self, "reference_date", to_timestamp(self.reference_date))
        object.__setattr__(self, "day_count", normalize_day_count(self.day_count))
        object.__setattr__(self, "rate", float(self.rate))

    def zero_rate(self, t: float) -> float:
        _ = t
        return self.rate

    def discount(self, t: float) -> float:
        return float(np.exp(-self.rate * t))


@dataclass(frozen=True)
class InterpolatedZeroCurve:
    """Zero curve linearly interpolated on rates, flat beyond the pillars."""

    reference_date: pd.Timestamp
    times: np.ndarray
    rates: np.ndarray
    day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self) -> None:
        times, rates = _prepare_pillars(self.times, self.rates, "zero curve")
        object.__setattr__(self, "reference_date", to_timestamp(self.reference_date))
        object.__setattr__(self, "day_count", normalize_day_count(self.day_count))
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "rates", rates)

    @classmethod
    def from_series(
        cls,
        series: pd.Series,
        reference_date: DateLike,
        day_count: DayCount | str = DayCount.ACT_365F,
    ) -> InterpolatedZeroCurve:
        """Build a curve from zero rates indexed by pillar dates."""
        ref = to_timestamp(reference_date)
        dc = normalize_day_count(day_count)
        times, rates = _series_to_pillars(series, ref, dc, "zero curve")
        return cls(reference_date=ref, times=times, rates=rates, day_count=dc)

    def zero_rate(self, t: float) -> float:
        return float(np.interp(t, self.times, self.rates))

    def discount(self, t: float) -> float:
        return float(np.exp(-self.zero_rate(t) * t))


@dataclass(frozen=True)
class BlackConstantVol:
    """Volatility constant in time and strike."""

    reference_date: pd.Timestamp
    volatility: float
    day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self) -> None:
        if self.volatility < 0:
            raise ValueError("volatility must be >= 0")
        object.__setattr__(self, "reference_date", to_timestamp(self.reference_date))
        object.__setattr__(self, "day_count", normalize_day_count(self.day_count))
        object.__setattr__(self, "volatility", float(self.volatility))

    def black_vol(self, t: float, strike: float) -> float:
        _ = t, strike
        return self.volatility

    def black_variance(self, t: float, strike: float) -> float:
        _ = strike
        return self.volatility**2 * t


@dataclass(frozen=True)
class BlackVarianceCurve:
    """Strike-independent vol term structure interpolated in total variance.

    Total variance is linear between pillars (and from zero at t=0); beyond the
    last pillar the last volatility is held flat.
    """

    reference_date: pd.Timestamp
    times: np.ndarray
    volatilities: np.ndarray
    day_count: DayCount = DayCount.ACT_365F
    _variances: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        times, vols = _prepare_pillars(self.times, self.volatilities, "variance curve")
        if (vols < 0).any():
            raise ValueError("variance curve volatilities must be >= 0")

        variances = vols**2 * times
        if variances.size > 1 and (np.diff(variances) < 0).any():
            raise ValueError("total variance must be non-decreasing in time")

        object.__setattr__(self, "reference_date", to_timestamp(self.reference_date))
        object.__setattr__(self, "day_count", normalize_day_count(self.day_count))
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "volatilities", vols)
        object.__setattr__(self, "_variances", variances)

    @classmethod
    def from_series(
        cls,
        series: pd.Series,
        reference_date: DateLike,
        day_count: DayCount | str = DayCount.ACT_365F,
    ) -> BlackVarianceCurve:
        """Build a curve from Black vols indexed by pillar dates."""
        ref = to_timestamp(reference_date)
        dc = normalize_day_count(day_count)
        times, vols = _series_to_pillars(series, ref, dc, "variance curve")
        return cls(reference_date=ref, times=times, volatilities=vols, day_count=dc)

    def black_variance(self, t: float, strike: float) -> float:
        _ = strike
        if t <= 0:
            return 0.0
        if t > self.times[-1]:
            return float(self.volatilities[-1] ** 2 * t)
        return float(
            np.interp(
                t,
                np.concatenate(([0.0], self.times)),
                np.concatenate(([0.0], self._variances)),
            )
        )

    def black_vol(self, t: float, strike: float) -> float:
        if t <= 0:
            return float(self.volatilities[0])
        return float(np.sqrt(self.black_variance(t, strike) / t))


CurveInput: TypeAlias = float | int | pd.Series | YieldTermStructure
VolInput: TypeAlias = float | int | pd.Series | BlackVolTermStructure


def coerce_yield_curve(
    value: CurveInput,
    reference_date: DateLike,
    day_count: DayCount | str = DayCount.ACT_365F,
) -> YieldTermStructure:
    """Normalize constant/series/curve input into a `YieldTermStructure`."""
    if isinstance(value, YieldTermStructure):
        return value
    if isinstance(value, pd.Series):
        return InterpolatedZeroCurve.from_series(value, reference_date, day_count)
    if isinstance(value, Real):
        return FlatForward(to_timestamp(reference_date), float(value), day_count)
    raise TypeError(
        "rate input must be a numeric constant, pandas Series, or YieldTermStructure"
    )


def coerce_vol_surface(
    value: VolInput,
    reference_date: DateLike,
    day_count: DayCount | str = DayCount.ACT_365F,
) -> BlackVolTermStructure:
    """Normalize constant/series/surface input into a `BlackVolTermStructure`."""
    if isinstance(value, BlackVolTermStructure):
        return value
    if isinstance(value, pd.Series):
        return BlackVarianceCurve.from_series(value, reference_date, day_count)
    if isinstance(value, Real):
        return BlackConstantVol(to_timestamp(reference_date), float(value), day_count)
    raise TypeError(
        "volatility input must be a numeric constant, pandas Series, "
        "or BlackVolTermStructure"
    )
