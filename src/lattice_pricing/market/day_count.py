"""Day-count conventions used to turn dates into year fractions."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import TypeAlias

import pandas as pd

DateLike: TypeAlias = str | date | datetime | pd.Timestamp


class DayCount(StrEnum):
    """Supported day-count conventions."""

    ACT_365F = "ACT/365F"
    ACT_360 = "ACT/360"
    THIRTY_360 = "30/360"


_ALIASES: dict[str, DayCount] = {
    "ACT/365": DayCount.ACT_365F,
    "ACT/365F": DayCount.ACT_365F,
    "ACT/360": DayCount.ACT_360,
    "30/360": DayCount.THIRTY_360,
    "BOND": DayCount.THIRTY_360,
    "US30/360": DayCount.THIRTY_360,
}


def to_timestamp(value: DateLike) -> pd.Timestamp:
    """Coerce a date-like value into a midnight-normalized `pd.Timestamp`."""
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unsupported date value: {value!r}") from exc
    if pd.isna(ts):
        raise ValueError(f"Unsupported date value: {value!r}")
    return ts.normalize()


def normalize_day_count(day_count: DayCount | str) -> DayCount:
    """Normalize a convention label (e.g. ``"act/365"``) to `DayCount`."""
    if isinstance(day_count, DayCount):
        return day_count
    key = str(day_count).strip().upper()
    try:
        return _ALIASES[key]
    except KeyError as e:
        raise ValueError(
            f"Unknown day count: {day_count!r}. Available: {sorted(_ALIASES)}"
        ) from e


def year_fraction(
    start: DateLike,
    end: DateLike,
    day_count: DayCount | str = DayCount.ACT_365F,
) -> float:
    """Year fraction between two dates; negative when `end` precedes `start`."""
    convention = normalize_day_count(day_count)
    start_ts = to_timestamp(start)
    end_ts = to_timestamp(end)

    if convention == DayCount.THIRTY_360:
        d1 = min(start_ts.day, 30)
        d2 = end_ts.day
        if d1 == 30:
            d2 = min(d2, 30)
        days = (
            (end_ts.year - start_ts.year) * 360
            + (end_ts.month - start_ts.month) * 30
            + (d2 - d1)
        )
        return days / 360.0

    days = (end_ts - start_ts).days
    if convention == DayCount.ACT_360:
        return days / 360.0
    return days / 365.0
