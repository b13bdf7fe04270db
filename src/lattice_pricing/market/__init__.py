"""Market data inputs: day counts, term structures, and the diffusion process."""

from .day_count import DayCount, normalize_day_count, to_timestamp, year_fraction
from .process import BlackScholesProcess
from .term_structures import (
    BlackConstantVol,
    BlackVarianceCurve,
    BlackVolTermStructure,
    FlatForward,
    InterpolatedZeroCurve,
    YieldTermStructure,
    coerce_vol_surface,
    coerce_yield_curve,
    time_from_reference,
)

__all__ = [
    "DayCount",
    "normalize_day_count",
    "to_timestamp",
    "year_fraction",
    "BlackScholesProcess",
    "YieldTermStructure",
    "BlackVolTermStructure",
    "FlatForward",
    "InterpolatedZeroCurve",
    "BlackConstantVol",
    "BlackVarianceCurve",
    "coerce_yield_curve",
    "coerce_vol_surface",
    "time_from_reference",
]
