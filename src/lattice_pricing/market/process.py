"""Generalized Black-Scholes process descriptor."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from lattice_pricing.market.day_count import DateLike, DayCount
from lattice_pricing.market.term_structures import (
    BlackVolTermStructure,
    CurveInput,
    VolInput,
    YieldTermStructure,
    coerce_vol_surface,
    coerce_yield_curve,
)


@dataclass(frozen=True)
class BlackScholesProcess:
    """Spot plus the three term structures driving a lognormal diffusion.

    Instances are read-only and can be shared across pricing calls. The spot is
    not validated here; engines reject a non-positive spot when pricing.
    """

    spot: float
    risk_free_curve: YieldTermStructure
    dividend_curve: YieldTermStructure
    volatility_surface: BlackVolTermStructure

    @property
    def reference_date(self) -> pd.Timestamp:
        """Valuation date, taken from the risk-free curve."""
        return self.risk_free_curve.reference_date

    @classmethod
    def from_inputs(
        cls,
        spot: float,
        rate: CurveInput,
        volatility: VolInput,
        reference_date: DateLike,
        dividend_yield: CurveInput = 0.0,
        day_count: DayCount | str = DayCount.ACT_365F,
    ) -> BlackScholesProcess:
        """Build a process from constants, date-indexed Series, or curves."""
        return cls(
            spot=float(spot),
            risk_free_curve=coerce_yield_curve(rate, reference_date, day_count),
            dividend_curve=coerce_yield_curve(dividend_yield, reference_date, day_count),
            volatility_surface=coerce_vol_surface(volatility, reference_date, day_count),
        )
