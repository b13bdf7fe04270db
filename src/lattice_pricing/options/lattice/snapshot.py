"""Collapse live term structures into the constants a binomial tree needs."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from lattice_pricing.market.day_count import DateLike, DayCount, to_timestamp
from lattice_pricing.market.process import BlackScholesProcess
from lattice_pricing.market.term_structures import (
    BlackConstantVol,
    FlatForward,
    time_from_reference,
)
from lattice_pricing.options.errors import (
    PricingPreconditionError,
    UnsupportedPayoffError,
)
from lattice_pricing.options.instruments import Payoff, PlainVanillaPayoff


@dataclass(frozen=True)
class MarketSnapshot:
    """Constant market inputs sampled at the valuation date.

    Rates are continuously compounded zero rates to `maturity`; `volatility` is
    the Black vol to `maturity`.
    """

    valuation_date: pd.Timestamp
    maturity: float
    spot: float
    risk_free_rate: float
    dividend_yield: float
    volatility: float
    day_count: DayCount = DayCount.ACT_365F

    def __post_init__(self) -> None:
        if not self.maturity > 0:
            raise PricingPreconditionError("maturity must be > 0")
        if not self.spot > 0:
            raise PricingPreconditionError("negative or null underlying given")
        if self.volatility < 0:
            raise PricingPreconditionError("volatility must be >= 0")
        object.__setattr__(self, "valuation_date", to_timestamp(self.valuation_date))

    def flat_risk_free_curve(self) -> FlatForward:
        return FlatForward(self.valuation_date, self.risk_free_rate, self.day_count)

    def flat_dividend_curve(self) -> FlatForward:
        return FlatForward(self.valuation_date, self.dividend_yield, self.day_count)

    def flat_volatility(self) -> BlackConstantVol:
        return BlackConstantVol(self.valuation_date, self.volatility, self.day_count)

    def flat_process(self) -> BlackScholesProcess:
        """Constant-coefficient process valid on ``[0, maturity]``."""
        return BlackScholesProcess(
            spot=self.spot,
            risk_free_curve=self.flat_risk_free_curve(),
            dividend_curve=self.flat_dividend_curve(),
            volatility_surface=self.flat_volatility(),
        )


def flatten_process(
    process: BlackScholesProcess,
    exercise_date: DateLike,
    payoff: Payoff,
) -> MarketSnapshot:
    """Sample rates and volatility of `process` for the horizon to `exercise_date`.

    Raises:
        PricingPreconditionError: If the spot is not strictly positive or the
            exercise date is not after the valuation date.
        UnsupportedPayoffError: If `payoff` is not a `PlainVanillaPayoff`.
    """
    spot = float(process.spot)
    if not spot > 0:
        raise PricingPreconditionError("negative or null underlying given")
    if not isinstance(payoff, PlainVanillaPayoff):
        raise UnsupportedPayoffError(
            f"non-plain payoff given: {type(payoff).__name__}"
        )

    rf = process.risk_free_curve
    maturity = time_from_reference(rf, exercise_date)
    if not maturity > 0:
        raise PricingPreconditionError(
            f"exercise date {to_timestamp(exercise_date).date()} is not after the "
            f"valuation date {rf.reference_date.date()}"
        )

    return MarketSnapshot(
        valuation_date=rf.reference_date,
        maturity=maturity,
        spot=spot,
        risk_free_rate=rf.zero_rate(maturity),
        dividend_yield=process.dividend_curve.zero_rate(
            time_from_reference(process.dividend_curve, exercise_date)
        ),
        volatility=process.volatility_surface.black_vol(
            time_from_reference(process.volatility_surface, exercise_date), spot
        ),
        day_count=rf.day_count,
    )
