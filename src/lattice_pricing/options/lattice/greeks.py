"""Sensitivities read off the three lattice nodes at the valuation date."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from lattice_pricing.options.errors import LatticeConsistencyError
from lattice_pricing.options.lattice.price_lattice import NODES_AT_VALUATION


def lattice_delta_gamma(
    values: Sequence[float] | np.ndarray,
    prices: Sequence[float] | np.ndarray,
) -> tuple[float, float, float]:
    """Return ``(value, delta, gamma)`` from down/mid/up node values and prices.

    Delta is the central difference across the outer nodes. Gamma differences
    the two one-sided deltas over the half-width of the outer spacing, which
    stays consistent when the grid is symmetric in log-price rather than in
    price.
    """
    v = np.asarray(values, dtype=float)
    s = np.asarray(prices, dtype=float)
    if v.size != NODES_AT_VALUATION or s.size != NODES_AT_VALUATION:
        raise LatticeConsistencyError(
            f"Expect {NODES_AT_VALUATION} nodes at the valuation date, "
            f"got {v.size} values and {s.size} prices"
        )

    p0d, p0, p0u = (float(x) for x in v)
    s0d, s0, s0u = (float(x) for x in s)
    if not s0d < s0 < s0u:
        raise LatticeConsistencyError(
            f"degenerate node spacing at the valuation date: {s0d}, {s0}, {s0u}"
        )

    delta = (p0u - p0d) / (s0u - s0d)
    delta_up = (p0u - p0) / (s0u - s0)
    delta_down = (p0d - p0) / (s0d - s0)
    gamma = (delta_up - delta_down) / ((s0u - s0d) / 2.0)
    return p0, delta, gamma


def black_scholes_theta(
    value: float,
    delta: float,
    gamma: float,
    spot: float,
    rate: float,
    dividend_yield: float,
    volatility: float,
) -> float:
    """Theta per year from the Black-Scholes PDE.

    ``Θ = rV - (r - q) S Δ - ½ σ² S² Γ``
    """
    return (
        rate * value
        - (rate - dividend_yield) * spot * delta
        - 0.5 * volatility**2 * spot**2 * gamma
    )
