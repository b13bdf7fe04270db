"""Analytical option-pricing models."""

from .black_scholes import (
    bs_d1_d2,
    bs_delta,
    bs_gamma,
    bs_greeks,
    bs_price,
    bs_theta,
)

__all__ = [
    "bs_d1_d2",
    "bs_price",
    "bs_delta",
    "bs_gamma",
    "bs_theta",
    "bs_greeks",
]
