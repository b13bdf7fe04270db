"""Closed-form Black-Scholes benchmark for European options.

Used to check lattice convergence and to report the analytic reference next to
tree results; lattice engines do not depend on it.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm

from lattice_pricing.options.types import (
    OptionType,
    OptionTypeInput,
    normalize_option_type,
)


def bs_d1_d2(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
) -> tuple[float, float]:
    """Compute d1 and d2 for Black-Scholes with continuous dividend yield."""
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")
    vol_sqrt_t = sigma * np.sqrt(T)
    d1 = (np.log(S / K) + (r - q + 0.5 * sigma**2) * T) / vol_sqrt_t
    return float(d1), float(d1 - vol_sqrt_t)


def bs_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionTypeInput = OptionType.CALL,
) -> float:
    """Black-Scholes price with continuous dividend yield."""
    sign = 1.0 if normalize_option_type(option_type) == OptionType.CALL else -1.0
    d1, d2 = bs_d1_d2(S, K, T, sigma, r, q)
    return float(
        sign * S * np.exp(-q * T) * norm.cdf(sign * d1)
        - sign * K * np.exp(-r * T) * norm.cdf(sign * d2)
    )


def bs_delta(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionTypeInput = OptionType.CALL,
) -> float:
    """Black-Scholes spot delta."""
    d1, _ = bs_d1_d2(S, K, T, sigma, r, q)
    delta_call = np.exp(-q * T) * norm.cdf(d1)
    if normalize_option_type(option_type) == OptionType.CALL:
        return float(delta_call)
    return float(delta_call - np.exp(-q * T))


def bs_gamma(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
) -> float:
    """Black-Scholes gamma (same for calls and puts)."""
    d1, _ = bs_d1_d2(S, K, T, sigma, r, q)
    return float(np.exp(-q * T) * norm.pdf(d1) / (S * sigma * np.sqrt(T)))


def bs_theta(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionTypeInput = OptionType.CALL,
) -> float:
    """Black-Scholes theta per +1.0 calendar year (∂V/∂t)."""
    sign = 1.0 if normalize_option_type(option_type) == OptionType.CALL else -1.0
    d1, d2 = bs_d1_d2(S, K, T, sigma, r, q)
    decay = -(S * np.exp(-q * T) * norm.pdf(d1) * sigma) / (2 * np.sqrt(T))
    carry = sign * q * S * np.exp(-q * T) * norm.cdf(sign * d1)
    funding = -sign * r * K * np.exp(-r * T) * norm.cdf(sign * d2)
    return float(decay + carry + funding)


def bs_greeks(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
    q: float = 0.0,
    option_type: OptionTypeInput = OptionType.CALL,
) -> dict[str, float]:
    """Return Black-Scholes value, delta, gamma and theta for one option."""
    return {
        "value": bs_price(S, K, T, sigma, r, q, option_type),
        "delta": bs_delta(S, K, T, sigma, r, q, option_type),
        "gamma": bs_gamma(S, K, T, sigma, r, q),
        "theta": bs_theta(S, K, T, sigma, r, q, option_type),
    }
