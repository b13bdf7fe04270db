"""Shared option-pricing dataclasses and aliases."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Literal, TypeAlias


class OptionType(StrEnum):
    """Canonical option side labels used across pricing code."""

    CALL = "call"
    PUT = "put"


# Tolerant input type accepted at system boundaries (config files/tests).
OptionTypeInput: TypeAlias = OptionType | Literal["call", "put", "C", "P"]


def normalize_option_type(option_type: OptionTypeInput) -> OptionType:
    """Normalize option type labels to `OptionType`."""
    if option_type in ("call", "C", "c"):
        return OptionType.CALL
    if option_type in ("put", "P", "p"):
        return OptionType.PUT
    raise ValueError("option_type must be one of {'call', 'put', 'C', 'P'}")


class ExerciseStyle(StrEnum):
    """When the holder may exercise."""

    EUROPEAN = "european"
    AMERICAN = "american"
    BERMUDAN = "bermudan"


@dataclass(frozen=True)
class OptionSpec:
    """Contract terms required for pricing one vanilla option."""

    strike: float
    time_to_expiry: float
    option_type: OptionTypeInput


@dataclass(frozen=True)
class MarketState:
    """Flat market inputs used by pricing engines."""

    spot: float
    volatility: float
    rate: float = 0.0
    dividend_yield: float = 0.0


@dataclass(frozen=True, slots=True)
class PricingResult:
    """Option value and the lattice sensitivities."""

    value: float
    delta: float
    gamma: float
    theta: float

    @classmethod
    def from_flat(cls, data: Mapping[str, float]) -> PricingResult:
        """Build ``PricingResult`` from a flat mapping (value/delta/gamma/theta)."""
        return cls(
            value=float(data["value"]),
            delta=float(data["delta"]),
            gamma=float(data["gamma"]),
            theta=float(data["theta"]),
        )

    @property
    def price(self) -> float:
        return self.value

    def as_dict(self) -> dict[str, float]:
        return asdict(self)
