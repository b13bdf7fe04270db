"""Interface for option-pricing engines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lattice_pricing.options.types import MarketState, OptionSpec, PricingResult


@runtime_checkable
class PriceModel(Protocol):
    """Minimum pricing capability: one value per contract."""

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        """Return option value for one contract."""


@runtime_checkable
class GreeksModel(Protocol):
    """Engines that also return delta, gamma and theta."""

    def price_and_greeks(self, spec: OptionSpec, state: MarketState) -> PricingResult:
        """Return option value and sensitivities for one contract."""
