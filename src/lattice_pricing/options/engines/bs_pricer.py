"""Closed-form Black-Scholes reference for European lattice results."""

from __future__ import annotations

from lattice_pricing.options.instruments import PlainVanillaPayoff
from lattice_pricing.options.lattice import MarketSnapshot
from lattice_pricing.options.models.black_scholes import bs_greeks
from lattice_pricing.options.types import MarketState, OptionSpec, PricingResult


class BlackScholesPricer:
    """Analytical European pricer used as the lattice benchmark."""

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        return self.price_and_greeks(spec, state).value

    def price_and_greeks(self, spec: OptionSpec, state: MarketState) -> PricingResult:
        out = bs_greeks(
            S=state.spot,
            K=spec.strike,
            T=spec.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
            q=state.dividend_yield,
            option_type=spec.option_type,
        )
        return PricingResult.from_flat(out)

    def benchmark(
        self, snapshot: MarketSnapshot, payoff: PlainVanillaPayoff
    ) -> PricingResult | None:
        """Closed form for the flattened inputs; None when volatility is zero."""
        if snapshot.volatility <= 0:
            return None
        spec = OptionSpec(
            strike=payoff.strike,
            time_to_expiry=snapshot.maturity,
            option_type=payoff.option_type,
        )
        state = MarketState(
            spot=snapshot.spot,
            volatility=snapshot.volatility,
            rate=snapshot.risk_free_rate,
            dividend_yield=snapshot.dividend_yield,
        )
        return self.price_and_greeks(spec, state)
