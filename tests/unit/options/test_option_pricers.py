import pandas as pd
import pytest

from lattice_pricing.options import (
    BlackScholesPricer,
    GreeksModel,
    MarketState,
    OptionSpec,
    OptionType,
    OptionTypeInput,
    PlainVanillaPayoff,
    PriceModel,
    PricingResult,
    bs_greeks,
    bs_price,
    normalize_option_type,
)
from lattice_pricing.options.lattice import MarketSnapshot


def test_black_scholes_pricer_matches_functional_greeks_api():
    spec = OptionSpec(
        strike=100.0,
        time_to_expiry=30 / 365.0,
        option_type=OptionType.CALL,
    )
    state = MarketState(spot=101.0, volatility=0.22, rate=0.03, dividend_yield=0.015)

    out = BlackScholesPricer().price_and_greeks(spec, state)
    ref = bs_greeks(
        S=state.spot,
        K=spec.strike,
        T=spec.time_to_expiry,
        sigma=state.volatility,
        r=state.rate,
        q=state.dividend_yield,
        option_type=spec.option_type,
    )

    assert out.value == pytest.approx(ref["value"])
    assert out.price == pytest.approx(ref["value"])
    assert out.delta == pytest.approx(ref["delta"])
    assert out.gamma == pytest.approx(ref["gamma"])
    assert out.theta == pytest.approx(ref["theta"])


def test_protocol_split_price_model_vs_greeks_model():
    class PriceOnlyPricer:
        def price(self, spec: OptionSpec, state: MarketState) -> float:
            return 0.0

    bs = BlackScholesPricer()
    price_only = PriceOnlyPricer()

    assert isinstance(bs, PriceModel)
    assert isinstance(bs, GreeksModel)
    assert isinstance(price_only, PriceModel)
    assert not isinstance(price_only, GreeksModel)


def test_black_scholes_theta_satisfies_pricing_pde():
    S, K, T, sigma, r, q = 100.0, 100.0, 1.0, 0.2, 0.05, 0.01
    g = bs_greeks(S, K, T, sigma, r, q, option_type="put")

    pde = r * g["value"] - (r - q) * S * g["delta"] - 0.5 * sigma**2 * S**2 * g["gamma"]
    assert g["theta"] == pytest.approx(pde, rel=1e-10)


@pytest.mark.parametrize(
    ("option_type", "expected"),
    [("C", OptionType.CALL), ("P", OptionType.PUT), ("call", OptionType.CALL), ("put", OptionType.PUT)],
)
def test_option_type_labels_are_normalized(option_type: OptionTypeInput, expected: OptionType):
    assert normalize_option_type(option_type) == expected
    assert bs_price(S=100.0, K=100.0, T=30 / 365.0, sigma=0.2, option_type=option_type) > 0


def test_unknown_option_type_raises():
    with pytest.raises(ValueError, match="option_type must be one of"):
        normalize_option_type("straddle")


def test_pricing_result_round_trips_flat_mapping():
    flat = {"value": 1.5, "delta": 0.4, "gamma": 0.02, "theta": -3.0}
    result = PricingResult.from_flat(flat)

    assert result.value == 1.5
    assert result.as_dict() == {"value": 1.5, "delta": 0.4, "gamma": 0.02, "theta": -3.0}


def test_pricing_result_requires_value_key():
    with pytest.raises(KeyError):
        PricingResult.from_flat({"price": 1.5, "delta": 0.4, "gamma": 0.02, "theta": -3.0})


def test_black_scholes_benchmark_uses_flattened_snapshot():
    snap = MarketSnapshot(
        valuation_date=pd.Timestamp("2025-01-02"),
        maturity=0.5,
        spot=102.0,
        risk_free_rate=0.03,
        dividend_yield=0.01,
        volatility=0.25,
    )
    bench = BlackScholesPricer().benchmark(snap, PlainVanillaPayoff("put", 100.0))
    ref = bs_greeks(S=102.0, K=100.0, T=0.5, sigma=0.25, r=0.03, q=0.01, option_type="put")

    assert bench.as_dict() == pytest.approx(ref)


def test_black_scholes_benchmark_skips_zero_volatility():
    snap = MarketSnapshot(pd.Timestamp("2025-01-02"), 1.0, 100.0, 0.05, 0.0, 0.0)

    assert BlackScholesPricer().benchmark(snap, PlainVanillaPayoff("call", 100.0)) is None
