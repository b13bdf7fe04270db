"""Option pricing on binomial lattices, with shared types and benchmarks."""

from .convergence import convergence_table, european_benchmark
from .engines import (
    BinomialTreePricer,
    BinomialVanillaEngine,
    BlackScholesPricer,
    GreeksModel,
    PriceModel,
)
from .errors import (
    InsufficientResolutionError,
    InvalidTreeParametersError,
    LatticeConsistencyError,
    PricingPreconditionError,
    UnsupportedPayoffError,
)
from .instruments import Exercise, Payoff, PlainVanillaPayoff, VanillaOption
from .models.black_scholes import (
    bs_d1_d2,
    bs_delta,
    bs_gamma,
    bs_greeks,
    bs_price,
    bs_theta,
)
from .types import (
    ExerciseStyle,
    MarketState,
    OptionSpec,
    OptionType,
    OptionTypeInput,
    PricingResult,
    normalize_option_type,
)

__all__ = [
    "OptionType",
    "OptionTypeInput",
    "normalize_option_type",
    "ExerciseStyle",
    "OptionSpec",
    "MarketState",
    "PricingResult",
    "Payoff",
    "PlainVanillaPayoff",
    "Exercise",
    "VanillaOption",
    "PriceModel",
    "GreeksModel",
    "BinomialVanillaEngine",
    "BinomialTreePricer",
    "BlackScholesPricer",
    "convergence_table",
    "european_benchmark",
    "PricingPreconditionError",
    "InsufficientResolutionError",
    "UnsupportedPayoffError",
    "InvalidTreeParametersError",
    "LatticeConsistencyError",
    "bs_d1_d2",
    "bs_price",
    "bs_delta",
    "bs_gamma",
    "bs_theta",
    "bs_greeks",
]
