"""Pricing engines."""

from .base import GreeksModel, PriceModel
from .binomial_engine import BinomialVanillaEngine, exercise_times
from .binomial_tree_pricer import BinomialTreePricer
from .bs_pricer import BlackScholesPricer

__all__ = [
    "PriceModel",
    "GreeksModel",
    "BinomialVanillaEngine",
    "exercise_times",
    "BinomialTreePricer",
    "BlackScholesPricer",
]
