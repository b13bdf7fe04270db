"""Binomial lattice building blocks: snapshot, trees, lattice, rollback, Greeks."""

from .discretized import DiscretizedVanillaOption
from .greeks import black_scholes_theta, lattice_delta_gamma
from .price_lattice import NODES_AT_VALUATION, PriceLattice
from .snapshot import MarketSnapshot, flatten_process
from .time_grid import TimeGrid
from .trees import (
    TREE_BUILDERS,
    CoxRossRubinstein,
    JarrowRudd,
    LatticeGeometry,
    Tian,
    TreeBuilder,
    Trigeorgis,
    get_tree_builder,
)

__all__ = [
    "MarketSnapshot",
    "flatten_process",
    "TimeGrid",
    "LatticeGeometry",
    "TreeBuilder",
    "CoxRossRubinstein",
    "JarrowRudd",
    "Trigeorgis",
    "Tian",
    "TREE_BUILDERS",
    "get_tree_builder",
    "PriceLattice",
    "NODES_AT_VALUATION",
    "DiscretizedVanillaOption",
    "lattice_delta_gamma",
    "black_scholes_theta",
]
