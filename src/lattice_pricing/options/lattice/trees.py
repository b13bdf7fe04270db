"""Binomial tree parameterizations.

A tree builder turns a constant-coefficient process, a maturity and a step
count into a `LatticeGeometry`: per-step up/down multipliers and the risk-neutral
up probability. The engine only depends on the `TreeBuilder` protocol, so new
variants can be added without touching the rollback code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol, runtime_checkable

import numpy as np

from lattice_pricing.market.process import BlackScholesProcess
from lattice_pricing.options.errors import InvalidTreeParametersError


@dataclass(frozen=True)
class LatticeGeometry:
    """Per-step multipliers and up probabilities of a recombining tree.

    Entry ``k`` of each array describes the transition from step ``k`` to
    ``k + 1``. Recombination requires ``log(up / down)`` to be the same at every
    step; the drift (``log(down)``) may vary.
    """

    up: np.ndarray
    down: np.ndarray
    probability: np.ndarray

    def __post_init__(self) -> None:
        up = np.atleast_1d(np.asarray(self.up, dtype=float))
        down = np.atleast_1d(np.asarray(self.down, dtype=float))
        prob = np.atleast_1d(np.asarray(self.probability, dtype=float))

        if not (up.size == down.size == prob.size) or up.size == 0:
            raise InvalidTreeParametersError(
                "up, down and probability must be non-empty and of equal length"
            )
        if not (np.isfinite(up).all() and np.isfinite(down).all() and np.isfinite(prob).all()):
            raise InvalidTreeParametersError("tree parameters must be finite")
        if not ((down > 0).all() and (down < up).all()):
            raise InvalidTreeParametersError("tree factors must satisfy 0 < down < up")
        if not ((prob >= 0).all() and (prob <= 1).all()):
            raise InvalidTreeParametersError(
                "Invalid risk-neutral probability; increase steps or check inputs."
            )

        spacing = np.log(up / down)
        if not np.allclose(spacing, spacing[0], rtol=1e-9, atol=0.0):
            raise InvalidTreeParametersError(
                "log(up/down) must be constant across steps for a recombining tree"
            )

        object.__setattr__(self, "up", up)
        object.__setattr__(self, "down", down)
        object.__setattr__(self, "probability", prob)

    @classmethod
    def constant(
        cls, up: float, down: float, probability: float, steps: int
    ) -> LatticeGeometry:
        """Time-homogeneous geometry repeated over `steps` transitions."""
        return cls(
            up=np.full(steps, up, dtype=float),
            down=np.full(steps, down, dtype=float),
            probability=np.full(steps, probability, dtype=float),
        )

    @property
    def steps(self) -> int:
        return int(self.up.size)

    @property
    def log_spacing(self) -> float:
        """Log-price distance between adjacent nodes of one step."""
        return float(np.log(self.up[0] / self.down[0]))

    @property
    def is_time_homogeneous(self) -> bool:
        return bool(
            np.all(self.up == self.up[0])
            and np.all(self.down == self.down[0])
            and np.all(self.probability == self.probability[0])
        )


@runtime_checkable
class TreeBuilder(Protocol):
    """Strategy producing the lattice geometry for one pricing call."""

    name: ClassVar[str]

    def build(
        self,
        process: BlackScholesProcess,
        maturity: float,
        steps: int,
        strike: float,
    ) -> LatticeGeometry:
        """Return per-step up/down factors and probabilities."""


def _flat_inputs(
    process: BlackScholesProcess, maturity: float, steps: int, strike: float
) -> tuple[float, float, float, float]:
    if steps < 1:
        raise ValueError("steps must be >= 1")
    if not maturity > 0:
        raise ValueError("maturity must be > 0")
    r = process.risk_free_curve.zero_rate(maturity)
    q = process.dividend_curve.zero_rate(maturity)
    sigma = process.volatility_surface.black_vol(maturity, strike)
    return r, q, sigma, maturity / steps


@dataclass(frozen=True)
class CoxRossRubinstein:
    """Equal log jumps ``u = exp(σ√dt)``, ``d = 1/u`` with exact forward matching."""

    name: ClassVar[str] = "crr"

    def build(
        self,
        process: BlackScholesProcess,
        maturity: float,
        steps: int,
        strike: float,
    ) -> LatticeGeometry:
        r, q, sigma, dt = _flat_inputs(process, maturity, steps, strike)
        u = np.exp(sigma * np.sqrt(dt))
        d = 1.0 / u
        p = (np.exp((r - q) * dt) - d) / (u - d) if u > d else np.nan
        return LatticeGeometry.constant(u, d, p, steps)


@dataclass(frozen=True)
class JarrowRudd:
    """Equal probabilities with the log drift built into both jumps."""

    name: ClassVar[str] = "jarrow_rudd"

    def build(
        self,
        process: BlackScholesProcess,
        maturity: float,
        steps: int,
        strike: float,
    ) -> LatticeGeometry:
        r, q, sigma, dt = _flat_inputs(process, maturity, steps, strike)
        drift = (r - q - 0.5 * sigma**2) * dt
        dx = sigma * np.sqrt(dt)
        return LatticeGeometry.constant(np.exp(drift + dx), np.exp(drift - dx), 0.5, steps)


@dataclass(frozen=True)
class Trigeorgis:
    """Log-space tree matching the first two moments of ``log S``."""

    name: ClassVar[str] = "trigeorgis"

    def build(
        self,
        process: BlackScholesProcess,
        maturity: float,
        steps: int,
        strike: float,
    ) -> LatticeGeometry:
        r, q, sigma, dt = _flat_inputs(process, maturity, steps, strike)
        nu = r - q - 0.5 * sigma**2
        dx = np.sqrt(sigma**2 * dt + nu**2 * dt**2)
        p = 0.5 + 0.5 * nu * dt / dx if dx > 0 else np.nan
        return LatticeGeometry.constant(np.exp(dx), np.exp(-dx), p, steps)


@dataclass(frozen=True)
class Tian:
    """Third-moment matching tree (Tian, 1993)."""

    name: ClassVar[str] = "tian"

    def build(
        self,
        process: BlackScholesProcess,
        maturity: float,
        steps: int,
        strike: float,
    ) -> LatticeGeometry:
        r, q, sigma, dt = _flat_inputs(process, maturity, steps, strike)
        v = np.exp(sigma**2 * dt)
        m = np.exp((r - q) * dt)
        root = np.sqrt(max(v * v + 2.0 * v - 3.0, 0.0))
        u = 0.5 * m * v * (v + 1.0 + root)
        d = 0.5 * m * v * (v + 1.0 - root)
        p = (m - d) / (u - d) if u > d else np.nan
        return LatticeGeometry.constant(u, d, p, steps)


TREE_BUILDERS: dict[str, type] = {
    "crr": CoxRossRubinstein,
    "cox_ross_rubinstein": CoxRossRubinstein,
    "jr": JarrowRudd,
    "jarrow_rudd": JarrowRudd,
    "trigeorgis": Trigeorgis,
    "tian": Tian,
}


def get_tree_builder(tree: str | TreeBuilder) -> TreeBuilder:
    """Resolve a tree builder from its name, or pass an instance through."""
    if isinstance(tree, TreeBuilder):
        return tree
    key = str(tree).strip().lower().replace("-", "_")
    try:
        return TREE_BUILDERS[key]()
    except KeyError as e:
        raise ValueError(
            f"Unknown tree '{tree}'. Available: {sorted(TREE_BUILDERS)}"
        ) from e
