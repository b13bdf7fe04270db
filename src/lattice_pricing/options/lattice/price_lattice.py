"""Underlying prices and one-step discounting on the binomial lattice."""

from __future__ import annotations

import numpy as np

from lattice_pricing.options.errors import PricingPreconditionError
from lattice_pricing.options.lattice.time_grid import TimeGrid
from lattice_pricing.options.lattice.trees import LatticeGeometry

# The tree is rooted two steps before the valuation date, so the valuation date
# already carries three nodes (down, mid, up) and the mid node sits on the spot.
NODES_AT_VALUATION = 3


class PriceLattice:
    """Read-only view of a recombining tree combined with flat discounting.

    Node ``j`` of step ``i`` (``0 <= j < i + 3``) carries the price

        spot * exp(D(i) + (j - 1) * dx)

    where ``dx = log(up / down)`` and ``D(i)`` is the sum of ``log(down)`` over
    the first ``i`` transitions. For a time-homogeneous tree this reduces to
    ``spot * up**(j - 1) * down**(i + 1 - j)``.
    """

    def __init__(
        self,
        geometry: LatticeGeometry,
        grid: TimeGrid,
        spot: float,
        risk_free_rate: float,
    ) -> None:
        if geometry.steps != grid.steps:
            raise ValueError(
                f"geometry has {geometry.steps} steps but the time grid has {grid.steps}"
            )
        if not spot > 0:
            raise PricingPreconditionError("negative or null underlying given")

        self.geometry = geometry
        self.grid = grid
        self.spot = float(spot)
        self.risk_free_rate = float(risk_free_rate)

        self._log_spot = float(np.log(spot))
        self._dx = geometry.log_spacing
        self._drift = np.concatenate(([0.0], np.cumsum(np.log(geometry.down))))
        self._discounts = np.exp(-self.risk_free_rate * np.diff(grid.times))

    @property
    def steps(self) -> int:
        return self.grid.steps

    def _check_step(self, step: int, last: int) -> None:
        if not 0 <= step <= last:
            raise IndexError(f"step {step} outside [0, {last}]")

    def size(self, step: int) -> int:
        """Number of nodes at `step`."""
        self._check_step(step, self.steps)
        return step + NODES_AT_VALUATION

    def underlying(self, step: int, node: int) -> float:
        """Underlying price at (`step`, `node`)."""
        n = self.size(step)
        if not 0 <= node < n:
            raise IndexError(f"node {node} outside [0, {n - 1}] at step {step}")
        return float(np.exp(self._log_spot + self._drift[step] + (node - 1) * self._dx))

    def underlying_prices(self, step: int) -> np.ndarray:
        """Underlying prices of every node at `step`, lowest first."""
        nodes = np.arange(self.size(step), dtype=float)
        return np.exp(self._log_spot + self._drift[step] + (nodes - 1.0) * self._dx)

    def discount(self, step: int) -> float:
        """Discount factor from step ``step + 1`` back to `step`."""
        self._check_step(step, self.steps - 1)
        return float(self._discounts[step])

    def probability(self, step: int) -> float:
        """Risk-neutral up probability for the transition out of `step`."""
        self._check_step(step, self.steps - 1)
        return float(self.geometry.probability[step])
