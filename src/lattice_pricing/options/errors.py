"""Exceptions raised by the lattice pricing stack.

Two families:

- `PricingPreconditionError` (a `ValueError`) rejects a request before any
  lattice work happens: too few steps, a non-positive spot, an unsupported
  payoff, or tree parameters outside their valid range.
- `LatticeConsistencyError` (an `AssertionError`) means the lattice itself is
  malformed after construction, e.g. the wrong number of nodes survives at
  time 0. It points at a tree-builder bug, not at bad user input.
"""

from __future__ import annotations


class PricingPreconditionError(ValueError):
    """Pricing request rejected before computation."""


class InsufficientResolutionError(PricingPreconditionError):
    """Step count too small to leave three nodes at the valuation date."""


class UnsupportedPayoffError(PricingPreconditionError):
    """Payoff kind not handled by the binomial vanilla engine."""


class InvalidTreeParametersError(PricingPreconditionError):
    """Up/down factors or probabilities violate the lattice invariants."""


class LatticeConsistencyError(AssertionError):
    """Lattice state inconsistent with its construction (tree-builder defect)."""
