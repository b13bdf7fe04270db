import typing

import numpy as np
import pytest

from lattice_pricing.options import (
    ExerciseStyle,
    InvalidTreeParametersError,
    LatticeConsistencyError,
    PlainVanillaPayoff,
)
from lattice_pricing.options.lattice import (
    CoxRossRubinstein,
    DiscretizedVanillaOption,
    JarrowRudd,
    LatticeGeometry,
    PriceLattice,
    Tian,
    TimeGrid,
    TreeBuilder,
    Trigeorgis,
    lattice_delta_gamma,
)


def _toy_lattice(steps: int = 2, rate: float = 0.0) -> PriceLattice:
    geometry = LatticeGeometry.constant(up=1.1, down=0.9, probability=0.5, steps=steps)
    return PriceLattice(geometry, TimeGrid(1.0, steps), spot=100.0, risk_free_rate=rate)


def test_time_grid_is_uniform_and_indexable():
    grid = TimeGrid(1.0, 4)

    np.testing.assert_allclose(grid.times, [0.0, 0.25, 0.5, 0.75, 1.0])
    assert len(grid) == 5
    assert grid.dt == pytest.approx(0.25)
    assert grid.index(0.5) == 2
    assert grid.closest_index(0.3) == 1
    with pytest.raises(ValueError, match="not on the grid"):
        grid.index(0.3)


def test_geometry_rejects_invalid_parameters():
    with pytest.raises(InvalidTreeParametersError, match="0 < down < up"):
        LatticeGeometry.constant(up=0.9, down=1.1, probability=0.5, steps=3)
    with pytest.raises(InvalidTreeParametersError, match="probability"):
        LatticeGeometry.constant(up=1.1, down=0.9, probability=1.2, steps=3)
    with pytest.raises(InvalidTreeParametersError, match="recombining"):
        LatticeGeometry(up=[1.1, 1.2], down=[0.9, 0.9], probability=[0.5, 0.5])


def test_invalid_tree_parameters_are_precondition_errors():
    with pytest.raises(ValueError):
        LatticeGeometry.constant(up=1.0, down=1.0, probability=0.5, steps=2)


def test_lattice_has_three_nodes_at_valuation_date_centered_on_spot():
    lattice = _toy_lattice(steps=3)

    assert lattice.size(0) == 3
    assert lattice.size(3) == 6
    assert lattice.underlying(0, 1) == pytest.approx(100.0)
    assert lattice.underlying(0, 0) == pytest.approx(100.0 * 0.9 / 1.1)
    assert lattice.underlying(0, 2) == pytest.approx(100.0 * 1.1 / 0.9)
    assert lattice.underlying(2, 3) == pytest.approx(121.0)
    assert lattice.underlying(3, 0) == pytest.approx(100.0 * 0.9**4 / 1.1)


def test_lattice_prices_follow_up_and_down_moves():
    geometry = LatticeGeometry(
        up=[1.1, 1.2],
        down=[0.9, 0.9 * 1.2 / 1.1],
        probability=[0.5, 0.5],
    )
    lattice = PriceLattice(geometry, TimeGrid(1.0, 2), spot=50.0, risk_free_rate=0.0)

    assert not geometry.is_time_homogeneous
    for step in range(2):
        here = lattice.underlying_prices(step)
        nxt = lattice.underlying_prices(step + 1)
        np.testing.assert_allclose(nxt[:-1], here * geometry.down[step])
        np.testing.assert_allclose(nxt[1:], here * geometry.up[step])


def test_lattice_is_log_symmetric_at_valuation_date():
    s0d, s0, s0u = _toy_lattice().underlying_prices(0)

    assert s0u / s0 == pytest.approx(s0 / s0d, rel=1e-12)


def test_lattice_discount_and_range_checks():
    lattice = _toy_lattice(steps=3, rate=0.03)

    assert lattice.discount(0) == pytest.approx(np.exp(-0.01))
    assert lattice.probability(2) == pytest.approx(0.5)
    with pytest.raises(IndexError):
        lattice.underlying(0, 3)
    with pytest.raises(IndexError):
        lattice.discount(3)
    with pytest.raises(IndexError):
        lattice.size(4)


def test_rollback_matches_hand_computed_tree():
    lattice = _toy_lattice(steps=2)
    option = DiscretizedVanillaOption(
        PlainVanillaPayoff("call", 100.0), ExerciseStyle.EUROPEAN, (1.0,), lattice.grid
    )

    option.initialize(lattice, 1.0)
    np.testing.assert_allclose(
        option.values, [0.0, 0.0, 0.0, 21.0, 100.0 * 1.1**3 / 0.9 - 100.0]
    )

    option.rollback(0.5)
    assert option.values.size == 4
    assert option.values[2] == pytest.approx(10.5)

    option.rollback(0.0)
    up_up = 0.5 * (21.0 + 100.0 * 1.1**3 / 0.9 - 100.0)
    np.testing.assert_allclose(option.values, [0.0, 5.25, 0.5 * (10.5 + up_up)])
    assert option.time == 0.0


def test_rollback_cannot_move_forward():
    lattice = _toy_lattice(steps=2)
    option = DiscretizedVanillaOption(
        PlainVanillaPayoff("put", 100.0), ExerciseStyle.EUROPEAN, (1.0,), lattice.grid
    )
    option.initialize(lattice, 1.0)
    option.rollback(0.5)

    with pytest.raises(ValueError, match="cannot roll forward"):
        option.rollback(1.0)


def test_american_rollback_dominates_european_nodewise():
    lattice = _toy_lattice(steps=4, rate=0.05)
    payoff = PlainVanillaPayoff("put", 100.0)

    european = DiscretizedVanillaOption(payoff, ExerciseStyle.EUROPEAN, (1.0,), lattice.grid)
    american = DiscretizedVanillaOption(
        payoff, ExerciseStyle.AMERICAN, (0.0, 1.0), lattice.grid
    )
    for option in (european, american):
        option.initialize(lattice, 1.0)
        option.rollback(0.0)

    assert (american.values >= european.values - 1e-12).all()
    assert (american.values >= payoff(lattice.underlying_prices(0)) - 1e-12).all()


def test_bermudan_exercise_only_on_listed_steps():
    grid = TimeGrid(1.0, 4)
    option = DiscretizedVanillaOption(
        PlainVanillaPayoff("put", 100.0), ExerciseStyle.BERMUDAN, (0.5, 1.0, -0.2), grid
    )

    assert [option.exercise_allowed(i) for i in range(4)] == [False, False, True, False]


def test_american_window_respects_earliest_date():
    grid = TimeGrid(1.0, 4)
    option = DiscretizedVanillaOption(
        PlainVanillaPayoff("put", 100.0), ExerciseStyle.AMERICAN, (0.5, 1.0), grid
    )

    assert [option.exercise_allowed(i) for i in range(5)] == [False, False, True, True, True]


def test_lattice_delta_gamma_finite_differences():
    value, delta, gamma = lattice_delta_gamma([1.0, 4.0, 9.0], [1.0, 2.0, 3.0])

    assert value == 4.0
    assert delta == pytest.approx(4.0)
    assert gamma == pytest.approx(2.0)


def test_lattice_delta_gamma_rejects_wrong_node_count():
    with pytest.raises(LatticeConsistencyError, match="Expect 3 nodes"):
        lattice_delta_gamma([1.0, 2.0], [99.0, 101.0])


def test_lattice_delta_gamma_rejects_degenerate_spacing():
    with pytest.raises(LatticeConsistencyError, match="degenerate"):
        lattice_delta_gamma([1.0, 1.0, 1.0], [100.0, 100.0, 100.0])

    assert not issubclass(LatticeConsistencyError, ValueError)


@pytest.mark.parametrize("builder", [CoxRossRubinstein, JarrowRudd, Tian, Trigeorgis])
def test_tree_builders_share_protocol_signature(builder):
    assert typing.get_type_hints(builder.build) == typing.get_type_hints(TreeBuilder.build)
