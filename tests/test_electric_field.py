import numpy as np
import pytest

from chargesim.config import K
from chargesim.electric_field import CoulombField, StationaryCharge, evaluate


def test_no_charges_gives_zero_field_and_potential():
    field = CoulombField([])
    E, V = field.sample_for_display(3.0, 4.0)
    assert np.array_equal(E, [0.0, 0.0])
    assert V == 0.0
    assert np.array_equal(field.sample_for_dynamics(3.0, 4.0), [0.0, 0.0])


def test_single_charge_magnitude_and_potential():
    q = 5.0
    field = CoulombField([StationaryCharge(10, 10, q)])
    E, V = field.sample_for_display(13.0, 14.0)  # r = 5
    assert field.field_strength(E) == pytest.approx(K * q / 25.0)
    assert V == pytest.approx(K * q / 5.0)

    E_dyn = field.sample_for_dynamics(13.0, 14.0)
    assert np.allclose(E_dyn, E)


def test_field_points_away_from_positive_and_toward_negative():
    positive = CoulombField([StationaryCharge(0, 0, 1.0)], k=1.0)
    negative = CoulombField([StationaryCharge(0, 0, -1.0)], k=1.0)
    assert positive.sample_for_dynamics(10.0, 0.0)[0] > 0
    assert negative.sample_for_dynamics(10.0, 0.0)[0] < 0
    assert positive.sample_for_dynamics(0.0, -10.0)[1] < 0


def test_dipole_midpoint():
    field = CoulombField([StationaryCharge(0, 0, 1.0), StationaryCharge(10, 0, -1.0)], k=1.0)
    E, V = field.sample_for_display(5.0, 0.0)
    assert E[0] > 0
    assert E[1] == pytest.approx(0.0)
    assert V == pytest.approx(0.0)


def test_sign_swap_negates_field_and_potential():
    charges = [StationaryCharge(3, 4, 2.0), StationaryCharge(12, 7, -1.5), StationaryCharge(6, 15, 0.5)]
    flipped = [StationaryCharge(c.x, c.y, -c.q) for c in charges]
    xs, ys = np.meshgrid(np.arange(0.5, 20, 1.5), np.arange(0.25, 20, 1.5))

    E, V = CoulombField(charges).sample_for_display(xs, ys)
    E_neg, V_neg = CoulombField(flipped).sample_for_display(xs, ys)

    assert np.allclose(E_neg, -E)
    assert np.allclose(V_neg, -V)
    assert np.allclose(np.linalg.norm(E_neg, axis=-1), np.linalg.norm(E, axis=-1))


def test_dynamics_signals_collision_inside_collision_distance():
    field = CoulombField([StationaryCharge(0, 0, 1.0)], collision_distance=2.0)
    assert field.sample_for_dynamics(1.9, 0.0) is None
    assert field.sample_for_dynamics(0.0, 0.0) is None
    assert field.sample_for_dynamics(2.0, 0.0) is not None


def test_display_sentinel_on_charge_is_signed_infinity():
    field = CoulombField([StationaryCharge(2, 2, 1.0), StationaryCharge(5, 5, -1.0)], k=1.0)
    E, V = field.sample_for_display(2.0, 2.0)
    assert np.all(np.isposinf(E))
    assert np.isposinf(V)

    E, V = field.sample_for_display(5.0, 5.0)
    assert np.all(np.isneginf(E))
    assert np.isneginf(V)


def test_display_sentinel_follows_net_charge_on_point():
    field = CoulombField([StationaryCharge(2, 2, 1.0), StationaryCharge(2, 2, -3.0)], k=1.0)
    E, V = field.sample_for_display(2.0, 2.0)
    assert np.all(np.isneginf(E))
    assert np.isneginf(V)

    flipped = CoulombField([StationaryCharge(2, 2, -1.0), StationaryCharge(2, 2, 3.0)], k=1.0)
    E, V = flipped.sample_for_display(2.0, 2.0)
    assert np.all(np.isposinf(E))
    assert np.isposinf(V)


def test_display_sentinel_is_positive_when_charges_cancel():
    field = CoulombField([StationaryCharge(1, 1, 2.0), StationaryCharge(1, 1, -2.0)], k=1.0)
    E, V = field.sample_for_display(np.array([1.0, 0.0]), np.array([1.0, 1.0]))
    assert np.isposinf(V[0])
    assert np.all(np.isposinf(E[0]))
    assert V[1] == pytest.approx(0.0)
    assert not np.isnan(E).any()


def test_display_arrays_never_contain_nan():
    field = CoulombField([StationaryCharge(1, 1, 3.0)])
    ys, xs = np.mgrid[0:3, 0:3]
    E, V = field.sample_for_display(xs, ys)
    assert E.shape == (3, 3, 2)
    assert not np.isnan(E).any()
    assert not np.isnan(V).any()
    assert np.isinf(V[1, 1])
    assert np.isfinite(V[0, 0])


def test_evaluate_matches_field():
    charges = [StationaryCharge(1, 2, 3.0)]
    E, V = evaluate([4.0, 6.0], charges, k=2.0)
    E_field, V_field = CoulombField(charges, k=2.0).sample_for_display(4.0, 6.0)
    assert np.allclose(E, E_field)
    assert V == pytest.approx(V_field)
    assert V == pytest.approx(2.0 * 3.0 / 5.0)


def test_with_charge_leaves_original_untouched():
    field = CoulombField([], k=1.0)
    extended = field.with_charge(StationaryCharge(0, 0, 1.0))
    assert field.stationary_charges == ()
    assert len(extended.stationary_charges) == 1
    assert extended.k == 1.0


def test_potential_at():
    field = CoulombField([StationaryCharge(0, 0, 2.0)], k=1.0)
    assert field.potential_at(4.0, 0.0) == pytest.approx(0.5)


def test_field_strength_of_grid_batch():
    field = CoulombField([StationaryCharge(0, 0, 1.0)], k=1.0)
    ys, xs = np.mgrid[0:2, 0:3]
    E, _ = field.sample_for_display(xs, ys)
    strength = field.field_strength(E)

    assert strength.shape == (2, 3)
    assert np.isposinf(strength[0, 0])
    assert strength[0, 2] == pytest.approx(0.25)
    assert strength[1, 1] == pytest.approx(0.5)
    assert field.field_strength([3.0, 4.0]) == pytest.approx(5.0)
