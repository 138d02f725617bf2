import numpy as np
import pytest

from chargesim.helpers import angle, in_bounds, magnitude, normalize, vector


def test_magnitude_of_vector_and_batch():
    assert magnitude(vector(3, 4)) == pytest.approx(5.0)
    assert np.allclose(magnitude(np.array([[3.0, 4.0], [0.0, 2.0]])), [5.0, 2.0])


def test_normalize():
    assert np.allclose(normalize([3.0, 4.0]), [0.6, 0.8])


def test_normalize_zero_vector_stays_zero():
    assert np.array_equal(normalize([0.0, 0.0]), [0.0, 0.0])


def test_angle():
    assert angle(vector(0, 1)) == pytest.approx(np.pi / 2)
    assert angle(vector(-1, 0)) == pytest.approx(np.pi)


def test_in_bounds_is_strict():
    assert in_bounds(1.0, 1.0, 0.0, 10.0, 0.0, 10.0)
    assert not in_bounds(0.0, 5.0, 0.0, 10.0, 0.0, 10.0)
    assert not in_bounds(5.0, 10.0, 0.0, 10.0, 0.0, 10.0)
