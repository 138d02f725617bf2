# helpers.py
"""
Small 2D vector helpers shared by the field, integrator and viewer.

Vectors are plain numpy arrays of shape (2,) (or (..., 2) where noted).
"""

import numpy as np


def vector(x, y):
    """Return a float vector [x, y]."""
    return np.array([x, y], dtype=float)


def magnitude(v):
    """
    Length of a vector, or of each vector along the last axis.

    Parameters
    ----------
    v : array-like
        Vector(s) of shape (..., 2).

    Returns
    -------
    float or numpy.ndarray
    """
    return np.linalg.norm(v, axis=-1)


def normalize(v):
    """
    Unit vector in the direction of ``v``.

    The zero vector is returned unchanged instead of dividing by zero.
    """
    v = np.asarray(v, dtype=float)
    length = magnitude(v)
    if length == 0:
        return v.copy()
    return v / length


def angle(v):
    """Angle of ``v`` against the x axis in radians, in (-pi, pi]."""
    return float(np.arctan2(v[1], v[0]))


def in_bounds(x, y, min_x, max_x, min_y, max_y):
    """Strict check that (x, y) lies inside the open rectangle."""
    return min_x < x < max_x and min_y < y < max_y
