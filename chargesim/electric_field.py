# electric_field.py
"""
Electrostatic Field of Stationary Point Charges.

This module provides the field evaluator used both to paint the grid
background and to drive movable charges:

- ``StationaryCharge``: an immutable point charge on an integer grid cell
- ``ElectricField``: abstract interface for field implementations
- ``CoulombField``: pairwise Coulomb summation over stationary charges

Two sampling operations are exposed because their consumers treat the
singularity at a charge differently:

- ``sample_for_display`` never fails; a point exactly on a charge gets a
  signed infinite sentinel so the background can saturate it.
- ``sample_for_dynamics`` returns ``None`` when the point is within the
  collision distance of any charge, which the integrator turns into a
  frozen particle.

Example
-------
>>> from chargesim.electric_field import CoulombField, StationaryCharge
>>> field = CoulombField([StationaryCharge(0, 0, 5.0)], k=1.0)
>>> E, V = field.sample_for_display(10.0, 0.0)
>>> print(E, V)  # [0.05 0.  ] 0.5

Notes
-----
With the displacement ``d = p - c`` and ``r = |d|`` the contributions are
``E = k q d / r**3`` and ``V = k q / r``. The same ``k`` is used for both
operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

from chargesim.config import K, COLLISION_DISTANCE


@dataclass(frozen=True)
class StationaryCharge:
    """A fixed point charge sitting on grid cell (x, y)."""
    x: int
    y: int
    q: float


class ElectricField(ABC):
    """
    Abstract base class for electric field implementations.

    Subclasses must implement both sampling operations.

    See Also
    --------
    CoulombField : Field of a set of stationary point charges.
    """

    @abstractmethod
    def sample_for_display(self, x, y):
        """
        Field vector and potential at (x, y), with a sentinel at singularities.

        Parameters
        ----------
        x, y : float or numpy.ndarray
            Query coordinates. Arrays are broadcast against each other.

        Returns
        -------
        tuple
            ``(E, V)`` where ``E`` has shape ``(..., 2)``.
        """
        pass

    @abstractmethod
    def sample_for_dynamics(self, x, y):
        """
        Field vector at (x, y), or ``None`` if the point has collided.

        Parameters
        ----------
        x, y : float
            Query coordinates.

        Returns
        -------
        numpy.ndarray or None
            Field vector [Ex, Ey], or ``None`` as the collision signal.
        """
        pass

    def field_strength(self, E):
        """
        Norm of 2D field vectors along the last axis.

        ``E`` may be a single [Ex, Ey] pair or a batch of shape (..., 2),
        such as the first return value of ``sample_for_display`` on a grid.
        The result drops the last axis: a float for one vector, an array of
        shape (...) for a batch. Sentinel components give ``inf``.
        """
        return np.linalg.norm(E, axis=-1)


class CoulombField(ElectricField):
    """
    Field of a list of stationary point charges by direct summation.

    Parameters
    ----------
    stationary_charges : iterable of StationaryCharge
        Sources of the field. Copied into a tuple.
    k : float, optional
        Coulomb's constant, defaults to ``config.K``.
    collision_distance : float, optional
        Distance under which ``sample_for_dynamics`` reports a collision.

    Attributes
    ----------
    stationary_charges : tuple of StationaryCharge
    k : float
    collision_distance : float
    """

    def __init__(self, stationary_charges=(), k=K, collision_distance=COLLISION_DISTANCE):
        self.stationary_charges = tuple(stationary_charges)
        self.k = k
        self.collision_distance = collision_distance

    def with_charge(self, charge):
        """Return a new field with ``charge`` added to the sources."""
        return CoulombField(self.stationary_charges + (charge,), self.k, self.collision_distance)

    def sample_for_display(self, x, y):
        x, y = np.broadcast_arrays(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
        ex = np.zeros(x.shape)
        ey = np.zeros(x.shape)
        v = np.zeros(x.shape)
        hit = np.zeros(x.shape, dtype=bool)
        q_on_point = np.zeros(x.shape)

        for charge in self.stationary_charges:
            dx = x - charge.x
            dy = y - charge.y
            r = np.sqrt(dx**2 + dy**2)
            coincident = r == 0

            q_on_point[coincident] += charge.q
            hit |= coincident

            r = np.where(coincident, 1.0, r)
            factor = self.k * charge.q / r**3
            ex += factor * dx
            ey += factor * dy
            v += self.k * charge.q / r

        # signed by the net charge on the point, +inf when it cancels out
        sentinel = np.copysign(np.inf, q_on_point)
        ex = np.where(hit, sentinel, ex)
        ey = np.where(hit, sentinel, ey)
        v = np.where(hit, sentinel, v)

        E = np.stack([ex, ey], axis=-1)
        if v.ndim == 0:
            return E, float(v)
        return E, v

    def sample_for_dynamics(self, x, y):
        E = np.zeros(2)
        for charge in self.stationary_charges:
            dx = x - charge.x
            dy = y - charge.y
            r_sq = dx * dx + dy * dy
            r = np.sqrt(r_sq)

            # The field grows without bound near a charge; treat it as a hit.
            if r < self.collision_distance or r == 0:
                return None

            factor = self.k * charge.q / (r_sq * r)
            E[0] += factor * dx
            E[1] += factor * dy
        return E

    def potential_at(self, x, y):
        """Potential only; see ``sample_for_display``."""
        return self.sample_for_display(x, y)[1]


def evaluate(point, stationary_charges, k=K):
    """
    Field vector and potential of ``stationary_charges`` at ``point``.

    Functional form of ``CoulombField.sample_for_display``.

    Parameters
    ----------
    point : array-like
        Query point [x, y].
    stationary_charges : iterable of StationaryCharge
    k : float, optional
        Coulomb's constant.

    Returns
    -------
    tuple
        ``(E, V)`` with ``E`` a numpy array [Ex, Ey] and ``V`` a float.
    """
    return CoulombField(stationary_charges, k=k).sample_for_display(point[0], point[1])
