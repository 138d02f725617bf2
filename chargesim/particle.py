# particle.py
"""
Movable Charge State.

This module provides the ``MovableCharge`` class: the kinematic state of a
charged particle pushed around by the stationary charges.

The state consists of:
- Position: (x, y) in grid units, continuous
- Velocity: v = [vx, vy]
- Acceleration: a = [ax, ay], the value computed on the previous step
- Charge q and mass m

Example
-------
>>> from chargesim.particle import MovableCharge
>>> charge = MovableCharge(x=100, y=0, q=1.0, m=1.0)
>>> print(charge.get_state())
"""

import numpy as np

from chargesim.helpers import vector


class MovableCharge:
    """
    A charged particle that moves under the field of stationary charges.

    Once frozen (``should_move`` is False) a charge is never updated again,
    but it keeps its slot in the simulation so logs stay aligned.

    Parameters
    ----------
    x, y : float
        Initial position.
    q : float
        Charge.
    m : float
        Mass. Must be positive.
    v : array-like, optional
        Initial velocity [vx, vy], zero by default.
    a : array-like, optional
        Initial acceleration [ax, ay], zero by default.
    should_move : bool, optional
        Whether the integrator should advance this charge.

    Attributes
    ----------
    collided : bool
        Set once the charge came too close to a stationary charge.

    Raises
    ------
    ValueError
        If ``m`` is not positive.
    """

    def __init__(self, x, y, q, m, v=(0.0, 0.0), a=(0.0, 0.0), should_move=True):
        if not m > 0:
            raise ValueError(f"Mass of a movable charge must be positive, got {m}")
        self.x = float(x)
        self.y = float(y)
        self.q = float(q)
        self.m = float(m)
        self.v = vector(*v)
        self.a = vector(*a)
        self.should_move = should_move
        self.collided = False

    def freeze(self, collided=False):
        """Stop the charge for good, optionally marking it as collided."""
        self.should_move = False
        if collided:
            self.collided = True

    def get_state(self):
        """
        Get the current kinematic state.

        Returns
        -------
        tuple
            ``(x, y, vx, vy, ax, ay)`` as floats.
        """
        return (self.x, self.y, float(self.v[0]), float(self.v[1]),
                float(self.a[0]), float(self.a[1]))

    def __repr__(self):
        return (f"MovableCharge(x={self.x:.4f}, y={self.y:.4f}, q={self.q}, m={self.m}, "
                f"v={np.round(self.v, 4).tolist()}, a={np.round(self.a, 4).tolist()}, "
                f"should_move={self.should_move}, collided={self.collided})")
