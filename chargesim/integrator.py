# integrator.py
"""
Semi-implicit kinematic stepper for movable charges.

Each call moves a charge with the acceleration computed on the previous
call and only then refreshes the acceleration from the field sampled at
the position the charge had before moving:

- x += v dt + a dt² / 2
- v += a dt
- a = (q / m) E(x_old)

The one-step lag in ``a`` is part of the scheme. Trajectory files are
reproducible against it, so it must not be reordered.
"""

import logging

logger = logging.getLogger(__name__)


def advance(charge, field, dt):
    """
    Advance a single movable charge by one time step, in place.

    Parameters
    ----------
    charge : MovableCharge
        The charge to update. Frozen charges are left untouched.
    field : ElectricField
        Source of ``sample_for_dynamics``.
    dt : float
        Time step.
    """
    if not charge.should_move:
        return

    E = field.sample_for_dynamics(charge.x, charge.y)
    if E is None:
        charge.freeze(collided=True)
        logger.debug("Charge collided at (%.4f, %.4f)", charge.x, charge.y)
        return

    charge.x += charge.v[0] * dt + 0.5 * charge.a[0] * dt**2
    charge.y += charge.v[1] * dt + 0.5 * charge.a[1] * dt**2

    charge.v = charge.v + charge.a * dt

    charge.a = E * (charge.q / charge.m)
