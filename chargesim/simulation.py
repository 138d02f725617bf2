# simulation.py
"""
Simulation Driver.

``Simulation`` owns the field grid, the stationary and movable charges and
the optional trajectory log. Both the headless loop and the viewer drive
it through ``step(dt)``.

Example
-------
>>> from chargesim.simulation import Simulation
>>> sim = Simulation(256, 256, k=1.0)
>>> sim.add_stationary_charge(0, 0, 5.0)
>>> sim.add_movable_charge(100, 0, q=-1.0, m=1.0)
>>> for _ in range(100):
...     sim.step(0.01)
>>> print(sim.summary())
"""

import logging

import pandas as pd

from chargesim.cell_grid import CellGrid
from chargesim.charge_files import read_movable_charges, read_stationary_charges
from chargesim.config import COLLISION_DISTANCE, GRID_SIZE, K
from chargesim.electric_field import CoulombField, StationaryCharge
from chargesim.helpers import in_bounds
from chargesim.integrator import advance
from chargesim.particle import MovableCharge
from chargesim.trajectory import COLUMNS, TrajectoryLog

logger = logging.getLogger(__name__)

# Ranges used when scattering random test charges.
CHARGE_SCALE = 1e-4
RANDOM_CHARGE_RANGE = (-30.0 * CHARGE_SCALE, 30.0 * CHARGE_SCALE)
RANDOM_MASS_RANGE = (0.1, 20.0)
RANDOM_VELOCITY_RANGE = (-10.0, 10.0)
RANDOM_ACCELERATION_RANGE = (-10.0, 10.0)


class TrackingDisabledError(RuntimeError):
    """Trajectory history was requested but movement tracking is off."""


class Simulation:
    """
    Container and stepper for the whole simulated system.

    Parameters
    ----------
    width, height : int, optional
        Grid dimensions.
    k : float, optional
        Coulomb's constant for both the grid and the dynamics.
    collision_distance : float, optional
        Distance at which movable charges freeze.
    track_movement : bool, optional
        Record every step of every movable charge.

    Attributes
    ----------
    grid : CellGrid
    field : CoulombField
    movable_charges : list of MovableCharge
    step_count : int
        Number of ``step`` calls so far.
    time_elapsed : float
        Sum of the ``dt`` values passed to ``step``.
    """

    def __init__(self, width=GRID_SIZE, height=GRID_SIZE, k=K,
                 collision_distance=COLLISION_DISTANCE, track_movement=False):
        self.grid = CellGrid(width, height)
        self.field = CoulombField((), k=k, collision_distance=collision_distance)
        self.movable_charges = []
        self.history = TrajectoryLog()
        self._track_movement = track_movement
        self._tracking_used = track_movement
        self.step_count = 0
        self.time_elapsed = 0.0

    @classmethod
    def from_files(cls, stationary_file, movable_file=None, **kwargs):
        """
        Build a simulation from charge definition files.

        Parameters
        ----------
        stationary_file : str
            Stationary charge definitions.
        movable_file : str, optional
            Movable charge definitions.
        **kwargs
            Forwarded to the constructor.

        Raises
        ------
        ChargeFileError
            If a file is malformed.
        ValueError
            If a stationary charge lies outside the grid.
        """
        sim = cls(**kwargs)
        for charge in read_stationary_charges(stationary_file):
            sim.add_stationary_charge(charge.x, charge.y, charge.q)
        if movable_file is not None:
            for charge in read_movable_charges(movable_file):
                sim.add_charge(charge)
        return sim

    # -------------------------------------------------------------------------
    # Charges
    # -------------------------------------------------------------------------

    @property
    def stationary_charges(self):
        return self.field.stationary_charges

    def add_stationary_charge(self, x, y, q):
        charge = StationaryCharge(int(x), int(y), float(q))
        self.grid.deposit(charge)
        self.field = self.field.with_charge(charge)
        return charge

    def add_movable_charge(self, x, y, q, m, v=(0.0, 0.0), a=(0.0, 0.0)):
        """
        Create a movable charge and give it the next slot.

        Raises
        ------
        ValueError
            If ``m`` is not positive.
        """
        return self.add_charge(MovableCharge(x, y, q, m, v=v, a=a))

    def add_charge(self, charge):
        """Append an existing ``MovableCharge``; returns it."""
        self.movable_charges.append(charge)
        self.history.add_slot()
        return charge

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def populate_field(self):
        self.grid.populate_field(self.field)

    def step(self, dt):
        """
        Advance every movable charge by one time step.

        Parameters
        ----------
        dt : float
            Time step.
        """
        for slot, charge in enumerate(self.movable_charges):
            if not charge.should_move:
                continue
            advance(charge, self.field, dt)
            if charge.collided:
                logger.info("Charge %d collided with a stationary charge", slot)
            elif self._track_movement:
                self.history.append(slot, charge)
        self.step_count += 1
        self.time_elapsed += dt

    # -------------------------------------------------------------------------
    # Movement tracking
    # -------------------------------------------------------------------------

    def set_movement_tracking(self, enabled):
        """
        Switch step recording on or off.

        Turning tracking on drops anything recorded so far, so every slot's
        log starts at the same step.
        """
        if enabled and not self._track_movement:
            self.history.clear()
        self._track_movement = enabled
        self._tracking_used = self._tracking_used or enabled

    @property
    def is_tracking_movement(self):
        return self._track_movement

    def trajectory(self, slot):
        """Recorded steps of one charge as an (n, 6) array."""
        return self.history.as_array(slot)

    def trajectory_frame(self, slot):
        """Recorded steps of one charge as a DataFrame."""
        return pd.DataFrame(self.trajectory(slot), columns=COLUMNS)

    def save_movement_history(self, output_dir):
        """
        Write one ``charge_<i>.csv`` per movable charge into ``output_dir``.

        Raises
        ------
        TrackingDisabledError
            If movement tracking was never enabled.
        OSError
            If the files cannot be written.
        """
        if not self._tracking_used:
            raise TrackingDisabledError(
                "Movement history is only recorded with movement tracking enabled"
            )
        return self.history.save(output_dir)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    @property
    def dimensions(self):
        return self.grid.dimensions

    @property
    def movable_count(self):
        return len(self.movable_charges)

    @property
    def stationary_count(self):
        return len(self.field.stationary_charges)

    @property
    def moving_count(self):
        return sum(1 for c in self.movable_charges if c.should_move)

    @property
    def collided_count(self):
        return sum(1 for c in self.movable_charges if c.collided)

    def all_out_of_bounds(self):
        """True when no movable charge is strictly inside the grid."""
        w, h = self.dimensions
        return not any(in_bounds(c.x, c.y, 0.0, w, 0.0, h) for c in self.movable_charges)

    def summary(self):
        """
        Current state of every movable charge.

        Returns
        -------
        pandas.DataFrame
            One row per slot with the kinematic state and status flags.
        """
        rows = []
        for charge in self.movable_charges:
            row = dict(zip(COLUMNS, charge.get_state()))
            row.update(q=charge.q, m=charge.m, should_move=charge.should_move,
                       collided=charge.collided)
            rows.append(row)
        return pd.DataFrame(rows, columns=COLUMNS + ["q", "m", "should_move", "collided"])


def scatter_random_charges(sim, count, rng):
    """
    Add ``count`` random movable charges spread over the grid.

    Parameters
    ----------
    sim : Simulation
    count : int
    rng : numpy.random.Generator
        Source of randomness; pass a seeded generator for repeatable runs.

    Returns
    -------
    list of MovableCharge
    """
    w, h = sim.dimensions
    added = []
    for _ in range(count):
        added.append(sim.add_movable_charge(
            x=rng.uniform(0.0, w),
            y=rng.uniform(0.0, h),
            q=rng.uniform(*RANDOM_CHARGE_RANGE),
            m=rng.uniform(*RANDOM_MASS_RANGE),
            v=rng.uniform(*RANDOM_VELOCITY_RANGE, size=2),
            a=rng.uniform(*RANDOM_ACCELERATION_RANGE, size=2),
        ))
    return added
