# trajectory.py
"""
Per-particle step logs.

``TrajectoryLog`` keeps one append-only buffer per movable charge slot.
Slots are never removed because frozen charges stay in the simulation, so
slot ``i`` always maps to the file ``charge_<i>.csv``.
"""

import glob
import logging
import os

import numpy as np

logger = logging.getLogger(__name__)

COLUMNS = ["x", "y", "vx", "vy", "ax", "ay"]
FILE_PATTERN = "charge_{}.csv"


class TrajectoryLog:
    """
    Append-only arena of recorded steps, one buffer per slot.

    Attributes
    ----------
    steps : list of list of tuple
        ``steps[i]`` holds ``(x, y, vx, vy, ax, ay)`` rows for slot ``i``.
    """

    def __init__(self, slots=0):
        self.steps = [[] for _ in range(slots)]

    def __len__(self):
        return len(self.steps)

    def add_slot(self):
        """Open a buffer for a new particle and return its index."""
        self.steps.append([])
        return len(self.steps) - 1

    def append(self, slot, charge):
        self.steps[slot].append(charge.get_state())

    def clear(self):
        for buffer in self.steps:
            buffer.clear()

    def as_array(self, slot):
        """
        Recorded steps of one slot.

        Returns
        -------
        numpy.ndarray
            Array of shape (n_steps, 6).
        """
        return np.array(self.steps[slot], dtype=float).reshape(-1, len(COLUMNS))

    def save(self, output_dir):
        """
        Write every slot to ``output_dir/charge_<i>.csv``.

        Stale ``charge_*.csv`` files from earlier runs are removed first so
        the directory only holds the current particles.

        Parameters
        ----------
        output_dir : str
            Target directory, created if missing.

        Returns
        -------
        list of str
            Paths of the written files, in slot order.
        """
        os.makedirs(output_dir, exist_ok=True)
        for stale in glob.glob(os.path.join(output_dir, FILE_PATTERN.format("*"))):
            os.remove(stale)

        paths = []
        for slot in range(len(self.steps)):
            path = os.path.join(output_dir, FILE_PATTERN.format(slot))
            np.savetxt(path, self.as_array(slot), fmt="%.6f", delimiter=", ")
            paths.append(path)

        logger.info("Saved %d trajectories to %s", len(paths), output_dir)
        return paths
