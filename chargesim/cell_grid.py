# cell_grid.py
"""
Sampled Field Grid.

``CellGrid`` caches the field of the stationary charges on every integer
cell of a fixed-size grid. The cache backs the viewer background and the
flat-file field export; the integrator never reads it.

Cells are stored column-wise in numpy arrays indexed ``[y, x]``:

- ``q``: charge deposited on the cell, shape (h, w)
- ``e``: field vector, shape (h, w, 2)
- ``v``: potential, shape (h, w)

Example
-------
>>> from chargesim.cell_grid import CellGrid
>>> from chargesim.electric_field import CoulombField, StationaryCharge
>>> charge = StationaryCharge(2, 2, 1.0)
>>> grid = CellGrid(4, 4)
>>> grid.deposit(charge)
>>> grid.populate_field(CoulombField([charge], k=1.0))
>>> grid.cell(3, 2)
"""

import logging
import os
from collections import namedtuple

import numpy as np

from chargesim.config import GRID_SIZE

logger = logging.getLogger(__name__)

Cell = namedtuple("Cell", ["q", "e", "v"])


class CellGrid:
    """
    Fixed-size grid of field samples.

    Parameters
    ----------
    width, height : int, optional
        Grid dimensions in cells, 256 x 256 by default.

    Raises
    ------
    ValueError
        If a dimension is not a positive integer.
    """

    def __init__(self, width=GRID_SIZE, height=GRID_SIZE):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._w = int(width)
        self._h = int(height)
        self.q = np.zeros((self._h, self._w))
        self.e = np.zeros((self._h, self._w, 2))
        self.v = np.zeros((self._h, self._w))

    @property
    def dimensions(self):
        """(width, height) in cells."""
        return self._w, self._h

    def contains(self, x, y):
        return 0 <= x < self._w and 0 <= y < self._h

    def deposit(self, charge):
        """
        Add a stationary charge to the charge accumulated on its cell.

        Raises
        ------
        ValueError
            If the charge lies outside the grid.
        """
        if not self.contains(charge.x, charge.y):
            raise ValueError(
                f"Stationary charge at ({charge.x}, {charge.y}) lies outside the "
                f"{self._w}x{self._h} grid"
            )
        self.q[charge.y, charge.x] += charge.q

    def populate_field(self, field):
        """
        Sample ``field`` on every cell, overwriting ``e`` and ``v``.

        Parameters
        ----------
        field : ElectricField
            Anything with ``sample_for_display``.
        """
        ys, xs = np.mgrid[0:self._h, 0:self._w]
        E, V = field.sample_for_display(xs, ys)
        self.e[...] = E
        self.v[...] = V
        logger.debug("Populated %dx%d field grid", self._w, self._h)

    def intensity(self):
        """|E| for every cell, shape (h, w)."""
        return np.hypot(self.e[..., 0], self.e[..., 1])

    def cell(self, x, y):
        return Cell(float(self.q[y, x]), self.e[y, x].copy(), float(self.v[y, x]))

    def to_rows(self):
        """
        Flatten the grid to export rows.

        Returns
        -------
        numpy.ndarray
            Shape (h * w, 7) with columns x, y, q, Ex, Ey, |E|, V, rows
            ordered y outer and x inner.
        """
        ys, xs = np.mgrid[0:self._h, 0:self._w]
        return np.column_stack([
            xs.ravel(),
            ys.ravel(),
            self.q.ravel(),
            self.e[..., 0].ravel(),
            self.e[..., 1].ravel(),
            self.intensity().ravel(),
            self.v.ravel(),
        ])

    def save_grid_to_file(self, path):
        """
        Write the grid as ``x, y, q, Ex, Ey, |E|, V`` lines.

        Parameters
        ----------
        path : str
            Output file. Its directory is created if needed.
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fmt = ["%d", "%d"] + ["%.6f"] * 5
        np.savetxt(path, self.to_rows(), fmt=fmt, delimiter=", ")
        logger.info("Saved field grid to %s", path)
