# charge_files.py
"""
Readers for charge definition files.

Stationary charges, one per line::

    <x:int> <y:int> <q:float>

Movable charges, one per line::

    <x> <y> <q> <m> <vx> <vy> <ax> <ay>

Fields are whitespace separated. Blank lines and lines starting with ``#``
are skipped. Any malformed row raises ``ChargeFileError`` naming the file
and the 1-based line number.
"""

import logging
import os

from chargesim.electric_field import StationaryCharge
from chargesim.particle import MovableCharge

logger = logging.getLogger(__name__)

STATIONARY_FIELDS = ("x", "y", "q")
MOVABLE_FIELDS = ("x", "y", "q", "m", "vx", "vy", "ax", "ay")

DEFAULT_STATIONARY_CONTENT = """\
# Number of charges does not need to be given.
#
# Format:
# <x> <y> <q>
50 130 -5
120 90 5
200 200 3
"""

DEFAULT_MOVABLE_CONTENT = """\
# Number of charges does not need to be given.
#
# Format:
# <x> <y> <q> <m> <vx> <vy> <ax> <ay>
160 120 -0.0008 1 100 -1000 0 0
"""


class ChargeFileError(ValueError):
    """A charge definition file could not be parsed."""

    def __init__(self, path, line_number, message):
        self.path = path
        self.line_number = line_number
        super().__init__(f"{path}, line {line_number}: {message}")


def _data_lines(path):
    with open(path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            yield line_number, stripped.split()


def _parse_values(path, line_number, parts, names, converters):
    if len(parts) != len(names):
        raise ChargeFileError(
            path, line_number, f"expected {len(names)} values, found {len(parts)}"
        )
    values = []
    for name, text, convert in zip(names, parts, converters):
        try:
            values.append(convert(text))
        except ValueError:
            raise ChargeFileError(
                path, line_number, f"cannot read {name} from {text!r}"
            ) from None
    return values


def read_stationary_charges(path):
    """
    Read stationary charges from ``path``.

    Parameters
    ----------
    path : str
        Definition file.

    Returns
    -------
    list of StationaryCharge

    Raises
    ------
    ChargeFileError
        On a malformed row or a negative coordinate.
    OSError
        If the file cannot be read.
    """
    charges = []
    for line_number, parts in _data_lines(path):
        x, y, q = _parse_values(path, line_number, parts, STATIONARY_FIELDS, (int, int, float))
        if x < 0 or y < 0:
            raise ChargeFileError(path, line_number, f"coordinates must be non-negative, got ({x}, {y})")
        charges.append(StationaryCharge(x, y, q))
    logger.info("Read %d stationary charges from %s", len(charges), path)
    return charges


def read_movable_charges(path):
    """
    Read movable charges from ``path``.

    Returns
    -------
    list of MovableCharge

    Raises
    ------
    ChargeFileError
        On a malformed row or a non-positive mass.
    OSError
        If the file cannot be read.
    """
    charges = []
    for line_number, parts in _data_lines(path):
        x, y, q, m, vx, vy, ax, ay = _parse_values(
            path, line_number, parts, MOVABLE_FIELDS, (float,) * len(MOVABLE_FIELDS)
        )
        if not m > 0:
            raise ChargeFileError(path, line_number, f"mass must be positive, got {m}")
        charges.append(MovableCharge(x, y, q, m, v=(vx, vy), a=(ax, ay)))
    logger.info("Read %d movable charges from %s", len(charges), path)
    return charges


def write_default_charge_files(stationary_path, movable_path):
    """
    Create example definition files where they do not exist yet.

    Existing files are never overwritten.

    Returns
    -------
    list of str
        The paths that were created.
    """
    created = []
    for path, content in ((stationary_path, DEFAULT_STATIONARY_CONTENT),
                          (movable_path, DEFAULT_MOVABLE_CONTENT)):
        if os.path.exists(path):
            continue
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        logger.info("Created example charge file %s", path)
        created.append(path)
    return created
