# config.py
"""
Constants and run configuration for the charge simulator.

Grid units are used for distances throughout; charges and masses are in
whatever consistent units the definition files use.
"""

import os
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Physical constants
# =============================================================================

K = 8.99e9  # Coulomb's constant

# Below this distance (grid units) a movable charge is considered to have
# hit a stationary one.
COLLISION_DISTANCE = 2.0


# =============================================================================
# Defaults
# =============================================================================

GRID_SIZE = 256

DEFAULT_DT = 1e-6             # headless step
DEFAULT_MAX_STEPS = 10000
DEFAULT_FRAME_DT = 1e-8       # viewer step
DEFAULT_STEPS_PER_FRAME = 1000

DEFAULT_OUTPUT_DIR = "output"
DEFAULT_STATIONARY_FILE = "stationary_charges.txt"
DEFAULT_MOVABLE_FILE = "movable_charges.txt"
GRID_EXPORT_NAME = "output_grid.csv"


@dataclass
class SimulationConfig:
    """Configuration for a single simulator run."""
    dt: float = DEFAULT_DT
    max_steps: int = DEFAULT_MAX_STEPS
    stop_on_exit: bool = False
    save_field: bool = False
    save_movement: bool = False
    gui: bool = True
    steps_per_frame: int = DEFAULT_STEPS_PER_FRAME
    frame_dt: float = DEFAULT_FRAME_DT
    grid_width: int = GRID_SIZE
    grid_height: int = GRID_SIZE
    k: float = K
    collision_distance: float = COLLISION_DISTANCE
    stationary_file: str = DEFAULT_STATIONARY_FILE
    movable_file: str = DEFAULT_MOVABLE_FILE
    output_dir: str = DEFAULT_OUTPUT_DIR
    random_charges: int = 0
    seed: Optional[int] = None
    verbose: bool = True

    @property
    def grid_export_path(self):
        return os.path.join(self.output_dir, GRID_EXPORT_NAME)

    @classmethod
    def from_args(cls, args):
        """
        Build a configuration from parsed command line arguments.

        Parameters
        ----------
        args : argparse.Namespace
            Result of ``cli.build_parser().parse_args()``.

        Returns
        -------
        SimulationConfig
        """
        return cls(
            dt=args.dt,
            max_steps=args.max_steps,
            stop_on_exit=args.stop_on_exit,
            save_field=args.save_field,
            save_movement=args.save_movement,
            gui=not args.no_gui,
            steps_per_frame=args.steps_per_frame,
            frame_dt=args.frame_dt,
            grid_width=args.grid_size,
            grid_height=args.grid_size,
            stationary_file=args.stationary_file,
            movable_file=args.movable_file,
            output_dir=args.output_dir,
            random_charges=args.random_charges,
            seed=args.seed,
            verbose=not args.quiet,
        )
