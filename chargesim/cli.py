"""
Charge Simulator Runner

Simulates movable charges in the field of stationary charges read from
definition files, either in an interactive matplotlib window or headless
with field and trajectory export.

Usage:
    chargesim [--no-gui] [--max-steps N] [--dt DT] [--stop-on-exit]
              [--save-field] [--save-movement] [--output-dir DIR]
"""

import argparse
import logging
import sys
import time

import numpy as np
from tqdm import tqdm

from chargesim.charge_files import ChargeFileError, write_default_charge_files
from chargesim.config import (
    DEFAULT_FRAME_DT, DEFAULT_MOVABLE_FILE, DEFAULT_STATIONARY_FILE, SimulationConfig,
)
from chargesim.simulation import Simulation, scatter_random_charges

logger = logging.getLogger(__name__)


def build_parser():
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(
        description="Simulate charged particles moving in an electrostatic field"
    )
    parser.add_argument(
        "--no-gui", action="store_true",
        help="Run without the simulation window"
    )
    parser.add_argument(
        "-m", "--max-steps", type=int, default=defaults.max_steps,
        help="Maximum number of simulation steps (headless)"
    )
    parser.add_argument(
        "-d", "--dt", type=float, default=defaults.dt,
        help="Time step of the headless simulation"
    )
    parser.add_argument(
        "--stop-on-exit", action="store_true",
        help="Stop once every movable charge has left the grid"
    )
    parser.add_argument(
        "--save-field", action="store_true",
        help="Save the field intensity and potential of every grid cell"
    )
    parser.add_argument(
        "--save-movement", action="store_true",
        help="Save the movement of every charge (headless only)"
    )
    parser.add_argument(
        "--stationary-file", type=str, default=defaults.stationary_file,
        help="Stationary charge definitions: <x> <y> <q> per line"
    )
    parser.add_argument(
        "--movable-file", type=str, default=defaults.movable_file,
        help="Movable charge definitions: <x> <y> <q> <m> <vx> <vy> <ax> <ay> per line"
    )
    parser.add_argument(
        "--output-dir", type=str, default=defaults.output_dir,
        help="Directory for exported files"
    )
    parser.add_argument(
        "--grid-size", type=int, default=defaults.grid_width,
        help="Width and height of the grid in cells"
    )
    parser.add_argument(
        "--random-charges", type=int, default=0,
        help="Scatter this many random movable charges over the grid"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for --random-charges"
    )
    parser.add_argument(
        "--steps-per-frame", type=int, default=defaults.steps_per_frame,
        help="Simulation steps per displayed frame (GUI)"
    )
    parser.add_argument(
        "--frame-dt", type=float, default=DEFAULT_FRAME_DT,
        help="Initial time step in the GUI"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Only report warnings and errors"
    )
    return parser


def run_headless(sim, config):
    """
    Step the simulation without a window.

    Parameters
    ----------
    sim : Simulation
    config : SimulationConfig
        Uses ``dt``, ``max_steps``, ``stop_on_exit`` and ``verbose``.

    Returns
    -------
    int
        Number of steps taken.
    """
    steps = 0
    pbar = tqdm(range(config.max_steps), disable=not config.verbose)
    for _ in pbar:
        sim.step(config.dt)
        steps += 1
        if config.stop_on_exit and sim.all_out_of_bounds():
            print("All charges have left the grid")
            break
    pbar.close()
    return steps


def load_simulation(config):
    if (config.stationary_file, config.movable_file) == (DEFAULT_STATIONARY_FILE,
                                                         DEFAULT_MOVABLE_FILE):
        for path in write_default_charge_files(config.stationary_file, config.movable_file):
            print(f"Created example file {path}")

    sim = Simulation.from_files(
        config.stationary_file,
        config.movable_file,
        width=config.grid_width,
        height=config.grid_height,
        k=config.k,
        collision_distance=config.collision_distance,
        track_movement=config.save_movement and not config.gui,
    )
    if config.random_charges:
        rng = np.random.default_rng(config.seed)
        scatter_random_charges(sim, config.random_charges, rng)
    return sim


def run(config):
    """
    Run the simulator with the given configuration.

    Returns
    -------
    int
        Process exit status.
    """
    if config.gui and config.save_movement:
        print("--save-movement is not supported with the GUI; add --no-gui "
              "or drop --save-movement", file=sys.stderr)
        return 2

    sim = load_simulation(config)
    if config.verbose:
        print("Stationary charges:")
        for charge in sim.stationary_charges:
            print(f"x: {charge.x}, y: {charge.y}, q: {charge.q}")
        print(f"Movable charges: {sim.movable_count}")

    # the field grid only feeds the export and the window background
    if config.save_field or config.gui:
        start = time.time()
        sim.populate_field()
        print(f"Field computed in {(time.time() - start) * 1000:.2f}ms")
        if config.save_field:
            sim.grid.save_grid_to_file(config.grid_export_path)
            print(f"Field saved to {config.grid_export_path}")

    if config.gui:
        from chargesim.field_view import FieldViewer
        FieldViewer(sim, dt=config.frame_dt, steps_per_frame=config.steps_per_frame).show()
        return 0

    if not config.save_field and not config.save_movement:
        print("Running without the GUI but nothing will be saved.")
        print("Use --save-field to save the field, --save-movement to save charge movement.")
        return 0
    if not config.save_movement:
        return 0

    print(f"Simulating for at most {config.max_steps} steps")
    start = time.time()
    steps = run_headless(sim, config)
    print(f"Simulated {steps} steps in {(time.time() - start) * 1000:.2f}ms")

    start = time.time()
    paths = sim.save_movement_history(config.output_dir)
    print(f"Saved {len(paths)} trajectories in {(time.time() - start) * 1000:.2f}ms")
    if config.verbose:
        print(sim.summary().to_string())
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = SimulationConfig.from_args(args)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return run(config)
    except (ChargeFileError, ValueError, OSError) as ex:
        logger.error("%s", ex)
        return 1


if __name__ == "__main__":
    sys.exit(main())
