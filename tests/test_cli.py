import pytest

from chargesim.cli import build_parser, main
from chargesim.config import SimulationConfig


@pytest.fixture
def charge_files(tmp_path):
    stationary = tmp_path / "stationary.txt"
    stationary.write_text("# x y q\n2 2 1\n")
    movable = tmp_path / "movable.txt"
    movable.write_text("# x y q m vx vy ax ay\n8 8 -0.0008 1 0 0 0 0\n")
    return str(stationary), str(movable)


def base_args(charge_files, output_dir):
    stationary, movable = charge_files
    return ["--no-gui", "--stationary-file", stationary, "--movable-file", movable,
            "--output-dir", str(output_dir), "--grid-size", "16", "-q"]


def test_parser_defaults():
    config = SimulationConfig.from_args(build_parser().parse_args([]))
    assert config.max_steps == 10000
    assert config.dt == 1e-6
    assert config.gui
    assert not config.save_movement
    assert config.grid_width == config.grid_height == 256
    assert config.seed is None
    assert SimulationConfig.from_args(build_parser().parse_args(["--seed", "7"])).seed == 7


def test_headless_run_exports_field_and_movement(charge_files, tmp_path):
    out = tmp_path / "out"
    status = main(base_args(charge_files, out) + ["--save-field", "--save-movement",
                                                  "--max-steps", "10"])
    assert status == 0

    grid_lines = (out / "output_grid.csv").read_text().splitlines()
    assert len(grid_lines) == 16 * 16
    assert grid_lines[2 * 16 + 2].startswith("2, 2, 1.000000, inf")

    movement = (out / "charge_0.csv").read_text().splitlines()
    assert len(movement) == 10
    assert len(movement[0].split(", ")) == 6


def test_stop_on_exit(tmp_path, charge_files):
    stationary, _ = charge_files
    movable = tmp_path / "outside.txt"
    movable.write_text("-10 -10 1 1 0 0 0 0\n")
    out = tmp_path / "out"
    args = ["--no-gui", "--stationary-file", stationary, "--movable-file", str(movable),
            "--output-dir", str(out), "--grid-size", "16", "-q",
            "--save-movement", "--stop-on-exit", "--max-steps", "50"]
    assert main(args) == 0
    assert len((out / "charge_0.csv").read_text().splitlines()) == 1


def test_headless_without_outputs_saves_nothing(charge_files, tmp_path, capsys):
    out = tmp_path / "out"
    assert main(base_args(charge_files, out)) == 0
    assert not out.exists()
    assert "nothing will be saved" in capsys.readouterr().out


def test_save_movement_needs_no_gui(charge_files, tmp_path):
    stationary, movable = charge_files
    args = ["--stationary-file", stationary, "--movable-file", movable, "--save-movement"]
    assert main(args) == 2


def test_malformed_file_exits_with_error(tmp_path, caplog):
    stationary = tmp_path / "stationary.txt"
    stationary.write_text("1 2\n")
    movable = tmp_path / "movable.txt"
    movable.write_text("")
    args = ["--no-gui", "--save-field", "--stationary-file", str(stationary),
            "--movable-file", str(movable), "--output-dir", str(tmp_path / "out")]
    assert main(args) == 1
    assert "line 1" in caplog.text


def test_random_charges_are_added(charge_files, tmp_path):
    out = tmp_path / "out"
    args = base_args(charge_files, out) + ["--save-movement", "--max-steps", "2",
                                           "--random-charges", "3", "--seed", "1"]
    assert main(args) == 0
    assert sorted(p.name for p in out.iterdir()) == [
        "charge_0.csv", "charge_1.csv", "charge_2.csv", "charge_3.csv"]
