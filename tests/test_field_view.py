from types import SimpleNamespace

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest

from chargesim.cell_grid import CellGrid
from chargesim.electric_field import CoulombField, StationaryCharge
from chargesim.field_view import FieldViewer, background_image
from chargesim.simulation import Simulation


@pytest.fixture
def viewer():
    sim = Simulation(32, 32, k=1.0)
    sim.add_stationary_charge(16, 16, 5.0)
    sim.add_movable_charge(8.0, 8.0, q=-1.0, m=1.0, v=(1.0, 0.0))
    sim.populate_field()
    view = FieldViewer(sim, dt=1e-3, steps_per_frame=5)
    yield view
    plt.close(view.fig)


def test_background_saturates_sentinel_cells():
    charge = StationaryCharge(1, 1, 1.0)
    grid = CellGrid(3, 3)
    grid.populate_field(CoulombField([charge], k=1.0))
    image = background_image(grid)
    assert np.isfinite(image).all()
    assert image[1, 1] == image.max()


def test_paused_frame_does_not_step(viewer):
    viewer.update(0)
    assert viewer.sim.step_count == 0
    assert "paused" in viewer.info_text.get_text()


def test_running_frame_steps_simulation(viewer):
    viewer._on_key(SimpleNamespace(key=" "))
    assert viewer.running
    viewer.update(0)
    assert viewer.sim.step_count == 5
    assert viewer.sim.time_elapsed == pytest.approx(5e-3)
    assert "Collisions: 0" in viewer.info_text.get_text()


def test_controls_change_only_viewer_settings(viewer):
    viewer._on_dt_slider(-7)
    viewer._on_steps_slider(12.0)
    viewer._on_check("Vectors")
    assert viewer.dt == pytest.approx(1e-7)
    assert viewer.steps_per_frame == 12
    assert not viewer.draw_vectors
    assert viewer.sim.step_count == 0


def test_probe_on_top_of_charge_draws_zero_field(viewer):
    viewer.cursor = (16.0, 16.0)
    viewer.update(0)
    x, y = viewer.probe_line.get_data()
    assert list(x) == [16.0, 16.0]
    assert list(y) == [16.0, 16.0]
