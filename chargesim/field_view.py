# field_view.py
"""
Interactive matplotlib view of a running simulation.

The viewer only reads simulation state. The things it changes are its
own: the time step, the number of steps per frame and whether the
simulation is running.

Controls
--------
- space: start / pause
- left click on the plot: flip the sign of the probe charge at the cursor
- sliders: log10 of the time step, steps per frame
- check buttons: per-charge details, velocity / acceleration / field arrows
"""

import logging
import time

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import CheckButtons, Slider

from chargesim.config import DEFAULT_FRAME_DT, DEFAULT_STEPS_PER_FRAME
from chargesim.helpers import angle

logger = logging.getLogger(__name__)

# Divisors turning physical vectors into arrow lengths in grid units.
ACCELERATION_VECTOR_SCALE = 2.5e3
VELOCITY_VECTOR_SCALE = 1e2
INTENSITY_VECTOR_SCALE = 1e6

POSITIVE_COLOR = "red"
NEGATIVE_COLOR = "blue"


def charge_color(q):
    return POSITIVE_COLOR if q > 0 else NEGATIVE_COLOR


def background_image(grid):
    """
    Log-scaled field strength of a populated grid.

    Sentinel (infinite) cells are clamped to the largest finite value so
    they show up saturated.
    """
    intensity = grid.intensity()
    finite = np.isfinite(intensity)
    top = intensity[finite].max() if finite.any() else 1.0
    return np.log10(1.0 + np.where(finite, intensity, top))


class FieldViewer:
    """
    Animated view of a ``Simulation``.

    Parameters
    ----------
    sim : Simulation
        Simulation to display. Its field grid should already be populated.
    dt : float, optional
        Time step per simulation step.
    steps_per_frame : int, optional
        Simulation steps per animation frame.
    running : bool, optional
        Start unpaused.
    """

    def __init__(self, sim, dt=DEFAULT_FRAME_DT, steps_per_frame=DEFAULT_STEPS_PER_FRAME,
                 running=False):
        self.sim = sim
        self.dt = dt
        self.steps_per_frame = int(steps_per_frame)
        self.running = running
        self.draw_details = True
        self.draw_vectors = True
        self.probe_sign = 1.0
        self.cursor = None
        self.update_time = 0.0
        self.anim = None
        self._dynamic_artists = []

        w, h = sim.dimensions

        self.fig, self.ax = plt.subplots(figsize=(8, 8))
        plt.subplots_adjust(left=0.1, bottom=0.25)

        self.ax.imshow(background_image(sim.grid), cmap="gray", origin="upper",
                       extent=(-0.5, w - 0.5, h - 0.5, -0.5))
        stationary = sim.stationary_charges
        if stationary:
            self.ax.scatter([c.x for c in stationary], [c.y for c in stationary], s=12,
                            c=[charge_color(c.q) for c in stationary], marker="s")
        self.ax.set_xlim(-0.5, w - 0.5)
        self.ax.set_ylim(h - 0.5, -0.5)
        self.ax.set_title("Charges in an electrostatic field")

        self.points = self.ax.scatter([], [], s=20)
        self.probe_line, = self.ax.plot([], [], lw=1, color=POSITIVE_COLOR)
        self.info_text = self.ax.text(0.01, 0.99, "", transform=self.ax.transAxes, va="top",
                                      ha="left", fontsize=8, color="white",
                                      bbox=dict(facecolor="black", alpha=0.5))

        ax_dt = plt.axes([0.2, 0.12, 0.65, 0.03], facecolor="lightgoldenrodyellow")
        self.dt_slider = Slider(ax_dt, "log10 dt", -12, -2,
                                valinit=float(np.clip(np.log10(dt), -12, -2)))
        self.dt_slider.on_changed(self._on_dt_slider)

        ax_steps = plt.axes([0.2, 0.07, 0.65, 0.03], facecolor="lightgoldenrodyellow")
        self.steps_slider = Slider(ax_steps, "steps/frame", 1, max(5000, self.steps_per_frame),
                                   valinit=self.steps_per_frame, valstep=1)
        self.steps_slider.on_changed(self._on_steps_slider)

        ax_check = plt.axes([0.01, 0.01, 0.15, 0.08])
        self.check = CheckButtons(ax_check, ["Details", "Vectors"],
                                  [self.draw_details, self.draw_vectors])
        self.check.on_clicked(self._on_check)

        self.fig.canvas.mpl_connect("key_press_event", self._on_key)
        self.fig.canvas.mpl_connect("motion_notify_event", self._on_motion)
        self.fig.canvas.mpl_connect("button_press_event", self._on_click)

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def _on_dt_slider(self, val):
        self.dt = 10.0 ** val

    def _on_steps_slider(self, val):
        self.steps_per_frame = int(val)

    def _on_check(self, label):
        if label == "Details":
            self.draw_details = not self.draw_details
        elif label == "Vectors":
            self.draw_vectors = not self.draw_vectors

    def _on_key(self, event):
        if event.key == " ":
            self.running = not self.running
            logger.info("Simulation %s", "running" if self.running else "paused")

    def _on_motion(self, event):
        if event.inaxes is self.ax and event.xdata is not None:
            self.cursor = (event.xdata, event.ydata)
        else:
            self.cursor = None

    def _on_click(self, event):
        if event.inaxes is self.ax and event.button == 1:
            self.probe_sign = -self.probe_sign

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _clear_dynamic(self):
        for artist in self._dynamic_artists:
            artist.remove()
        self._dynamic_artists = []

    def _draw_charges(self):
        moving = [c for c in self.sim.movable_charges if c.should_move]
        offsets = np.array([[c.x, c.y] for c in moving]).reshape(-1, 2)
        self.points.set_offsets(offsets)
        self.points.set_color([charge_color(c.q) for c in moving])

        if not moving:
            return
        if self.draw_vectors:
            v = np.array([c.v for c in moving]) / VELOCITY_VECTOR_SCALE
            a = np.array([c.a for c in moving]) / ACCELERATION_VECTOR_SCALE
            for vectors, color in ((v, NEGATIVE_COLOR), (a, "yellow")):
                self._dynamic_artists.append(self.ax.quiver(
                    offsets[:, 0], offsets[:, 1], vectors[:, 0], vectors[:, 1],
                    angles="xy", scale_units="xy", scale=1, color=color, width=0.002))
        if self.draw_details:
            for c in moving:
                label = (f"x: {c.x:.2f}, y: {c.y:.2f}, q: {c.q:.2f}, m: {c.m:.2f}, "
                         f"v: ({c.v[0]:.2f}, {c.v[1]:.2f} | {np.degrees(angle(c.v)):.2f}°), "
                         f"a: ({c.a[0]:.2f}, {c.a[1]:.2f} | {np.degrees(angle(c.a)):.2f}°)")
                self._dynamic_artists.append(
                    self.ax.text(c.x, c.y - 3, label, fontsize=6, color="white"))

    def _draw_probe(self):
        if self.cursor is None:
            self.probe_line.set_data([], [])
            return
        x, y = self.cursor
        E = self.sim.field.sample_for_dynamics(x, y)
        if E is None:
            E = np.zeros(2)
        if self.draw_vectors:
            end = np.array([x, y]) + self.probe_sign * E / INTENSITY_VECTOR_SCALE
            self.probe_line.set_data([x, end[0]], [y, end[1]])
            self.probe_line.set_color(charge_color(self.probe_sign))
        else:
            self.probe_line.set_data([], [])
        if self.draw_details:
            self._dynamic_artists.append(self.ax.text(
                x + 2, y - 2, f"E: ({E[0]:.2f}, {E[1]:.2f} | {np.degrees(angle(E)):.2f}°)",
                fontsize=7, color="white"))

    def info_lines(self):
        sim = self.sim
        return [
            f"Elapsed time: {sim.time_elapsed:.10g} s",
            f"Steps per frame: {self.steps_per_frame}",
            f"dt per step: {self.dt:.3g}",
            f"dt per frame: {self.dt * self.steps_per_frame:.3g}",
            f"Movable charges: {sim.movable_count}",
            f"Collisions: {sim.collided_count}",
            f"Stationary charges: {sim.stationary_count}",
            f"Compute time per frame: {self.update_time * 1000:.2f} ms",
            "running" if self.running else "paused (space to start)",
        ]

    def update(self, frame):
        """Advance the simulation by one frame and redraw."""
        start = time.perf_counter()
        if self.running:
            for _ in range(self.steps_per_frame):
                self.sim.step(self.dt)
        self.update_time = time.perf_counter() - start

        self._clear_dynamic()
        self._draw_charges()
        self._draw_probe()
        self.info_text.set_text("\n".join(self.info_lines()))
        return [self.points, self.probe_line, self.info_text] + self._dynamic_artists

    def show(self):
        self.anim = FuncAnimation(self.fig, self.update, interval=1000 / 60, blit=False,
                                  cache_frame_data=False)
        plt.show()
