"""
Point Cloud Viewer (PyVista)
============================
Renders the engine's vertex buffer as a point cloud.

Why is this file needed?
------------------------
The geometry engine knows nothing about rendering. This module is the
consumer side: it converts a VertexAttributeSet into a ``pv.PolyData``
with one point-data array per attribute and drives a timer loop that
calls ``engine.update`` once per frame.

Key bindings:
    space: pause / resume
    n: morph to the next shape
    e: toggle dynamic evolution
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
import pyvista as pv

from shapemorph.config import DEFAULT_MORPH_DURATION
from shapemorph.engine import GeometryEngine
from shapemorph.errors import RebuildFailure
from shapemorph.model.buffer import VertexAttributeSet
from shapemorph.model.shapes import ShapeId
from shapemorph.model.transition import validate_duration

logger = logging.getLogger(__name__)

DEFAULT_SCALARS = "charge"


def attributes_to_polydata(attributes: VertexAttributeSet) -> pv.PolyData:
    """
    Convert a vertex buffer into a point cloud.

    Every render attribute except ``position`` becomes a point-data array
    under its shader name (e.g. ``symmetryIndex``, ``lightProperties``).
    """
    arrays = attributes.to_render_arrays()
    cloud = pv.PolyData(np.array(attributes.position, dtype=np.float64))
    for name, values in arrays.items():
        if name == "position":
            continue
        cloud.point_data[name] = values
    return cloud


def next_shape(shape: ShapeId) -> ShapeId:
    """Following shape in catalog order, wrapping around."""
    shapes = list(ShapeId)
    return shapes[(shapes.index(shape) + 1) % len(shapes)]


class PointCloudViewer:
    """
    Interactive PyVista window driven by a GeometryEngine.

    Raises:
        InvalidDurationError: If ``morph_duration`` is not positive.
    """

    def __init__(
        self,
        engine: GeometryEngine,
        morph_duration: float = DEFAULT_MORPH_DURATION,
        scalars: str = DEFAULT_SCALARS,
        point_size: float = 5.0,
        off_screen: bool = False,
    ) -> None:
        self.engine = engine
        self.morph_duration = validate_duration(morph_duration)
        self.scalars = scalars
        self.paused: bool = False
        self.frame_count: int = 0
        self._last_time: Optional[float] = None

        self.cloud = attributes_to_polydata(engine.current_attributes())

        self.plotter = pv.Plotter(off_screen=off_screen)
        self.plotter.set_background("black")
        self.plotter.add_mesh(
            self.cloud,
            scalars=scalars,
            cmap="viridis",
            point_size=point_size,
            render_points_as_spheres=True,
            show_scalar_bar=False,
        )
        self.plotter.add_text(str(engine.current_shape), name="shape_label", font_size=12)
        self.plotter.camera_position = "xy"
        self.plotter.camera.position = (0.0, 0.0, engine.config.radius * 2)

        self.plotter.add_key_event("space", self.toggle_pause)
        self.plotter.add_key_event("n", self.morph_to_next)
        self.plotter.add_key_event("e", self.toggle_evolution)

    # --- Controls ---

    def toggle_pause(self) -> None:
        self.paused = not self.paused
        self._last_time = None
        logger.info(f"Pause state changed: paused={self.paused}")

    def toggle_evolution(self) -> None:
        self.engine.set_dynamic_evolution(not self.engine.config.dynamic_evolution)

    def morph_to_next(self) -> None:
        target = next_shape(self.engine.current_shape)
        self.engine.request_morph(target, self.morph_duration)
        self.plotter.add_text(str(target), name="shape_label", font_size=12)

    # --- Frame loop ---

    def refresh(self) -> None:
        """Copy the engine's latest buffer into the displayed cloud."""
        attributes = self.engine.current_attributes()
        if attributes.position.shape[0] != self.cloud.n_points:
            # Vertex count changed, swap the whole dataset
            self.cloud.copy_from(attributes_to_polydata(attributes))
            return

        self.cloud.points = np.array(attributes.position, dtype=np.float64)
        for name, values in attributes.to_render_arrays().items():
            if name != "position":
                self.cloud.point_data[name] = values

    def step(self, delta_time: float) -> None:
        """Advance the engine one frame and update the display."""
        try:
            rebuilt = self.engine.update(delta_time)
        except RebuildFailure as e:
            # Keep showing the previous buffer, try again next frame
            logger.warning(f"Frame {self.frame_count} skipped: {e}")
            return

        if rebuilt:
            self.refresh()
        self.frame_count += 1

        if self.frame_count % 60 == 0:
            logger.debug(f"Rendered {self.frame_count} frames, time={self.engine.time:.2f}")

    def _on_timer(self, _step: int) -> None:
        if self.paused:
            return
        now = time.perf_counter()
        delta_time = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now
        self.step(delta_time)
        self.plotter.render()

    def show(self, max_steps: int = 10**9, interval_ms: int = 16) -> None:
        """Open the window and run the update loop until it is closed."""
        logger.info(f"Visualization started ({self.engine.config.polygon_count} points).")
        self.plotter.add_timer_event(max_steps=max_steps, duration=interval_ms, callback=self._on_timer)
        self.plotter.show()
