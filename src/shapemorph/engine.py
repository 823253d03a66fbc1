"""
Geometry Engine
===============
The command interface used by the render loop and any UI front end.

Why is this file needed?
------------------------
1. Ownership: it owns the property matrix, the scalar field (clock and
   morph state) and the latest vertex buffer. Nothing else mutates them.
2. Commands: front ends talk to it only through ``update``,
   ``request_morph``, ``set_morph_speed``, ``set_dynamic_evolution`` and
   ``reconfigure``.
3. Observation: ``current_attributes`` and ``snapshot`` hand out read-only
   views, stable between two ``update`` calls.

Classes:
    EngineSnapshot: Read-only view of the engine state.
    GeometryEngine: The engine itself.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Optional, Union

from shapemorph.config import EngineConfig, DEFAULT_MORPH_DURATION, validate_morph_speed
from shapemorph.errors import RebuildFailure
from shapemorph.model.buffer import AttributeBufferBuilder, VertexAttributeSet
from shapemorph.model.field import ScalarField
from shapemorph.model.properties import PropertyMatrix
from shapemorph.model.shapes import ShapeId
from shapemorph.model.transition import MorphStateMachine, MorphTransition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSnapshot:
    time: float
    current_shape: ShapeId
    transition: Optional[MorphTransition]
    morph_speed: float
    dynamic_evolution: bool
    vertex_count: int


class GeometryEngine:
    """
    Shape-morphing point cloud generator.

    The render loop calls ``update(delta_time)`` once per frame and reads
    the refreshed buffer from ``current_attributes()``.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        matrix: Optional[PropertyMatrix] = None,
    ) -> None:
        """
        Args:
            config: Construction parameters. Defaults to ``EngineConfig()``.
            matrix: Pre-built property matrix. Generated from
                    ``config.grid_width``, ``config.grid_height`` and
                    ``config.seed`` when omitted.

        Raises:
            RebuildFailure: If the initial buffer cannot be generated.
        """
        self.config = config or EngineConfig()
        self.matrix = matrix or PropertyMatrix.generate(
            self.config.grid_width,
            self.config.grid_height,
            seed=self.config.seed,
        )
        self.scalar_field = ScalarField(morph=MorphStateMachine(self.config.initial_shape))
        self._builder = AttributeBufferBuilder()

        self._attributes: VertexAttributeSet = self._builder.rebuild(
            self.config, self.matrix, self.scalar_field
        )
        self._log_generated()

    @classmethod
    def configure(
        cls,
        radius: float = 100.0,
        polygon_count: int = 500,
        grid_width: int = 200,
        grid_height: int = 200,
        morph_speed: float = 0.5,
        dynamic_evolution: bool = True,
        initial_shape: Union[ShapeId, str] = ShapeId.SPHERE,
        seed: Optional[int] = None,
    ) -> GeometryEngine:
        """Build an engine from plain keyword parameters."""
        return cls(EngineConfig(
            radius=radius,
            polygon_count=polygon_count,
            grid_width=grid_width,
            grid_height=grid_height,
            morph_speed=morph_speed,
            dynamic_evolution=dynamic_evolution,
            initial_shape=initial_shape,
            seed=seed,
        ))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def current_shape(self) -> ShapeId:
        return self.scalar_field.current_shape

    @property
    def transition(self) -> Optional[MorphTransition]:
        return self.scalar_field.transition

    @property
    def time(self) -> float:
        return self.scalar_field.time

    def current_attributes(self) -> VertexAttributeSet:
        """Buffer produced by the most recent successful rebuild."""
        return self._attributes

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            time=self.scalar_field.time,
            current_shape=self.current_shape,
            transition=self.transition,
            morph_speed=self.config.morph_speed,
            dynamic_evolution=self.config.dynamic_evolution,
            vertex_count=len(self._attributes),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def update(self, delta_time: float) -> bool:
        """
        Advance one frame.

        With dynamic evolution enabled the clock moves by
        ``delta_time * morph_speed``, the morph transition is ticked by
        ``delta_time`` and the buffer is rebuilt. Otherwise nothing happens.

        Args:
            delta_time: Seconds since the previous frame, must be >= 0.

        Raises:
            ValueError: If ``delta_time`` is negative or not finite.
            RebuildFailure: If the rebuild fails. The previous buffer is kept.

        Returns:
            True if the buffer was rebuilt.
        """
        if not math.isfinite(delta_time) or delta_time < 0.0:
            raise ValueError(f"delta_time must be a non-negative finite number, got {delta_time}.")

        if not self.config.dynamic_evolution:
            return False

        self.scalar_field.advance(delta_time, self.config.morph_speed)
        self.scalar_field.morph.tick(delta_time)

        self.rebuild()

        logger.debug(f"Geometry updated: time={self.scalar_field.time:.3f}, "
                     f"morph_speed={self.config.morph_speed}, shape={self.current_shape}")
        return True

    def request_morph(
        self,
        target: Union[ShapeId, str],
        duration: float = DEFAULT_MORPH_DURATION,
    ) -> MorphTransition:
        """
        Start morphing to ``target`` over ``duration`` seconds.

        Any in-flight transition is discarded. The blend becomes visible on
        the next ``update``.

        Raises:
            UnknownShapeError: If ``target`` is not a known shape.
            InvalidDurationError: If ``duration`` is not positive.
        """
        return self.scalar_field.morph.request_morph(target, duration)

    def set_morph_speed(self, speed: float) -> None:
        validate_morph_speed(speed)
        self.config = self.config.replace(morph_speed=speed)
        logger.info(f"Morph speed set to {speed}")

    def set_dynamic_evolution(self, enabled: bool) -> None:
        self.config = self.config.replace(dynamic_evolution=bool(enabled))
        logger.info(f"Dynamic evolution {'enabled' if enabled else 'disabled'}")

    def reconfigure(
        self,
        radius: Optional[float] = None,
        polygon_count: Optional[int] = None,
    ) -> VertexAttributeSet:
        """
        Change the radius and/or vertex count and rebuild immediately.

        The property matrix is kept. On failure both the previous
        configuration and the previous buffer stay in place.

        Raises:
            InvalidConfigError: If the new values are invalid.
            RebuildFailure: If the rebuild fails.
        """
        changes: dict[str, Any] = {}
        if radius is not None:
            changes["radius"] = radius
        if polygon_count is not None:
            changes["polygon_count"] = polygon_count
        if not changes:
            return self._attributes

        logger.info(f"Reconfiguring geometry: {changes}")
        previous = self.config
        self.config = previous.replace(**changes)
        try:
            self.rebuild()
        except RebuildFailure:
            self.config = previous
            raise

        self._log_generated()
        return self._attributes

    def rebuild(self) -> VertexAttributeSet:
        """
        Regenerate the full buffer from the current state.

        Raises:
            RebuildFailure: If generation fails. The previous buffer is kept.
        """
        try:
            attributes = self._builder.rebuild(self.config, self.matrix, self.scalar_field)
        except RebuildFailure:
            logger.exception(f"Geometry generation failed "
                             f"(time={self.scalar_field.time}, shape={self.current_shape})")
            raise

        self._attributes = attributes
        return attributes

    def _log_generated(self) -> None:
        logger.info(f"Geometry generated: radius={self.config.radius}, "
                    f"polygon_count={self.config.polygon_count}, "
                    f"time={self.scalar_field.time}, shape={self.current_shape}")
