"""
Morph Transition State Machine
==============================
Tracks the timed blend between two shape profiles.

States:
    Idle: no transition, ``current_shape`` is authoritative.
    Transitioning: a MorphTransition is present and ``progress`` grows
        from 0 to 1 over ``duration`` seconds of ticks.

There is no queue. A morph requested while another is in flight discards
it and starts over from ``current_shape``, which already names the
previous target, not from the partially blended radius.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import math
from typing import Optional, Union

from shapemorph.errors import InvalidDurationError, UnknownShapeError
from shapemorph.model.shapes import ShapeId, resolve_shape, available_shapes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MorphTransition:
    from_shape: ShapeId
    to_shape: ShapeId
    duration: float
    progress: float = 0.0

    @property
    def is_complete(self) -> bool:
        return self.progress >= 1.0

    def advance(self, delta_time: float) -> MorphTransition:
        """Return a copy with progress moved forward by ``delta_time`` seconds."""
        progress = min(1.0, self.progress + delta_time / self.duration)
        return replace(self, progress=progress)


def validate_duration(duration: float) -> float:
    """
    Check that a morph duration is a positive finite number.

    Raises:
        InvalidDurationError: Otherwise.
    """
    try:
        value = float(duration)
    except (TypeError, ValueError):
        raise InvalidDurationError(duration) from None
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidDurationError(duration)
    return value


class MorphStateMachine:
    """
    Owns the current shape and the in-flight transition, if any.
    """

    def __init__(self, initial_shape: Union[ShapeId, str] = ShapeId.SPHERE) -> None:
        self.current_shape: ShapeId = resolve_shape(initial_shape)
        self.transition: Optional[MorphTransition] = None

    @property
    def is_transitioning(self) -> bool:
        return self.transition is not None

    def request_morph(self, target: Union[ShapeId, str], duration: float) -> MorphTransition:
        """
        Start blending from the current shape to ``target``.

        Args:
            target: Shape to morph to.
            duration: Blend duration in seconds, must be > 0.

        Raises:
            UnknownShapeError: If ``target`` is not a known shape.
            InvalidDurationError: If ``duration`` is not positive.

        Returns:
            The newly started transition.
        """
        try:
            target_shape = resolve_shape(target)
        except UnknownShapeError:
            logger.error(f"Invalid shape morphing target '{target}'. "
                         f"Available shapes: {available_shapes()}")
            raise

        try:
            duration = validate_duration(duration)
        except InvalidDurationError:
            logger.error(f"Invalid morph duration {duration!r} for target '{target_shape}'.")
            raise

        if self.transition is not None:
            logger.debug(f"Discarding in-flight morph "
                         f"{self.transition.from_shape} -> {self.transition.to_shape} "
                         f"at progress {self.transition.progress:.2f}.")

        from_shape = self.current_shape
        self.transition = MorphTransition(
            from_shape=from_shape,
            to_shape=target_shape,
            duration=duration,
        )
        # The target becomes the current shape right away, blending continues
        self.current_shape = target_shape

        logger.info(f"Shape morphing initiated: {from_shape} -> {target_shape} ({duration} s)")
        return self.transition

    def tick(self, delta_time: float) -> bool:
        """
        Advance the in-flight transition.

        Args:
            delta_time: Elapsed time in seconds, must be >= 0.

        Returns:
            True if a transition completed during this tick.
        """
        if not math.isfinite(delta_time) or delta_time < 0.0:
            raise ValueError(f"delta_time must be a non-negative finite number, got {delta_time}.")

        if self.transition is None:
            return False

        self.transition = self.transition.advance(delta_time)
        if self.transition.is_complete:
            logger.info(f"Shape morphing complete: "
                        f"{self.transition.from_shape} -> {self.transition.to_shape}")
            self.transition = None
            return True
        return False
