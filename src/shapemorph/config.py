"""
Engine Configuration
====================
This module holds the construction parameters of the geometry engine and
the global constants shared by the engine and its front ends.

Classes:
    EngineConfig: Validated construction parameters.

Exports:
    RADIUS_RANGE, POLYGON_COUNT_RANGE, MORPH_SPEED_RANGE: Control ranges
        offered by interactive front ends.
    DEFAULT_MORPH_DURATION: Blend duration used when none is given.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
import numbers
from typing import Any, Optional, Union

from shapemorph.errors import InvalidConfigError
from shapemorph.model.shapes import ShapeId, resolve_shape


# Global Constants
RADIUS_RANGE: tuple[float, float] = (50.0, 200.0)
POLYGON_COUNT_RANGE: tuple[int, int] = (100, 1000)
MORPH_SPEED_RANGE: tuple[float, float] = (0.1, 2.0)
DEFAULT_MORPH_DURATION: float = 1.0


@dataclass(frozen=True)
class EngineConfig:
    """
    One-time construction contract of the geometry engine.

    ``initial_shape`` accepts a plain shape name and is normalised to a
    ShapeId. ``seed`` makes the property matrix reproducible; None draws
    from OS entropy.
    """
    radius: float = 100.0
    polygon_count: int = 500
    grid_width: int = 200
    grid_height: int = 200
    morph_speed: float = 0.5
    dynamic_evolution: bool = True
    initial_shape: Union[ShapeId, str] = ShapeId.SPHERE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        # Frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, "initial_shape", resolve_shape(self.initial_shape))
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            InvalidConfigError: If any parameter is out of range.
        """
        if not isinstance(self.radius, numbers.Real) or not math.isfinite(self.radius):
            raise InvalidConfigError(f"radius must be a finite number, got {self.radius!r}.")
        for name in ("polygon_count", "grid_width", "grid_height"):
            if not isinstance(getattr(self, name), numbers.Integral):
                raise InvalidConfigError(f"{name} must be an integer, got {getattr(self, name)!r}.")
        if self.polygon_count < 1:
            raise InvalidConfigError(f"polygon_count must be >= 1, got {self.polygon_count}.")
        if self.grid_width < 1 or self.grid_height < 1:
            raise InvalidConfigError(
                f"Grid size must be at least 1x1, got {self.grid_width}x{self.grid_height}."
            )
        validate_morph_speed(self.morph_speed)

    def replace(self, **changes: Any) -> EngineConfig:
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes)


def validate_morph_speed(speed: float) -> float:
    if not isinstance(speed, numbers.Real) or not math.isfinite(speed) or speed < 0.0:
        raise InvalidConfigError(f"morph_speed must be a non-negative finite number, got {speed!r}.")
    return speed
