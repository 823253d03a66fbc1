"""
Error Taxonomy
==============
Exceptions raised by the geometry engine.

All of them are local, recoverable conditions: the engine state is left
untouched and the caller decides what to do next (e.g. retry the rebuild
on the next frame).

Classes:
    ShapeMorphError: Common base class.
    UnknownShapeError: Requested shape id is not in the profile library.
    InvalidDurationError: Morph duration is zero, negative or not finite.
    InvalidConfigError: Engine configuration failed validation.
    RebuildFailure: Regeneration of the vertex buffer failed.
"""
from __future__ import annotations

from typing import Iterable


class ShapeMorphError(Exception):
    """Base class for all geometry engine errors."""


class UnknownShapeError(ShapeMorphError, KeyError):
    """
    Raised when a shape identifier does not name one of the known profiles.
    """

    def __init__(self, shape: object, available: Iterable[str] = ()) -> None:
        self.shape = shape
        self.available = tuple(str(s) for s in available)
        super().__init__(shape)

    def __str__(self) -> str:
        return (f"Unknown shape '{self.shape}'. "
                f"Available shapes: {', '.join(self.available)}.")


class InvalidDurationError(ShapeMorphError, ValueError):
    """Raised when a morph is requested with a non-positive duration."""

    def __init__(self, duration: float) -> None:
        self.duration = duration
        super().__init__(f"Morph duration must be a positive finite number, got {duration!r}.")


class InvalidConfigError(ShapeMorphError, ValueError):
    pass


class RebuildFailure(ShapeMorphError, RuntimeError):
    """
    Raised when the vertex buffer could not be regenerated.
    The underlying exception is chained as ``__cause__``.
    """
