"""
Shape-morphing point cloud geometry engine.
"""
from shapemorph.config import EngineConfig
from shapemorph.engine import GeometryEngine, EngineSnapshot
from shapemorph.errors import (
    ShapeMorphError,
    UnknownShapeError,
    InvalidDurationError,
    InvalidConfigError,
    RebuildFailure,
)
from shapemorph.model.buffer import VertexAttributeSet, VertexAttributes
from shapemorph.model.shapes import ShapeId

__all__ = [
    "EngineConfig",
    "EngineSnapshot",
    "GeometryEngine",
    "InvalidConfigError",
    "InvalidDurationError",
    "RebuildFailure",
    "ShapeId",
    "ShapeMorphError",
    "UnknownShapeError",
    "VertexAttributeSet",
    "VertexAttributes",
]
