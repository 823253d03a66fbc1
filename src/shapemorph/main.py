"""
Application Initialization
==========================
This module wires the engine to its front end and starts the frame loop.

It acts as the composition root. It:
1. Sets up logging.
2. Builds the GeometryEngine from the command line options.
3. Either opens the PyVista viewer, or steps the engine a fixed number of
   frames without a display (``--headless``).
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from shapemorph.config import EngineConfig, DEFAULT_MORPH_DURATION
from shapemorph.engine import GeometryEngine
from shapemorph.errors import ShapeMorphError
from shapemorph.logging_config import setup_logging
from shapemorph.model.shapes import available_shapes
from shapemorph.model.transition import validate_duration

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shapemorph",
        description="Shape-morphing point cloud generator.",
    )
    parser.add_argument("--shape", default="Sphere", choices=available_shapes(),
                        help="initial shape")
    parser.add_argument("--morph-to", default=None, choices=available_shapes(),
                        help="shape to morph to right after start-up")
    parser.add_argument("--duration", type=float, default=DEFAULT_MORPH_DURATION,
                        help="morph duration in seconds")
    parser.add_argument("--radius", type=float, default=100.0)
    parser.add_argument("--polygons", type=int, default=500, help="number of vertices")
    parser.add_argument("--grid", type=int, nargs=2, default=(200, 200),
                        metavar=("WIDTH", "HEIGHT"), help="property grid size")
    parser.add_argument("--speed", type=float, default=0.5, help="morph speed")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the property matrix (random if omitted)")
    parser.add_argument("--headless", action="store_true",
                        help="step the engine without opening a window")
    parser.add_argument("--frames", type=int, default=120,
                        help="frames to run in headless mode")
    parser.add_argument("--dt", type=float, default=1.0 / 60.0,
                        help="frame time step in headless mode")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser


def run_headless(engine: GeometryEngine, frames: int, delta_time: float) -> None:
    """Step the engine ``frames`` times and log a summary."""
    for _ in range(frames):
        engine.update(delta_time)

    snapshot = engine.snapshot()
    positions = engine.current_attributes().position
    logger.info(f"Ran {frames} frames: time={snapshot.time:.3f}, shape={snapshot.current_shape}, "
                f"transition={'active' if snapshot.transition else 'none'}, "
                f"vertices={snapshot.vertex_count}, "
                f"extent={positions.min(axis=0).round(2)}..{positions.max(axis=0).round(2)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    try:
        duration = validate_duration(args.duration)
        engine = GeometryEngine(EngineConfig(
            radius=args.radius,
            polygon_count=args.polygons,
            grid_width=args.grid[0],
            grid_height=args.grid[1],
            morph_speed=args.speed,
            initial_shape=args.shape,
            seed=args.seed,
        ))
        if args.morph_to:
            engine.request_morph(args.morph_to, duration)

        if args.headless:
            run_headless(engine, args.frames, args.dt)
        else:
            # Imported lazily so headless runs never touch VTK
            from shapemorph.view.point_cloud import PointCloudViewer
            PointCloudViewer(engine, morph_duration=duration).show()

    except ShapeMorphError as e:
        logger.error(f"Application failed: {e}")
        return 1

    return 0
