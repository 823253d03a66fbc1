"""
Vertex Attribute Buffer
=======================
Builds the per-vertex attribute arrays handed to the renderer.

Vertex ``i`` of ``N`` sits at theta = 2*pi*i/N and phi = pi*i/N. This is a
single sweep through the angular domain, not a uniform sampling of the
sphere, and the mapping must stay exactly this for the renderer's
attribute layout to match.

The buffer is always rebuilt from scratch; nothing is patched in place.

Classes:
    VertexAttributes: One row of the buffer.
    VertexAttributeSet: The full buffer, one read-only array per attribute.
    AttributeBufferBuilder: Sweeps the vertex domain and fills the buffer.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
import logging
from typing import TYPE_CHECKING, Dict, NamedTuple

import numpy as np

from shapemorph.errors import RebuildFailure
from shapemorph.model.field import ScalarField, ScalarFieldEvaluator
from shapemorph.model.properties import PropertyCell, PropertyMatrix

if TYPE_CHECKING:
    import numpy.typing as npt

    from shapemorph.config import EngineConfig

logger = logging.getLogger(__name__)

ORIENTATION = (0.0, 1.0, 0.0)


class VertexAttributes(NamedTuple):
    position: tuple[float, float, float]
    mass: float
    charge: float
    symmetry_index: int
    light_reflectivity: float
    light_absorption: float
    valency: int
    volume: float
    density: float
    orientation: tuple[float, float, float]


@dataclass(frozen=True)
class VertexAttributeSet:
    """
    Structure-of-arrays vertex buffer with ``len(self)`` rows.
    """
    position: npt.NDArray[np.float64]
    mass: npt.NDArray[np.float64]
    charge: npt.NDArray[np.float64]
    symmetry_index: npt.NDArray[np.int64]
    light_reflectivity: npt.NDArray[np.float64]
    light_absorption: npt.NDArray[np.float64]
    valency: npt.NDArray[np.int64]
    volume: npt.NDArray[np.float64]
    density: npt.NDArray[np.float64]
    orientation: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        n = self.position.shape[0]
        for f in fields(self):
            arr = getattr(self, f.name)
            if arr.shape[0] != n:
                raise ValueError(f"Attribute '{f.name}' has {arr.shape[0]} rows, expected {n}.")
            arr.setflags(write=False)

    def __len__(self) -> int:
        return self.position.shape[0]

    def row(self, index: int) -> VertexAttributes:
        """Attributes of a single vertex."""
        return VertexAttributes(
            position=tuple(float(v) for v in self.position[index]),
            mass=float(self.mass[index]),
            charge=float(self.charge[index]),
            symmetry_index=int(self.symmetry_index[index]),
            light_reflectivity=float(self.light_reflectivity[index]),
            light_absorption=float(self.light_absorption[index]),
            valency=int(self.valency[index]),
            volume=float(self.volume[index]),
            density=float(self.density[index]),
            orientation=tuple(float(v) for v in self.orientation[index]),
        )

    def to_render_arrays(self) -> Dict[str, npt.NDArray[np.float32]]:
        """
        Pack the buffer into float32 arrays keyed by shader attribute name.

        ``lightProperties`` interleaves (reflectivity, absorption).
        """
        return {
            "position": self.position.astype(np.float32),
            "mass": self.mass.astype(np.float32),
            "charge": self.charge.astype(np.float32),
            "symmetryIndex": self.symmetry_index.astype(np.float32),
            "lightProperties": np.column_stack(
                (self.light_reflectivity, self.light_absorption)
            ).astype(np.float32),
            "valency": self.valency.astype(np.float32),
            "volume": self.volume.astype(np.float32),
            "density": self.density.astype(np.float32),
            "orientation": self.orientation.astype(np.float32),
        }


def vertex_angles(polygon_count: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Azimuth and polar angle of every vertex index."""
    i = np.arange(polygon_count, dtype=np.float64)
    theta = (i / polygon_count) * np.pi * 2
    phi = (i / polygon_count) * np.pi
    return theta, phi


def grid_coordinates(
    theta: npt.NDArray[np.float64],
    phi: npt.NDArray[np.float64],
    grid_width: int,
    grid_height: int,
) -> tuple[npt.NDArray[np.int64], npt.NDArray[np.int64]]:
    """Unclamped property grid indices for the given angles."""
    grid_x = np.floor((theta / (np.pi * 2)) * grid_width).astype(np.int64)
    grid_y = np.floor((phi / np.pi) * grid_height).astype(np.int64)
    return grid_x, grid_y


def derive_attributes(cell: PropertyCell, count: int) -> Dict[str, npt.NDArray]:
    """Auxiliary rendering attributes; pure functions of the property cell."""
    def column(values) -> npt.NDArray[np.float64]:
        return np.broadcast_to(np.asarray(values, dtype=np.float64), (count,)).copy()

    return {
        "mass": column(10 + cell.sphericity * 5),
        "charge": column((cell.rugosity - 0.5) * 2),
        "symmetry_index": np.floor(column(cell.axis_symmetry) * 8).astype(np.int64),
        "light_reflectivity": column(0.3 + cell.smoothness * 0.5),
        "light_absorption": column(0.2 + cell.edge_sharpness * 0.3),
        "valency": np.floor(column(cell.local_connectivity) * 4).astype(np.int64),
        "volume": column(10 + cell.density_gradient * 10),
        "density": column(0.2 + cell.rigidity * 0.3),
        "orientation": np.tile(np.array(ORIENTATION, dtype=np.float64), (count, 1)),
    }


class AttributeBufferBuilder:
    """
    Regenerates the full vertex buffer from config, property matrix and
    scalar field state.
    """

    def rebuild(
        self,
        config: EngineConfig,
        matrix: PropertyMatrix,
        scalar_field: ScalarField,
    ) -> VertexAttributeSet:
        """
        Build a new buffer with exactly ``config.polygon_count`` rows.

        Args:
            config: Radius, vertex count and grid size.
            matrix: Property grid to sample.
            scalar_field: Clock and morph state.

        Raises:
            RebuildFailure: If anything goes wrong during the sweep,
                including floating point errors and non-finite positions.

        Returns:
            The freshly built buffer.
        """
        try:
            with np.errstate(invalid="raise", divide="raise", over="raise"):
                return self._sweep(config, matrix, scalar_field)
        except RebuildFailure:
            raise
        except Exception as e:
            raise RebuildFailure(f"Vertex buffer generation failed: {e}") from e

    def _sweep(
        self,
        config: EngineConfig,
        matrix: PropertyMatrix,
        scalar_field: ScalarField,
    ) -> VertexAttributeSet:
        n = config.polygon_count
        theta, phi = vertex_angles(n)

        grid_x, grid_y = grid_coordinates(theta, phi, config.grid_width, config.grid_height)
        cell = matrix.gather(grid_x, grid_y)

        evaluator = ScalarFieldEvaluator(config.radius)
        dynamic_radius = np.asarray(
            evaluator.evaluate_field(theta, phi, cell, scalar_field), dtype=np.float64
        )

        # Spherical to Cartesian
        x = dynamic_radius * np.sin(phi) * np.cos(theta)
        y = dynamic_radius * np.sin(phi) * np.sin(theta)
        z = dynamic_radius * np.cos(phi)
        position = np.column_stack((x, y, z))

        if not np.all(np.isfinite(position)):
            bad = int(np.count_nonzero(~np.isfinite(position).all(axis=1)))
            raise RebuildFailure(f"{bad} of {n} vertices have non-finite positions.")

        return VertexAttributeSet(position=position, **derive_attributes(cell, n))
