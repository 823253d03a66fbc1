"""
Surface Property Matrix
=======================
Per-cell surface descriptors used to modulate the base shape.

The matrix is a fixed ``grid_width x grid_height`` grid generated once and
never resized. Each cell bundles geometric, symmetry and topological
scalars. Only ``anisotropy`` and ``rugosity`` are random; every other
field carries a fixed default.

Classes:
    PropertyCell: One cell of surface descriptors (immutable).
    PropertyMatrix: The grid, stored as one read-only array per field.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, asdict
import logging
from typing import TYPE_CHECKING, Dict, Optional, Union

import numpy as np

from shapemorph.errors import InvalidConfigError

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

IndexLike = Union[int, "npt.NDArray[np.int64]"]


@dataclass(frozen=True)
class PropertyCell:
    """
    Surface descriptors of one grid cell.

    When returned from ``PropertyMatrix.gather`` the fields hold arrays
    (one value per looked-up vertex) instead of floats.
    """
    # Geometric Properties
    anisotropy: float = 0.0
    sphericity: float = 1.0
    rugosity: float = 0.0
    gaussian_curvature: float = 0.0
    mean_curvature: float = 0.0
    torsion: float = 0.0
    convexity: float = 1.0
    smoothness: float = 1.0
    edge_sharpness: float = 0.5
    fractal_dimension: float = 1.0
    surface_gradient: float = 0.0
    normal_variation: float = 0.0

    # Symmetry Properties
    axis_symmetry: float = 1.0
    rotation_symmetry: float = 1.0
    translation_symmetry: float = 1.0
    mirror_symmetry: float = 1.0
    radial_symmetry: float = 1.0

    # Topological & Structural Properties
    euler_characteristic: float = 0.0
    local_connectivity: float = 1.0
    boundary_curvature: float = 0.0
    tangent_plane_variance: float = 0.0
    density_gradient: float = 1.0
    rigidity: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


PROPERTY_NAMES: tuple[str, ...] = tuple(f.name for f in fields(PropertyCell))

# Fields drawn from U[0, 1) when a matrix is generated, in draw order
RANDOM_PROPERTIES: tuple[str, ...] = ("anisotropy", "rugosity")


class PropertyMatrix:
    """
    Fixed-size grid of PropertyCell values.

    Indices passed to ``cell`` and ``gather`` are clamped independently to
    ``[0, width - 1] x [0, height - 1]``.
    """

    def __init__(self, values: Dict[str, npt.NDArray[np.float64]]) -> None:
        """
        Args:
            values: One (width, height) array per PropertyCell field.

        Raises:
            InvalidConfigError: If a field is missing or the shapes differ.
        """
        missing = set(PROPERTY_NAMES) - set(values)
        if missing:
            raise InvalidConfigError(f"Missing property fields: {sorted(missing)}")

        self._values: Dict[str, npt.NDArray[np.float64]] = {}
        shape: Optional[tuple[int, ...]] = None
        for name in PROPERTY_NAMES:
            arr = np.array(values[name], dtype=np.float64)
            if arr.ndim != 2 or arr.shape[0] < 1 or arr.shape[1] < 1:
                raise InvalidConfigError(
                    f"Property '{name}' must be a non-empty 2D grid, got shape {arr.shape}."
                )
            if shape is None:
                shape = arr.shape
            elif arr.shape != shape:
                raise InvalidConfigError(
                    f"Property '{name}' has shape {arr.shape}, expected {shape}."
                )
            arr.setflags(write=False)
            self._values[name] = arr

        self.width, self.height = shape

    @classmethod
    def generate(
        cls,
        width: int,
        height: int,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> PropertyMatrix:
        """
        Build a fully populated matrix.

        Args:
            width: Number of cells along the azimuth.
            height: Number of cells along the polar angle.
            seed: Seed for a fresh generator. Ignored if ``rng`` is given.
            rng: Generator to draw from. When both ``seed`` and ``rng`` are
                 None the generator is seeded from OS entropy.

        Returns:
            The generated matrix.
        """
        if width < 1 or height < 1:
            raise InvalidConfigError(f"Grid size must be at least 1x1, got {width}x{height}.")

        if rng is None:
            rng = np.random.default_rng(seed)

        defaults = PropertyCell()
        values = {
            name: np.full((width, height), getattr(defaults, name), dtype=np.float64)
            for name in PROPERTY_NAMES
        }
        for name in RANDOM_PROPERTIES:
            values[name] = rng.random((width, height))

        logger.debug(f"Generated {width}x{height} property matrix (seed={seed}).")
        return cls(values)

    @classmethod
    def filled(cls, width: int, height: int, cell: Optional[PropertyCell] = None) -> PropertyMatrix:
        """Build a matrix where every cell equals ``cell``."""
        cell = cell or PropertyCell()
        return cls({
            name: np.full((width, height), value, dtype=np.float64)
            for name, value in cell.to_dict().items()
        })

    @property
    def shape(self) -> tuple[int, int]:
        return self.width, self.height

    def values(self, name: str) -> npt.NDArray[np.float64]:
        """Read-only (width, height) array of one property."""
        return self._values[name]

    def clamp(self, x: IndexLike, y: IndexLike) -> tuple[IndexLike, IndexLike]:
        """Clamp grid coordinates into the matrix bounds."""
        return np.clip(x, 0, self.width - 1), np.clip(y, 0, self.height - 1)

    def cell(self, x: int, y: int) -> PropertyCell:
        """Fetch a single cell (indices are clamped)."""
        cx, cy = self.clamp(x, y)
        return PropertyCell(**{
            name: float(arr[cx, cy]) for name, arr in self._values.items()
        })

    def gather(self, x: npt.NDArray[np.int64], y: npt.NDArray[np.int64]) -> PropertyCell:
        """
        Vectorised lookup of many cells at once.

        Args:
            x: Grid X index per vertex.
            y: Grid Y index per vertex.

        Returns:
            A PropertyCell whose fields are arrays aligned with ``x``/``y``.
        """
        cx, cy = self.clamp(np.asarray(x), np.asarray(y))
        return PropertyCell(**{
            name: arr[cx, cy] for name, arr in self._values.items()
        })

    def __getitem__(self, index: tuple[int, int]) -> PropertyCell:
        x, y = index
        return self.cell(x, y)

    def __repr__(self) -> str:
        return f"PropertyMatrix(width={self.width}, height={self.height})"
