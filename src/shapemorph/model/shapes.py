"""
Shape Profile Library
=====================
Closed catalog of radial profile functions.

A profile maps a direction on the sphere, given by the azimuth ``theta``
in [0, 2*pi) and the polar angle ``phi`` in [0, pi), together with a base
radius to the surface radius in that direction. All profiles accept
scalars or numpy arrays (broadcast together).

Classes:
    ShapeId: The closed set of shape identifiers.
    ShapeProfile: Abstract base class for all profiles.

Exports:
    SHAPE_PROFILES: Registry from ShapeId to profile instance.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Dict, Union

import numpy as np
import matplotlib.pyplot as plt

from shapemorph.errors import UnknownShapeError

if TYPE_CHECKING:
    import numpy.typing as npt

ArrayLike = Union[float, "npt.NDArray[np.float64]"]


class ShapeId(StrEnum):
    SPHERE = "Sphere"
    CUBE = "Cube"
    CONE = "Cone"
    CYLINDER = "Cylinder"
    TORUS = "Torus"
    PARABOLA = "Parabola"


# ==========================================
# ABSTRACT CLASS FOR SHAPE PROFILES
# ==========================================
class ShapeProfile(ABC):
    """
    Abstract base class for shape profiles.
    """
    SHAPE: ShapeId

    def __call__(self, theta: ArrayLike, phi: ArrayLike, radius: float) -> ArrayLike:
        """
        Evaluate the profile radius.

        Args:
            theta: Azimuth angle(s) in radians.
            phi: Polar angle(s) in radians.
            radius: Base radius of the shape.

        Returns:
            Profile radius, a float for scalar input, otherwise an array of
            the broadcast shape of ``theta`` and ``phi``.
        """
        theta_arr, phi_arr = np.broadcast_arrays(
            np.asarray(theta, dtype=np.float64),
            np.asarray(phi, dtype=np.float64),
        )
        result = self.evaluate(theta_arr, phi_arr, float(radius))
        if result.ndim == 0:
            return float(result)
        return result

    @abstractmethod
    def evaluate(
        self,
        theta: npt.NDArray[np.float64],
        phi: npt.NDArray[np.float64],
        radius: float,
    ) -> npt.NDArray[np.float64]:
        """Array implementation of the profile; inputs share one shape."""
        pass

    def plot(self, theta: float = 0.0, radius: float = 1.0, num_points: int = 500) -> None:
        """
        Plot the profile radius over the polar angle for a fixed azimuth.
        """
        phis = np.linspace(0.0, np.pi, num_points, endpoint=False)
        radii = self(np.full_like(phis, theta), phis, radius)

        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 5))

        plt.plot(np.degrees(phis), radii, 'b', lw=2)

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.SHAPE} profile (theta = {np.degrees(theta):.1f}°)")
        plt.xlabel("Polar angle (°)")
        plt.ylabel("Radius")

        plt.xlim(-5, 185)
        plt.show()


class SphereProfile(ShapeProfile):
    SHAPE = ShapeId.SPHERE

    def evaluate(self, theta, phi, radius):
        return np.full_like(theta, radius)


class CubeProfile(ShapeProfile):
    """
    Box-like profile built from the larger of |sin(theta)| and |cos(phi)|.
    Always within [0, radius] for a non-negative radius.
    """
    SHAPE = ShapeId.CUBE

    def evaluate(self, theta, phi, radius):
        return radius * np.maximum(np.abs(np.sin(theta)), np.abs(np.cos(phi)))


class ConeProfile(ShapeProfile):
    """Linear taper from the full radius at the pole to zero at phi = pi."""
    SHAPE = ShapeId.CONE

    def evaluate(self, theta, phi, radius):
        return radius * (1.0 - phi / np.pi)


class CylinderProfile(ShapeProfile):
    SHAPE = ShapeId.CYLINDER

    def evaluate(self, theta, phi, radius):
        return radius * np.sin(phi)


class TorusProfile(ShapeProfile):
    """Major radius ``radius`` with a minor radius of 0.3 * ``radius``."""
    SHAPE = ShapeId.TORUS
    MINOR_RADIUS_RATIO = 0.3

    def evaluate(self, theta, phi, radius):
        minor_radius = radius * self.MINOR_RADIUS_RATIO
        return radius + minor_radius * np.cos(phi)


class ParabolaProfile(ShapeProfile):
    """Zero at both poles, peaking at the equator (phi = pi/2)."""
    SHAPE = ShapeId.PARABOLA

    def evaluate(self, theta, phi, radius):
        return radius * (1.0 - (2.0 * phi / np.pi - 1.0) ** 2)


SHAPE_PROFILES: Dict[ShapeId, ShapeProfile] = {
    profile.SHAPE: profile
    for profile in (
        SphereProfile(),
        CubeProfile(),
        ConeProfile(),
        CylinderProfile(),
        TorusProfile(),
        ParabolaProfile(),
    )
}


def available_shapes() -> tuple[str, ...]:
    """Names of all known shapes, in catalog order."""
    return tuple(str(shape) for shape in ShapeId)


def resolve_shape(shape: Union[ShapeId, str]) -> ShapeId:
    """
    Convert a shape name to its ShapeId.

    Raises:
        UnknownShapeError: If ``shape`` does not name a known profile.
    """
    if isinstance(shape, ShapeId):
        return shape
    try:
        return ShapeId(shape)
    except ValueError:
        raise UnknownShapeError(shape, available_shapes()) from None


def get_profile(shape: Union[ShapeId, str]) -> ShapeProfile:
    """Look up the profile for a shape id or name."""
    return SHAPE_PROFILES[resolve_shape(shape)]
