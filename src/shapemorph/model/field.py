"""
Scalar Field
============
Time- and property-parameterised radius over the spherical domain.

The dynamic radius at (theta, phi) is the base shape radius (blended
between two profiles while a morph is in flight) plus a property-driven
ripple:

    sin(theta * rugosity + t) * anisotropy * 10
    + cos(phi * sphericity + t) * convexity * 5

No clamping is applied, the radius may exceed the nominal radius or turn
negative for extreme inputs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

import numpy as np

from shapemorph.model.properties import PropertyCell
from shapemorph.model.shapes import ShapeId, get_profile
from shapemorph.model.transition import MorphStateMachine, MorphTransition

if TYPE_CHECKING:
    import numpy.typing as npt

ArrayLike = Union[float, "npt.NDArray[np.float64]"]

ANISOTROPY_AMPLITUDE = 10.0
CONVEXITY_AMPLITUDE = 5.0


@dataclass
class ScalarField:
    """
    Simulation clock plus the morph state it is evaluated with.
    """
    time: float = 0.0
    morph: MorphStateMachine = field(default_factory=MorphStateMachine)

    @property
    def current_shape(self) -> ShapeId:
        return self.morph.current_shape

    @property
    def transition(self) -> Optional[MorphTransition]:
        return self.morph.transition

    def advance(self, delta_time: float, morph_speed: float) -> None:
        """Move the clock forward by ``delta_time * morph_speed``."""
        self.time += delta_time * morph_speed


def lerp(start: ArrayLike, end: ArrayLike, t: float) -> ArrayLike:
    return (1.0 - t) * start + t * end


def property_modulation(
    theta: ArrayLike,
    phi: ArrayLike,
    cell: PropertyCell,
    time: float,
) -> ArrayLike:
    """Ripple term added on top of the base shape radius."""
    return (
        np.sin(theta * cell.rugosity + time) * cell.anisotropy * ANISOTROPY_AMPLITUDE
        + np.cos(phi * cell.sphericity + time) * cell.convexity * CONVEXITY_AMPLITUDE
    )


class ScalarFieldEvaluator:
    """
    Combines shape profiles, property cells and time into a dynamic radius.
    """

    def __init__(self, radius: float) -> None:
        """
        Args:
            radius: Base radius handed to every shape profile.
        """
        self.radius = radius

    def base_radius(
        self,
        theta: ArrayLike,
        phi: ArrayLike,
        current_shape: ShapeId,
        transition: Optional[MorphTransition] = None,
    ) -> ArrayLike:
        """
        Radius of the (possibly blended) base shape.

        While a transition is in flight the radii of ``from_shape`` and
        ``to_shape`` at the same angle are blended linearly by progress.
        """
        if transition is None:
            return get_profile(current_shape)(theta, phi, self.radius)

        from_value = get_profile(transition.from_shape)(theta, phi, self.radius)
        to_value = get_profile(transition.to_shape)(theta, phi, self.radius)
        return lerp(from_value, to_value, transition.progress)

    def evaluate(
        self,
        theta: ArrayLike,
        phi: ArrayLike,
        cell: PropertyCell,
        time: float,
        current_shape: ShapeId,
        transition: Optional[MorphTransition] = None,
    ) -> ArrayLike:
        """
        Dynamic radius for one vertex, or for arrays of vertices when
        ``theta``, ``phi`` and the cell fields are arrays.

        Args:
            theta: Azimuth angle(s) in radians.
            phi: Polar angle(s) in radians.
            cell: Property cell (or gathered cells) for the vertices.
            time: Simulation time.
            current_shape: Shape used when no transition is in flight.
            transition: In-flight morph, if any.

        Returns:
            The dynamic radius.
        """
        base = self.base_radius(theta, phi, current_shape, transition)
        result = base + property_modulation(theta, phi, cell, time)
        if np.ndim(result) == 0:
            return float(result)
        return result

    def evaluate_field(
        self,
        theta: ArrayLike,
        phi: ArrayLike,
        cell: PropertyCell,
        scalar_field: ScalarField,
    ) -> ArrayLike:
        """Shortcut for ``evaluate`` using the state held by ``scalar_field``."""
        return self.evaluate(
            theta, phi, cell,
            time=scalar_field.time,
            current_shape=scalar_field.current_shape,
            transition=scalar_field.transition,
        )
