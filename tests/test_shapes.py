"""Tests for the shape profile library."""
from math import pi, sin, cos

import numpy as np
import pytest

from shapemorph.errors import UnknownShapeError
from shapemorph.model import shapes
from shapemorph.model.shapes import (
    ShapeId, SHAPE_PROFILES, get_profile, resolve_shape, available_shapes
)

ANGLES = [(0.0, 0.0), (0.3, 1.1), (pi / 2, pi / 2), (pi, 0.25), (4.0, 3.0), (2 * pi - 1e-6, pi - 1e-6)]
RADII = [0.0, 1.0, 50.0, 123.4]


class TestCatalog:
    """Closed set of shapes."""

    def test_all_shapes_registered(self):
        assert set(SHAPE_PROFILES) == set(ShapeId)
        assert available_shapes() == ("Sphere", "Cube", "Cone", "Cylinder", "Torus", "Parabola")

    def test_lookup_by_name(self):
        assert get_profile("Cube") is SHAPE_PROFILES[ShapeId.CUBE]
        assert resolve_shape("Torus") is ShapeId.TORUS
        assert resolve_shape(ShapeId.CONE) is ShapeId.CONE

    @pytest.mark.parametrize("name", ["Nonexistent", "sphere", "", "CUBE"])
    def test_unknown_shape(self, name):
        with pytest.raises(UnknownShapeError) as exc_info:
            get_profile(name)
        assert exc_info.value.shape == name
        assert "Sphere" in str(exc_info.value)

    def test_unknown_shape_is_key_error(self):
        with pytest.raises(KeyError):
            resolve_shape("Pyramid")


class TestProfiles:
    """Formulas of the individual profiles."""

    @pytest.mark.parametrize("theta,phi", ANGLES)
    @pytest.mark.parametrize("r", RADII)
    def test_sphere_is_constant(self, theta, phi, r):
        assert get_profile("Sphere")(theta, phi, r) == r

    @pytest.mark.parametrize("theta,phi", ANGLES)
    @pytest.mark.parametrize("r", RADII)
    def test_cube_bounds(self, theta, phi, r):
        value = get_profile("Cube")(theta, phi, r)
        assert 0.0 <= value <= r
        assert value == pytest.approx(r * max(abs(sin(theta)), abs(cos(phi))))

    def test_cone(self):
        cone = get_profile(ShapeId.CONE)
        assert cone(0.0, 0.0, 10.0) == pytest.approx(10.0)
        assert cone(1.0, pi / 2, 10.0) == pytest.approx(5.0)

    def test_cylinder(self):
        cylinder = get_profile(ShapeId.CYLINDER)
        assert cylinder(0.0, pi / 2, 10.0) == pytest.approx(10.0)
        assert cylinder(0.0, 0.0, 10.0) == pytest.approx(0.0)

    def test_torus(self):
        torus = get_profile(ShapeId.TORUS)
        assert torus(0.0, 0.0, 10.0) == pytest.approx(13.0)
        assert torus(0.0, pi, 10.0) == pytest.approx(7.0)
        assert torus(0.0, pi / 2, 10.0) == pytest.approx(10.0)

    def test_parabola(self):
        parabola = get_profile(ShapeId.PARABOLA)
        assert parabola(0.0, pi / 2, 10.0) == pytest.approx(10.0)
        assert parabola(0.0, 0.0, 10.0) == pytest.approx(0.0)
        assert parabola(0.0, pi / 4, 10.0) == pytest.approx(7.5)

    @pytest.mark.parametrize("shape", list(ShapeId))
    def test_scalar_input_returns_float(self, shape):
        assert isinstance(get_profile(shape)(0.5, 0.5, 2.0), float)

    @pytest.mark.parametrize("shape", list(ShapeId))
    def test_array_input_matches_scalar(self, shape):
        profile = get_profile(shape)
        theta = np.linspace(0.0, 2 * pi, 17, endpoint=False)
        phi = np.linspace(0.0, pi, 17, endpoint=False)
        values = profile(theta, phi, 3.0)
        assert values.shape == (17,)
        for t, p, v in zip(theta, phi, values):
            assert v == pytest.approx(profile(float(t), float(p), 3.0))

    def test_broadcast_scalar_theta(self):
        values = get_profile("Sphere")(0.0, np.zeros(5), 2.0)
        assert values.shape == (5,)
        assert np.all(values == 2.0)

    def test_plot(self, monkeypatch):
        shown = []
        monkeypatch.setattr(shapes.plt, "show", lambda: shown.append(True))
        get_profile("Torus").plot(theta=0.5, radius=2.0, num_points=20)
        assert shown == [True]
        shapes.plt.close("all")
