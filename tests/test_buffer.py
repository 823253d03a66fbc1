"""Tests for the vertex attribute buffer builder."""
from dataclasses import fields
from math import pi

import numpy as np
import pytest

from shapemorph.config import EngineConfig
from shapemorph.errors import RebuildFailure
from shapemorph.model.buffer import (
    AttributeBufferBuilder, VertexAttributeSet, VertexAttributes,
    vertex_angles, grid_coordinates,
)
from shapemorph.model.field import ScalarField
from shapemorph.model.properties import PROPERTY_NAMES, PropertyCell, PropertyMatrix
from shapemorph.model.shapes import ShapeId
from shapemorph.model.transition import MorphStateMachine


def build(config, matrix, shape="Sphere", time=0.0):
    scalar_field = ScalarField(time=time, morph=MorphStateMachine(shape))
    return AttributeBufferBuilder().rebuild(config, matrix, scalar_field)


class TestVertexDomain:

    def test_angles(self):
        theta, phi = vertex_angles(4)
        assert np.array_equal(theta, [0.0, pi / 2, pi, 3 * pi / 2])
        assert np.array_equal(phi, [0.0, pi / 4, pi / 2, 3 * pi / 4])

    def test_grid_coordinates(self):
        theta, phi = vertex_angles(7)
        gx, gy = grid_coordinates(theta, phi, 3, 2)
        assert list(gx) == [0, 0, 0, 1, 1, 2, 2]
        assert list(gy) == [0, 0, 0, 0, 1, 1, 1]


class TestRebuild:

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    @pytest.mark.parametrize("shape", list(ShapeId))
    def test_row_count_and_finite(self, seed, shape):
        config = EngineConfig(polygon_count=257, grid_width=13, grid_height=9)
        matrix = PropertyMatrix.generate(13, 9, seed=seed)
        attributes = build(config, matrix, shape=shape, time=seed * 1.3)
        assert len(attributes) == 257
        for f in fields(attributes):
            assert getattr(attributes, f.name).shape[0] == 257
        assert np.all(np.isfinite(attributes.position))

    @pytest.mark.parametrize("shape", list(ShapeId))
    def test_finite_for_fully_random_matrix(self, shape):
        """Every property drawn from U[0,1), including mid-blend frames."""
        rng = np.random.default_rng(42)
        matrix = PropertyMatrix({name: rng.random((17, 11)) for name in PROPERTY_NAMES})
        config = EngineConfig(polygon_count=999, grid_width=17, grid_height=11)
        morph = MorphStateMachine(shape)
        morph.request_morph(next(s for s in ShapeId if s is not shape), 2.0)
        scalar_field = ScalarField(morph=morph)
        builder = AttributeBufferBuilder()
        for _ in range(50):
            scalar_field.advance(0.1, 1.3)
            morph.tick(0.1)
            attributes = builder.rebuild(config, matrix, scalar_field)
            assert len(attributes) == 999
            assert np.all(np.isfinite(attributes.position))

    def test_single_vertex(self):
        config = EngineConfig(polygon_count=1, grid_width=1, grid_height=1)
        attributes = build(config, PropertyMatrix.generate(1, 1, seed=0))
        assert len(attributes) == 1

    def test_idempotent(self):
        config = EngineConfig(polygon_count=300, grid_width=10, grid_height=10)
        matrix = PropertyMatrix.generate(10, 10, seed=11)
        first = build(config, matrix, shape="Torus", time=2.5)
        second = build(config, matrix, shape="Torus", time=2.5)
        for f in fields(VertexAttributeSet):
            assert np.array_equal(getattr(first, f.name), getattr(second, f.name))

    def test_flat_sphere_positions(self, flat_matrix):
        config = EngineConfig(radius=25.0, polygon_count=100, grid_width=4, grid_height=4)
        attributes = build(config, flat_matrix)
        norms = np.linalg.norm(attributes.position, axis=1)
        assert np.allclose(norms, 25.0)

    def test_projection(self, flat_matrix):
        config = EngineConfig(radius=2.0, polygon_count=4, grid_width=4, grid_height=4)
        attributes = build(config, flat_matrix)
        # Vertex 2: theta = pi, phi = pi/2
        assert np.allclose(attributes.position[2], [-2.0, 0.0, 0.0], atol=1e-12)
        # Vertex 0: theta = 0, phi = 0 (north pole)
        assert np.allclose(attributes.position[0], [0.0, 0.0, 2.0])

    def test_derived_attributes(self):
        cell = PropertyCell(rugosity=0.75)
        config = EngineConfig(polygon_count=10, grid_width=2, grid_height=2)
        attributes = build(config, PropertyMatrix.filled(2, 2, cell))
        assert np.all(attributes.mass == 15.0)
        assert np.allclose(attributes.charge, 0.5)
        assert np.all(attributes.symmetry_index == 8)
        assert np.allclose(attributes.light_reflectivity, 0.8)
        assert np.allclose(attributes.light_absorption, 0.35)
        assert np.all(attributes.valency == 4)
        assert np.all(attributes.volume == 20.0)
        assert np.allclose(attributes.density, 0.5)
        assert np.all(attributes.orientation == [0.0, 1.0, 0.0])

    def test_cells_follow_vertex_angles(self):
        """Charge tracks the rugosity of the clamped grid cell of each vertex."""
        config = EngineConfig(polygon_count=50, grid_width=6, grid_height=3)
        matrix = PropertyMatrix.generate(6, 3, seed=5)
        attributes = build(config, matrix)
        theta, phi = vertex_angles(50)
        gx, gy = grid_coordinates(theta, phi, 6, 3)
        for i in range(50):
            expected = (matrix.cell(gx[i], gy[i]).rugosity - 0.5) * 2
            assert attributes.charge[i] == pytest.approx(expected)

    def test_config_grid_larger_than_matrix_is_clamped(self):
        config = EngineConfig(polygon_count=40, grid_width=50, grid_height=50)
        attributes = build(config, PropertyMatrix.generate(2, 2, seed=1))
        assert len(attributes) == 40

    def test_non_finite_property_raises(self):
        config = EngineConfig(polygon_count=20, grid_width=2, grid_height=2)
        matrix = PropertyMatrix.filled(2, 2, PropertyCell(anisotropy=np.inf))
        with pytest.raises(RebuildFailure) as exc_info:
            build(config, matrix)
        assert isinstance(exc_info.value.__cause__, FloatingPointError)


class TestVertexAttributeSet:

    @pytest.fixture
    def attributes(self):
        config = EngineConfig(polygon_count=12, grid_width=3, grid_height=3)
        return build(config, PropertyMatrix.generate(3, 3, seed=2), shape="Cube", time=0.4)

    def test_read_only(self, attributes):
        with pytest.raises(ValueError):
            attributes.position[0, 0] = 1.0
        with pytest.raises(ValueError):
            attributes.mass[0] = 1.0

    def test_row(self, attributes):
        row = attributes.row(3)
        assert isinstance(row, VertexAttributes)
        assert row.position == tuple(attributes.position[3])
        assert row.orientation == (0.0, 1.0, 0.0)
        assert isinstance(row.valency, int)

    def test_render_arrays(self, attributes):
        arrays = attributes.to_render_arrays()
        assert set(arrays) == {
            "position", "mass", "charge", "symmetryIndex", "lightProperties",
            "valency", "volume", "density", "orientation",
        }
        assert all(a.dtype == np.float32 for a in arrays.values())
        assert arrays["position"].shape == (12, 3)
        assert arrays["lightProperties"].shape == (12, 2)
        assert np.allclose(arrays["lightProperties"][:, 0], attributes.light_reflectivity)
        assert np.allclose(arrays["lightProperties"][:, 1], attributes.light_absorption)

    def test_mismatched_rows(self, attributes):
        with pytest.raises(ValueError):
            VertexAttributeSet(
                position=np.zeros((3, 3)), mass=np.zeros(2), charge=np.zeros(3),
                symmetry_index=np.zeros(3, dtype=np.int64), light_reflectivity=np.zeros(3),
                light_absorption=np.zeros(3), valency=np.zeros(3, dtype=np.int64),
                volume=np.zeros(3), density=np.zeros(3), orientation=np.zeros((3, 3)),
            )
