import logging

import matplotlib
import pytest

matplotlib.use("Agg")

from shapemorph.config import EngineConfig
from shapemorph.engine import GeometryEngine
from shapemorph.model.properties import PropertyCell, PropertyMatrix


@pytest.fixture
def flat_cell():
    """Cell whose ripple term is zero everywhere."""
    return PropertyCell(anisotropy=0.0, convexity=0.0)


@pytest.fixture
def small_config():
    return EngineConfig(polygon_count=64, grid_width=8, grid_height=8, seed=7)


@pytest.fixture
def engine(small_config):
    return GeometryEngine(small_config)


@pytest.fixture
def flat_matrix(flat_cell):
    return PropertyMatrix.filled(4, 4, flat_cell)


@pytest.fixture
def reset_package_logger():
    yield
    logger = logging.getLogger("shapemorph")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
