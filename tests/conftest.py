"""Shared fixtures for resize tests."""

import numpy as np
import pytest

from engines.gamma import GammaTables
from utils.image_io import array_to_image
from utils.test_images import generate_checkerboard, generate_solid


@pytest.fixture
def linear_tables():
    """Gamma 1.0 tables: samples pass through the LUTs unchanged."""
    return GammaTables.build(1.0)


@pytest.fixture
def default_tables():
    return GammaTables.build(2.2)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def checkerboard_4x4():
    return array_to_image(generate_checkerboard(4))


@pytest.fixture
def solid_2x2():
    return array_to_image(generate_solid(2, 2, (200, 100, 50)))
