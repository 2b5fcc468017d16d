"""Shared fixtures."""

import numpy as np
import pytest

from dipcolor.core.registry import ConverterRegistry


@pytest.fixture
def registry_snapshot():
    """Restore the converter registry after a test mutates it."""
    saved = ConverterRegistry.get_registry()
    yield ConverterRegistry
    ConverterRegistry.clear()
    ConverterRegistry._registry.update(saved)


@pytest.fixture
def test_image():
    """Linear RGB plane (3, 32, 32) with gradients, float64."""
    h, w = 32, 32
    data = np.zeros((3, h, w), dtype=np.float64)
    # Red gradient
    data[0] = np.linspace(0, 1, w)[np.newaxis, :]
    # Green gradient
    data[1] = np.linspace(0, 1, h)[:, np.newaxis]
    # Blue constant
    data[2] = 0.5
    return data


@pytest.fixture
def random_image():
    """Random linear RGB plane (3, 16, 16), float64."""
    return np.random.default_rng(0).random((3, 16, 16))
