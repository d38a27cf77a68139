"""Pytest fixtures for StampMatch tests."""

import tempfile

import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default configuration with a small surface."""
    from stampmatch.config import StampConfig

    config = StampConfig()
    config.capture.width = 120
    config.capture.height = 120
    return config


@pytest.fixture
def make_buffer():
    """Factory for solid-colour buffers."""
    from stampmatch.models import RasterBuffer

    def _make(width, height, rgba=(0, 0, 0, 0)):
        return RasterBuffer.filled(width, height, rgba)

    return _make


@pytest.fixture
def stamp_pair_buffers():
    """Two 20x20 buffers with slightly offset opaque squares."""
    from stampmatch.models import RasterBuffer

    a = np.zeros((20, 20, 4), dtype=np.uint8)
    b = np.zeros((20, 20, 4), dtype=np.uint8)
    a[5:15, 5:15] = (0, 0, 0, 255)
    b[6:16, 5:15] = (30, 30, 30, 255)
    return RasterBuffer(a), RasterBuffer(b)


@pytest.fixture
def sample():
    """Factory for contact samples."""
    from stampmatch.models import ContactSample

    def _sample(x, y, pressure=1.0, timestamp=0):
        return ContactSample(x=x, y=y, pressure=pressure, timestamp=timestamp)

    return _sample
