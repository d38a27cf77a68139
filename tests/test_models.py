"""Tests for data models."""

import numpy as np
import pytest
from pydantic import ValidationError


class TestContactSample:
    """Tests for contact samples and their factories."""

    def test_pressure_clamped(self):
        from stampmatch.models import ContactSample

        assert ContactSample(x=0, y=0, pressure=3.0).pressure == 1.0
        assert ContactSample(x=0, y=0, pressure=-1.0).pressure == 0.0
        assert ContactSample(x=0, y=0, pressure=float("nan")).pressure == 1.0

    def test_sample_is_frozen(self):
        from stampmatch.models import ContactSample

        s = ContactSample(x=1, y=2)
        with pytest.raises(ValidationError):
            s.x = 5

    def test_non_finite_flag(self):
        from stampmatch.models import ContactSample

        assert ContactSample(x=1, y=2).is_finite
        assert not ContactSample(x=float("nan"), y=2).is_finite

    def test_pointer_pressure_fallbacks(self):
        from stampmatch.models import sample_from_pointer

        assert sample_from_pointer(1, 1).pressure == 1.0
        assert sample_from_pointer(1, 1, pointer_type="touch").pressure == 0.5
        assert sample_from_pointer(1, 1, pressure=0.7, pointer_type="touch").pressure == 0.7

    def test_fallback_pressures_overridable(self):
        from stampmatch.models import sample_from_pointer, samples_from_touches

        assert sample_from_pointer(1, 1, mouse_pressure=0.8).pressure == 0.8
        assert sample_from_pointer(1, 1, pointer_type="touch", touch_pressure=0.2).pressure == 0.2
        assert samples_from_touches([(1, 2)], touch_pressure=0.3)[0].pressure == 0.3

    def test_touches_share_timestamp(self):
        from stampmatch.models import samples_from_touches

        samples = samples_from_touches([(1, 2), (3, 4, 0.9)], timestamp=120)

        assert [s.timestamp for s in samples] == [120, 120]
        assert [s.pressure for s in samples] == [0.5, 0.9]


class TestRasterBuffer:
    """Tests for the immutable pixel buffer."""

    def test_blank_dimensions(self):
        from stampmatch.models import RasterBuffer

        buffer = RasterBuffer.blank(7, 3)

        assert buffer.pixels.shape == (3, 7, 4)
        assert buffer.total_pixels == 21
        assert not buffer.pixels.any()

    def test_read_only(self):
        from stampmatch.models import RasterBuffer

        buffer = RasterBuffer.blank(2, 2)
        with pytest.raises(ValueError):
            buffer.pixels[0, 0, 3] = 255

    def test_copies_source(self):
        """Test that later writes to the source array do not leak in."""
        from stampmatch.models import RasterBuffer

        source = np.zeros((2, 2, 4), dtype=np.uint8)
        buffer = RasterBuffer(source)
        source[0, 0, 3] = 255

        assert buffer.pixels[0, 0, 3] == 0

    def test_rejects_wrong_shape(self):
        from stampmatch.models import RasterBuffer

        with pytest.raises(ValueError):
            RasterBuffer(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_equality(self):
        from stampmatch.models import RasterBuffer

        assert RasterBuffer.blank(3, 3) == RasterBuffer.blank(3, 3)
        assert RasterBuffer.blank(3, 3) != RasterBuffer.blank(3, 4)
        assert RasterBuffer.blank(3, 3) != RasterBuffer.filled(3, 3, (0, 0, 0, 1))
