"""
Data models for StampMatch.

Contact samples, derived shapes and comparison results are validated pydantic
models. Raster buffers wrap a read-only RGBA numpy array.
"""

import math
from enum import Enum
from typing import List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


MOUSE_PRESSURE = 1.0
TOUCH_PRESSURE = 0.5


class CaptureMode(str, Enum):
    """Reconstruction algorithm selected for a surface."""
    AUTO = "auto"
    CIRCLE = "circle"
    SQUARE = "square"
    FREEHAND = "freehand"


class GestureKind(str, Enum):
    """Kind of input event delivered to a capture surface."""
    START = "start"
    MOVE = "move"
    END = "end"
    CANCEL = "cancel"


class ContactSample(BaseModel):
    """A single pressure-weighted pointer or touch contact."""
    x: float
    y: float
    pressure: float = MOUSE_PRESSURE
    timestamp: int = 0

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("pressure")
    @classmethod
    def _clamp_pressure(cls, value):
        if not math.isfinite(value):
            return MOUSE_PRESSURE
        return min(1.0, max(0.0, value))

    @property
    def is_finite(self):
        """True when both coordinates are real numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y)

    @property
    def point(self):
        return [self.x, self.y]


class Shape(BaseModel):
    """
    Outline reconstructed from a set of contact samples.

    The outline is ordered by polar angle around the centroid.
    """
    centroid: List[float] = Field(default_factory=lambda: [0.0, 0.0])
    outline: List[List[float]] = Field(default_factory=list)
    pressure: float = MOUSE_PRESSURE

    model_config = ConfigDict(extra="forbid")

    @property
    def point_count(self):
        return len(self.outline)


class ComparisonResult(BaseModel):
    """Outcome of comparing two raster buffers."""
    similarity: float = Field(ge=0.0, le=100.0)
    is_match: bool
    tolerance: float
    total_pixels: int
    matching_pixels: float

    model_config = ConfigDict(frozen=True, extra="forbid")


class BufferStats(BaseModel):
    """Descriptive summary of a single raster buffer."""
    width: int
    height: int
    total_pixels: int
    non_transparent_pixels: int
    average_alpha: float

    model_config = ConfigDict(frozen=True, extra="forbid")


class RasterBuffer:
    """
    Immutable RGBA pixel grid.

    Pixels are stored as a (height, width, 4) uint8 array that is marked
    read-only. Constructing a buffer always copies the source array.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels):
        arr = np.array(pixels, dtype=np.uint8, copy=True)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"Expected (height, width, 4) RGBA array, got shape {arr.shape}")
        arr.setflags(write=False)
        self._pixels = arr

    @classmethod
    def blank(cls, width, height):
        """Create a fully transparent buffer. Negative sizes clamp to zero."""
        width = max(0, int(width))
        height = max(0, int(height))
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @classmethod
    def filled(cls, width, height, rgba):
        """Create a buffer where every pixel has the given RGBA value."""
        arr = np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8)
        arr[:, :] = rgba
        return cls(arr)

    @property
    def pixels(self):
        return self._pixels

    @property
    def width(self):
        return self._pixels.shape[1]

    @property
    def height(self):
        return self._pixels.shape[0]

    @property
    def total_pixels(self):
        return self.width * self.height

    @property
    def alpha(self):
        return self._pixels[:, :, 3]

    def __eq__(self, other):
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return self._pixels.shape == other._pixels.shape and np.array_equal(self._pixels, other._pixels)

    def __hash__(self):
        return hash((self._pixels.shape, self._pixels.tobytes()))

    def __repr__(self):
        return f"RasterBuffer({self.width}x{self.height})"


def sample_from_pointer(x, y, timestamp=0, pressure=None, pointer_type="mouse",
                        mouse_pressure=MOUSE_PRESSURE, touch_pressure=TOUCH_PRESSURE):
    """
    Build a contact sample from a single pointer reading.

    Devices that do not report pressure (pressure None or 0) fall back to
    mouse_pressure for mice and touch_pressure for touches.
    """
    if not pressure:
        pressure = touch_pressure if pointer_type == "touch" else mouse_pressure
    return ContactSample(x=x, y=y, pressure=pressure, timestamp=timestamp)


def samples_from_touches(touches, timestamp=0, touch_pressure=TOUCH_PRESSURE):
    """
    Convert every simultaneous touch of one event into a contact sample.

    Args:
        touches: iterable of (x, y) or (x, y, pressure) tuples
        timestamp: event time in milliseconds, shared by all samples
        touch_pressure: fallback for touches without a pressure reading

    Returns:
        list of ContactSample
    """
    samples = []
    for touch in touches:
        pressure: Optional[float] = touch[2] if len(touch) > 2 else None
        samples.append(sample_from_pointer(
            touch[0], touch[1], timestamp, pressure,
            pointer_type="touch", touch_pressure=touch_pressure,
        ))
    return samples
