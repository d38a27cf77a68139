"""
Stamp capture surface.

A StampSurface owns one drawing canvas and at most one capture session. It
is driven by gesture events (start, move, end, cancel) and hands out an
immutable RasterBuffer when a gesture completes.

State machine: Idle -> Capturing (begin_gesture) -> Idle (end_gesture or
clear). Only auto mode accumulates samples across the gesture; the other
modes draw incrementally. Stamps from earlier gestures stay on the surface
until clear() is called.
"""

from dataclasses import dataclass, field
from typing import List

from stampmatch.capture import raster
from stampmatch.capture.reconstruct import redraw_auto_stamp
from stampmatch.config import StampConfig
from stampmatch.models import (
    CaptureMode,
    ContactSample,
    GestureKind,
    RasterBuffer,
    sample_from_pointer,
    samples_from_touches,
)
from stampmatch.tracer import get_tracer, trace


@dataclass
class CaptureSession:
    """Live state of one press-drag-release gesture."""
    mode: CaptureMode
    samples: List[ContactSample] = field(default_factory=list)
    capturing: bool = True

    @property
    def last_point(self):
        return self.samples[-1].point if self.samples else None


def _finite_samples(samples):
    """Drop samples with non-finite coordinates."""
    samples = list(samples or [])
    kept = [s for s in samples if s.is_finite]
    dropped = len(samples) - len(kept)
    if dropped:
        get_tracer().event(f"Dropped {dropped} non-finite contact samples", level="WARN")
    return kept


class StampSurface:
    """
    One capture surface with a fixed size and mode.

    Args:
        mode: CaptureMode used by gestures on this surface
        config: StampConfig, defaults when omitted
        width, height: override the configured surface size
    """

    def __init__(self, mode=CaptureMode.AUTO, config=None, width=None, height=None):
        self.config = config or StampConfig()
        self.mode = CaptureMode(mode)
        self.width = max(0, int(self.config.capture.width if width is None else width))
        self.height = max(0, int(self.config.capture.height if height is None else height))
        self._canvas = raster.new_canvas(self.width, self.height)
        self._base = None
        self._session = None
        self._last_shape = None

    @property
    def rgb(self):
        return tuple(int(c) for c in self.config.color.ink[:3])

    @property
    def is_capturing(self):
        return self._session is not None and self._session.capturing

    @property
    def session(self):
        return self._session

    @property
    def last_shape(self):
        """Shape drawn by the most recent auto reconstruction, if any."""
        return self._last_shape

    @property
    def has_content(self):
        return bool(self._canvas.size) and bool((self._canvas[:, :, 3] > 0).any())

    def snapshot(self):
        """Current canvas contents as a new immutable buffer."""
        return RasterBuffer(self._canvas)

    def pointer_sample(self, x, y, timestamp=0, pressure=None, pointer_type="mouse"):
        """Build a sample using this surface's configured pressure fallbacks."""
        capture = self.config.capture
        return sample_from_pointer(
            x, y, timestamp, pressure, pointer_type,
            mouse_pressure=capture.mouse_pressure,
            touch_pressure=capture.touch_pressure,
        )

    def touch_samples(self, touches, timestamp=0):
        return samples_from_touches(touches, timestamp, touch_pressure=self.config.capture.touch_pressure)

    def begin_gesture(self, mode, initial_samples):
        """
        Start a new gesture, replacing any session in progress.

        Args:
            mode: CaptureMode for this gesture, None keeps the surface mode
            initial_samples: ContactSamples of the start event
        """
        tracer = get_tracer()
        if mode is not None:
            self.mode = CaptureMode(mode)

        if self.is_capturing:
            # Restart: drop whatever the unfinished gesture drew
            tracer.event("Gesture restarted while capturing", level="DEBUG")
            self._canvas[:] = self._base

        samples = _finite_samples(initial_samples)
        self._session = CaptureSession(mode=self.mode)
        self._base = self._canvas.copy()
        self._last_shape = None
        capture = self.config.capture

        if self.mode == CaptureMode.AUTO:
            self._session.samples.extend(samples)
            self._redraw_auto()
            return

        if not samples:
            return

        first = samples[0]
        self._session.samples.append(first)

        if self.mode == CaptureMode.CIRCLE:
            raster.fill_circle(self._canvas, first.point, capture.stamp_size, self.rgb)
        elif self.mode == CaptureMode.SQUARE:
            raster.fill_square(self._canvas, first.point, capture.stamp_size, self.rgb)

        tracer.event(f"Gesture started: {self.mode.value}", level="DEBUG", x=first.x, y=first.y)

    def extend_gesture(self, samples):
        """Feed move-event samples into the active gesture."""
        if not self.is_capturing:
            return

        samples = _finite_samples(samples)
        if not samples:
            return

        mode = self._session.mode
        if mode == CaptureMode.AUTO:
            self._session.samples.extend(samples)
            self._redraw_auto()
        elif mode == CaptureMode.FREEHAND:
            newest = samples[-1]
            previous = self._session.last_point
            if previous is not None:
                raster.stroke_segment(
                    self._canvas, previous, newest.point,
                    self.config.capture.line_width, self.rgb,
                )
            self._session.samples.append(newest)

    @trace(label="end_gesture")
    def end_gesture(self):
        """
        Finish the active gesture and return the stamp.

        Without an active gesture the unchanged surface is returned.
        """
        if not self.is_capturing:
            return self.snapshot()

        mode = self._session.mode
        if mode == CaptureMode.AUTO:
            self._redraw_auto()

        self._session.capturing = False
        buffer = self.snapshot()
        get_tracer().event(
            f"Gesture ended: {mode.value}",
            samples=len(self._session.samples),
            buffer=buffer,
        )
        return buffer

    def clear(self):
        """Discard any session and reset the surface to transparent."""
        self._session = None
        self._base = None
        self._last_shape = None
        raster.clear_canvas(self._canvas)

    def handle(self, kind, samples=None):
        """
        Dispatch one input event.

        Returns the finished RasterBuffer for end and cancel events, else None.
        """
        kind = GestureKind(kind)
        if kind == GestureKind.START:
            self.begin_gesture(None, samples or [])
        elif kind == GestureKind.MOVE:
            self.extend_gesture(samples or [])
        else:
            return self.end_gesture()
        return None

    def _redraw_auto(self):
        self._last_shape = redraw_auto_stamp(
            self._canvas, self._session.samples, self.config.capture, self.rgb, base=self._base
        )
