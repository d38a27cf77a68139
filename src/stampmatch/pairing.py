"""
Two-surface stamp comparison workflow.

Holds a left and a right capture surface. A finished left stamp invalidates
the previous result; a finished right stamp is compared against the left
stamp straight away when one exists.
"""

from enum import Enum

from stampmatch.capture.surface import StampSurface
from stampmatch.compare.pixels import compare_buffers, has_content
from stampmatch.config import StampConfig
from stampmatch.models import CaptureMode, GestureKind
from stampmatch.tracer import get_tracer


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class StampPair:
    """
    Left/right surfaces plus the latest comparison result.

    Args:
        mode: CaptureMode applied to both surfaces
        config: StampConfig, defaults when omitted
    """

    def __init__(self, mode=CaptureMode.AUTO, config=None):
        self.config = config or StampConfig()
        self.left = StampSurface(mode, self.config)
        self.right = StampSurface(mode, self.config)
        self.tolerance = self.config.comparison.default_tolerance
        self.left_buffer = None
        self.right_buffer = None
        self.result = None

    def surface(self, side):
        return self.left if Side(side) == Side.LEFT else self.right

    def set_mode(self, mode):
        """Select the capture mode used by the next gestures on both sides."""
        self.left.mode = CaptureMode(mode)
        self.right.mode = CaptureMode(mode)

    def set_tolerance(self, tolerance):
        """Set the tolerance, clamped to [0, max_tolerance]."""
        limit = self.config.comparison.max_tolerance
        self.tolerance = min(limit, max(0.0, float(tolerance)))
        return self.tolerance

    def handle(self, side, kind, samples=None):
        """
        Route one input event to a surface.

        End and cancel events complete the stamp on that side. Returns the
        current comparison result.
        """
        buffer = self.surface(side).handle(kind, samples)
        if GestureKind(kind) in (GestureKind.END, GestureKind.CANCEL):
            self.stamp_completed(side, buffer)
        return self.result

    def stamp_completed(self, side, buffer):
        """Store a finished stamp and refresh the comparison result."""
        if Side(side) == Side.LEFT:
            self.left_buffer = buffer
            self.result = None
            return None

        self.right_buffer = buffer
        if self.left_buffer is not None:
            self.result = self._compare(self.left_buffer, self.right_buffer)
        return self.result

    def compare(self):
        """
        Compare the stored stamps with the current tolerance.

        Returns None unless both stamps exist and have content.
        """
        if not self.both_have_content:
            get_tracer().event("Compare skipped: both stamps need content", level="DEBUG")
            return None
        self.result = self._compare(self.left_buffer, self.right_buffer)
        return self.result

    @property
    def both_have_content(self):
        return (
            self.left_buffer is not None
            and self.right_buffer is not None
            and has_content(self.left_buffer)
            and has_content(self.right_buffer)
        )

    def reset(self):
        """Clear both surfaces and forget stored stamps and result."""
        self.left.clear()
        self.right.clear()
        self.left_buffer = None
        self.right_buffer = None
        self.result = None

    def _compare(self, buffer_a, buffer_b):
        return compare_buffers(
            buffer_a, buffer_b, self.tolerance,
            pixel_scale=self.config.comparison.pixel_tolerance_scale,
        )
