"""
Pixel comparison of two stamp buffers.

Pixels are classified by their alpha channel:
  - transparent in both buffers -> full match
  - content in both buffers     -> match if colour and alpha are close
  - content in only one         -> half match
"""

import math

import numpy as np

from stampmatch.models import BufferStats, ComparisonResult
from stampmatch.tracer import get_tracer, trace


DEFAULT_PIXEL_SCALE = 2.0
MAX_COLOR_DISTANCE = math.sqrt(3 * 255 ** 2)


def _clamp_tolerance(tolerance):
    if tolerance is None or not math.isfinite(tolerance):
        return 0.0
    return min(1.0, max(0.0, float(tolerance)))


@trace(label="compare_buffers")
def compare_buffers(buffer_a, buffer_b, tolerance=0.1, pixel_scale=DEFAULT_PIXEL_SCALE):
    """
    Compare two RGBA buffers pixel by pixel.

    Args:
        buffer_a, buffer_b: RasterBuffer inputs
        tolerance: overall tolerance in [0, 1], clamped
        pixel_scale: multiplier turning tolerance into the per-pixel colour
            and alpha thresholds

    Returns:
        ComparisonResult. Buffers of different size give zero similarity.
    """
    tracer = get_tracer()
    tolerance = _clamp_tolerance(tolerance)

    if buffer_a.width != buffer_b.width or buffer_a.height != buffer_b.height:
        tracer.event(
            "Dimension mismatch",
            level="WARN",
            a=f"{buffer_a.width}x{buffer_a.height}",
            b=f"{buffer_b.width}x{buffer_b.height}",
        )
        return ComparisonResult(
            similarity=0.0,
            is_match=False,
            tolerance=tolerance,
            total_pixels=max(buffer_a.total_pixels, buffer_b.total_pixels),
            matching_pixels=0.0,
        )

    total_pixels = buffer_a.total_pixels
    if total_pixels == 0:
        return ComparisonResult(
            similarity=0.0, is_match=False, tolerance=tolerance,
            total_pixels=0, matching_pixels=0.0,
        )

    a = buffer_a.pixels.reshape(-1, 4).astype(np.float64)
    b = buffer_b.pixels.reshape(-1, 4).astype(np.float64)

    content_a = a[:, 3] > 0
    content_b = b[:, 3] > 0
    both_empty = ~content_a & ~content_b
    both_content = content_a & content_b
    one_content = content_a ^ content_b

    color_diff = np.sqrt(np.sum((a[:, :3] - b[:, :3]) ** 2, axis=1)) / MAX_COLOR_DISTANCE
    alpha_diff = np.abs(a[:, 3] - b[:, 3]) / 255.0
    threshold = pixel_scale * tolerance
    close = (color_diff <= threshold) & (alpha_diff <= threshold)

    full_matches = int(np.count_nonzero(both_empty)) + int(np.count_nonzero(both_content & close))
    half_matches = int(np.count_nonzero(one_content))
    matching_pixels = full_matches + 0.5 * half_matches

    similarity = min(100.0, matching_pixels / total_pixels * 100.0)
    is_match = similarity >= (1.0 - tolerance) * 100.0

    tracer.event(
        f"Compared {total_pixels} pixels: {similarity:.1f}% similar",
        full=full_matches,
        half=half_matches,
        match=is_match,
    )

    return ComparisonResult(
        similarity=similarity,
        is_match=is_match,
        tolerance=tolerance,
        total_pixels=total_pixels,
        matching_pixels=matching_pixels,
    )


def has_content(buffer):
    """True if any pixel has non-zero alpha."""
    return bool(buffer.total_pixels) and bool(np.any(buffer.alpha > 0))


def buffer_stats(buffer):
    """
    Descriptive summary of a buffer.

    average_alpha is taken over all pixels, transparent ones included.
    """
    total_pixels = buffer.total_pixels
    alpha = buffer.alpha

    return BufferStats(
        width=buffer.width,
        height=buffer.height,
        total_pixels=total_pixels,
        non_transparent_pixels=int(np.count_nonzero(alpha)),
        average_alpha=float(alpha.sum(dtype=np.int64)) / total_pixels if total_pixels else 0.0,
    )
