"""
Pure rasterization primitives for stamp surfaces.

Every function takes the RGBA canvas (a writable (H, W, 4) uint8 array) and
all drawing parameters explicitly. Shapes are drawn into a coverage mask with
OpenCV, without anti-aliasing, and composited onto the canvas source-over.
"""

import cv2
import numpy as np


def new_canvas(width, height):
    """Create a writable, fully transparent RGBA canvas."""
    return np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8)


def clear_canvas(canvas):
    """Reset every pixel to transparent in place."""
    canvas[:] = 0
    return canvas


def _mask_for(canvas):
    return np.zeros(canvas.shape[:2], dtype=np.uint8)


COORD_LIMIT = 1 << 20


def _clamp(value, low=-COORD_LIMIT):
    return min(COORD_LIMIT, max(low, value))


def _pt(point):
    return (int(round(_clamp(point[0]))), int(round(_clamp(point[1]))))


def composite(canvas, mask, rgb, alpha=1.0):
    """
    Composite a solid colour through a coverage mask, source-over.

    Args:
        canvas: RGBA uint8 array, modified in place
        mask: uint8 array of the canvas height and width, 255 = covered
        rgb: source colour as (r, g, b)
        alpha: source opacity in [0, 1]

    Returns:
        the canvas
    """
    covered = mask > 0
    if not covered.any() or alpha <= 0:
        return canvas

    if alpha >= 1.0:
        canvas[covered] = (rgb[0], rgb[1], rgb[2], 255)
        return canvas

    dst = canvas[covered].astype(np.float64) / 255.0
    src_rgb = np.array(rgb, dtype=np.float64) / 255.0
    dst_a = dst[:, 3:4]

    out_a = alpha + dst_a * (1.0 - alpha)
    out_rgb = (src_rgb * alpha + dst[:, :3] * dst_a * (1.0 - alpha)) / out_a

    out = np.concatenate([out_rgb, out_a], axis=1)
    canvas[covered] = np.clip(np.round(out * 255.0), 0, 255).astype(np.uint8)
    return canvas


def fill_circle(canvas, center, radius, rgb, alpha=1.0):
    """Fill a disc of the given radius."""
    if canvas.size == 0:
        return canvas
    mask = _mask_for(canvas)
    cv2.circle(mask, _pt(center), int(round(_clamp(radius, 0))), 255, thickness=-1, lineType=cv2.LINE_8)
    return composite(canvas, mask, rgb, alpha)


def fill_ellipse(canvas, center, radii, rgb, alpha=1.0):
    """Fill an axis-aligned ellipse with radii (rx, ry)."""
    if canvas.size == 0:
        return canvas
    mask = _mask_for(canvas)
    axes = (int(round(_clamp(radii[0], 0))), int(round(_clamp(radii[1], 0))))
    cv2.ellipse(mask, _pt(center), axes, 0, 0, 360, 255, thickness=-1, lineType=cv2.LINE_8)
    return composite(canvas, mask, rgb, alpha)


def fill_square(canvas, center, side, rgb, alpha=1.0):
    """Fill an axis-aligned square of the given side centred on center."""
    if canvas.size == 0:
        return canvas
    half = side / 2.0
    x0, y0 = center[0] - half, center[1] - half
    x1, y1 = center[0] + half, center[1] + half
    mask = _mask_for(canvas)
    cv2.rectangle(mask, _pt((x0, y0)), _pt((x1 - 1, y1 - 1)), 255, thickness=-1)
    return composite(canvas, mask, rgb, alpha)


def fill_polygon(canvas, points, rgb, alpha=1.0):
    """Fill a closed polygon given as a list of [x, y] points."""
    if canvas.size == 0 or len(points) < 3:
        return canvas
    mask = _mask_for(canvas)
    pts = np.clip(np.array(points, dtype=np.float64), -COORD_LIMIT, COORD_LIMIT)
    pts = np.round(pts).astype(np.int32).reshape(-1, 1, 2)
    cv2.fillPoly(mask, [pts], 255, lineType=cv2.LINE_8)
    return composite(canvas, mask, rgb, alpha)


def stroke_segment(canvas, start, end, width, rgb, alpha=1.0):
    """
    Stroke a line segment with round caps.

    Round joins between consecutive segments follow from the round caps.
    """
    if canvas.size == 0:
        return canvas
    mask = _mask_for(canvas)
    thickness = max(1, int(round(width)))
    cv2.line(mask, _pt(start), _pt(end), 255, thickness=thickness, lineType=cv2.LINE_8)
    cap = thickness // 2
    if cap > 0:
        cv2.circle(mask, _pt(start), cap, 255, thickness=-1)
        cv2.circle(mask, _pt(end), cap, 255, thickness=-1)
    return composite(canvas, mask, rgb, alpha)

