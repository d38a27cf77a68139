"""
Contact-area reconstruction for the auto capture mode.

Accumulated contact samples are reduced to a convex outline, ordered by
angle around their centroid and rasterized with a count-specific primitive.
"""

from stampmatch.capture import raster
from stampmatch.geometry.curves import midpoint, smoothed_closed_outline
from stampmatch.geometry.hull import centroid, convex_hull, sort_by_angle
from stampmatch.models import Shape
from stampmatch.tracer import get_tracer, trace


def _unique(points):
    """Drop exact duplicate points, keeping first occurrences in order."""
    seen = set()
    result = []
    for p in points:
        key = (p[0], p[1])
        if key not in seen:
            seen.add(key)
            result.append(p)
    return result


def reconstruct_shape(samples):
    """
    Reduce contact samples to an angularly ordered outline.

    Args:
        samples: list of finite ContactSample

    Returns:
        Shape, or None when there are no samples
    """
    if not samples:
        return None

    points = _unique([s.point for s in samples])
    # three points already form the triangle, even when collinear
    if len(points) > 3:
        points = convex_hull(points)

    center = centroid(points)
    outline = sort_by_angle(points, center)
    pressure = sum(s.pressure for s in samples) / len(samples)

    return Shape(centroid=center, outline=outline, pressure=pressure)


def render_shape(canvas, shape, capture_config, rgb):
    """
    Rasterize a reconstructed shape onto the canvas.

    Dispatch by outline size:
      1 point   -> disc, radius base_radius + pressure * pressure_radius
      2 points  -> ellipse around the midpoint, padded by ellipse_padding
      3 points  -> triangle
      4+ points -> quadratic-smoothed polygon plus a translucent shading pass
    """
    tracer = get_tracer()
    outline = shape.outline
    count = len(outline)

    if count == 0:
        return canvas

    if count == 1:
        radius = capture_config.base_radius + shape.pressure * capture_config.pressure_radius
        tracer.event("Auto stamp: circle", level="DEBUG", radius=radius)
        return raster.fill_circle(canvas, outline[0], radius, rgb)

    if count == 2:
        a, b = outline
        radii = (
            abs(b[0] - a[0]) / 2.0 + capture_config.ellipse_padding,
            abs(b[1] - a[1]) / 2.0 + capture_config.ellipse_padding,
        )
        tracer.event("Auto stamp: ellipse", level="DEBUG", rx=radii[0], ry=radii[1])
        return raster.fill_ellipse(canvas, midpoint(a, b), radii, rgb)

    if count == 3:
        tracer.event("Auto stamp: triangle", level="DEBUG")
        return raster.fill_polygon(canvas, outline, rgb)

    path = smoothed_closed_outline(outline, capture_config.curve_samples)
    tracer.event("Auto stamp: smoothed polygon", level="DEBUG", vertices=count, path_points=len(path))
    raster.fill_polygon(canvas, path, rgb)
    return raster.fill_polygon(canvas, path, rgb, alpha=capture_config.shading_alpha)


@trace(label="redraw_auto_stamp")
def redraw_auto_stamp(canvas, samples, capture_config, rgb, base=None):
    """
    Restore the canvas to base (transparent when None) and draw the stamp
    reconstructed from all samples.

    Returns the Shape that was drawn, or None for an empty sample list.
    """
    if base is None:
        raster.clear_canvas(canvas)
    else:
        canvas[:] = base
    shape = reconstruct_shape(samples)
    if shape is not None:
        render_shape(canvas, shape, capture_config, rgb)
    return shape
