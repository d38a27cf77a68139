"""
Quadratic curve helpers used to smooth stamp outlines.

Curves are flattened into polylines so they can be filled with OpenCV.
"""

import numpy as np


def quadratic_point(p0, control, p1, t):
    """Evaluate a quadratic Bezier curve at parameter t in [0, 1]."""
    u = 1.0 - t
    return [
        u * u * p0[0] + 2 * u * t * control[0] + t * t * p1[0],
        u * u * p0[1] + 2 * u * t * control[1] + t * t * p1[1],
    ]


def flatten_quadratic(p0, control, p1, samples):
    """
    Sample a quadratic Bezier curve, excluding its start point.

    Returns samples points ending exactly at p1.
    """
    ts = np.linspace(0.0, 1.0, samples + 1)[1:]
    return [quadratic_point(p0, control, p1, t) for t in ts]


def midpoint(a, b):
    return [(a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0]


def smoothed_closed_outline(points, samples=8):
    """
    Flatten a closed outline whose vertices are joined by quadratic segments.

    Each pair of consecutive vertices is joined by a quadratic curve with its
    control point at the midpoint of the pair. A final segment closes the
    loop from the last vertex back to the first.

    Args:
        points: ordered list of [x, y] outline vertices
        samples: points generated per segment

    Returns:
        list of [x, y] points starting at the first vertex
    """
    if not points:
        return []

    path = [list(points[0])]
    n = len(points)
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        path.extend(flatten_quadratic(a, midpoint(a, b), b, samples))

    # Last sample coincides with the first vertex
    return path[:-1] if len(path) > 1 else path
