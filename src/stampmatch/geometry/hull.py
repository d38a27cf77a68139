"""
Convex hull and angular ordering for contact points.

Points are [x, y] pairs throughout, matching the rest of the package.
"""

import math


def cross(o, a, b):
    """
    Z component of the cross product (a - o) x (b - o).

    Positive for a counter-clockwise turn o -> a -> b.
    """
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def convex_hull(points):
    """
    Convex hull using Andrew's monotone chain.

    Collinear and duplicate points are discarded (a turn must be strictly
    counter-clockwise to be kept). Fewer than 3 points are returned as given.

    Args:
        points: list of [x, y] points

    Returns:
        list of hull vertices in counter-clockwise order
    """
    if len(points) < 3:
        return [list(p) for p in points]

    ordered = sorted((list(p) for p in points), key=lambda p: (p[0], p[1]))

    lower = []
    for p in ordered:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper = []
    for p in reversed(ordered):
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    return lower[:-1] + upper[:-1]


def centroid(points):
    """Arithmetic mean of the point coordinates."""
    if not points:
        return [0.0, 0.0]

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return [sum(xs) / len(xs), sum(ys) / len(ys)]


def sort_by_angle(points, center=None):
    """
    Sort points by polar angle around center, ascending in [-pi, pi].

    The sort is stable, so re-sorting an already ordered list is a no-op.
    """
    if center is None:
        center = centroid(points)
    cx, cy = center
    return sorted((list(p) for p in points), key=lambda p: math.atan2(p[1] - cy, p[0] - cx))

