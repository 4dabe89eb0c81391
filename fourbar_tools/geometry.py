"""
geometry.py - Planar geometry primitives shared by the solvers and the limit analyzer.

All functions are pure. Points are anything indexable as (x, y).
"""
from __future__ import annotations

import numpy as np

from fourbar_tools.schemas import Point

TWO_PI = 2 * np.pi


def distance(p1, p2) -> float:
    """Euclidean distance between two points."""
    return float(np.hypot(p2[0] - p1[0], p2[1] - p1[1]))


def normalize_angle(angle: float) -> float:
    """Map any radian value into [0, 2*pi)."""
    a = float(np.mod(angle, TWO_PI))
    # np.mod of a tiny negative value rounds up to exactly 2*pi
    if a >= TWO_PI:
        a = 0.0
    return a


def to_degrees(rad: float) -> float:
    return float(rad * 180.0 / np.pi)


def to_radians(deg: float) -> float:
    return float(deg * np.pi / 180.0)


def clamp_unit(value: float) -> float:
    """Clamp an inverse-trig argument into [-1, 1]."""
    return float(min(1.0, max(-1.0, value)))


def angle_difference(a: float, b: float) -> float:
    """Smallest absolute angle between two directions, in [0, pi]."""
    diff = normalize_angle(a - b)
    return min(diff, TWO_PI - diff)


def cross(o, p, q) -> float:
    """z component of (p - o) x (q - o). Positive when q lies left of the directed line o->p."""
    return float((p[0] - o[0]) * (q[1] - o[1]) - (p[1] - o[1]) * (q[0] - o[0]))


def law_of_cosines_angle(adjacent0: float, adjacent1: float, opposite: float) -> float:
    """Interior angle between two sides of a triangle, given the side opposite to it."""
    cos_angle = (adjacent0 * adjacent0 + adjacent1 * adjacent1 - opposite * opposite) / (2 * adjacent0 * adjacent1)
    return float(np.arccos(clamp_unit(cos_angle)))


def circle_intersections(
    center0,
    radius0: float,
    center1,
    radius1: float,
) -> tuple[Point, Point] | None:
    """
    Compute both intersection points of two circles.

    With u the unit vector from center0 to center1 and perp(v) = (-v.y, v.x),
    the candidates are returned as (M - h*perp(u), M + h*perp(u)): the first
    lies right of the directed line center0->center1, the second left of it.

    Args:
        center0, radius0: First circle
        center1, radius1: Second circle

    Returns:
        (right, left) candidates, or None when the circles are concentric or
        do not intersect
    """
    dx = center1[0] - center0[0]
    dy = center1[1] - center0[1]
    d = float(np.hypot(dx, dy))

    if d == 0 or d > radius0 + radius1 or d < abs(radius0 - radius1):
        return None

    # Signed distance from center0 to the foot of the radical line
    a = (radius0 * radius0 - radius1 * radius1 + d * d) / (2 * d)
    # Tangent circles can push the radicand slightly negative
    h = float(np.sqrt(max(0.0, radius0 * radius0 - a * a)))

    ux = dx / d
    uy = dy / d
    mx = center0[0] + a * ux
    my = center0[1] + a * uy

    right = Point(float(mx + h * uy), float(my - h * ux))
    left = Point(float(mx - h * uy), float(my + h * ux))
    return right, left
