# shapescan/geometry.py
"""Geometric primitives over normalized 2-D landmark points."""
from __future__ import annotations

import math
from typing import Sequence

EPS = 1e-6
NEUTRAL_RATIO = 1.0
NEUTRAL_ANGLE = 180.0

Point = Sequence[float]


def deg(rad: float) -> float:
    return rad * 180.0 / math.pi


def distance(a: Point, b: Point, width: float = 1.0, height: float = 1.0) -> float:
    """Euclidean distance; pass the frame size to get display-space pixels."""
    return math.hypot((a[0] - b[0]) * width, (a[1] - b[1]) * height)


def ratio(num: float, den: float, fallback: float = NEUTRAL_RATIO) -> float:
    """num/den, or ``fallback`` when the denominator is (near) zero."""
    if abs(den) < EPS or not math.isfinite(den) or not math.isfinite(num):
        return fallback
    return num / den


def angle_at_point(a: Point, b: Point, c: Point) -> float:
    """Unsigned angle a-b-c at vertex b, in degrees."""
    bax, bay = a[0] - b[0], a[1] - b[1]
    bcx, bcy = c[0] - b[0], c[1] - b[1]
    na, nc = math.hypot(bax, bay), math.hypot(bcx, bcy)
    if na < EPS or nc < EPS:
        return NEUTRAL_ANGLE
    dot = bax * bcx + bay * bcy
    cross = bax * bcy - bay * bcx
    return deg(abs(math.atan2(cross, dot)))


def point_line_distance(p: Point, a: Point, b: Point) -> float:
    """Perpendicular distance from p to the line through a and b."""
    abx, aby = b[0] - a[0], b[1] - a[1]
    seg = math.hypot(abx, aby)
    if seg < EPS:
        return distance(p, a)
    cross = abx * (p[1] - a[1]) - aby * (p[0] - a[0])
    return abs(cross) / seg


def round_half_up(x: float) -> int:
    """Nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(x + 0.5)
