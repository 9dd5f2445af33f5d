"""Axis-aligned bounding boxes and ray tests."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator


@dataclass(frozen=True)
class Vec3:
    """A point or direction in world space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)


class AABBSide(IntEnum):
    """The face of a box that a ray enters through."""

    NONE = 0
    FRONT = 1
    BACK = 2
    LEFT = 3
    RIGHT = 4
    TOP = 5
    BOTTOM = 6


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics for a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a < b else b


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a > b else b


@dataclass(frozen=True)
class AABB:
    """An axis-aligned box given by its minimum and maximum corners."""

    min: Vec3
    max: Vec3

    def contains_point(self, point: Vec3) -> bool:
        """Whether the point lies inside the box or on its surface."""
        return all(lo <= p <= hi for lo, p, hi in zip(self.min, point, self.max))

    def intersects(self, other: AABB) -> bool:
        """Whether the two boxes overlap or touch."""
        return all(
            a_lo <= b_hi and a_hi >= b_lo
            for a_lo, a_hi, b_lo, b_hi in zip(self.min, self.max, other.min, other.max)
        )

    def intersect_ray(self, origin: Vec3, direction: Vec3) -> tuple[AABBSide, float | None]:
        """Cast a ray against the box.

        Returns the side that was hit and the distance along the ray, or
        ``(AABBSide.NONE, None)`` when the ray misses or the box lies behind it.
        """
        t1 = [_div(lo - o, d) for lo, o, d in zip(self.min, origin, direction)]
        t2 = [_div(hi - o, d) for hi, o, d in zip(self.max, origin, direction)]

        t_min = _fmax(_fmax(_fmin(t1[0], t2[0]), _fmin(t1[1], t2[1])), _fmin(t1[2], t2[2]))
        t_max = _fmin(_fmin(_fmax(t1[0], t2[0]), _fmax(t1[1], t2[1])), _fmax(t1[2], t2[2]))

        if t_max < 0 or t_min > t_max:
            return AABBSide.NONE, None

        distance = t_max if t_min < 0 else t_min

        if t_min == t1[0] or t_min == t2[0]:
            side = AABBSide.RIGHT if direction.x < 0 else AABBSide.LEFT
        elif t_min == t1[1] or t_min == t2[1]:
            side = AABBSide.TOP if direction.y < 0 else AABBSide.BOTTOM
        else:
            side = AABBSide.BACK if direction.z < 0 else AABBSide.FRONT
        return side, distance