"""2-D vector math helpers operating on (x, y) tuples."""
from __future__ import annotations

import math

from ecosim.types import Vec


def sub(a: Vec, b: Vec) -> Vec:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec, s: float) -> Vec:
    return (v[0] * s, v[1] * s)


def magnitude(v: Vec) -> float:
    return math.hypot(v[0], v[1])


def normalize(v: Vec) -> Vec:
    mag = magnitude(v)
    if mag == 0.0:
        return v
    return scale(v, 1.0 / mag)


def distance(a: Vec, b: Vec) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)
