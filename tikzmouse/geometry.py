"""Point arithmetic shared by the calibration and transform layers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

from .errors import DegenerateCalibration
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Point":
        return cls(float(values[0]), float(values[1]))


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class AxisCalibration:
    """Affine map of one axis: ``drawing = intercept + slope * device``."""

    intercept: float = 0.0
    slope: float = 1.0

    def apply(self, device: float) -> float:
        return self.intercept + self.slope * device

    def invert(self, drawing: float) -> float:
        return (drawing - self.intercept) / self.slope


def _dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def _cross(a: Point, b: Point) -> float:
    return a.x * b.y - b.x * a.y


def linear_fit(
    device: Tuple[float, float],
    drawing: Tuple[float, float],
    *,
    axis: str = "?",
) -> AxisCalibration:
    """Fit ``drawing = intercept + slope * device`` through two samples.

    ``device`` holds the two raw pointer coordinates of one axis and
    ``drawing`` the values they must map to.
    """
    x1, x2 = float(device[0]), float(device[1])
    y1, y2 = float(drawing[0]), float(drawing[1])
    if x1 == x2:
        raise DegenerateCalibration(axis, f"device samples coincide ({x1:g})")

    intercept = (x1 * y2 - x2 * y1) / (x1 - x2)
    slope = (y1 - y2) / (x1 - x2)
    if slope == 0.0:
        raise DegenerateCalibration(axis, f"drawing targets coincide ({y1:g})")
    return AxisCalibration(float(intercept), float(slope))


def angle_between(v1: Point, v2: Point) -> float:
    """Signed angle from ``v1`` to ``v2`` folded into ``[0, 2*pi)``."""
    if (v1.x == 0.0 and v1.y == 0.0) or (v2.x == 0.0 and v2.y == 0.0):
        raise ValueError("angle is undefined for a zero vector")
    theta = math.atan2(_cross(v1, v2), _dot(v1, v2))
    if theta < 0.0:
        theta += TWO_PI
    # -0.0 + 2*pi rounds to 2*pi; keep the half-open range
    if theta >= TWO_PI:
        theta = 0.0
    return theta


def rotation_matrix(theta: float) -> np.ndarray:
    c = math.cos(theta)
    s = math.sin(theta)
    return np.array([[c, -s], [s, c]])


def rotate_point(p: Point, center: Point, theta: float) -> Point:
    """Rotate ``p`` counter-clockwise by ``theta`` radians around ``center``."""
    offset = (p - center).as_array()
    return Point.from_array(rotation_matrix(theta) @ offset) + center


apply_debug_logging(globals(), logger=logger, skip={"rotation_matrix"})
