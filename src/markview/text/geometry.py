"""Pixel-space points and rectangles."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    origin: Point
    size: Size

    @classmethod
    def from_corners(cls, top_left: Point, bottom_right: Point) -> "Bounds":
        return cls(
            top_left,
            Size(bottom_right.x - top_left.x, bottom_right.y - top_left.y),
        )

    @property
    def left(self) -> float:
        return self.origin.x

    @property
    def top(self) -> float:
        return self.origin.y

    @property
    def right(self) -> float:
        return self.origin.x + self.size.width

    @property
    def bottom(self) -> float:
        return self.origin.y + self.size.height

    def contains(self, point: Point) -> bool:
        return self.left <= point.x < self.right and self.top <= point.y < self.bottom

    def dilate(self, dx: float, dy: float) -> "Bounds":
        return Bounds.from_corners(
            Point(self.left - dx, self.top - dy),
            Point(self.right + dx, self.bottom + dy),
        )
