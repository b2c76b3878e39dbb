from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


class SupportsXY(Protocol):
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vec2:
        return self * scalar

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def offset(self, *, dx: float = 0.0, dy: float = 0.0) -> Vec2:
        return Vec2(self.x + dx, self.y + dy)

    def with_x(self, x: float) -> Vec2:
        return Vec2(float(x), self.y)


@dataclass(slots=True, frozen=True)
class Rect:
    """Axis-aligned rectangle stored as top-left corner plus size."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @classmethod
    def from_center(cls, center: SupportsXY, width: float, height: float) -> Rect:
        return cls(
            x=center.x - width * 0.5,
            y=center.y - height * 0.5,
            w=width,
            h=height,
        )

    @classmethod
    def from_center_size(cls, center: Vec2, size: Vec2) -> Rect:
        return cls.from_center(center, size.x, size.y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> Vec2:
        return Vec2(self.x + self.w * 0.5, self.y + self.h * 0.5)

    def contains(self, point: SupportsXY) -> bool:
        px = point.x
        py = point.y
        return self.x <= px <= self.right and self.y <= py <= self.bottom


@dataclass(slots=True, frozen=True)
class Bounds:
    """Edge-based box: left/top/right/bottom in world units."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @classmethod
    def union(cls, rects: Iterable[Rect]) -> Bounds | None:
        left = top = right = bottom = 0.0
        seen = False
        for rect in rects:
            if not seen:
                left, top, right, bottom = rect.left, rect.top, rect.right, rect.bottom
                seen = True
                continue
            left = min(left, rect.left)
            top = min(top, rect.top)
            right = max(right, rect.right)
            bottom = max(bottom, rect.bottom)
        if not seen:
            return None
        return cls(left=left, top=top, right=right, bottom=bottom)
