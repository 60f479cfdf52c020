"""
Copyright 2026 ray-tracing-curves authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math
from typing import Dict, Iterator, Sequence, Tuple, Union

from shapely.geometry import Point as ShapelyPoint


class Point:
    """
    A point (or vector) in 2D space.

    Points are treated as values: no code in this package mutates a Point
    after construction. Can be converted to/from Shapely Point objects.
    """

    __slots__ = ('x', 'y')

    def __init__(self, x: float, y: float):
        self.x = float(x)
        self.y = float(y)

    def to_shapely(self) -> ShapelyPoint:
        """Convert to Shapely Point."""
        return ShapelyPoint(self.x, self.y)

    @classmethod
    def from_shapely(cls, sp: ShapelyPoint) -> 'Point':
        """Create Point from Shapely Point."""
        return cls(sp.x, sp.y)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary representation."""
        return {'x': self.x, 'y': self.y}

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"


PointLike = Union[Point, Sequence[float], Dict[str, float]]


def as_point(p: PointLike) -> Point:
    """
    Coerce a point-like value into a Point.

    Accepts Point objects, (x, y) sequences and {'x': ..., 'y': ...} dicts.
    """
    if isinstance(p, Point):
        return p
    if isinstance(p, dict):
        return Point(p['x'], p['y'])
    x, y = p
    return Point(x, y)


class Geometry:
    """
    Basic vector operations on Points.

    All methods are static and return new Points; the arguments are never
    modified.
    """

    @staticmethod
    def point(x: float, y: float) -> Point:
        """Create a point."""
        return Point(x, y)

    @staticmethod
    def dot(p1: Point, p2: Point) -> float:
        """
        Calculate the dot product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Dot product
        """
        return p1.x * p2.x + p1.y * p2.y

    @staticmethod
    def cross(p1: Point, p2: Point) -> float:
        """
        Calculate the cross product, where the two points are treated as vectors.

        Args:
            p1: First point (as vector)
            p2: Second point (as vector)

        Returns:
            Cross product (z-component in 2D)
        """
        return p1.x * p2.y - p1.y * p2.x

    @staticmethod
    def add(p1: Point, p2: Point) -> Point:
        return Point(p1.x + p2.x, p1.y + p2.y)

    @staticmethod
    def sub(p1: Point, p2: Point) -> Point:
        return Point(p1.x - p2.x, p1.y - p2.y)

    @staticmethod
    def scale(p1: Point, factor: float) -> Point:
        return Point(p1.x * factor, p1.y * factor)

    @staticmethod
    def negate(p1: Point) -> Point:
        return Point(-p1.x, -p1.y)

    @staticmethod
    def point_along(origin: Point, direction: Point, alpha: float) -> Point:
        """Return origin + alpha * direction."""
        return Point(origin.x + alpha * direction.x, origin.y + alpha * direction.y)

    @staticmethod
    def length(p1: Point) -> float:
        """Length of the given point treated as a vector."""
        return math.hypot(p1.x, p1.y)

    @staticmethod
    def distance(p1: Point, p2: Point) -> float:
        """
        Calculate the distance between two points.

        Args:
            p1: First point
            p2: Second point

        Returns:
            Distance between points
        """
        return math.sqrt(Geometry.distance_squared(p1, p2))

    @staticmethod
    def distance_squared(p1: Point, p2: Point) -> float:
        """
        Calculate the squared distance between two points.

        Args:
            p1: First point
            p2: Second point

        Returns:
            Squared distance between points
        """
        dx = p1.x - p2.x
        dy = p1.y - p2.y
        return dx * dx + dy * dy

    @staticmethod
    def midpoint(p1: Point, p2: Point) -> Point:
        """
        Calculate the midpoint between two points.

        Args:
            p1: First point
            p2: Second point

        Returns:
            Midpoint
        """
        return Point((p1.x + p2.x) * 0.5, (p1.y + p2.y) * 0.5)

    @staticmethod
    def normalize_vec(p1: Point) -> Point:
        """
        Normalize the given point as if it were a vector.

        Args:
            p1: Point (as vector)

        Returns:
            Normalized vector

        Raises:
            ValueError: If the vector has zero length.
        """
        len_val = math.hypot(p1.x, p1.y)
        if len_val == 0:
            raise ValueError(f"Cannot normalize a zero-length vector: {p1}")
        return Point(p1.x / len_val, p1.y / len_val)

    @staticmethod
    def rotate_vec(p1: Point, angle: float) -> Point:
        """
        Rotate the given point as if it were a vector by the given angle in radians.

        Args:
            p1: Point (as vector)
            angle: Rotation angle in radians (counter-clockwise)

        Returns:
            Rotated vector
        """
        c = math.cos(angle)
        s = math.sin(angle)
        return Point(p1.x * c - p1.y * s, p1.x * s + p1.y * c)

    @staticmethod
    def perpendicular(p1: Point) -> Point:
        """Rotate a vector by +90 degrees."""
        return Point(-p1.y, p1.x)

    @staticmethod
    def reflect(direction: Point, normal: Point) -> Point:
        """
        Specular reflection of a direction about a unit normal: d - 2(d.n)n.

        The result does not depend on which way the normal points.
        """
        k = 2.0 * (direction.x * normal.x + direction.y * normal.y)
        return Point(direction.x - k * normal.x, direction.y - k * normal.y)


# Create a singleton instance for convenience
geometry = Geometry()


# Example usage and testing
if __name__ == "__main__":
    d = geometry.normalize_vec(geometry.point(1, -1))
    n = geometry.point(0, 1)
    print(f"Direction: {d}")
    print(f"Reflected about {n}: {geometry.reflect(d, n)}")
    print(f"Rotated by 90 degrees: {geometry.rotate_vec(d, math.pi / 2)}")
    print(f"Cross product: {geometry.cross(geometry.point(1, 0), geometry.point(0, 1))}")
