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

"""
Curve segments and ray/segment intersection.

Two kinds of segment make up every path in a scene:

- BezierSegment: a straight line, quadratic or cubic Bezier curve given by
  2, 3 or 4 control points.
- ArcSegment: an arc of a rotated ellipse, given by its radii, center,
  rotation and start/end angles.

Both implement the same intersection contract. Given a ray (origin ``b``,
unit direction ``d``) and a minimum bounce distance ``min_d``,
``intersect()`` returns the nearest intersection point at distance
``alpha > min_d`` along the ray, and the unit surface normal there. The
normal is NOT oriented with respect to the ray; callers flip it as needed.

If there is no intersection, ``intersect()`` returns the ray's own origin
and direction unchanged. Callers detect this by checking whether the
returned point lies at a positive distance from the origin.
"""

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .geometry import Point, PointLike, as_point, geometry
from .poly_roots import evaluate_poly, find_poly_roots


# Bernstein -> power basis. Row k gives the coefficient of t^(order-1-k)
# as a combination of the control points.
_BERNSTEIN_TO_POWER = {
    2: np.array([[-1.0, 1.0],
                 [1.0, 0.0]]),
    3: np.array([[1.0, -2.0, 1.0],
                 [-2.0, 2.0, 0.0],
                 [1.0, 0.0, 0.0]]),
    4: np.array([[-1.0, 3.0, -3.0, 1.0],
                 [3.0, -6.0, 3.0, 0.0],
                 [-3.0, 3.0, 0.0, 0.0],
                 [1.0, 0.0, 0.0, 0.0]]),
}


class Segment:
    """
    Base class for path segments.

    Subclasses are immutable once constructed.
    """

    kind: str = ''

    def intersect(
        self,
        origin: Point,
        direction: Point,
        min_d: float
    ) -> Tuple[Point, Point]:
        """
        Find the nearest forward intersection of a ray with this segment.

        Args:
            origin: Ray origin.
            direction: Unit ray direction.
            min_d: Intersections at distance <= min_d are ignored.

        Returns:
            (point, normal) of the nearest intersection, or (origin, direction)
            if there is none.
        """
        hit = self._nearest(origin, direction, min_d)
        if hit is None:
            return origin, direction
        alpha, normal = hit
        return geometry.point_along(origin, direction, alpha), normal

    def crossings(self, origin: Point, direction: Point, min_d: float) -> List[float]:
        """All ray distances alpha > min_d at which the ray crosses this segment."""
        return sorted(alpha for alpha, _ in self._candidates(origin, direction)
                      if alpha > min_d)

    def _nearest(
        self,
        origin: Point,
        direction: Point,
        min_d: float
    ) -> Optional[Tuple[float, Point]]:
        best: Optional[Tuple[float, float]] = None
        for alpha, param in self._candidates(origin, direction):
            if alpha > min_d and (best is None or alpha < best[0]):
                best = (alpha, param)
        if best is None:
            return None
        normal = self.normal_at(best[1])
        if normal is None:
            return None
        return best[0], normal

    def _candidates(self, origin: Point, direction: Point) -> List[Tuple[float, float]]:
        """(alpha, curve parameter) pairs for every intersection of the full ray line."""
        raise NotImplementedError("Subclasses must implement _candidates()")

    def normal_at(self, param: float) -> Optional[Point]:
        """Unit normal at the given curve parameter, or None if undefined."""
        raise NotImplementedError("Subclasses must implement normal_at()")

    def point_at(self, t: float) -> Point:
        """Point at fraction t in [0, 1] along the segment."""
        raise NotImplementedError("Subclasses must implement point_at()")

    @property
    def start_point(self) -> Point:
        return self.point_at(0.0)

    @property
    def end_point(self) -> Point:
        return self.point_at(1.0)

    def sample(self, n: int = 16) -> List[Point]:
        """
        Polyline approximation of the segment with n + 1 points.

        Only used for analysis and export, never for tracing.
        """
        n = max(1, int(n))
        return [self.point_at(i / n) for i in range(n + 1)]


class BezierSegment(Segment):
    """
    A polynomial segment of order 1 to 3 (line, quadratic or cubic Bezier).

    Attributes:
        control_points (tuple): 2 to 4 control points
        order (int): Polynomial order (1 = straight line)
        coeffs (numpy.ndarray): Power-basis coefficients, shape (4, 2), rows
            for t^3, t^2, t, 1 (zero rows for lower orders)
    """

    kind = 'bezier'

    def __init__(self, control_points: Sequence[PointLike]):
        points = tuple(as_point(p) for p in control_points)
        if not 2 <= len(points) <= 4:
            raise ValueError(
                f"BezierSegment requires 2 to 4 control points, got {len(points)}"
            )
        self._control_points = points
        data = np.array([p.to_tuple() for p in points], dtype=float)
        power = _BERNSTEIN_TO_POWER[len(points)] @ data
        coeffs = np.zeros((4, 2))
        coeffs[4 - len(points):] = power
        coeffs.setflags(write=False)
        self._coeffs = coeffs

    @classmethod
    def line(cls, p1: PointLike, p2: PointLike) -> 'BezierSegment':
        """Straight segment from p1 to p2."""
        return cls([p1, p2])

    @property
    def control_points(self) -> Tuple[Point, ...]:
        return self._control_points

    @property
    def order(self) -> int:
        return len(self._control_points) - 1

    @property
    def is_straight(self) -> bool:
        return self.order == 1

    @property
    def coeffs(self) -> np.ndarray:
        return self._coeffs

    def _candidates(self, origin: Point, direction: Point) -> List[Tuple[float, float]]:
        cx = [float(v) for v in self._coeffs[:, 0]]
        cy = [float(v) for v in self._coeffs[:, 1]]
        cx[3] -= origin.x
        cy[3] -= origin.y

        # Eliminate alpha from P(t) - b = alpha * d
        cross_coeffs = [ax * direction.y - ay * direction.x for ax, ay in zip(cx, cy)]
        first = next((i for i, c in enumerate(cross_coeffs) if c != 0), None)
        if first is None:
            # Ray collinear with a degenerate curve: ill-posed, no intersection
            return []
        roots = find_poly_roots(cross_coeffs[first:])

        # Alpha from the dominant direction component
        if direction.x == 0 and direction.y == 0:
            return []
        if abs(direction.x) >= abs(direction.y):
            row, d = cx, direction.x
        else:
            row, d = cy, direction.y
        return [(evaluate_poly(row, t) / d, t) for t in roots]

    def tangent_at(self, t: float) -> Point:
        c = self._coeffs
        return Point(
            3 * c[0, 0] * t * t + 2 * c[1, 0] * t + c[2, 0],
            3 * c[0, 1] * t * t + 2 * c[1, 1] * t + c[2, 1],
        )

    def normal_at(self, param: float) -> Optional[Point]:
        tangent = self.tangent_at(param)
        if tangent.x == 0 and tangent.y == 0:
            # Cusp of a degenerate cubic: no normal
            return None
        return geometry.normalize_vec(geometry.perpendicular(tangent))

    def point_at(self, t: float) -> Point:
        c = self._coeffs
        return Point(
            evaluate_poly(c[:, 0], t),
            evaluate_poly(c[:, 1], t),
        )

    @property
    def start_point(self) -> Point:
        return self._control_points[0]

    @property
    def end_point(self) -> Point:
        return self._control_points[-1]

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.x:g}, {p.y:g})" for p in self._control_points)
        return f"BezierSegment([{pts}])"


class ArcSegment(Segment):
    """
    An arc of a rotated ellipse.

    The arc is the set of points
        center + R(phi) * (rx*cos(theta), ry*sin(theta))
    for theta running from t1 to t2. t1 may be greater than t2, in which case
    the arc runs in the decreasing-angle direction, and the angular span may
    exceed one full turn.

    Attributes:
        rx, ry (float): Ellipse radii (nonzero)
        cx, cy (float): Ellipse center
        phi (float): Rotation of the ellipse axes, in radians
        t1, t2 (float): Start and end angles, in radians
    """

    kind = 'arc'

    def __init__(
        self,
        rx: float,
        ry: float,
        cx: float,
        cy: float,
        phi: float,
        t1: float,
        t2: float
    ):
        if rx == 0 or ry == 0:
            raise ValueError(f"ArcSegment radii must be nonzero, got rx={rx}, ry={ry}")
        self._rx = float(rx)
        self._ry = float(ry)
        self._cx = float(cx)
        self._cy = float(cy)
        self._phi = float(phi)
        self._t1 = float(t1)
        self._t2 = float(t2)

    @classmethod
    def circle_arc(
        cls,
        center: PointLike,
        radius: float,
        t1: float = 0.0,
        t2: float = 2 * math.pi
    ) -> 'ArcSegment':
        """Arc of a circle (a full circle by default)."""
        c = as_point(center)
        return cls(radius, radius, c.x, c.y, 0.0, t1, t2)

    @property
    def rx(self) -> float:
        return self._rx

    @property
    def ry(self) -> float:
        return self._ry

    @property
    def cx(self) -> float:
        return self._cx

    @property
    def cy(self) -> float:
        return self._cy

    @property
    def phi(self) -> float:
        return self._phi

    @property
    def t1(self) -> float:
        return self._t1

    @property
    def t2(self) -> float:
        return self._t2

    @property
    def center(self) -> Point:
        return Point(self._cx, self._cy)

    def contains_angle(self, theta: float) -> bool:
        """
        Whether the ellipse angle theta (or any 2*pi multiple of it) lies on the arc.
        """
        k1 = (self._t1 - theta) / (2 * math.pi)
        k2 = (self._t2 - theta) / (2 * math.pi)
        if self._t1 <= self._t2:
            return math.ceil(k1) <= math.floor(k2)
        return math.ceil(k2) <= math.floor(k1)

    def _candidates(self, origin: Point, direction: Point) -> List[Tuple[float, float]]:
        rx, ry = self._rx, self._ry
        cos_p = math.cos(self._phi)
        sin_p = math.sin(self._phi)

        # Ray in the ellipse's unrotated local frame
        ax = cos_p * direction.x + sin_p * direction.y
        ay = -sin_p * direction.x + cos_p * direction.y
        ox = origin.x - self._cx
        oy = origin.y - self._cy
        bx = cos_p * ox + sin_p * oy
        by = -sin_p * ox + cos_p * oy

        qa = (ry * ax) ** 2 + (rx * ay) ** 2
        qb = 2 * (ax * bx * ry * ry + ay * by * rx * rx)
        qc = (bx * ry) ** 2 + (by * rx) ** 2 - (rx * ry) ** 2
        disc = qb * qb - 4 * qa * qc
        if qa == 0 or disc < 0:
            return []

        sqrt_disc = math.sqrt(disc)
        result = []
        for alpha in ((-qb + sqrt_disc) / (2 * qa), (-qb - sqrt_disc) / (2 * qa)):
            theta = math.atan2((alpha * ay + by) / ry, (alpha * ax + bx) / rx)
            if self.contains_angle(theta):
                result.append((alpha, theta))
        return result

    def normal_at(self, param: float) -> Optional[Point]:
        local_tangent = Point(-self._rx * math.sin(param), self._ry * math.cos(param))
        tangent = geometry.rotate_vec(local_tangent, self._phi)
        return geometry.normalize_vec(geometry.perpendicular(tangent))

    def point_at(self, t: float) -> Point:
        theta = self._t1 + t * (self._t2 - self._t1)
        local = Point(self._rx * math.cos(theta), self._ry * math.sin(theta))
        return geometry.add(geometry.rotate_vec(local, self._phi), self.center)

    def __repr__(self) -> str:
        return (f"ArcSegment(rx={self._rx:g}, ry={self._ry:g}, "
                f"c=({self._cx:g}, {self._cy:g}), phi={self._phi:g}, "
                f"t1={self._t1:g}, t2={self._t2:g})")


# Example usage and testing
if __name__ == "__main__":
    seg = BezierSegment.line((2, -1), (2, 1))
    pt, nn = seg.intersect(Point(0, 0), Point(1, 0), 1e-4)
    print(f"{seg}: hit at {pt}, normal {nn}")

    arc = ArcSegment.circle_arc((5, 0), 1.0)
    pt, nn = arc.intersect(Point(0, 0), Point(1, 0), 1e-4)
    print(f"{arc}: hit at {pt}, normal {nn}")
    print(f"  crossings: {arc.crossings(Point(0, 0), Point(1, 0), 1e-4)}")
