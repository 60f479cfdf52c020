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

Object Geometry Analysis Utility

This module converts scene objects into Shapely geometries and derives
simple properties from them:
- Polygons for closed subpaths and line strings for open ones
- The area of an object under the even-odd fill rule
- Path centroids (from segment endpoints) and area centroids
- Point containment, as an independent cross-check of the crossing-parity
  test used by the refract behavior

Curved segments are flattened into polylines (see Segment.sample), so the
results are approximations whose accuracy depends on the sample count.
Nothing here is used while tracing.
"""

from functools import reduce
from typing import List, TYPE_CHECKING

from shapely.geometry import GeometryCollection, LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry

from ..core.geometry import Point, PointLike, as_point, geometry
from ..core.segments import BezierSegment

if TYPE_CHECKING:
    from ..core.scene import SceneObject, Subpath


DEFAULT_SAMPLES = 32


def subpath_coords(subpath: 'Subpath', samples: int = DEFAULT_SAMPLES) -> List[tuple]:
    """
    Polyline vertices of a subpath.

    Straight segments contribute their endpoints only; curved segments are
    sampled at ``samples`` intervals. Shared endpoints are not repeated.
    """
    coords: List[tuple] = []
    for seg in subpath.segments:
        if isinstance(seg, BezierSegment) and seg.is_straight:
            pts = [seg.start_point, seg.end_point]
        else:
            pts = seg.sample(samples)
        for p in pts:
            xy = p.to_tuple()
            if not coords or coords[-1] != xy:
                coords.append(xy)
    return coords


def subpath_to_polygon(subpath: 'Subpath', samples: int = DEFAULT_SAMPLES) -> Polygon:
    """
    Convert a subpath into a Shapely Polygon.

    The subpath is treated as closed whether or not it is flagged so.

    Raises:
        ValueError: If the subpath has fewer than three distinct vertices.
    """
    coords = subpath_coords(subpath, samples)
    if len(coords) > 1 and coords[0] == coords[-1]:
        coords = coords[:-1]
    if len(coords) < 3:
        raise ValueError(
            f"Cannot build a polygon from {len(coords)} distinct vertices ({subpath!r})"
        )
    return Polygon(coords)


def subpath_to_linestring(subpath: 'Subpath', samples: int = DEFAULT_SAMPLES) -> LineString:
    """Convert a subpath into a Shapely LineString (closed subpaths are closed rings)."""
    coords = subpath_coords(subpath, samples)
    if subpath.is_closed and coords and coords[0] != coords[-1]:
        coords.append(coords[0])
    return LineString(coords)


def object_area(obj: 'SceneObject', samples: int = DEFAULT_SAMPLES) -> BaseGeometry:
    """
    Region enclosed by an object's closed subpaths under the even-odd rule.

    A point belongs to the region if it lies inside an odd number of closed
    subpaths, so a ring-shaped object (outer and inner boundary) has a hole.
    Returns an empty geometry if the object has no closed subpath.
    """
    polygons = [subpath_to_polygon(sp, samples) for sp in obj.subpaths if sp.is_closed]
    if not polygons:
        return GeometryCollection()
    return reduce(lambda a, b: a.symmetric_difference(b), polygons)


def object_to_geometry(obj: 'SceneObject', samples: int = DEFAULT_SAMPLES) -> BaseGeometry:
    """
    Shapely geometry of a whole scene object.

    Returns:
        The even-odd area of the closed subpaths if there are no open ones,
        a (Multi)LineString if there are only open subpaths, and a
        GeometryCollection of both otherwise.
    """
    lines = [subpath_to_linestring(sp, samples) for sp in obj.subpaths if not sp.is_closed]
    has_closed = any(sp.is_closed for sp in obj.subpaths)

    if not lines:
        return object_area(obj, samples)
    line_geom = lines[0] if len(lines) == 1 else MultiLineString(lines)
    if not has_closed:
        return line_geom
    return GeometryCollection([object_area(obj, samples), line_geom])


def get_path_centroid(obj: 'SceneObject') -> Point:
    """
    Centroid of an object's path nodes.

    The nodes of a subpath are its segment endpoints, where the end of one
    segment and the start of the next are averaged into a single node. For
    a closed subpath the final node is averaged into the first one. The
    result is the mean of the per-subpath node averages.

    This is a cheap reference point for an object (e.g. to place a label, or
    to rotate an object about), not its center of mass; see
    get_area_centroid() for that.

    Raises:
        ValueError: If the object has no segments.
    """
    total_x = 0.0
    total_y = 0.0
    count = 0
    for subpath in obj.subpaths:
        if not subpath.segments:
            continue
        nodes: List[Point] = []
        for seg in subpath.segments:
            if not nodes:
                nodes.append(seg.start_point)
            else:
                nodes[-1] = geometry.midpoint(nodes[-1], seg.start_point)
            nodes.append(seg.end_point)

        if subpath.is_closed:
            last = nodes.pop()
            nodes[0] = geometry.midpoint(nodes[0], last)

        total_x += sum(p.x for p in nodes) / len(nodes)
        total_y += sum(p.y for p in nodes) / len(nodes)
        count += 1

    if count == 0:
        raise ValueError(f"Object '{obj.get_display_name()}' has no segments")
    return Point(total_x / count, total_y / count)


def get_area_centroid(obj: 'SceneObject', samples: int = DEFAULT_SAMPLES) -> Point:
    """
    Centroid of the area enclosed by an object (even-odd rule).

    Raises:
        ValueError: If the object encloses no area.
    """
    area = object_area(obj, samples)
    if area.is_empty or area.area == 0:
        raise ValueError(f"Object '{obj.get_display_name()}' encloses no area")
    return Point.from_shapely(area.centroid)


def point_in_object(obj: 'SceneObject', point: PointLike, samples: int = 64) -> bool:
    """
    Whether a point lies inside an object's even-odd area, computed with
    Shapely on the flattened geometry.
    """
    return object_area(obj, samples).contains(as_point(point).to_shapely())
