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

import re
import uuid as uuid_module
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from . import constants
from .geometry import Point, PointLike, as_point, geometry
from .segments import BezierSegment, Segment


TagsLike = Union[None, str, Iterable[str]]


def parse_tags(tags: TagsLike) -> FrozenSet[str]:
    """
    Normalize a tag specification into a frozenset of tag strings.

    Tags may be given as an iterable of strings, or as a single string of
    tags separated by commas and/or whitespace (e.g. "detector, screen").
    """
    if tags is None:
        return frozenset()
    if isinstance(tags, str):
        return frozenset(re.findall(r'\w+', tags))
    return frozenset(str(t) for t in tags)


class TraceSettings:
    """
    Global settings of a trace pass.

    Attributes:
        ambient_refractive_index (float): Refractive index outside every
            refractive object (must be positive)
        min_bounce_distance (float): MIN_D, intersections at or below this
            distance along a ray are ignored (must be non-negative)
        max_tracing_depth (int): Maximum number of bounces per lineage
            (must be non-negative)
        max_child_ray_depth (int): Maximum number of nested branches per
            lineage (must be non-negative)
    """

    def __init__(
        self,
        ambient_refractive_index: float = constants.AMBIENT_REFRACTIVE_INDEX,
        min_bounce_distance: float = constants.MIN_BOUNCE_DISTANCE,
        max_tracing_depth: int = constants.MAX_TRACING_DEPTH,
        max_child_ray_depth: int = constants.MAX_CHILD_RAY_DEPTH
    ) -> None:
        self.ambient_refractive_index = ambient_refractive_index
        self.min_bounce_distance = min_bounce_distance
        self.max_tracing_depth = max_tracing_depth
        self.max_child_ray_depth = max_child_ray_depth

    @property
    def ambient_refractive_index(self) -> float:
        return self._ambient_refractive_index

    @ambient_refractive_index.setter
    def ambient_refractive_index(self, value: float) -> None:
        if value <= 0:
            raise ValueError(
                f"ambient_refractive_index must be a positive number, got {value}"
            )
        self._ambient_refractive_index = float(value)

    @property
    def min_bounce_distance(self) -> float:
        return self._min_bounce_distance

    @min_bounce_distance.setter
    def min_bounce_distance(self, value: float) -> None:
        if value < 0:
            raise ValueError(
                f"min_bounce_distance must be a non-negative number, got {value}"
            )
        self._min_bounce_distance = float(value)

    @property
    def max_tracing_depth(self) -> int:
        return self._max_tracing_depth

    @max_tracing_depth.setter
    def max_tracing_depth(self, value: int) -> None:
        if value < 0:
            raise ValueError(
                f"max_tracing_depth must be a non-negative integer, got {value}"
            )
        self._max_tracing_depth = int(value)

    @property
    def max_child_ray_depth(self) -> int:
        return self._max_child_ray_depth

    @max_child_ray_depth.setter
    def max_child_ray_depth(self, value: int) -> None:
        if value < 0:
            raise ValueError(
                f"max_child_ray_depth must be a non-negative integer, got {value}"
            )
        self._max_child_ray_depth = int(value)

    def copy(self, **overrides) -> 'TraceSettings':
        """Copy of these settings with some values replaced."""
        values = {
            'ambient_refractive_index': self.ambient_refractive_index,
            'min_bounce_distance': self.min_bounce_distance,
            'max_tracing_depth': self.max_tracing_depth,
            'max_child_ray_depth': self.max_child_ray_depth,
        }
        values.update(overrides)
        return TraceSettings(**values)

    def __repr__(self) -> str:
        return (f"TraceSettings(ambient_refractive_index={self.ambient_refractive_index}, "
                f"min_bounce_distance={self.min_bounce_distance}, "
                f"max_tracing_depth={self.max_tracing_depth}, "
                f"max_child_ray_depth={self.max_child_ray_depth})")


class Subpath:
    """
    An ordered run of endpoint-contiguous segments.

    Attributes:
        segments (tuple): The segments, in drawing order
        is_closed (bool): Whether the subpath encloses a region
    """

    def __init__(self, segments: Sequence[Segment], is_closed: bool = False) -> None:
        self.segments: Tuple[Segment, ...] = tuple(segments)
        self.is_closed: bool = bool(is_closed)

    @classmethod
    def polygon(cls, points: Sequence[PointLike]) -> 'Subpath':
        """Closed subpath of straight segments through the given vertices."""
        pts = [as_point(p) for p in points]
        segs = [BezierSegment.line(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]
        return cls(segs, is_closed=True)

    @classmethod
    def polyline(cls, points: Sequence[PointLike]) -> 'Subpath':
        """Open subpath of straight segments through the given vertices."""
        pts = [as_point(p) for p in points]
        segs = [BezierSegment.line(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
        return cls(segs, is_closed=False)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __repr__(self) -> str:
        return f"Subpath({len(self.segments)} segments, closed={self.is_closed})"


def _crossing_count(subpath: Subpath, point: Point, direction: Point, min_d: float) -> int:
    """Number of forward crossings of a subpath, free of coincident crossings."""
    for attempt in range(constants.PARITY_MAX_RETRIES + 1):
        d = geometry.rotate_vec(direction, attempt * constants.PARITY_RETRY_ANGLE)
        alphas = sorted(a for seg in subpath.segments for a in seg.crossings(point, d, min_d))
        if all(b - a > constants.CROSSING_MERGE_TOLERANCE * max(1.0, b)
               for a, b in zip(alphas, alphas[1:])):
            break
    return len(alphas)


class Hit(NamedTuple):
    """Nearest intersection of a ray with one scene object."""
    distance: float
    point: Point
    normal: Point
    segment: Segment


class SceneObject:
    """
    A scene object: geometry plus the interaction it applies to rays.

    Scene objects are read-only while a trace pass is running. Between
    passes a caller may replace them wholesale (see Scene.replace_objects).

    Attributes:
        subpaths (tuple): Subpaths making up the object's geometry
        interaction_type (str or None): Name of the interaction behavior
            applied when a ray strikes the object. Objects without one are
            ignored by the tracer.
        interaction_args (tuple): Numeric arguments of the interaction
        z_order (int or None): Precedence key, unique within a scene.
            Assigned by Scene.add_object if left as None.
        tags (frozenset): Tags used for reporting and data extraction
        name (str or None): Optional human-readable name
    """

    def __init__(
        self,
        subpaths: Sequence[Subpath],
        interaction_type: Optional[str] = None,
        interaction_args: Sequence[float] = (),
        z_order: Optional[int] = None,
        tags: TagsLike = None,
        name: Optional[str] = None
    ) -> None:
        self.subpaths: Tuple[Subpath, ...] = tuple(subpaths)
        self.interaction_type: Optional[str] = interaction_type
        self.interaction_args: Tuple[float, ...] = tuple(float(a) for a in interaction_args)
        self.z_order: Optional[int] = z_order
        self.tags: FrozenSet[str] = parse_tags(tags)
        self._name: Optional[str] = name
        self._uuid: str = str(uuid_module.uuid4())

    @property
    def uuid(self) -> str:
        """Auto-generated unique identifier for this object instance."""
        return self._uuid

    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value

    def get_display_name(self) -> str:
        """
        The user-defined name if set, otherwise the interaction type and a
        short UUID suffix.
        """
        if self._name:
            return self._name
        return f"{self.interaction_type or 'object'}_{self._uuid[:8]}"

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def iter_segments(self):
        for subpath in self.subpaths:
            yield from subpath.segments

    @property
    def segment_count(self) -> int:
        return sum(len(sp) for sp in self.subpaths)

    def is_single_straight_segment(self) -> bool:
        """Whether the object is exactly one straight (order-1) segment."""
        if len(self.subpaths) != 1 or len(self.subpaths[0].segments) != 1:
            return False
        seg = self.subpaths[0].segments[0]
        return isinstance(seg, BezierSegment) and seg.is_straight

    def check_ray_intersects(
        self,
        origin: Point,
        direction: Point,
        min_d: float
    ) -> Optional[Hit]:
        """
        Nearest intersection of a ray with any segment of this object.

        Ties keep the segment enumerated first.

        Args:
            origin: Ray origin.
            direction: Unit ray direction.
            min_d: Minimum bounce distance.

        Returns:
            Hit, or None if the ray misses the object.
        """
        best: Optional[Hit] = None
        for seg in self.iter_segments():
            pt, nn = seg.intersect(origin, direction, min_d)
            d = geometry.distance(pt, origin)
            if d > min_d and (best is None or d < best.distance):
                best = Hit(d, pt, nn, seg)
        return best

    def contains_point(self, point: Point, direction: Point, min_d: float) -> bool:
        """
        Whether a point lies inside this object by crossing parity.

        A straight ray is cast from the point along the given direction. The
        point is inside a closed subpath if the ray crosses it an odd number
        of times, and inside the object if it is inside an odd number of
        closed subpaths. Open subpaths are ignored.

        A ray that passes through a vertex shared by two segments, or that
        touches a curve tangentially, gives coincident crossings whose count
        says nothing about inside or outside. The count is then repeated
        with the ray turned slightly (see constants.PARITY_RETRY_ANGLE).
        """
        inside_count = 0
        for subpath in self.subpaths:
            if not subpath.is_closed:
                continue
            if _crossing_count(subpath, point, direction, min_d) % 2 == 1:
                inside_count += 1
        return inside_count % 2 == 1

    def __repr__(self) -> str:
        args = ", ".join(f"{a:g}" for a in self.interaction_args)
        return (f"SceneObject({self.get_display_name()!r}, "
                f"{self.interaction_type}({args}), z_order={self.z_order}, "
                f"subpaths={len(self.subpaths)}, tags={sorted(self.tags)})")


class RaySource:
    """
    A ray launch definition: origin point, unit direction and tags.

    Attributes:
        origin (Point): Launch point
        direction (Point): Unit launch direction
        tags (frozenset): Tags of the source, used to filter results
        name (str or None): Optional human-readable name
    """

    def __init__(
        self,
        origin: PointLike,
        direction: PointLike,
        tags: TagsLike = None,
        name: Optional[str] = None
    ) -> None:
        self.origin: Point = as_point(origin)
        self.direction: Point = geometry.normalize_vec(as_point(direction))
        self.tags: FrozenSet[str] = parse_tags(tags)
        self.name: Optional[str] = name

    @classmethod
    def from_marker(
        cls,
        p1: PointLike,
        p2: PointLike,
        p3: PointLike,
        tags: TagsLike = None,
        name: Optional[str] = None
    ) -> 'RaySource':
        """
        Build a source from a three-vertex marker polyline.

        The middle vertex is the launch point. The direction points from it
        along the longer of the two arms (the first arm on a tie).
        """
        a, b, c = as_point(p1), as_point(p2), as_point(p3)
        arm1 = geometry.sub(a, b)
        arm2 = geometry.sub(c, b)
        if geometry.length(arm1) >= geometry.length(arm2):
            direction = arm1
        else:
            direction = arm2
        return cls(b, direction, tags=tags, name=name)

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return (f"RaySource({label}origin=({self.origin.x:g}, {self.origin.y:g}), "
                f"direction=({self.direction.x:.4f}, {self.direction.y:.4f}))")


class Scene:
    """
    Container for scene objects, ray sources and tracing settings.

    Attributes:
        objs (list): All objects in the scene, in enumeration order
        ray_sources (list): Ray launch definitions
        settings (TraceSettings): Tracing settings for this scene
        name (str or None): Optional name for the scene
    """

    def __init__(self, settings: Optional[TraceSettings] = None, name: Optional[str] = None):
        """Initialize an empty scene with default settings."""
        self.objs: List[SceneObject] = []
        self.ray_sources: List[RaySource] = []
        self.settings: TraceSettings = settings if settings is not None else TraceSettings()
        self.name: Optional[str] = name
        self._uuid: str = str(uuid_module.uuid4())

    @property
    def uuid(self) -> str:
        return self._uuid

    def get_display_name(self) -> str:
        if self.name:
            return self.name
        return f"Scene_{self._uuid[:8]}"

    def add_object(self, obj: SceneObject) -> SceneObject:
        """
        Add an object to the scene.

        If the object has no z-order yet it is given one above every existing
        object.

        Args:
            obj: The scene object to add

        Returns:
            The added object.

        Raises:
            ValueError: If another object already has the same z-order.
        """
        if obj.z_order is None:
            obj.z_order = self._next_z_order()
        elif any(o.z_order == obj.z_order for o in self.objs):
            raise ValueError(
                f"z_order {obj.z_order} is already used in scene "
                f"'{self.get_display_name()}'; z_order must be unique"
            )
        self.objs.append(obj)
        return obj

    def _next_z_order(self) -> int:
        if not self.objs:
            return 0
        return max(o.z_order for o in self.objs) + 1

    def remove_object(self, obj: SceneObject) -> None:
        """Remove an object from the scene (no error if absent)."""
        if obj in self.objs:
            self.objs.remove(obj)

    def replace_objects(self, objs: Iterable[SceneObject]) -> None:
        """
        Replace every object in the scene at once.

        Used by external drivers between trace passes. Explicit z-orders
        must be unique within the new set; objects without one are then
        numbered above the highest explicit z-order, in order. The scene is
        left unchanged if the new set is rejected.

        Raises:
            ValueError: If two of the new objects share a z-order.
        """
        new_objs = list(objs)
        used = set()
        for obj in new_objs:
            if obj.z_order is None:
                continue
            if obj.z_order in used:
                raise ValueError(
                    f"z_order {obj.z_order} is used twice in the objects replacing "
                    f"scene '{self.get_display_name()}'; z_order must be unique"
                )
            used.add(obj.z_order)

        next_z = max(used) + 1 if used else 0
        for obj in new_objs:
            if obj.z_order is None:
                obj.z_order = next_z
                next_z += 1
        self.objs = new_objs

    def add_ray_source(self, source: RaySource) -> RaySource:
        self.ray_sources.append(source)
        return source

    def clear(self) -> None:
        """Remove all objects and ray sources from the scene."""
        self.objs.clear()
        self.ray_sources.clear()

    @property
    def interacting_objects(self) -> List[SceneObject]:
        """Objects carrying an interaction type, in enumeration order."""
        return [o for o in self.objs if o.interaction_type]

    def get_objects_by_type(self, interaction_type: str) -> List[SceneObject]:
        return [o for o in self.objs if o.interaction_type == interaction_type]

    def get_objects_by_tag(self, tag: str) -> List[SceneObject]:
        """
        All objects carrying the given tag.

        Raises:
            ValueError: If no object carries the tag.
        """
        found = [o for o in self.objs if tag in o.tags]
        if not found:
            raise ValueError(f"Requested tag '{tag}' not found.")
        return found

    def get_object_by_name(self, name: str) -> Optional[SceneObject]:
        for obj in self.objs:
            if obj.name == name:
                return obj
        return None

    def __repr__(self) -> str:
        return (f"Scene({self.get_display_name()!r}, objects={len(self.objs)}, "
                f"ray_sources={len(self.ray_sources)})")


def intersect_object(
    obj: SceneObject,
    origin: Point,
    direction: Point,
    min_d: float
) -> Optional[Hit]:
    """Nearest hit of a ray with one object (see SceneObject.check_ray_intersects)."""
    return obj.check_ray_intersects(origin, direction, min_d)
