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

Common types of the interaction behaviors.

An interaction behavior decides what happens to a ray that strikes an
object. It is any callable

    behavior(info: BounceInfo, payload) -> BounceResult

where ``info`` describes the bounce and ``payload`` is the state carried by
the ray lineage so far (see core.payload). Behaviors are pure: they must not
modify the scene, the info, or the payload they receive.

The surface normal in ``info`` comes straight from the intersection code and
may point either way. Behaviors that need an outward normal (pointing back
towards the incoming ray) must call orient_normal() themselves.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Protocol, TYPE_CHECKING

from ..geometry import Point, geometry
from ..payload import Payload

if TYPE_CHECKING:
    from ..scene import Scene, SceneObject, TraceSettings


class BounceInfo(NamedTuple):
    """
    Everything known about one bounce.

    Attributes:
        incoming_launch: Launch point of the incoming ray leg
        incoming_direction: Unit direction of the incoming ray
        surface_intersection: Point where the ray strikes the surface
        surface_normal: Unit surface normal there (orientation arbitrary)
        obj: The struck scene object
        scene: The scene being traced (read-only)
        settings: Settings of the current trace pass
        verbose: Verbosity level of the tracer (0 silent)
    """
    incoming_launch: Point
    incoming_direction: Point
    surface_intersection: Point
    surface_normal: Point
    obj: 'SceneObject'
    scene: 'Scene'
    settings: 'TraceSettings'
    verbose: int = 0


class BounceResult(NamedTuple):
    """
    Outcome of one bounce.

    Attributes:
        direction: Unit direction of the continuing ray
        branch_direction: Unit direction of a branch ray, or None
        payload: Payload carried by the continuing ray (None if empty)
        continue_tracing: False if the lineage ends here (absorbed)
    """
    direction: Point
    branch_direction: Optional[Point]
    payload: Payload
    continue_tracing: bool


class InteractionBehavior(Protocol):
    """Interface of an interaction behavior."""

    def __call__(self, info: BounceInfo, payload: Payload) -> BounceResult:
        ...


def orient_normal(normal: Point, direction: Point) -> Point:
    """
    Orient a surface normal to point back against the incoming direction.

    Args:
        normal: Unit surface normal, either orientation
        direction: Incoming ray direction

    Returns:
        The normal, flipped if it points along the incoming direction.
    """
    if geometry.dot(normal, direction) > 0:
        return geometry.negate(normal)
    return normal


def require_args(obj: 'SceneObject', count: int, name: str) -> None:
    """
    Check the number of interaction arguments of an object.

    Raises:
        ValueError: If the object does not carry exactly ``count`` arguments.
    """
    got = len(obj.interaction_args)
    if got != count:
        plural = '' if count == 1 else 's'
        raise ValueError(
            f"{name} requires exactly {count} argument{plural}, got {got} "
            f"on object '{obj.get_display_name()}'"
        )
