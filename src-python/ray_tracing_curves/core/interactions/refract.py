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
Refraction at the boundary of a refractive object.

Overlapping and nested refractive objects are resolved with a refractive
stack (see core.payload): the ordered set of objects the ray is currently
inside, highest z-order first. The medium the ray travels through is the
top of the stack, or the ambient medium if the stack is empty.

Crossing the boundary of an object toggles that object's entry. Two stacks
are therefore considered at every hit:

- the reflection stack: the current one, kept on total internal reflection
- the transmission stack: the current one with the struck object toggled

Refractive objects need not be closed, but an open path may give a ray no
way back out of its medium.
"""

import math

from .base import BounceInfo, BounceResult, orient_normal, require_args
from ..constants import REFRACT
from ..geometry import Point, geometry
from ..payload import (
    Payload,
    RefractionStack,
    RefractionStackEntry,
    RefractionState,
    opaque_part,
    stack_insert,
    stack_toggle,
    stack_top_index,
)


def refractive_index_of(obj) -> float:
    """Refractive index of a refract-type object (the sign is ignored)."""
    require_args(obj, 1, REFRACT)
    return abs(obj.interaction_args[0])


def initial_stack(info: BounceInfo) -> RefractionStack:
    """
    Build the refractive stack of a ray that has none yet.

    Every refract-type object in the scene, the struck one included, is
    tested for containing the incoming ray's launch point by crossing parity
    along the incoming ray (see SceneObject.contains_point). Objects that
    contain it are stacked in descending z-order.
    """
    stack: RefractionStack = ()
    min_d = info.settings.min_bounce_distance
    for test_obj in info.scene.objs:
        if test_obj.interaction_type != REFRACT:
            continue
        if test_obj.contains_point(info.incoming_launch, info.incoming_direction, min_d):
            entry = RefractionStackEntry(test_obj.z_order, refractive_index_of(test_obj))
            stack = stack_insert(stack, entry)
    return stack


def snell_direction(d: Point, n: Point, old_index: float, new_index: float):
    """
    Direction of a ray refracted at a surface, or None on total internal
    reflection.

    Args:
        d: Unit incoming direction
        n: Unit surface normal pointing back against d
        old_index: Refractive index on the incoming side
        new_index: Refractive index on the far side

    Returns:
        Unit refracted direction, or None if sin(theta2) exceeds 1.
    """
    cross_in = geometry.cross(n, d)
    sin_t2 = (old_index / new_index) * abs(cross_in)
    if abs(sin_t2) > 1.0:
        return None

    # Rotate the inward normal -n both ways by theta2 and keep the candidate
    # on the same side of the normal as the incoming ray
    cos_t2 = math.sqrt(1.0 - sin_t2 * sin_t2)
    r_a = Point(-(cos_t2 * n.x - sin_t2 * n.y), -(sin_t2 * n.x + cos_t2 * n.y))
    r_b = Point(-(cos_t2 * n.x + sin_t2 * n.y), -(-sin_t2 * n.x + cos_t2 * n.y))
    if geometry.cross(n, r_a) * cross_in >= 0:
        return r_a
    return r_b


def refract(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Refract (or totally internally reflect) a ray at a refractive boundary.

    Takes one argument, the refractive index of the object. The payload
    becomes a RefractionState holding the stack and index of the medium the
    outgoing ray travels through. Custom-behavior data in the incoming
    payload is kept in RefractionState.extra.
    """
    obj = info.obj
    obj_index = refractive_index_of(obj)
    ambient = info.settings.ambient_refractive_index

    if isinstance(payload, RefractionState):
        stack_r = payload.stack
    else:
        stack_r = initial_stack(info)
    extra = opaque_part(payload) or None
    stack_t = stack_toggle(stack_r, RefractionStackEntry(obj.z_order, obj_index))

    old_index = stack_top_index(stack_r, ambient)
    new_index = stack_top_index(stack_t, ambient)

    d = geometry.normalize_vec(info.incoming_direction)
    n = geometry.normalize_vec(orient_normal(info.surface_normal, d))

    refracted = snell_direction(d, n, old_index, new_index)

    if info.verbose >= 2:
        print(f"    refract: z_order={obj.z_order}, n_old={old_index:g}, n_new={new_index:g}, "
              f"stack={[e.z_order for e in stack_r]} -> {[e.z_order for e in stack_t]}"
              f"{' (TIR)' if refracted is None else ''}")

    if refracted is None:
        return BounceResult(geometry.reflect(d, n), None,
                            RefractionState(stack_r, old_index, extra), True)
    return BounceResult(refracted, None, RefractionState(stack_t, new_index, extra), True)
