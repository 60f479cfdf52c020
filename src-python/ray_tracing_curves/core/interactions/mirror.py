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
Reflecting behaviors: mirror, single_sided_mirror and partial_mirror.
"""

from .base import BounceInfo, BounceResult, orient_normal, require_args
from ..constants import SINGLE_SIDED_MIRROR
from ..geometry import geometry
from ..payload import Payload


def mirror(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Specular reflection, d' = d - 2(d.n)n.

    The reflected ray satisfies d'.n = -(d.n) and keeps unit length.
    """
    d = info.incoming_direction
    n = orient_normal(info.surface_normal, d)
    return BounceResult(geometry.reflect(d, n), None, payload, True)


def single_sided_mirror(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Mirror that reflects from one side only.

    Takes one argument, +1 or -1, selecting the reflecting side relative to
    the raw surface normal. Rays with sign * (d.n) >= 0 pass straight
    through; the others are reflected. Which side is which depends on how
    the path was drawn, so in practice the sign is toggled until the mirror
    faces the right way.
    """
    obj = info.obj
    require_args(obj, 1, SINGLE_SIDED_MIRROR)
    sign = obj.interaction_args[0]
    if sign not in (1.0, -1.0):
        raise ValueError(
            f"{SINGLE_SIDED_MIRROR} side must be +1 or -1, got {sign:g} "
            f"(object '{obj.get_display_name()}')"
        )

    d = info.incoming_direction
    n = info.surface_normal
    if sign * geometry.dot(d, n) >= 0:
        return BounceResult(d, None, payload, True)
    return BounceResult(geometry.reflect(d, n), None, payload, True)


def partial_mirror(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Beam splitter: the ray continues through the surface and a branch ray
    is reflected from it.

    No intensity is tracked, so the split carries no reflectance or
    transmittance weights. Both rays inherit the incoming payload.
    """
    d = info.incoming_direction
    n = orient_normal(info.surface_normal, d)
    return BounceResult(d, geometry.reflect(d, n), payload, True)
