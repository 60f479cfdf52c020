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

from .base import BounceInfo, BounceResult, require_args
from ..constants import THIN_LENS
from ..geometry import geometry
from ..payload import Payload


def thin_lens(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Ideal thin lens, applied as an angular kick.

    The lens is the object's single straight segment; its midpoint is the
    optical center. A ray striking the lens at distance D from the center is
    rotated by |D / f|. The rotation bends the ray towards the optical axis
    for a positive focal length f and away from it for a negative one.

    Args:
        info: Bounce description. The object must carry exactly one argument,
            the focal length.
        payload: Carried payload, passed through unchanged.

    Raises:
        ValueError: If the object is not a single straight segment, or the
            argument count is wrong.
    """
    obj = info.obj
    if not obj.is_single_straight_segment():
        raise ValueError(
            f"{THIN_LENS} must only be applied to a single straight segment "
            f"(object '{obj.get_display_name()}')"
        )
    require_args(obj, 1, THIN_LENS)
    focal_length = obj.interaction_args[0]

    segment = obj.subpaths[0].segments[0]
    center = geometry.midpoint(segment.start_point, segment.end_point)
    offset = geometry.sub(info.surface_intersection, center)
    d = info.incoming_direction

    theta = abs(geometry.length(offset) / focal_length)
    if geometry.cross(offset, d) * focal_length < 0:
        theta = -theta

    if info.verbose >= 2:
        print(f"    thin_lens: f={focal_length:g}, offset={geometry.length(offset):.6g}, "
              f"kick={theta:.6g} rad")

    return BounceResult(geometry.rotate_vec(d, theta), None, payload, True)
