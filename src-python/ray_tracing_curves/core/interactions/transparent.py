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

from .base import BounceInfo, BounceResult
from ..payload import Payload


def transparent(info: BounceInfo, payload: Payload) -> BounceResult:
    """
    Let the ray through untouched.

    The ray still gets a node at the surface, tagged with the object's tags,
    so transparent objects work as detectors for tag queries.
    """
    return BounceResult(info.incoming_direction, None, payload, True)
