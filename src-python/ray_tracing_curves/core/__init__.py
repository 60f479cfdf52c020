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

from .geometry import geometry, Point, Geometry, as_point
from . import constants
from .poly_roots import find_poly_roots, evaluate_poly
from .segments import Segment, BezierSegment, ArcSegment
from .payload import RefractionStackEntry, RefractionState, OpaquePayload, opaque_part, with_opaque
from .ray import RayNode, RayTrace, TerminationCause
from .scene import Scene, SceneObject, Subpath, RaySource, TraceSettings, Hit, intersect_object
from .interactions import InteractionRegistry, default_registry
from .tracer import Tracer

__all__ = [
    'geometry', 'Point', 'Geometry', 'as_point',
    'constants',
    'find_poly_roots', 'evaluate_poly',
    'Segment', 'BezierSegment', 'ArcSegment',
    'RefractionStackEntry', 'RefractionState', 'OpaquePayload', 'opaque_part', 'with_opaque',
    'RayNode', 'RayTrace', 'TerminationCause',
    'Scene', 'SceneObject', 'Subpath', 'RaySource', 'TraceSettings', 'Hit', 'intersect_object',
    'InteractionRegistry', 'default_registry',
    'Tracer'
]
