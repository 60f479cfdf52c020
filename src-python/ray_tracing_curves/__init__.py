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

Ray Tracing Curves
==================

Non-sequential 2D ray tracing against scenes of parametric curves
(straight lines, quadratic and cubic Bezier segments, elliptical arcs).

Main modules:
- core: Tracing engine (segments, scene model, interaction behaviors, tracer)
- analysis: Queries over trace results and Shapely-based object geometry

Quick start:
    from ray_tracing_curves.core.scene import Scene, SceneObject, Subpath
    from ray_tracing_curves.core.segments import BezierSegment
    from ray_tracing_curves.core.tracer import Tracer
"""

__version__ = "0.1.0"

# Convenience imports for common usage
from .core.scene import Scene, SceneObject, Subpath, RaySource, TraceSettings
from .core.segments import BezierSegment, ArcSegment
from .core.tracer import Tracer
from .core.ray import RayNode, RayTrace, TerminationCause

__all__ = [
    'Scene',
    'SceneObject',
    'Subpath',
    'RaySource',
    'TraceSettings',
    'BezierSegment',
    'ArcSegment',
    'Tracer',
    'RayNode',
    'RayTrace',
    'TerminationCause',
    '__version__',
]
