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
Constants used throughout the ray tracing engine.

These are the default values of the tracing settings (see TraceSettings in
scene.py), kept here so that segments, interactions and the tracer can all
import them without circular dependencies.
"""

# Refractive index of the medium surrounding every refractive object
AMBIENT_REFRACTIVE_INDEX = 1.0

# Minimum distance along a ray for an intersection to count as a bounce.
# Excludes the surface the ray has just left.
MIN_BOUNCE_DISTANCE = 1e-4

# Maximum number of bounces computed per ray lineage
MAX_TRACING_DEPTH = 50

# Maximum number of nested child rays (branches) per lineage
MAX_CHILD_RAY_DEPTH = 10

# Interval width at which the bounded root finder stops bisecting.
# Far below double precision, so bisection runs until the midpoint stops moving.
ROOT_BISECTION_TOLERANCE = 1e-40

# Crossing-parity containment: crossings closer than this (relative to their
# distance) are treated as one ambiguous event, e.g. a ray through a vertex
# shared by two segments or tangent to a curve. The test is then repeated
# with the ray turned by PARITY_RETRY_ANGLE radians, up to PARITY_MAX_RETRIES
# times.
CROSSING_MERGE_TOLERANCE = 1e-9
PARITY_RETRY_ANGLE = 1e-3
PARITY_MAX_RETRIES = 8

# Names of the built-in interaction types
ABSORBER = 'absorber'
TRANSPARENT = 'transparent'
MIRROR = 'mirror'
SINGLE_SIDED_MIRROR = 'single_sided_mirror'
PARTIAL_MIRROR = 'partial_mirror'
THIN_LENS = 'thin_lens'
REFRACT = 'refract'
