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

Analysis utilities: queries over finished traces, and Shapely conversions
of scene objects (areas, centroids, point containment).
"""

from .trace_queries import (
    get_trace_data_by_tag,
    collect_terminations,
    trace_to_records,
)
from .object_geometry import (
    subpath_to_polygon,
    subpath_to_linestring,
    object_area,
    object_to_geometry,
    get_path_centroid,
    get_area_centroid,
    point_in_object,
)

__all__ = [
    'get_trace_data_by_tag',
    'collect_terminations',
    'trace_to_records',
    'subpath_to_polygon',
    'subpath_to_linestring',
    'object_area',
    'object_to_geometry',
    'get_path_centroid',
    'get_area_centroid',
    'point_in_object',
]
