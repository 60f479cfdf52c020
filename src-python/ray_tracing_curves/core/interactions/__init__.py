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

from .base import BounceInfo, BounceResult, InteractionBehavior, orient_normal, require_args
from .absorber import absorber
from .transparent import transparent
from .mirror import mirror, single_sided_mirror, partial_mirror
from .thin_lens import thin_lens
from .refract import refract, snell_direction
from .registry import BUILTIN_BEHAVIORS, InteractionRegistry, default_registry

__all__ = ['BounceInfo', 'BounceResult', 'InteractionBehavior', 'orient_normal', 'require_args', 'absorber', 'transparent', 'mirror', 'single_sided_mirror', 'partial_mirror', 'thin_lens', 'refract', 'snell_direction', 'BUILTIN_BEHAVIORS', 'InteractionRegistry', 'default_registry']
