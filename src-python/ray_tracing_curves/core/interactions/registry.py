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
Name -> behavior lookup used by the tracer.

The registry is populated with the built-in behaviors and may be extended
with custom ones. Registering a name that already exists replaces the
earlier behavior, built-ins included:

    registry = default_registry()
    registry.register('mirror', my_lossy_mirror)
"""

from typing import Dict, List, Optional

from .base import InteractionBehavior
from .absorber import absorber
from .mirror import mirror, partial_mirror, single_sided_mirror
from .refract import refract
from .thin_lens import thin_lens
from .transparent import transparent
from .. import constants


BUILTIN_BEHAVIORS: Dict[str, InteractionBehavior] = {
    constants.ABSORBER: absorber,
    constants.TRANSPARENT: transparent,
    constants.MIRROR: mirror,
    constants.SINGLE_SIDED_MIRROR: single_sided_mirror,
    constants.PARTIAL_MIRROR: partial_mirror,
    constants.THIN_LENS: thin_lens,
    constants.REFRACT: refract,
}


class InteractionRegistry:
    """
    Mapping of interaction-type names to behaviors.

    Attributes:
        _behaviors (dict): Registered behaviors by name
    """

    def __init__(self, behaviors: Optional[Dict[str, InteractionBehavior]] = None) -> None:
        self._behaviors: Dict[str, InteractionBehavior] = dict(behaviors or {})

    def register(self, name: str, behavior: InteractionBehavior) -> None:
        """
        Register a behavior under a name, replacing any earlier one.

        Raises:
            ValueError: If the behavior is not callable or the name is empty.
        """
        if not name:
            raise ValueError("Interaction type name must be a non-empty string")
        if not callable(behavior):
            raise ValueError(f"Behavior registered for '{name}' is not callable: {behavior!r}")
        self._behaviors[name] = behavior

    def unregister(self, name: str) -> None:
        """Remove a behavior (no error if absent)."""
        self._behaviors.pop(name, None)

    def get(self, name: str) -> InteractionBehavior:
        """
        Look up a behavior by name.

        Raises:
            ValueError: If no behavior is registered under the name.
        """
        try:
            return self._behaviors[name]
        except KeyError:
            raise ValueError(
                f"Unknown interaction type '{name}'. "
                f"Registered types: {', '.join(self.names())}"
            ) from None

    def names(self) -> List[str]:
        return sorted(self._behaviors)

    def copy(self) -> 'InteractionRegistry':
        return InteractionRegistry(self._behaviors)

    def __contains__(self, name: object) -> bool:
        return name in self._behaviors

    def __len__(self) -> int:
        return len(self._behaviors)

    def __repr__(self) -> str:
        return f"InteractionRegistry({self.names()})"


def default_registry() -> InteractionRegistry:
    """A new registry holding every built-in behavior."""
    return InteractionRegistry(BUILTIN_BEHAVIORS)
