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
Payloads carried along a ray lineage from one bounce to the next.

A payload is one of:

- None: the empty payload. Behaviors that keep no state return None, and
  the tracer never stores an empty payload on a RayNode.
- RefractionState: the refractive medium stack and the current index, used
  by the refract behavior.
- OpaquePayload: a read-only mapping for externally registered behaviors.
  It rides along in RefractionState.extra once the ray has refracted.

A refractive stack is a tuple of RefractionStackEntry sorted by descending
z-order, unique by z-order. Its first entry is the medium the ray is in.
"""

from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional, Tuple, Union


class RefractionStackEntry(NamedTuple):
    """One medium a ray currently occupies."""
    z_order: int
    refractive_index: float


RefractionStack = Tuple[RefractionStackEntry, ...]


class RefractionState(NamedTuple):
    """
    Payload of the refract behavior.

    Attributes:
        stack: Media the ray is in, highest z-order first
        index: Refractive index of the medium the ray is travelling through
        extra: Data of other behaviors carried through refraction
            (see opaque_part and with_opaque)
    """
    stack: RefractionStack
    index: float
    extra: Optional['OpaquePayload'] = None


class OpaquePayload:
    """
    Payload for custom behaviors: an immutable key/value mapping.

    Behaviors return a new OpaquePayload instead of mutating the one they
    receive, so nodes earlier in a lineage keep the state they were created
    with.
    """

    __slots__ = ('_data',)

    def __init__(self, data: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        merged = dict(data or {})
        merged.update(kwargs)
        self._data = MappingProxyType(merged)

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def replace(self, **changes: Any) -> 'OpaquePayload':
        """Copy of this payload with some keys added or replaced."""
        return OpaquePayload(self._data, **changes)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpaquePayload):
            return NotImplemented
        return dict(self._data) == dict(other._data)

    def __repr__(self) -> str:
        return f"OpaquePayload({dict(self._data)!r})"


Payload = Union[None, RefractionState, OpaquePayload]


def is_empty_payload(payload: Payload) -> bool:
    """Whether a payload is the empty variant (None or an empty OpaquePayload)."""
    if payload is None:
        return True
    return isinstance(payload, OpaquePayload) and len(payload) == 0


def opaque_part(payload: Payload) -> Optional[OpaquePayload]:
    """
    The custom-behavior data of a payload, wherever it is held.

    Refraction wraps an incoming OpaquePayload into RefractionState.extra,
    so custom behaviors should read their fields through this function.
    """
    if isinstance(payload, OpaquePayload):
        return payload
    if isinstance(payload, RefractionState):
        return payload.extra
    return None


def with_opaque(payload: Payload, data: Optional[OpaquePayload]) -> Payload:
    """
    Payload with its custom-behavior data replaced, keeping any refraction
    state it holds.
    """
    if isinstance(payload, RefractionState):
        if data is not None and len(data) == 0:
            data = None
        return payload._replace(extra=data)
    return data


def stack_insert(stack: RefractionStack, entry: RefractionStackEntry) -> RefractionStack:
    """
    Insert an entry keeping the stack in descending z-order.

    The entry goes after every entry with a higher z-order. The caller is
    responsible for the entry's z-order not already being on the stack.
    """
    i = 0
    while i < len(stack) and stack[i].z_order > entry.z_order:
        i += 1
    return stack[:i] + (entry,) + stack[i:]


def stack_toggle(stack: RefractionStack, entry: RefractionStackEntry) -> RefractionStack:
    """
    Remove the entry with the same z-order if present, otherwise insert it.

    This is the stack after a ray crosses the boundary of the entry's object.
    """
    for i, existing in enumerate(stack):
        if existing.z_order == entry.z_order:
            return stack[:i] + stack[i + 1:]
    return stack_insert(stack, entry)


def stack_top_index(stack: RefractionStack, ambient: float) -> float:
    """Refractive index of the top entry, or the ambient index if the stack is empty."""
    if not stack:
        return ambient
    return stack[0].refractive_index
