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

from __future__ import annotations

import uuid as _uuid_mod
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, TYPE_CHECKING

from .geometry import Point
from .payload import Payload

if TYPE_CHECKING:
    from .scene import SceneObject


class TerminationCause(Enum):
    """Why a ray lineage stopped."""
    ABSORBED = 'absorbed'
    DEPTH_EXCEEDED = 'depth_exceeded'
    NO_INTERSECTION = 'no_intersection'


class RayNode:
    """
    One point of a ray's trajectory.

    The first node of a RayTrace is the launch point. Every later node sits
    on the surface of the object struck to create it, and points in the
    direction the ray leaves that surface.

    Attributes:
        launch (Point): Launch point of this leg of the ray
        direction (Point): Unit direction of this leg
        bounce_depth (int): Number of bounces since the lineage root
        child_depth (int): Number of branchings since the lineage root
        payload: Carried interaction state (None if empty)
        tags (frozenset): Tags of the object struck to create this node
        child (RayTrace or None): Branch lineage spawned at this node
        struck_object (SceneObject or None): Object struck to create this
            node (None for the launch node)
        interaction_type (str or None): Interaction applied at this node
        uuid (str): Unique identifier of this node (auto-generated)
    """

    def __init__(
        self,
        launch: Point,
        direction: Point,
        bounce_depth: int = 0,
        child_depth: int = 0,
        payload: Payload = None,
        tags: FrozenSet[str] = frozenset(),
        struck_object: Optional['SceneObject'] = None,
        interaction_type: Optional[str] = None
    ) -> None:
        self.launch: Point = launch
        self.direction: Point = direction
        self.bounce_depth: int = bounce_depth
        self.child_depth: int = child_depth
        self.payload: Payload = payload
        self.tags: FrozenSet[str] = frozenset(tags)
        self.child: Optional[RayTrace] = None
        self.struck_object: Optional['SceneObject'] = struck_object
        self.interaction_type: Optional[str] = interaction_type
        self.uuid: str = str(_uuid_mod.uuid4())

    @property
    def has_child(self) -> bool:
        return self.child is not None

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict view of this node (the child trace is not included)."""
        return {
            'uuid': self.uuid,
            'x': self.launch.x,
            'y': self.launch.y,
            'dx': self.direction.x,
            'dy': self.direction.y,
            'bounce_depth': self.bounce_depth,
            'child_depth': self.child_depth,
            'tags': sorted(self.tags),
            'interaction_type': self.interaction_type,
            'object': (self.struck_object.get_display_name()
                       if self.struck_object is not None else None),
            'has_child': self.has_child,
        }

    def __repr__(self) -> str:
        return (f"RayNode(launch=({self.launch.x:.6g}, {self.launch.y:.6g}), "
                f"direction=({self.direction.x:.4f}, {self.direction.y:.4f}), "
                f"bounce_depth={self.bounce_depth}, child_depth={self.child_depth}, "
                f"interaction={self.interaction_type})")


class RayTrace:
    """
    A ray lineage: the ordered nodes from launch to the terminal node.

    Each node owns at most one child RayTrace, so a lineage and its branches
    form a tree. Traces are never shared between parents.

    Attributes:
        nodes (list): RayNodes in trajectory order
        tags (frozenset): Tags of the ray source that launched the lineage
        termination (TerminationCause or None): Why the lineage stopped
            (None while it is still being traced)
    """

    def __init__(
        self,
        nodes: Optional[List[RayNode]] = None,
        tags: FrozenSet[str] = frozenset()
    ) -> None:
        self.nodes: List[RayNode] = list(nodes) if nodes else []
        self.tags: FrozenSet[str] = frozenset(tags)
        self.termination: Optional[TerminationCause] = None

    def append(self, node: RayNode) -> None:
        self.nodes.append(node)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[RayNode]:
        return iter(self.nodes)

    def __getitem__(self, index: int) -> RayNode:
        return self.nodes[index]

    @property
    def root(self) -> RayNode:
        return self.nodes[0]

    @property
    def last(self) -> RayNode:
        return self.nodes[-1]

    # =========================================================================
    # Traversal
    # =========================================================================

    def iter_nodes(self, recursive: bool = True) -> Iterator[RayNode]:
        """
        Iterate over nodes in trajectory order.

        With recursive=True, the nodes of each child trace are yielded right
        after the node that owns it (depth-first).
        """
        for node in self.nodes:
            yield node
            if recursive and node.child is not None:
                yield from node.child.iter_nodes(recursive=True)

    def iter_traces(self) -> Iterator['RayTrace']:
        """This trace followed by every descendant trace, depth-first."""
        yield self
        for node in self.nodes:
            if node.child is not None:
                yield from node.child.iter_traces()

    def get_nodes_by_tag(self, tag: str) -> List[RayNode]:
        """
        All nodes created by striking an object carrying the tag, including
        nodes within child branches. An empty list if there are none.
        """
        return [n for n in self.iter_nodes(recursive=True) if tag in n.tags]

    def get_nodes_by_type(self, interaction_type: str) -> List[RayNode]:
        return [n for n in self.iter_nodes(recursive=True)
                if n.interaction_type == interaction_type]

    def points(self) -> List[Point]:
        """Launch points of this lineage's own nodes (branches excluded)."""
        return [n.launch for n in self.nodes]

    @property
    def max_child_depth(self) -> int:
        """Deepest child_depth reached anywhere in the tree."""
        return max((n.child_depth for n in self.iter_nodes(recursive=True)), default=0)

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_statistics(self) -> Dict[str, Any]:
        """
        Summary statistics for the trace tree.

        Returns:
            Dict with keys:
            - node_count: total nodes, branches included
            - trace_count: number of lineages (this one plus all branches)
            - branch_count: number of nodes owning a child trace
            - max_bounce_depth: deepest bounce_depth in any lineage
            - max_child_depth: deepest child_depth in any lineage
            - terminations: dict mapping termination cause value -> count
            - interaction_counts: dict mapping interaction type -> count
        """
        node_count = 0
        branch_count = 0
        max_bounce = 0
        interaction_counts: Dict[str, int] = {}
        for node in self.iter_nodes(recursive=True):
            node_count += 1
            if node.child is not None:
                branch_count += 1
            max_bounce = max(max_bounce, node.bounce_depth)
            if node.interaction_type is not None:
                interaction_counts[node.interaction_type] = \
                    interaction_counts.get(node.interaction_type, 0) + 1

        terminations: Dict[str, int] = {}
        traces = list(self.iter_traces())
        for trace in traces:
            key = trace.termination.value if trace.termination else 'active'
            terminations[key] = terminations.get(key, 0) + 1

        return {
            'node_count': node_count,
            'trace_count': len(traces),
            'branch_count': branch_count,
            'max_bounce_depth': max_bounce,
            'max_child_depth': self.max_child_depth,
            'terminations': terminations,
            'interaction_counts': interaction_counts,
        }

    # =========================================================================
    # NetworkX export (optional dependency)
    # =========================================================================

    def to_networkx(self) -> Any:
        """
        Export the trace tree to a NetworkX DiGraph.

        Requires networkx to be installed. Each node is a RayNode uuid with
        'x', 'y', 'interaction' and 'tags' as node attributes. Edges go from
        each node to the next node of its lineage (kind='next') and from a
        branching node to the first node of its child trace (kind='branch').

        Returns:
            nx.DiGraph

        Raises:
            ImportError: if networkx is not installed
        """
        import networkx as nx
        G = nx.DiGraph()
        for trace in self.iter_traces():
            prev: Optional[RayNode] = None
            for node in trace.nodes:
                G.add_node(node.uuid, x=node.launch.x, y=node.launch.y,
                           interaction=node.interaction_type or 'source',
                           tags=sorted(node.tags))
                if prev is not None:
                    G.add_edge(prev.uuid, node.uuid, kind='next')
                prev = node
        for node in self.iter_nodes(recursive=True):
            if node.child is not None and node.child.nodes:
                G.add_edge(node.uuid, node.child.root.uuid, kind='branch')
        return G

    def __repr__(self) -> str:
        cause = self.termination.value if self.termination else 'active'
        return f"RayTrace(nodes={len(self.nodes)}, termination={cause})"
