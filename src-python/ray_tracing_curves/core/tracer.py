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

import math
from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING

# Handle both relative imports (when used as a module) and absolute imports (when run as script)
if __name__ == "__main__":
    from ray_tracing_curves.core.geometry import Point, PointLike, as_point, geometry
    from ray_tracing_curves.core.interactions import BounceInfo, InteractionRegistry, default_registry
    from ray_tracing_curves.core.payload import Payload, is_empty_payload
    from ray_tracing_curves.core.ray import RayNode, RayTrace, TerminationCause
    from ray_tracing_curves.core.scene import Hit, RaySource, TagsLike, TraceSettings, parse_tags
else:
    from .geometry import Point, PointLike, as_point, geometry
    from .interactions import BounceInfo, InteractionRegistry, default_registry
    from .payload import Payload, is_empty_payload
    from .ray import RayNode, RayTrace, TerminationCause
    from .scene import Hit, RaySource, TagsLike, TraceSettings, parse_tags

if TYPE_CHECKING:
    from .scene import Scene, SceneObject


class Tracer:
    """
    Non-sequential ray tracer over a scene of curve-bounded objects.

    Each call to trace() follows one ray lineage from its launch point. At
    every step the nearest intersection over all interacting objects is
    found, the struck object's interaction behavior decides the outgoing
    direction, and a new RayNode is appended. A behavior that returns a
    branch direction spawns a child lineage, which is traced to completion
    (depth-first) before the parent lineage continues.

    A lineage ends when:
    - the ray is absorbed (TerminationCause.ABSORBED)
    - the ray leaves the scene without striking anything
      (TerminationCause.NO_INTERSECTION)
    - a node's bounce_depth exceeds max_tracing_depth, or its child_depth
      exceeds max_child_ray_depth (TerminationCause.DEPTH_EXCEEDED)

    The tracer holds no state between calls, and never modifies the scene,
    so separate trace() calls may run in parallel over an unchanged scene.

    Attributes:
        scene (Scene): The scene to trace
        registry (InteractionRegistry): Behaviors by interaction type name
        settings (TraceSettings): Settings used for tracing (the scene's own
            settings unless overridden)
        verbose (int): Verbosity level
    """

    def __init__(
        self,
        scene: 'Scene',
        registry: Optional[InteractionRegistry] = None,
        settings: Optional[TraceSettings] = None,
        verbose: int = 0
    ) -> None:
        """
        Initialize the tracer.

        Args:
            scene (Scene): The scene to trace
            registry (InteractionRegistry): Behavior registry (default: a new
                registry of the built-in behaviors)
            settings (TraceSettings): Settings override (default: scene.settings)
            verbose (int): Verbosity level (default: 0)
                0 = silent (no debug output)
                1 = verbose (show one line per bounce)
                2 = very verbose/debug (show per-object intersection tests)
        """
        self.scene: 'Scene' = scene
        self.registry: InteractionRegistry = registry if registry is not None else default_registry()
        self.settings: TraceSettings = settings if settings is not None else scene.settings
        self.verbose: int = verbose

    # =========================================================================
    # Public API
    # =========================================================================

    def trace(
        self,
        origin: PointLike,
        direction: PointLike,
        tags: TagsLike = None,
        payload: Payload = None
    ) -> RayTrace:
        """
        Trace one ray lineage.

        Args:
            origin: Launch point
            direction: Launch direction (normalized here)
            tags: Tags of the ray, stored on the returned RayTrace
            payload: Initial payload (default: empty)

        Returns:
            RayTrace: the lineage, with its child branches attached

        Raises:
            ValueError: If the direction has zero length, or a struck object
                has an unknown interaction type or malformed arguments.
        """
        root = RayNode(
            launch=as_point(origin),
            direction=geometry.normalize_vec(as_point(direction)),
            payload=None if is_empty_payload(payload) else payload,
        )
        if self.verbose >= 1:
            print(f"\n### TRACER launching ray from ({root.launch.x:.4f}, {root.launch.y:.4f}) "
                  f"dir=({root.direction.x:.4f}, {root.direction.y:.4f})")
        return self._trace_from(root, parse_tags(tags))

    def trace_source(self, source: RaySource) -> RayTrace:
        """Trace the lineage launched by a RaySource."""
        return self.trace(source.origin, source.direction, tags=source.tags)

    def run(self) -> Dict[RaySource, RayTrace]:
        """
        Trace every ray source of the scene.

        Returns:
            dict: RaySource -> RayTrace, in the order the sources were added
        """
        results: Dict[RaySource, RayTrace] = {}
        for source in self.scene.ray_sources:
            results[source] = self.trace_source(source)
        if self.verbose >= 1:
            print(f"\n### TRACER finished {len(results)} ray source(s)")
        return results

    def trace_all(self, launches: Iterable[Tuple[PointLike, PointLike]]) -> List[RayTrace]:
        """Trace one lineage per (origin, direction) pair."""
        return [self.trace(origin, direction) for origin, direction in launches]

    # =========================================================================
    # Tracing loop
    # =========================================================================

    def _trace_from(self, start: RayNode, tags) -> RayTrace:
        """Follow a lineage from its first node until it terminates."""
        settings = self.settings
        trace = RayTrace([start], tags=tags)
        node = start

        while True:
            if (node.bounce_depth > settings.max_tracing_depth
                    or node.child_depth > settings.max_child_ray_depth):
                trace.termination = TerminationCause.DEPTH_EXCEEDED
                break

            found = self._find_nearest_hit(node)
            if found is None:
                trace.termination = TerminationCause.NO_INTERSECTION
                break
            obj, hit = found

            next_node, branch_node, continue_tracing = self._bounce(node, obj, hit)
            if branch_node is not None:
                if self.verbose >= 1:
                    print(f"  branch at ({hit.point.x:.4f}, {hit.point.y:.4f}), "
                          f"child_depth={branch_node.child_depth}")
                next_node.child = self._trace_from(branch_node, tags)

            trace.append(next_node)
            node = next_node

            if not continue_tracing:
                trace.termination = TerminationCause.ABSORBED
                break

        if self.verbose >= 1:
            print(f"  lineage ended: {trace.termination.value} after {len(trace)} node(s)")
        return trace

    def _find_nearest_hit(self, node: RayNode) -> Optional[Tuple['SceneObject', Hit]]:
        """
        Nearest intersection of the node's outgoing ray over all interacting
        objects. Ties keep the object enumerated first.
        """
        min_d = self.settings.min_bounce_distance
        best: Optional[Tuple['SceneObject', Hit]] = None
        best_distance = math.inf

        for obj in self.scene.interacting_objects:
            hit = obj.check_ray_intersects(node.launch, node.direction, min_d)
            if self.verbose >= 2:
                status = f"hit at d={hit.distance:.6g}" if hit is not None else "no hit"
                print(f"    test {obj.get_display_name()}: {status}")
            if hit is not None and hit.distance < best_distance:
                best_distance = hit.distance
                best = (obj, hit)
        return best

    def _bounce(
        self,
        prev: RayNode,
        obj: 'SceneObject',
        hit: Hit
    ) -> Tuple[RayNode, Optional[RayNode], bool]:
        """
        Resolve one bounce with the struck object's behavior.

        Returns:
            (next node, first node of the branch lineage or None, continue flag)
        """
        behavior = self.registry.get(obj.interaction_type)
        info = BounceInfo(
            incoming_launch=prev.launch,
            incoming_direction=prev.direction,
            surface_intersection=hit.point,
            surface_normal=hit.normal,
            obj=obj,
            scene=self.scene,
            settings=self.settings,
            verbose=self.verbose,
        )
        result = behavior(info, prev.payload)
        payload = None if is_empty_payload(result.payload) else result.payload

        if self.verbose >= 1:
            print(f"  bounce {prev.bounce_depth + 1}: {obj.interaction_type} "
                  f"'{obj.get_display_name()}' at ({hit.point.x:.4f}, {hit.point.y:.4f})")

        child_depth = prev.child_depth
        if result.branch_direction is not None:
            child_depth += 1

        next_node = RayNode(
            launch=hit.point,
            direction=geometry.normalize_vec(result.direction),
            bounce_depth=prev.bounce_depth + 1,
            child_depth=child_depth,
            payload=payload,
            tags=obj.tags,
            struck_object=obj,
            interaction_type=obj.interaction_type,
        )

        branch_node: Optional[RayNode] = None
        if result.branch_direction is not None:
            branch_node = RayNode(
                launch=hit.point,
                direction=geometry.normalize_vec(result.branch_direction),
                bounce_depth=prev.bounce_depth + 1,
                child_depth=child_depth,
                payload=payload,
                tags=obj.tags,
                struck_object=obj,
                interaction_type=obj.interaction_type,
            )
        return next_node, branch_node, result.continue_tracing


# Example usage and testing
if __name__ == "__main__":
    from ray_tracing_curves.core.scene import Scene, SceneObject, Subpath
    from ray_tracing_curves.core.segments import BezierSegment

    scene = Scene(name="Mirror and absorber")
    scene.add_object(SceneObject(
        [Subpath([BezierSegment.line((5, -2), (5, 2))])],
        interaction_type='mirror', name='fold'))
    scene.add_object(SceneObject(
        [Subpath([BezierSegment.line((-5, -2), (-5, 2))])],
        interaction_type='absorber', tags='screen', name='screen'))

    tracer = Tracer(scene, verbose=1)
    result = tracer.trace((0, 0), (1, 0.1))
    print(result)
    for n in result:
        print(f"  {n}")
