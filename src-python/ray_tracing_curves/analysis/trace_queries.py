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

Trace Result Queries

Helpers for pulling data out of finished traces, typically to read what
arrived at a detector:

    results = Tracer(scene).run()
    hits = get_trace_data_by_tag(results, 'screen')
    ys = [node.launch.y for node in hits]

All queries walk child branches as well as the main lineage.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..core.ray import RayNode, RayTrace, TerminationCause


TraceResults = Union[RayTrace, Mapping[Any, RayTrace], Iterable[RayTrace]]


def _iter_results(results: TraceResults) -> Iterable[RayTrace]:
    if isinstance(results, RayTrace):
        return [results]
    if isinstance(results, Mapping):
        return results.values()
    return results


def get_trace_data_by_tag(
    results: TraceResults,
    tag: str,
    ray_tag: Optional[str] = None
) -> List[RayNode]:
    """
    Nodes created by striking objects that carry a tag.

    Finding nothing is not an error; the result is then empty.

    Args:
        results: A RayTrace, a {source: RayTrace} mapping (as returned by
            Tracer.run), or an iterable of RayTraces
        tag: Tag the struck object must carry
        ray_tag: If given, only traces launched by a ray carrying this tag
            are searched

    Returns:
        Matching nodes, per trace in trajectory order, with each child
        branch's nodes following the node that spawned it.
    """
    data: List[RayNode] = []
    for trace in _iter_results(results):
        if ray_tag is not None and ray_tag not in trace.tags:
            continue
        data.extend(trace.get_nodes_by_tag(tag))
    return data


def collect_terminations(trace: RayTrace) -> Dict[TerminationCause, int]:
    """Number of lineages (main and branches) ending with each cause."""
    counts: Dict[TerminationCause, int] = {}
    for t in trace.iter_traces():
        if t.termination is not None:
            counts[t.termination] = counts.get(t.termination, 0) + 1
    return counts


def trace_to_records(trace: RayTrace) -> List[Dict[str, Any]]:
    """
    Flatten a trace tree into plain dicts, one per node.

    Each record is RayNode.to_dict() plus:
    - lineage: index of the lineage the node belongs to (0 for the main
      lineage, then branches in depth-first order)
    - parent_lineage: index of the lineage that spawned it (None for 0)
    - step: position of the node within its lineage
    - termination: how the node's lineage ended
    """
    records: List[Dict[str, Any]] = []
    counter = [0]

    def walk(t: RayTrace, parent: Optional[int]) -> None:
        lineage = counter[0]
        counter[0] += 1
        cause = t.termination.value if t.termination is not None else None
        for step, node in enumerate(t.nodes):
            record = node.to_dict()
            record.update({
                'lineage': lineage,
                'parent_lineage': parent,
                'step': step,
                'termination': cause,
            })
            records.append(record)
            if node.child is not None:
                walk(node.child, lineage)

    walk(trace, None)
    return records
