"""Relationship graph construction and shortest relationship paths."""

from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Mapping, Optional

import networkx as nx

from .relations import format_relationship_type, inverse_relationship
from .schemas import Member, PathResult, PathStep, Relationship
from .utils import logger

PATH_SEPARATOR = " → "


def build_relationship_graph(
    relationships: Iterable[Relationship],
    members: Optional[Mapping[str, Member]] = None,
) -> nx.MultiDiGraph:
    """Build a per-call adjacency graph with one entry per edge direction.

    Every stored edge is inserted twice. The ``relation`` attribute of an
    entry ``u -> v`` says what ``v`` is to ``u``: a stored ``parent`` edge
    reads ``child`` forward and ``parent`` in reverse. ``order`` is the
    position of the edge in ``relationships``. When ``members`` is
    given, edges touching unknown member ids are skipped.
    """

    graph = nx.MultiDiGraph()
    skipped = 0
    for order, rel in enumerate(relationships):
        if members is not None and (rel.from_user_id not in members or rel.to_user_id not in members):
            skipped += 1
            logger.debug(
                "Skipping relationship %s: %s -> %s references an unknown member",
                rel.id,
                rel.from_user_id,
                rel.to_user_id,
            )
            continue
        shared = {
            "relationship_id": rel.id,
            "relationship_type": rel.relationship_type,
            "specific_label": rel.specific_label,
            "order": order,
        }
        graph.add_edge(
            rel.from_user_id,
            rel.to_user_id,
            relation=inverse_relationship(rel.relationship_type),
            direction="forward",
            **shared,
        )
        graph.add_edge(
            rel.to_user_id,
            rel.from_user_id,
            relation=rel.relationship_type,
            direction="reverse",
            **shared,
        )
    if skipped:
        logger.debug("Skipped %d dangling relationship(s)", skipped)
    return graph


def first_edge(graph: nx.MultiDiGraph, u: str, v: str) -> Dict[str, object]:
    """Return the attributes of the earliest inserted entry ``u -> v``."""

    return next(iter(graph[u][v].values()))


def step_label(edge: Mapping[str, object]) -> str:
    label = edge.get("specific_label")
    if label:
        return str(label)
    return format_relationship_type(str(edge.get("relation")))


def _reconstruct(predecessors: Mapping[str, Optional[str]], target_id: str) -> List[str]:
    ids: List[str] = []
    current: Optional[str] = target_id
    while current is not None:
        ids.append(current)
        current = predecessors[current]
    ids.reverse()
    return ids


def _describe_path(path_ids: List[str], graph: nx.MultiDiGraph, members: Mapping[str, Member]) -> PathResult:
    steps: List[PathStep] = []
    for from_id, to_id in zip(path_ids, path_ids[1:]):
        member = members.get(to_id)
        if member is None or from_id not in members:
            continue
        steps.append(PathStep(member=member, relationship=step_label(first_edge(graph, from_id, to_id))))
    description = PATH_SEPARATOR.join(f"{step.member.full_name} ({step.relationship})" for step in steps)
    return PathResult(connected=True, path=steps, description=description or "Connected")


def find_relationship_path(
    start_id: str,
    target_id: str,
    relationships: Iterable[Relationship],
    all_members: Iterable[Member],
) -> PathResult:
    """Find the shortest chain of relationships from ``start_id`` to ``target_id``.

    Breadth-first search over the undirected view of the relationship edges.
    Ties between equally short paths go to the neighbor inserted first.
    Unknown ids and disconnected members produce ``connected=False``.
    """

    if start_id == target_id:
        return PathResult(connected=True, path=[], description="Same person")

    members = {member.id: member for member in all_members}
    graph = build_relationship_graph(relationships, members)
    if start_id not in graph or target_id not in graph:
        return PathResult(connected=False, path=[], description="Not connected")

    predecessors: Dict[str, Optional[str]] = {start_id: None}
    queue: deque[str] = deque([start_id])
    while queue:
        current = queue.popleft()
        for neighbor in graph.successors(current):
            if neighbor in predecessors:
                continue
            predecessors[neighbor] = current
            if neighbor == target_id:
                path_ids = _reconstruct(predecessors, target_id)
                logger.debug("Path %s -> %s found with %d hop(s)", start_id, target_id, len(path_ids) - 1)
                return _describe_path(path_ids, graph, members)
            queue.append(neighbor)

    return PathResult(connected=False, path=[], description="Not connected")


__all__ = [
    "PATH_SEPARATOR",
    "build_relationship_graph",
    "find_relationship_path",
    "first_edge",
    "step_label",
]
