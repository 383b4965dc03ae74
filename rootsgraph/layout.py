"""Rooted generational tree layout for family members.

The builder reuses the undirected relationship graph from :mod:`rootsgraph.graph`
as its adjacency structure. Because every edge is stored in both directions
with the relation read from each side, a ``parent`` edge from A to B and a
``child`` edge from B to A describe the same link and the walk never has to
care which one was recorded.

Layout rules:

* the root sits at generation 0 with its first spouse and all descendants;
* every placed member then pulls in its parents (one generation up), its
  siblings, any remaining children and finally extended kin (grandparents,
  cousins, ...) at the generation implied by the relation;
* each member is placed at most once, so cycles and multiple-parent
  ambiguity cannot loop, and members with no edge chain to the root never
  appear.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

import networkx as nx

from .graph import build_relationship_graph
from .relations import (
    CHILD_RELATIONS,
    PARENT_RELATIONS,
    SIBLING_RELATIONS,
    SPOUSE_RELATIONS,
    generation_offset,
)
from .schemas import Member, Relationship, TreeNode, TreeStatistics
from .utils import logger


class _TreeWalk:
    def __init__(self, members: Dict[str, Member], graph: nx.MultiDiGraph, infer_siblings: bool) -> None:
        self.members = members
        self.graph = graph
        self.infer_siblings = infer_siblings
        self.placed: Set[str] = set()
        self.nodes: List[TreeNode] = []

    def related(self, member_id: str, relations: Set[str]) -> List[str]:
        """Neighbors of ``member_id`` holding one of ``relations``.

        Sorted by the position of their first matching edge in the input, not
        by when the neighbor first appeared under any relation.
        """
        if member_id not in self.graph:
            return []
        matches = []
        for neighbor, entries in self.graph.adj[member_id].items():
            orders = [data["order"] for data in entries.values() if data.get("relation") in relations]
            if orders:
                matches.append((min(orders), neighbor))
        matches.sort(key=lambda item: item[0])
        return [neighbor for _, neighbor in matches]

    def _new_node(self, member_id: str, generation: int, relation: Optional[str]) -> TreeNode:
        self.placed.add(member_id)
        node = TreeNode(member=self.members[member_id], generation=generation, relation=relation)
        self.nodes.append(node)
        return node

    def _attach_spouse(self, node: TreeNode, prefer: Sequence[str] = ()) -> None:
        spouses = [sid for sid in self.related(node.member_id, SPOUSE_RELATIONS) if sid not in self.placed]
        preferred = [sid for sid in spouses if sid in prefer]
        chosen = preferred or spouses
        if chosen:
            node.spouse = self._new_node(chosen[0], node.generation, "spouse")

    def _attach_children(self, node: TreeNode, candidates: Iterable[str]) -> None:
        for child_id in candidates:
            if child_id not in self.placed:
                node.children.append(self.place(child_id, node.generation + 1, "child"))

    def _open_household(self, member_id: str, generation: int, relation: Optional[str]) -> Tuple[TreeNode, Iterator[str]]:
        node = self._new_node(member_id, generation, relation)
        self._attach_spouse(node)
        candidates = self.related(member_id, CHILD_RELATIONS)
        if node.spouse is not None:
            candidates += self.related(node.spouse.member_id, CHILD_RELATIONS)
        return node, iter(candidates)

    def place(self, member_id: str, generation: int, relation: Optional[str] = None) -> TreeNode:
        """Place a member together with its spouse and all unplaced descendants.

        Depth-first, driven by an explicit stack so long lines of descent do
        not hit the interpreter recursion limit.
        """
        root, pending = self._open_household(member_id, generation, relation)
        stack: List[Tuple[TreeNode, Iterator[str]]] = [(root, pending)]
        while stack:
            node, pending = stack[-1]
            child_id = next((cid for cid in pending if cid not in self.placed), None)
            if child_id is None:
                stack.pop()
                continue
            child, child_pending = self._open_household(child_id, node.generation + 1, "child")
            node.children.append(child)
            stack.append((child, child_pending))
        return root

    def _place_ancestor(self, member_id: str, generation: int, co_parents: Sequence[str]) -> TreeNode:
        node = self._new_node(member_id, generation, "parent")
        self._attach_spouse(node, prefer=co_parents)
        return node

    def _expand(self, node: TreeNode) -> None:
        member_id = node.member_id
        parent_ids = self.related(member_id, PARENT_RELATIONS)
        for parent_id in parent_ids:
            if parent_id not in self.placed:
                node.parents.append(self._place_ancestor(parent_id, node.generation - 1, parent_ids))

        sibling_ids = self.related(member_id, SIBLING_RELATIONS)
        if self.infer_siblings:
            for parent_id in parent_ids:
                sibling_ids += self.related(parent_id, CHILD_RELATIONS)
        for sibling_id in sibling_ids:
            if sibling_id not in self.placed:
                node.siblings.append(self.place(sibling_id, node.generation, "sibling"))

        self._attach_children(node, self.related(member_id, CHILD_RELATIONS))

        for neighbor, entries in self.graph.adj[member_id].items():
            if neighbor in self.placed:
                continue
            relation = str(next(iter(entries.values())).get("relation"))
            node.relatives.append(self.place(neighbor, node.generation + generation_offset(relation), relation))

    def run(self, root_id: str) -> TreeNode:
        root = self.place(root_id, 0)
        index = 0
        while index < len(self.nodes):
            node = self.nodes[index]
            index += 1
            if node.member_id in self.graph:
                self._expand(node)
        return root

    def attach_placeholders(self) -> None:
        for node in list(self.nodes):
            member_id = node.member_id
            if node.spouse is None and not self.related(member_id, SPOUSE_RELATIONS):
                node.spouse = TreeNode.placeholder("spouse", member_id, node.generation)
            if not self.related(member_id, PARENT_RELATIONS):
                node.parents.append(TreeNode.placeholder("parent", member_id, node.generation - 1))
            if not self.related(member_id, CHILD_RELATIONS):
                node.children.append(TreeNode.placeholder("child", member_id, node.generation + 1))


class TreeLayoutBuilder:
    """Build rooted family trees from flat member and relationship lists.

    ``show_placeholders`` adds "add spouse/parent/child" slots wherever a
    member has no such relative recorded. ``infer_siblings`` groups members
    sharing a parent as siblings of each other; when disabled they stay under
    their parent's ``children`` and only explicit sibling edges populate
    ``siblings``.
    """

    def __init__(self, *, show_placeholders: bool = False, infer_siblings: bool = True) -> None:
        self.show_placeholders = show_placeholders
        self.infer_siblings = infer_siblings

    def build(
        self,
        members: Iterable[Member],
        relationships: Iterable[Relationship],
        root_member_id: str,
    ) -> Optional[TreeNode]:
        member_map = {member.id: member for member in members}
        if not member_map:
            logger.debug("No members supplied, nothing to lay out")
            return None
        if root_member_id not in member_map:
            logger.debug("Root member %s not found among %d members", root_member_id, len(member_map))
            return None
        graph = build_relationship_graph(relationships, member_map)
        walk = _TreeWalk(member_map, graph, self.infer_siblings)
        root = walk.run(root_member_id)
        if self.show_placeholders:
            walk.attach_placeholders()
        logger.debug(
            "Placed %d of %d members around root %s",
            len(walk.placed),
            len(member_map),
            root_member_id,
        )
        return root


def build_tree_structure(
    members: Iterable[Member],
    relationships: Iterable[Relationship],
    root_member_id: str,
    *,
    show_placeholders: bool = False,
    infer_siblings: bool = True,
) -> Optional[TreeNode]:
    builder = TreeLayoutBuilder(show_placeholders=show_placeholders, infer_siblings=infer_siblings)
    return builder.build(members, relationships, root_member_id)


def _real_nodes(root_node: TreeNode) -> List[TreeNode]:
    return [node for node in root_node.iter_nodes() if not node.is_placeholder]


def calculate_tree_statistics(members: Sequence[Member], root_node: Optional[TreeNode]) -> TreeStatistics:
    """Count reachable members and the span of generations in the tree.

    Only members placed in the structure are counted; the rest are reported
    as ``disconnected_count``.
    """

    known = {member.id for member in members}
    if root_node is None:
        return TreeStatistics(member_count=0, generation_count=0, disconnected_count=len(known))
    nodes = _real_nodes(root_node)
    reachable = {node.member_id for node in nodes} & known
    generations = [node.generation for node in nodes]
    span = max(generations) - min(generations) + 1 if generations else 0
    return TreeStatistics(
        member_count=len(reachable),
        generation_count=span,
        disconnected_count=len(known - reachable),
    )


def compute_layout(root_node: Optional[TreeNode]) -> Dict[str, Dict[str, int]]:
    """Grid positions per member: ``y`` is the generation, ``x`` the order within it."""

    if root_node is None:
        return {}
    levels: Dict[int, List[str]] = {}
    for node in _real_nodes(root_node):
        levels.setdefault(node.generation, []).append(str(node.member_id))

    layout: Dict[str, Dict[str, int]] = {}
    for level, member_ids in sorted(levels.items()):
        for x, member_id in enumerate(member_ids):
            layout[member_id] = {"x": x, "y": level}
    return layout


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_member_count(count: int) -> str:
    return _plural(count, "Member")


def format_generation_count(count: int) -> str:
    return _plural(count, "Generation")


__all__ = [
    "TreeLayoutBuilder",
    "build_tree_structure",
    "calculate_tree_statistics",
    "compute_layout",
    "format_generation_count",
    "format_member_count",
]
