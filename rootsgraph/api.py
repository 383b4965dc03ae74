"""High-level API helpers for rootsgraph."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .layout import TreeLayoutBuilder, calculate_tree_statistics, compute_layout
from .relations import is_known_type
from .schemas import FamilyData, Member, TreeNode, TreeStatistics
from .utils import logger


@dataclass
class TreeView:
    """Return value for :func:`explore`. Holds tree + stats + layout."""

    root: Optional[TreeNode]
    statistics: TreeStatistics
    layout: Dict[str, Dict[str, int]]


def load_family(path: str | Path) -> FamilyData:
    """Read a ``{"members": [...], "relationships": [...]}`` JSON document."""

    data_path = Path(path)
    if not data_path.exists():
        raise FileNotFoundError(f"Family data file not found: {data_path}")
    with data_path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    if not isinstance(payload, dict):
        raise ValueError(f"{data_path} must contain a JSON object with members and relationships")
    family = FamilyData.from_dict(payload)
    logger.debug(
        "Loaded %d members and %d relationships from %s",
        len(family.members),
        len(family.relationships),
        data_path,
    )
    return family


def search_members(query: str, members: Iterable[Member]) -> List[str]:
    """Ids of members whose first or last name contains ``query`` (case-insensitive)."""

    if not query.strip():
        return []
    needle = query.lower()
    return [
        member.id
        for member in members
        if needle in member.first_name.lower() or needle in member.last_name.lower()
    ]


def validate_family(family: FamilyData) -> List[str]:
    """Return human-readable problems found in the member/relationship lists."""

    problems: List[str] = []
    counts = Counter(member.id for member in family.members)
    for member_id, count in counts.items():
        if count > 1:
            problems.append(f"Duplicate member id {member_id} ({count} records)")
    known = set(counts)
    for rel in family.relationships:
        missing = [uid for uid in (rel.from_user_id, rel.to_user_id) if uid not in known]
        if missing:
            problems.append(f"Relationship {rel.id} references unknown member(s): {', '.join(missing)}")
        if rel.from_user_id == rel.to_user_id:
            problems.append(f"Relationship {rel.id} links {rel.from_user_id} to itself")
        if not is_known_type(rel.relationship_type):
            problems.append(f"Relationship {rel.id} has unrecognized type '{rel.relationship_type}'")
    return problems


def explore(
    family: FamilyData,
    root_member_id: str,
    *,
    show_placeholders: bool = False,
    infer_siblings: bool = True,
) -> TreeView:
    """Build the tree for ``root_member_id`` along with its statistics and layout."""

    builder = TreeLayoutBuilder(show_placeholders=show_placeholders, infer_siblings=infer_siblings)
    root = builder.build(family.members, family.relationships, root_member_id)
    return TreeView(
        root=root,
        statistics=calculate_tree_statistics(family.members, root),
        layout=compute_layout(root),
    )


__all__ = ["TreeView", "explore", "load_family", "search_members", "validate_family"]
