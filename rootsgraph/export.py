"""JSON export of laid-out trees for rendering front-ends."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .api import explore
from .schemas import FamilyData, TreeNode
from .utils import logger


RELATIVE_GROUPS = ("children", "parents", "siblings", "relatives")


def _node_record(node: TreeNode) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "member": node.member.dict() if node.member is not None else None,
        "generation": node.generation,
        "relation": node.relation,
        "isPlaceholder": node.is_placeholder,
        "placeholderType": node.placeholder_type,
        "relatedTo": node.related_to,
        "spouse": None,
    }
    for group in RELATIVE_GROUPS:
        record[group] = []
    return record


def tree_to_dict(node: TreeNode) -> Dict[str, Any]:
    """Serialize a tree node and everything attached to it."""

    root = _node_record(node)
    stack: List[Tuple[TreeNode, Dict[str, Any]]] = [(node, root)]
    while stack:
        current, record = stack.pop()
        if current.spouse is not None:
            record["spouse"] = _node_record(current.spouse)
            stack.append((current.spouse, record["spouse"]))
        for group in RELATIVE_GROUPS:
            for item in getattr(current, group):
                item_record = _node_record(item)
                record[group].append(item_record)
                stack.append((item, item_record))
    return root


def build_tree_document(
    family: FamilyData,
    root_member_id: str,
    *,
    show_placeholders: bool = False,
    infer_siblings: bool = True,
) -> Dict[str, Any]:
    """Bundle the tree, grid layout hints and summary counts in one document."""

    view = explore(
        family,
        root_member_id,
        show_placeholders=show_placeholders,
        infer_siblings=infer_siblings,
    )
    root: Optional[Dict[str, Any]] = tree_to_dict(view.root) if view.root is not None else None
    return {
        "rootMemberId": root_member_id,
        "root": root,
        "layout": view.layout,
        "summary": view.statistics.dict(),
    }


def export_tree(document: Dict[str, Any], out_dir: str | Path) -> str:
    """Write a tree document to ``out_dir/family_tree.json``."""

    os.makedirs(out_dir, exist_ok=True)
    tree_path = os.path.join(out_dir, "family_tree.json")
    with open(tree_path, "w", encoding="utf-8") as fh:
        json.dump(document, fh, indent=2, ensure_ascii=False)
    logger.debug("Tree document written to %s", tree_path)
    return tree_path


__all__ = ["build_tree_document", "export_tree", "tree_to_dict"]
