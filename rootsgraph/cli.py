"""Command line interface for rootsgraph."""

from __future__ import annotations

import argparse
import json
import os
from typing import Sequence

from .api import explore, load_family, search_members, validate_family
from .export import build_tree_document, export_tree
from .graph import find_relationship_path
from .layout import format_generation_count, format_member_count
from .schemas import FamilyData
from .utils import console, env_flag, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rootsgraph", description="Family tree layout and relationship paths")
    parser.add_argument(
        "--log-level",
        default=os.getenv("ROOTSGRAPH_LOG_LEVEL", "INFO"),
        help="Python logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tree = sub.add_parser("tree", help="Lay out the family tree around a root member")
    tree.add_argument("data", help="JSON file with members and relationships")
    tree.add_argument("--root", required=True, help="Root member id")
    tree.add_argument("--placeholders", action="store_true", help="Add empty spouse/parent/child slots")
    tree.add_argument(
        "--no-infer-siblings",
        dest="infer_siblings",
        action="store_false",
        default=env_flag("ROOTSGRAPH_INFER_SIBLINGS", True),
        help="Only treat explicit sibling edges as siblings",
    )
    tree.add_argument("--out", help="Output directory for family_tree.json")

    path = sub.add_parser("path", help="Trace the shortest relationship path between two members")
    path.add_argument("data", help="JSON file with members and relationships")
    path.add_argument("--start", required=True, help="Start member id")
    path.add_argument("--target", required=True, help="Target member id")
    path.add_argument("--json", action="store_true", help="Print the result as JSON")

    stats = sub.add_parser("stats", help="Member and generation counts for a tree")
    stats.add_argument("data", help="JSON file with members and relationships")
    stats.add_argument("--root", required=True, help="Root member id")

    search = sub.add_parser("search", help="Find members by name")
    search.add_argument("data", help="JSON file with members and relationships")
    search.add_argument("query", help="Case-insensitive name fragment")

    validate = sub.add_parser("validate", help="Check family data for dangling or odd edges")
    validate.add_argument("data", help="JSON file with members and relationships")

    return parser


def _load(path: str) -> FamilyData:
    try:
        return load_family(path)
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc


def run_tree(args: argparse.Namespace) -> None:
    family = _load(args.data)
    document = build_tree_document(
        family,
        args.root,
        show_placeholders=args.placeholders,
        infer_siblings=args.infer_siblings,
    )
    if document["root"] is None:
        raise SystemExit(f"No tree available for root member '{args.root}'")
    summary = document["summary"]
    console.log(
        "Tree summary",
        {
            "members": format_member_count(summary["memberCount"]),
            "generations": format_generation_count(summary["generationCount"]),
            "disconnected": summary["disconnectedCount"],
        },
    )
    if args.out:
        tree_path = export_tree(document, args.out)
        console.log(f"Tree written to {tree_path}")


def run_path(args: argparse.Namespace) -> None:
    family = _load(args.data)
    result = find_relationship_path(args.start, args.target, family.relationships, family.members)
    if args.json:
        console.print_json(json.dumps(result.dict(), ensure_ascii=False))
        return
    if result.connected:
        console.log(f"Relationship path: {result.description}")
    else:
        console.log("[yellow]These family members are not connected in the tree.[/yellow]")


def run_stats(args: argparse.Namespace) -> None:
    family = _load(args.data)
    stats = explore(family, args.root).statistics
    console.log(f"Total members: {format_member_count(stats.member_count)}")
    console.log(f"Generations: {format_generation_count(stats.generation_count)}")
    if stats.disconnected_count:
        console.log(f"[yellow]{stats.disconnected_count} member(s) not connected to {args.root}[/yellow]")


def run_search(args: argparse.Namespace) -> None:
    family = _load(args.data)
    members = family.member_map()
    matches = search_members(args.query, family.members)
    if not matches:
        console.log("No family members found")
        return
    for member_id in matches:
        console.log(f"{member_id}: {members[member_id].full_name}")


def run_validate(path: str) -> None:
    family = _load(path)
    console.log(f"Members: {len(family.members)} Relationships: {len(family.relationships)}")
    problems = validate_family(family)
    if problems:
        raise SystemExit(f"Found {len(problems)} problem(s): {problems[:3]}")
    console.log("Validation OK")


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_log_level(args.log_level)
    if args.command == "tree":
        run_tree(args)
    elif args.command == "path":
        run_path(args)
    elif args.command == "stats":
        run_stats(args)
    elif args.command == "search":
        run_search(args)
    elif args.command == "validate":
        run_validate(args.data)
    else:  # pragma: no cover - defensive
        parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main()
