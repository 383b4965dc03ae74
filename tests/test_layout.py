from rootsgraph.layout import (
    TreeLayoutBuilder,
    build_tree_structure,
    calculate_tree_statistics,
    compute_layout,
    format_generation_count,
    format_member_count,
)
from rootsgraph.schemas import Member, Relationship


def member(member_id):
    return Member(id=member_id, first_name=member_id, last_name="Family")


def rel(source, target, rel_type):
    return Relationship(
        id=f"{source}-{rel_type}-{target}",
        from_user_id=source,
        to_user_id=target,
        relationship_type=rel_type,
    )


def ids(nodes):
    return [node.member_id for node in nodes]


def test_empty_members_or_unknown_root_return_none():
    assert build_tree_structure([], [], "any-id") is None
    assert build_tree_structure([member("A")], [], "unknown-id") is None


def test_lone_root():
    root = build_tree_structure([member("A")], [], "A")
    assert root.member_id == "A"
    assert root.generation == 0
    assert root.spouse is None
    assert root.children == []
    stats = calculate_tree_statistics([member("A")], root)
    assert stats.member_count == 1
    assert stats.generation_count == 1


def test_spouse_and_children_in_edge_order():
    members = [member(mid) for mid in ("R", "S", "C1", "C2")]
    relationships = [
        rel("R", "S", "spouse"),
        rel("R", "C1", "parent"),
        rel("C2", "R", "child"),
    ]
    root = build_tree_structure(members, relationships, "R")

    assert root.spouse.member_id == "S"
    assert root.spouse.generation == 0
    assert ids(root.children) == ["C1", "C2"]
    assert all(child.generation == 1 for child in root.children)


def test_children_recorded_against_spouse_are_shared():
    members = [member(mid) for mid in ("R", "S", "C")]
    relationships = [rel("R", "S", "spouse"), rel("S", "C", "parent")]
    root = build_tree_structure(members, relationships, "R")
    assert ids(root.children) == ["C"]


def test_three_generation_chain_spans_three_generations():
    members = [member(mid) for mid in ("G", "P", "C")]
    relationships = [rel("G", "P", "parent"), rel("P", "C", "parent")]

    top = build_tree_structure(members, relationships, "G")
    assert calculate_tree_statistics(members, top).generation_count == 3
    assert top.children[0].children[0].generation == 2

    bottom = build_tree_structure(members, relationships, "C")
    assert bottom.parents[0].member_id == "P"
    assert bottom.parents[0].generation == -1
    assert bottom.parents[0].parents[0].generation == -2
    assert calculate_tree_statistics(members, bottom).generation_count == 3


def test_parents_are_paired_as_spouses():
    members = [member(mid) for mid in ("R", "F", "M", "X")]
    relationships = [
        rel("F", "R", "parent"),
        rel("M", "R", "parent"),
        rel("F", "X", "spouse"),
        rel("F", "M", "spouse"),
    ]
    root = build_tree_structure(members, relationships, "R")
    assert ids(root.parents) == ["F"]
    assert root.parents[0].spouse.member_id == "M"


def test_siblings_inferred_from_shared_parent():
    members = [member(mid) for mid in ("P", "R", "S")]
    relationships = [rel("P", "R", "parent"), rel("P", "S", "parent")]

    root = build_tree_structure(members, relationships, "R")
    assert ids(root.siblings) == ["S"]
    assert root.siblings[0].generation == 0

    explicit_only = build_tree_structure(members, relationships, "R", infer_siblings=False)
    assert explicit_only.siblings == []
    assert ids(explicit_only.parents[0].children) == ["S"]


def test_explicit_sibling_edges_are_used():
    members = [member("R"), member("S")]
    root = TreeLayoutBuilder(infer_siblings=False).build(members, [rel("S", "R", "sibling")], "R")
    assert ids(root.siblings) == ["S"]


def test_extended_relatives_get_generation_offsets():
    members = [member(mid) for mid in ("R", "G", "X", "N")]
    relationships = [
        rel("G", "R", "grandparent"),
        rel("R", "X", "cousin"),
        rel("R", "N", "uncle"),
    ]
    root = build_tree_structure(members, relationships, "R")
    by_id = {node.member_id: node for node in root.relatives}
    assert by_id["G"].generation == -2
    assert by_id["G"].relation == "grandparent"
    assert by_id["X"].generation == 0
    assert by_id["N"].generation == 1
    assert by_id["N"].relation == "nephew/niece"


def test_second_spouse_is_kept_as_relative():
    members = [member(mid) for mid in ("R", "S1", "S2")]
    relationships = [rel("R", "S1", "spouse"), rel("R", "S2", "spouse")]
    root = build_tree_structure(members, relationships, "R")
    assert root.spouse.member_id == "S1"
    assert ids(root.relatives) == ["S2"]
    assert root.relatives[0].relation == "spouse"


def test_cycles_place_each_member_once():
    members = [member("A"), member("B")]
    relationships = [rel("A", "B", "parent"), rel("B", "A", "parent")]
    root = build_tree_structure(members, relationships, "A")
    placed = ids(root.iter_nodes())
    assert sorted(placed) == ["A", "B"]


def test_disconnected_members_are_excluded():
    members = [member(mid) for mid in ("R", "C", "Loner")]
    root = build_tree_structure(members, [rel("R", "C", "parent")], "R")
    assert "Loner" not in ids(root.iter_nodes())
    stats = calculate_tree_statistics(members, root)
    assert stats.member_count == 2
    assert stats.disconnected_count == 1


def test_dangling_edges_are_ignored():
    root = build_tree_structure([member("R")], [rel("R", "ghost", "parent")], "R")
    assert root.children == []


def test_placeholders_mark_missing_relatives():
    root = build_tree_structure([member("R")], [], "R", show_placeholders=True)

    assert root.spouse.is_placeholder
    assert root.spouse.placeholder_type == "spouse"
    assert root.spouse.related_to == "R"
    assert [node.placeholder_type for node in root.parents] == ["parent"]
    assert root.parents[0].generation == -1
    assert [node.placeholder_type for node in root.children] == ["child"]
    assert root.children[0].generation == 1

    stats = calculate_tree_statistics([member("R")], root)
    assert stats.member_count == 1
    assert stats.generation_count == 1


def test_placeholders_only_where_relation_missing():
    members = [member("R"), member("C")]
    root = build_tree_structure(members, [rel("R", "C", "parent")], "R", show_placeholders=True)
    assert [node.is_placeholder for node in root.children] == [False]
    child = root.children[0]
    assert child.parents == []
    assert child.spouse.is_placeholder
    assert child.children[0].placeholder_type == "child"


def test_statistics_without_root():
    stats = calculate_tree_statistics([member("A")], None)
    assert stats.member_count == 0
    assert stats.generation_count == 0
    assert stats.disconnected_count == 1


def test_compute_layout_uses_walk_order_per_generation():
    members = [member(mid) for mid in ("R", "S", "C1", "C2")]
    relationships = [
        rel("R", "S", "spouse"),
        rel("R", "C1", "parent"),
        rel("R", "C2", "parent"),
    ]
    layout = compute_layout(build_tree_structure(members, relationships, "R"))
    assert layout["R"] == {"x": 0, "y": 0}
    assert layout["S"] == {"x": 1, "y": 0}
    assert layout["C1"] == {"x": 0, "y": 1}
    assert layout["C2"] == {"x": 1, "y": 1}
    assert compute_layout(None) == {}


def test_count_formatting():
    assert format_member_count(0) == "0 Members"
    assert format_member_count(1) == "1 Member"
    assert format_member_count(5) == "5 Members"
    assert format_generation_count(1) == "1 Generation"
    assert format_generation_count(3) == "3 Generations"


def test_children_follow_parent_edge_order_not_first_contact():
    members = [member(mid) for mid in ("R", "C1", "C2")]
    relationships = [
        rel("R", "C2", "other"),
        rel("R", "C1", "parent"),
        rel("R", "C2", "parent"),
    ]
    root = build_tree_structure(members, relationships, "R")
    assert ids(root.children) == ["C1", "C2"]


def test_spouse_is_first_spouse_edge_not_first_contact():
    members = [member(mid) for mid in ("R", "S1", "S2")]
    relationships = [
        rel("R", "S2", "cousin"),
        rel("R", "S1", "spouse"),
        rel("R", "S2", "spouse"),
    ]
    root = build_tree_structure(members, relationships, "R")
    assert root.spouse.member_id == "S1"


def test_long_line_of_descent():
    depth = 2000
    members = [member(f"M{i}") for i in range(depth)]
    relationships = [rel(f"M{i}", f"M{i + 1}", "parent") for i in range(depth - 1)]

    root = build_tree_structure(members, relationships, "M0")

    stats = calculate_tree_statistics(members, root)
    assert stats.member_count == depth
    assert stats.generation_count == depth
    assert compute_layout(root)[f"M{depth - 1}"] == {"x": 0, "y": depth - 1}

    bottom = build_tree_structure(members, relationships, f"M{depth - 1}")
    assert calculate_tree_statistics(members, bottom).generation_count == depth
    assert compute_layout(bottom)["M0"] == {"x": 0, "y": -(depth - 1)}
