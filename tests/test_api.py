import json

import pytest

from rootsgraph.api import explore, load_family, search_members, validate_family
from rootsgraph.schemas import FamilyData, Member, Relationship


def sample_payload():
    return {
        "members": [
            {"id": "u1", "firstName": "Ada", "lastName": "Lovelace", "dateOfBirth": "1815-12-10"},
            {"id": "u2", "firstName": "William", "lastName": "King"},
            {"id": "u3", "firstName": "Anne", "lastName": "King", "photoUrl": "https://example.com/a.jpg"},
        ],
        "relationships": [
            {"id": "r1", "fromUserId": "u1", "toUserId": "u2", "relationshipType": "spouse"},
            {"id": "r2", "fromUserId": "u1", "toUserId": "u3", "relationshipType": "Parent"},
        ],
    }


def test_family_data_from_rest_payload():
    family = FamilyData.from_dict(sample_payload())
    assert family.members[0].first_name == "Ada"
    assert family.members[0].date_of_birth == "1815-12-10"
    assert family.members[2].photo_url == "https://example.com/a.jpg"
    assert family.relationships[1].relationship_type == "parent"
    assert family.dict()["relationships"][0]["fromUserId"] == "u1"


def test_member_without_id_is_rejected():
    with pytest.raises(ValueError):
        Member.from_dict({"firstName": "Nobody"})


def test_load_family_reads_json(tmp_path):
    path = tmp_path / "family.json"
    path.write_text(json.dumps(sample_payload()), encoding="utf-8")
    family = load_family(path)
    assert len(family.members) == 3
    assert len(family.relationships) == 2


def test_load_family_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_family(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_family(bad)


def test_search_members_matches_first_or_last_name():
    family = FamilyData.from_dict(sample_payload())
    assert search_members("king", family.members) == ["u2", "u3"]
    assert search_members("AD", family.members) == ["u1"]
    assert search_members("   ", family.members) == []


def test_search_members_keeps_surrounding_spaces_in_the_match():
    family = FamilyData.from_dict(sample_payload())
    assert search_members("ada ", family.members) == []
    assert search_members(" king", family.members) == []
    assert search_members("ada", family.members) == ["u1"]


def test_validate_family_reports_problems():
    family = FamilyData(
        members=[Member(id="a"), Member(id="a"), Member(id="b")],
        relationships=[
            Relationship(id="r1", from_user_id="a", to_user_id="ghost", relationship_type="parent"),
            Relationship(id="r2", from_user_id="b", to_user_id="b", relationship_type="sibling"),
            Relationship(id="r3", from_user_id="a", to_user_id="b", relationship_type="neighbor"),
        ],
    )
    problems = validate_family(family)
    assert any("Duplicate member id a" in problem for problem in problems)
    assert any("ghost" in problem for problem in problems)
    assert any("to itself" in problem for problem in problems)
    assert any("neighbor" in problem for problem in problems)


def test_validate_family_clean():
    assert validate_family(FamilyData.from_dict(sample_payload())) == []


def test_explore_bundles_tree_stats_and_layout():
    view = explore(FamilyData.from_dict(sample_payload()), "u1")
    assert view.root.spouse.member_id == "u2"
    assert view.statistics.member_count == 3
    assert view.statistics.generation_count == 2
    assert view.layout["u3"] == {"x": 0, "y": 1}


def test_explore_unknown_root():
    view = explore(FamilyData.from_dict(sample_payload()), "missing")
    assert view.root is None
    assert view.statistics.member_count == 0
    assert view.layout == {}
