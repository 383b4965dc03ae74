"""Dataclasses for family members, relationship edges and derived results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .relations import normalize_relationship_type


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


@dataclass(frozen=True)
class Member:
    id: str
    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Member":
        member_id = _pick(payload, "id")
        if member_id is None:
            raise ValueError(f"Member record without id: {dict(payload)!r}")
        return cls(
            id=str(member_id),
            first_name=_pick(payload, "firstName", "first_name") or "",
            last_name=_pick(payload, "lastName", "last_name") or "",
            date_of_birth=_pick(payload, "dateOfBirth", "date_of_birth"),
            photo_url=_pick(payload, "photoUrl", "photo_url"),
        )

    def dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "dateOfBirth": self.date_of_birth,
            "photoUrl": self.photo_url,
        }


@dataclass(frozen=True)
class Relationship:
    """A directed fact: ``from_user_id`` is ``relationship_type`` of ``to_user_id``."""

    id: str
    from_user_id: str
    to_user_id: str
    relationship_type: str
    specific_label: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Relationship":
        source = _pick(payload, "fromUserId", "from_user_id", "from")
        target = _pick(payload, "toUserId", "to_user_id", "to")
        if source is None or target is None:
            raise ValueError(f"Relationship record without endpoints: {dict(payload)!r}")
        rel_id = _pick(payload, "id")
        return cls(
            id=str(rel_id) if rel_id is not None else f"{source}:{target}",
            from_user_id=str(source),
            to_user_id=str(target),
            relationship_type=normalize_relationship_type(
                _pick(payload, "relationshipType", "relationship_type", "type")
            ),
            specific_label=_pick(payload, "specificLabel", "specific_label") or None,
        )

    def dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fromUserId": self.from_user_id,
            "toUserId": self.to_user_id,
            "relationshipType": self.relationship_type,
            "specificLabel": self.specific_label,
        }


@dataclass
class FamilyData:
    members: List[Member] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FamilyData":
        return cls(
            members=[Member.from_dict(item) for item in payload.get("members") or []],
            relationships=[Relationship.from_dict(item) for item in payload.get("relationships") or []],
        )

    def member_map(self) -> Dict[str, Member]:
        return {member.id: member for member in self.members}

    def dict(self) -> Dict[str, Any]:
        return {
            "members": [member.dict() for member in self.members],
            "relationships": [rel.dict() for rel in self.relationships],
        }


@dataclass
class TreeNode:
    """One slot of the rooted family tree.

    ``generation`` is relative to the root: 0 for the root, negative for
    ancestors and positive for descendants. Placeholder nodes carry no member;
    ``placeholder_type`` says which relative could be added and ``related_to``
    names the member the slot belongs to.
    """

    member: Optional[Member]
    generation: int
    relation: Optional[str] = None
    spouse: Optional["TreeNode"] = None
    children: List["TreeNode"] = field(default_factory=list)
    parents: List["TreeNode"] = field(default_factory=list)
    siblings: List["TreeNode"] = field(default_factory=list)
    relatives: List["TreeNode"] = field(default_factory=list)
    is_placeholder: bool = False
    placeholder_type: Optional[str] = None
    related_to: Optional[str] = None

    @classmethod
    def placeholder(cls, placeholder_type: str, related_to: str, generation: int) -> "TreeNode":
        return cls(
            member=None,
            generation=generation,
            relation=placeholder_type,
            is_placeholder=True,
            placeholder_type=placeholder_type,
            related_to=related_to,
        )

    @property
    def member_id(self) -> Optional[str]:
        return self.member.id if self.member is not None else None

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """Pre-order walk: self, spouse, children, parents, siblings, relatives."""
        stack: List["TreeNode"] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.attached()))

    def attached(self) -> List["TreeNode"]:
        nodes = [self.spouse] if self.spouse is not None else []
        return nodes + self.children + self.parents + self.siblings + self.relatives


@dataclass(frozen=True)
class PathStep:
    member: Member
    relationship: str

    def dict(self) -> Dict[str, Any]:
        return {"member": self.member.dict(), "relationship": self.relationship}


@dataclass
class PathResult:
    connected: bool
    path: List[PathStep] = field(default_factory=list)
    description: str = ""

    def dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "path": [step.dict() for step in self.path],
            "description": self.description,
        }


@dataclass(frozen=True)
class TreeStatistics:
    member_count: int = 0
    generation_count: int = 0
    disconnected_count: int = 0

    def dict(self) -> Dict[str, int]:
        return {
            "memberCount": self.member_count,
            "generationCount": self.generation_count,
            "disconnectedCount": self.disconnected_count,
        }


__all__ = [
    "FamilyData",
    "Member",
    "PathResult",
    "PathStep",
    "Relationship",
    "TreeNode",
    "TreeStatistics",
]
