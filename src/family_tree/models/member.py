"""Member model - a person or pet in the family graph.

A Member carries its display attributes and a weighted adjacency list to
other members. The adjacency list is split into two fields for
serialization: `connections` (ordered ids) and `connection_weights`
(id -> weight). They always hold the same set of ids.

Design decisions:
- Weights are integers in [1, 5]; weight 0 is represented by absence
- Repeated linking reinforces an edge up to the cap instead of duplicating it
- Members only edit their own side; the store keeps both sides symmetric
- No validation of emoji or age here (forms validate before reaching us)
"""

import copy
import logging
import uuid
from typing import Any, Optional

from family_tree.constants import (
    DEFAULT_EMOJI,
    DEFAULT_RELATIONSHIP,
    MAX_CONNECTION_WEIGHT,
    MIN_CONNECTION_WEIGHT,
    OWNER_RELATIONSHIP,
    PET_RELATIONSHIP,
)

logger = logging.getLogger(__name__)


def new_member_id() -> str:
    """Return a fresh collision-resistant member id."""
    return uuid.uuid4().hex


class Member:
    """
    A node of the family tree.

    Mutating helpers (add/remove connection) only touch this member's own
    edge map. Use TreeDataManager.connect/disconnect to change both sides.
    """

    def __init__(
        self,
        name: str,
        age: int,
        emoji: str = DEFAULT_EMOJI,
        relationship: str = DEFAULT_RELATIONSHIP,
        connections: Optional[list[str]] = None,
        id: Optional[str] = None,
    ):
        self.id = id or new_member_id()
        self.name = name
        self.age = age
        self.emoji = emoji
        self.relationship = relationship
        self.connections: list[str] = []
        self.connection_weights: dict[str, int] = {}

        for member_id in connections or []:
            if member_id not in self.connection_weights:
                self.connections.append(member_id)
                self.connection_weights[member_id] = MIN_CONNECTION_WEIGHT

    def __repr__(self) -> str:
        return (
            f"<Member(id='{self.id}', name='{self.name}', "
            f"relationship='{self.relationship}', connections={len(self.connections)})>"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # mutable value object

    @property
    def is_owner(self) -> bool:
        """True for the owner profile role."""
        return self.relationship == OWNER_RELATIONSHIP

    @property
    def is_pet(self) -> bool:
        return self.relationship == PET_RELATIONSHIP

    # Edge operations

    def add_connection(self, member_id: str) -> None:
        """
        Link to another member, or reinforce an existing link.

        A new link starts at weight 1. Each further call adds 1 up to
        MAX_CONNECTION_WEIGHT; at the cap the call does nothing.
        """
        weight = self.connection_weights.get(member_id)
        if weight is None:
            self.connections.append(member_id)
            self.connection_weights[member_id] = MIN_CONNECTION_WEIGHT
        elif weight < MAX_CONNECTION_WEIGHT:
            self.connection_weights[member_id] = weight + 1

    def remove_connection(self, member_id: str) -> None:
        """Weaken a link by one; a link at weight 1 is removed entirely."""
        weight = self.connection_weights.get(member_id)
        if weight is None:
            return
        if weight > MIN_CONNECTION_WEIGHT:
            self.connection_weights[member_id] = weight - 1
        else:
            self.remove_all_connections(member_id)

    def remove_all_connections(self, member_id: str) -> None:
        """Remove a link regardless of its weight. Idempotent."""
        self.connections = [c for c in self.connections if c != member_id]
        self.connection_weights.pop(member_id, None)

    def set_connection_weight(self, member_id: str, weight: int) -> None:
        """
        Set a link to an exact weight.

        Weights above MAX_CONNECTION_WEIGHT are capped; 0 or less removes
        the link. Used to mirror one side of an edge onto the other.
        """
        if weight < MIN_CONNECTION_WEIGHT:
            self.remove_all_connections(member_id)
            return
        if member_id not in self.connection_weights:
            self.connections.append(member_id)
        self.connection_weights[member_id] = min(weight, MAX_CONNECTION_WEIGHT)

    def clear_connections(self) -> None:
        """Drop every link held by this member."""
        self.connections = []
        self.connection_weights = {}

    def get_connection_count(self, member_id: str) -> int:
        """Weight of the link to member_id, or 0 if not linked."""
        return self.connection_weights.get(member_id, 0)

    def get_total_connections(self) -> int:
        """Sum of all link weights (primary sort key for member lists)."""
        return sum(self.connection_weights.values())

    def connected_ids(self) -> list[str]:
        return list(self.connections)

    def copy(self) -> "Member":
        """Independent deep copy."""
        return copy.deepcopy(self)

    # Serialization

    def to_dict(self) -> dict[str, Any]:
        """
        Convert member to its persisted dictionary form.

        Returns:
            Dictionary with camelCase keys matching previously saved data
        """
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "emoji": self.emoji,
            "relationship": self.relationship,
            "connections": list(self.connections),
            "connectionWeights": dict(self.connection_weights),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Member":
        """
        Build a member from its persisted dictionary form.

        Records written before weights existed only carry `connections`;
        every listed id then gets weight 1. The older `connectionCounts` key
        is accepted as well. Missing or null display attributes get defaults,
        an unreadable age becomes 0 and an unreadable weight entry is skipped
        (the id keeps weight 1 if it is listed in `connections`).

        Args:
            data: Decoded JSON object

        Returns:
            Member with connections and weights in lockstep

        Raises:
            ValueError: If the record has no id
        """
        member_id = data.get("id")
        if not member_id:
            raise ValueError(f"Member record has no id: {data!r}")

        member = cls(
            id=str(member_id),
            name=data.get("name") or "",
            age=_parse_age(data.get("age")),
            emoji=data.get("emoji") or DEFAULT_EMOJI,
            relationship=data.get("relationship") or DEFAULT_RELATIONSHIP,
            connections=[str(c) for c in data.get("connections") or []],
        )

        weights = data.get("connectionWeights")
        if weights is None:
            weights = data.get("connectionCounts")
        if not isinstance(weights, dict):
            weights = {}
        for peer_id, weight in weights.items():
            try:
                weight = int(weight)
            except (TypeError, ValueError):
                logger.warning("Member %s: ignoring bad weight %r for %s", member.id, weight, peer_id)
                continue
            member.set_connection_weight(str(peer_id), weight)
        return member


def _parse_age(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable age %r", value)
        return 0
