"""Read-only projections over a TreeDataManager.

These are what list and canvas screens redraw from after every change:
display ordering, hidden-member filtering, edge lists for drawing
connection lines and the relation lines shown on member cards.
"""

from typing import Iterable, NamedTuple, Optional

from family_tree.models.member import Member
from family_tree.store import TreeDataManager


class Edge(NamedTuple):
    """One undirected connection; weight is the number of lines to draw."""

    source_id: str
    target_id: str
    weight: int


def sort_by_connections(members: Iterable[Member]) -> list[Member]:
    """Heaviest total connection weight first, then oldest first. Stable."""
    return sorted(members, key=lambda m: (-m.get_total_connections(), -m.age))


def display_order(store: TreeDataManager) -> list[Member]:
    """Owner profile first, then the other members by sort_by_connections()."""
    profile = store.user_profile
    ordered = sort_by_connections(store.members)
    return [profile] + ordered if profile else ordered


def connection_count(store: TreeDataManager, first_id: str, second_id: str) -> int:
    """Edge weight between two members (0 when not linked or unknown)."""
    member = store.get_member(first_id)
    return member.get_connection_count(second_id) if member else 0


def visible_members(
    store: TreeDataManager, hidden: Iterable[str] = ()
) -> list[Member]:
    """Members in display order, without the hidden ones."""
    hidden = set(hidden)
    return [m for m in display_order(store) if m.id not in hidden]


def visible_edges(store: TreeDataManager, hidden: Iterable[str] = ()) -> list[Edge]:
    """
    Edges to draw on the canvas.

    Each linked pair appears once, oriented from the member that comes first
    in display order. Edges touching a hidden member, or an id no longer in
    the store, are left out.
    """
    members = visible_members(store, hidden)
    visible_ids = {m.id for m in members}
    seen: set[frozenset[str]] = set()
    edges = []
    for member in members:
        for peer_id in member.connections:
            pair = frozenset((member.id, peer_id))
            if peer_id not in visible_ids or pair in seen:
                continue
            seen.add(pair)
            edges.append(Edge(member.id, peer_id, member.get_connection_count(peer_id)))
    return edges


def relation_text(store: TreeDataManager, member: Member, connected: Member) -> str:
    """How `connected` is described on the card of `member`."""
    if not store.is_user_profile(member.id) and store.is_user_profile(connected.id):
        return f"My {member.relationship}"
    return f"{connected.relationship}: {connected.name}"


def family_relations(store: TreeDataManager, member: Member) -> list[str]:
    """Relation lines for a member card, one per connected member still present."""
    relations = []
    for peer_id in member.connections:
        connected = store.get_member(peer_id)
        if connected is not None:
            relations.append(relation_text(store, member, connected))
    return relations


class VisibilityFilter:
    """
    Presentation-only set of hidden member ids.

    Never persisted. Hiding a member through toggle() also tears down its
    edges in the store so no line is left pointing at a hidden card.
    """

    def __init__(self, hidden: Optional[Iterable[str]] = None):
        self._hidden: set[str] = set(hidden or ())

    def __repr__(self) -> str:
        return f"<VisibilityFilter(hidden={len(self._hidden)})>"

    @property
    def hidden_ids(self) -> frozenset[str]:
        return frozenset(self._hidden)

    def is_hidden(self, member_id: str) -> bool:
        return member_id in self._hidden

    def hide(self, member_id: str) -> None:
        self._hidden.add(member_id)

    def show(self, member_id: str) -> None:
        self._hidden.discard(member_id)

    def toggle(self, store: TreeDataManager, member_id: str) -> bool:
        """
        Flip a member between hidden and shown.

        Returns:
            True if the member is now hidden
        """
        if member_id in self._hidden:
            self.show(member_id)
            return False
        self.hide(member_id)
        store.remove_connections_for_member(member_id)
        return True

    def members(self, store: TreeDataManager) -> list[Member]:
        return visible_members(store, self._hidden)

    def edges(self, store: TreeDataManager) -> list[Edge]:
        return visible_edges(store, self._hidden)
