"""Tests for the derived views.

Coverage:
- sort_by_connections: total weight desc, age desc, stable
- display_order: owner profile first
- visible_members / visible_edges with hidden ids
- relation_text / family_relations
- VisibilityFilter toggle tears down edges
"""

import pytest

from family_tree.models import Member
from family_tree.storage import InMemoryStorage
from family_tree.store import TreeDataManager
from family_tree.views import (
    Edge,
    VisibilityFilter,
    connection_count,
    display_order,
    family_relations,
    relation_text,
    sort_by_connections,
    visible_edges,
    visible_members,
)


@pytest.fixture
def store():
    store = TreeDataManager(InMemoryStorage())
    store.set_user_profile(Member(name="Me", age=35, relationship="Self", id="me"))
    store.add_member(Member(name="Mum", age=62, relationship="Parent", id="mum"))
    store.add_member(Member(name="Kid", age=6, relationship="Child", id="kid"))
    store.add_member(Member(name="Rex", age=4, emoji="🐕", relationship="Pet", id="rex"))
    return store


def weighted(name, age, total):
    member = Member(name=name, age=age)
    for _ in range(total):
        member.add_connection(f"{name}-peer")
    return member


class TestSortByConnections:

    def test_weight_then_age(self):
        members = [weighted("a", 10, 5), weighted("b", 99, 3), weighted("c", 1, 0), weighted("d", 40, 5)]
        assert [m.age for m in sort_by_connections(members)] == [40, 10, 99, 1]

    def test_stable_for_ties(self):
        members = [Member(name="first", age=5), Member(name="second", age=5)]
        assert [m.name for m in sort_by_connections(members)] == ["first", "second"]

    def test_sums_across_peers(self):
        spread = Member(name="spread", age=1, connections=["a", "b", "c"])
        single = weighted("single", 50, 2)
        assert sort_by_connections([single, spread])[0].name == "spread"


class TestDisplayOrder:

    def test_profile_first(self, store):
        for _ in range(5):
            store.connect("mum", "kid")
        assert [m.id for m in display_order(store)] == ["me", "mum", "kid", "rex"]

    def test_without_profile(self):
        store = TreeDataManager(InMemoryStorage())
        store.add_member(Member(name="Young", age=3, id="y"))
        store.add_member(Member(name="Old", age=80, id="o"))
        assert [m.id for m in display_order(store)] == ["o", "y"]

    def test_connection_count(self, store):
        store.connect("me", "rex")
        assert connection_count(store, "rex", "me") == 1
        assert connection_count(store, "ghost", "me") == 0


class TestVisibleGraph:

    def test_hidden_members_left_out(self, store):
        assert [m.id for m in visible_members(store, {"kid"})] == ["me", "mum", "rex"]

    def test_each_pair_once(self, store):
        store.connect("me", "mum")
        store.connect("mum", "kid")
        store.connect("mum", "kid")
        edges = visible_edges(store)
        assert len(edges) == 2
        assert Edge("me", "mum", 1) in edges
        assert {frozenset((e.source_id, e.target_id)) for e in edges} == {
            frozenset(("me", "mum")), frozenset(("mum", "kid"))
        }
        assert max(e.weight for e in edges) == 2

    def test_hidden_edges_left_out(self, store):
        store.connect("me", "kid")
        store.connect("mum", "rex")
        assert [(e.source_id, e.target_id) for e in visible_edges(store, {"kid"})] == [
            ("mum", "rex")
        ]


class TestRelations:

    def test_owner_peer_uses_own_role(self, store):
        store.connect("kid", "me")
        kid = store.get_member("kid")
        assert relation_text(store, kid, store.user_profile) == "My Child"

    def test_other_peer_uses_peer_role(self, store):
        store.connect("kid", "mum")
        kid = store.get_member("kid")
        assert relation_text(store, kid, store.get_member("mum")) == "Parent: Mum"

    def test_profile_card(self, store):
        store.connect("me", "rex")
        me = store.user_profile
        assert family_relations(store, me) == ["Pet: Rex"]

    def test_skips_missing_peers(self, store):
        kid = store.get_member("kid")
        kid.add_connection("gone")
        assert family_relations(store, kid) == []


class TestVisibilityFilter:

    def test_toggle_hides_and_tears_down(self, store):
        store.connect("kid", "me")
        store.connect("kid", "mum")
        store.connect("kid", "mum")
        visibility = VisibilityFilter()

        assert visibility.toggle(store, "kid") is True
        assert visibility.is_hidden("kid")
        assert store.get_member("kid").connections == []
        assert store.get_member("mum").connections == []
        assert store.user_profile.connections == []
        assert "kid" not in [m.id for m in visibility.members(store)]

    def test_toggle_again_shows(self, store):
        visibility = VisibilityFilter()
        visibility.toggle(store, "rex")
        assert visibility.toggle(store, "rex") is False
        assert visibility.hidden_ids == frozenset()

    def test_hidden_ids_not_persisted(self, store):
        VisibilityFilter().toggle(store, "rex")
        reopened = TreeDataManager(store.storage)
        assert "rex" in reopened

    def test_edges(self, store):
        store.connect("me", "mum")
        visibility = VisibilityFilter({"mum"})
        assert visibility.edges(store) == []
