"""Tests for relationship label resolution.

Covers each rule in priority order:
- pets (beats everything else, including the owner flag)
- owner-profile table (role1 decides)
- same-role table
- cross-role table and per-role fallbacks
- pass-through of untabulated combinations
"""

import pytest

from family_tree.constants import OWNER_RELATIONSHIP, RELATIONSHIPS
from family_tree.models import Member
from family_tree.relationships import (
    CROSS_ROLE_LABELS,
    OWNER_LABELS,
    SAME_ROLE_LABELS,
    ResolvedLabels,
    resolve,
    resolve_members,
)


class TestPetRules:
    """Pets resolve before any other rule."""

    def test_two_pets_are_friends(self):
        assert resolve("Pet", "Pet", False) == ("PetFriend", "PetFriend")

    def test_two_pets_with_owner_flag(self):
        assert resolve("Pet", "Pet", True) == ("PetFriend", "PetFriend")

    def test_pet_first(self):
        assert resolve("Pet", "Child", False) == ("Pet", "Owner")

    def test_pet_second(self):
        assert resolve("Self", "Pet", True) == ("Owner", "Pet")


class TestOwnerProfileRules:
    """role1 decides when the owner profile is involved."""

    @pytest.mark.parametrize("role1,expected", [
        ("Child", ("Parent", "Child")),
        ("Parent", ("Child", "Parent")),
        ("Grandparent", ("Grandchild", "Grandparent")),
        ("Spouse", ("Spouse", "Spouse")),
        ("Cousin", ("Cousin", "Cousin")),
        ("Relatives", ("Relatives", "Relatives")),
    ])
    def test_owner_table(self, role1, expected):
        assert resolve(role1, "Self", True) == expected

    def test_child_parent_with_owner(self):
        assert resolve("Child", "Parent", True) == ("Parent", "Child")

    def test_unmapped_role_passes_through(self):
        assert resolve("Self", "Sibling", True) == ("Self", "Sibling")
        assert resolve("Sibling", "Self", True) == ("Sibling", "Self")


class TestSameRoleRules:
    """Two non-owner members sharing a role."""

    @pytest.mark.parametrize("role,expected", [
        ("Parent", ("Spouse", "Spouse")),
        ("Grandparent", ("Spouse", "Spouse")),
        ("Child", ("Sibling", "Sibling")),
        ("Cousin", ("Cousin", "Cousin")),
        ("Relatives", ("Relatives", "Relatives")),
    ])
    def test_same_role_table(self, role, expected):
        assert resolve(role, role, False) == expected

    def test_untabulated_same_role_passes_through(self):
        assert resolve("Sibling", "Sibling", False) == ("Sibling", "Sibling")
        assert resolve("Spouse", "Spouse", False) == ("Spouse", "Spouse")


class TestCrossRoleRules:
    """Different roles, no owner profile."""

    @pytest.mark.parametrize("role1,role2,expected", [
        ("Grandparent", "Parent", ("Parent", "Child")),
        ("Grandparent", "Child", ("Great-grandparent", "Great-grandchild")),
        ("Grandparent", "Cousin", ("Relatives", "Relatives")),
        ("Grandparent", "Spouse", ("Spouse", "Spouse")),
        ("Parent", "Grandparent", ("Child", "Parent")),
        ("Parent", "Child", ("Parent", "Child")),
        ("Parent", "Spouse", ("Parent", "Child")),
        ("Child", "Parent", ("Grandparent", "GrandChild")),
        ("Child", "Spouse", ("Parent", "Child")),
        ("Child", "Relatives", ("Relatives", "Relatives")),
        ("Spouse", "Cousin", ("Cousin", "Cousin")),
        ("Spouse", "Grandparent", ("Grandchild", "Grandparent")),
        ("Cousin", "Parent", ("Relatives", "Relatives")),
        ("Relatives", "Child", ("Relatives", "Relatives")),
    ])
    def test_cross_role_table(self, role1, role2, expected):
        assert resolve(role1, role2, False) == expected

    def test_spouse_fallback(self):
        assert resolve("Spouse", "Sibling", False) == ("Spouse", "Spouse")

    def test_untabulated_pair_passes_through(self):
        assert resolve("Grandparent", "Sibling", False) == ("Grandparent", "Sibling")
        assert resolve("Sibling", "Parent", False) == ("Sibling", "Parent")

    def test_unknown_roles_pass_through(self):
        assert resolve("Godparent", "Neighbour", False) == ("Godparent", "Neighbour")


class TestResolveMembers:
    """resolve_members() derives the owner flag from ids."""

    def test_detects_owner(self):
        me = Member(name="Me", age=30, relationship="Self")
        kid = Member(name="Kid", age=3, relationship="Child")
        assert resolve_members(kid, me, me.id) == ("Parent", "Child")

    def test_without_owner(self):
        a = Member(name="A", age=30, relationship="Child")
        b = Member(name="B", age=3, relationship="Child")
        assert resolve_members(a, b, None) == ("Sibling", "Sibling")
        assert resolve_members(a, b, "someone-else") == ("Sibling", "Sibling")

    def test_returns_named_tuple(self):
        labels = resolve("Pet", "Pet", False)
        assert isinstance(labels, ResolvedLabels)
        assert labels.first == labels.second == "PetFriend"


class TestVocabulary:
    """Every role a member can carry resolves, and the tables use only known roles."""

    @pytest.mark.parametrize("role", [r for r in RELATIONSHIPS if r != "Pet"])
    def test_any_role_with_pet(self, role):
        assert resolve(role, "Pet", False) == ("Owner", "Pet")
        assert resolve("Pet", role, True) == ("Pet", "Owner")

    @pytest.mark.parametrize("role1", RELATIONSHIPS)
    @pytest.mark.parametrize("role2", RELATIONSHIPS + [OWNER_RELATIONSHIP])
    def test_every_pair_resolves(self, role1, role2):
        labels = resolve(role1, role2, role2 == OWNER_RELATIONSHIP)
        assert all(isinstance(label, str) and label for label in labels)

    def test_table_keys_are_known_roles(self):
        known = set(RELATIONSHIPS)
        assert set(OWNER_LABELS) <= known
        assert set(SAME_ROLE_LABELS) <= known
        assert {role for pair in CROSS_ROLE_LABELS for role in pair} <= known
