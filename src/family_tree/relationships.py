"""Relationship label resolution.

Maps the roles of two connected members to the labels each endpoint
should show for the other. The rules are applied in priority order:

1. Pets: two pets are friends, a pet and anyone else are pet and owner.
2. Owner profile involved: role1 alone decides, from OWNER_LABELS.
3. Same role on both sides: SAME_ROLE_LABELS.
4. Different roles: CROSS_ROLE_LABELS keyed by (role1, role2), with a
   per-role1 fallback for Spouse, Cousin and Relatives.

Unknown combinations pass both roles through unchanged. Nothing here is
validated: nonsensical pairs still resolve to something.
"""

from typing import NamedTuple, Optional

from family_tree.constants import PET_RELATIONSHIP
from family_tree.models.member import Member

PET_FRIEND_LABEL = "PetFriend"
OWNER_LABEL = "Owner"


class ResolvedLabels(NamedTuple):
    """Display labels for the two endpoints of a connection."""

    first: str
    second: str


# role1 -> labels, when one endpoint is the owner profile
OWNER_LABELS: dict[str, tuple[str, str]] = {
    "Child":       ("Parent", "Child"),
    "Parent":      ("Child", "Parent"),
    "Grandparent": ("Grandchild", "Grandparent"),
    "Spouse":      ("Spouse", "Spouse"),
    "Cousin":      ("Cousin", "Cousin"),
    "Relatives":   ("Relatives", "Relatives"),
}

# shared role -> labels, for two non-owner members with the same role
SAME_ROLE_LABELS: dict[str, tuple[str, str]] = {
    "Parent":      ("Spouse", "Spouse"),
    "Grandparent": ("Spouse", "Spouse"),
    "Child":       ("Sibling", "Sibling"),
    "Cousin":      ("Cousin", "Cousin"),
    "Relatives":   ("Relatives", "Relatives"),
}

CROSS_ROLE_LABELS: dict[tuple[str, str], tuple[str, str]] = {
    ("Grandparent", "Parent"):    ("Parent", "Child"),
    ("Grandparent", "Child"):     ("Great-grandparent", "Great-grandchild"),
    ("Grandparent", "Cousin"):    ("Relatives", "Relatives"),
    ("Grandparent", "Relatives"): ("Relatives", "Relatives"),
    ("Grandparent", "Spouse"):    ("Spouse", "Spouse"),

    ("Parent", "Grandparent"):    ("Child", "Parent"),
    ("Parent", "Child"):          ("Parent", "Child"),
    ("Parent", "Cousin"):         ("Cousin", "Cousin"),
    ("Parent", "Spouse"):         ("Parent", "Child"),
    ("Parent", "Relatives"):      ("Relatives", "Relatives"),

    ("Child", "Parent"):          ("Grandparent", "GrandChild"),
    ("Child", "Grandparent"):     ("Great-grandparent", "Great-grandchild"),
    ("Child", "Spouse"):          ("Parent", "Child"),
    ("Child", "Cousin"):          ("Relatives", "Relatives"),
    ("Child", "Relatives"):       ("Relatives", "Relatives"),

    ("Spouse", "Child"):          ("Parent", "Child"),
    ("Spouse", "Parent"):         ("Child", "Parent"),
    ("Spouse", "Grandparent"):    ("Grandchild", "Grandparent"),
    ("Spouse", "Cousin"):         ("Cousin", "Cousin"),
    ("Spouse", "Relatives"):      ("Relatives", "Relatives"),
}

# role1 -> labels for any role2 missing from CROSS_ROLE_LABELS
CROSS_ROLE_DEFAULTS: dict[str, tuple[str, str]] = {
    "Spouse":    ("Spouse", "Spouse"),
    "Cousin":    ("Relatives", "Relatives"),
    "Relatives": ("Relatives", "Relatives"),
}


def resolve(role1: str, role2: str, involves_owner_profile: bool) -> ResolvedLabels:
    """
    Resolve the display labels for a connection between two roles.

    Args:
        role1: Role of the first endpoint
        role2: Role of the second endpoint
        involves_owner_profile: True when either endpoint is the owner profile

    Returns:
        ResolvedLabels(first, second)

    Example:
        >>> resolve("Child", "Parent", True)
        ResolvedLabels(first='Parent', second='Child')
    """
    if role1 == PET_RELATIONSHIP and role2 == PET_RELATIONSHIP:
        return ResolvedLabels(PET_FRIEND_LABEL, PET_FRIEND_LABEL)
    if role1 == PET_RELATIONSHIP:
        return ResolvedLabels(PET_RELATIONSHIP, OWNER_LABEL)
    if role2 == PET_RELATIONSHIP:
        return ResolvedLabels(OWNER_LABEL, PET_RELATIONSHIP)

    if involves_owner_profile:
        return ResolvedLabels(*OWNER_LABELS.get(role1, (role1, role2)))

    if role1 == role2:
        return ResolvedLabels(*SAME_ROLE_LABELS.get(role1, (role1, role2)))

    labels = CROSS_ROLE_LABELS.get((role1, role2))
    if labels is None:
        labels = CROSS_ROLE_DEFAULTS.get(role1, (role1, role2))
    return ResolvedLabels(*labels)


def resolve_members(first: Member, second: Member, owner_id: Optional[str]) -> ResolvedLabels:
    """Resolve labels for two members, detecting the owner profile by id."""
    involves_owner = owner_id is not None and owner_id in (first.id, second.id)
    return resolve(first.relationship, second.relationship, involves_owner)
