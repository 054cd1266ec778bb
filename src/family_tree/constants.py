"""Shared constants for family-tree-core.

Centralizes the role vocabulary, the default emoji, edge weight bounds and
the storage slot keys, so they are defined once and imported wherever
needed.
"""

# Role labels a member can carry. "Self" is reserved for the owner profile.
RELATIONSHIPS: list[str] = [
    "Parent", "Child", "Sibling", "Spouse",
    "Grandparent", "Cousin", "Relatives", "Pet",
]
OWNER_RELATIONSHIP = "Self"
PET_RELATIONSHIP = "Pet"
DEFAULT_RELATIONSHIP = "Relatives"

# Any emoji is accepted on Member.emoji; this is only the fallback.
DEFAULT_EMOJI = "👤"

# Edge weight bounds. Weight 0 is never stored: absence means "not connected".
MIN_CONNECTION_WEIGHT = 1
MAX_CONNECTION_WEIGHT = 5

# Storage port slot keys (kept compatible with previously saved data).
MEMBERS_KEY = "members"
USER_PROFILE_KEY = "userProfile"
POSITIONS_KEY = "memberPositions"
STORAGE_KEYS: tuple[str, ...] = (MEMBERS_KEY, USER_PROFILE_KEY, POSITIONS_KEY)
