"""family-tree-core: the relationship graph behind a family tree editor.

Members (people and pets) are linked by weighted, symmetric edges and kept
in a TreeDataManager that persists through a pluggable storage port.

Example usage:
    from family_tree import Member, TreeDataManager, InMemoryStorage, display_order

    store = TreeDataManager(InMemoryStorage())
    store.set_user_profile(Member(name="Alex", age=34, relationship="Self"))
    rex = Member(name="Rex", age=4, emoji="🐕", relationship="Pet")
    store.add_member(rex)
    store.connect(store.user_profile_id, rex.id)
    [m.name for m in display_order(store)]
"""

from family_tree.config import ConfigManager
from family_tree.database import DatabaseError
from family_tree.models import Member
from family_tree.relationships import ResolvedLabels, resolve, resolve_members
from family_tree.storage import InMemoryStorage, StoragePort
from family_tree.store import StoreChange, TreeDataManager
from family_tree.utils.db_helpers import DatabaseHelper
from family_tree.views import (
    Edge,
    VisibilityFilter,
    connection_count,
    display_order,
    family_relations,
    visible_edges,
    visible_members,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "DatabaseError",
    "DatabaseHelper",
    "Edge",
    "InMemoryStorage",
    "Member",
    "ResolvedLabels",
    "StoragePort",
    "StoreChange",
    "TreeDataManager",
    "VisibilityFilter",
    "connection_count",
    "display_order",
    "family_relations",
    "resolve",
    "resolve_members",
    "visible_edges",
    "visible_members",
]
