"""Models for family-tree-core.

This package contains:
- Member: the family graph node (person or pet) with its weighted edges
- StorageSlot: SQLAlchemy model backing the SQLite storage port

Example usage:
    from family_tree.models import Member

    me = Member(name="Alex", age=34, emoji="🧑", relationship="Self")
    mum = Member(name="Rose", age=61, emoji="👩", relationship="Parent")
    me.add_connection(mum.id)
    mum.add_connection(me.id)
"""

from family_tree.models.member import Member
from family_tree.models.storage_slot import StorageSlot

__all__ = [
    "Member",
    "StorageSlot",
]
