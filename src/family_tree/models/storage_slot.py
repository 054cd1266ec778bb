"""StorageSlot model - one keyed payload of the storage port.

A family tree is persisted as three independent slots: the member
collection, the owner profile and the canvas position map. Each slot is a
row holding the JSON text produced by family_tree.storage.

Design decisions:
- key is the primary key (one row per slot, upserted on every save)
- payload is opaque text; this table never parses it
- No schema version column: decoders default missing fields instead
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from family_tree.database import Base


class StorageSlot(Base):
    """
    A single keyed storage slot.

    Only the keys in family_tree.constants.STORAGE_KEYS are written by the
    store, but the table itself accepts any key.
    """

    __tablename__ = "storage_slots"

    # Slot key (e.g. "members", "userProfile", "memberPositions")
    key: Mapped[str] = mapped_column(String(100), primary_key=True)

    # Serialized slot contents
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<StorageSlot(key='{self.key}', size={len(self.payload)})>"

    def to_dict(self) -> dict:
        """Convert to dictionary for inspection and debugging."""
        return {
            "key": self.key,
            "size": len(self.payload),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
