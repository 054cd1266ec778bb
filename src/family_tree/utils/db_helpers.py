"""Database helper for the SQLite storage port.

Provides keyed slot storage on top of SQLAlchemy. DatabaseHelper satisfies
family_tree.storage.StoragePort through its read()/write() methods.
"""

from pathlib import Path
from typing import Optional

from ..database import get_database_path, initialize_database, get_session
from ..models import StorageSlot


class DatabaseHelper:
    """Helper class for database operations."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize database helper.

        Args:
            db_path: Optional path to a SQLite database file. The file and
                     its tables are created if they don't exist. When omitted,
                     uses ~/.family-tree/family_tree.db.
        """
        resolved = Path(db_path) if db_path is not None else get_database_path()
        self.db_path = resolved
        self.engine = initialize_database(resolved)

    def __repr__(self) -> str:
        return f"<DatabaseHelper(db_path='{self.db_path}')>"

    # =========================================================================
    # Slots
    # =========================================================================

    def read_slot(self, key: str) -> Optional[str]:
        """Return the payload stored under key, or None."""
        with get_session(self.engine) as session:
            slot = session.get(StorageSlot, key)
            return slot.payload if slot else None

    def write_slot(self, key: str, payload: str) -> None:
        """Create or replace the slot stored under key."""
        with get_session(self.engine) as session:
            slot = session.get(StorageSlot, key)
            if slot is None:
                session.add(StorageSlot(key=key, payload=payload))
            else:
                slot.payload = payload
            session.commit()

    def delete_slot(self, key: str) -> bool:
        """
        Delete a slot.

        Returns:
            True if deleted, False if the slot doesn't exist
        """
        with get_session(self.engine) as session:
            slot = session.get(StorageSlot, key)
            if not slot:
                return False
            session.delete(slot)
            session.commit()
            return True

    def list_slots(self) -> list[StorageSlot]:
        """Return all slots ordered by key."""
        with get_session(self.engine) as session:
            return session.query(StorageSlot).order_by(StorageSlot.key).all()

    # =========================================================================
    # StoragePort
    # =========================================================================

    def read(self, key: str) -> Optional[str]:
        return self.read_slot(key)

    def write(self, key: str, payload: str) -> None:
        self.write_slot(key, payload)

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
