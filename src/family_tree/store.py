"""Graph store for a family tree.

TreeDataManager owns the member collection, the owner profile and the
canvas position map. Every public mutation:

- keeps the edge graph symmetric (A->B weight == B->A weight),
- treats unknown ids as a silent no-op,
- runs inside a transaction: all-or-nothing in memory, then one save of
  the three storage slots and one change notification.

Members handed in are copied and members handed out are copies, so callers
edit a copy and write it back with update_member()/set_user_profile(),
never by mutating the store's own objects.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, NamedTuple, Optional

from family_tree.config import ConfigManager
from family_tree.constants import (
    MEMBERS_KEY,
    OWNER_RELATIONSHIP,
    POSITIONS_KEY,
    STORAGE_KEYS,
    USER_PROFILE_KEY,
)
from family_tree.database import DatabaseError
from family_tree.models.member import Member
from family_tree.relationships import ResolvedLabels, resolve_members
from family_tree.storage import (
    Position,
    StoragePort,
    decode_member,
    decode_members,
    decode_positions,
    encode_member,
    encode_members,
    encode_positions,
)

logger = logging.getLogger(__name__)

PERSISTENCE_ERRORS = (DatabaseError, OSError, TypeError, ValueError)


class StoreChange(NamedTuple):
    """Notification sent to subscribers after a completed mutation."""

    action: str
    member_ids: tuple[str, ...]


Subscriber = Callable[[StoreChange], None]


class _Transaction:
    """Bookkeeping for the outermost open transaction."""

    def __init__(self, action: str, snapshot: tuple):
        self.action = action
        self.snapshot = snapshot
        self.member_ids: list[str] = []
        self.changed = False

    def touch(self, *member_ids: str) -> None:
        self.changed = True
        for member_id in member_ids:
            if member_id not in self.member_ids:
                self.member_ids.append(member_id)


class TreeDataManager:
    """
    The family graph and its persistence.

    Args:
        storage: Any StoragePort (InMemoryStorage, DatabaseHelper, ...)
        config: Behaviour switches; defaults are used when omitted

    Example:
        store = TreeDataManager(InMemoryStorage())
        store.set_user_profile(Member(name="Alex", age=34, relationship="Self"))
        rose = Member(name="Rose", age=61, relationship="Parent")
        store.add_member(rose)
        store.connect(store.user_profile.id, rose.id)
    """

    def __init__(self, storage: StoragePort, config: Optional[ConfigManager] = None):
        self.storage = storage
        self.config = config or ConfigManager.defaults()
        self._members: list[Member] = []
        self._user_profile: Optional[Member] = None
        self._positions: dict[str, Position] = {}
        self._subscribers: list[Subscriber] = []
        self._tx: Optional[_Transaction] = None
        self._load()

    @classmethod
    def open(
        cls,
        db_path: Optional[Path] = None,
        config: Optional[ConfigManager] = None,
    ) -> "TreeDataManager":
        """
        Open a store backed by SQLite.

        Args:
            db_path: Database file; falls back to the configured path, then
                     to ~/.family-tree/family_tree.db
            config: Optional config manager
        """
        from family_tree.utils.db_helpers import DatabaseHelper

        config = config or ConfigManager.defaults()
        return cls(DatabaseHelper(db_path or config.get_database_path()), config)

    def __repr__(self) -> str:
        profile = self._user_profile.name if self._user_profile else None
        return f"<TreeDataManager(members={len(self._members)}, user_profile={profile!r})>"

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def members(self) -> list[Member]:
        """Non-owner members in insertion order."""
        return [m.copy() for m in self._members]

    @property
    def user_profile(self) -> Optional[Member]:
        return self._user_profile.copy() if self._user_profile else None

    @property
    def user_profile_id(self) -> Optional[str]:
        return self._user_profile.id if self._user_profile else None

    @property
    def positions(self) -> dict[str, Position]:
        return dict(self._positions)

    def all_members(self) -> list[Member]:
        """Owner profile (if any) followed by the collection."""
        return [m.copy() for m in self._nodes()]

    def get_member(self, member_id: str) -> Optional[Member]:
        """Look up a member or the owner profile by id."""
        member = self._find(member_id)
        return member.copy() if member else None

    def is_user_profile(self, member_id: str) -> bool:
        return self.user_profile_id is not None and member_id == self.user_profile_id

    def get_position(self, member_id: str) -> Optional[Position]:
        return self._positions.get(member_id)

    def __contains__(self, member_id: object) -> bool:
        return isinstance(member_id, str) and self._find(member_id) is not None

    def __len__(self) -> int:
        return len(self._members) + (1 if self._user_profile else 0)

    # =========================================================================
    # Member lifecycle
    # =========================================================================

    def add_member(self, member: Member) -> bool:
        """
        Append a member to the collection.

        Edges the new member already carries are mirrored onto existing
        peers; edges to unknown ids are dropped.

        Returns:
            True if added, False if the id is already taken
        """
        with self.transaction("add"):
            if self._find(member.id) is not None:
                logger.debug("add_member ignored: id %s already exists", member.id)
                return False
            stored = member.copy()
            self._members.append(stored)
            self._touch(stored.id, *self._mirror_edges(stored))
            return True

    def update_member(self, member: Member) -> bool:
        """
        Replace a member wholesale by id.

        The owner profile is routed to set_user_profile(). The replacement's
        edge map wins: peers are brought in line with it, so saving a copy
        taken before a later connect() removes that newer edge on both sides.

        Returns:
            True if updated, False if no member has this id
        """
        if self.is_user_profile(member.id):
            self.set_user_profile(member)
            return True

        with self.transaction("update"):
            for index, existing in enumerate(self._members):
                if existing.id == member.id:
                    stored = member.copy()
                    self._members[index] = stored
                    self._touch(stored.id, *self._mirror_edges(stored))
                    return True
        logger.debug("update_member ignored: unknown id %s", member.id)
        return False

    def delete_member(self, member: Member | str) -> bool:
        """
        Remove a member and its canvas position.

        With `teardown_on_delete` enabled (the default) every peer first
        loses its edge to the member, so no dangling ids remain. The owner
        profile cannot be deleted.

        Returns:
            True if deleted, False if unknown or the owner profile
        """
        member_id = member if isinstance(member, str) else member.id
        if self.is_user_profile(member_id):
            logger.debug("delete_member ignored: %s is the owner profile", member_id)
            return False

        with self.transaction("delete"):
            index = next(
                (i for i, m in enumerate(self._members) if m.id == member_id), None
            )
            if index is None:
                logger.debug("delete_member ignored: unknown id %s", member_id)
                return False
            if self.config.teardown_on_delete:
                self._teardown(member_id)
            del self._members[index]
            self._positions.pop(member_id, None)
            self._touch(member_id)
            return True

    def set_user_profile(self, member: Member) -> None:
        """
        Replace the owner profile wholesale.

        The stored profile always carries the owner role. When the new
        profile has a different id from the old one, peers drop their edges
        to the old id.
        """
        with self.transaction("set_profile"):
            collision = next((m for m in self._members if m.id == member.id), None)
            if collision is not None:
                logger.warning(
                    "set_user_profile ignored: id %s belongs to a member", member.id
                )
                return

            stored = member.copy()
            if stored.relationship != OWNER_RELATIONSHIP:
                stored.relationship = OWNER_RELATIONSHIP

            previous = self._user_profile
            if previous is not None and previous.id != stored.id:
                self._touch(*self._teardown(previous.id))
                self._positions.pop(previous.id, None)

            self._user_profile = stored
            self._touch(stored.id, *self._mirror_edges(stored))

    # =========================================================================
    # Edges
    # =========================================================================

    def connect(self, first_id: str, second_id: str) -> Optional[ResolvedLabels]:
        """
        Link two members, or reinforce their existing link by one.

        Both sides are updated together. The relationship labels for the
        pair are always resolved and returned; they are written onto the
        members only when `apply_relationship_labels` is enabled, and never
        onto the owner profile.

        Returns:
            The resolved labels, or None if either id is unknown or both
            ids are the same
        """
        if first_id == second_id:
            return None
        with self.transaction("connect"):
            first = self._find(first_id)
            second = self._find(second_id)
            if first is None or second is None:
                logger.debug("connect ignored: %s <-> %s", first_id, second_id)
                return None

            labels = resolve_members(first, second, self.user_profile_id)
            first.add_connection(second.id)
            second.add_connection(first.id)

            if self.config.apply_relationship_labels:
                for member, label in ((first, labels.first), (second, labels.second)):
                    if member is not self._user_profile:
                        member.relationship = label

            self._touch(first.id, second.id)
            return labels

    def disconnect(self, first_id: str, second_id: str) -> bool:
        """
        Weaken the link between two members by one (removing it at weight 1).

        Returns:
            True if either side changed
        """
        return self._edit_pair("disconnect", first_id, second_id, Member.remove_connection)

    def disconnect_all(self, first_id: str, second_id: str) -> bool:
        """
        Remove the link between two members regardless of its weight.

        Returns:
            True if either side changed
        """
        return self._edit_pair("disconnect_all", first_id, second_id, Member.remove_all_connections)

    def remove_connections_for_member(self, member_id: str) -> None:
        """
        Full teardown of a member's edges.

        Clears the member's own edges and removes its id from every other
        member and the owner profile, whatever the weight. Used when a
        member is hidden and before deletion.
        """
        with self.transaction("remove_connections"):
            touched = self._teardown(member_id)
            if touched:
                self._touch(member_id, *touched)

    # =========================================================================
    # Canvas positions
    # =========================================================================

    def update_position(self, member_id: str, x: float, y: float) -> bool:
        """
        Store the canvas position of a member.

        Returns:
            True if stored, False if the id is unknown
        """
        with self.transaction("move"):
            if self._find(member_id) is None:
                return False
            self._positions[member_id] = (float(x), float(y))
            self._touch(member_id)
            return True

    # =========================================================================
    # Transactions and subscriptions
    # =========================================================================

    @contextmanager
    def transaction(self, action: str = "transaction") -> Generator[None, None, None]:
        """
        Apply every mutation inside the block as one unit.

        On an exception the in-memory state returns to what it was on entry
        and the exception propagates. On success the state is saved once and
        subscribers get one StoreChange. Nested blocks join the outer one.

        Usage:
            with store.transaction():
                store.connect(a, b)
                store.update_position(a, 10, 20)
        """
        if self._tx is not None:
            yield
            return

        tx = _Transaction(action, self._snapshot())
        self._tx = tx
        try:
            yield
        except BaseException:
            self._restore(tx.snapshot)
            raise
        finally:
            self._tx = None

        if tx.changed:
            self._save()
            self._notify(StoreChange(tx.action, tuple(tx.member_ids)))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change callback.

        Returns:
            A function that unregisters the callback
        """
        if callback not in self._subscribers:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def reload(self) -> None:
        """Discard in-memory state and read the storage slots again."""
        self._load()
        self._notify(StoreChange("reload", tuple(m.id for m in self._nodes())))

    # =========================================================================
    # Internals
    # =========================================================================

    def _nodes(self) -> list[Member]:
        nodes = [self._user_profile] if self._user_profile else []
        return nodes + self._members

    def _find(self, member_id: str) -> Optional[Member]:
        if self._user_profile is not None and self._user_profile.id == member_id:
            return self._user_profile
        return next((m for m in self._members if m.id == member_id), None)

    def _touch(self, *member_ids: str) -> None:
        if self._tx is not None:
            self._tx.touch(*member_ids)

    def _edit_pair(
        self,
        action: str,
        first_id: str,
        second_id: str,
        edit: Callable[[Member, str], None],
    ) -> bool:
        """Apply a one-sided edge edit to both ends; a missing end is skipped."""
        if first_id == second_id:
            return False
        with self.transaction(action):
            changed = False
            for member_id, peer_id in ((first_id, second_id), (second_id, first_id)):
                member = self._find(member_id)
                if member is None or not member.get_connection_count(peer_id):
                    continue
                edit(member, peer_id)
                self._touch(member_id)
                changed = True
            if not changed:
                logger.debug("%s ignored: %s <-> %s", action, first_id, second_id)
            return changed

    def _teardown(self, member_id: str) -> list[str]:
        """Remove every edge touching member_id; return the ids changed."""
        touched = []
        for node in self._nodes():
            if node.id == member_id:
                if node.connections:
                    node.clear_connections()
                    touched.append(node.id)
            elif node.get_connection_count(member_id):
                node.remove_all_connections(member_id)
                touched.append(node.id)
        return touched

    def _mirror_edges(self, member: Member) -> list[str]:
        """
        Make every peer agree with member's edge map.

        Edges to ids that are not in the store are dropped from member.
        Returns the ids of peers that changed.
        """
        touched = []
        for peer_id in member.connected_ids():
            if self._find(peer_id) is None or peer_id == member.id:
                member.remove_all_connections(peer_id)
        for node in self._nodes():
            if node is member:
                continue
            weight = member.get_connection_count(node.id)
            if node.get_connection_count(member.id) != weight:
                node.set_connection_weight(member.id, weight)
                touched.append(node.id)
        return touched

    def _snapshot(self) -> tuple:
        return (
            [m.copy() for m in self._members],
            self._user_profile.copy() if self._user_profile else None,
            dict(self._positions),
        )

    def _restore(self, snapshot: tuple) -> None:
        members, profile, positions = snapshot
        self._members = members
        self._user_profile = profile
        self._positions = positions

    def _load(self) -> None:
        slots = {key: self._read(key) for key in STORAGE_KEYS}
        self._members = decode_members(slots[MEMBERS_KEY])
        self._user_profile = decode_member(slots[USER_PROFILE_KEY])
        self._positions = decode_positions(slots[POSITIONS_KEY])
        if self._user_profile is not None:
            self._members = [m for m in self._members if m.id != self._user_profile.id]

    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.read(key)
        except PERSISTENCE_ERRORS as e:
            logger.warning("Failed to read storage slot '%s': %s", key, e)
            return None

    def _save(self) -> None:
        """Write all slots. Failures are logged and dropped; memory stays authoritative."""
        payloads = [(MEMBERS_KEY, lambda: encode_members(self._members))]
        if self._user_profile is not None:
            profile = self._user_profile
            payloads.append((USER_PROFILE_KEY, lambda: encode_member(profile)))
        payloads.append((POSITIONS_KEY, lambda: encode_positions(self._positions)))

        for key, encode in payloads:
            try:
                self.storage.write(key, encode())
            except PERSISTENCE_ERRORS as e:
                logger.warning("Failed to save storage slot '%s': %s", key, e)

    def _notify(self, change: StoreChange) -> None:
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                logger.exception(
                    "Subscriber %r failed handling %s", callback, change.action
                )
