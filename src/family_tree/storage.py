"""Storage port and JSON codec for the three family tree slots.

The store never talks to a database directly. It reads and writes opaque
text payloads under three keys (see constants.STORAGE_KEYS) through any
object implementing StoragePort:

- InMemoryStorage: dict-backed, for tests and throwaway sessions
- utils.db_helpers.DatabaseHelper: SQLite via SQLAlchemy

Decoding is tolerant. A bad record is skipped, a bad slot decodes to its
empty value, and both are logged rather than raised, so one corrupt entry
never prevents the rest of the tree from loading.
"""

import json
import logging
from typing import Any, Optional, Protocol

from family_tree.models.member import Member

logger = logging.getLogger(__name__)

Position = tuple[float, float]


class StoragePort(Protocol):
    """Keyed text storage used by TreeDataManager."""

    def read(self, key: str) -> Optional[str]:
        """Return the payload stored under key, or None if never written."""
        ...

    def write(self, key: str, payload: str) -> None:
        """Store payload under key, replacing any previous value."""
        ...


class InMemoryStorage:
    """StoragePort backed by a plain dict."""

    def __init__(self, slots: Optional[dict[str, str]] = None):
        self.slots: dict[str, str] = dict(slots or {})

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, payload: str) -> None:
        self.slots[key] = payload


# ============================================================================
# Members
# ============================================================================

def encode_member(member: Member) -> str:
    return json.dumps(member.to_dict(), ensure_ascii=False)


def decode_member(payload: Optional[str]) -> Optional[Member]:
    """Decode a single member (the owner profile slot)."""
    if not payload:
        return None
    try:
        return Member.from_dict(json.loads(payload))
    except (json.JSONDecodeError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Discarding undecodable member record: %s", e)
        return None


def encode_members(members: list[Member]) -> str:
    return json.dumps([m.to_dict() for m in members], ensure_ascii=False)


def decode_members(payload: Optional[str]) -> list[Member]:
    """
    Decode the member collection.

    Args:
        payload: JSON array of member objects, or None

    Returns:
        Members in stored order; undecodable records and repeated ids are skipped
    """
    if not payload:
        return []
    try:
        records = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("Member collection is not valid JSON, starting empty: %s", e)
        return []
    if not isinstance(records, list):
        logger.warning("Member collection is not a list, starting empty")
        return []

    members: list[Member] = []
    seen: set[str] = set()
    for record in records:
        try:
            member = Member.from_dict(record)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping undecodable member record: %s", e)
            continue
        if member.id in seen:
            logger.warning("Skipping duplicate member id %s", member.id)
            continue
        seen.add(member.id)
        members.append(member)
    return members


# ============================================================================
# Canvas positions
# ============================================================================

def encode_positions(positions: dict[str, Position]) -> str:
    return json.dumps({member_id: [x, y] for member_id, (x, y) in positions.items()})


def decode_positions(payload: Optional[str]) -> dict[str, Position]:
    """
    Decode the canvas position map.

    Accepts both `{id: [x, y]}` and the older `{id: {"x": .., "y": ..}}` form.
    """
    if not payload:
        return {}
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("Position map is not valid JSON, starting empty: %s", e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Position map is not an object, starting empty")
        return {}

    positions: dict[str, Position] = {}
    for member_id, value in raw.items():
        point = _parse_point(value)
        if point is None:
            logger.warning("Skipping undecodable position for %s: %r", member_id, value)
            continue
        positions[str(member_id)] = point
    return positions


def _parse_point(value: Any) -> Optional[Position]:
    try:
        if isinstance(value, dict):
            return float(value["x"]), float(value["y"])
        x, y = value
        return float(x), float(y)
    except (KeyError, TypeError, ValueError):
        return None
