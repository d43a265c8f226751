"""Persistence of the ConnectionStats snapshot through the record store."""

import logging
from typing import Dict, List, Optional

from .config import CONTACTS_IDENTIFIER
from .data_models import (
    PROFILE_CATEGORIES,
    Category,
    ConnectionStats,
    ContactInfo,
    Profile,
)
from .record_store import Record, RecordStore

logger = logging.getLogger(__name__)

_CATEGORY_BY_VALUE: Dict[str, Category] = {c.value: c for c in Category}


class StatsRepository:
    """Saves, loads and edits the single persisted snapshot."""

    def __init__(self, store: RecordStore):
        self.store = store

    def save_stats(self, stats: ConnectionStats) -> int:
        """Replace any previously persisted snapshot with ``stats``."""
        records: List[Record] = [
            (Category.CONTACTS.value, CONTACTS_IDENTIFIER, [c.to_dict() for c in stats.contacts])
        ]
        for category in PROFILE_CATEGORIES:
            for profile in stats.get(category):
                records.append((category.value, profile.username, profile.to_dict()))

        count = self.store.replace_all(records)
        logger.info(f"Saved {count} records")
        return count

    def load_stats(self) -> Optional[ConnectionStats]:
        """Rebuild the snapshot from the store, ``None`` when nothing is saved."""
        rows = self.store.get_all()
        if not rows:
            return None

        buckets: Dict[Category, list] = {category: [] for category in Category}
        for category_value, identifier, payload in rows:
            category = _CATEGORY_BY_VALUE.get(category_value)
            if category is None:
                logger.debug(f"Skipping record with unknown category {category_value!r}")
                continue
            if category is Category.CONTACTS:
                buckets[category] = [ContactInfo.from_dict(c) for c in payload or []]
            else:
                buckets[category].append(Profile.from_dict(payload))

        return ConnectionStats(**{c.field_name: tuple(items) for c, items in buckets.items()})

    def clear(self) -> None:
        self.store.delete_all()
        logger.info("Cleared persisted snapshot")

    def delete_profile(self, category: Category, username: str) -> Optional[ConnectionStats]:
        """
        Remove one username from one stored category and return the refreshed snapshot.

        Only the named category is edited; derived categories such as
        ``mutual`` keep the values computed at import time.
        """
        removed = self.store.delete_where(category.value, username)
        if not removed:
            logger.warning(f"No {category.value} record for {username!r}")
        return self.load_stats()
