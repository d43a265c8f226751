"""Archive discovery: classify export files into categories by filename."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Pattern

from .data_models import Category
from .normalizer import RawShape, ShapeHint, contact_from_fields
from .utils import natural_sort_key

logger = logging.getLogger(__name__)


class MissingCategoryError(ValueError):
    """Raised when the archive lacks a category reconciliation needs."""


@dataclass(frozen=True)
class ArchiveSource:
    """Filename pattern and export shape of one importable category."""
    category: Category
    pattern: Pattern[str]
    hint: ShapeHint


def _keyed(category: Category, pattern: str, root_key: str) -> ArchiveSource:
    return ArchiveSource(category, re.compile(pattern), ShapeHint(RawShape.KEYED_ROOT, root_key))


ARCHIVE_SOURCES: List[ArchiveSource] = [
    ArchiveSource(Category.FOLLOWERS, re.compile(r"^followers_\d+\.json$"),
                  ShapeHint(RawShape.LIST_ITEM)),
    _keyed(Category.FOLLOWING, r"^following(_\d+)?\.json$", "relationships_following"),
    _keyed(Category.PENDING_REQUESTS, r"^pending_follow_requests(_\d+)?\.json$",
           "relationships_follow_requests_sent"),
    _keyed(Category.RECENT_REQUESTS, r"^recent_follow_requests(_\d+)?\.json$",
           "relationships_permanent_follow_requests"),
    ArchiveSource(Category.CONTACTS, re.compile(r"^synced_contacts(_\d+)?\.json$"),
                  ShapeHint(RawShape.MAP_OF_FIELDS, "contacts_contact_info", contact_from_fields)),
    _keyed(Category.BLOCKED, r"^blocked_profiles(_\d+)?\.json$", "relationships_blocked_users"),
    _keyed(Category.RESTRICTED, r"^restricted_profiles(_\d+)?\.json$",
           "relationships_restricted_users"),
    _keyed(Category.CLOSE_FRIENDS, r"^close_friends(_\d+)?\.json$", "relationships_close_friends"),
    _keyed(Category.HIDE_STORY_FROM, r"^hide_story_from(_\d+)?\.json$",
           "relationships_hide_stories_from"),
    _keyed(Category.FAVORITES, r"^profiles_you've_favorited(_\d+)?\.json$",
           "relationships_feed_favorites"),
    _keyed(Category.RECENTLY_UNFOLLOWED, r"^recently_unfollowed_profiles(_\d+)?\.json$",
           "relationships_unfollowed_users"),
    _keyed(Category.REMOVED_SUGGESTIONS, r"^removed_suggestions(_\d+)?\.json$",
           "relationships_dismissed_suggested_users"),
    _keyed(Category.REQUESTS_RECEIVED, r"^follow_requests_you've_received(_\d+)?\.json$",
           "relationships_follow_requests_received"),
]

SOURCES_BY_CATEGORY: Dict[Category, ArchiveSource] = {s.category: s for s in ARCHIVE_SOURCES}

REQUIRED_CATEGORIES = (Category.FOLLOWERS, Category.FOLLOWING)


def classify_filename(name: str) -> Optional[Category]:
    """Return the category whose pattern matches ``name`` first, if any."""
    for source in ARCHIVE_SOURCES:
        if source.pattern.match(name):
            return source.category
    return None


def scan_archive(root: Path) -> Dict[Category, List[Path]]:
    """Group every recognised JSON file under ``root`` by category."""
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Archive directory not found: {root}")

    groups: Dict[Category, List[Path]] = {source.category: [] for source in ARCHIVE_SOURCES}
    for path in root.rglob("*.json"):
        if not path.is_file():
            continue
        category = classify_filename(path.name)
        if category is not None:
            groups[category].append(path)

    for category, paths in groups.items():
        paths.sort(key=lambda p: (str(p.parent), natural_sort_key(p.name)))
        if paths:
            logger.debug(f"{category.value}: {[p.name for p in paths]}")

    return groups


def require_categories(groups: Dict[Category, List[Path]]) -> None:
    """Abort the import when followers or following files are absent."""
    missing = [c.value for c in REQUIRED_CATEGORIES if not groups.get(c)]
    if missing:
        raise MissingCategoryError(
            f"Could not find {' or '.join(missing)} files (e.g., followers_1.json, following.json). "
            "Please make sure you selected the root Instagram backup folder."
        )
