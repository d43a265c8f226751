"""Data models for Instagram Archive Mapper."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple


def coerce_timestamp(value: Any) -> int:
    """Return a non-negative integer timestamp, 0 when unknown."""
    if isinstance(value, bool):
        return 0
    try:
        ts = int(value)
    except (TypeError, ValueError):
        return 0
    return ts if ts > 0 else 0


@dataclass(frozen=True)
class Profile:
    """One external account reference (username, profile url, seconds timestamp)."""
    username: str
    url: str = ""
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"username": self.username, "url": self.url, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        return cls(
            username=str(data.get("username") or ""),
            url=str(data.get("url") or ""),
            timestamp=coerce_timestamp(data.get("timestamp")),
        )


@dataclass(frozen=True)
class ContactInfo:
    """A device-synced contact. Not a platform account."""
    first_name: str
    contact_info: str
    last_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "contactInfo": self.contact_info,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContactInfo":
        return cls(
            first_name=str(data.get("firstName") or ""),
            contact_info=str(data.get("contactInfo") or ""),
            last_name=data.get("lastName") or None,
        )


@dataclass(frozen=True)
class CommentActivity:
    """A comment the account owner left on someone's media."""
    comment: str
    owner: str
    timestamp: int = 0


@dataclass(frozen=True)
class ChatThread:
    """Summary of one inbox conversation folder."""
    folder_name: str
    title: str
    participants: Tuple[str, ...]
    message_count: int
    last_timestamp_ms: int = 0


@dataclass
class MediaFile:
    """Represents a media file with its metadata."""
    path: str
    name: str
    size: int
    modified: float
    media_type: str
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class MediaSlice:
    """A byte range read from a media file."""
    start: int
    end: int
    total_size: int
    content_type: str
    data: bytes
    partial: bool = False

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_size}"


class Category(Enum):
    """Named buckets of the aggregate, valued by their persisted category string."""
    FOLLOWERS = "followers"
    FOLLOWING = "following"
    FANS = "fans"
    NOT_FOLLOWING_BACK = "notFollowingBack"
    MUTUAL = "mutual"
    PENDING_REQUESTS = "pendingRequests"
    RECENT_REQUESTS = "recentRequests"
    BLOCKED = "blocked"
    RESTRICTED = "restricted"
    CLOSE_FRIENDS = "closeFriends"
    HIDE_STORY_FROM = "hideStoryFrom"
    FAVORITES = "favorites"
    RECENTLY_UNFOLLOWED = "recentlyUnfollowed"
    REMOVED_SUGGESTIONS = "removedSuggestions"
    REQUESTS_RECEIVED = "requestsReceived"
    CONTACTS = "contacts"

    @property
    def field_name(self) -> str:
        return _CATEGORY_FIELDS[self]

    @property
    def is_profile_list(self) -> bool:
        return self is not Category.CONTACTS

    @classmethod
    def parse(cls, value: str) -> "Category":
        """Look up a category by persisted value or attribute name."""
        for category in cls:
            if value in (category.value, category.field_name, category.name.lower()):
                return category
        raise ValueError(f"Unknown category: {value}")


_CATEGORY_FIELDS: Dict[Category, str] = {
    Category.FOLLOWERS: "followers",
    Category.FOLLOWING: "following",
    Category.FANS: "fans",
    Category.NOT_FOLLOWING_BACK: "not_following_back",
    Category.MUTUAL: "mutual",
    Category.PENDING_REQUESTS: "pending_requests",
    Category.RECENT_REQUESTS: "recent_requests",
    Category.BLOCKED: "blocked",
    Category.RESTRICTED: "restricted",
    Category.CLOSE_FRIENDS: "close_friends",
    Category.HIDE_STORY_FROM: "hide_story_from",
    Category.FAVORITES: "favorites",
    Category.RECENTLY_UNFOLLOWED: "recently_unfollowed",
    Category.REMOVED_SUGGESTIONS: "removed_suggestions",
    Category.REQUESTS_RECEIVED: "requests_received",
    Category.CONTACTS: "contacts",
}

PROFILE_CATEGORIES: Tuple[Category, ...] = tuple(c for c in Category if c.is_profile_list)


@dataclass(frozen=True)
class ConnectionStats:
    """The reconciled snapshot persisted as one unit."""
    followers: Tuple[Profile, ...] = ()
    following: Tuple[Profile, ...] = ()
    fans: Tuple[Profile, ...] = ()  # follow you, you don't follow them
    not_following_back: Tuple[Profile, ...] = ()  # you follow them, they don't follow you
    mutual: Tuple[Profile, ...] = ()
    pending_requests: Tuple[Profile, ...] = ()
    recent_requests: Tuple[Profile, ...] = ()
    blocked: Tuple[Profile, ...] = ()
    restricted: Tuple[Profile, ...] = ()
    close_friends: Tuple[Profile, ...] = ()
    hide_story_from: Tuple[Profile, ...] = ()
    favorites: Tuple[Profile, ...] = ()
    recently_unfollowed: Tuple[Profile, ...] = ()
    removed_suggestions: Tuple[Profile, ...] = ()
    requests_received: Tuple[Profile, ...] = ()
    contacts: Tuple[ContactInfo, ...] = ()

    def get(self, category: Category) -> Tuple[Any, ...]:
        return getattr(self, category.field_name)

    def with_category(self, category: Category, items: Sequence[Any]) -> "ConnectionStats":
        """Return a copy with one category replaced."""
        return replace(self, **{category.field_name: tuple(items)})

    def counts(self) -> Dict[str, int]:
        return {category.value: len(self.get(category)) for category in Category}

    def to_dict(self) -> Dict[str, Any]:
        return {
            category.value: [item.to_dict() for item in self.get(category)]
            for category in Category
        }


STATS_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(ConnectionStats))


@dataclass
class Stats:
    """Centralized import statistics tracking."""
    # File discovery
    files_by_category: Dict[str, int] = field(default_factory=dict)
    failed_files: int = 0

    # Reconciliation results
    profiles_by_category: Dict[str, int] = field(default_factory=dict)

    # Timing
    phase_times: Dict[str, float] = field(default_factory=dict)
