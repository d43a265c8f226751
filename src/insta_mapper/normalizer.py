"""Normalization of the archive's export shapes into uniform records."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .data_models import CommentActivity, ContactInfo, Profile, coerce_timestamp


class RawShape(Enum):
    """Structural variants used by the export files."""
    LIST_ITEM = "list_item"          # [{title, string_list_data: [{href, value, timestamp}]}]
    KEYED_ROOT = "keyed_root"        # {root_key: [list items]}
    MAP_OF_FIELDS = "map_of_fields"  # [{string_map_data: {label: {value, timestamp}}}]


FieldDecoder = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class ShapeHint:
    """Selects the decode path for one kind of export file."""
    shape: RawShape
    root_key: Optional[str] = None
    decoder: Optional[FieldDecoder] = None


def profile_from_item(item: Any) -> Profile:
    """Convert one list item into a Profile.

    The first ``string_list_data`` entry supplies url, username and timestamp;
    a non-empty ``title`` takes precedence over the entry's ``value``. Items
    without usable link data yield empty strings and a zero timestamp.
    """
    if not isinstance(item, dict):
        return Profile(username="")

    title = item.get("title") or ""
    url, value, timestamp = "", "", 0

    entries = item.get("string_list_data")
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        link = entries[0]
        url = link.get("href") or ""
        value = link.get("value") or ""
        timestamp = coerce_timestamp(link.get("timestamp"))

    return Profile(username=str(title or value), url=str(url), timestamp=timestamp)


def _field_value(fields: Dict[str, Any], label: str) -> str:
    entry = fields.get(label)
    if isinstance(entry, dict) and entry.get("value") is not None:
        return str(entry["value"])
    return ""


def _field_timestamp(fields: Dict[str, Any], label: str) -> int:
    entry = fields.get(label)
    if isinstance(entry, dict):
        return coerce_timestamp(entry.get("timestamp"))
    return 0


def contact_from_fields(fields: Dict[str, Any]) -> ContactInfo:
    return ContactInfo(
        first_name=_field_value(fields, "First Name"),
        last_name=_field_value(fields, "Last Name") or None,
        contact_info=_field_value(fields, "Contact Information"),
    )


def comment_from_fields(fields: Dict[str, Any]) -> CommentActivity:
    return CommentActivity(
        comment=_field_value(fields, "Comment"),
        owner=_field_value(fields, "Media Owner"),
        timestamp=_field_timestamp(fields, "Time"),
    )


def _root_items(raw: Any, root_key: Optional[str]) -> List[Any]:
    """Return the item array of a document, ``[]`` when it is missing."""
    if root_key is None:
        return raw if isinstance(raw, list) else []
    if not isinstance(raw, dict):
        return []
    items = raw.get(root_key)
    return items if isinstance(items, list) else []


def normalize(raw: Any, hint: ShapeHint) -> List[Any]:
    """Decode one parsed export document according to its shape hint."""
    if hint.shape is RawShape.LIST_ITEM:
        return [profile_from_item(item) for item in _root_items(raw, None)]

    if hint.shape is RawShape.KEYED_ROOT:
        if hint.root_key is None:
            raise ValueError("KEYED_ROOT shape requires a root_key")
        return [profile_from_item(item) for item in _root_items(raw, hint.root_key)]

    decoder = hint.decoder or contact_from_fields
    records = []
    for item in _root_items(raw, hint.root_key):
        fields = item.get("string_map_data") if isinstance(item, dict) else None
        records.append(decoder(fields if isinstance(fields, dict) else {}))
    return records


def parser_for(hint: ShapeHint) -> Callable[[Any], List[Any]]:
    """Bind a shape hint into a one-argument parse function."""
    def parse(raw: Any) -> List[Any]:
        return normalize(raw, hint)
    return parse
