import json
from pathlib import Path

import pytest


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def list_item(username, timestamp=1700000000, title=None):
    """One entry in the export's string_list_data shape."""
    item = {
        "title": title or "",
        "media_list_data": [],
        "string_list_data": [{
            "href": f"https://www.instagram.com/{username}",
            "value": username,
            "timestamp": timestamp,
        }],
    }
    return item


def map_item(**fields):
    return {"string_map_data": {label: {"value": value, "timestamp": 0}
                                for label, value in fields.items()}}


@pytest.fixture
def archive_dir(tmp_path):
    """A small but complete export folder."""
    root = tmp_path / "instagram-export"
    relations = root / "connections" / "followers_and_following"

    write_json(relations / "followers_1.json", [list_item("alice", 1700000000), list_item("bob", 1700100000)])
    write_json(relations / "followers_2.json", [list_item("dave", 1700200000)])
    write_json(relations / "following.json", {"relationships_following": [
        list_item("bob", 1690000000, title="bob"),
        list_item("carol", 1690100000, title="carol"),
        list_item("dave", 1690200000, title="dave"),
    ]})
    write_json(relations / "blocked_profiles.json",
               {"relationships_blocked_users": [list_item("mallory", title="mallory")]})
    write_json(relations / "pending_follow_requests.json",
               {"relationships_follow_requests_sent": [list_item("erin")]})
    write_json(relations / "close_friends.json",
               {"relationships_close_friends": [list_item("bob")]})
    write_json(root / "connections" / "contacts" / "synced_contacts.json", {"contacts_contact_info": [
        map_item(**{"First Name": "Ann", "Last Name": "Lee", "Contact Information": "+100"}),
    ]})

    activity = root / "your_instagram_activity"
    write_json(activity / "comments" / "post_comments_1.json", [
        {"string_map_data": {"Comment": {"value": "nice"}, "Media Owner": {"value": "bob"},
                             "Time": {"timestamp": 1700000000}}},
        {"string_map_data": {"Comment": {"value": "wow"}, "Media Owner": {"value": "carol"},
                             "Time": {"timestamp": 1710000000}}},
    ])
    write_json(activity / "likes" / "liked_posts.json", {"likes_media_likes": [
        list_item("carol", 1705000000, title="carol"),
    ]})
    write_json(activity / "messages" / "inbox" / "bob_123" / "message_1.json", {
        "title": "bob",
        "participants": [{"name": "bob"}, {"name": "me"}],
        "messages": [
            {"sender_name": "bob", "timestamp_ms": 1700000002000, "content": "second"},
            {"sender_name": "me", "timestamp_ms": 1700000001000, "content": "first"},
        ],
    })
    return root
