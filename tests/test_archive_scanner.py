import pytest

from insta_mapper.archive_scanner import (
    ARCHIVE_SOURCES,
    MissingCategoryError,
    classify_filename,
    require_categories,
    scan_archive,
)
from insta_mapper.data_models import Category

from conftest import write_json


@pytest.mark.parametrize("name, category", [
    ("followers_1.json", Category.FOLLOWERS),
    ("followers_12.json", Category.FOLLOWERS),
    ("following.json", Category.FOLLOWING),
    ("following_2.json", Category.FOLLOWING),
    ("pending_follow_requests.json", Category.PENDING_REQUESTS),
    ("recent_follow_requests.json", Category.RECENT_REQUESTS),
    ("synced_contacts.json", Category.CONTACTS),
    ("blocked_profiles.json", Category.BLOCKED),
    ("restricted_profiles.json", Category.RESTRICTED),
    ("close_friends.json", Category.CLOSE_FRIENDS),
    ("hide_story_from.json", Category.HIDE_STORY_FROM),
    ("profiles_you've_favorited.json", Category.FAVORITES),
    ("recently_unfollowed_profiles.json", Category.RECENTLY_UNFOLLOWED),
    ("removed_suggestions.json", Category.REMOVED_SUGGESTIONS),
    ("follow_requests_you've_received.json", Category.REQUESTS_RECEIVED),
])
def test_classify_known_files(name, category):
    assert classify_filename(name) is category


@pytest.mark.parametrize("name", [
    "followers.json",           # followers needs a page number
    "following_x.json",
    "my_followers_1.json",
    "followers_1.json.bak",
    "liked_posts.json",
])
def test_classify_unknown_files(name):
    assert classify_filename(name) is None


def test_derived_categories_have_no_source():
    sourced = {source.category for source in ARCHIVE_SOURCES}
    assert Category.MUTUAL not in sourced
    assert Category.FANS not in sourced
    assert Category.NOT_FOLLOWING_BACK not in sourced


def test_scan_groups_in_natural_order(tmp_path):
    for n in (10, 2, 1):
        write_json(tmp_path / "connections" / f"followers_{n}.json", [])
    write_json(tmp_path / "following.json", {})
    write_json(tmp_path / "notes.json", {})

    groups = scan_archive(tmp_path)
    assert [p.name for p in groups[Category.FOLLOWERS]] == [
        "followers_1.json", "followers_2.json", "followers_10.json"]
    assert [p.name for p in groups[Category.FOLLOWING]] == ["following.json"]
    assert groups[Category.BLOCKED] == []


def test_scan_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        scan_archive(tmp_path / "nope")


def test_require_categories_reports_missing(tmp_path):
    write_json(tmp_path / "followers_1.json", [])
    with pytest.raises(MissingCategoryError, match="following"):
        require_categories(scan_archive(tmp_path))


def test_require_categories_reports_missing_followers(tmp_path):
    write_json(tmp_path / "following.json", {"relationships_following": []})
    with pytest.raises(MissingCategoryError, match="followers"):
        require_categories(scan_archive(tmp_path))


def test_require_categories_passes(archive_dir):
    require_categories(scan_archive(archive_dir))
