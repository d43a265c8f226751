import pytest

from insta_mapper.data_models import Category, ContactInfo, Profile
from insta_mapper.reconciliation import reconcile
from insta_mapper.record_store import RecordStore
from insta_mapper.repository import StatsRepository


@pytest.fixture
def repository(tmp_path):
    store = RecordStore(tmp_path / "records.db")
    yield StatsRepository(store)
    store.close()


@pytest.fixture
def snapshot():
    return reconcile(
        [Profile("a", "https://www.instagram.com/a", 10), Profile("b", "", 20)],
        [Profile("b", "", 30), Profile("c", "", 40)],
        blocked=[Profile("m")],
        contacts=[ContactInfo(first_name="Ann", last_name="Lee", contact_info="+1")],
    )


def test_load_from_empty_store(repository):
    assert repository.load_stats() is None


def test_save_and_load_round_trip(repository, snapshot):
    repository.save_stats(snapshot)
    assert repository.load_stats() == snapshot


def test_contacts_stored_as_single_blob(repository, snapshot):
    repository.save_stats(snapshot)
    contact_rows = [r for r in repository.store.get_all() if r[0] == "contacts"]
    assert contact_rows == [("contacts", "all_contacts",
                             [{"firstName": "Ann", "lastName": "Lee", "contactInfo": "+1"}])]


def test_profiles_keyed_by_username(repository, snapshot):
    repository.save_stats(snapshot)
    keys = {(c, i) for c, i, _ in repository.store.get_all() if c != "contacts"}
    assert ("notFollowingBack", "c") in keys
    assert ("mutual", "b") in keys
    assert ("fans", "a") in keys


def test_save_replaces_previous_snapshot(repository, snapshot):
    repository.save_stats(snapshot)
    newer = reconcile([Profile("z")], [Profile("z")])
    repository.save_stats(newer)
    assert repository.load_stats() == newer


def test_deletion_is_not_retroactive(repository, snapshot):
    repository.save_stats(snapshot)
    refreshed = repository.delete_profile(Category.FOLLOWING, "b")

    assert [p.username for p in refreshed.following] == ["c"]
    assert refreshed.mutual == snapshot.mutual
    assert refreshed.not_following_back == snapshot.not_following_back
    assert refreshed.followers == snapshot.followers


def test_delete_unknown_username_leaves_snapshot(repository, snapshot):
    repository.save_stats(snapshot)
    assert repository.delete_profile(Category.BLOCKED, "nobody") == snapshot


def test_unknown_categories_are_skipped(repository, snapshot):
    repository.save_stats(snapshot)
    repository.store.put("legacy", "x", {"username": "x"})
    assert repository.load_stats() == snapshot


def test_clear(repository, snapshot):
    repository.save_stats(snapshot)
    repository.clear()
    assert repository.load_stats() is None
