import pytest

from insta_mapper.data_models import (
    PROFILE_CATEGORIES,
    STATS_FIELDS,
    Category,
    ConnectionStats,
    ContactInfo,
    Profile,
    coerce_timestamp,
)


def test_every_category_maps_to_a_stats_field():
    assert sorted(c.field_name for c in Category) == sorted(STATS_FIELDS)


def test_profile_categories_exclude_contacts():
    assert Category.CONTACTS not in PROFILE_CATEGORIES
    assert len(PROFILE_CATEGORIES) == len(Category) - 1


@pytest.mark.parametrize("value", ["notFollowingBack", "not_following_back"])
def test_parse_category(value):
    assert Category.parse(value) is Category.NOT_FOLLOWING_BACK


def test_parse_unknown_category():
    with pytest.raises(ValueError):
        Category.parse("frenemies")


def test_with_category_returns_new_snapshot():
    stats = ConnectionStats(blocked=(Profile("a"),))
    edited = stats.with_category(Category.BLOCKED, [])
    assert stats.blocked == (Profile("a"),)
    assert edited.blocked == ()


def test_counts_cover_all_categories():
    counts = ConnectionStats(followers=(Profile("a"), Profile("b"))).counts()
    assert counts["followers"] == 2
    assert set(counts) == {c.value for c in Category}


@pytest.mark.parametrize("value, expected", [
    (1700000000, 1700000000), ("42", 42), (None, 0), (-5, 0), ("soon", 0), (True, 0),
])
def test_coerce_timestamp(value, expected):
    assert coerce_timestamp(value) == expected


def test_profile_from_partial_dict():
    assert Profile.from_dict({"username": "a"}) == Profile("a", "", 0)


def test_contact_dict_keys():
    contact = ContactInfo(first_name="Ann", contact_info="+1")
    assert contact.to_dict() == {"firstName": "Ann", "lastName": None, "contactInfo": "+1"}
    assert ContactInfo.from_dict(contact.to_dict()) == contact
