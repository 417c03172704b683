"""
Unit tests for result sorting and materialisation.
"""

import pytest

from challenge_search.errors import UnknownSortFieldError
from challenge_search.sorter import is_descending, resolve_sort_field


@pytest.fixture
def sorter(indexed):
    return indexed.sorter


class TestSortFieldResolution:
    def test_canonical_fields(self):
        for name in ("title", "end_date", "category", "prize_money", "participants"):
            assert resolve_sort_field(name) == name

    def test_aliases_and_case(self):
        assert resolve_sort_field("Challenge_Type") == "category"
        assert resolve_sort_field("name") == "title"

    def test_unknown_field(self):
        with pytest.raises(UnknownSortFieldError):
            resolve_sort_field("rank")

    def test_order_is_descending_only_when_desc(self):
        assert is_descending("desc")
        assert is_descending(" DESC ")
        assert not is_descending("asc")
        assert not is_descending(None)
        assert not is_descending("down")


class TestSortedIds:
    """SORT BY the per-record sort values."""

    def test_title_ascending(self, sorter, keys):
        assert sorter.sorted_ids(keys.all_ids, "title", "asc") == ["c2", "c1", "c3"]

    def test_title_descending(self, sorter, keys):
        assert sorter.sorted_ids(keys.all_ids, "title", "desc") == ["c3", "c1", "c2"]

    def test_prize_money_is_numeric(self, sorter, keys):
        # lexical order would put "1500" before "500"
        assert sorter.sorted_ids(keys.all_ids, "prize_money") == ["c1", "c2", "c3"]
        assert sorter.sorted_ids(keys.all_ids, "prize_money", "DESC") == ["c3", "c2", "c1"]

    def test_participants_is_numeric(self, sorter, keys):
        assert sorter.sorted_ids(keys.all_ids, "participants") == ["c1", "c2", "c3"]

    def test_end_date(self, sorter, keys):
        assert sorter.sorted_ids(keys.all_ids, "end_date") == ["c2", "c1", "c3"]

    def test_category_then_anything(self, sorter, keys):
        ordered = sorter.sorted_ids(keys.all_ids, "challenge_type", "desc")
        assert ordered[0] == "c2"

    def test_title_sort_is_case_sensitive(self, index, make_challenge, keys):
        index.upsert(make_challenge(challenge_id="lower", name="apple"))
        index.upsert(make_challenge(challenge_id="upper", name="Zebra"))
        assert index.sorter.sorted_ids(keys.all_ids, "title") == ["upper", "lower"]

    def test_without_sort_returns_members(self, sorter, keys):
        assert sorted(sorter.sorted_ids(keys.all_ids)) == ["c1", "c2", "c3"]


class TestMaterialize:
    def test_keeps_order(self, sorter):
        results = sorter.materialize(["c3", "c1"])
        assert [c.challenge_id for c in results] == ["c3", "c1"]
        assert results[0].name == "Cherry Cloud"

    def test_skips_ids_without_raw_data(self, sorter, fake_redis, keys):
        fake_redis.hdel(keys.raw_data, "c2")
        results = sorter.materialize(["c1", "c2", "c3"])
        assert [c.challenge_id for c in results] == ["c1", "c3"]

    def test_empty(self, sorter):
        assert sorter.materialize([]) == []
