"""
Tests for core utility helpers.
"""

from core.utils import (
    as_text,
    content_hash,
    format_number,
    is_blank,
    merge_dicts,
    normalize_string_list,
)


class TestIsBlank:
    def test_blank_values(self):
        for value in (None, "", "   ", [], (), {}, set(), ["", None], {"min": None, "max": ""}):
            assert is_blank(value), value

    def test_present_values(self):
        for value in (0, 0.0, False, "x", ["", "x"], {"min": 0}):
            assert not is_blank(value), value


class TestNormalize:
    def test_string_list_drops_blanks(self):
        assert normalize_string_list(["Ruby", " ruby ", None, ""]) == ["ruby"]

    def test_string_list_keeps_order(self):
        assert normalize_string_list(["AWS", "Heroku", "aws"]) == ["aws", "heroku"]


class TestFormatNumber:
    def test_integral_float(self):
        assert format_number(1500.0) == "1500"

    def test_fraction(self):
        assert format_number(2.5) == "2.5"

    def test_int(self):
        assert format_number(7) == "7"


class TestContentHash:
    def test_dict_order_irrelevant(self):
        assert content_hash({"a": 1, "b": [1, 2]}) == content_hash({"b": [1, 2], "a": 1})

    def test_list_order_relevant(self):
        assert content_hash([1, 2]) != content_hash([2, 1])


def test_merge_dicts_skips_none():
    assert merge_dicts({"a": 1}, None, {"a": 2, "b": 3}) == {"a": 2, "b": 3}


def test_as_text_decodes_bytes():
    assert as_text(b"c1") == "c1"
    assert as_text("c1") == "c1"
