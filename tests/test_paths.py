"""Tests for path get/set helpers."""

from dataclasses import dataclass

import pytest

from denormalizer.core.paths import get_path, set_path


class TestGetPath:
    def test_top_level(self):
        assert get_path(["author"], {"author": "peter"}) == "peter"

    def test_nested(self):
        item = {"nestedData": {"comments": ["a", "b"]}}
        assert get_path(["nestedData", "comments"], item) == ["a", "b"]

    def test_list_index(self):
        assert get_path(["rows", "1", "id"], {"rows": [{"id": 1}, {"id": 2}]}) == 2

    def test_missing_intermediate_returns_none(self):
        assert get_path(["nestedData", "comments"], {"id": "x"}) is None
        assert get_path(["a", "b", "c"], {"a": None}) is None
        assert get_path(["rows", "5"], {"rows": []}) is None

    def test_attribute_access(self):
        @dataclass
        class Message:
            author: str

        assert get_path(["author"], Message(author="peter")) == "peter"


class TestSetPath:
    def test_does_not_mutate_input(self):
        item = {"id": "x", "nestedData": {"comments": ["a"], "flag": True}}
        updated = set_path(["nestedData", "comments"], [{"id": "a"}], item)

        assert updated == {"id": "x", "nestedData": {"comments": [{"id": "a"}], "flag": True}}
        assert item == {"id": "x", "nestedData": {"comments": ["a"], "flag": True}}

    def test_shares_structure_outside_path(self):
        other = {"deep": [1, 2]}
        item = {"author": "peter", "other": other}
        updated = set_path(["author"], {"id": "peter"}, item)

        assert updated is not item
        assert updated["other"] is other

    def test_list_segment(self):
        item = {"rows": [{"owner": "a"}, {"owner": "b"}]}
        updated = set_path(["rows", "1", "owner"], {"id": "b"}, item)

        assert updated["rows"][1] == {"owner": {"id": "b"}}
        assert updated["rows"][0] is item["rows"][0]
        assert item["rows"][1] == {"owner": "b"}

    def test_dataclass_is_replaced(self):
        @dataclass(frozen=True)
        class Message:
            id: str
            author: object

        message = Message(id="x", author="peter")
        updated = set_path(["author"], {"id": "peter"}, message)

        assert updated == Message(id="x", author={"id": "peter"})
        assert message.author == "peter"

    def test_empty_path_returns_value(self):
        assert set_path([], 1, {"a": 2}) == 1

    def test_missing_intermediate_raises(self):
        with pytest.raises(KeyError):
            set_path(["nestedData", "comments"], [], {"id": "x"})
