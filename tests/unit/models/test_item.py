"""Unit tests for transfer item models.

Tests PathItem derivation, LinkRecord serialization and stage results.
"""

import pytest
from vaultunit.core.errors import MissingSourceError
from vaultunit.models.item import (
    LinkRecord,
    Outcome,
    PathItem,
    dropped,
    failure,
    included,
)


class TestPathItem:
    """Tests for PathItem dataclass."""

    def test_create_derives_full_path(self) -> None:
        """create() joins the root and the relative path."""
        item = PathItem.create(".config/app", "/home/user")

        assert item.full_path == "/home/user/.config/app"
        assert item.root_path == "/home/user"
        assert item.required is False
        assert item.overwrite is None
        assert item.skip is False
        assert item.src is None

    def test_empty_path_rejected(self) -> None:
        """An empty path is invalid."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PathItem(path="", full_path="/home/user", root_path="/home/user")

    def test_relocate_keeps_flags(self) -> None:
        """relocate() rewrites paths but keeps root and flags."""
        item = PathItem.create("a/link", "/home/user", required=True, overwrite=False)

        moved = item.relocate("a/real")

        assert moved.path == "a/real"
        assert moved.full_path == "/home/user/a/real"
        assert moved.required is True
        assert moved.overwrite is False
        assert item.path == "a/link"

    def test_relocate_with_explicit_full_path(self) -> None:
        """relocate() accepts an explicit full path."""
        item = PathItem.create("a/link", "/home/user")

        moved = item.relocate("a/real", "/home/user/a/real")

        assert moved.full_path == "/home/user/a/real"

    def test_with_source_clears_skip(self) -> None:
        """with_source() attaches the source and includes the item."""
        item = PathItem.create("a", "/home/user").skipped()

        sourced = item.with_source("/vault/a")

        assert sourced.src == "/vault/a"
        assert sourced.skip is False

    def test_item_is_frozen(self) -> None:
        """PathItem is immutable."""
        item = PathItem.create("a", "/home/user")
        with pytest.raises(AttributeError):
            item.skip = True  # type: ignore[misc]


class TestLinkRecord:
    """Tests for LinkRecord serialization."""

    def test_to_dict_uses_index_keys(self) -> None:
        """to_dict() produces the link index JSON shape."""
        record = LinkRecord(target="../real", target_path="a/real")
        assert record.to_dict() == {"target": "../real", "target_path": "a/real"}

    def test_from_dict(self) -> None:
        """from_dict() reads both fields."""
        record = LinkRecord.from_dict({"target": "real", "target_path": "a/real"})
        assert record == LinkRecord(target="real", target_path="a/real")

    def test_from_dict_missing_field(self) -> None:
        """from_dict() rejects records without target_path."""
        with pytest.raises(ValueError, match="Invalid link record"):
            LinkRecord.from_dict({"target": "real"})


class TestItemResults:
    """Tests for stage result builders."""

    def test_included(self) -> None:
        """included() marks the item as passing."""
        item = PathItem.create("a", "/home/user")
        result = included(item)
        assert result.outcome == Outcome.INCLUDED
        assert result.included is True

    def test_dropped(self) -> None:
        """dropped() has no error attached."""
        item = PathItem.create("a", "/home/user")
        result = dropped(item, "skipped")
        assert result.outcome == Outcome.DROPPED
        assert result.error is None
        assert result.reason == "skipped"

    def test_failure_of_required_item_fails(self) -> None:
        """A required item's error is a FAILED outcome."""
        item = PathItem.create("a", "/home/user", required=True)
        error = MissingSourceError("missing", path="/home/user/a")

        result = failure(item, error)

        assert result.outcome == Outcome.FAILED
        assert result.error is error

    def test_failure_of_optional_item_drops(self) -> None:
        """An optional item's error is a DROPPED outcome."""
        item = PathItem.create("a", "/home/user")
        error = MissingSourceError("missing", path="/home/user/a")

        result = failure(item, error)

        assert result.outcome == Outcome.DROPPED
        assert result.error is error
