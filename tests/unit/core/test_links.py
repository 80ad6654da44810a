"""Unit tests for the link index."""

import json
from pathlib import Path

from vaultunit.core.links import LinkIndex, get_links_path
from vaultunit.models.item import LinkRecord


class TestLinkIndexLoad:
    """Tests for LinkIndex.load."""

    def test_missing_file_is_empty(self, vault: Path) -> None:
        """No index file means no links."""
        index = LinkIndex.load(str(vault))
        assert len(index) == 0

    def test_reads_records(self, vault: Path) -> None:
        """Stored records are available by original path."""
        Path(get_links_path(str(vault))).write_text(
            json.dumps({"a/link": {"target": "real", "target_path": "a/real"}})
        )

        index = LinkIndex.load(str(vault))

        assert index.get("a/link") == LinkRecord(target="real", target_path="a/real")
        assert "a/link" in index

    def test_invalid_json_is_empty(self, vault: Path) -> None:
        """A corrupt file is treated as no prior links."""
        Path(get_links_path(str(vault))).write_text("{not json")

        index = LinkIndex.load(str(vault))

        assert len(index) == 0

    def test_non_object_is_empty(self, vault: Path) -> None:
        """A JSON array is treated as no prior links."""
        Path(get_links_path(str(vault))).write_text("[1, 2]")
        assert len(LinkIndex.load(str(vault))) == 0

    def test_malformed_record_skipped(self, vault: Path) -> None:
        """Malformed records are skipped, valid ones kept."""
        Path(get_links_path(str(vault))).write_text(
            json.dumps(
                {
                    "good": {"target": "t", "target_path": "t"},
                    "bad": {"target": 1},
                    "worse": "string",
                }
            )
        )

        index = LinkIndex.load(str(vault))

        assert len(index) == 1
        assert index.get("good") is not None

    def test_custom_prefix(self, vault: Path) -> None:
        """The file name follows the configured prefix."""
        (vault / ".test.links").write_text(
            json.dumps({"x": {"target": "y", "target_path": "y"}})
        )

        assert len(LinkIndex.load(str(vault), prefix=".test")) == 1
        assert len(LinkIndex.load(str(vault))) == 0


class TestLinkIndexUpdate:
    """Tests for add/get/save."""

    def test_get_absent(self, vault: Path) -> None:
        """get() returns None for unknown paths."""
        assert LinkIndex(str(vault)).get("nope") is None

    def test_add_replaces_existing(self, vault: Path) -> None:
        """add() upserts by path."""
        index = LinkIndex(str(vault))
        index.add("a", LinkRecord(target="old", target_path="old"))
        index.add("a", LinkRecord(target="new", target_path="new"))

        assert len(index) == 1
        assert index.get("a") == LinkRecord(target="new", target_path="new")

    def test_save_empty_writes_nothing(self, vault: Path) -> None:
        """An empty index creates no file."""
        index = LinkIndex(str(vault))

        assert index.save() is False
        assert not Path(index.path).exists()

    def test_save_writes_json_object(self, vault: Path) -> None:
        """save() writes the documented JSON shape."""
        index = LinkIndex(str(vault))
        index.add("a/link", LinkRecord(target="../b", target_path="b"))

        assert index.save() is True

        data = json.loads(Path(index.path).read_text())
        assert data == {"a/link": {"target": "../b", "target_path": "b"}}
        assert not list(vault.glob("*.tmp"))

    def test_save_then_load(self, vault: Path) -> None:
        """Records survive a save/load cycle with earlier records kept."""
        first = LinkIndex(str(vault))
        first.add("one", LinkRecord(target="1", target_path="1"))
        first.save()

        second = LinkIndex.load(str(vault))
        second.add("two", LinkRecord(target="2", target_path="2"))
        second.save()

        loaded = LinkIndex.load(str(vault))
        assert [path for path, _ in loaded.items()] == ["one", "two"]
