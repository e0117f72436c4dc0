"""Tests for the broadcast-identifier handoff store."""

from pathlib import Path

import pytest

from streamlauncher.handoff import HandoffStore
from streamlauncher.utils.errors import HandoffReadError


class TestHandoffStore:
    """Tests for HandoffStore."""

    def test_write_then_read(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "state" / "broadcast_id.txt")

        store.write("abc123")

        assert store.read() == "abc123"

    def test_last_write_wins(self, tmp_path: Path) -> None:
        """Test a second write replaces the first."""
        store = HandoffStore(tmp_path / "broadcast_id.txt")

        store.write("first")
        store.write("second")

        assert store.read() == "second"
        assert not (tmp_path / "broadcast_id.txt.tmp").exists()

    def test_read_missing_or_empty(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "broadcast_id.txt")
        assert store.read() is None

        store.path.write_text("  \n")
        assert store.read() is None

    def test_read_strips_whitespace(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "broadcast_id.txt")
        store.path.write_text("abc123\r\n")
        assert store.read() == "abc123"

    def test_read_error(self, tmp_path: Path) -> None:
        """Test an unreadable path raises HandoffReadError."""
        path = tmp_path / "broadcast_id.txt"
        path.mkdir()

        with pytest.raises(HandoffReadError):
            HandoffStore(path).read()


class TestResolve:
    """Tests for HandoffStore.resolve."""

    def test_explicit_wins(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "broadcast_id.txt")
        store.write("stored")
        assert store.resolve("explicit") == "explicit"

    def test_falls_back_to_stored(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "broadcast_id.txt")
        store.write("stored")
        assert store.resolve(None) == "stored"
        assert store.resolve("  ") == "stored"

    def test_nothing_available(self, tmp_path: Path) -> None:
        store = HandoffStore(tmp_path / "broadcast_id.txt")
        with pytest.raises(HandoffReadError, match="No broadcast ID provided"):
            store.resolve()
