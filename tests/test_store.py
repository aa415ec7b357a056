"""Tests for lock marker stores."""

import errno
import os
from pathlib import Path

import pytest

from emacs_lockfile import LockStoreError
from emacs_lockfile.core import FileSystemLockStore, MarkerKind, MemoryLockStore


def _unsupported_symlink(src: str, dst: str) -> None:
    del src, dst
    raise OSError(errno.EPERM, "Operation not permitted")


class TestFileSystemRead:
    """Tests for FileSystemLockStore.read."""

    def test_missing_marker(self, tmp_path: Path) -> None:
        assert FileSystemLockStore().read(str(tmp_path / ".#x")) is None

    def test_reads_dangling_symlink_target(self, tmp_path: Path) -> None:
        """Emacs markers are dangling symlinks; the target is the content."""
        marker = tmp_path / ".#x"
        os.symlink("alice@ws.12:34", marker)
        assert FileSystemLockStore().read(str(marker)) == "alice@ws.12:34"

    def test_reads_regular_file(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        marker.write_text("alice@ws.12\n")
        assert FileSystemLockStore().read(str(marker)) == "alice@ws.12\n"

    def test_unreadable_marker_is_an_error(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        marker.mkdir()
        with pytest.raises(LockStoreError, match="Can't read file") as exc_info:
            FileSystemLockStore().read(str(marker))
        assert exc_info.value.path == str(marker)
        assert isinstance(exc_info.value.original_error, OSError)


class TestFileSystemCreate:
    """Tests for FileSystemLockStore.create."""

    def test_creates_symlink(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        assert FileSystemLockStore().create(str(marker), "alice@ws.12") is True
        assert marker.is_symlink()
        assert os.readlink(marker) == "alice@ws.12"

    def test_does_not_overwrite(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        store = FileSystemLockStore()
        assert store.create(str(marker), "alice@ws.12") is True
        assert store.create(str(marker), "bob@ws.13") is False
        assert os.readlink(marker) == "alice@ws.12"

    def test_does_not_overwrite_regular_file_marker(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        marker.write_text("bob@ws.13")
        assert FileSystemLockStore().create(str(marker), "alice@ws.12") is False
        assert marker.read_text() == "bob@ws.13"

    def test_file_kind_writes_regular_file(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        store = FileSystemLockStore(MarkerKind.FILE)
        assert store.create(str(marker), "alice@ws.12:5") is True
        assert not marker.is_symlink()
        assert marker.read_text() == "alice@ws.12:5"
        assert store.create(str(marker), "bob@ws.13") is False

    def test_falls_back_to_file_when_symlinks_unsupported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(os, "symlink", _unsupported_symlink)
        marker = tmp_path / ".#x"
        store = FileSystemLockStore()
        assert store.create(str(marker), "alice@ws.12") is True
        assert marker.read_text() == "alice@ws.12"
        assert store.read(str(marker)) == "alice@ws.12"
        assert store.create(str(marker), "bob@ws.13") is False

    def test_falls_back_when_symlink_not_implemented(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _not_implemented(src: str, dst: str) -> None:
            raise NotImplementedError("no symlinks here")

        monkeypatch.setattr(os, "symlink", _not_implemented)
        marker = tmp_path / ".#x"
        assert FileSystemLockStore().create(str(marker), "alice@ws.12") is True
        assert marker.read_text() == "alice@ws.12"

    def test_symlink_kind_does_not_fall_back(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(os, "symlink", _unsupported_symlink)
        marker = tmp_path / ".#x"
        with pytest.raises(LockStoreError, match="Can't create lock symlink"):
            FileSystemLockStore(MarkerKind.SYMLINK).create(str(marker), "alice@ws.12")
        assert not marker.exists()

    def test_permission_errors_are_not_fallback(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _denied(src: str, dst: str) -> None:
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(os, "symlink", _denied)
        marker = tmp_path / ".#x"
        with pytest.raises(LockStoreError, match="Permission denied"):
            FileSystemLockStore().create(str(marker), "alice@ws.12")
        assert not marker.exists()

    def test_missing_directory_is_an_error(self, tmp_path: Path) -> None:
        marker = tmp_path / "missing" / ".#x"
        with pytest.raises(LockStoreError, match="Can't create lock file"):
            FileSystemLockStore().create(str(marker), "alice@ws.12")

    def test_accepts_kind_name(self) -> None:
        assert FileSystemLockStore("file").marker_kind is MarkerKind.FILE


class TestFileSystemRemove:
    """Tests for FileSystemLockStore.remove and target_exists."""

    def test_removes_symlink_marker(self, tmp_path: Path) -> None:
        marker = tmp_path / ".#x"
        os.symlink("alice@ws.12", marker)
        FileSystemLockStore().remove(str(marker))
        assert not marker.is_symlink()

    def test_remove_missing_marker_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(LockStoreError, match="Can't remove lock file"):
            FileSystemLockStore().remove(str(tmp_path / ".#x"))

    def test_target_exists(self, tmp_path: Path) -> None:
        target = tmp_path / "x"
        store = FileSystemLockStore()
        assert store.target_exists(str(target)) is False
        target.write_text("")
        assert store.target_exists(str(target)) is True
        assert store.target_exists(str(tmp_path)) is False


class TestMemoryLockStore:
    """Tests for MemoryLockStore."""

    def test_create_is_exclusive(self) -> None:
        store = MemoryLockStore()
        assert store.create(".#x", "a@h.1") is True
        assert store.create(".#x", "b@h.2") is False
        assert store.read(".#x") == "a@h.1"

    def test_remove_and_hook(self) -> None:
        removed: list[str] = []
        store = MemoryLockStore(markers={".#x": "a@h.1"})
        store.after_remove = removed.append
        store.remove(".#x")
        assert store.read(".#x") is None
        assert removed == [".#x"]

    def test_remove_missing(self) -> None:
        with pytest.raises(LockStoreError, match="No such file"):
            MemoryLockStore().remove(".#x")

    def test_injected_failures(self) -> None:
        store = MemoryLockStore()
        store.failures["read"] = "Can't read file: Permission denied"
        with pytest.raises(LockStoreError, match="Permission denied"):
            store.read(".#x")

    def test_targets(self) -> None:
        store = MemoryLockStore(targets=["x"])
        assert store.target_exists("x")
        assert not store.target_exists("y")
