"""Tests for the backup service."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest

from optikit.exceptions import BackupIndexError
from optikit.services.backup_service import (
    BackupService,
    find_all_backups,
    format_backup_timestamp,
    group_backups,
    list_indexed_backups,
    original_path_for,
)
from optikit.utils.dry_run import DryRunJournal

FIXED_NOW = datetime(2024, 3, 2, 10, 15, 30, 123000, tzinfo=timezone.utc)

# ── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def svc() -> BackupService:
    return BackupService(clock=lambda: FIXED_NOW)


def make_snapshot(folder: Path, name: str, content: str, mtime: float) -> Path:
    """Write a snapshot file with a controlled modification time."""
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def populated(tmp_path: Path) -> Path:
    """Three snapshots of a.txt and two of b.txt in one backup folder."""
    folder = tmp_path / ".optikit-backup"
    base = 1_700_000_000
    make_snapshot(folder, "a_2024-01-01T00-00-00-000Z.txt", "a1", base + 10)
    make_snapshot(folder, "a_2024-01-02T00-00-00-000Z.txt", "a2", base + 30)
    make_snapshot(folder, "a_2024-01-03T00-00-00-000Z.txt", "a3", base + 20)
    make_snapshot(folder, "b_2024-01-01T00-00-00-000Z.txt", "b1", base + 5)
    make_snapshot(folder, "b_2024-01-02T00-00-00-000Z.txt", "b2", base + 50)
    return tmp_path


# ── Naming ──────────────────────────────────────────────────────────


class TestNaming:
    def test_timestamp_is_filesystem_safe(self):
        assert format_backup_timestamp(FIXED_NOW) == "2024-03-02T10-15-30-123Z"

    def test_original_path_strips_timestamp(self, tmp_path: Path):
        backup = tmp_path / ".optikit-backup" / "pubspec_2024-03-02T10-15-30-123Z.lock"
        assert original_path_for(backup) == tmp_path / "pubspec.lock"

    def test_original_path_keeps_underscores_in_name(self, tmp_path: Path):
        backup = tmp_path / ".optikit-backup" / "my_file_2024-03-02T10-15-30-123Z.yaml"
        assert original_path_for(backup) == tmp_path / "my_file.yaml"

    def test_non_matching_name_falls_back_to_whole_name(self, tmp_path: Path):
        backup = tmp_path / ".optikit-backup" / "notes.txt"
        assert original_path_for(backup) == tmp_path / "notes.txt"


# ── BackupService ───────────────────────────────────────────────────


class TestCreateBackup:
    def test_creates_named_snapshot_in_sibling_folder(self, svc: BackupService, tmp_path: Path):
        original = tmp_path / "pubspec.lock"
        original.write_text("packages: {}\n")

        backup = svc.create_backup(original)

        assert backup == tmp_path / ".optikit-backup" / "pubspec_2024-03-02T10-15-30-123Z.lock"
        assert backup.read_text() == "packages: {}\n"
        assert original.read_text() == "packages: {}\n"

    def test_nonexistent_file_returns_none_and_writes_nothing(self, svc: BackupService, tmp_path: Path):
        assert svc.create_backup(tmp_path / "missing.lock") is None
        assert not (tmp_path / ".optikit-backup").exists()

    def test_snapshots_accumulate(self, tmp_path: Path):
        original = tmp_path / "pubspec.lock"
        original.write_text("v1")
        moments = iter(
            [
                datetime(2024, 3, 2, 10, 0, 0, tzinfo=timezone.utc),
                datetime(2024, 3, 2, 11, 0, 0, tzinfo=timezone.utc),
            ]
        )
        svc = BackupService(clock=lambda: next(moments))

        first = svc.create_backup(original)
        original.write_text("v2")
        second = svc.create_backup(original)

        assert first != second
        assert first.read_text() == "v1"
        assert second.read_text() == "v2"

    def test_dry_run_records_without_writing(self, tmp_path: Path):
        original = tmp_path / "pubspec.lock"
        original.write_text("x")
        journal = DryRunJournal()
        svc = BackupService(dry_run=True, journal=journal, clock=lambda: FIXED_NOW)

        backup = svc.create_backup(original)

        assert backup is not None and not backup.exists()
        assert not (tmp_path / ".optikit-backup").exists()
        assert len(journal.files) == 1


class TestRestoreBackup:
    def test_round_trip_reproduces_bytes(self, svc: BackupService, tmp_path: Path):
        original = tmp_path / "Info.plist"
        payload = b"<plist>\x00\xff binary-ish \r\n</plist>"
        original.write_bytes(payload)

        backup = svc.create_backup(original)
        original.write_bytes(b"clobbered")

        assert svc.restore_backup(original, backup) is True
        assert original.read_bytes() == payload

    def test_missing_backup_returns_false(self, svc: BackupService, tmp_path: Path):
        original = tmp_path / "pubspec.lock"
        original.write_text("keep")

        assert svc.restore_backup(original, tmp_path / ".optikit-backup" / "nope.lock") is False
        assert original.read_text() == "keep"

    def test_restore_creates_original_if_deleted(self, svc: BackupService, tmp_path: Path):
        original = tmp_path / "pubspec.lock"
        original.write_text("content")
        backup = svc.create_backup(original)
        original.unlink()

        assert svc.restore_backup(original, backup) is True
        assert original.read_text() == "content"


class TestCleanupBackups:
    def test_keeps_most_recent(self, svc: BackupService, tmp_path: Path):
        folder = tmp_path / ".optikit-backup"
        base = 1_700_000_000
        for i in range(5):
            make_snapshot(folder, f"f_2024-01-0{i + 1}T00-00-00-000Z.txt", str(i), base + i * 100)

        removed = svc.cleanup_backups(tmp_path, keep_count=2)

        assert removed == 3
        remaining = sorted(p.name for p in folder.iterdir())
        assert remaining == ["f_2024-01-04T00-00-00-000Z.txt", "f_2024-01-05T00-00-00-000Z.txt"]

    def test_missing_folder_is_noop(self, svc: BackupService, tmp_path: Path):
        assert svc.cleanup_backups(tmp_path) == 0

    def test_fewer_than_keep_count(self, svc: BackupService, tmp_path: Path):
        make_snapshot(tmp_path / ".optikit-backup", "f_2024-01-01T00-00-00-000Z.txt", "x", 1_700_000_000)
        assert svc.cleanup_backups(tmp_path, keep_count=5) == 0

    def test_create_backup_never_prunes(self, svc: BackupService, tmp_path: Path):
        folder = tmp_path / ".optikit-backup"
        for i in range(6):
            make_snapshot(folder, f"f_2024-01-0{i + 1}T00-00-00-000Z.txt", str(i), 1_700_000_000 + i)
        original = tmp_path / "f.txt"
        original.write_text("new")

        svc.create_backup(original)

        assert len(list(folder.iterdir())) == 7

    def test_dry_run_deletes_nothing(self, tmp_path: Path):
        folder = tmp_path / ".optikit-backup"
        for i in range(4):
            make_snapshot(folder, f"f_2024-01-0{i + 1}T00-00-00-000Z.txt", str(i), 1_700_000_000 + i)
        journal = DryRunJournal()

        removed = BackupService(dry_run=True, journal=journal).cleanup_backups(tmp_path, keep_count=1)

        assert removed == 3
        assert len(list(folder.iterdir())) == 4
        assert len(journal.files) == 3


# ── Discovery and listing ───────────────────────────────────────────


class TestDiscovery:
    def test_finds_and_groups_newest_first(self, populated: Path):
        entries = find_all_backups(populated)
        assert len(entries) == 5

        groups = group_backups(entries)
        assert list(groups) == [populated / "a.txt", populated / "b.txt"]

        a_contents = [e.backup_path.read_text() for e in groups[populated / "a.txt"]]
        b_contents = [e.backup_path.read_text() for e in groups[populated / "b.txt"]]
        # Ordered by mtime, not by the name's timestamp
        assert a_contents == ["a2", "a3", "a1"]
        assert b_contents == ["b2", "b1"]

    def test_entry_reports_size(self, populated: Path):
        entry = find_all_backups(populated)[0]
        assert entry.size == 2

    def test_descends_into_nested_directories(self, tmp_path: Path):
        nested = tmp_path / "ios" / "Runner" / ".optikit-backup"
        make_snapshot(nested, "Info_2024-01-01T00-00-00-000Z.plist", "x", 1_700_000_000)

        entries = find_all_backups(tmp_path)

        assert [e.original_path for e in entries] == [tmp_path / "ios" / "Runner" / "Info.plist"]

    def test_skips_hidden_and_node_modules(self, tmp_path: Path):
        for skipped in ("node_modules", ".dart_tool", ".git"):
            make_snapshot(tmp_path / skipped / ".optikit-backup", "x_2024-01-01T00-00-00-000Z.txt", "x", 1_700_000_000)

        assert find_all_backups(tmp_path) == []

    def test_empty_project(self, tmp_path: Path):
        assert list_indexed_backups(tmp_path) == []


class TestIndexedRestore:
    def test_indices_follow_grouped_order(self, populated: Path):
        listing = list_indexed_backups(populated)

        assert [row.index for row in listing] == [1, 2, 3, 4, 5]
        assert [row.entry.backup_path.read_text() for row in listing] == ["a2", "a3", "a1", "b2", "b1"]

    def test_restore_index_one_restores_newest_of_first_group(self, tmp_path: Path, svc: BackupService):
        folder = tmp_path / ".optikit-backup"
        make_snapshot(folder, "a_2024-01-01T00-00-00-000Z.txt", "a-old", 1_700_000_000)
        make_snapshot(folder, "a_2024-01-02T00-00-00-000Z.txt", "a-new", 1_700_000_100)
        make_snapshot(folder, "b_2024-01-01T00-00-00-000Z.txt", "b-only", 1_700_000_200)

        chosen = svc.restore_index(tmp_path, 1)

        assert chosen.original_path == tmp_path / "a.txt"
        assert (tmp_path / "a.txt").read_text() == "a-new"
        assert not (tmp_path / "b.txt").exists()

    def test_list_then_restore_refer_to_same_snapshot(self, populated: Path, svc: BackupService):
        shown = list_indexed_backups(populated)[3]

        svc.restore_index(populated, 4)

        assert (populated / "b.txt").read_text() == shown.entry.backup_path.read_text()

    def test_indices_shift_when_backups_change(self, populated: Path, svc: BackupService):
        # Indices are recomputed from disk on every call; a new snapshot of a
        # file listed first renumbers everything after it.
        before = list_indexed_backups(populated)[3].entry.backup_path
        make_snapshot(populated / ".optikit-backup", "a_2024-02-01T00-00-00-000Z.txt", "a4", 1_700_000_100)

        after = list_indexed_backups(populated)[3].entry.backup_path

        assert before != after

    @pytest.mark.parametrize("index", [0, 6, -1])
    def test_out_of_range_index(self, populated: Path, svc: BackupService, index: int):
        with pytest.raises(BackupIndexError) as exc_info:
            svc.restore_index(populated, index)
        assert exc_info.value.available == 5
        assert not (populated / "a.txt").exists()
