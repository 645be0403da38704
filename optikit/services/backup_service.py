"""Backup service for optikit.

Before a destructive edit, a file is copied into a hidden `.optikit-backup`
folder next to it, under a name carrying the UTC instant of the copy:

    pubspec.lock -> .optikit-backup/pubspec_2024-03-02T10-15-30-123Z.lock

Snapshots of the same file accumulate and are only removed by an explicit
`cleanup_backups()` call. The filesystem is the only record: timestamps and
sizes come from `stat()`, and the numbered listing used by `rollback` is
recomputed from a fresh scan every time. An index is therefore only
meaningful while the backup folders stay unchanged between listing and
restoring.
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..config.constants import BACKUP_DIR_NAME, BACKUP_RETENTION_COUNT
from ..exceptions import BackupIndexError
from ..utils import output
from ..utils.dry_run import DryRunJournal

logger = logging.getLogger(__name__)

# name_2024-03-02T10-15-30-123Z.ext -> ("name", ".ext")
BACKUP_NAME_PATTERN = re.compile(r"^(.+)_\d{4}-\d{2}-\d{2}T[\d-]+Z(\.\w+)$")

SKIPPED_DIRS = ("node_modules",)


@dataclass(frozen=True)
class BackupEntry:
    """One snapshot file, described by what the filesystem reports about it."""

    backup_path: Path
    timestamp: datetime
    size: int

    @classmethod
    def from_path(cls, backup_path: Path) -> BackupEntry:
        stat = backup_path.stat()
        return cls(
            backup_path=backup_path,
            timestamp=datetime.fromtimestamp(stat.st_mtime),
            size=stat.st_size,
        )

    @property
    def original_path(self) -> Path:
        return original_path_for(self.backup_path)


@dataclass(frozen=True)
class IndexedBackup:
    """A numbered row of the rollback listing (indices start at 1)."""

    index: int
    original_path: Path
    entry: BackupEntry


def format_backup_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC instant with millisecond precision, made filesystem safe.

    >>> format_backup_timestamp(datetime(2024, 3, 2, 10, 15, 30, 123000, tzinfo=timezone.utc))
    '2024-03-02T10-15-30-123Z'
    """
    moment = moment.astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def backup_dir_for(file_path: Path) -> Path:
    """The backup folder that holds snapshots of `file_path`."""
    return Path(file_path).parent / BACKUP_DIR_NAME


def backup_name_for(file_path: Path, moment: datetime) -> str:
    file_path = Path(file_path)
    return f"{file_path.stem}_{format_backup_timestamp(moment)}{file_path.suffix}"


def original_path_for(backup_path: Path) -> Path:
    """Recover the path a snapshot was taken from.

    Names that do not follow the snapshot pattern map to a file of the same
    name in the parent of the backup folder.
    """
    backup_path = Path(backup_path)
    original_dir = backup_path.parent.parent
    match = BACKUP_NAME_PATTERN.match(backup_path.name)
    if match:
        base_name, extension = match.groups()
        return original_dir / f"{base_name}{extension}"
    return original_dir / backup_path.name


def find_all_backups(root: Path) -> List[BackupEntry]:
    """Collect every snapshot under `root`.

    Hidden directories and node_modules are not descended into, except for
    the backup folders themselves. Siblings are visited in name order.
    """
    backups: List[BackupEntry] = []

    def search(directory: Path) -> None:
        try:
            children = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Skipping unreadable directory {directory}: {e}")
            return

        for child in children:
            if child.is_symlink() or not child.is_dir():
                continue
            if child.name == BACKUP_DIR_NAME:
                for backup_file in sorted(child.iterdir(), key=lambda p: p.name):
                    if backup_file.is_file():
                        backups.append(BackupEntry.from_path(backup_file))
            elif not child.name.startswith(".") and child.name not in SKIPPED_DIRS:
                search(child)

    search(Path(root))
    return backups


def group_backups(entries: List[BackupEntry]) -> Dict[Path, List[BackupEntry]]:
    """Group snapshots by original file (first-seen order), newest first within each."""
    groups: Dict[Path, List[BackupEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.original_path, []).append(entry)
    for group in groups.values():
        group.sort(key=lambda e: e.timestamp, reverse=True)
    return groups


def list_indexed_backups(root: Path) -> List[IndexedBackup]:
    """Number every snapshot under `root` in grouped, newest-first order."""
    indexed: List[IndexedBackup] = []
    for original, group in group_backups(find_all_backups(root)).items():
        for entry in group:
            indexed.append(IndexedBackup(len(indexed) + 1, original, entry))
    return indexed


class BackupService:
    """Creates, restores and trims snapshots."""

    def __init__(
        self,
        dry_run: bool = False,
        journal: Optional[DryRunJournal] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
    ) -> None:
        self.dry_run = dry_run
        self.journal = journal if journal is not None else DryRunJournal()
        self.clock = clock

    def create_backup(self, file_path: Path) -> Optional[Path]:
        """Copy `file_path` into its backup folder.

        Returns the snapshot path, or None when the file does not exist or
        the copy failed. The original file is never touched.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            output.warning(f"File does not exist, skipping backup: {file_path}")
            return None

        backup_path = backup_dir_for(file_path) / backup_name_for(file_path, self.clock())

        if self.dry_run:
            self.journal.log_file_operation("Create backup", str(file_path), f"to {backup_path}")
            return backup_path

        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(file_path, backup_path)
        except OSError as e:
            output.error(f"Failed to create backup: {e}")
            return None

        output.info(f"Backup created: {backup_path}")
        return backup_path

    def restore_backup(self, original_path: Path, backup_path: Path) -> bool:
        """Overwrite `original_path` with the snapshot content."""
        original_path = Path(original_path)
        backup_path = Path(backup_path)
        if not backup_path.exists():
            output.error(f"Backup file not found: {backup_path}")
            return False

        if self.dry_run:
            self.journal.log_file_operation("Restore backup", str(original_path), f"from {backup_path}")
            return True

        try:
            shutil.copyfile(backup_path, original_path)
        except OSError as e:
            output.error(f"Failed to restore backup: {e}")
            return False

        output.success(f"Restored from backup: {original_path}")
        return True

    def restore_index(self, root: Path, index: int) -> IndexedBackup:
        """Restore the snapshot numbered `index` in the current listing of `root`.

        Raises:
            BackupIndexError: If `index` is outside 1..len(listing).
        """
        listing = list_indexed_backups(root)
        if index < 1 or index > len(listing):
            raise BackupIndexError(index, len(listing))

        chosen = listing[index - 1]
        if not self.restore_backup(chosen.original_path, chosen.entry.backup_path):
            raise OSError(f"Could not restore {chosen.original_path}")
        return chosen

    def cleanup_backups(self, directory: Path, keep_count: int = BACKUP_RETENTION_COUNT) -> int:
        """Keep only the `keep_count` most recently modified snapshots in `directory`.

        Returns the number of snapshots deleted.
        """
        backup_dir = Path(directory) / BACKUP_DIR_NAME
        if not backup_dir.exists():
            return 0

        snapshots = sorted(
            (p for p in backup_dir.iterdir() if p.is_file()),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )

        removed = 0
        for stale in snapshots[max(keep_count, 0):]:
            if self.dry_run:
                self.journal.log_file_operation("Delete old backup", str(stale))
                removed += 1
                continue
            try:
                stale.unlink()
                removed += 1
                output.info(f"Cleaned up old backup: {stale.name}")
            except OSError as e:
                output.warning(f"Failed to cleanup backup {stale.name}: {e}")

        return removed
