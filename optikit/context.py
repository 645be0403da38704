"""Per-invocation state shared by all commands."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer

from .config.settings import OptikitConfig
from .services.backup_service import BackupService
from .services.shell import ShellExecutor, flutter_command
from .services.version_service import VersionPatcher
from .utils.dry_run import DryRunJournal


@dataclass(frozen=True)
class AppContext:
    """Built once by the root callback and stored in `ctx.obj`.

    Commands never read global state; everything they need is here.
    """

    config: OptikitConfig
    project_root: Path
    dry_run: bool = False
    journal: DryRunJournal = field(default_factory=DryRunJournal)

    def use_fvm(self, disable_fvm: bool = False) -> bool:
        return self.config.use_fvm_by_default and not disable_fvm

    def flutter(self, base_command: str, disable_fvm: bool = False) -> str:
        return flutter_command(base_command, self.use_fvm(disable_fvm))

    def executor(self, cwd: Optional[Path] = None) -> ShellExecutor:
        return ShellExecutor(
            cwd=cwd or self.project_root,
            dry_run=self.dry_run,
            journal=self.journal,
        )

    def backups(self) -> BackupService:
        return BackupService(dry_run=self.dry_run, journal=self.journal)

    def version_patcher(self) -> VersionPatcher:
        return VersionPatcher(self.project_root, dry_run=self.dry_run, journal=self.journal)


def get_app_context(ctx: typer.Context) -> AppContext:
    """Fetch the AppContext, walking up to the root command's context."""
    root = ctx.find_root()
    if not isinstance(root.obj, AppContext):
        raise RuntimeError("optikit context was not initialised")
    return root.obj
