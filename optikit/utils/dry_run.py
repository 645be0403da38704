"""Dry-run journal: records operations instead of performing them."""

from dataclasses import dataclass, field
from typing import List, Optional

from .output import console, rule


@dataclass
class DryRunOperation:
    """A command or file operation that would have been performed."""

    kind: str  # "command" or "file"
    description: str
    target: str
    details: Optional[str] = None


@dataclass
class DryRunJournal:
    """Collects the operations skipped while dry-run mode is active."""

    operations: List[DryRunOperation] = field(default_factory=list)

    def log_command(self, description: str, command: str, details: Optional[str] = None) -> None:
        self._record(DryRunOperation("command", description, command, details), "Command")

    def log_file_operation(self, operation: str, path: str, details: Optional[str] = None) -> None:
        self._record(DryRunOperation("file", operation, path, details), "File")

    def _record(self, op: DryRunOperation, label: str) -> None:
        self.operations.append(op)
        console.print(f"[cyan]→[/cyan] [bold]{op.description}[/bold]")
        console.print(f"[dim]  {label}:[/dim] {op.target}")
        if op.details:
            console.print(f"[dim]  Details:[/dim] {op.details}")
        console.print()

    @property
    def commands(self) -> List[DryRunOperation]:
        return [op for op in self.operations if op.kind == "command"]

    @property
    def files(self) -> List[DryRunOperation]:
        return [op for op in self.operations if op.kind == "file"]

    def display_summary(self) -> None:
        """Print totals of what was skipped. Silent when nothing was recorded."""
        if not self.operations:
            return

        console.print()
        rule()
        console.print("[bold yellow]DRY-RUN SUMMARY[/bold yellow]")
        rule()
        console.print(f"\nTotal operations: {len(self.operations)}")
        console.print(f"  Commands: {len(self.commands)}")
        console.print(f"  File operations: {len(self.files)}")
        console.print()
        rule()
        console.print("[dim]No actual changes were made to your system.[/dim]")
        console.print("[dim]Run without --dry-run to execute these operations.[/dim]\n")
