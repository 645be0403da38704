"""Shared console output utilities."""

from rich.console import Console

# Shared console instance for all CLI output
console = Console(highlight=False)


def info(message: str) -> None:
    console.print(f"[blue]ℹ[/blue] {message}")


def success(message: str) -> None:
    console.print(f"[green]✔[/green] {message}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠ {message}[/yellow]")


def error(message: str) -> None:
    console.print(f"[red]✖ {message}[/red]")


def rule(style: str = "yellow") -> None:
    console.print(f"[{style}]{'=' * 60}[/{style}]")

