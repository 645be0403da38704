"""Device commands: `devices`, `run` and `run-select`."""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

import typer
from rich.prompt import Prompt

from ..config import constants as c
from ..context import AppContext, get_app_context
from ..exceptions import CommandError
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.output import console
from ..utils.validation import ensure_environment

logger = logging.getLogger(__name__)

app = typer.Typer()

DISABLE_FVM = typer.Option(False, "--disable-fvm", help="Run without FVM")
RELEASE = typer.Option(False, "--release", "-r", help="Run in release mode")
FLAVOR = typer.Option(None, "--flavor", "-f", help="Build flavor to run")


@dataclass(frozen=True)
class Device:
    id: str
    name: str
    platform: str
    is_emulator: bool

    @classmethod
    def from_machine(cls, data: dict) -> "Device":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            platform=str(data.get("platform") or data.get("targetPlatform", "")),
            is_emulator=bool(data.get("emulator", False)),
        )


def get_devices(app_ctx: AppContext, disable_fvm: bool = False) -> List[Device]:
    """Parse `flutter devices --machine`. Any failure yields an empty list."""
    command = app_ctx.flutter(c.FLUTTER_DEVICES, disable_fvm)
    try:
        raw = app_ctx.executor().run_silent(command)
        return [Device.from_machine(item) for item in json.loads(raw)]
    except (CommandError, ValueError, TypeError, AttributeError) as e:
        logger.debug(f"Could not list devices: {e}")
        return []


def run_command(app_ctx: AppContext, device: Optional[str], release: bool, flavor: Optional[str], disable_fvm: bool) -> str:
    parts = [c.FLUTTER_RUN]
    if device:
        parts.append(f"--device-id {device}")
    if release:
        parts.append("--release")
    if flavor:
        parts.append(f"--flavor {flavor}")
    return app_ctx.flutter(" ".join(parts), disable_fvm)


def _print_devices(devices: List[Device], show_ids: bool) -> None:
    console.print("\n[bold]Connected Devices:[/bold]\n")
    for number, device in enumerate(devices, start=1):
        kind = "[yellow] \\[Emulator][/yellow]" if device.is_emulator else "[green] \\[Physical][/green]"
        console.print(f"[cyan]\\[{number}][/cyan] [bold]{device.name}[/bold] [dim]({device.platform})[/dim]{kind}")
        if show_ids:
            console.print(f"    [dim]ID: {device.id}[/dim]\n")


def _prepare(ctx: typer.Context, disable_fvm: bool) -> AppContext:
    app_ctx = get_app_context(ctx)
    ensure_environment(
        app_ctx.project_root,
        executor=app_ctx.executor(),
        use_fvm=app_ctx.use_fvm(disable_fvm),
        sdk=True,
    )
    return app_ctx


@app.command("devices")
@handle_cli_error("listing devices")
def devices(ctx: typer.Context, disable_fvm: bool = DISABLE_FVM):
    """List connected devices."""
    app_ctx = _prepare(ctx, disable_fvm)
    output.info("Fetching connected devices...")

    found = get_devices(app_ctx, disable_fvm)
    if not found:
        output.warning("No devices found.")
        console.print("[dim]\nMake sure you have:")
        console.print("  - A device connected via USB")
        console.print("  - An emulator/simulator running")
        console.print("  - Chrome browser for web development\n[/dim]")
        return

    _print_devices(found, show_ids=True)
    output.rule("dim")
    console.print("[dim]To run on a specific device:[/dim]")
    console.print("  optikit run --device <device-id>")
    console.print("[dim]\nOr use interactive selection:[/dim]")
    console.print("  optikit run-select")
    output.rule("dim")


@app.command("run")
@handle_cli_error("running app")
def run(
    ctx: typer.Context,
    device: Optional[str] = typer.Option(None, "--device", "-d", help="Device ID to run on"),
    release: bool = RELEASE,
    flavor: Optional[str] = FLAVOR,
    disable_fvm: bool = DISABLE_FVM,
):
    """Run the app on a device (the default device when none is given)."""
    app_ctx = _prepare(ctx, disable_fvm)
    _run_app(app_ctx, device, release, flavor, disable_fvm)


@app.command("run-select")
@handle_cli_error("running app")
def run_select(
    ctx: typer.Context,
    release: bool = RELEASE,
    flavor: Optional[str] = FLAVOR,
    disable_fvm: bool = DISABLE_FVM,
):
    """Pick a connected device from a numbered list and run on it."""
    app_ctx = _prepare(ctx, disable_fvm)
    output.info("Fetching connected devices...")

    found = get_devices(app_ctx, disable_fvm)
    if not found:
        output.error("No devices found. Please connect a device or start an emulator.")
        raise typer.Exit(1)

    _print_devices(found, show_ids=False)
    answer = Prompt.ask("[yellow]Device number[/yellow]", console=console)

    try:
        choice = int(answer)
    except ValueError:
        choice = 0
    if not 1 <= choice <= len(found):
        output.error(f"Invalid device number. Please choose between 1 and {len(found)}")
        raise typer.Exit(1)

    selected = found[choice - 1]
    output.success(f"Selected: {selected.name}")
    _run_app(app_ctx, selected.id, release, flavor, disable_fvm)


def _run_app(app_ctx: AppContext, device: Optional[str], release: bool, flavor: Optional[str], disable_fvm: bool) -> None:
    if device:
        output.info(f"Running on device: {device}")
    else:
        output.info("Running on default device...")
    if release:
        output.info("Running in release mode")
    if flavor:
        output.info(f"Running with flavor: {flavor}")

    command = run_command(app_ctx, device, release, flavor, disable_fvm)
    console.print(f"\n[cyan]Starting Flutter app...[/cyan]\n[dim]Command: {command}[/dim]\n")
    app_ctx.executor().run(command)
