"""Version commands: `flutter-update-version` and the `version` group."""

import typer

from ..context import get_app_context
from ..services.version_service import BumpKind, read_current_version
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.output import console
from ..utils.validation import ensure_environment

app = typer.Typer()
version_app = typer.Typer(help="Show or bump the app version")


@app.command("flutter-update-version")
@handle_cli_error("updating Flutter version and build")
def update_version(
    ctx: typer.Context,
    app_version: str = typer.Option(..., "--app-version", help="Version to set for both platforms (X.Y.Z)"),
    android_build: str = typer.Option("", "--android-build", help="Android build number (pubspec.yaml)"),
    ios_build: str = typer.Option("", "--ios-build", help="iOS build number (project.pbxproj, Info.plist)"),
):
    """Update version and build numbers for Android and iOS.

    A build number left empty skips that platform.
    """
    app_ctx = get_app_context(ctx)
    app_ctx.version_patcher().propagate(app_version, android_build, ios_build)


@version_app.callback(invoke_without_command=True)
@handle_cli_error("reading version")
def show_version(ctx: typer.Context):
    """Show the current version from pubspec.yaml."""
    if ctx.invoked_subcommand is not None:
        return

    current = read_current_version(get_app_context(ctx).project_root)
    console.print("\n[bold]Current Version Information[/bold]\n")
    console.print(f"[cyan]Version:[/cyan] [bold]{current}[/bold]")
    console.print(f"[dim]  Major:[/dim] {current.major}")
    console.print(f"[dim]  Minor:[/dim] {current.minor}")
    console.print(f"[dim]  Patch:[/dim] {current.patch}")
    console.print(f"[dim]  Build:[/dim] {current.build_number}\n")


@version_app.command("bump")
@handle_cli_error("bumping version")
def bump(
    ctx: typer.Context,
    kind: BumpKind = typer.Argument(..., help="Which part to bump: major, minor or patch"),
):
    """Bump the version. Android build follows the version, iOS build resets to 1."""
    app_ctx = get_app_context(ctx)
    ensure_environment(app_ctx.project_root)

    current = read_current_version(app_ctx.project_root)
    new = current.increment(kind)

    output.info(f"Current version: {current}")
    output.info(f"Bumping {kind.value} version...")
    console.print("\n[cyan]Version changes:[/cyan]")
    console.print(f"[dim]  Old:[/dim] {current}")
    console.print(f"[dim]  New:[/dim] [bold green]{new}[/bold green]")
    console.print("\n[cyan]Build number strategy:[/cyan]")
    console.print(f"[dim]  Android:[/dim] {current.build_number} → {new.build_number} (incremented)")
    console.print(f"[dim]  iOS:[/dim] {current.build_number} → 1 (reset for new version)\n")

    app_ctx.version_patcher().propagate(new.semantic, str(new.build_number), "1")
    output.success(f"Version bumped to {new}")


@version_app.command("bump-ios")
@handle_cli_error("incrementing iOS build")
def bump_ios(ctx: typer.Context):
    """Increment only the iOS build number (TestFlight uploads)."""
    app_ctx = get_app_context(ctx)
    ensure_environment(app_ctx.project_root)

    current = read_current_version(app_ctx.project_root)
    next_build = current.build_number + 1

    output.info(f"Current version: {current}")
    output.info("Incrementing iOS build number only...")
    console.print(f"[dim]  Version:[/dim] {current.semantic} (unchanged)")
    console.print(f"[dim]  Android:[/dim] {current.build_number} (unchanged)")
    console.print(f"[dim]  iOS:[/dim] {current.build_number} → {next_build}\n")

    app_ctx.version_patcher().propagate(current.semantic, "", str(next_build))
    output.success(f"iOS build number incremented to {next_build}")


@version_app.command("bump-android")
@handle_cli_error("incrementing Android build")
def bump_android(ctx: typer.Context):
    """Increment only the Android build number."""
    app_ctx = get_app_context(ctx)
    ensure_environment(app_ctx.project_root)

    current = read_current_version(app_ctx.project_root)
    next_build = current.build_number + 1

    output.info(f"Current version: {current}")
    output.info("Incrementing Android build number only...")
    console.print(f"[dim]  Version:[/dim] {current.semantic} (unchanged)")
    console.print(f"[dim]  Android:[/dim] {current.build_number} → {next_build}")
    console.print("[dim]  iOS:[/dim] (unchanged)\n")

    app_ctx.version_patcher().propagate(current.semantic, str(next_build), "")
    output.success(f"Android build number incremented to {next_build}")
