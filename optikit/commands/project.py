"""Project commands: open in an IDE, VS Code settings, optikit init."""

import json
import sys

import typer

from ..config import constants as c
from ..config.settings import OptikitConfig, save_config
from ..context import get_app_context
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.output import console
from ..utils.validation import ensure_environment

app = typer.Typer()


def android_studio_command(platform: str = sys.platform) -> str:
    """The command that opens android/ in Android Studio on this platform."""
    if platform == "darwin":
        return c.OPEN_ANDROID_STUDIO["darwin"]
    if platform == "win32":
        return c.OPEN_ANDROID_STUDIO["win32"]
    return c.OPEN_ANDROID_STUDIO["linux"]


@app.command("open-ios")
@handle_cli_error("opening Xcode")
def open_ios(ctx: typer.Context):
    """Open the iOS project in Xcode."""
    app_ctx = get_app_context(ctx)
    output.info("Opening the iOS project in Xcode...")
    ensure_environment(app_ctx.project_root, ios=True)

    app_ctx.executor().run(c.OPEN_XCODE)
    output.success("Xcode opened successfully.")


@app.command("open-android")
@handle_cli_error("opening Android Studio")
def open_android(ctx: typer.Context):
    """Open the Android project in Android Studio."""
    app_ctx = get_app_context(ctx)
    output.info("Opening the Android project in Android Studio...")
    ensure_environment(app_ctx.project_root, android=True)

    app_ctx.executor().run(android_studio_command())
    output.success("Android Studio opened successfully.")


@app.command("setup-vscode")
@handle_cli_error("creating VSCode settings")
def setup_vscode(ctx: typer.Context):
    """Write .vscode/settings.json with recommended Flutter settings."""
    app_ctx = get_app_context(ctx)
    settings_path = app_ctx.project_root / c.VSCODE_SETTINGS

    if app_ctx.dry_run:
        app_ctx.journal.log_file_operation("Write VSCode settings", str(settings_path))
        return

    if settings_path.parent.exists():
        output.info(".vscode directory already exists.")
    else:
        settings_path.parent.mkdir(parents=True)
        output.success("Created .vscode directory.")

    settings_path.write_text(json.dumps(c.VSCODE_SETTINGS_TEMPLATE, indent=2), encoding="utf-8")
    output.success("Created .vscode/settings.json with Flutter configuration.")


@app.command("init")
@handle_cli_error("initializing project")
def init(ctx: typer.Context):
    """Create .optikitrc.json with default settings in the current project."""
    app_ctx = get_app_context(ctx)
    root = app_ctx.project_root
    output.info("Initializing OptiKit in this project...")

    config_path = root / c.CONFIG_SAVE_NAME
    if config_path.exists():
        output.warning("OptiKit configuration already exists.")
        output.info(f"To reconfigure, delete {c.CONFIG_SAVE_NAME} and run init again.")
        return

    defaults = OptikitConfig()
    gitignore = root / c.GITIGNORE
    needs_ignore = gitignore.exists() and c.BACKUP_DIR_NAME not in gitignore.read_text(encoding="utf-8")

    if app_ctx.dry_run:
        app_ctx.journal.log_file_operation("Write config", str(config_path))
        if needs_ignore:
            app_ctx.journal.log_file_operation("Append to .gitignore", str(gitignore), f"{c.BACKUP_DIR_NAME}/")
        return

    save_config(defaults, root)
    output.success("OptiKit initialized successfully!")
    console.print("\nDefault configuration:")
    console.print_json(data=defaults.to_dict())
    console.print(f"\nYou can modify {c.CONFIG_SAVE_NAME} to customize these settings.\n")

    if needs_ignore:
        with gitignore.open("a", encoding="utf-8") as f:
            f.write(f"\n# OptiKit backup files\n{c.BACKUP_DIR_NAME}/\n")
        output.success(f"Added {c.BACKUP_DIR_NAME}/ to .gitignore")
