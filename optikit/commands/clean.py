"""Clean commands: `clean-flutter` and `clean-ios`."""

import logging
from pathlib import Path

import typer

from ..config import constants as c
from ..context import AppContext, get_app_context
from ..exceptions import CommandError
from ..services.shell import ShellExecutor, flutter_command
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.validation import ensure_environment
from ._helpers import remove_with_backup, run_step

logger = logging.getLogger(__name__)

app = typer.Typer()


@app.command("clean-flutter")
@handle_cli_error("cleaning project")
def clean_flutter(
    ctx: typer.Context,
    disable_fvm: bool = typer.Option(False, "--disable-fvm", help="Run without FVM"),
):
    """Clean the Flutter project: flutter clean, drop pubspec.lock, pub get."""
    app_ctx = get_app_context(ctx)
    root = app_ctx.project_root
    executor = app_ctx.executor()
    use_fvm = app_ctx.use_fvm(disable_fvm)

    output.info("Running clean with FVM..." if use_fvm else "Running clean without FVM...")
    ensure_environment(root, executor=executor, use_fvm=use_fvm, sdk=True)

    run_step(
        executor,
        app_ctx.flutter(c.FLUTTER_CLEAN, disable_fvm),
        "Running Flutter clean...",
        "Flutter clean completed.",
    )

    remove_with_backup(app_ctx, root / c.PUBSPEC_LOCK, "pubspec.lock")

    run_step(
        executor,
        app_ctx.flutter(c.FLUTTER_PUB_GET, disable_fvm),
        "Running Flutter pub get...",
        "Flutter pub get completed.",
    )

    output.success("Project cleaned successfully.")


@app.command("clean-ios")
@handle_cli_error("cleaning iOS project")
def clean_ios(
    ctx: typer.Context,
    clean_cache: bool = typer.Option(False, "--clean-cache", help="Also clean the CocoaPods cache"),
    repo_update: bool = typer.Option(
        False, "--repo-update", help="Run pod repo update and pod update instead of pod install"
    ),
):
    """Reset CocoaPods state for the iOS project."""
    app_ctx = get_app_context(ctx)
    root = app_ctx.project_root
    ios_dir = root / c.IOS_DIR

    ensure_environment(root, ios=True)
    output.info("Running clean for iOS project...")

    executor = app_ctx.executor()
    ensure_flutter_artifacts(app_ctx, executor)

    remove_with_backup(app_ctx, root / c.IOS_PODFILE_LOCK, "Podfile.lock")

    run_step(executor, c.POD_DEINTEGRATE, "Deintegrating pods...", "Deintegrated pods.", cwd=ios_dir)

    if clean_cache:
        run_step(
            executor, c.POD_CACHE_CLEAN, "Cleaning CocoaPods cache...", "Cleaned CocoaPods cache.", cwd=ios_dir
        )

    attempts, delay = c.DEFAULT_RETRY_ATTEMPTS, c.DEFAULT_RETRY_DELAY_MS
    if repo_update:
        # Failures here are reported but the clean carries on
        for command, start, done in (
            (c.POD_REPO_UPDATE, "Updating CocoaPods repositories...", "Updated CocoaPods repositories."),
            (c.POD_UPDATE, "Installing pods with repo update...", "Installed pods with repo update."),
        ):
            output.info(start)
            try:
                executor.run_with_retry(command, attempts, delay, cwd=ios_dir)
            except CommandError as e:
                output.error(f"'{command}' failed after {attempts} attempts: {e.message}")
                continue
            output.success(done)
    else:
        output.info("Installing pods without repo update...")
        executor.run_with_retry(c.POD_INSTALL, attempts, delay, cwd=ios_dir)
        output.success("Installed pods without repo update.")


def flutter_sdk_path(app_ctx: AppContext, executor: ShellExecutor) -> Path:
    """The FVM-pinned SDK when present, otherwise the SDK holding `flutter` on PATH."""
    fvm_sdk = app_ctx.project_root / c.FVM_FLUTTER_SDK
    if fvm_sdk.exists():
        output.info("Using FVM Flutter SDK...")
        return fvm_sdk

    try:
        flutter_bin = executor.run_silent(c.WHICH_FLUTTER)
    except CommandError:
        output.error("Flutter SDK not found. Please ensure Flutter is installed.")
        raise

    output.info("Using Flutter SDK...")
    # <sdk>/bin/flutter
    return Path(flutter_bin.strip()).resolve().parent.parent


def ensure_flutter_artifacts(app_ctx: AppContext, executor: ShellExecutor) -> None:
    """Download the iOS engine artifacts if the SDK cache lacks them."""
    sdk = flutter_sdk_path(app_ctx, executor)
    xcframework = sdk / c.FLUTTER_XCFRAMEWORK
    if xcframework.exists():
        output.success("Flutter.xcframework exists. No need to run precache.")
        return

    output.warning("Flutter.xcframework not found.")
    use_fvm = app_ctx.use_fvm() and (app_ctx.project_root / c.FVM_FLUTTER_SDK).exists()
    precache = flutter_command(c.FLUTTER_PRECACHE_IOS, use_fvm)
    output.info("Downloading Flutter.xcframework...")
    try:
        executor.run(precache)
    except CommandError as e:
        output.error(f"Failed to run precache: {e.message}")
        return
    output.success("Flutter.xcframework has been downloaded successfully.")
