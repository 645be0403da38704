"""Release build commands."""

from dataclasses import dataclass
from typing import Tuple

import typer

from ..config import constants as c
from ..context import get_app_context
from ..utils import output
from ..utils.error_handling import handle_cli_error
from ..utils.validation import ensure_environment

app = typer.Typer()

DISABLE_FVM = typer.Option(False, "--disable-fvm", help="Run without FVM")


@dataclass(frozen=True)
class BuildTarget:
    """One `flutter build` artifact and the platform it needs."""

    label: str
    command: str
    flags: Tuple[str, ...] = ()
    require_ios: bool = False
    require_android: bool = False

    def command_line(self) -> str:
        return " ".join((self.command, *self.flags))


APK = BuildTarget("APK", c.FLUTTER_BUILD_APK, c.ANDROID_RELEASE_FLAGS, require_android=True)
BUNDLE = BuildTarget("Bundle", c.FLUTTER_BUILD_BUNDLE, c.ANDROID_RELEASE_FLAGS, require_android=True)
IOS = BuildTarget("iOS", c.FLUTTER_BUILD_IOS, c.IOS_RELEASE_FLAGS, require_ios=True)
IPA = BuildTarget("IPA", c.FLUTTER_BUILD_IPA, c.IOS_RELEASE_FLAGS, require_ios=True)


def execute_build(ctx: typer.Context, target: BuildTarget, disable_fvm: bool) -> None:
    app_ctx = get_app_context(ctx)
    executor = app_ctx.executor()
    use_fvm = app_ctx.use_fvm(disable_fvm)

    output.info(f"Building Flutter {target.label} {'with' if use_fvm else 'without'} FVM...")
    ensure_environment(
        app_ctx.project_root,
        executor=executor,
        use_fvm=use_fvm,
        sdk=True,
        ios=target.require_ios,
        android=target.require_android,
    )

    executor.run(app_ctx.flutter(target.command_line(), disable_fvm))
    output.success(f"Flutter {target.label} build successful.")


@app.command("flutter-build-apk")
@handle_cli_error("building APK")
def build_apk(ctx: typer.Context, disable_fvm: bool = DISABLE_FVM):
    """Build a release APK (obfuscated, split debug info)."""
    execute_build(ctx, APK, disable_fvm)


@app.command("flutter-build-bundle")
@handle_cli_error("building Bundle")
def build_bundle(ctx: typer.Context, disable_fvm: bool = DISABLE_FVM):
    """Build a release App Bundle (obfuscated, split debug info)."""
    execute_build(ctx, BUNDLE, disable_fvm)


@app.command("flutter-build-ios")
@handle_cli_error("building iOS")
def build_ios(ctx: typer.Context, disable_fvm: bool = DISABLE_FVM):
    """Build the iOS app in release mode."""
    execute_build(ctx, IOS, disable_fvm)


@app.command("flutter-build-ipa")
@handle_cli_error("building IPA")
def build_ipa(ctx: typer.Context, disable_fvm: bool = DISABLE_FVM):
    """Build a release IPA."""
    execute_build(ctx, IPA, disable_fvm)
