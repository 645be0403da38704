"""Pre-flight checks run before commands touch a project.

Each validator prints what is wrong (and how to fix it) and returns a
bool. `ensure_environment()` turns the first failure into `typer.Exit(1)`.
"""

import logging
from pathlib import Path

import typer

from ..config import constants as c
from ..exceptions import CommandError
from . import output

logger = logging.getLogger(__name__)


def validate_flutter_project(root: Path) -> bool:
    pubspec = Path(root) / c.PUBSPEC
    if not pubspec.exists():
        output.error(c.NOT_FLUTTER_PROJECT)
        output.info(c.RUN_FROM_PROJECT_ROOT)
        return False

    if "flutter:" not in pubspec.read_text(encoding="utf-8"):
        output.error(c.NO_FLUTTER_REFERENCE)
        return False

    return True


def validate_ios_project(root: Path) -> bool:
    root = Path(root)
    if not (root / c.IOS_DIR).exists():
        output.error(c.IOS_PROJECT_NOT_FOUND)
        output.info(c.ADD_IOS_SUPPORT)
        return False

    if not (root / c.IOS_RUNNER_PROJ).exists() and not (root / c.IOS_RUNNER_WORKSPACE).exists():
        output.error(c.NO_XCODE_PROJECT)
        return False

    return True


def validate_android_project(root: Path) -> bool:
    root = Path(root)
    if not (root / c.ANDROID_DIR).exists():
        output.error(c.ANDROID_PROJECT_NOT_FOUND)
        output.info(c.ADD_ANDROID_SUPPORT)
        return False

    if not (root / c.ANDROID_BUILD_GRADLE).exists() and not (root / c.ANDROID_BUILD_GRADLE_KTS).exists():
        output.error(c.NO_BUILD_GRADLE)
        return False

    return True


def validate_flutter_sdk(executor, use_fvm: bool, root: Path) -> bool:
    """Check that the Flutter SDK (through FVM, or global) answers `--version`."""
    if use_fvm and not (Path(root) / c.FVM_FLUTTER_SDK).exists():
        output.error(c.FVM_SDK_NOT_FOUND)
        output.info(c.INSTALL_FVM_OR_DISABLE)
        return False

    probe = c.FVM_VERSION if use_fvm else c.FLUTTER_VERSION
    try:
        executor.run_silent(probe, cwd=root)
    except CommandError as e:
        logger.debug(f"SDK probe '{probe}' failed: {e}")
        if use_fvm:
            output.error(c.FVM_NOT_FOUND)
            output.info(f"Install FVM: {c.FVM_INSTALL_URL}")
        else:
            output.error(c.FLUTTER_NOT_FOUND)
            output.info(f"Install Flutter: {c.FLUTTER_INSTALL_URL}")
        return False

    return True


def ensure_environment(
    root: Path,
    *,
    executor=None,
    use_fvm: bool = False,
    flutter_project: bool = True,
    ios: bool = False,
    android: bool = False,
    sdk: bool = False,
) -> None:
    """Run the requested checks in order; exit with status 1 on the first failure."""
    checks = []
    if flutter_project:
        checks.append(lambda: validate_flutter_project(root))
    if ios:
        checks.append(lambda: validate_ios_project(root))
    if android:
        checks.append(lambda: validate_android_project(root))
    if sdk:
        checks.append(lambda: validate_flutter_sdk(executor, use_fvm, root))

    for check in checks:
        if not check():
            raise typer.Exit(1)
