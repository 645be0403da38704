"""Version handling for Flutter projects.

A Flutter version is written `X.Y.Z+B` in pubspec.yaml. iOS keeps the
marketing version and build number separately in project.pbxproj and,
for projects that still use the Xcode placeholders, in Info.plist.
`VersionPatcher.propagate()` writes one version to all three files.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional

from ..config.constants import IOS_INFO_PLIST, IOS_PROJECT_PBXPROJ, PUBSPEC
from ..exceptions import ProjectFileNotFoundError, VersionFormatError
from ..utils import output
from ..utils.dry_run import DryRunJournal

logger = logging.getLogger(__name__)

# ASCII digits only. The first three are applied with fullmatch.
VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)\+([0-9]+)")
SEMANTIC_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
BUILD_PATTERN = re.compile(r"[0-9]+")
PUBSPEC_VERSION_READ = re.compile(r"version:[ \t]*([0-9]+\.[0-9]+\.[0-9]+\+[0-9]+)[ \t]*$", re.MULTILINE)
PUBSPEC_VERSION_LINE = re.compile(r"version: [0-9]+\.[0-9]+\.[0-9]+\+[0-9]+")

PBXPROJ_MARKETING_VERSION = re.compile(r"MARKETING_VERSION\s*=\s*[^;]+;")
PBXPROJ_PROJECT_VERSION = re.compile(r"CURRENT_PROJECT_VERSION\s*=\s*[^;]+;")

# Only the unresolved placeholders are rewritten; concrete values are left alone
PLIST_SHORT_VERSION = re.compile(
    r"<key>CFBundleShortVersionString</key>\s*<string>\$\{MARKETING_VERSION\}</string>"
)
PLIST_BUNDLE_VERSION = re.compile(
    r"<key>CFBundleVersion</key>\s*<string>\$\{CURRENT_PROJECT_VERSION\}</string>"
)


class BumpKind(str, Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True)
class VersionRecord:
    """A `major.minor.patch+build` version."""

    major: int
    minor: int
    patch: int
    build_number: int

    @classmethod
    def parse(cls, text: str) -> "VersionRecord":
        match = VERSION_PATTERN.fullmatch(text)
        if not match:
            raise VersionFormatError(
                f"Invalid version format: {text}. Expected format: X.Y.Z+B (e.g., 1.2.3+45)"
            )
        major, minor, patch, build = (int(part) for part in match.groups())
        return cls(major, minor, patch, build)

    @property
    def semantic(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def format(self) -> str:
        return f"{self.semantic}+{self.build_number}"

    def __str__(self) -> str:
        return self.format()

    def increment(self, kind: BumpKind) -> "VersionRecord":
        """Return the next version. The build number always goes up by one."""
        kind = BumpKind(kind)
        build_number = self.build_number + 1
        if kind is BumpKind.MAJOR:
            return VersionRecord(self.major + 1, 0, 0, build_number)
        if kind is BumpKind.MINOR:
            return VersionRecord(self.major, self.minor + 1, 0, build_number)
        return replace(self, patch=self.patch + 1, build_number=build_number)


def read_current_version(project_root: Path) -> VersionRecord:
    """Read the version declared in pubspec.yaml.

    Raises:
        ProjectFileNotFoundError: If pubspec.yaml is missing.
        VersionFormatError: If it holds no `version: X.Y.Z+B` line.
    """
    pubspec = Path(project_root) / PUBSPEC
    if not pubspec.exists():
        raise ProjectFileNotFoundError(pubspec)

    match = PUBSPEC_VERSION_READ.search(pubspec.read_text(encoding="utf-8"))
    if not match:
        raise VersionFormatError("No valid version found in pubspec.yaml")
    return VersionRecord.parse(match.group(1))


class VersionPatcher:
    """Writes a version into pubspec.yaml, project.pbxproj and Info.plist."""

    def __init__(
        self,
        project_root: Path,
        dry_run: bool = False,
        journal: Optional[DryRunJournal] = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.dry_run = dry_run
        self.journal = journal if journal is not None else DryRunJournal()

    def propagate(self, version: str, android_build: str = "", ios_build: str = "") -> None:
        """Write `version` with the given build numbers.

        A blank build number skips that platform. A missing file raises
        `ProjectFileNotFoundError`; files already written stay written.

        Raises:
            VersionFormatError: If `version` is not X.Y.Z or a build number
                is neither blank nor an integer. Nothing is written.
        """
        if not SEMANTIC_PATTERN.fullmatch(version.strip()):
            raise VersionFormatError(f"Invalid app version: {version!r}. Expected format: X.Y.Z")
        for label, build in (("Android", android_build), ("iOS", ios_build)):
            if build.strip() and not BUILD_PATTERN.fullmatch(build.strip()):
                raise VersionFormatError(f"Invalid {label} build number: {build!r}")
        version = version.strip()

        output.info(
            f"Updating version to {version} (Android build: {android_build or '-'}, "
            f"iOS build: {ios_build or '-'})"
        )

        if android_build.strip():
            self.update_pubspec(version, android_build.strip())
        else:
            logger.info("No Android build number given, pubspec.yaml left unchanged")

        if ios_build.strip():
            self.update_ios_project(version, ios_build.strip())
            self.update_info_plist(version, ios_build.strip())
        else:
            logger.info("No iOS build number given, iOS files left unchanged")

        output.success("Version update completed")

    def update_pubspec(self, version: str, build: str) -> None:
        self._patch(
            PUBSPEC,
            [(PUBSPEC_VERSION_LINE, f"version: {version}+{build}")],
            f"version: {version}+{build}",
        )

    def update_ios_project(self, version: str, build: str) -> None:
        self._patch(
            IOS_PROJECT_PBXPROJ,
            [
                (PBXPROJ_MARKETING_VERSION, f"MARKETING_VERSION = {version};"),
                (PBXPROJ_PROJECT_VERSION, f"CURRENT_PROJECT_VERSION = {build};"),
            ],
            f"MARKETING_VERSION = {version}, CURRENT_PROJECT_VERSION = {build}",
        )

    def update_info_plist(self, version: str, build: str) -> None:
        self._patch(
            IOS_INFO_PLIST,
            [
                (
                    PLIST_SHORT_VERSION,
                    f"<key>CFBundleShortVersionString</key><string>{version}</string>",
                ),
                (PLIST_BUNDLE_VERSION, f"<key>CFBundleVersion</key><string>{build}</string>"),
            ],
            f"CFBundleShortVersionString = {version}, CFBundleVersion = {build}",
        )

    def _patch(self, relative_path: str, substitutions, summary: str) -> None:
        path = self.project_root / relative_path
        if not path.exists():
            raise ProjectFileNotFoundError(path)

        content = path.read_text(encoding="utf-8")
        for pattern, replacement in substitutions:
            # Callable replacement so "$" and "\" in values are taken literally
            content = pattern.sub(lambda _m, value=replacement: value, content)

        if self.dry_run:
            self.journal.log_file_operation("Update version", str(path), summary)
            return

        path.write_text(content, encoding="utf-8")
        output.success(f"Updated {relative_path}")
