"""Shared pytest fixtures for optikit tests."""

from pathlib import Path

import pytest

PUBSPEC = """\
name: sample_app
description: A sample Flutter app.
version: 1.2.3+45

environment:
  sdk: ">=3.0.0 <4.0.0"

dependencies:
  flutter:
    sdk: flutter
"""

PBXPROJ = """\
		97C147061CF9000F007C117D /* Debug */ = {
			buildSettings = {
				CURRENT_PROJECT_VERSION = "$(FLUTTER_BUILD_NUMBER)";
				MARKETING_VERSION = "$(FLUTTER_BUILD_NAME)";
			};
		};
		97C147071CF9000F007C117D /* Release */ = {
			buildSettings = {
				CURRENT_PROJECT_VERSION = 7;
				MARKETING_VERSION = 1.0.0;
			};
		};
"""

INFO_PLIST = """\
<?xml version="1.0" encoding="UTF-8"?>
<plist version="1.0">
<dict>
	<key>CFBundleShortVersionString</key>
	<string>${MARKETING_VERSION}</string>
	<key>CFBundleVersion</key>
	<string>${CURRENT_PROJECT_VERSION}</string>
</dict>
</plist>
"""


@pytest.fixture
def flutter_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal Flutter project with iOS and Android subprojects, used as cwd."""
    root = tmp_path / "app"
    root.mkdir()
    (root / "pubspec.yaml").write_text(PUBSPEC)
    (root / "pubspec.lock").write_text("packages: {}\n")

    xcodeproj = root / "ios" / "Runner.xcodeproj"
    xcodeproj.mkdir(parents=True)
    (xcodeproj / "project.pbxproj").write_text(PBXPROJ)
    (root / "ios" / "Runner").mkdir()
    (root / "ios" / "Runner" / "Info.plist").write_text(INFO_PLIST)
    (root / "ios" / "Podfile.lock").write_text("PODFILE CHECKSUM: abc\n")

    (root / "android").mkdir()
    (root / "android" / "build.gradle").write_text("// gradle\n")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(root)
    return root
