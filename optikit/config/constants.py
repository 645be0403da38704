"""
Centralized constants for optikit.

Project paths, tool command lines, retry settings and the user-facing
messages shared by several commands live here.
"""

# =============================================================================
# PROJECT STRUCTURE (relative to the Flutter project root)
# =============================================================================

PUBSPEC = "pubspec.yaml"
PUBSPEC_LOCK = "pubspec.lock"
IOS_DIR = "ios"
ANDROID_DIR = "android"
MODULE_DIR = "lib/module"
IOS_RUNNER_PROJ = "ios/Runner.xcodeproj"
IOS_RUNNER_WORKSPACE = "ios/Runner.xcworkspace"
IOS_PROJECT_PBXPROJ = "ios/Runner.xcodeproj/project.pbxproj"
IOS_INFO_PLIST = "ios/Runner/Info.plist"
IOS_PODFILE_LOCK = "ios/Podfile.lock"
ANDROID_BUILD_GRADLE = "android/build.gradle"
ANDROID_BUILD_GRADLE_KTS = "android/build.gradle.kts"
FVM_FLUTTER_SDK = ".fvm/flutter_sdk"
VSCODE_SETTINGS = ".vscode/settings.json"
GITIGNORE = ".gitignore"

# Relative to a Flutter SDK root
FLUTTER_XCFRAMEWORK = "bin/cache/artifacts/engine/ios/Flutter.xcframework"

# =============================================================================
# BACKUPS
# =============================================================================

BACKUP_DIR_NAME = ".optikit-backup"
BACKUP_RETENTION_COUNT = 5

# =============================================================================
# CONFIG FILES (searched in this order, cwd before home)
# =============================================================================

CONFIG_FILE_NAMES = (".optikitrc", ".optikitrc.json")
CONFIG_SAVE_NAME = ".optikitrc.json"

# =============================================================================
# TOOL COMMANDS
# =============================================================================

FLUTTER_CLEAN = "flutter clean"
FLUTTER_PUB_GET = "flutter pub get"
FLUTTER_BUILD_APK = "flutter build apk"
FLUTTER_BUILD_BUNDLE = "flutter build appbundle"
FLUTTER_BUILD_IOS = "flutter build ios"
FLUTTER_BUILD_IPA = "flutter build ipa"
FLUTTER_PRECACHE_IOS = "flutter precache --ios"
FLUTTER_DEVICES = "flutter devices --machine"
FLUTTER_RUN = "flutter run"
FLUTTER_VERSION = "flutter --version"
FVM_VERSION = "fvm --version"
WHICH_FLUTTER = "which flutter"

POD_DEINTEGRATE = "pod deintegrate"
POD_INSTALL = "pod install"
POD_UPDATE = "pod update"
POD_REPO_UPDATE = "pod repo update"
POD_CACHE_CLEAN = "pod cache clean --all"

OPEN_XCODE = "open ios/Runner.xcworkspace"
OPEN_ANDROID_STUDIO = {
    "darwin": "open -a 'Android Studio' android",
    "win32": "start android",
    "linux": "xdg-open android",
}

# =============================================================================
# BUILDS
# =============================================================================

SYMBOLS_OUTPUT_PATH = "build/app/outputs/symbols"
ANDROID_RELEASE_FLAGS = ("--release", "--obfuscate", f"--split-debug-info={SYMBOLS_OUTPUT_PATH}")
IOS_RELEASE_FLAGS = ("--release",)

# =============================================================================
# RETRY (pod commands talking to remote spec repos)
# =============================================================================

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 10000

# =============================================================================
# MODULE GENERATION
# =============================================================================

MODULE_NAME_PATTERN = r"^[a-z0-9_]+$"

# =============================================================================
# VSCODE
# =============================================================================

VSCODE_SETTINGS_TEMPLATE = {
    "dart.flutterSdkPath": FVM_FLUTTER_SDK,
    "editor.formatOnSave": True,
    "dart.previewFlutterUiGuides": True,
    "files.exclude": {
        "**/.git": True,
        "**/.DS_Store": True,
        "**/node_modules": True,
        "**/build": True,
    },
}

# =============================================================================
# HELP URLS & MESSAGES
# =============================================================================

FLUTTER_INSTALL_URL = "https://flutter.dev/docs/get-started/install"
FVM_INSTALL_URL = "https://fvm.app/docs/getting_started/installation"

NOT_FLUTTER_PROJECT = "Not a Flutter project: pubspec.yaml not found."
NO_FLUTTER_REFERENCE = "Not a Flutter project: pubspec.yaml does not reference Flutter SDK."
FVM_SDK_NOT_FOUND = "FVM Flutter SDK not found at .fvm/flutter_sdk"
FVM_NOT_FOUND = "FVM not found. Please install FVM or use --disable-fvm flag."
FLUTTER_NOT_FOUND = "Flutter SDK not found."
IOS_PROJECT_NOT_FOUND = "iOS project directory not found."
ANDROID_PROJECT_NOT_FOUND = "Android project directory not found."
NO_XCODE_PROJECT = "No Xcode project or workspace found in ios/ directory."
NO_BUILD_GRADLE = "No build.gradle found in android/ directory."

RUN_FROM_PROJECT_ROOT = "Please run this command from the root of a Flutter project."
ADD_IOS_SUPPORT = "Run 'flutter create .' to add iOS support."
ADD_ANDROID_SUPPORT = "Run 'flutter create .' to add Android support."
INSTALL_FVM_OR_DISABLE = "Run 'fvm install' or use --disable-fvm flag."
