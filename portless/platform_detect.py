"""
Runtime platform detection and state directory constants.

Everything here is computed once at import and never mutated. Code that
needs to be testable against other hosts should take a PlatformPaths
from build_platform_paths() instead of reading the module constants.

Usage:
    from portless.platform_detect import build_platform_paths

    paths = build_platform_paths()
    paths.system_state_dir   # /tmp/portless on macOS/Linux
    paths.user_state_dir     # ~/.portless
"""

import sys
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Callable, Optional, Union


class Platform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


# Ports below this need root to bind on Unix. Windows has no such restriction.
PRIVILEGED_PORT_THRESHOLD = 1024

STATE_DIR_NAME = "portless"
USER_STATE_DIR_NAME = ".portless"
UNIX_SYSTEM_STATE_DIR = "/tmp/portless"


def detect_platform(sys_platform: Optional[str] = None) -> Platform:
    """Map a sys.platform string to a Platform. Defaults to the running host."""
    if sys_platform is None:
        sys_platform = sys.platform
    if sys_platform == "win32":
        return Platform.WINDOWS
    if sys_platform == "darwin":
        return Platform.MACOS
    if sys_platform.startswith("linux"):
        return Platform.LINUX
    return Platform.OTHER


def _path_type(platform: Platform) -> type:
    """Concrete Path when the platform's flavor matches the host, else a pure path."""
    flavor = PureWindowsPath if platform is Platform.WINDOWS else PurePosixPath
    return Path if isinstance(Path(), flavor) else flavor


def system_state_dir(
    platform: Platform, tempdir: Optional[Union[str, PurePath]] = None
) -> PurePath:
    """
    System-wide state directory, used when the proxy needs elevated permissions.

    Windows has no privileged ports, so the state lives under the temp directory.
    Everything else shares /tmp/portless.
    """
    path_type = _path_type(platform)
    if platform is Platform.WINDOWS:
        if tempdir is None:
            tempdir = tempfile.gettempdir()
        return path_type(tempdir) / STATE_DIR_NAME
    if platform in (Platform.MACOS, Platform.LINUX, Platform.OTHER):
        return path_type(UNIX_SYSTEM_STATE_DIR)
    raise ValueError(f"Unhandled platform: {platform!r}")


def user_state_dir(home: Union[str, PurePath], platform: Optional[Platform] = None) -> PurePath:
    """Per-user state directory, used when the proxy runs without sudo."""
    if platform is None:
        platform = PLATFORM
    return _path_type(platform)(home) / USER_STATE_DIR_NAME


@dataclass(frozen=True)
class PlatformPaths:
    """Platform facts and state locations, built once and passed to consumers."""

    platform: Platform
    system_state_dir: PurePath
    user_state_dir: PurePath
    privileged_port_threshold: int = PRIVILEGED_PORT_THRESHOLD

    @property
    def is_windows(self) -> bool:
        return self.platform is Platform.WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.platform is Platform.MACOS

    @property
    def is_linux(self) -> bool:
        return self.platform is Platform.LINUX


def build_platform_paths(
    platform: Optional[Platform] = None,
    *,
    tempdir: Optional[Callable[[], Union[str, PurePath]]] = None,
    home: Optional[Callable[[], Union[str, PurePath]]] = None,
) -> PlatformPaths:
    """
    Build a PlatformPaths for the given platform (default: the running host).

    tempdir and home are zero-argument lookups, defaulting to
    tempfile.gettempdir and Path.home. Failures from either one propagate
    unchanged.
    """
    if platform is None:
        platform = detect_platform()
    if tempdir is None:
        tempdir = tempfile.gettempdir
    if home is None:
        home = Path.home

    # Only Windows consults the temp directory
    system_dir = system_state_dir(platform, tempdir() if platform is Platform.WINDOWS else None)
    return PlatformPaths(
        platform=platform,
        system_state_dir=system_dir,
        user_state_dir=user_state_dir(home(), platform),
    )


PLATFORM = detect_platform()
IS_WINDOWS = PLATFORM is Platform.WINDOWS
IS_MACOS = PLATFORM is Platform.MACOS
IS_LINUX = PLATFORM is Platform.LINUX

SYSTEM_STATE_DIR = system_state_dir(PLATFORM)
USER_STATE_DIR = user_state_dir(Path.home(), PLATFORM)
