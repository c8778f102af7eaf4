"""
Portless platform and state directory layer.

Detects the host platform and works out where the proxy keeps its state.
"""

from portless.errors import InvalidPortError, PortlessError, StateDirError
from portless.platform_detect import (
    IS_LINUX,
    IS_MACOS,
    IS_WINDOWS,
    PLATFORM,
    PRIVILEGED_PORT_THRESHOLD,
    SYSTEM_STATE_DIR,
    USER_STATE_DIR,
    Platform,
    PlatformPaths,
    build_platform_paths,
    detect_platform,
)
from portless.ports import is_privileged_port, needs_elevation, validate_port
from portless.state import StateDir, resolve_state_dir, state_dir_from_settings

__all__ = [
    # Platform
    "Platform",
    "PlatformPaths",
    "PLATFORM",
    "IS_WINDOWS",
    "IS_MACOS",
    "IS_LINUX",
    "SYSTEM_STATE_DIR",
    "USER_STATE_DIR",
    "PRIVILEGED_PORT_THRESHOLD",
    "build_platform_paths",
    "detect_platform",
    # Ports
    "validate_port",
    "is_privileged_port",
    "needs_elevation",
    # State
    "StateDir",
    "resolve_state_dir",
    "state_dir_from_settings",
    # Errors
    "PortlessError",
    "InvalidPortError",
    "StateDirError",
]
