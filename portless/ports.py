"""
Privileged port checks.

On Unix, binding a port below PRIVILEGED_PORT_THRESHOLD needs root.
Windows has no such restriction, so nothing is privileged there.
"""

import logging
import os
from typing import Any, Optional

from portless.errors import InvalidPortError
from portless.platform_detect import Platform, PlatformPaths

logger = logging.getLogger("portless.ports")

MIN_PORT = 1
MAX_PORT = 65535


def validate_port(port: Any) -> int:
    """Return port unchanged if it's an int in 1-65535, else raise InvalidPortError."""
    # bool is an int subclass; True is not port 1
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidPortError(port)
    if not MIN_PORT <= port <= MAX_PORT:
        raise InvalidPortError(port)
    return port


def is_privileged_port(port: int, paths: PlatformPaths) -> bool:
    port = validate_port(port)
    if paths.platform is Platform.WINDOWS:
        return False
    if paths.platform in (Platform.MACOS, Platform.LINUX, Platform.OTHER):
        return port < paths.privileged_port_threshold
    raise ValueError(f"Unhandled platform: {paths.platform!r}")


def _current_euid() -> Optional[int]:
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid is not None else None


def needs_elevation(port: int, paths: PlatformPaths, *, euid: Optional[int] = None) -> bool:
    """
    True if binding `port` requires privileges this process doesn't have.

    euid defaults to os.geteuid(). Hosts without geteuid have no uid to
    compare, so a privileged port is reported as needing elevation.
    """
    if not is_privileged_port(port, paths):
        return False
    if euid is None:
        euid = _current_euid()
    needed = euid != 0
    if needed:
        logger.debug("Port %d is below %d and euid is %s", port, paths.privileged_port_threshold, euid)
    return needed
