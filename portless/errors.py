"""Exceptions raised by portless.

Host lookup failures (no home directory, no usable temp directory) are not
wrapped here. They reach the caller as the original OSError/RuntimeError.
"""

from pathlib import PurePath
from typing import Any


class PortlessError(Exception):
    """Base class for portless errors."""


class InvalidPortError(PortlessError, ValueError):
    """Raised when a value is not a usable TCP port."""
    def __init__(self, port: Any):
        self.port = port
        super().__init__(f"Invalid port {port!r}: expected an integer in 1-65535")


class StateDirError(PortlessError):
    """Raised when a state directory or a file inside it can't be used."""
    def __init__(self, path: PurePath, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"State directory error at {path}: {reason}")
