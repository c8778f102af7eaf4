"""
State directory resolution and crash-safe JSON state files.

A proxy on a privileged port runs as root and keeps its state in the shared
system directory; one on an unprivileged port keeps it under the user's home.
Both sides (the proxy and any client looking for it) must resolve the same
directory for the same port, so resolution is a pure function of the port,
the PlatformPaths and an optional override.

Usage:
    from portless.state import StateDir, resolve_state_dir

    state = StateDir(resolve_state_dir(1355, paths))
    state.ensure()
    state.write_json("routes.json", {"myapp.localhost": 4000})
    routes = state.read_json("routes.json", default={})
"""

import json
import logging
import os
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Any, Optional, Union

from portless.errors import StateDirError
from portless.platform_detect import SYSTEM_STATE_DIR, PlatformPaths
from portless.ports import is_privileged_port

if TYPE_CHECKING:
    from portless.config import Settings

logger = logging.getLogger("portless.state")

# The system dir is shared between root and the user's clients
SYSTEM_DIR_MODE = 0o755
USER_DIR_MODE = 0o700
FILE_MODE = 0o644


def resolve_state_dir(
    port: int,
    paths: PlatformPaths,
    *,
    override: Optional[Union[str, PurePath]] = None,
) -> PurePath:
    """
    Pick the state directory for a proxy listening on `port`.

    An explicit override always wins and must be absolute (after ~ expansion).
    Otherwise privileged ports use the system state dir and everything else
    uses the per-user one.
    """
    if override is not None:
        path = Path(override).expanduser()
        if not path.is_absolute():
            raise StateDirError(path, "state dir override must be an absolute path")
        logger.debug("Using state dir override %s", path)
        return path
    if is_privileged_port(port, paths):
        logger.debug("Port %d is privileged, using %s", port, paths.system_state_dir)
        return paths.system_state_dir
    logger.debug("Port %d is unprivileged, using %s", port, paths.user_state_dir)
    return paths.user_state_dir


def state_dir_from_settings(settings: "Settings", paths: PlatformPaths) -> PurePath:
    return resolve_state_dir(settings.port, paths, override=settings.state_dir)


class StateDir:
    """
    Handle on a resolved state directory.

    `shared` marks the system-wide directory, created world-readable so
    unprivileged clients can find a root proxy's state. When not given it is
    true only for the host's SYSTEM_STATE_DIR.

    Files are written atomically (tmp + fsync + rename), so a reader never
    sees a half-written file even if the writer crashes.
    """

    def __init__(self, path: Union[str, PurePath], *, shared: Optional[bool] = None):
        self.path = Path(path)
        if shared is None:
            shared = self.path == Path(SYSTEM_STATE_DIR)
        self.shared = shared

    @classmethod
    def for_port(
        cls,
        port: int,
        paths: PlatformPaths,
        *,
        override: Optional[Union[str, PurePath]] = None,
    ) -> "StateDir":
        path = resolve_state_dir(port, paths, override=override)
        shared = override is None and path == paths.system_state_dir
        return cls(path, shared=shared)

    def __repr__(self) -> str:
        return f"StateDir({str(self.path)!r}, shared={self.shared})"

    @property
    def mode(self) -> int:
        return SYSTEM_DIR_MODE if self.shared else USER_DIR_MODE

    def ensure(self) -> Path:
        """Create the directory if needed. Returns its path.

        A directory created here gets exactly `mode`, regardless of umask.
        An existing directory is left as it is.
        """
        created = not self.path.exists()
        try:
            self.path.mkdir(mode=self.mode, parents=True, exist_ok=True)
            if created:
                os.chmod(self.path, self.mode)
        except OSError as e:
            raise StateDirError(self.path, f"cannot create directory: {e}") from e
        if not self.path.is_dir():
            raise StateDirError(self.path, "exists but is not a directory")
        return self.path

    def file(self, name: str) -> Path:
        """Path of `name` inside the directory. Rejects anything but a plain filename."""
        if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
            raise StateDirError(self.path, f"invalid state file name {name!r}")
        return self.path / name

    def write_json(self, name: str, data: Any) -> Path:
        """Write `data` as JSON. On any failure the previous file is left untouched."""
        target = self.file(name)
        try:
            payload = json.dumps(data, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise StateDirError(target, f"cannot serialize state: {e}") from e

        self.ensure()
        tmp_path = target.with_name(target.name + ".tmp")
        try:
            fd = os.open(str(tmp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
            try:
                os.write(fd, payload)
                os.fsync(fd)
            finally:
                os.close(fd)
            os.replace(str(tmp_path), str(target))
        except OSError as e:
            try:
                tmp_path.unlink()
            except FileNotFoundError:
                pass
            raise StateDirError(target, f"cannot write state file: {e}") from e
        return target

    def read_json(self, name: str, default: Any = None) -> Any:
        """
        Read a JSON state file.

        Returns `default` if the file is missing or corrupt (bad UTF-8 or
        bad JSON). Corruption is logged; other OS errors (permissions)
        propagate as StateDirError.
        """
        target = self.file(name)
        try:
            raw = target.read_bytes()
        except FileNotFoundError:
            return default
        except OSError as e:
            raise StateDirError(target, f"cannot read state file: {e}") from e

        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as e:
            logger.warning("Corrupt JSON in %s: %s", target, e)
            return default

    def remove(self, name: str) -> bool:
        """Delete a state file. Returns False if it wasn't there."""
        target = self.file(name)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StateDirError(target, f"cannot remove state file: {e}") from e
        return True
