"""Serialize access to a sensor session across processes.

A sensor session (bus handle plus calibration) supports a single owner.
SessionLock takes an exclusive fcntl.flock() on a per-device lock file; the
OS releases it when the process exits, even on SIGKILL or power loss.
"""

import fcntl
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOCK_DIR = Path("/tmp")


class SessionBusyError(RuntimeError):
    """Another process holds the session lock."""


def lock_name(smbus: int, address: int) -> str:
    """Lock identifier for one device on one bus, e.g. "i2c1-0x77"."""
    return f"i2c{smbus}-0x{address:02x}"


class SessionLock:
    """Exclusive, non-blocking process lock usable as a context manager."""

    def __init__(self, name: str, lock_dir: Path = LOCK_DIR):
        """
        Args:
            name: Identifier for the lock (see lock_name()).
                  Lock file will be {lock_dir}/atmo_sensor_{name}.lock
            lock_dir: Directory holding the lock file
        """
        self._path = Path(lock_dir) / f"atmo_sensor_{name}.lock"
        self._fd = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """
        Take the lock without waiting.

        Raises:
            SessionBusyError: If another process holds it
        """
        if self._fd is not None:
            return
        fd = open(self._path, "w")
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            fd.close()
            raise SessionBusyError(f"{self._path} is held by another process")
        self._fd = fd
        logger.debug(f"Acquired {self._path}")

    def release(self) -> None:
        if self._fd is not None:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
            self._fd.close()
            self._fd = None
            logger.debug(f"Released {self._path}")

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False
