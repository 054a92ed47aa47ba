"""PID file guard so only one monitor-setup run touches the display at a time."""

import os
import signal
import tempfile
import time
from pathlib import Path
from typing import Dict, Optional, Union

from monitor_setup.logging import Logger

logger = Logger(__name__)

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGHUP, signal.SIGINT)

# An empty lock file may belong to a writer that has not flushed its PID yet
EMPTY_READ_ATTEMPTS = 5
EMPTY_READ_DELAY = 0.1


class LockHeldError(RuntimeError):
    def __init__(self, path: Path, pid: int):
        self.path = path
        self.pid = pid
        super().__init__(f"Another instance is already running with PID {pid}")


def pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


class PidLock:
    """Context manager holding ``path`` for the lifetime of the ``with`` block.

    The holder's PID is written to a temporary file first and hard-linked into
    place, so the lock never appears without its PID. An existing file whose
    PID is no longer running is treated as stale and replaced. While held,
    SIGTERM, SIGHUP and SIGINT exit through ``SystemExit`` so the file is
    always removed.
    """

    def __init__(self, path: Union[str, Path], sleep=time.sleep):
        self.logger = logger
        self.path = Path(path)
        self.held = False
        self.sleep = sleep
        self._previous_handlers: Dict[int, object] = {}

    def _read_pid(self) -> Optional[int]:
        text = ""
        for attempt in range(EMPTY_READ_ATTEMPTS):
            try:
                text = self.path.read_text().strip()
            except FileNotFoundError:
                return None
            if text:
                break
            if attempt + 1 < EMPTY_READ_ATTEMPTS:
                self.sleep(EMPTY_READ_DELAY)
        try:
            return int(text)
        except ValueError:
            return 0

    def _create(self) -> bool:
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w") as fh:
                fh.write(f"{os.getpid()}\n")
            os.chmod(tmp, 0o644)
            try:
                os.link(tmp, str(self.path))
            except FileExistsError:
                return False
            return True
        finally:
            os.unlink(tmp)

    def acquire(self) -> None:
        for _ in range(2):
            if self._create():
                self.held = True
                self.logger.debug("Lock file created")
                return

            pid = self._read_pid()
            if pid is not None and pid_alive(pid):
                raise LockHeldError(self.path, pid)

            self.logger.warning("Found stale lock file. Removing.")
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass

        pid = self._read_pid() or 0
        raise LockHeldError(self.path, pid)

    def release(self) -> None:
        if not self.held:
            return
        self.held = False
        try:
            owner = int(self.path.read_text().strip())
        except (FileNotFoundError, ValueError):
            return
        if owner != os.getpid():
            self.logger.warning(f"Lock file now belongs to PID {owner}, leaving it in place")
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        self.logger.debug("Lock file removed")

    def _on_signal(self, signum, frame):
        raise SystemExit(128 + signum)

    def _install_handlers(self) -> None:
        for sig in HANDLED_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(sig, self._on_signal)
            except ValueError:
                # Not the main thread; rely on the finally block only
                pass

    def _restore_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()

    def __enter__(self) -> "PidLock":
        self.acquire()
        self._install_handlers()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self._restore_handlers()
        finally:
            self.release()
