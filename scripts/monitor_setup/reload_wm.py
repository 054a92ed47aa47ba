#!/usr/bin/env python3
"""Ask the window manager to restart so it picks up the new monitor layout.

dwm has to be built to re-exec itself on SIGHUP for this to have any effect.
"""

from typing import List, Optional

import argparse
import os
import signal
import subprocess
from monitor_setup.display.config import DisplayConfig
from monitor_setup.logging import Logger

logger = Logger(__name__)


class WindowManagerReloader:
    def __init__(self, name: str = DisplayConfig.WINDOW_MANAGER):
        self.name = name

    def find_pids(self) -> List[int]:
        try:
            result = subprocess.run(["pgrep", "-x", self.name], capture_output=True, text=True, check=True)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return []
        return [int(p) for p in result.stdout.split() if p.isdigit()]

    def reload(self) -> int:
        pids = self.find_pids()
        if not pids:
            logger.error(f"{self.name} is not running")
            return 1

        for pid in pids:
            logger.info(f"Restarting {self.name} (PID: {pid})...")
            try:
                os.kill(pid, signal.SIGHUP)
            except ProcessLookupError:
                logger.warning(f"{self.name} (PID: {pid}) exited before it could be signalled")
            except PermissionError:
                logger.error(f"Not allowed to signal {self.name} (PID: {pid})")
                return 1

        logger.info(f"{self.name} restart signal sent")
        return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Send SIGHUP to the window manager")
    parser.add_argument("--wm", default=DisplayConfig.WINDOW_MANAGER, help="window manager process name")
    parsed = parser.parse_args(argv)
    return WindowManagerReloader(parsed.wm).reload()


if __name__ == "__main__":
    raise SystemExit(main())
