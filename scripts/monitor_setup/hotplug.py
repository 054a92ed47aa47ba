#!/usr/bin/env python3
"""Handle monitor hotplug events from udev.

udev runs this as root without an X environment, so the handler finds the
user owning the X session, points DISPLAY/XAUTHORITY at it and runs
``monitor-setup auto`` as that user.
"""

from typing import List, Optional

import argparse
import os
import subprocess
from pathlib import Path
from monitor_setup.control import default_setup_command
from monitor_setup.display.config import DisplayConfig
from monitor_setup.logging import Logger
from monitor_setup.notify import notify
from monitor_setup.path_utils import PathResolver
from monitor_setup.user_utils import UserContext, XSession

logger = Logger(__name__)

X11_SOCKET = Path("/tmp/.X11-unix/X0")


def find_xauthority(user: str, home: str, tmp_dir: Path = Path("/tmp"), x11_socket: Path = X11_SOCKET) -> Path:
    default = PathResolver.get_user_xauthority(home)
    if default.is_file():
        return default

    uid = UserContext.get_uid(user)
    if x11_socket.exists() and uid is not None:
        for candidate in sorted(tmp_dir.glob("*X11-auth*")):
            try:
                if candidate.stat().st_uid == uid:
                    return candidate
            except OSError:
                continue

    return default


class HotplugHandler:
    def __init__(
        self,
        fallback_user: Optional[str] = None,
        fallback_display: str = DisplayConfig.HOTPLUG_FALLBACK_DISPLAY,
        setup_command: Optional[List[str]] = None,
        log_file: Optional[Path] = None,
        log: Optional[Logger] = None,
    ):
        self.logger = log or logger
        self.fallback_user = fallback_user
        self.fallback_display = fallback_display
        self.setup_command = setup_command or default_setup_command()
        self.log_file = Path(log_file) if log_file else PathResolver.get_hotplug_log_path()

    def resolve_session(self, session: XSession) -> XSession:
        user = session.user
        if not user or user == "root":
            user = self.fallback_user
        display = session.display or self.fallback_display
        return XSession(user, display)

    def command_prefix(self, user: str, display: str, xauthority: Path) -> List[str]:
        env = ["env", f"DISPLAY={display}", f"XAUTHORITY={xauthority}"]
        if UserContext.get_current_user() == user and os.geteuid() != 0:
            return env
        return ["sudo", "-u", user] + env

    def handle(self) -> int:
        self.logger.info("Monitor hotplug event detected")

        session = self.resolve_session(UserContext.find_x_session())
        self.logger.info(f"X_USER detected as: {session.user}")
        self.logger.info(f"X_DISPLAY detected as: {session.display}")
        if not session.user:
            self.logger.error("Could not determine the X session user")
            return 1

        home = UserContext.get_home_directory(session.user)
        if not home:
            self.logger.error(f"Cannot resolve home for user: {session.user}")
            return 1
        self.logger.info(f"USER_HOME: {home}")

        xauthority = find_xauthority(session.user, home)
        self.logger.info(f"Environment set: DISPLAY={session.display}, XAUTHORITY={xauthority}")

        prefix = self.command_prefix(session.user, session.display, xauthority)
        access = subprocess.run(prefix + ["xrandr", "--query"], capture_output=True, check=False)
        if access.returncode != 0:
            self.logger.error("Failed to access X11 display")
            return 1

        self.logger.info("X11 access successful, running monitor-setup")
        with open(self.log_file, "a") as log:
            rc = subprocess.run(
                prefix + self.setup_command + ["auto"], stdout=log, stderr=subprocess.STDOUT, check=False
            ).returncode

        notify("Monitor Change", "Display configuration updated", icon="display", prefix=prefix)

        self.logger.info("Monitor setup completed")
        return rc


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Re-run monitor-setup after a udev monitor hotplug event")
    parser.add_argument("--user", help="user to fall back to when no X session owner is found")
    parser.add_argument("--display", default=DisplayConfig.HOTPLUG_FALLBACK_DISPLAY,
                        help="display to fall back to when none is found")
    parser.add_argument("--setup-command", help="command used to run monitor-setup")
    parser.add_argument("--log-file", help="file to append hotplug logs to")
    parsed = parser.parse_args(argv)

    log_file = Path(parsed.log_file) if parsed.log_file else PathResolver.get_hotplug_log_path()
    file_logger = Logger(__name__, log_file=str(log_file))

    handler = HotplugHandler(
        fallback_user=parsed.user,
        fallback_display=parsed.display,
        setup_command=parsed.setup_command.split() if parsed.setup_command else None,
        log_file=log_file,
        log=file_logger,
    )
    return handler.handle()


if __name__ == "__main__":
    raise SystemExit(main())
