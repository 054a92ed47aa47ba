#!/usr/bin/env python3
"""rofi/dmenu front-end for monitor-setup, meant to be bound to a key in dwm."""

from typing import List, Optional

import argparse
import shutil
import subprocess
import sys
from monitor_setup.check_required_bins import BinaryChecker
from monitor_setup.display.config import DisplayConfig
from monitor_setup.display.profiles import ConfigurationStore
from monitor_setup.logging import Logger
from monitor_setup.notify import notify
from monitor_setup.reload_wm import WindowManagerReloader

logger = Logger(__name__)

MENU_BINS = ["rofi", "dmenu"]
PROMPT = "Monitor Setup:"
SAVE_PROMPT = "Save as:"
NOTIFY_TITLE = "Monitor Setup"


def default_setup_command() -> List[str]:
    exe = shutil.which("monitor-setup")
    if exe:
        return [exe]
    return [sys.executable, "-m", "monitor_setup"]


def menu_command(menu: str, prompt: str) -> List[str]:
    if menu == "rofi":
        return ["rofi", "-dmenu", "-p", prompt]
    return [menu, "-p", prompt]


class MenuLauncher:
    def __init__(
        self,
        setup_command: Optional[List[str]] = None,
        store: Optional[ConfigurationStore] = None,
        reloader: Optional[WindowManagerReloader] = None,
    ):
        self.setup_command = setup_command or default_setup_command()
        self.store = store or ConfigurationStore()
        self.reloader = reloader or WindowManagerReloader()
        self.menu = BinaryChecker(MENU_BINS).first_available()

    def options(self) -> List[str]:
        options = list(DisplayConfig.LAYOUT_MODES)
        options.sort(key=lambda m: m != DisplayConfig.DEFAULT_MODE)
        options.append("save")
        options += [f"load {name}" for name in self.store.list_names()]
        return options

    def choose(self, options: List[str], prompt: str = PROMPT) -> str:
        result = subprocess.run(
            menu_command(self.menu, prompt),
            input="\n".join(options),
            capture_output=True,
            text=True,
            check=False,
        )
        # rofi and dmenu exit non-zero when the menu is dismissed
        if result.returncode != 0:
            return ""
        return result.stdout.strip()

    def run_setup(self, args: List[str]) -> int:
        cmd = self.setup_command + args
        logger.debug(f"Running: {' '.join(cmd)}")
        return subprocess.run(cmd, check=False).returncode

    def save(self) -> int:
        name = self.choose([], SAVE_PROMPT)
        if not name:
            return 0
        rc = self.run_setup(["save", name])
        if rc == 0:
            notify(NOTIFY_TITLE, f"Configuration saved as '{name}'")
        return rc

    def run(self) -> int:
        if self.menu is None:
            logger.error("Neither rofi nor dmenu is installed")
            return 1

        selection = self.choose(self.options())
        if not selection:
            return 0

        if selection == "save":
            return self.save()

        if selection.startswith("load "):
            rc = self.run_setup(["load", selection.split(" ", 1)[1].strip()])
        else:
            rc = self.run_setup([selection])

        self.reloader.reload()
        notify(NOTIFY_TITLE, f"Applied configuration: {selection}")
        return rc


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Pick a monitor configuration from a rofi/dmenu menu")
    parser.add_argument("--setup-command", help="command used to run monitor-setup")
    parser.add_argument("--wm", default=DisplayConfig.WINDOW_MANAGER, help="window manager to restart afterwards")
    parsed = parser.parse_args(argv)

    setup_command = parsed.setup_command.split() if parsed.setup_command else None
    launcher = MenuLauncher(setup_command, reloader=WindowManagerReloader(parsed.wm))
    return launcher.run()


if __name__ == "__main__":
    raise SystemExit(main())
