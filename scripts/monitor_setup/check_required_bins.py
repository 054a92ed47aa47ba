#!/usr/bin/env python3

from typing import Optional

import shutil
from monitor_setup.logging import Logger

logger = Logger(__name__)

DEFAULT_BINS = ["xrandr"]

PACKAGE_MAP = {
    "xrandr": "xorg-xrandr",
    "rofi": "rofi",
    "dmenu": "dmenu",
    "notify-send": "libnotify",
    "pgrep": "procps-ng",
}


class BinaryChecker:
    def __init__(self, bins: Optional[list] = None):
        self.bins_to_check = bins or DEFAULT_BINS

    def check_exists(self, binary: str) -> bool:
        return shutil.which(binary) is not None

    def first_available(self) -> Optional[str]:
        return next((b for b in self.bins_to_check if self.check_exists(b)), None)

    def check_all(self) -> bool:
        missing = [b for b in self.bins_to_check if not self.check_exists(b)]

        if missing:
            logger.error("missing required binaries: %s", " ".join(missing))
            pkgs = [PACKAGE_MAP.get(b, b) for b in missing]
            pkgs_str = " ".join(sorted(set(pkgs)))
            logger.error("Suggested install (Arch): sudo pacman -S --needed %s", pkgs_str)
            return False

        logger.debug("required binaries present")
        return True
