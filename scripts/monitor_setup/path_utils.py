#!/usr/bin/env python3

import os
from pathlib import Path


class PathResolver:
    @staticmethod
    def get_config_home() -> Path:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return Path(xdg)
        return Path.home() / ".config"

    @staticmethod
    def get_config_dir() -> Path:
        from monitor_setup.display.config import DisplayConfig
        return PathResolver.get_config_home() / DisplayConfig.CONFIG_DIR_NAME

    @staticmethod
    def get_lock_path() -> Path:
        from monitor_setup.display.config import DisplayConfig
        return DisplayConfig.LOCK_FILE

    @staticmethod
    def get_hotplug_log_path() -> Path:
        from monitor_setup.display.config import DisplayConfig
        return DisplayConfig.HOTPLUG_LOG_FILE

    @staticmethod
    def get_user_xauthority(home: str) -> Path:
        return Path(home) / ".Xauthority"
