from pathlib import Path


class DisplayConfig:
    # External tool
    XRANDR = "xrandr"

    # Filesystem locations
    LOCK_FILE = Path("/tmp/monitor-setup.lock")
    CONFIG_DIR_NAME = "monitor-setup"
    CONFIG_SUFFIX = ".conf"
    HOTPLUG_LOG_FILE = Path("/tmp/monitor-hotplug.log")

    # Placement retries
    MAX_ATTEMPTS = 3
    RETRY_DELAY = 1.0

    # Widths at or above this count as 4K
    UHD_WIDTH = 3840

    # Modes accepted on the command line
    LAYOUT_MODES = ("single", "triple", "auto")
    ACTION_MODES = ("save", "load", "clean")
    DEFAULT_MODE = "auto"

    # Front-end collaborators
    WINDOW_MANAGER = "dwm"
    HOTPLUG_FALLBACK_DISPLAY = ":1"
