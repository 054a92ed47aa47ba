"""Monitor setup helpers.

The display package holds the xrandr-driven layout logic; the modules next to
it are the front-ends (menu, hotplug handler, window-manager reload) and the
small pieces they share.
"""

__all__ = [
    "control",
    "hotplug",
    "reload_wm",
    "check_required_bins",
]
