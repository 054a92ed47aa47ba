"""Monitor layout configuration on top of xrandr."""

from .manager import DisplayManager
from .cli import main

__all__ = ['DisplayManager', 'main']
