from typing import List, Optional

from monitor_setup.display.config import DisplayConfig
from monitor_setup.display.detector import Mode, Output


class ModeUtils:
    @staticmethod
    def is_4k(mode: Mode) -> bool:
        return mode.width >= DisplayConfig.UHD_WIDTH

    @staticmethod
    def select_mode(modes: List[Mode]) -> Optional[Mode]:
        """Pick a mode: first 4K-or-wider, then the preferred one, then the first listed."""
        for mode in modes:
            if ModeUtils.is_4k(mode):
                return mode

        for mode in modes:
            if mode.preferred:
                return mode

        if modes:
            return modes[0]

        return None

    @staticmethod
    def best_mode_name(output: Output) -> Optional[str]:
        mode = ModeUtils.select_mode(output.modes)
        return mode.name if mode else None
