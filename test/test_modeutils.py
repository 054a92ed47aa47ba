#!/usr/bin/env python3

import unittest

from monitor_setup.display.detector import Mode, Output
from monitor_setup.display.modeutils import ModeUtils


def mode(name, preferred=False):
    width, height = name.split("x")
    return Mode(name, int(width), int(height.rstrip("i")), preferred=preferred)


class TestSelectMode(unittest.TestCase):
    def test_4k_wins_wherever_it_is(self):
        for position in range(3):
            modes = [mode("2560x1440", preferred=True), mode("1920x1080"), mode("1280x720")]
            modes.insert(position, mode("3840x2160"))
            self.assertEqual(ModeUtils.select_mode(modes).name, "3840x2160")

    def test_first_4k_in_report_order(self):
        modes = [mode("1920x1080"), mode("5120x2880"), mode("3840x2160", preferred=True)]
        self.assertEqual(ModeUtils.select_mode(modes).name, "5120x2880")

    def test_preferred_without_4k(self):
        modes = [mode("2560x1440"), mode("1920x1080", preferred=True), mode("1280x720")]
        self.assertEqual(ModeUtils.select_mode(modes).name, "1920x1080")

    def test_first_listed_otherwise(self):
        modes = [mode("2560x1440"), mode("1920x1080")]
        self.assertEqual(ModeUtils.select_mode(modes).name, "2560x1440")

    def test_empty(self):
        self.assertIsNone(ModeUtils.select_mode([]))
        self.assertIsNone(ModeUtils.best_mode_name(Output("HDMI-1", True)))

    def test_same_input_same_answer(self):
        modes = [mode("2560x1440"), mode("1920x1080", preferred=True)]
        self.assertIs(ModeUtils.select_mode(modes), ModeUtils.select_mode(modes))


if __name__ == '__main__':
    unittest.main()
