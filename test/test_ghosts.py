#!/usr/bin/env python3

import unittest

from monitor_setup.display.detector import DisplayDetector
from monitor_setup.display.ghosts import GhostCleaner

from fake_xrandr import FakeOutput, FakeXrandr, laptop, uhd_monitor


def off_commands(fake):
    return [c for c in fake.commands if "--off" in c]


class TestClean(unittest.TestCase):
    def setUp(self):
        self.fake = FakeXrandr(
            [laptop(), uhd_monitor(),
             FakeOutput("DP-1", connected=False, on=True),
             FakeOutput("DP-2", connected=False, on=False)],
            ghosts=["DP-3"],
        )
        self.cleaner = GhostCleaner(DisplayDetector(self.fake), self.fake)

    def test_disables_ghosts_and_disconnected_outputs_still_on(self):
        remaining = self.cleaner.clean()

        self.assertEqual(remaining, [])
        self.assertEqual(off_commands(self.fake), [
            ["--output", "DP-1", "--off"],
            ["--output", "DP-3", "--off"],
        ])
        self.assertIn(["--output", "eDP-1", "--auto"], self.fake.commands)
        self.assertIn(["--output", "HDMI-1", "--auto"], self.fake.commands)
        self.assertEqual(self.fake.commands[-1], ["--auto"])

    def test_idempotent(self):
        self.cleaner.clean()
        self.fake.commands = []

        remaining = self.cleaner.clean()

        self.assertEqual(remaining, [])
        self.assertEqual(off_commands(self.fake), [])

    def test_disable_failures_are_tolerated(self):
        self.fake.fail = lambda args: "--off" in args
        self.cleaner.clean()
        self.assertEqual(self.fake.commands[-1], ["--auto"])

    def test_connected_failures_are_not_fatal(self):
        self.fake.fail = lambda args: args == ["--output", "eDP-1", "--auto"]
        self.cleaner.clean()
        self.assertIn(["--output", "HDMI-1", "--auto"], self.fake.commands)


class TestReset(unittest.TestCase):
    def test_reports_failure(self):
        fake = FakeXrandr([laptop()], fail=lambda args: args == ["--auto"])
        cleaner = GhostCleaner(DisplayDetector(fake), fake)
        self.assertFalse(cleaner.reset())

    def test_success(self):
        fake = FakeXrandr([laptop(), FakeOutput("DP-1", connected=False, on=True)])
        cleaner = GhostCleaner(DisplayDetector(fake), fake)
        self.assertTrue(cleaner.reset())
        self.assertEqual(fake.commands[0], ["--output", "DP-1", "--off"])


if __name__ == '__main__':
    unittest.main()
