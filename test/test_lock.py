#!/usr/bin/env python3

import os
import signal
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import monitor_setup
from monitor_setup.lock import LockHeldError, PidLock, pid_alive

SCRIPTS_DIR = Path(monitor_setup.__file__).resolve().parents[1]

HOLDER = """
import sys, time
from monitor_setup.lock import PidLock
with PidLock(sys.argv[1]):
    print("locked", flush=True)
    time.sleep(30)
"""


def dead_pid():
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait()
    return proc.pid


class TestPidLock(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "monitor-setup.lock"

    def tearDown(self):
        self.tmp.cleanup()

    def test_writes_pid_and_releases(self):
        with PidLock(self.path):
            self.assertEqual(self.path.read_text().strip(), str(os.getpid()))
        self.assertFalse(self.path.exists())

    def test_released_on_exception(self):
        with self.assertRaises(RuntimeError):
            with PidLock(self.path):
                raise RuntimeError("boom")
        self.assertFalse(self.path.exists())

    def test_released_on_system_exit(self):
        with self.assertRaises(SystemExit):
            with PidLock(self.path):
                raise SystemExit(143)
        self.assertFalse(self.path.exists())

    def test_live_holder_blocks_and_keeps_lock(self):
        holder = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            self.path.write_text(f"{holder.pid}\n")
            with self.assertRaises(LockHeldError) as ctx:
                with PidLock(self.path):
                    self.fail("lock should not be acquired")
            self.assertEqual(ctx.exception.pid, holder.pid)
            self.assertEqual(self.path.read_text().strip(), str(holder.pid))
        finally:
            holder.kill()
            holder.wait()

    def test_stale_lock_is_replaced(self):
        self.path.write_text(f"{dead_pid()}\n")
        with PidLock(self.path):
            self.assertEqual(self.path.read_text().strip(), str(os.getpid()))
        self.assertFalse(self.path.exists())

    def test_garbage_lock_is_stale(self):
        self.path.write_text("not a pid\n")
        with PidLock(self.path):
            pass
        self.assertFalse(self.path.exists())

    def test_empty_lock_being_written_is_not_stolen(self):
        holder = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
        try:
            self.path.write_text("")

            def writer_finishes(delay):
                self.path.write_text(f"{holder.pid}\n")

            with self.assertRaises(LockHeldError) as ctx:
                with PidLock(self.path, sleep=writer_finishes):
                    self.fail("lock should not be acquired")
            self.assertEqual(ctx.exception.pid, holder.pid)
            self.assertEqual(self.path.read_text().strip(), str(holder.pid))
        finally:
            holder.kill()
            holder.wait()

    def test_empty_lock_left_behind_is_stale(self):
        self.path.write_text("")
        sleep = mock.Mock()
        with PidLock(self.path, sleep=sleep):
            self.assertEqual(self.path.read_text().strip(), str(os.getpid()))
        self.assertEqual(sleep.call_count, 4)
        self.assertFalse(self.path.exists())

    def test_no_temporary_files_left(self):
        with PidLock(self.path):
            self.assertEqual(os.listdir(self.tmp.name), [self.path.name])
        self.assertEqual(os.listdir(self.tmp.name), [])

    def test_release_keeps_lock_taken_over_by_another_process(self):
        lock = PidLock(self.path)
        lock.acquire()
        self.path.write_text("1\n")
        lock.release()
        self.assertEqual(self.path.read_text().strip(), "1")


class TestPidLockSignals(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "monitor-setup.lock"

    def tearDown(self):
        self.tmp.cleanup()

    def start_holder(self):
        env = dict(os.environ, MONITOR_SETUP_LOG_LEVEL="INFO")
        env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SCRIPTS_DIR), env.get("PYTHONPATH")) if p)
        proc = subprocess.Popen(
            [sys.executable, "-c", HOLDER, str(self.path)], stdout=subprocess.PIPE, text=True, env=env
        )
        self.addCleanup(proc.stdout.close)
        for line in proc.stdout:
            if line.strip() == "locked":
                break
        return proc

    def test_signals_release_lock(self):
        for sig in (signal.SIGTERM, signal.SIGHUP, signal.SIGINT):
            with self.subTest(signal=sig.name):
                holder = self.start_holder()
                self.assertEqual(self.path.read_text().strip(), str(holder.pid))

                holder.send_signal(sig)
                self.assertEqual(holder.wait(timeout=10), 128 + sig)
                self.assertFalse(self.path.exists())


class TestPidAlive(unittest.TestCase):
    def test_self_is_alive(self):
        self.assertTrue(pid_alive(os.getpid()))

    def test_dead_process(self):
        self.assertFalse(pid_alive(dead_pid()))

    def test_invalid_pid(self):
        self.assertFalse(pid_alive(0))


if __name__ == '__main__':
    unittest.main()
