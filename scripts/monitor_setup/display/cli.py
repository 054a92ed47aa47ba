"""CLI entry point for the monitor setup tool."""

import argparse
from typing import List, Optional

from rich.console import Console

from monitor_setup.check_required_bins import BinaryChecker
from monitor_setup.display.config import DisplayConfig
from monitor_setup.display.manager import DisplayManager
from monitor_setup.display.xrandr import CommandError, XrandrRunner
from monitor_setup.lock import LockHeldError, PidLock
from monitor_setup.logging import Logger
from monitor_setup.path_utils import PathResolver

logger = Logger(__name__)

MODES = DisplayConfig.LAYOUT_MODES + DisplayConfig.ACTION_MODES
USAGE = "monitor-setup [single|triple|auto|save|load|clean] [name]"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="monitor-setup",
        usage=USAGE,
        description="Arrange external monitors with xrandr, save and restore configurations",
    )
    parser.add_argument("mode", nargs="?", default=DisplayConfig.DEFAULT_MODE,
                        help="single, triple, auto (default), clean, save or load")
    parser.add_argument("name", nargs="?", help="configuration name for save/load")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Log mode-setting commands instead of running them")
    parser.add_argument("--info", action="store_true", help="Show display information and exit")
    parser.add_argument("--config-dir", help="Directory for saved configurations")
    parser.add_argument("--lock-file", help="Path of the lock file")
    return parser.parse_args(argv)


def run_mode(manager: DisplayManager, mode: str, name: Optional[str]) -> bool:
    if mode == "save":
        return manager.save(name)
    if mode == "load":
        return manager.load(name)
    if mode == "clean":
        return manager.clean()

    ok = manager.apply_layout(mode)
    if ok:
        logger.info("Monitor setup completed.")
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        Logger.set_global_level("DEBUG")

    if not BinaryChecker().check_all():
        return 1

    runner = XrandrRunner(dry_run=args.dry_run)
    manager = DisplayManager(runner, config_dir=args.config_dir)

    if args.info:
        try:
            Console().print(manager.get_display_info())
        except CommandError as e:
            logger.error(f"Failed to query display state: {e}")
            return 1
        return 0

    mode = args.mode
    if mode not in MODES:
        logger.error(f"Unknown mode: {mode}")
        logger.info(f"Available modes: {', '.join(MODES)}")
        logger.info(f"Usage: {USAGE}")
        return 1

    if mode in ("save", "load") and not args.name:
        logger.error(f"{mode.capitalize()} requires a name parameter")
        logger.info(f"Usage: monitor-setup {mode} <name>")
        return 1

    lock_path = args.lock_file or PathResolver.get_lock_path()
    logger.info(f"Starting monitor setup in '{mode}' mode...")
    try:
        with PidLock(lock_path):
            ok = run_mode(manager, mode, args.name)
    except LockHeldError as e:
        logger.warning(str(e))
        return 1

    return 0 if ok else 1


if __name__ == '__main__':
    raise SystemExit(main())
