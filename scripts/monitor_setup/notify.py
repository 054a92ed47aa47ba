import subprocess
from typing import List, Optional

from monitor_setup.check_required_bins import BinaryChecker
from monitor_setup.logging import Logger

logger = Logger(__name__)


def notify(summary: str, body: str, icon: Optional[str] = None, prefix: Optional[List[str]] = None) -> bool:
    """Send a desktop notification if notify-send is installed; failures are only logged."""
    if not BinaryChecker().check_exists("notify-send"):
        logger.debug("notify-send not available, skipping notification")
        return False

    cmd = list(prefix or []) + ["notify-send"]
    if icon:
        cmd += ["-i", icon]
    cmd += [summary, body]
    try:
        subprocess.run(cmd, check=True, capture_output=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        logger.debug("notify-send failed", exc_info=True)
        return False
    return True
