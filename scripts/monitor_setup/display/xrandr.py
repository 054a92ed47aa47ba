"""Thin wrapper around the xrandr binary.

Queries always run. Mode-setting commands go through :meth:`XrandrRunner.apply`,
which only logs the command when ``dry_run`` is set.
"""

import subprocess
from typing import List, Optional, Sequence

from monitor_setup.display.config import DisplayConfig
from monitor_setup.logging import Logger

logger = Logger(__name__)


class CommandError(Exception):
    """Raised when an xrandr invocation fails or cannot be started."""

    def __init__(self, args: Sequence[str], returncode: Optional[int] = None, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = f" (exit {returncode})" if returncode is not None else ""
        message = f"{' '.join(self.command)} failed{detail}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class XrandrRunner:
    def __init__(self, binary: str = DisplayConfig.XRANDR, dry_run: bool = False):
        self.binary = binary
        self.dry_run = dry_run
        self.logger = logger

    def _run(self, args: Sequence[str]) -> str:
        cmd = [self.binary] + list(args)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except subprocess.CalledProcessError as e:
            raise CommandError(cmd, e.returncode, e.stderr) from e
        except FileNotFoundError as e:
            raise CommandError(cmd, stderr=f"{self.binary} not found") from e
        return result.stdout

    def query(self) -> str:
        return self._run(["--query"])

    def list_monitors(self) -> str:
        return self._run(["--listmonitors"])

    def apply(self, args: Sequence[str]) -> None:
        if self.dry_run:
            self.logger.info("[dry-run] %s", " ".join([self.binary] + list(args)))
            return
        self.logger.debug("Running: %s", " ".join([self.binary] + list(args)))
        self._run(args)

    def output(self, name: str, *flags: str) -> None:
        self.apply(["--output", name] + list(flags))

    def off(self, name: str) -> None:
        self.output(name, "--off")

    def auto(self, name: Optional[str] = None) -> None:
        if name is None:
            self.apply(["--auto"])
        else:
            self.output(name, "--auto")

    def set_mode(self, name: str, mode: str) -> None:
        self.output(name, "--mode", mode)


def output_args(name: str, mode: Optional[str] = None, relation: Optional[str] = None,
                anchor: Optional[str] = None, primary: bool = False) -> List[str]:
    """Build the ``--output`` argument list for one placement."""
    args = ["--output", name]
    args += ["--mode", mode] if mode else ["--auto"]
    if relation and anchor:
        args += [f"--{relation}", anchor]
    if primary:
        args.append("--primary")
    return args
