"""Named snapshots of the ``xrandr --query`` report.

A saved configuration is the raw report text. Loading restores the current
mode of each connected output; relative placement (above, left-of, right-of)
is not reconstructed.
"""

from pathlib import Path
from typing import List, Optional, Tuple

from monitor_setup.display.config import DisplayConfig
from monitor_setup.display.detector import HEADER_RE, parse_mode
from monitor_setup.logging import Logger
from monitor_setup.path_utils import PathResolver

logger = Logger(__name__)


class ConfigurationNotFoundError(FileNotFoundError):
    pass


class ConfigurationFormatError(ValueError):
    pass


def extract_assignments(report: str) -> List[Tuple[str, str]]:
    """Return ``(output, mode)`` pairs for every connected output with a current mode."""
    pairs: List[Tuple[str, str]] = []
    output: Optional[str] = None

    for line in report.splitlines():
        if line.startswith("Screen "):
            continue

        header = HEADER_RE.match(line)
        if header:
            output = None if "disconnected" in line else header.group("name")
            continue

        if output is None or not line[:1].isspace():
            output = None
            continue

        mode = parse_mode(line)
        if mode and mode.current:
            pairs.append((output, mode.name))
            output = None

    return pairs


class ConfigurationStore:
    def __init__(self, config_dir: Optional[Path] = None):
        self.logger = logger
        self.config_dir = Path(config_dir) if config_dir else PathResolver.get_config_dir()

    def path_for(self, name: str) -> Path:
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"Invalid configuration name: {name!r}")
        return self.config_dir / f"{name}{DisplayConfig.CONFIG_SUFFIX}"

    def save(self, name: str, report: str) -> Path:
        path = self.path_for(name)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(report)
        self.logger.info(f"Configuration saved to {path}")
        return path

    def read(self, name: str) -> str:
        path = self.path_for(name)
        if not path.is_file():
            raise ConfigurationNotFoundError(f"No saved configuration found for '{name}'")
        return path.read_text()

    def assignments(self, name: str) -> List[Tuple[str, str]]:
        pairs = extract_assignments(self.read(name))
        if not pairs:
            raise ConfigurationFormatError(
                f"Failed to extract configuration from {self.path_for(name)}"
            )
        return pairs

    def list_names(self) -> List[str]:
        if not self.config_dir.is_dir():
            return []
        suffix = DisplayConfig.CONFIG_SUFFIX
        return sorted(p.name[:-len(suffix)] for p in self.config_dir.glob(f"*{suffix}") if p.is_file())
