"""Display configuration manager - main module."""

import time
from pathlib import Path
from typing import Callable, Optional

from rich.table import Table

from monitor_setup.display.detector import DisplayDetector
from monitor_setup.display.ghosts import GhostCleaner
from monitor_setup.display.layout import (
    InsufficientOutputsError,
    LayoutApplier,
    LayoutPlanner,
    PlanningError,
)
from monitor_setup.display.modeutils import ModeUtils
from monitor_setup.display.profiles import (
    ConfigurationFormatError,
    ConfigurationNotFoundError,
    ConfigurationStore,
)
from monitor_setup.display.xrandr import CommandError, XrandrRunner
from monitor_setup.logging import Logger

logger = Logger(__name__)


class DisplayManager:
    def __init__(
        self,
        runner: Optional[XrandrRunner] = None,
        config_dir: Optional[Path] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.logger = logger
        self.runner = runner or XrandrRunner()
        self.detector = DisplayDetector(self.runner)
        self.cleaner = GhostCleaner(self.detector, self.runner)
        self.planner = LayoutPlanner()
        self.applier = LayoutApplier(self.runner, self.cleaner, sleep=sleep or time.sleep)
        self.store = ConfigurationStore(config_dir)

    def configure(self, kind: str) -> bool:
        """Plan ``kind`` against a fresh read of the outputs and apply it."""
        self.logger.info(f"Configuring {kind} monitor setup...")
        state = self.detector.read_state()

        try:
            layout = self.planner.plan(state, kind)
        except InsufficientOutputsError as e:
            self.logger.error(str(e))
            if kind == "triple":
                self.logger.info("Falling back to single monitor setup if possible.")
                self.configure("single")
            else:
                self.logger.info("Using only the primary monitor.")
                self.cleaner.reset()
            return False
        except PlanningError as e:
            self.logger.error(str(e))
            return False

        return self.applier.apply(layout)

    def apply_layout(self, kind: str) -> bool:
        """Reset to a clean state, then apply ``single``, ``triple`` or ``auto``."""
        try:
            self.cleaner.reset()
            return self.configure(kind)
        except CommandError as e:
            self.logger.error(f"Failed to query display state: {e}")
            return False

    def clean(self) -> bool:
        try:
            self.cleaner.clean()
        except CommandError as e:
            self.logger.error(f"Failed to query display state: {e}")
            return False
        return True

    def save(self, name: str) -> bool:
        try:
            self.store.path_for(name)
        except ValueError as e:
            self.logger.error(str(e))
            return False

        self.logger.info(f"Saving current configuration as '{name}'...")
        try:
            report = self.runner.query()
        except CommandError as e:
            self.logger.error(f"Failed to query display state: {e}")
            return False
        self.store.save(name, report)
        return True

    def load(self, name: str) -> bool:
        try:
            assignments = self.store.assignments(name)
        except (ConfigurationNotFoundError, ConfigurationFormatError, ValueError) as e:
            self.logger.error(str(e))
            return False

        self.logger.info(f"Loading configuration from {self.store.path_for(name)}...")
        try:
            connected = set(self.detector.read_state().connected_names)
            self.runner.auto()

            for output, mode in assignments:
                if output not in connected:
                    self.logger.warning(f"Skipping {output}: not connected")
                    continue
                self.logger.debug(f"Setting {output} to {mode}")
                self.runner.set_mode(output, mode)
        except CommandError as e:
            self.logger.error(f"Failed to load configuration '{name}': {e}")
            return False

        self.logger.info("Configuration loaded successfully")
        return True

    def get_display_info(self) -> Table:
        state = self.detector.read_state()
        ghosts = set(state.ghosts)

        table = Table(title=f"Connected monitors: {len(state.connected)}")
        table.add_column("Output", style="bold")
        table.add_column("State")
        table.add_column("Primary", justify="center")
        table.add_column("Current")
        table.add_column("Best")
        table.add_column("Available")

        for output in state.outputs:
            if output.name in ghosts:
                status = "[red]ghost[/red]"
            elif output.connected:
                status = "[green]connected[/green]"
            elif output.enabled:
                status = "[yellow]disconnected (on)[/yellow]"
            else:
                status = "[dim]disconnected[/dim]"

            current = output.current_mode
            table.add_row(
                output.name,
                status,
                "✓" if output.primary else "",
                output.geometry or (current.name if current else ""),
                ModeUtils.best_mode_name(output) or "",
                ", ".join(m.name for m in output.modes[:5]),
            )

        for name in state.ghosts:
            if state.get(name) is not None:
                continue
            table.add_row(name, "[red]ghost[/red]", "", "", "", "")

        return table
