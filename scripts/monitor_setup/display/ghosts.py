"""Ghost output cleanup and the neutral reset used before and after layouts."""

from typing import List, Optional

from monitor_setup.display.detector import DisplayDetector, DisplayState
from monitor_setup.display.xrandr import CommandError, XrandrRunner
from monitor_setup.logging import Logger

logger = Logger(__name__)


class GhostCleaner:
    def __init__(self, detector: DisplayDetector, runner: XrandrRunner):
        self.logger = logger
        self.detector = detector
        self.runner = runner

    def stale_outputs(self, state: DisplayState) -> List[str]:
        """Ghosts plus disconnected outputs that are still switched on."""
        names = list(state.ghosts)
        for output in state.disconnected:
            if output.enabled and output.name not in names:
                names.append(output.name)
        return names

    def disable_stale(self, state: DisplayState) -> List[str]:
        ghosts = set(state.ghosts)
        disabled = []
        for name in self.stale_outputs(state):
            kind = "ghost" if name in ghosts else "disconnected"
            self.logger.debug(f"Disabling {kind} monitor: {name}")
            try:
                self.runner.off(name)
            except CommandError as e:
                # Turning off an output that is already off is not an error
                self.logger.debug(f"Ignoring failure to disable {name}: {e}")
                continue
            disabled.append(name)
        return disabled

    def _enable_connected(self, state: DisplayState) -> bool:
        ok = True
        for output in state.connected:
            self.logger.debug(f"Resetting connected monitor: {output.name}")
            try:
                self.runner.auto(output.name)
            except CommandError as e:
                self.logger.warning(f"Failed to reset {output.name}: {e}")
                ok = False

        self.logger.debug("Performing final cleanup of all outputs...")
        try:
            self.runner.auto()
        except CommandError as e:
            self.logger.warning(f"Global auto reset failed: {e}")
            ok = False
        return ok

    def reset(self, state: Optional[DisplayState] = None) -> bool:
        self.logger.info("Resetting all monitor configurations...")
        state = state or self.detector.read_state()

        if state.ghosts:
            self.logger.warning(f"Found {len(state.ghosts)} ghost monitor(s): {' '.join(state.ghosts)}")

        self.disable_stale(state)
        return self._enable_connected(state)

    def clean(self) -> List[str]:
        """Disable ghosts, re-enable connected outputs and return any ghosts left over."""
        self.logger.info("Cleaning up ghost monitors and resetting display configuration...")
        state = self.detector.read_state()

        connected = state.connected_names
        disconnected = [o.name for o in state.disconnected]
        self.logger.info("Current status:")
        self.logger.info(f"  Connected monitors: {len(connected)} ({' '.join(connected)})")
        self.logger.info(f"  Disconnected monitors: {len(disconnected)} ({' '.join(disconnected)})")
        self.logger.info(f"  Ghost monitors: {len(state.ghosts)} ({' '.join(state.ghosts)})")

        self.disable_stale(state)
        self._enable_connected(state)

        remaining = self.detector.read_state().ghosts
        if remaining:
            self.logger.warning(f"Some ghost monitors may still remain: {' '.join(remaining)}")
        else:
            self.logger.info("Ghost monitor cleanup completed successfully")
        return remaining
