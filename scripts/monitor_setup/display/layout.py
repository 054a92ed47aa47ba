"""Layout planning and application.

Planning is a pure step over a :class:`DisplayState`: the number of connected
outputs picks one of the templates below. Applying a layout issues the
xrandr commands with bounded retries and falls back to a full reset when the
placements cannot be applied.

Placement policy for the triple layout is "connection order": the first
connected non-primary output goes left of the primary, the second goes right.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from monitor_setup.display.config import DisplayConfig
from monitor_setup.display.detector import DisplayState, Output
from monitor_setup.display.ghosts import GhostCleaner
from monitor_setup.display.modeutils import ModeUtils
from monitor_setup.display.xrandr import CommandError, XrandrRunner, output_args
from monitor_setup.logging import Logger

logger = Logger(__name__)


class PlanningError(Exception):
    pass


class InsufficientOutputsError(PlanningError):
    def __init__(self, layout: str, required: int, found: int):
        self.layout = layout
        self.required = required
        self.found = found
        super().__init__(
            f"Not enough monitors connected for {layout} monitor setup. Found: {found}, need {required}"
        )


class Relation(Enum):
    NONE = "none"
    ABOVE = "above"
    LEFT_OF = "left-of"
    RIGHT_OF = "right-of"


class LayoutKind(Enum):
    BASIC = "basic"
    SINGLE = "single"
    TRIPLE = "triple"
    RESET = "reset"


@dataclass
class Placement:
    output: str
    mode: Optional[str] = None
    relation: Relation = Relation.NONE
    anchor: Optional[str] = None
    primary: bool = False

    def candidates(self) -> List[List[str]]:
        """Argument lists to try in order; an explicit mode falls back to auto."""
        relation = None if self.relation is Relation.NONE else self.relation.value
        attempts = []
        if self.mode:
            attempts.append(output_args(self.output, self.mode, relation, self.anchor, self.primary))
        attempts.append(output_args(self.output, None, relation, self.anchor, self.primary))
        return attempts

    def describe(self) -> str:
        mode = self.mode or "auto"
        if self.relation is Relation.NONE:
            where = "primary" if self.primary else "standalone"
        else:
            where = f"{self.relation.value} {self.anchor}"
        return f"{self.output}: {where}/{mode}"


@dataclass
class Layout:
    kind: LayoutKind
    placements: List[Placement] = field(default_factory=list)

    @property
    def primary(self) -> Optional[Placement]:
        return next((p for p in self.placements if p.primary), None)

    @property
    def secondary(self) -> List[Placement]:
        return [p for p in self.placements if not p.primary]

    def outputs(self) -> List[str]:
        return [p.output for p in self.placements]

    def get(self, name: str) -> Optional[Placement]:
        return next((p for p in self.placements if p.output == name), None)

    def validate(self, state: DisplayState) -> None:
        if sum(1 for p in self.placements if p.primary) > 1:
            raise PlanningError("Layout has more than one primary output")

        connected = set(state.connected_names)
        for placement in self.placements:
            if placement.output not in connected:
                raise PlanningError(f"Layout references output that is not connected: {placement.output}")
            if placement.anchor is not None and placement.anchor not in connected:
                raise PlanningError(f"Layout anchors on output that is not connected: {placement.anchor}")


class LayoutPlanner:
    def __init__(self):
        self.logger = logger

    def _primary(self, state: DisplayState) -> Output:
        primary = state.primary
        if primary is None or not primary.connected:
            raise PlanningError("Could not identify the primary monitor")
        return primary

    def _others(self, state: DisplayState, primary: Output) -> List[Output]:
        return [o for o in state.connected if o.name != primary.name]

    def plan_basic(self, state: DisplayState) -> Layout:
        connected = state.connected
        if not connected:
            raise InsufficientOutputsError("basic", 1, 0)
        return Layout(LayoutKind.BASIC, [Placement(connected[0].name, primary=True)])

    def plan_single(self, state: DisplayState) -> Layout:
        found = len(state.connected)
        if found < 2:
            raise InsufficientOutputsError("single", 2, found)

        primary = self._primary(state)
        external = self._others(state, primary)[0]
        return Layout(LayoutKind.SINGLE, [
            Placement(primary.name, primary=True),
            Placement(external.name, ModeUtils.best_mode_name(external), Relation.ABOVE, primary.name),
        ])

    def plan_triple(self, state: DisplayState) -> Layout:
        found = len(state.connected)
        if found < 3:
            raise InsufficientOutputsError("triple", 3, found)

        primary = self._primary(state)
        left, right = self._others(state, primary)[:2]
        return Layout(LayoutKind.TRIPLE, [
            Placement(primary.name, primary=True),
            Placement(left.name, None, Relation.LEFT_OF, primary.name),
            Placement(right.name, None, Relation.RIGHT_OF, primary.name),
        ])

    def plan_auto(self, state: DisplayState) -> Layout:
        count = len(state.connected)
        self.logger.info(f"Detected {count} connected monitors.")

        if count == 1:
            self.logger.info("Only one monitor detected. Using basic setup.")
            return self.plan_basic(state)
        if count == 2:
            self.logger.info("Two monitors detected. Using single external monitor setup.")
            return self.plan_single(state)
        if count == 3:
            self.logger.info("Three monitors detected. Using triple monitor setup.")
            return self.plan_triple(state)

        self.logger.warning(f"Unusual number of monitors: {count}. Using auto configuration.")
        return Layout(LayoutKind.RESET)

    def plan(self, state: DisplayState, kind: str) -> Layout:
        planners = {
            "single": self.plan_single,
            "triple": self.plan_triple,
            "auto": self.plan_auto,
        }
        if kind not in planners:
            raise ValueError(f"Unknown layout: {kind}")

        layout = planners[kind](state)
        layout.validate(state)
        for placement in layout.placements:
            self.logger.info(f"Planned {placement.describe()}")
        return layout


class LayoutApplier:
    def __init__(
        self,
        runner: XrandrRunner,
        cleaner: GhostCleaner,
        max_attempts: int = DisplayConfig.MAX_ATTEMPTS,
        delay: float = DisplayConfig.RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logger
        self.runner = runner
        self.cleaner = cleaner
        self.max_attempts = max_attempts
        self.delay = delay
        self.sleep = sleep

    def _place(self, placement: Placement) -> bool:
        for args in placement.candidates():
            try:
                self.runner.apply(args)
                return True
            except CommandError as e:
                self.logger.warning(f"Failed to place {placement.output}: {e}")
        return False

    def _attempt(self, placements: List[Placement]) -> bool:
        return all(self._place(p) for p in placements)

    def apply(self, layout: Layout) -> bool:
        if layout.kind is LayoutKind.RESET:
            return self.cleaner.reset()

        primary = layout.primary
        if primary is not None:
            try:
                self.runner.apply(primary.candidates()[-1])
            except CommandError as e:
                self.logger.error(f"Failed to set primary monitor {primary.output}: {e}")
                self.cleaner.reset()
                return False

        secondary = layout.secondary
        if not secondary:
            return True

        for attempt in range(1, self.max_attempts + 1):
            self.logger.debug(f"Attempt {attempt} of {self.max_attempts}...")
            if self._attempt(secondary):
                self.logger.info(f"Successfully configured {layout.kind.value} monitor setup.")
                return True

            if attempt < self.max_attempts:
                self.logger.warning(f"Failed to configure monitors on attempt {attempt}. Retrying...")
                self.sleep(self.delay)

        self.logger.error(
            f"Failed to configure {layout.kind.value} monitor setup after {self.max_attempts} attempts."
        )
        self.cleaner.reset()
        return False
