"""Output and mode detection from ``xrandr --query`` / ``--listmonitors``."""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from monitor_setup.display.xrandr import XrandrRunner
from monitor_setup.logging import Logger

logger = Logger(__name__)

HEADER_RE = re.compile(
    r"^(?P<name>\S+) (?P<state>connected|disconnected)"
    r"(?P<primary> primary)?"
    r"(?: (?P<geometry>\d+x\d+\+\d+\+\d+))?"
)
MODE_RE = re.compile(r"^\s+(?P<name>(?P<width>\d+)x(?P<height>\d+)\S*)(?P<rest>.*)$")
RATE_RE = re.compile(r"\d+(?:\.\d+)?")


@dataclass
class Mode:
    name: str
    width: int
    height: int
    refresh_rates: List[float] = field(default_factory=list)
    current: bool = False
    preferred: bool = False

    def __str__(self) -> str:
        return self.name


@dataclass
class Output:
    name: str
    connected: bool
    primary: bool = False
    active: bool = False
    geometry: Optional[str] = None
    modes: List[Mode] = None

    def __post_init__(self):
        if self.modes is None:
            self.modes = []

    @property
    def enabled(self) -> bool:
        return self.geometry is not None or self.active

    @property
    def current_mode(self) -> Optional[Mode]:
        return next((m for m in self.modes if m.current), None)

    @property
    def preferred_mode(self) -> Optional[Mode]:
        return next((m for m in self.modes if m.preferred), None)


@dataclass
class DisplayState:
    outputs: List[Output]
    active_names: List[str] = field(default_factory=list)
    report: str = ""

    @property
    def connected(self) -> List[Output]:
        return [o for o in self.outputs if o.connected]

    @property
    def disconnected(self) -> List[Output]:
        return [o for o in self.outputs if not o.connected]

    @property
    def connected_names(self) -> List[str]:
        return [o.name for o in self.connected]

    @property
    def primary(self) -> Optional[Output]:
        return next((o for o in self.outputs if o.primary), None)

    @property
    def ghosts(self) -> List[str]:
        return find_ghosts(self.active_names, self.connected_names)

    def get(self, name: str) -> Optional[Output]:
        return next((o for o in self.outputs if o.name == name), None)


def find_ghosts(active: List[str], connected: List[str]) -> List[str]:
    """Outputs the monitor listing still shows but that are no longer connected."""
    connected_set = set(connected)
    ghosts: List[str] = []
    for name in active:
        if name not in connected_set and name not in ghosts:
            ghosts.append(name)
    return ghosts


def parse_mode(line: str) -> Optional[Mode]:
    match = MODE_RE.match(line)
    if not match:
        return None
    rest = match.group("rest")
    return Mode(
        name=match.group("name"),
        width=int(match.group("width")),
        height=int(match.group("height")),
        refresh_rates=[float(r) for r in RATE_RE.findall(rest)],
        current="*" in rest,
        preferred="+" in rest,
    )


def parse_query(report: str) -> List[Output]:
    outputs: List[Output] = []
    current: Optional[Output] = None

    for line in report.splitlines():
        if not line.strip() or line.startswith("Screen "):
            continue

        header = HEADER_RE.match(line)
        if header:
            current = Output(
                name=header.group("name"),
                connected=header.group("state") == "connected",
                primary=header.group("primary") is not None,
                geometry=header.group("geometry"),
            )
            outputs.append(current)
            continue

        if current is None or not line[0].isspace():
            # Unknown top-level line; stop attaching modes to the previous output
            current = None
            continue

        mode = parse_mode(line)
        if mode:
            current.modes.append(mode)

    return outputs


def parse_listmonitors(listing: str) -> List[str]:
    names: List[str] = []
    for line in listing.splitlines():
        if not line.strip() or line.startswith("Monitors:"):
            continue
        names.append(line.split()[-1])
    return names


class DisplayDetector:
    """Reads the display server state. Nothing is cached between reads."""

    def __init__(self, runner: Optional[XrandrRunner] = None):
        self.logger = logger
        self.runner = runner or XrandrRunner()

    def read_state(self) -> DisplayState:
        report = self.runner.query()
        outputs = parse_query(report)
        active_names = parse_listmonitors(self.runner.list_monitors())

        for output in outputs:
            output.active = output.name in active_names

        state = DisplayState(outputs=outputs, active_names=active_names, report=report)
        self.logger.debug(
            "Detected %d connected, %d disconnected, %d active output(s)",
            len(state.connected), len(state.disconnected), len(active_names),
        )
        return state

