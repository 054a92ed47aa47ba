"""In-memory stand-in for the xrandr binary used across the tests."""

from monitor_setup.display.xrandr import CommandError, XrandrRunner

SCREEN_LINE = "Screen 0: minimum 8 x 8, current 5760 x 3240, maximum 32767 x 32767"
HEADER_TAIL = "(normal left inverted right x axis y axis) 344mm x 193mm"

DEFAULT_MODES = [
    ("1920x1080", "60.00 +", "50.00"),
    ("1280x720", "60.00",),
]


class FakeOutput:
    def __init__(self, name, connected=True, primary=False, modes=None, on=None, listed=None):
        self.name = name
        self.connected = connected
        self.primary = primary
        self.modes = [list(m) for m in (modes or DEFAULT_MODES)]
        self.current = self.modes[0][0] if (connected if on is None else on) else None
        self.listed = self.current is not None if listed is None else listed
        self.position = "0+0"

    def header(self):
        state = "connected" if self.connected else "disconnected"
        parts = [self.name, state]
        if self.primary:
            parts.append("primary")
        if self.current:
            parts.append(f"{self.current}+{self.position}")
        return " ".join(parts) + " " + HEADER_TAIL

    def mode_lines(self):
        if not self.connected:
            return []
        lines = []
        for name, *rates in self.modes:
            rendered = []
            for i, rate in enumerate(rates):
                star = "*" if name == self.current and i == 0 else ""
                if rate.endswith(" +"):
                    rendered.append(rate[:-2] + star + "+")
                else:
                    rendered.append(rate + star)
            lines.append(f"   {name:<12}  " + "  ".join(rendered))
        return lines


class FakeXrandr(XrandrRunner):
    """Renders ``--query``/``--listmonitors`` from FakeOutputs and applies commands to them.

    ``fail`` is a predicate over the argument list; matching commands raise
    CommandError. Every mode-setting command is recorded in ``commands``.
    """

    def __init__(self, outputs, ghosts=(), fail=None, dry_run=False):
        super().__init__(dry_run=dry_run)
        self.outputs = list(outputs)
        self.ghosts = list(ghosts)
        self.fail = fail or (lambda args: False)
        self.commands = []
        self.queries = 0

    def find(self, name):
        return next((o for o in self.outputs if o.name == name), None)

    def query(self):
        self.queries += 1
        lines = [SCREEN_LINE]
        for output in self.outputs:
            lines.append(output.header())
            lines.extend(output.mode_lines())
        return "\n".join(lines) + "\n"

    def list_monitors(self):
        names = [o.name for o in self.outputs if o.listed] + [g for g in self.ghosts if not self.find(g)]
        lines = [f"Monitors: {len(names)}"]
        for i, name in enumerate(names):
            lines.append(f" {i}: +{name} 1920/344x1080/193+0+0  {name}")
        return "\n".join(lines) + "\n"

    def _run(self, args):
        args = list(args)
        self.commands.append(args)
        if self.fail(args):
            raise CommandError(["xrandr"] + args, 1, "configure crtc 0 failed")
        self._mutate(args)
        return ""

    def _mutate(self, args):
        if args == ["--auto"]:
            for output in self.outputs:
                if not output.connected:
                    output.current = None
                    output.listed = False
            self.ghosts = []
            return

        if args[:1] != ["--output"]:
            return
        name = args[1]
        output = self.find(name)
        if "--off" in args:
            if name in self.ghosts:
                self.ghosts.remove(name)
            if output:
                output.current = None
                output.listed = False
            return
        if output is None or not output.connected:
            return
        if "--mode" in args:
            output.current = args[args.index("--mode") + 1]
        elif "--auto" in args and output.current is None:
            output.current = output.modes[0][0]
        output.listed = True
        if "--primary" in args:
            for other in self.outputs:
                other.primary = other is output


def laptop(name="eDP-1", primary=True, **kwargs):
    return FakeOutput(name, primary=primary, **kwargs)


def uhd_monitor(name="HDMI-1", **kwargs):
    modes = [
        ("2560x1440", "59.95"),
        ("3840x2160", "30.00", "25.00"),
        ("1920x1080", "60.00 +", "50.00", "59.94"),
    ]
    return FakeOutput(name, modes=modes, **kwargs)
