#!/usr/bin/env python3

import os
import re
import subprocess
from dataclasses import dataclass
from typing import Optional

try:
    import pwd
except ImportError:
    pwd = None

SESSION_RE = re.compile(r"^(?P<user>\S+)\s.*\((?P<display>:\d+(?:\.\d+)?)\)")


@dataclass
class XSession:
    user: Optional[str]
    display: Optional[str]


def parse_who(output: str) -> XSession:
    """First ``who`` line whose host column is an X display, e.g. ``(:0)``."""
    for line in output.splitlines():
        match = SESSION_RE.match(line)
        if match:
            return XSession(match.group("user"), match.group("display"))
    return XSession(None, None)


class UserContext:
    @staticmethod
    def get_current_user() -> str:
        user = os.environ.get("SUDO_USER") or os.environ.get("USER") or os.environ.get("USERNAME")
        if user:
            return user

        if pwd is not None:
            try:
                return pwd.getpwuid(os.getuid()).pw_name
            except KeyError:
                pass

        try:
            return os.getlogin()
        except OSError:
            return "unknown"

    @staticmethod
    def get_home_directory(username: str) -> Optional[str]:
        if pwd is not None:
            try:
                return pwd.getpwnam(username).pw_dir
            except KeyError:
                return None

        if username == UserContext.get_current_user():
            return os.path.expanduser("~")

        return None

    @staticmethod
    def get_uid(username: str) -> Optional[int]:
        if pwd is None:
            return None
        try:
            return pwd.getpwnam(username).pw_uid
        except KeyError:
            return None

    @staticmethod
    def find_x_session() -> XSession:
        try:
            result = subprocess.run(["who"], capture_output=True, text=True, check=True)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return XSession(None, None)
        return parse_who(result.stdout)
