"""Target platform variants and platform-specific path quoting."""
from __future__ import annotations

from enum import Enum
import re
import sys


class Platform(str, Enum):
    """Supported target operating systems.

    ``MAC_OS`` doubles as the Unix-like variant for every non-Windows host.
    The values are the identifiers the packaging tool expects.
    """

    MAC_OS = "darwin"
    WINDOWS = "win32"

    @classmethod
    def from_host(cls, sys_platform: str | None = None) -> "Platform":
        identifier = sys_platform if sys_platform is not None else sys.platform
        if identifier.startswith("win"):
            return cls.WINDOWS
        return cls.MAC_OS

    @property
    def is_windows(self) -> bool:
        return self is Platform.WINDOWS


HOST_PLATFORM = Platform.from_host()

_WHITESPACE = re.compile(r"\s")


def quote_path(path: str, platform: Platform) -> str:
    """Return ``path`` quoted for the command line of ``platform``.

    Windows paths containing a space are wrapped in double quotes and use
    backslash separators; other platforms escape each whitespace character.
    """

    if platform.is_windows:
        if " " in path:
            path = f'"{path}"'
        return path.replace("/", "\\")
    return _WHITESPACE.sub(lambda match: "\\" + match.group(0), path)


def unquote_path(quoted: str, platform: Platform) -> str:
    """Undo :func:`quote_path` (separators normalised on Windows stay normalised)."""

    if platform.is_windows:
        if len(quoted) >= 2 and quoted.startswith('"') and quoted.endswith('"'):
            return quoted[1:-1]
        return quoted
    return re.sub(r"\\(\s)", r"\1", quoted)


__all__ = ["HOST_PLATFORM", "Platform", "quote_path", "unquote_path"]
