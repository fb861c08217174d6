"""Level-filtered console output shared by the specbuild and specdiff tools."""
from __future__ import annotations

from typing import Protocol, TextIO, runtime_checkable
import sys


@runtime_checkable
class ConsoleLike(Protocol):
    """Minimal console interface required by runners and file helpers."""

    dry_run: bool

    def info(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...

    def dry(self, message: str) -> None:
        ...

    def debug(self, message: str) -> None:
        ...


class Console:
    """Prefixed console output filtered by verbosity.

    Levels, quietest first: none, error, info, debug. Errors go to stderr,
    everything else to stdout. ``[DRY]`` lines follow ``dry_run`` only.
    """

    LEVELS = ("none", "error", "info", "debug")

    def __init__(self, level: str = "info", dry_run: bool = False):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Choose from: {', '.join(self.LEVELS)}")
        self.level_name = level
        self.level = self.LEVELS.index(level)
        self.dry_run = dry_run

    def enabled(self, level: str) -> bool:
        return self.level >= self.LEVELS.index(level)

    def info(self, message: str) -> None:
        self._emit("info", "INFO", message)

    def error(self, message: str) -> None:
        self._emit("error", "ERROR", message, sys.stderr)

    def debug(self, message: str) -> None:
        self._emit("debug", "DEBUG", message)

    def dry(self, message: str) -> None:
        if self.dry_run:
            print(f"[DRY] {message}")

    def _emit(self, level: str, tag: str, message: str, stream: TextIO | None = None) -> None:
        if self.enabled(level):
            print(f"[{tag}] {message}", file=stream or sys.stdout)


def resolve_level(level: str | None, *, verbose: bool = False) -> str:
    """Map the ``--log``/``--verbose`` CLI pair onto a console level."""

    if verbose:
        return "debug"
    return level or "info"


__all__ = ["Console", "ConsoleLike", "resolve_level"]
