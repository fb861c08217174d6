"""Utilities for spawning external tools with optional dry-run support."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence
import subprocess

from .console import Console, ConsoleLike


NO_EXECUTABLE_MESSAGE = "No executable provided to spawn"
OUTPUT_ENCODING = "utf-8"


def decode_output(data: bytes | None) -> str:
    """Decode captured process output, keeping line endings as the tool wrote them."""

    if not data:
        return ""
    return data.decode(OUTPUT_ENCODING, errors="replace")


@dataclass
class CommandResult:
    """Represents the outcome of a spawned process."""

    command: Sequence[str]
    returncode: int | None
    stdout: str
    stderr: str
    spawn_error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.spawn_error is None and self.returncode == 0

    @classmethod
    def not_started(cls, command: Sequence[str], reason: str) -> "CommandResult":
        return cls(command=list(command), returncode=None, stdout="", stderr="", spawn_error=reason)


class CommandRunner:
    """Abstract process runner interface."""

    def __init__(self, console: ConsoleLike | None = None) -> None:
        self.console: ConsoleLike = console if console is not None else Console("none")

    def spawn(
        self,
        executable: str | None,
        args: Sequence[str] = (),
        *,
        use_shell: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, executable: str, args: Sequence[str]) -> str:
        return " ".join([executable, *args])


class SubprocessCommandRunner(CommandRunner):
    """Runner that executes tools via :mod:`subprocess` and blocks until they exit."""

    def spawn(
        self,
        executable: str | None,
        args: Sequence[str] = (),
        *,
        use_shell: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        if not executable:
            self.console.error(NO_EXECUTABLE_MESSAGE)
            return CommandResult.not_started(list(args), NO_EXECUTABLE_MESSAGE)

        command_line = self.format_command(executable, args)
        command = [executable, *args]
        self.console.info(command_line)

        try:
            process = subprocess.run(
                command_line if use_shell else command,
                shell=use_shell,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            result = CommandResult.not_started(command, str(exc))
        else:
            result = CommandResult(
                command=command,
                returncode=process.returncode,
                stdout=decode_output(process.stdout),
                stderr=decode_output(process.stderr),
            )
        return self._report(result)

    def _report(self, result: CommandResult) -> CommandResult:
        if result.succeeded:
            if result.stdout:
                self.console.info(result.stdout.rstrip("\n"))
            return result

        if result.spawn_error is not None:
            self.console.error(f"Could not start process: {result.spawn_error}")
        else:
            self.console.error(f"Process exited with code {result.returncode}")
        if result.stderr:
            self.console.error(f"stderr:\n{result.stderr.rstrip()}")
        return result


@dataclass(slots=True)
class RecordedCommand:
    executable: str
    args: List[str]
    use_shell: bool
    cwd: str | None


class RecordingCommandRunner(CommandRunner):
    """Runner that records invocations instead of executing them."""

    def __init__(self, console: ConsoleLike | None = None, *, stdout: str = "") -> None:
        super().__init__(console)
        self.commands: List[RecordedCommand] = []
        self.stdout = stdout

    def spawn(
        self,
        executable: str | None,
        args: Sequence[str] = (),
        *,
        use_shell: bool = False,
        cwd: Path | None = None,
    ) -> CommandResult:
        if not executable:
            return CommandResult.not_started(list(args), NO_EXECUTABLE_MESSAGE)
        self.commands.append(
            RecordedCommand(
                executable=executable,
                args=list(args),
                use_shell=use_shell,
                cwd=str(cwd) if cwd else None,
            )
        )
        return CommandResult(command=[executable, *args], returncode=0, stdout=self.stdout, stderr="")

    def iter_commands(self) -> Iterable[RecordedCommand]:
        return iter(self.commands)

    def iter_formatted(self, *, workspace: Path | None = None) -> Iterable[str]:
        default_cwd = str(workspace) if workspace else None
        for record in self.commands:
            parts: List[str] = ["[dry-run]"]
            if record.use_shell:
                parts.append("(shell)")
            cwd = record.cwd or default_cwd
            if cwd:
                parts.append(f"(cwd={cwd})")
            parts.append(self.format_command(record.executable, record.args))
            yield " ".join(parts)


__all__ = [
    "CommandResult",
    "CommandRunner",
    "NO_EXECUTABLE_MESSAGE",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "decode_output",
]
