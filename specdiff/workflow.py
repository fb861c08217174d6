"""Diff the document being edited against a saved copy via the external diff tool.

Each request walks a small state machine::

    IDLE -> SNAPSHOT_WRITTEN -> DIFF_EXECUTED -> DONE
      \\______________ FAILED (from any transition)

Declining to pick a destination file returns the request to ``IDLE`` with
``cancelled`` set; that is a normal outcome, not a failure.
"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Set
import threading
import uuid

from core.command_runner import CommandRunner
from core.console import ConsoleLike
from core.platforms import Platform, quote_path

from .config import DiffConfig
from .tempfiles import cleanup_temp_files, snapshot_path


DestinationChooser = Callable[[], "str | Path | None"]


class DiffState(str, Enum):
    IDLE = "idle"
    SNAPSHOT_WRITTEN = "snapshot-written"
    DIFF_EXECUTED = "diff-executed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DiffContext:
    """Everything a diff request needs from its host, passed explicitly."""

    platform: Platform
    workspace: Path
    console: ConsoleLike
    runner: CommandRunner
    choose_destination: DestinationChooser
    config: DiffConfig = field(default_factory=DiffConfig)


@dataclass(eq=False)
class DiffRequest:
    old_spec_filename: str
    spec_json: str
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: DiffState = DiffState.IDLE
    temp_path: Path | None = None
    destination: Path | None = None
    cancelled: bool = False
    error: str | None = None
    _abort: threading.Event = field(default_factory=threading.Event, repr=False)

    def cancel(self) -> None:
        """Stop the request before its next transition."""

        self._abort.set()

    @property
    def abort_requested(self) -> bool:
        return self._abort.is_set()


def diff_arguments(old_spec: str, new_spec: str, platform: Platform) -> List[str]:
    return [
        "diff",
        "--spec1",
        quote_path(old_spec, platform),
        "--spec2",
        quote_path(new_spec, platform),
    ]


class DiffWorkflow:
    def __init__(self, context: DiffContext) -> None:
        self._context = context
        self._executor: ThreadPoolExecutor | None = None
        self._pending: Set[DiffRequest] = set()
        self._lock = threading.Lock()

    def run(self, request: DiffRequest) -> DiffRequest:
        """Drive ``request`` through every transition on the calling thread."""

        if request.state is not DiffState.IDLE:
            raise ValueError(f"Diff request {request.request_id} already ran (state: {request.state.value})")

        if self._aborted(request):
            return request
        temp_path = self._write_snapshot(request)
        if temp_path is None or self._aborted(request):
            return request

        destination = self._choose_destination(request)
        if destination is None or self._aborted(request):
            return request
        stdout = self._execute_diff(request, temp_path)
        if stdout is None or self._aborted(request):
            return request

        self._write_destination(request, destination, stdout)
        return request

    def submit(self, request: DiffRequest) -> "Future[DiffRequest]":
        """Queue ``request`` on the workflow's worker; requests run one at a time."""

        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="specdiff")
            self._pending.add(request)
            future = self._executor.submit(self.run, request)
        future.add_done_callback(lambda _: self._forget(request))
        return future

    def close(self) -> int:
        """Cancel outstanding requests and remove snapshot files.

        Returns the number of snapshot paths removed.
        """

        with self._lock:
            for request in self._pending:
                request.cancel()
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True, cancel_futures=True)

        context = self._context
        return cleanup_temp_files(context.platform, context.workspace, context.config, context.console)

    def __enter__(self) -> "DiffWorkflow":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _forget(self, request: DiffRequest) -> None:
        with self._lock:
            self._pending.discard(request)

    def _write_snapshot(self, request: DiffRequest) -> Path | None:
        context = self._context
        try:
            path = snapshot_path(context.platform, context.workspace, context.config, request.request_id)
            context.console.debug(f"Writing diff snapshot to {path}")
            with path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(request.spec_json)
        except OSError as exc:
            self._fail(request, f"Could not write diff snapshot: {exc}")
            return None

        request.temp_path = path
        request.state = DiffState.SNAPSHOT_WRITTEN
        return path

    def _choose_destination(self, request: DiffRequest) -> Path | None:
        chosen = self._context.choose_destination()
        if not chosen:
            self._context.console.info("Diff cancelled: no destination file chosen")
            request.cancelled = True
            request.state = DiffState.IDLE
            return None
        request.destination = Path(chosen)
        return request.destination

    def _execute_diff(self, request: DiffRequest, temp_path: Path) -> str | None:
        context = self._context
        executable = str(context.config.resolve_executable(context.workspace, context.platform))
        # A space inside the program path itself can only be resolved by a shell on Windows.
        use_shell = context.platform.is_windows and " " in executable
        command = quote_path(executable, context.platform) if use_shell else executable
        args = diff_arguments(request.old_spec_filename, str(temp_path), context.platform)

        result = context.runner.spawn(command, args, use_shell=use_shell, cwd=context.workspace)
        if not result.succeeded:
            if result.stdout:
                context.console.error(f"diff output:\n{result.stdout.rstrip()}")
            reason = result.spawn_error or f"diff exited with code {result.returncode}"
            self._fail(request, reason)
            return None

        request.state = DiffState.DIFF_EXECUTED
        return result.stdout

    def _write_destination(self, request: DiffRequest, destination: Path, stdout: str) -> None:
        try:
            with destination.open("w", encoding="utf-8", newline="") as handle:
                handle.write(stdout)
        except OSError as exc:
            self._fail(request, f"Could not write diff to {destination}: {exc}")
            return
        self._context.console.info(f"Diff written to {destination}")
        request.state = DiffState.DONE

    def _aborted(self, request: DiffRequest) -> bool:
        if not request.abort_requested:
            return False
        self._fail(request, "Diff request cancelled")
        return True

    def _fail(self, request: DiffRequest, message: str) -> None:
        self._context.console.error(message)
        request.error = message
        request.state = DiffState.FAILED


__all__ = [
    "DiffContext",
    "DiffRequest",
    "DiffState",
    "DiffWorkflow",
    "diff_arguments",
]
