"""Named build, clean and packaging commands for the spec editor."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List

from core.command_runner import CommandRunner
from core.console import ConsoleLike
from core.filetree import copy_file, delete_path_recursive
from core.platforms import HOST_PLATFORM, Platform

from .config import ReleaseConfig
from .pipeline import Operation, PipelineResult, StepPipeline


COMMAND_DESCRIPTIONS: Dict[str, str] = {
    "build-for-development": "Build the elm project for local development",
    "clean": "Delete all build artifacts",
    "package-for-platform-mac": "Build and package application for macOS",
    "package-for-platform-windows": "Build and package application for Windows",
}
"""Command names in listing order, mapped to their one-line descriptions."""


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    description: str
    run: Callable[[], bool]


@dataclass(slots=True)
class DeletionOutcome:
    path: Path
    removed: bool
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ReleaseOrchestrator:
    """Composes the pipeline, process runner and file helpers into top-level commands."""

    def __init__(
        self,
        *,
        config: ReleaseConfig,
        command_runner: CommandRunner,
        console: ConsoleLike,
        workspace: Path,
        host_platform: Platform = HOST_PLATFORM,
        dry_run: bool = False,
    ) -> None:
        self._config = config
        self._runner = command_runner
        self._console = console
        self._workspace = workspace
        self._host_platform = host_platform
        self._dry_run = dry_run

    def commands(self) -> Dict[str, Command]:
        actions: Dict[str, Callable[[], bool]] = {
            "build-for-development": lambda: self.build_for_development().succeeded,
            "clean": lambda: all(outcome.succeeded for outcome in self.clean()),
            "package-for-platform-mac": lambda: self._package(Platform.MAC_OS),
            "package-for-platform-windows": lambda: self._package(Platform.WINDOWS),
        }
        return {
            name: Command(name, description, actions[name])
            for name, description in COMMAND_DESCRIPTIONS.items()
        }

    def build_for_development(self) -> PipelineResult:
        return self._pipeline().run([self._compile_step()])

    def clean(self) -> List[DeletionOutcome]:
        layout = self._config.layout
        outcomes: List[DeletionOutcome] = []
        for relative in (self._config.compiler.output, layout.artifacts_dir, layout.dist_dir):
            path = self._workspace / relative
            if self._dry_run:
                self._console.dry(f"Deleting {relative}")
                outcomes.append(DeletionOutcome(path=path, removed=False))
                continue

            self._console.info(f"Deleting {relative}")
            try:
                removed = delete_path_recursive(path)
            except OSError as exc:
                self._console.error(f"Failed to delete {relative}: {exc}")
                outcomes.append(DeletionOutcome(path=path, removed=False, error=str(exc)))
                continue
            if not removed:
                self._console.info(f"Nothing to delete at {relative}")
            outcomes.append(DeletionOutcome(path=path, removed=removed))
        return outcomes

    def package_for_platform(self, executable_name: str, platform: Platform) -> PipelineResult:
        dist_dir = self._workspace / self._config.layout.dist_dir
        steps: List[Operation] = [
            self._compile_step(),
            Operation(f"make {self._config.layout.dist_dir} folder", lambda: self._make_directory(dist_dir)),
        ]
        for filename in self._package_files(executable_name):
            steps.append(Operation(f"copy {filename}", self._copy_into(filename, dist_dir)))
        steps.append(Operation("run electron_packager", lambda: self._run_packager(platform)))
        return self._pipeline().run(steps)

    def _package(self, platform: Platform) -> bool:
        return self.package_for_platform(self._config.executable_for(platform), platform).succeeded

    def _pipeline(self) -> StepPipeline:
        return StepPipeline(self._console)

    def _package_files(self, executable_name: str) -> List[str]:
        layout = self._config.layout
        return [self._config.compiler.output, *layout.assets, executable_name, layout.stylesheet]

    def _compile_step(self) -> Operation:
        return Operation("run elm make", self._run_compiler)

    def _run_compiler(self) -> bool:
        compiler = self._config.compiler
        result = self._runner.spawn(
            compiler.executable,
            [compiler.entry, f"--output={compiler.output}", "--yes"],
            use_shell=self._host_platform.is_windows,
            cwd=self._workspace,
        )
        return result.succeeded

    def _run_packager(self, platform: Platform) -> bool:
        packager = self._config.packager
        result = self._runner.spawn(
            packager.executable,
            [
                self._config.layout.dist_dir,
                packager.product_name,
                f"--platform={platform.value}",
                f"--arch={packager.arch}",
                f"--version={packager.version}",
                f"--out={packager.out}",
            ],
            use_shell=self._host_platform.is_windows,
            cwd=self._workspace,
        )
        return result.succeeded

    def _make_directory(self, path: Path) -> bool:
        if self._dry_run:
            self._console.dry(f"mkdir {path}")
            return True
        # No parents and no exist_ok: a leftover dist folder must fail the run.
        path.mkdir()
        return True

    def _copy_into(self, filename: str, dist_dir: Path) -> Callable[[], bool]:
        source = self._workspace / filename
        dest = dist_dir / Path(filename).name

        def copy() -> bool:
            if self._dry_run:
                self._console.dry(f"copy {source} -> {dest}")
                return True
            return copy_file(source, dest, console=self._console)

        return copy


__all__ = ["COMMAND_DESCRIPTIONS", "Command", "DeletionOutcome", "ReleaseOrchestrator"]
