from __future__ import annotations

from pathlib import Path
from typing import List, Sequence
import tempfile
import unittest
from unittest.mock import MagicMock

from core.command_runner import CommandResult, CommandRunner, RecordingCommandRunner
from core.console import Console
from core.platforms import Platform
from specbuild.config import ReleaseConfig
from specbuild.orchestrator import ReleaseOrchestrator


PACKAGE_FILES = ["elm.js", "elmelectron.js", "index.html", "main.js", "package.json", "spec.css"]


class FailingCommandRunner(CommandRunner):
    """Runner whose every invocation exits non-zero."""

    def __init__(self) -> None:
        super().__init__()
        self.invocations: List[List[str]] = []

    def spawn(self, executable, args: Sequence[str] = (), *, use_shell: bool = False, cwd: Path | None = None) -> CommandResult:
        self.invocations.append([executable, *args])
        return CommandResult(command=[executable, *args], returncode=1, stdout="", stderr="elm-make: not found")


class ReleaseOrchestratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.workspace = Path(self.temp_dir.name)
        self.console = MagicMock(spec=Console)
        self.console.dry_run = False
        self.runner = RecordingCommandRunner()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _orchestrator(self, runner: CommandRunner | None = None, **kwargs) -> ReleaseOrchestrator:
        return ReleaseOrchestrator(
            config=ReleaseConfig(),
            command_runner=runner or self.runner,
            console=self.console,
            workspace=self.workspace,
            **kwargs,
        )

    def _write_sources(self, executable_name: str) -> None:
        for name in [*PACKAGE_FILES, executable_name]:
            (self.workspace / name).write_text(f"contents of {name}")

    def test_build_for_development_invokes_compiler_once(self) -> None:
        result = self._orchestrator(host_platform=Platform.MAC_OS).build_for_development()
        self.assertTrue(result.succeeded)
        commands = list(self.runner.iter_commands())
        self.assertEqual(len(commands), 1)
        self.assertEqual(commands[0].executable, "elm-make")
        self.assertEqual(commands[0].args, ["Spec.elm", "--output=elm.js", "--yes"])
        self.assertFalse(commands[0].use_shell)
        self.assertEqual(commands[0].cwd, str(self.workspace))

    def test_windows_host_runs_tools_through_the_shell(self) -> None:
        self._orchestrator(host_platform=Platform.WINDOWS).build_for_development()
        self.assertTrue(self.runner.commands[0].use_shell)

    def test_build_for_development_reports_compiler_failure(self) -> None:
        result = self._orchestrator(FailingCommandRunner()).build_for_development()
        self.assertFalse(result.succeeded)
        self.assertEqual(result.failed_step, "run elm make")

    def test_clean_on_empty_workspace_reports_nothing_to_delete(self) -> None:
        outcomes = self._orchestrator().clean()
        self.assertEqual([outcome.path for outcome in outcomes], [
            self.workspace / "elm.js",
            self.workspace / "elm-stuff/build-artifacts",
            self.workspace / "dist",
        ])
        self.assertTrue(all(outcome.succeeded for outcome in outcomes))
        self.assertFalse(any(outcome.removed for outcome in outcomes))
        messages = [call.args[0] for call in self.console.info.call_args_list]
        self.assertEqual(sum(message.startswith("Nothing to delete at") for message in messages), 3)
        self.assertIn("Deleting elm.js", messages)

    def test_clean_removes_existing_artifacts(self) -> None:
        (self.workspace / "elm.js").write_text("compiled")
        artifacts = self.workspace / "elm-stuff" / "build-artifacts" / "0.18.0"
        artifacts.mkdir(parents=True)
        (artifacts / "Spec.elmi").write_bytes(b"\x00")
        (self.workspace / "dist" / "out").mkdir(parents=True)

        outcomes = self._orchestrator().clean()
        self.assertTrue(all(outcome.removed for outcome in outcomes))
        self.assertFalse((self.workspace / "elm.js").exists())
        self.assertFalse((self.workspace / "elm-stuff" / "build-artifacts").exists())
        self.assertTrue((self.workspace / "elm-stuff").exists())
        self.assertFalse((self.workspace / "dist").exists())

    def test_package_copies_assets_and_runs_packager(self) -> None:
        self._write_sources("spec.exe")
        result = self._orchestrator(host_platform=Platform.MAC_OS).package_for_platform("spec.exe", Platform.WINDOWS)

        self.assertTrue(result.succeeded, result.failed_step)
        self.assertEqual(result.executed, [
            "run elm make",
            "make dist folder",
            "copy elm.js",
            "copy elmelectron.js",
            "copy index.html",
            "copy main.js",
            "copy package.json",
            "copy spec.exe",
            "copy spec.css",
            "run electron_packager",
        ])
        dist = self.workspace / "dist"
        self.assertEqual(sorted(path.name for path in dist.iterdir()), sorted([*PACKAGE_FILES, "spec.exe"]))
        self.assertEqual((dist / "spec.css").read_text(), "contents of spec.css")

        packager = self.runner.commands[-1]
        self.assertEqual(packager.executable, "electron-packager")
        self.assertEqual(packager.args, [
            "dist",
            "spec-edit",
            "--platform=win32",
            "--arch=x64",
            "--version=1.3.3",
            "--out=dist/out",
        ])

    def test_windows_package_halts_when_compile_fails(self) -> None:
        runner = FailingCommandRunner()
        result = self._orchestrator(runner).package_for_platform("spec.exe", Platform.WINDOWS)

        self.assertFalse(result.succeeded)
        self.assertEqual(result.failed_step, "run elm make")
        self.assertEqual(result.executed, ["run elm make"])
        self.assertEqual(len(runner.invocations), 1)
        self.assertFalse((self.workspace / "dist").exists())

    def test_existing_dist_folder_fails_the_package(self) -> None:
        self._write_sources("spec")
        (self.workspace / "dist").mkdir()
        result = self._orchestrator().package_for_platform("spec", Platform.MAC_OS)
        self.assertFalse(result.succeeded)
        self.assertEqual(result.failed_step, "make dist folder")
        self.assertEqual(len(self.runner.commands), 1)

    def test_missing_asset_stops_before_packaging(self) -> None:
        self._write_sources("spec")
        (self.workspace / "main.js").unlink()
        result = self._orchestrator().package_for_platform("spec", Platform.MAC_OS)
        self.assertFalse(result.succeeded)
        self.assertEqual(result.failed_step, "copy main.js")
        self.assertFalse((self.workspace / "dist" / "package.json").exists())
        self.assertEqual([record.executable for record in self.runner.commands], ["elm-make"])

    def test_dry_run_leaves_filesystem_untouched(self) -> None:
        result = self._orchestrator(dry_run=True).package_for_platform("spec", Platform.MAC_OS)
        self.assertTrue(result.succeeded)
        self.assertFalse((self.workspace / "dist").exists())
        self.assertEqual([record.executable for record in self.runner.commands], ["elm-make", "electron-packager"])

    def test_command_table(self) -> None:
        commands = self._orchestrator().commands()
        self.assertEqual(list(commands), [
            "build-for-development",
            "clean",
            "package-for-platform-mac",
            "package-for-platform-windows",
        ])
        self.assertEqual(commands["clean"].description, "Delete all build artifacts")


if __name__ == "__main__":
    unittest.main()
