"""Command line interface for the release orchestrator."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable
import sys

from core.command_runner import CommandRunner, RecordingCommandRunner, SubprocessCommandRunner
from core.console import Console, resolve_level

from .config import ReleaseConfig
from .orchestrator import COMMAND_DESCRIPTIONS, ReleaseOrchestrator


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_COMMAND = 2


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="specbuild", description="Build, clean and package the spec editor")
    parser.add_argument("command", nargs="?", help="Command to run (omit to list commands)")
    parser.add_argument("--config", type=Path, help="Path to a spec-tools configuration file")
    parser.add_argument("--dry-run", action="store_true", help="Print steps and commands without executing them")
    parser.add_argument(
        "--log",
        choices=list(Console.LEVELS),
        default=None,
        help="Set log level (default: info)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    return parser.parse_args(list(argv))


def _enumerate_commands() -> None:
    for name, description in COMMAND_DESCRIPTIONS.items():
        print(f"\t{name} - {description}")


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        print("Please select an option to build. Options are:")
        _enumerate_commands()
        return EXIT_NO_COMMAND
    if args.command not in COMMAND_DESCRIPTIONS:
        print(f"Invalid command {args.command}")
        print("Please select a valid command. Options are:")
        _enumerate_commands()
        return EXIT_NO_COMMAND

    workspace = Path.cwd()
    console = Console(resolve_level(args.log, verbose=args.verbose), dry_run=args.dry_run)

    try:
        config = ReleaseConfig.load(workspace, args.config)
    except (OSError, TypeError, ValueError) as exc:
        console.error(f"Invalid configuration: {exc}")
        return EXIT_FAILED

    runner: CommandRunner
    if args.dry_run:
        runner = RecordingCommandRunner(console)
    else:
        runner = SubprocessCommandRunner(console)

    orchestrator = ReleaseOrchestrator(
        config=config,
        command_runner=runner,
        console=console,
        workspace=workspace,
        dry_run=args.dry_run,
    )
    succeeded = orchestrator.commands()[args.command].run()

    if args.dry_run and isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted(workspace=workspace):
            print(line)
    return EXIT_OK if succeeded else EXIT_FAILED


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
