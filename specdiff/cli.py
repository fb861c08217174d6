"""Command line interface for diffing spec documents."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable
import sys

from core.command_runner import SubprocessCommandRunner
from core.console import Console, resolve_level
from core.platforms import HOST_PLATFORM

from .config import DiffConfig
from .tempfiles import cleanup_temp_files
from .workflow import DiffContext, DiffRequest, DiffState, DiffWorkflow


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="specdiff", description="Diff spec documents with the external spec tool")
    parser.add_argument("--config", type=Path, help="Path to a spec-tools configuration file")
    parser.add_argument(
        "--log",
        choices=list(Console.LEVELS),
        default=None,
        help="Set log level (default: info)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff_parser = subparsers.add_parser("diff", help="Diff the current document against a saved one")
    diff_parser.add_argument("old", help="Previously saved document to diff against")
    diff_parser.add_argument("current", help="File holding the current document ('-' reads stdin)")
    diff_parser.add_argument("-o", "--output", help="Destination file for the diff (prompted for when omitted)")
    diff_parser.add_argument("--executable", help="Override the diff executable")

    subparsers.add_parser("cleanup", help="Remove leftover diff snapshot files")
    return parser.parse_args(list(argv))


def _prompt_destination() -> str | None:
    try:
        answer = input("Save diff as: ")
    except EOFError:
        return None
    return answer.strip() or None


def _read_current(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()
    console = Console(resolve_level(args.log, verbose=args.verbose))

    try:
        config = DiffConfig.load(workspace, args.config)
    except (OSError, TypeError, ValueError) as exc:
        console.error(f"Invalid configuration: {exc}")
        return 1

    if args.command == "cleanup":
        return _handle_cleanup(config, workspace, console)
    if args.command == "diff":
        return _handle_diff(args, config, workspace, console)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_cleanup(config: DiffConfig, workspace: Path, console: Console) -> int:
    try:
        removed = cleanup_temp_files(HOST_PLATFORM, workspace, config, console)
    except OSError as exc:
        console.error(f"Cleanup failed: {exc}")
        return 1
    console.info(f"Removed {removed} diff snapshot path(s)")
    return 0


def _handle_diff(args: Namespace, config: DiffConfig, workspace: Path, console: Console) -> int:
    if args.executable:
        config.executable = args.executable

    try:
        spec_json = _read_current(args.current)
    except OSError as exc:
        console.error(f"Could not read current document: {exc}")
        return 1

    output = args.output
    context = DiffContext(
        platform=HOST_PLATFORM,
        workspace=workspace,
        console=console,
        runner=SubprocessCommandRunner(console),
        choose_destination=(lambda: output) if output else _prompt_destination,
        config=config,
    )
    request = DiffWorkflow(context).run(DiffRequest(old_spec_filename=args.old, spec_json=spec_json))
    return 1 if request.state is DiffState.FAILED else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
