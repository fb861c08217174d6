"""Sequential step runner that stops at the first failing operation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from core.console import ConsoleLike


@dataclass(frozen=True, slots=True)
class Operation:
    """A named unit of work; ``action`` returns ``True`` on success."""

    description: str
    action: Callable[[], bool]


@dataclass(slots=True)
class PipelineResult:
    succeeded: bool
    failed_step: str | None = None
    executed: List[str] = field(default_factory=list)

    @classmethod
    def success(cls, executed: Sequence[str]) -> "PipelineResult":
        return cls(succeeded=True, executed=list(executed))

    @classmethod
    def failure(cls, failed_step: str, executed: Sequence[str]) -> "PipelineResult":
        return cls(succeeded=False, failed_step=failed_step, executed=list(executed))


class StepPipeline:
    def __init__(self, console: ConsoleLike) -> None:
        self._console = console

    def run(self, steps: Sequence[Operation]) -> PipelineResult:
        executed: List[str] = []
        for step in steps:
            self._console.info(step.description)
            executed.append(step.description)
            try:
                succeeded = bool(step.action())
            except OSError as exc:
                self._console.error(f"{step.description}: {exc}")
                succeeded = False

            if not succeeded:
                self._console.error(f"Error at operation: {step.description}")
                return PipelineResult.failure(step.description, executed)

        return PipelineResult.success(executed)


__all__ = ["Operation", "PipelineResult", "StepPipeline"]
