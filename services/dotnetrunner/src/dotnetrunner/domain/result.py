from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class ProcessOutcome:
    exit_code: int
    start_time: datetime
    exit_time: datetime
    pid: int | None = None

    @property
    def run_time(self) -> timedelta:
        return self.exit_time - self.start_time


@dataclass(frozen=True)
class DotNetResult:
    """Outcome of one tool invocation.

    ``output`` holds stdout and stderr captured into a single buffer.
    A non-zero exit is reported through ``has_errors``, never raised.
    """

    outcome: ProcessOutcome
    command_line: str
    output: str

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code

    @property
    def has_errors(self) -> bool:
        return self.outcome.exit_code != 0
