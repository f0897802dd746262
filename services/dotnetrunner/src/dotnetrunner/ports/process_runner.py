from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from dotnetrunner.domain.result import ProcessOutcome

OutputSink = Callable[[str], None]


@dataclass(frozen=True)
class ProcessRequest:
    tool: str
    argv: list[str]
    working_directory: Path
    timeout: float | None = None


class ProcessRunnerPort(Protocol):
    async def run(self, request: ProcessRequest, sink: OutputSink) -> ProcessOutcome: ...
