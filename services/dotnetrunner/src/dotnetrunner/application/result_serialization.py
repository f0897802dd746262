from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from dotnetrunner.domain.result import DotNetResult

JsonDict = dict[str, Any]


def serialize_result(result: DotNetResult) -> JsonDict:
    outcome = result.outcome
    return {
        "result_schema_version": 1,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command_line": result.command_line,
        "exit_code": outcome.exit_code,
        "has_errors": result.has_errors,
        "pid": outcome.pid,
        "start_time": outcome.start_time.isoformat(),
        "exit_time": outcome.exit_time.isoformat(),
        "run_time_seconds": outcome.run_time.total_seconds(),
        "output": result.output,
    }
