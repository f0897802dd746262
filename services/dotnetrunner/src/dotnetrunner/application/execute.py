from __future__ import annotations

from pathlib import Path

from dotnetrunner.adapters.errors import AdapterError, CommandTimeout
from dotnetrunner.adapters.process.asyncio_runner import AsyncioProcessRunner
from dotnetrunner.domain.command_line import CommandDescriptor
from dotnetrunner.domain.escaping import split_command_line
from dotnetrunner.domain.result import DotNetResult
from dotnetrunner.ports.process_runner import ProcessRequest, ProcessRunnerPort
from dotnetrunner.utils.logging import get_logger

log = get_logger(__name__)


async def execute(
    descriptor: CommandDescriptor,
    process_runner: ProcessRunnerPort | None = None,
    timeout: float | None = None,
) -> DotNetResult:
    """Run the described tool invocation and collect its output.

    A non-zero exit code is returned in the result. Spawn failures and
    timeouts propagate as adapter errors.
    """
    runner = process_runner or AsyncioProcessRunner()
    arguments = descriptor.argument_string
    command_line = f"{descriptor.tool} {arguments}"
    request = ProcessRequest(
        tool=descriptor.tool,
        argv=split_command_line(arguments),
        working_directory=descriptor.working_directory or Path.cwd(),
        timeout=timeout,
    )
    buffer: list[str] = []

    log.info("Running %s", command_line)
    try:
        outcome = await runner.run(request, buffer.append)
    except CommandTimeout as e:
        e.details = {**(e.details or {}), "output": "".join(buffer)}
        log.error("%s (%s)", e.message, command_line)
        raise
    except AdapterError as e:
        log.error("%s (%s)", e.message, command_line)
        raise

    result = DotNetResult(outcome=outcome, command_line=command_line, output="".join(buffer))
    if result.has_errors:
        log.warning(
            "%s exited with code %d after %.2fs",
            command_line,
            outcome.exit_code,
            outcome.run_time.total_seconds(),
        )
    else:
        log.info(
            "%s completed in %.2fs", command_line, outcome.run_time.total_seconds()
        )
    return result
