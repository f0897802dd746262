from __future__ import annotations

import asyncio
import codecs
from datetime import datetime, timezone
import os
import signal

from dotnetrunner.adapters.errors import CommandNotFound, CommandSpawnError, CommandTimeout
from dotnetrunner.domain.result import ProcessOutcome
from dotnetrunner.ports.process_runner import OutputSink, ProcessRequest
from dotnetrunner.utils.logging import get_logger

log = get_logger(__name__)

_CHUNK_SIZE = 64 * 1024
_REAP_GRACE_SECONDS = 5.0
_POSIX = os.name == "posix"


async def _pump(stream: asyncio.StreamReader, sink: OutputSink, encoding: str) -> None:
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        text = decoder.decode(chunk)
        if text:
            sink(text)
    tail = decoder.decode(b"", final=True)
    if tail:
        sink(tail)


async def _kill(process: asyncio.subprocess.Process) -> None:
    # The child leads its own process group on POSIX, so build servers and
    # other descendants holding the output pipe go down with it.
    try:
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        elif process.returncode is None:
            process.kill()
    except ProcessLookupError:
        pass
    try:
        await asyncio.wait_for(process.wait(), _REAP_GRACE_SECONDS)
    except asyncio.TimeoutError:
        log.warning(
            "pid %s was killed but its output pipe is still held open by another process",
            process.pid,
        )


class AsyncioProcessRunner:
    """Runs the tool with asyncio subprocesses.

    With ``merge_streams`` (the default) stderr is redirected into the stdout
    pipe, so the sink sees output in the order the child wrote it. Otherwise
    each stream gets its own reader and chunks reach the sink in delivery
    order.
    """

    def __init__(self, merge_streams: bool = True, encoding: str = "utf-8") -> None:
        self.merge_streams = merge_streams
        self.encoding = encoding

    async def _spawn(self, request: ProcessRequest) -> asyncio.subprocess.Process:
        if not request.working_directory.is_dir():
            raise CommandSpawnError(
                f"Working directory does not exist: {request.working_directory}",
                details={"tool": request.tool, "cwd": str(request.working_directory)},
            )
        try:
            return await asyncio.create_subprocess_exec(
                request.tool,
                *request.argv,
                cwd=str(request.working_directory),
                stdin=asyncio.subprocess.DEVNULL,
                start_new_session=_POSIX,
                stdout=asyncio.subprocess.PIPE,
                stderr=(
                    asyncio.subprocess.STDOUT
                    if self.merge_streams
                    else asyncio.subprocess.PIPE
                ),
            )
        except FileNotFoundError as e:
            raise CommandNotFound(
                f"Executable not found: {request.tool}",
                details={"tool": request.tool},
                hint="Check that the tool is installed and on PATH",
                cause=e,
            ) from e
        except OSError as e:
            raise CommandSpawnError(
                f"Could not start {request.tool}: {e}",
                details={"tool": request.tool, "errno": e.errno},
                cause=e,
            ) from e

    async def run(self, request: ProcessRequest, sink: OutputSink) -> ProcessOutcome:
        start_time = datetime.now(timezone.utc)
        process = await self._spawn(request)
        log.debug("Started %s (pid %s)", request.tool, process.pid)

        streams = [process.stdout]
        if not self.merge_streams:
            streams.append(process.stderr)
        pumps = [
            asyncio.ensure_future(_pump(stream, sink, self.encoding))
            for stream in streams
            if stream is not None
        ]

        async def _communicate() -> int:
            await asyncio.gather(*pumps)
            return await process.wait()

        try:
            exit_code = await asyncio.wait_for(_communicate(), request.timeout)
        except asyncio.TimeoutError as e:
            await _kill(process)
            raise CommandTimeout(
                f"{request.tool} did not finish within {request.timeout} seconds",
                details={"tool": request.tool, "pid": process.pid, "timeout": request.timeout},
                cause=e,
            ) from e
        except asyncio.CancelledError:
            for pump in pumps:
                pump.cancel()
            await _kill(process)
            raise

        return ProcessOutcome(
            exit_code=exit_code,
            start_time=start_time,
            exit_time=datetime.now(timezone.utc),
            pid=process.pid,
        )
