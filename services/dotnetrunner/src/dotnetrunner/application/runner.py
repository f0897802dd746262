from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import TracebackType

from dotnetrunner.application.execute import execute
from dotnetrunner.domain.command_line import (
    DEFAULT_TOOL,
    CommandDescriptor,
    require_command,
)
from dotnetrunner.domain.errors import RunnerStateError
from dotnetrunner.domain.properties import validate_property_key
from dotnetrunner.domain.result import DotNetResult
from dotnetrunner.ports.process_runner import ProcessRunnerPort

ArgumentHook = Callable[[list[str]], Iterable[str]]
PropertyHook = Callable[[dict[str, object]], Mapping[str, object]]


class DotNetRunner:
    """Collects the configuration of one tool invocation and runs it once.

    ``argument_hooks`` and ``property_hooks`` are applied in order when the
    runner is built; each gets the current arguments or properties and
    returns the ones to use instead. Callers that need a preset
    (build, pack, publish...) inject hooks rather than subclassing.
    """

    def __init__(
        self,
        command: str,
        *,
        arguments: Iterable[str] = (),
        properties: Mapping[str, object] | None = None,
        working_directory: Path | str | None = None,
        tool: str = DEFAULT_TOOL,
        argument_hooks: Iterable[ArgumentHook] = (),
        property_hooks: Iterable[PropertyHook] = (),
    ) -> None:
        self._command = require_command(command)
        self.tool = tool
        self.arguments: list[str] = list(arguments)
        self.properties: dict[str, object] = {}
        for key, value in (properties or {}).items():
            self.set_property(key, value)
        self.working_directory = (
            Path(working_directory) if working_directory is not None else Path.cwd()
        )
        self.argument_hooks = list(argument_hooks)
        self.property_hooks = list(property_hooks)
        self._has_run = False

    @property
    def command(self) -> str:
        return self._command

    def add_arguments(self, *arguments: str) -> DotNetRunner:
        self.arguments.extend(arguments)
        return self

    def set_property(self, key: str, value: object) -> DotNetRunner:
        self.properties[validate_property_key(key)] = value
        return self

    def set_properties(self, properties: Mapping[str, object]) -> DotNetRunner:
        for key, value in properties.items():
            self.set_property(key, value)
        return self

    def compute_arguments(self) -> list[str]:
        arguments = list(self.arguments)
        for hook in self.argument_hooks:
            arguments = list(hook(arguments))
        return arguments

    def compute_properties(self) -> dict[str, object]:
        properties = dict(self.properties)
        for hook in self.property_hooks:
            properties = dict(hook(properties))
        for key in properties:
            validate_property_key(key)
        return properties

    def build(self) -> CommandDescriptor:
        return CommandDescriptor(
            command=self.command,
            arguments=tuple(self.compute_arguments()),
            properties=tuple(self.compute_properties().items()),
            working_directory=self.working_directory,
            tool=self.tool,
        )

    async def run(
        self,
        process_runner: ProcessRunnerPort | None = None,
        timeout: float | None = None,
    ) -> DotNetResult:
        if self._has_run:
            raise RunnerStateError(f"{self.tool} {self.command} has already been run")
        descriptor = self.build()
        self._has_run = True
        return await execute(descriptor, process_runner=process_runner, timeout=timeout)

    def close(self) -> None:
        """Release resources held by the runner. Nothing is held by default."""

    def __enter__(self) -> DotNetRunner:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        # Hooks are caller code; repr must not fail on them.
        try:
            command_line = self.build().command_line
        except Exception:
            command_line = f"{self.tool} {self.command}"
        return f"<{type(self).__name__} {command_line}>"
