from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from dotnetrunner.domain.errors import RunnerConfigurationError
from dotnetrunner.domain.escaping import escape_token
from dotnetrunner.domain.properties import format_property_value

DEFAULT_TOOL = "dotnet"


def compose_arguments(
    command: str,
    properties: Mapping[str, object] | Iterable[tuple[str, object]] | None,
    arguments: Iterable[str],
) -> str:
    """Build the argument string passed to the tool.

    Properties render as ``-p:<key>=<value>`` flags in iteration order and come
    before the arguments. Property values are escaped; arguments are appended
    as given.
    """
    parts = [command]
    if properties is not None:
        items = properties.items() if isinstance(properties, Mapping) else properties
        for key, value in items:
            parts.append(f"-p:{key}={escape_token(format_property_value(value))}")
    parts.extend(arguments)
    return " ".join(parts)


def require_command(command: str | None) -> str:
    if command is None or not str(command).strip():
        raise RunnerConfigurationError(
            "A command is required",
            hint="Pass the tool sub-command to run, e.g. 'build'",
        )
    return command


@dataclass(frozen=True)
class CommandDescriptor:
    command: str
    arguments: tuple[str, ...] = ()
    properties: tuple[tuple[str, object], ...] = ()
    working_directory: Path | None = None
    tool: str = DEFAULT_TOOL

    def __post_init__(self) -> None:
        require_command(self.command)
        object.__setattr__(self, "arguments", tuple(self.arguments))
        props = self.properties
        if isinstance(props, Mapping):
            props = props.items()
        object.__setattr__(self, "properties", tuple((str(k), v) for k, v in props))

    @property
    def argument_string(self) -> str:
        return compose_arguments(self.command, self.properties, self.arguments)

    @property
    def command_line(self) -> str:
        return f"{self.tool} {self.argument_string}"
