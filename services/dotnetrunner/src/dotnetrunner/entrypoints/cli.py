from pathlib import Path
import asyncio
import json as _json

import typer

from dotnetrunner.adapters.errors import AdapterError, SettingsReadError
from dotnetrunner.adapters.process.asyncio_runner import AsyncioProcessRunner
from dotnetrunner.application.result_serialization import serialize_result
from dotnetrunner.application.runner import DotNetRunner
from dotnetrunner.application.settings import (
    RunnerSettings,
    effective_timeout,
    effective_tool,
    find_settings,
    load_settings,
    write_settings,
)
from dotnetrunner.domain.errors import RunnerConfigurationError
from dotnetrunner.utils.logging import setup_logging

app = typer.Typer(add_completion=False)

EXIT_CONFIG_ERROR = 2
EXIT_SPAWN_ERROR = 3

_PASSTHROUGH = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def _parse_property(raw: str) -> tuple[str, object]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"Expected KEY=VALUE, got {raw!r}", param_hint="--property")
    lowered = value.lower()
    if lowered in ("true", "false"):
        return key, lowered == "true"
    return key, value


def _settings(config: Path | None, cwd: Path) -> RunnerSettings:
    path = config or find_settings(cwd)
    if path is None:
        return RunnerSettings()
    return load_settings(path)


def _runner(
    command: str,
    args: list[str] | None,
    prop: list[str] | None,
    cwd: Path | None,
    tool: str | None,
    settings: RunnerSettings,
) -> DotNetRunner:
    runner = DotNetRunner(
        command,
        arguments=args or [],
        properties=settings.properties,
        working_directory=cwd,
        tool=effective_tool(tool, settings),
    )
    for raw in prop or []:
        key, value = _parse_property(raw)
        runner.set_property(key, value)
    return runner


@app.command(context_settings=_PASSTHROUGH)
def run(
    command: str = typer.Argument(...),
    args: list[str] | None = typer.Argument(None),
    prop: list[str] | None = typer.Option(None, "--property", "-p"),
    cwd: Path | None = typer.Option(None, "--cwd"),
    tool: str | None = typer.Option(None, "--tool"),
    timeout: float | None = typer.Option(None, "--timeout"),
    config: Path | None = typer.Option(None, "--config"),
    json: bool = False,
    verbose: bool = False,
):
    setup_logging(verbose=verbose)
    try:
        settings = _settings(config, cwd or Path.cwd())
        runner = _runner(command, args, prop, cwd, tool, settings)
    except (RunnerConfigurationError, SettingsReadError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    process_runner = AsyncioProcessRunner(merge_streams=settings.merge_streams)
    try:
        with runner:
            result = asyncio.run(
                runner.run(process_runner, timeout=effective_timeout(timeout, settings))
            )
    except AdapterError as e:
        typer.echo(f"error: {e}", err=True)
        if e.hint:
            typer.echo(f"hint: {e.hint}", err=True)
        raise typer.Exit(EXIT_SPAWN_ERROR)

    if json:
        typer.echo(_json.dumps(serialize_result(result)))
    else:
        typer.echo(result.output, nl=False)
    raise typer.Exit(result.exit_code)


@app.command(context_settings=_PASSTHROUGH)
def show(
    command: str = typer.Argument(...),
    args: list[str] | None = typer.Argument(None),
    prop: list[str] | None = typer.Option(None, "--property", "-p"),
    tool: str | None = typer.Option(None, "--tool"),
    config: Path | None = typer.Option(None, "--config"),
):
    """Print the command line without running it."""
    try:
        settings = _settings(config, Path.cwd())
        runner = _runner(command, args, prop, None, tool, settings)
    except (RunnerConfigurationError, SettingsReadError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)
    typer.echo(runner.build().command_line)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("dotnetrunner.toml")),
    force: bool = False,
):
    if path.exists() and not force:
        typer.echo(f"error: {path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)
    write_settings(path, RunnerSettings())
    typer.echo(str(path))
