from datetime import datetime, timezone
from pathlib import Path

import pytest

from dotnetrunner.application.runner import DotNetRunner
from dotnetrunner.domain.errors import RunnerConfigurationError, RunnerStateError
from dotnetrunner.domain.result import DotNetResult, ProcessOutcome


class RecordingRunner:
    def __init__(self) -> None:
        self.requests = []

    async def run(self, request, sink):
        self.requests.append(request)
        now = datetime.now(timezone.utc)
        return ProcessOutcome(exit_code=0, start_time=now, exit_time=now)


@pytest.mark.parametrize("command", ["", "  ", None])
def test_runner_requires_a_command(command):
    with pytest.raises(RunnerConfigurationError):
        DotNetRunner(command)


def test_command_cannot_be_reassigned():
    runner = DotNetRunner("build")
    with pytest.raises(AttributeError):
        runner.command = "pack"  # type: ignore[misc]


def test_working_directory_defaults_to_cwd_at_construction():
    assert DotNetRunner("build").working_directory == Path.cwd()


def test_configuration_is_mutable_until_built(tmp_path):
    runner = DotNetRunner("build")
    runner.add_arguments("--no-restore")
    runner.set_property("Configuration", "Debug")
    runner.set_properties({"Configuration": "Release", "Deterministic": True})
    runner.working_directory = tmp_path
    descriptor = runner.build()
    assert descriptor.properties == (("Configuration", "Release"), ("Deterministic", True))
    assert descriptor.working_directory == tmp_path
    assert descriptor.command_line == (
        "dotnet build -p:Configuration=Release -p:Deterministic=true --no-restore"
    )


def test_invalid_property_name_fails_fast():
    with pytest.raises(RunnerConfigurationError):
        DotNetRunner("build").set_property("Bad Name", "x")


def test_hooks_compute_effective_arguments_and_properties():
    def pack_preset(args):
        return ["--output", "artifacts", *args]

    def ci_properties(props):
        return {**props, "ContinuousIntegrationBuild": True}

    runner = DotNetRunner(
        "pack",
        arguments=["--no-build"],
        properties={"Version": "1.2.0"},
        argument_hooks=[pack_preset],
        property_hooks=[ci_properties],
    )
    assert runner.build().argument_string == (
        "pack -p:Version=1.2.0 -p:ContinuousIntegrationBuild=true --output artifacts --no-build"
    )
    assert runner.arguments == ["--no-build"]


def test_repr_shows_command_line():
    runner = DotNetRunner("test", arguments=["--nologo"])
    assert repr(runner) == "<DotNetRunner dotnet test --nologo>"


def test_repr_falls_back_when_hooks_produce_an_invalid_property():
    runner = DotNetRunner("build", property_hooks=[lambda _: {"Bad Name": 1}])
    assert repr(runner) == "<DotNetRunner dotnet build>"
    with pytest.raises(RunnerConfigurationError):
        runner.build()


def test_repr_falls_back_when_a_hook_raises():
    def broken(arguments):
        raise KeyError("missing preset")

    runner = DotNetRunner("pack", argument_hooks=[broken])
    assert repr(runner) == "<DotNetRunner dotnet pack>"


def test_context_manager_returns_runner():
    with DotNetRunner("build") as runner:
        assert runner.command == "build"


@pytest.mark.asyncio
async def test_run_executes_once(tmp_path):
    recorder = RecordingRunner()
    runner = DotNetRunner("build", working_directory=tmp_path)
    result = await runner.run(recorder)
    assert isinstance(result, DotNetResult)
    assert result.command_line == "dotnet build"
    with pytest.raises(RunnerStateError):
        await runner.run(recorder)
    assert len(recorder.requests) == 1
