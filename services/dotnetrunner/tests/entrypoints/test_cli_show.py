from typer.testing import CliRunner

from dotnetrunner.entrypoints.cli import app


def test_cli_show_prints_command_line():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(
            app,
            ["show", "--tool", "dotnet", "-p", "Configuration=Release", "build", "--no-restore"],
        )
    assert result.exit_code == 0
    assert result.stdout.strip() == "dotnet build -p:Configuration=Release --no-restore"


def test_cli_show_rejects_malformed_property():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["show", "-p", "NoEquals", "build"])
    assert result.exit_code != 0
