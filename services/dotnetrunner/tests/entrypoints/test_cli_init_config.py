import tomllib

from typer.testing import CliRunner

from dotnetrunner.entrypoints.cli import app


def test_init_config_writes_defaults():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init-config"])
        assert result.exit_code == 0
        with open("dotnetrunner.toml", "rb") as f:
            data = tomllib.load(f)
    assert data["tool"] == "dotnet"
    assert data["merge_streams"] is True


def test_init_config_refuses_to_overwrite():
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("dotnetrunner.toml", "w") as f:
            f.write('tool = "custom"\n')
        result = runner.invoke(app, ["init-config"])
        assert result.exit_code == 2
        forced = runner.invoke(app, ["init-config", "--force"])
        assert forced.exit_code == 0
