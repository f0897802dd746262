from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
import tomllib
from typing import Any

import jsonschema
import tomli_w
import yaml

from dotnetrunner.adapters.errors import SettingsReadError
from dotnetrunner.domain.command_line import DEFAULT_TOOL

SETTINGS_FILENAMES = ("dotnetrunner.toml", "dotnetrunner.yaml", "dotnetrunner.yml")
TOOL_ENV_VAR = "DOTNETRUNNER_TOOL"
SCHEMA_PATH = Path(__file__).resolve().parents[1] / "schemas" / "settings.schema.v1.json"


def _new_properties() -> dict[str, object]:
    return {}


@dataclass(frozen=True)
class RunnerSettings:
    tool: str = DEFAULT_TOOL
    timeout: float | None = None
    merge_streams: bool = True
    properties: dict[str, object] = field(default_factory=_new_properties)


def _load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def _parse(path: Path) -> object:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return tomllib.loads(text)


def load_settings(path: Path) -> RunnerSettings:
    if not path.exists():
        return RunnerSettings()
    try:
        raw = _parse(path)
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise SettingsReadError(
            f"Could not read settings: {e}", details={"path": str(path)}, cause=e
        ) from e
    try:
        jsonschema.validate(raw, _load_schema())
    except jsonschema.ValidationError as e:
        raise SettingsReadError(
            f"Invalid settings: {e.message}",
            details={"path": str(path), "field": "/".join(str(p) for p in e.path)},
            cause=e,
        ) from e
    data: dict[str, Any] = raw if isinstance(raw, dict) else {}
    timeout = data.get("timeout")
    return RunnerSettings(
        tool=str(data.get("tool", DEFAULT_TOOL)),
        timeout=float(timeout) if timeout is not None else None,
        merge_streams=bool(data.get("merge_streams", True)),
        properties=dict(data.get("properties") or {}),
    )


def find_settings(start: Path) -> Path | None:
    start = start.resolve()
    for parent in (start, *start.parents):
        for name in SETTINGS_FILENAMES:
            candidate = parent / name
            if candidate.is_file():
                return candidate
    return None


def write_settings(path: Path, settings: RunnerSettings) -> None:
    payload: dict[str, Any] = {
        "tool": settings.tool,
        "merge_streams": settings.merge_streams,
    }
    if settings.timeout is not None:
        payload["timeout"] = settings.timeout
    payload["properties"] = dict(settings.properties)
    path.write_text(tomli_w.dumps(payload), encoding="utf-8")


def effective_tool(cli_tool: str | None, settings: RunnerSettings) -> str:
    if cli_tool:
        return cli_tool
    env_tool = os.environ.get(TOOL_ENV_VAR)
    if env_tool:
        return env_tool
    return settings.tool


def effective_timeout(cli_timeout: float | None, settings: RunnerSettings) -> float | None:
    if cli_timeout is not None:
        return cli_timeout
    return settings.timeout
