from __future__ import annotations

from typing import Any


class RunnerConfigurationError(ValueError):
    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.hint = hint

    def __str__(self) -> str:
        return self.message


class RunnerStateError(RuntimeError):
    pass
