"""Error hierarchy shared by the hub store, the tool adapters and the sync engine."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SkillHubError(RuntimeError):
    """Base class for all skillhub errors."""


class SkillNotFound(SkillHubError):
    """Raised when a skill required by an operation is absent from the hub."""

    def __init__(self, skill_id: str, detail: Optional[str] = None) -> None:
        self.skill_id = skill_id
        self.detail = detail
        message = f"Skill not found: {skill_id}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ToolNotFound(SkillHubError):
    """Raised when no adapter is registered for a tool or it cannot resolve its skills directory."""

    def __init__(self, tool: str, detail: Optional[str] = None) -> None:
        self.tool = tool
        self.detail = detail
        message = f"Tool not found: {tool}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SyncIOError(SkillHubError):
    """Raised when a filesystem operation of a projection fails."""

    def __init__(self, action: str, path: Path | str, cause: Optional[BaseException] = None) -> None:
        self.action = action
        self.path = Path(path)
        self.cause = cause
        message = f"{action} failed for {self.path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigError(SkillHubError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "SkillHubError",
    "SkillNotFound",
    "ToolNotFound",
    "SyncIOError",
    "ConfigError",
]
