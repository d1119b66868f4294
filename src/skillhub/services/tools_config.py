# src/skillhub/services/tools_config.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from skillhub.domain import BUILTIN_TOOLS, OPENCLAW, SyncStrategy, ToolProfile
from skillhub.errors import ConfigError
from skillhub.services.fs import write_text_atomic


def _profile_from_yaml(tool: str, data: Dict[str, Any]) -> ToolProfile:
    path = data.get("path")
    return ToolProfile(
        tool=tool,
        enabled=bool(data.get("enabled", True)),
        custom_global_path=Path(str(path)).expanduser() if path else None,
        custom_project_path=data.get("project_path") or None,
        sync_strategy=SyncStrategy.parse(data.get("strategy") or SyncStrategy.AUTO),
        custom_name=data.get("name") or None,
    )


def _profile_to_yaml(p: ToolProfile) -> Dict[str, Any]:
    out: Dict[str, Any] = {"enabled": p.enabled, "strategy": p.sync_strategy.value}
    if p.custom_global_path is not None:
        out["path"] = str(p.custom_global_path)
    if p.custom_project_path:
        out["project_path"] = p.custom_project_path
    if p.custom_name:
        out["name"] = p.custom_name
    return out


@dataclass(slots=True)
class AppConfig:
    """
    config.yaml:

        default_sync_strategy: auto
        auto_sync_on_install: true
        tools:
          claude: {enabled: true, strategy: link}
          my-agent: {path: ~/agents/skills, name: My Agent}
    """

    default_sync_strategy: SyncStrategy = SyncStrategy.AUTO
    auto_sync_on_install: bool = True
    tools: Dict[str, ToolProfile] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | str) -> "AppConfig":
        p = Path(path)
        if not p.exists():
            return cls()
        try:
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"cannot parse {p}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"{p}: top level must be a mapping")
        tools_raw = raw.get("tools") or {}
        if not isinstance(tools_raw, dict):
            raise ConfigError(f"{p}: 'tools' must be a mapping")
        try:
            tools = {str(t): _profile_from_yaml(str(t), v or {}) for t, v in tools_raw.items()}
            default = SyncStrategy.parse(raw.get("default_sync_strategy") or SyncStrategy.AUTO)
        except (ValueError, AttributeError) as exc:
            raise ConfigError(f"{p}: {exc}") from exc
        return cls(default_sync_strategy=default, auto_sync_on_install=bool(raw.get("auto_sync_on_install", True)), tools=tools)

    def save(self, path: Path | str) -> None:
        data = {
            "default_sync_strategy": self.default_sync_strategy.value,
            "auto_sync_on_install": self.auto_sync_on_install,
            "tools": {t: _profile_to_yaml(p) for t, p in sorted(self.tools.items())},
        }
        write_text_atomic(path, yaml.safe_dump(data, sort_keys=False, allow_unicode=True))

    def profiles(self) -> list[ToolProfile]:
        """Profiles for every built-in tool plus the custom ones, configured values taking precedence."""
        out: Dict[str, ToolProfile] = {t: ToolProfile(tool=t, sync_strategy=self.default_sync_strategy) for t in (*BUILTIN_TOOLS, OPENCLAW)}
        out.update(self.tools)
        return [out[k] for k in sorted(out)]

    def profile(self, tool: str) -> Optional[ToolProfile]:
        return self.tools.get(tool)

    def strategy_for(self, tool: str) -> SyncStrategy:
        p = self.tools.get(tool)
        if p is not None and p.sync_strategy is not SyncStrategy.AUTO:
            return p.sync_strategy
        return self.default_sync_strategy
