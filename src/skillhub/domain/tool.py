# src/skillhub/domain/tool.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from skillhub.domain.types import SyncStrategy


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Каталожная запись инструмента: где он держит навыки относительно $HOME."""

    id: str
    display_name: str
    global_dir: Optional[tuple[str, ...]]  # относительно домашнего каталога
    project_dir: Optional[str]
    marker: Optional[tuple[str, ...]] = None  # каталог, по которому детектим инструмент

    def global_skills_dir(self, home: Path) -> Optional[Path]:
        if self.global_dir is None:
            return None
        return Path(home).joinpath(*self.global_dir)

    def marker_dir(self, home: Path) -> Optional[Path]:
        parts = self.marker or (self.global_dir[:-1] if self.global_dir else None)
        if not parts:
            return None
        return Path(home).joinpath(*parts)


def _entry(id: str, name: str, global_dir: Optional[str], project_dir: Optional[str], marker: Optional[str] = None) -> ToolSpec:
    return ToolSpec(
        id=id,
        display_name=name,
        global_dir=tuple(global_dir.split("/")) if global_dir else None,
        project_dir=project_dir,
        marker=tuple(marker.split("/")) if marker else None,
    )


BUILTIN_TOOLS: dict[str, ToolSpec] = {
    s.id: s
    for s in (
        _entry("amp", "Amp", ".config/agents/skills", ".agents/skills/"),
        _entry("antigravity", "Antigravity", ".gemini/antigravity/skills", ".agent/skills/"),
        _entry("claude", "Claude Code", ".claude/skills", ".claude/skills/"),
        _entry("codebuddy", "CodeBuddy", ".codebuddy/skills", ".codebuddy/skills/"),
        _entry("codex", "Codex", ".codex/skills", ".codex/skills/"),
        _entry("copilot", "GitHub Copilot", ".copilot/skills", ".github/skills/"),
        _entry("cursor", "Cursor", ".cursor/skills", ".cursor/skills/"),
        _entry("factory", "Droid/Factory", ".factory/skills", ".factory/skills/"),
        _entry("gemini", "Gemini CLI", ".gemini/skills", ".gemini/skills/"),
        _entry("goose", "Goose", ".config/goose/skills", ".goose/skills/"),
        _entry("kilocode", "Kilo Code", ".kilocode/skills", ".kilocode/skills/"),
        _entry("kimi", "Kimi CLI", ".kimi/skills", ".kimi/skills/"),
        _entry("opencode", "OpenCode", ".config/opencode/skills", ".opencode/skills/"),
        _entry("qwen", "Qwen Code", ".qwen/skills", ".qwen/skills/"),
        _entry("roocode", "Roo Code", ".roo/skills", ".roo/skills/"),
        # у Trae нет глобального каталога навыков
        _entry("trae", "Trae", None, ".trae/skills/", marker=".trae"),
        _entry("windsurf", "Windsurf", ".codeium/windsurf/skills", ".windsurf/skills/"),
    )
}

OPENCLAW = "openclaw"


@dataclass(slots=True)
class ToolProfile:
    """User-facing configuration of one tool."""

    tool: str
    enabled: bool = True
    custom_global_path: Optional[Path] = None
    custom_project_path: Optional[str] = None
    sync_strategy: SyncStrategy = SyncStrategy.AUTO
    detected: bool = False
    custom_name: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.tool not in BUILTIN_TOOLS and self.tool != OPENCLAW

    def display_name(self) -> str:
        if self.custom_name:
            return self.custom_name
        spec = BUILTIN_TOOLS.get(self.tool)
        if spec:
            return spec.display_name
        return "OpenClaw" if self.tool == OPENCLAW else self.tool

    def global_skills_dir(self, home: Path) -> Optional[Path]:
        if self.custom_global_path is not None:
            return Path(self.custom_global_path).expanduser()
        spec = BUILTIN_TOOLS.get(self.tool)
        return spec.global_skills_dir(home) if spec else None

    def project_skills_dir(self) -> Optional[str]:
        if self.custom_project_path:
            return self.custom_project_path
        spec = BUILTIN_TOOLS.get(self.tool)
        return spec.project_dir if spec else None
