# src/skillhub/domain/sync.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, NamedTuple, Optional

from skillhub.domain.skill import SkillVersion
from skillhub.domain.types import SyncStrategy


class DriftType(str, Enum):
    MISSING = "missing"
    VERSION_MISMATCH = "version_mismatch"
    # есть в модели, но check_drift его не выдаёт
    CONTENT_MODIFIED = "content_modified"
    BROKEN_LINK = "broken_link"
    WRONG_TARGET = "wrong_target"

    def label(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True, slots=True)
class DriftInfo:
    drift_type: DriftType
    description: str
    detected_at: str

    def to_dict(self) -> dict[str, Any]:
        return {"drift_type": self.drift_type.value, "description": self.description, "detected_at": self.detected_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DriftInfo":
        return cls(DriftType(data["drift_type"]), str(data.get("description", "")), str(data.get("detected_at", "")))


@dataclass(slots=True)
class SkillSyncStatus:
    skill_id: str
    version: SkillVersion
    strategy: SyncStrategy  # всегда LINK или COPY
    target_path: Path
    drift: Optional[DriftInfo] = None
    # only for skills projected from outside the hub
    source_path: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill_id": self.skill_id,
            "version": self.version.to_dict(),
            "strategy": self.strategy.value,
            "target_path": str(self.target_path),
            "drift": self.drift.to_dict() if self.drift else None,
            "source_path": str(self.source_path) if self.source_path else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillSyncStatus":
        drift = data.get("drift")
        source_path = data.get("source_path")
        return cls(
            skill_id=str(data["skill_id"]),
            version=SkillVersion.from_dict(data["version"]),
            strategy=SyncStrategy(data["strategy"]),
            target_path=Path(data["target_path"]),
            drift=DriftInfo.from_dict(drift) if drift else None,
            source_path=Path(source_path) if source_path else None,
        )


@dataclass(slots=True)
class ToolSyncState:
    tool: str
    skills: dict[str, SkillSyncStatus] = field(default_factory=dict)
    last_sync: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "skills": {sid: st.to_dict() for sid, st in self.skills.items()},
            "last_sync": self.last_sync,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolSyncState":
        skills = {sid: SkillSyncStatus.from_dict(st) for sid, st in (data.get("skills") or {}).items()}
        return cls(tool=str(data["tool"]), skills=skills, last_sync=data.get("last_sync"))


@dataclass(slots=True)
class SyncState:
    tools: dict[str, ToolSyncState] = field(default_factory=dict)
    last_sync: Optional[str] = None

    def status(self, tool: str, skill_id: str) -> Optional[SkillSyncStatus]:
        ts = self.tools.get(tool)
        return ts.skills.get(skill_id) if ts else None

    def iter_statuses(self) -> Iterator[tuple[str, SkillSyncStatus]]:
        for tool, ts in self.tools.items():
            for status in ts.skills.values():
                yield tool, status

    def to_dict(self) -> dict[str, Any]:
        return {"tools": {t: ts.to_dict() for t, ts in self.tools.items()}, "last_sync": self.last_sync}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncState":
        tools = {t: ToolSyncState.from_dict(ts) for t, ts in (data.get("tools") or {}).items()}
        return cls(tools=tools, last_sync=data.get("last_sync"))


class SyncActionType(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    REPAIR = "repair"


@dataclass(frozen=True, slots=True)
class SyncAction:
    skill_id: str
    tool: str
    action: SyncActionType
    strategy: SyncStrategy


@dataclass(slots=True)
class SyncPlan:
    to_add: list[SyncAction] = field(default_factory=list)
    to_update: list[SyncAction] = field(default_factory=list)
    to_remove: list[SyncAction] = field(default_factory=list)
    to_repair: list[SyncAction] = field(default_factory=list)

    def add(self, action: SyncAction) -> None:
        bucket = {
            SyncActionType.ADD: self.to_add,
            SyncActionType.UPDATE: self.to_update,
            SyncActionType.REMOVE: self.to_remove,
            SyncActionType.REPAIR: self.to_repair,
        }[action.action]
        bucket.append(action)

    def actions(self) -> list[SyncAction]:
        """All actions in execution order: add, update, repair, remove."""
        return [*self.to_add, *self.to_update, *self.to_repair, *self.to_remove]

    def is_empty(self) -> bool:
        return not (self.to_add or self.to_update or self.to_remove or self.to_repair)


@dataclass(frozen=True, slots=True)
class SyncResult:
    skill_id: str
    tool: str
    action: SyncActionType
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScannedSkill:
    id: str
    path: Path
    tool: str
    in_hub: bool
    is_link: bool


@dataclass(frozen=True, slots=True)
class HubSyncStatus:
    skill_id: str
    hub_path: Path
    synced_to: list[str]
    missing_in: list[str]


class DriftReport(NamedTuple):
    skill_id: str
    tool: str
    drift: DriftInfo


class DistributionResult(NamedTuple):
    skill_id: str
    tool: str
    success: bool


@dataclass(slots=True)
class CollectResult:
    collected: list[str] = field(default_factory=list)
    # (skill_id, tool, error)
    errors: list[tuple[str, str, str]] = field(default_factory=list)


@dataclass(slots=True)
class FullSyncResult:
    collected_count: int
    collected_skills: list[str]
    collect_errors: list[tuple[str, str, str]]
    distributed: list[DistributionResult]

    @property
    def distributed_ok(self) -> int:
        return sum(1 for r in self.distributed if r.success)
