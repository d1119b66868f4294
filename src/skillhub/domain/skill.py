# src/skillhub/domain/skill.py
from __future__ import annotations
import re
from dataclasses import dataclass, field, asdict
from typing import Any, Optional

from skillhub.domain.types import timestamp_now

_SOURCE_KINDS = ("git", "registry", "http", "local")

# имя каталога навыка: без разделителей пути, не начинается с точки
_ID_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.\-]*")


def is_valid_skill_id(skill_id: str) -> bool:
    return isinstance(skill_id, str) and _ID_RE.fullmatch(skill_id) is not None


def validate_skill_id(skill_id: str) -> str:
    skill_id = (skill_id or "").strip()
    if not is_valid_skill_id(skill_id):
        raise ValueError(f"invalid skill id: {skill_id!r}")
    return skill_id


@dataclass(frozen=True, slots=True)
class SkillVersion:
    version: str
    content_hash: str
    commit: Optional[str] = None  # ревизия VCS, если известна
    timestamp: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillVersion":
        return cls(
            version=str(data.get("version") or "0.0.0"),
            content_hash=str(data.get("content_hash") or ""),
            commit=data.get("commit"),
            timestamp=data.get("timestamp"),
        )


@dataclass(frozen=True, slots=True)
class SkillSource:
    """Where a skill came from: git / registry / http / local."""

    kind: str
    location: str
    ref: Optional[str] = None
    subpath: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in _SOURCE_KINDS:
            raise ValueError(f"unknown source kind: {self.kind!r}")

    def display(self) -> str:
        return f"{self.kind}:{self.location}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SkillSource":
        return cls(kind=data["kind"], location=data["location"], ref=data.get("ref"), subpath=data.get("subpath"))


@dataclass(slots=True)
class InstallRecord:
    skill_id: str
    version: SkillVersion
    source: SkillSource
    installed_at: str = field(default_factory=timestamp_now)
    projected_tools: list[str] = field(default_factory=list)
    scan_passed: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill_id": self.skill_id,
            "version": self.version.to_dict(),
            "installed_at": self.installed_at,
            "source": self.source.to_dict(),
            "projected_tools": list(self.projected_tools),
            "scan_passed": self.scan_passed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InstallRecord":
        return cls(
            skill_id=str(data["skill_id"]),
            version=SkillVersion.from_dict(data.get("version") or {}),
            source=SkillSource.from_dict(data["source"]),
            installed_at=str(data.get("installed_at") or ""),
            projected_tools=[str(t) for t in data.get("projected_tools") or []],
            scan_passed=bool(data.get("scan_passed", True)),
        )
