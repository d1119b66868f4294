from .types import Event, SyncStrategy, timestamp_now
from .skill import SkillVersion, SkillSource, InstallRecord, is_valid_skill_id, validate_skill_id
from .sync import (
    DriftType,
    DriftInfo,
    SkillSyncStatus,
    ToolSyncState,
    SyncState,
    SyncActionType,
    SyncAction,
    SyncPlan,
    SyncResult,
    ScannedSkill,
    HubSyncStatus,
    DriftReport,
    DistributionResult,
    CollectResult,
    FullSyncResult,
)
from .tool import ToolSpec, ToolProfile, BUILTIN_TOOLS, OPENCLAW

__all__ = [
    "Event",
    "SyncStrategy",
    "timestamp_now",
    "SkillVersion",
    "SkillSource",
    "InstallRecord",
    "is_valid_skill_id",
    "validate_skill_id",
    "DriftType",
    "DriftInfo",
    "SkillSyncStatus",
    "ToolSyncState",
    "SyncState",
    "SyncActionType",
    "SyncAction",
    "SyncPlan",
    "SyncResult",
    "ScannedSkill",
    "HubSyncStatus",
    "DriftReport",
    "DistributionResult",
    "CollectResult",
    "FullSyncResult",
    "ToolSpec",
    "ToolProfile",
    "BUILTIN_TOOLS",
    "OPENCLAW",
]
