# src/skillhub/services/sync/engine.py
"""
Sync engine: projects hub skills into tool directories and reconciles both sides.

Single-threaded and blocking. Projection is remove-then-create (last write wins);
callers must not run overlapping operations against the same hub or tool
directories.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, Optional

from skillhub.domain import (
    CollectResult,
    DistributionResult,
    DriftReport,
    FullSyncResult,
    HubSyncStatus,
    ScannedSkill,
    SkillSyncStatus,
    SkillVersion,
    SyncAction,
    SyncActionType,
    SyncPlan,
    SyncResult,
    SyncState,
    SyncStrategy,
    ToolProfile,
    ToolSyncState,
    is_valid_skill_id,
    timestamp_now,
)
from skillhub.errors import SkillHubError, SkillNotFound, SyncIOError, ToolNotFound
from skillhub.ports import EventBus, HubStore, ToolAdapter
from skillhub.services.eventbus import emit
from skillhub.services.fs import (
    compute_content_hash,
    copy_dir_staged,
    create_symlink,
    entry_exists,
    remove_entry,
    resolve_link,
)
from skillhub.services.sync.drift import detect_drift
from skillhub.services.sync.state_store import JsonSyncStateStore

_log = logging.getLogger(__name__)

StrategyResolver = Callable[[str], SyncStrategy]

_SOURCE = "sync.engine"


def _auto(_tool: str) -> SyncStrategy:
    return SyncStrategy.AUTO


def _check_id(skill_id: str) -> None:
    if not is_valid_skill_id(skill_id):
        raise SkillNotFound(skill_id, "invalid skill id")


def _target_path(adapter: ToolAdapter, skill_id: str) -> Path:
    """``<skills_dir>/<skill_id>``; never anything above the tool's skills directory."""
    skills_dir = adapter.skills_dir()
    target = skills_dir / skill_id
    if not is_valid_skill_id(skill_id) or target.parent != skills_dir:
        raise SkillNotFound(skill_id, f"invalid skill id for {skills_dir}")
    return target


class SyncEngine:
    def __init__(
        self,
        store: HubStore,
        adapters: Iterable[ToolAdapter] = (),
        *,
        bus: Optional[EventBus] = None,
        state_store: Optional[JsonSyncStateStore] = None,
    ):
        self.store = store
        self.bus = bus
        self.state_store = state_store
        self.state: SyncState = state_store.load() if state_store else SyncState()
        self._adapters: dict[str, ToolAdapter] = {}
        for adapter in adapters:
            self.register_adapter(adapter)

    # ------------------------------------------------------------------ adapters

    def register_adapter(self, adapter: ToolAdapter) -> None:
        if adapter.tool in self._adapters:
            _log.warning("adapter for %s replaced", adapter.tool)
        self._adapters[adapter.tool] = adapter

    @property
    def adapters(self) -> list[ToolAdapter]:
        """Registered adapters in tool-id order (the order every scan uses)."""
        return [self._adapters[k] for k in sorted(self._adapters)]

    def get_adapter(self, tool: str) -> ToolAdapter:
        adapter = self._adapters.get(tool)
        if adapter is None:
            raise ToolNotFound(tool, "no adapter registered")
        return adapter

    def detect_tools(self) -> list[ToolProfile]:
        profiles: list[ToolProfile] = []
        for adapter in self.adapters:
            base = getattr(adapter, "profile", None)
            profile = replace(base) if isinstance(base, ToolProfile) else ToolProfile(tool=adapter.tool)
            profile.detected = adapter.detect()
            profiles.append(profile)
        return profiles

    # ------------------------------------------------------------ single skill

    def sync_skill(self, skill_id: str, tool: str, strategy: SyncStrategy | str = SyncStrategy.AUTO) -> SkillSyncStatus:
        """Project one hub skill into one tool. Raises SkillNotFound, ToolNotFound or SyncIOError."""
        _check_id(skill_id)
        strategy = SyncStrategy.parse(strategy)
        adapter = self.get_adapter(tool)
        source = self.store.skill_path(skill_id)
        record = self.store.get_record(skill_id)
        if not source.is_dir():
            raise SkillNotFound(skill_id)
        if record is None:
            raise SkillNotFound(skill_id, "no install record")

        target = _target_path(adapter, skill_id)
        used = self._project(source, target, strategy)

        status = SkillSyncStatus(skill_id=skill_id, version=record.version, strategy=used, target_path=target)
        self._update_state(tool, status)
        self.store.record_projection(skill_id, tool)
        _log.info("sync.skill", extra={"extra": {"skill_id": skill_id, "tool": tool, "strategy": used.value}})
        emit(self.bus, "sync.skill.synced", {"skill_id": skill_id, "tool": tool, "strategy": used.value, "target": str(target)}, _SOURCE)
        self._persist()
        return status

    def sync_skill_to_tools(self, skill_id: str, tools: Iterable[str], strategy: SyncStrategy | str = SyncStrategy.AUTO) -> list[SyncResult]:
        results: list[SyncResult] = []
        for tool in tools:
            action = SyncActionType.UPDATE if self.state.status(tool, skill_id) else SyncActionType.ADD
            results.append(self._run(SyncAction(skill_id, tool, action, SyncStrategy.parse(strategy))))
        return results

    def sync_external_skill(
        self,
        source_path: Path | str,
        skill_id: str,
        tool: str,
        strategy: SyncStrategy | str = SyncStrategy.AUTO,
    ) -> SkillSyncStatus:
        """Project a skill directory that lives outside the hub (e.g. shipped by a plugin)."""
        _check_id(skill_id)
        source = Path(source_path)
        if not source.is_dir():
            raise SkillNotFound(skill_id, f"external skill not found: {source}")
        adapter = self.get_adapter(tool)
        target = _target_path(adapter, skill_id)
        used = self._project(source, target, SyncStrategy.parse(strategy))
        status = SkillSyncStatus(
            skill_id=skill_id,
            version=SkillVersion(version="external", content_hash=compute_content_hash(source)),
            strategy=used,
            target_path=target,
            source_path=source,
        )
        self._update_state(tool, status)
        emit(self.bus, "sync.skill.synced", {"skill_id": skill_id, "tool": tool, "strategy": used.value, "external": True}, _SOURCE)
        self._persist()
        return status

    def unsync_skill(self, skill_id: str, tool: str) -> bool:
        """Remove a projection. Missing targets are fine; returns whether something was removed."""
        _check_id(skill_id)
        adapter = self.get_adapter(tool)
        target = _target_path(adapter, skill_id)
        try:
            removed = remove_entry(target)
        except OSError as exc:
            raise SyncIOError("remove", target, exc) from exc

        tool_state = self.state.tools.get(tool)
        if tool_state is not None:
            tool_state.skills.pop(skill_id, None)
        self.store.forget_projection(skill_id, tool)
        emit(self.bus, "sync.skill.unsynced", {"skill_id": skill_id, "tool": tool, "removed": removed}, _SOURCE)
        self._persist()
        return removed

    # ----------------------------------------------------------- plan/execute

    def plan_sync(self, skill_id: str, tools: Iterable[str], strategy: SyncStrategy | str = SyncStrategy.AUTO) -> SyncPlan:
        """
        Per tool: no status -> add; drift recorded -> repair;
        recorded version differs from the hub record -> update; otherwise nothing.
        Tools that are not detected are left out.
        """
        _check_id(skill_id)
        strategy = SyncStrategy.parse(strategy)
        if not self.store.is_installed(skill_id):
            raise SkillNotFound(skill_id)
        record = self.store.get_record(skill_id)
        plan = SyncPlan()
        for tool in tools:
            adapter = self.get_adapter(tool)
            if not adapter.detect():
                continue
            current = self.state.status(tool, skill_id)
            if current is None:
                action = SyncActionType.ADD
            elif current.drift is not None:
                action = SyncActionType.REPAIR
            elif record is None or record.version != current.version:
                action = SyncActionType.UPDATE
            else:
                continue
            plan.add(SyncAction(skill_id=skill_id, tool=tool, action=action, strategy=strategy))
        return plan

    def execute_plan(self, plan: SyncPlan) -> list[SyncResult]:
        """Run every action; a failing item is reported and the batch goes on."""
        return [self._run(action) for action in plan.actions()]

    def _run(self, action: SyncAction) -> SyncResult:
        try:
            if action.action in (SyncActionType.ADD, SyncActionType.UPDATE):
                self.sync_skill(action.skill_id, action.tool, action.strategy)
            elif action.action is SyncActionType.REPAIR:
                self.unsync_skill(action.skill_id, action.tool)
                self.sync_skill(action.skill_id, action.tool, action.strategy)
            else:
                self.unsync_skill(action.skill_id, action.tool)
        except (SkillHubError, OSError) as exc:
            _log.warning(
                "sync.action.failed",
                extra={"extra": {"skill_id": action.skill_id, "tool": action.tool, "action": action.action.value, "error": str(exc)}},
            )
            return SyncResult(action.skill_id, action.tool, action.action, False, str(exc))
        return SyncResult(action.skill_id, action.tool, action.action, True)

    # ------------------------------------------------------------------ drift

    def check_drift(self) -> list[DriftReport]:
        """
        Compare every tracked projection with the filesystem. Detected drift is
        stored on the status (so the next plan repairs it); clean statuses get it cleared.
        """
        reports: list[DriftReport] = []
        changed = False
        for tool, status in list(self.state.iter_statuses()):
            expected = status.source_path or self.store.skill_path(status.skill_id)
            drift = detect_drift(status.target_path, expected)
            if (drift is None) != (status.drift is None) or (drift and status.drift and drift.drift_type != status.drift.drift_type):
                changed = True
            status.drift = drift
            if drift is not None:
                reports.append(DriftReport(status.skill_id, tool, drift))
                emit(self.bus, "sync.drift.detected", {"skill_id": status.skill_id, "tool": tool, "kind": drift.drift_type.value}, _SOURCE)
        if changed:
            self._persist()
        return reports

    # --------------------------------------------------------- reconciliation

    def _hub_skill_ids(self) -> list[str]:
        root = self.store.skills_dir()
        if not root.is_dir():
            return []
        return sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))

    def scan_all_tools(self) -> list[ScannedSkill]:
        """Every skill-like entry in every candidate directory of every tool, one per (id, tool)."""
        hub_ids = set(self._hub_skill_ids())
        seen: set[tuple[str, str]] = set()
        found: list[ScannedSkill] = []
        for adapter in self.adapters:
            for skills_dir in adapter.skills_dirs():
                if not skills_dir.is_dir():
                    continue
                for entry in sorted(skills_dir.iterdir(), key=lambda p: p.name):
                    if entry.name.startswith("."):
                        continue
                    is_link = entry.is_symlink()
                    if not (is_link or entry.is_dir()):
                        continue
                    key = (entry.name, adapter.tool)
                    if key in seen:
                        continue
                    seen.add(key)
                    found.append(ScannedSkill(id=entry.name, path=entry, tool=adapter.tool, in_hub=entry.name in hub_ids, is_link=is_link))
        return found

    def collect_to_hub(self) -> CollectResult:
        """
        Copy skills that tools have and the hub lacks into the hub. Symlinks are
        resolved and their content copied. The first tool (by id) wins on
        duplicates; no install record is written for collected skills.
        """
        result = CollectResult()
        for skill in self.scan_all_tools():
            if skill.in_hub:
                continue
            hub_path = self.store.skill_path(skill.id)
            if entry_exists(hub_path):
                continue
            try:
                source = resolve_link(skill.path) if skill.is_link else skill.path
                if not source.is_dir():
                    _log.info("hub.collect.skipped", extra={"extra": {"skill_id": skill.id, "tool": skill.tool, "path": str(source)}})
                    continue
                copy_dir_staged(source, hub_path)
            except OSError as exc:
                result.errors.append((skill.id, skill.tool, str(exc)))
                _log.warning("hub.collect.failed", extra={"extra": {"skill_id": skill.id, "tool": skill.tool, "error": str(exc)}})
                continue
            result.collected.append(skill.id)
        if result.collected:
            emit(self.bus, "hub.collected", {"skills": list(result.collected)}, _SOURCE)
        return result

    def distribute_from_hub(self, strategy_resolver: Optional[StrategyResolver] = None) -> list[DistributionResult]:
        """Project every hub skill into every tool that does not have an entry of that name yet."""
        resolver = strategy_resolver or _auto
        results: list[DistributionResult] = []
        for skill_id in self._hub_skill_ids():
            source = self.store.skill_path(skill_id)
            for adapter in self.adapters:
                try:
                    target = adapter.skills_dir() / skill_id
                except ToolNotFound as exc:
                    _log.debug("hub.distribute.no_dir: %s", exc)
                    continue
                if entry_exists(target):
                    continue
                strategy = SyncStrategy.parse(resolver(adapter.tool))
                try:
                    self._project(source, target, strategy)
                    ok = True
                except SyncIOError as exc:
                    _log.warning("hub.distribute.failed", extra={"extra": {"skill_id": skill_id, "tool": adapter.tool, "error": str(exc)}})
                    ok = False
                results.append(DistributionResult(skill_id, adapter.tool, ok))
        if results:
            emit(self.bus, "hub.distributed", {"ok": sum(r.success for r in results), "failed": sum(not r.success for r in results)}, _SOURCE)
        return results

    def full_sync(self, strategy_resolver: Optional[StrategyResolver] = None) -> FullSyncResult:
        """collect_to_hub, then distribute_from_hub. No rollback between the two."""
        collected = self.collect_to_hub()
        distributed = self.distribute_from_hub(strategy_resolver)
        result = FullSyncResult(
            collected_count=len(collected.collected),
            collected_skills=collected.collected,
            collect_errors=collected.errors,
            distributed=distributed,
        )
        emit(self.bus, "hub.full_sync", {"collected": result.collected_count, "distributed": result.distributed_ok}, _SOURCE)
        return result

    def get_hub_status(self) -> list[HubSyncStatus]:
        """Where each hub skill is present, derived from a fresh scan rather than from tracked state."""
        all_tools = [a.tool for a in self.adapters]
        holders: dict[str, list[str]] = {}
        for s in self.scan_all_tools():
            holders.setdefault(s.id, []).append(s.tool)
        out: list[HubSyncStatus] = []
        for skill_id in self._hub_skill_ids():
            synced_to = holders.get(skill_id, [])
            out.append(
                HubSyncStatus(
                    skill_id=skill_id,
                    hub_path=self.store.skill_path(skill_id),
                    synced_to=list(synced_to),
                    missing_in=[t for t in all_tools if t not in synced_to],
                )
            )
        return out

    # ---------------------------------------------------------------- helpers

    def _project(self, source: Path, target: Path, strategy: SyncStrategy) -> SyncStrategy:
        """Place ``source`` at ``target``; returns the concrete strategy used."""
        if strategy is SyncStrategy.AUTO:
            try:
                self._link(source, target)
                return SyncStrategy.LINK
            except SyncIOError as exc:
                _log.info("link failed, copying instead: %s", exc)
            self._copy(source, target)
            return SyncStrategy.COPY
        if strategy is SyncStrategy.LINK:
            self._link(source, target)
            return SyncStrategy.LINK
        self._copy(source, target)
        return SyncStrategy.COPY

    @staticmethod
    def _link(source: Path, target: Path) -> None:
        try:
            create_symlink(source, target)
        except OSError as exc:
            raise SyncIOError("link", target, exc) from exc

    @staticmethod
    def _copy(source: Path, target: Path) -> None:
        try:
            copy_dir_staged(source, target)
        except OSError as exc:
            raise SyncIOError("copy", target, exc) from exc

    def _update_state(self, tool: str, status: SkillSyncStatus) -> None:
        now = timestamp_now()
        tool_state = self.state.tools.setdefault(tool, ToolSyncState(tool=tool))
        tool_state.skills[status.skill_id] = status
        tool_state.last_sync = now
        self.state.last_sync = now

    def _persist(self) -> None:
        if self.state_store is not None:
            self.state_store.save(self.state)
