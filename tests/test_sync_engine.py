"""Single-skill projection, planning and batch execution."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from skillhub.domain import SyncAction, SyncActionType, SyncPlan, SyncStrategy, ToolProfile
from skillhub.adapters.tools.fs_tool import FsToolAdapter
from skillhub.errors import SkillNotFound, SyncIOError, ToolNotFound
from skillhub.services.fs import compute_content_hash


def _fail_symlink(*args, **kwargs):
    raise OSError("symlinks not supported here")


def _no_staging_left(directory: Path) -> bool:
    return not any(p.name.startswith(".") for p in directory.iterdir())


def test_sync_auto_creates_link_to_hub(engine, store, installed, tool_dirs):
    sid = installed("pdf-tools")

    status = engine.sync_skill(sid, "tool_a", SyncStrategy.AUTO)

    target = tool_dirs["tool_a"] / "pdf-tools"
    assert target.is_symlink()
    assert Path(os.readlink(target)) == store.skill_path(sid)
    assert status.strategy is SyncStrategy.LINK
    assert status.target_path == target
    assert status.drift is None
    assert status.version.content_hash == store.get_record(sid).version.content_hash
    assert engine.state.status("tool_a", sid) is status
    assert engine.state.tools["tool_a"].last_sync is not None
    assert store.get_record(sid).projected_tools == ["tool_a"]


def test_sync_is_idempotent(engine, store, installed, tool_dirs):
    sid = installed()
    first = engine.sync_skill(sid, "tool_a")
    second = engine.sync_skill(sid, "tool_a")

    target = tool_dirs["tool_a"] / sid
    assert Path(os.readlink(target)) == store.skill_path(sid)
    assert sorted(p.name for p in tool_dirs["tool_a"].iterdir()) == [sid]
    assert (first.strategy, first.version, first.target_path) == (second.strategy, second.version, second.target_path)
    assert store.get_record(sid).projected_tools == ["tool_a"]


def test_auto_falls_back_to_copy_when_link_fails(engine, store, installed, tool_dirs, monkeypatch):
    sid = installed()
    monkeypatch.setattr(os, "symlink", _fail_symlink)

    status = engine.sync_skill(sid, "tool_a", "auto")

    target = tool_dirs["tool_a"] / sid
    assert status.strategy is SyncStrategy.COPY
    assert target.is_dir() and not target.is_symlink()
    assert compute_content_hash(target) == compute_content_hash(store.skill_path(sid))
    assert _no_staging_left(tool_dirs["tool_a"])


def test_link_only_does_not_fall_back(engine, installed, tool_dirs, monkeypatch):
    sid = installed()
    monkeypatch.setattr(os, "symlink", _fail_symlink)

    with pytest.raises(SyncIOError):
        engine.sync_skill(sid, "tool_a", SyncStrategy.LINK)

    assert not os.path.lexists(tool_dirs["tool_a"] / sid)
    assert engine.state.status("tool_a", sid) is None


def test_copy_strategy_makes_complete_copy(engine, store, installed, tool_dirs):
    sid = installed("deep", {"SKILL.md": "x", "a/b/c.txt": "nested"})

    status = engine.sync_skill(sid, "tool_b", SyncStrategy.COPY)

    target = tool_dirs["tool_b"] / sid
    assert status.strategy is SyncStrategy.COPY
    assert not target.is_symlink()
    assert (target / "a" / "b" / "c.txt").read_text(encoding="utf-8") == "nested"
    assert compute_content_hash(target) == store.get_record(sid).version.content_hash


def test_sync_replaces_whatever_is_at_target(engine, store, installed, tool_dirs):
    sid = installed()
    tool_dirs["tool_a"].mkdir(parents=True)
    (tool_dirs["tool_a"] / sid).write_text("stale file", encoding="utf-8")

    engine.sync_skill(sid, "tool_a")
    assert (tool_dirs["tool_a"] / sid).is_symlink()

    engine.sync_skill(sid, "tool_a", SyncStrategy.COPY)
    assert (tool_dirs["tool_a"] / sid).is_dir() and not (tool_dirs["tool_a"] / sid).is_symlink()


def test_sync_unknown_skill_raises(engine):
    with pytest.raises(SkillNotFound):
        engine.sync_skill("nope", "tool_a")


def test_sync_skill_without_record_raises(engine, store):
    (store.skill_path("orphan") / "SKILL.md").parent.mkdir(parents=True)
    (store.skill_path("orphan") / "SKILL.md").write_text("x", encoding="utf-8")

    with pytest.raises(SkillNotFound):
        engine.sync_skill("orphan", "tool_a")


def test_sync_unregistered_tool_raises(engine, installed):
    sid = installed()
    with pytest.raises(ToolNotFound):
        engine.sync_skill(sid, "ghost")


def test_sync_tool_without_directory_raises(engine, installed, tmp_path):
    sid = installed()
    engine.register_adapter(FsToolAdapter(ToolProfile(tool="trae"), home=tmp_path / "home"))
    with pytest.raises(ToolNotFound):
        engine.sync_skill(sid, "trae")


def test_unsync_removes_link_and_is_idempotent(engine, store, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")

    assert engine.unsync_skill(sid, "tool_a") is True
    assert not os.path.lexists(tool_dirs["tool_a"] / sid)
    assert store.skill_path(sid).is_dir()  # the hub copy is untouched
    assert engine.state.status("tool_a", sid) is None
    assert store.get_record(sid).projected_tools == []

    assert engine.unsync_skill(sid, "tool_a") is False


def test_unsync_removes_copied_directory(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_b", SyncStrategy.COPY)
    engine.unsync_skill(sid, "tool_b")
    assert not (tool_dirs["tool_b"] / sid).exists()


def test_sync_skill_to_tools_isolates_failures(engine, installed):
    sid = installed()
    results = engine.sync_skill_to_tools(sid, ["tool_a", "ghost", "tool_b"])

    assert [(r.tool, r.success) for r in results] == [("tool_a", True), ("ghost", False), ("tool_b", True)]
    assert "ghost" in results[1].error


def test_sync_external_skill(engine, skill_source, tool_dirs):
    src = skill_source("plugin-skill")
    status = engine.sync_external_skill(src, "plugin-skill", "tool_c")

    assert Path(os.readlink(tool_dirs["tool_c"] / "plugin-skill")) == src
    assert status.version.version == "external"
    assert status.source_path == src
    assert engine.check_drift() == []


# ---------------------------------------------------------------- planning


def test_plan_sync_classifies_add_then_nothing(engine, installed):
    sid = installed()

    plan = engine.plan_sync(sid, ["tool_a", "tool_b"], SyncStrategy.AUTO)
    assert [(a.tool, a.action) for a in plan.to_add] == [("tool_a", SyncActionType.ADD), ("tool_b", SyncActionType.ADD)]
    assert not plan.to_update and not plan.to_repair and not plan.to_remove

    results = engine.execute_plan(plan)
    assert all(r.success for r in results)
    assert engine.plan_sync(sid, ["tool_a", "tool_b"]).is_empty()


def test_plan_sync_detects_hub_version_change(engine, store, installed, tool_dirs):
    sid = installed("pdf-tools", {"SKILL.md": "v1"})
    engine.sync_skill(sid, "tool_a")
    h1 = engine.state.status("tool_a", sid).version.content_hash

    (store.skill_path(sid) / "SKILL.md").write_text("v2", encoding="utf-8")
    h2 = store.refresh_version(sid).version.content_hash
    assert h1 != h2

    plan = engine.plan_sync(sid, ["tool_a"], SyncStrategy.AUTO)
    assert [a.action for a in plan.actions()] == [SyncActionType.UPDATE]

    results = engine.execute_plan(plan)
    assert results[0].success
    assert engine.state.status("tool_a", sid).version.content_hash == h2
    assert (tool_dirs["tool_a"] / sid).is_symlink()


def test_plan_sync_requires_installed_skill(engine):
    with pytest.raises(SkillNotFound):
        engine.plan_sync("missing", ["tool_a"])


def test_plan_sync_skips_undetected_tools(engine, installed, tmp_path):
    sid = installed()
    engine.register_adapter(FsToolAdapter(ToolProfile(tool="cursor"), home=tmp_path / "home"))

    plan = engine.plan_sync(sid, ["cursor", "tool_a"])
    assert [a.tool for a in plan.actions()] == ["tool_a"]


def test_execute_plan_continues_after_failure(engine, installed, tool_dirs):
    sid = installed()
    plan = SyncPlan()
    plan.add(SyncAction(sid, "ghost", SyncActionType.ADD, SyncStrategy.AUTO))
    plan.add(SyncAction("missing", "tool_a", SyncActionType.ADD, SyncStrategy.AUTO))
    plan.add(SyncAction(sid, "tool_b", SyncActionType.ADD, SyncStrategy.COPY))

    results = engine.execute_plan(plan)

    assert [r.success for r in results] == [False, False, True]
    assert results[0].error and results[1].error
    assert (tool_dirs["tool_b"] / sid).is_dir()


def test_execute_plan_remove(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    plan = SyncPlan()
    plan.add(SyncAction(sid, "tool_a", SyncActionType.REMOVE, SyncStrategy.AUTO))

    assert engine.execute_plan(plan)[0].success
    assert not os.path.lexists(tool_dirs["tool_a"] / sid)


def test_engine_emits_events(engine, installed, events):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    engine.unsync_skill(sid, "tool_a")
    assert [e.type for e in events] == ["sync.skill.synced", "sync.skill.unsynced"]
    assert events[0].payload["strategy"] == "link"


def test_detect_tools_reports_every_adapter(engine):
    profiles = engine.detect_tools()
    assert [(p.tool, p.detected) for p in profiles] == [("tool_a", True), ("tool_b", True), ("tool_c", True)]


def test_sync_state_survives_restart(store, adapters, tmp_path, installed):
    from skillhub.services.sync.engine import SyncEngine
    from skillhub.services.sync.state_store import JsonSyncStateStore

    sid = installed()
    state_file = tmp_path / "hub" / "state" / "sync_state.json"
    first = SyncEngine(store, adapters, state_store=JsonSyncStateStore(state_file))
    first.sync_skill(sid, "tool_a", SyncStrategy.COPY)
    assert state_file.exists()

    second = SyncEngine(store, adapters, state_store=JsonSyncStateStore(state_file))
    restored = second.state.status("tool_a", sid)
    assert restored is not None
    assert restored.strategy is SyncStrategy.COPY
    assert restored.version == store.get_record(sid).version
    assert second.plan_sync(sid, ["tool_a"]).is_empty()


def test_unreadable_state_file_starts_empty(tmp_path):
    from skillhub.services.sync.state_store import JsonSyncStateStore

    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonSyncStateStore(path).load().tools == {}


# ------------------------------------------------------------- skill ids


@pytest.mark.parametrize("bad", ["", ".", "..", "a/b", "../tool_b", ".hidden"])
def test_bad_skill_id_never_reaches_the_filesystem(engine, installed, tool_dirs, bad):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    neighbour = tool_dirs["tool_a"].parent / "settings.json"
    neighbour.write_text("{}", encoding="utf-8")

    with pytest.raises(SkillNotFound):
        engine.unsync_skill(bad, "tool_a")
    with pytest.raises(SkillNotFound):
        engine.sync_skill(bad, "tool_a")
    with pytest.raises(SkillNotFound):
        engine.plan_sync(bad, ["tool_a"])
    with pytest.raises(SkillNotFound):
        engine.sync_external_skill(tool_dirs["tool_a"], bad, "tool_a")

    assert neighbour.read_text(encoding="utf-8") == "{}"
    assert (tool_dirs["tool_a"] / sid).is_symlink()
    assert engine.state.status("tool_a", sid) is not None


def test_bad_skill_id_in_plan_is_reported(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    plan = SyncPlan()
    plan.add(SyncAction("..", "tool_a", SyncActionType.REMOVE, SyncStrategy.AUTO))

    (result,) = engine.execute_plan(plan)
    assert not result.success
    assert (tool_dirs["tool_a"] / sid).is_symlink()
