"""Drift detection against tracked projections, and the repair loop."""

from __future__ import annotations

import os
import shutil

from skillhub.domain import DriftType, SyncActionType, SyncStrategy


def _kinds(reports):
    return [(r.skill_id, r.tool, r.drift.drift_type) for r in reports]


def test_clean_projection_reports_nothing(engine, installed):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    engine.sync_skill(sid, "tool_b", SyncStrategy.COPY)
    assert engine.check_drift() == []


def test_deleted_target_is_missing(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    os.unlink(tool_dirs["tool_a"] / sid)

    assert _kinds(engine.check_drift()) == [(sid, "tool_a", DriftType.MISSING)]


def test_deleted_copy_is_missing(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_b", SyncStrategy.COPY)
    shutil.rmtree(tool_dirs["tool_b"] / sid)

    assert _kinds(engine.check_drift()) == [(sid, "tool_b", DriftType.MISSING)]


def test_relinked_elsewhere_is_wrong_target(engine, installed, tool_dirs, tmp_path):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    other = tmp_path / "elsewhere"
    other.mkdir()
    target = tool_dirs["tool_a"] / sid
    os.unlink(target)
    os.symlink(other, target, target_is_directory=True)

    reports = engine.check_drift()
    assert _kinds(reports) == [(sid, "tool_a", DriftType.WRONG_TARGET)]
    assert str(other) in reports[0].drift.description


def test_hub_directory_gone_is_broken_link(engine, store, installed):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    shutil.rmtree(store.skill_path(sid))

    assert _kinds(engine.check_drift()) == [(sid, "tool_a", DriftType.BROKEN_LINK)]


def test_edited_copy_is_not_reported(engine, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_b", SyncStrategy.COPY)
    (tool_dirs["tool_b"] / sid / "SKILL.md").write_text("edited in place", encoding="utf-8")

    assert engine.check_drift() == []


def test_drift_is_recorded_and_repaired(engine, installed, tool_dirs, events):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    os.unlink(tool_dirs["tool_a"] / sid)

    engine.check_drift()
    assert engine.state.status("tool_a", sid).drift.drift_type is DriftType.MISSING
    assert any(e.type == "sync.drift.detected" and e.payload["kind"] == "missing" for e in events)

    plan = engine.plan_sync(sid, ["tool_a"])
    assert [a.action for a in plan.actions()] == [SyncActionType.REPAIR]

    results = engine.execute_plan(plan)
    assert results[0].success
    assert (tool_dirs["tool_a"] / sid).is_symlink()
    assert engine.state.status("tool_a", sid).drift is None
    assert engine.check_drift() == []
    assert engine.plan_sync(sid, ["tool_a"]).is_empty()


def test_fixed_by_hand_clears_recorded_drift(engine, store, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    target = tool_dirs["tool_a"] / sid
    os.unlink(target)
    engine.check_drift()

    os.symlink(store.skill_path(sid), target, target_is_directory=True)
    assert engine.check_drift() == []
    assert engine.state.status("tool_a", sid).drift is None


def test_reports_cover_every_tool(engine, installed, tool_dirs):
    a = installed("alpha")
    b = installed("beta")
    engine.sync_skill(a, "tool_a")
    engine.sync_skill(b, "tool_c")
    os.unlink(tool_dirs["tool_a"] / a)
    os.unlink(tool_dirs["tool_c"] / b)

    assert sorted(_kinds(engine.check_drift())) == [
        (a, "tool_a", DriftType.MISSING),
        (b, "tool_c", DriftType.MISSING),
    ]


def test_relative_link_to_hub_is_clean(engine, store, installed, tool_dirs):
    sid = installed()
    engine.sync_skill(sid, "tool_a")
    target = tool_dirs["tool_a"] / sid
    os.unlink(target)
    os.symlink(os.path.relpath(store.skill_path(sid), target.parent), target, target_is_directory=True)

    assert target.resolve() == store.skill_path(sid)
    assert engine.check_drift() == []
