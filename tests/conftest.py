# tests/conftest.py
from __future__ import annotations
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from skillhub.adapters.hub.local_store import LocalHubStore
from skillhub.adapters.tools.fs_tool import FsToolAdapter
from skillhub.domain import Event, ToolProfile
from skillhub.services.eventbus import LocalEventBus
from skillhub.services.hub_context import clear_ctx
from skillhub.services.sync.engine import SyncEngine


# ---------- изоляция окружения для каждого теста ----------
@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SKILLHUB_HOME", str(tmp_path / "hub"))
    monkeypatch.setenv("SKILLHUB_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("SKILLHUB_USER_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("SKILLHUB_PERSIST_SYNC_STATE", raising=False)
    monkeypatch.delenv("SKILLHUB_LOG_LEVEL", raising=False)
    (tmp_path / "home").mkdir()
    try:
        yield
    finally:
        clear_ctx()
        logger = logging.getLogger("skillhub")
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()


@pytest.fixture
def skill_source(tmp_path) -> Callable[..., Path]:
    """Create a skill directory outside the hub, ready to be imported."""

    def _make(name: str, files: dict[str, str] | None = None) -> Path:
        root = tmp_path / "sources" / name
        files = files or {"SKILL.md": f"# {name}\n", "scripts/run.py": "print('ok')\n"}
        for rel, text in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def store(tmp_path) -> LocalHubStore:
    return LocalHubStore(tmp_path / "hub")


@pytest.fixture
def tool_dirs(tmp_path) -> dict[str, Path]:
    return {t: tmp_path / "tools" / t / "skills" for t in ("tool_a", "tool_b", "tool_c")}


@pytest.fixture
def make_tool(tmp_path) -> Callable[..., FsToolAdapter]:
    def _make(tool: str, path: Path) -> FsToolAdapter:
        return FsToolAdapter(ToolProfile(tool=tool, custom_global_path=path), home=tmp_path / "home")

    return _make


@pytest.fixture
def adapters(tool_dirs, make_tool) -> list[FsToolAdapter]:
    return [make_tool(t, p) for t, p in tool_dirs.items()]


@pytest.fixture
def events() -> list[Event]:
    return []


@pytest.fixture
def bus(events) -> LocalEventBus:
    b = LocalEventBus()
    b.subscribe("", events.append)
    return b


@pytest.fixture
def engine(store, adapters, bus) -> SyncEngine:
    return SyncEngine(store, adapters, bus=bus)


@pytest.fixture
def installed(store, skill_source) -> Callable[..., str]:
    """Import a skill into the hub and return its id."""

    def _install(name: str = "pdf-tools", files: dict[str, str] | None = None, version: str = "1.0.0") -> str:
        rec = store.import_skill(skill_source(name, files), version=version)
        return rec.skill_id

    return _install
