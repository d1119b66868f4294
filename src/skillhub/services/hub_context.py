# src/skillhub/services/hub_context.py
from __future__ import annotations
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional

from skillhub.adapters.fs.path_provider import PathProvider
from skillhub.adapters.hub.local_store import LocalHubStore
from skillhub.ports import EventBus
from skillhub.services.settings import Settings
from skillhub.services.sync.engine import SyncEngine
from skillhub.services.tools_config import AppConfig

_CTX: ContextVar[Optional["HubContext"]] = ContextVar("skillhub_ctx", default=None)


@dataclass(slots=True)
class HubContext:
    settings: Settings
    paths: PathProvider
    bus: EventBus
    store: LocalHubStore
    config: AppConfig
    engine: SyncEngine


def set_ctx(ctx: HubContext) -> None:
    _CTX.set(ctx)


def get_ctx() -> HubContext:
    """Current HubContext; raises if the application has not been bootstrapped."""
    ctx = _CTX.get()
    if ctx is None:
        raise RuntimeError("HubContext is not initialized. Call init_ctx(...) during app bootstrap.")
    return ctx


def clear_ctx() -> None:
    _CTX.set(None)

