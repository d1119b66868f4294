# src/skillhub/apps/bootstrap.py
from __future__ import annotations
from typing import Optional
from threading import RLock

from skillhub.adapters.fs.path_provider import PathProvider
from skillhub.adapters.hub.local_store import LocalHubStore
from skillhub.adapters.tools.registry import build_adapters
from skillhub.services.eventbus import LocalEventBus
from skillhub.services.hub_context import HubContext, set_ctx
from skillhub.services.logging import attach_event_logger, setup_logging
from skillhub.services.settings import Settings
from skillhub.services.sync.engine import SyncEngine
from skillhub.services.sync.state_store import JsonSyncStateStore
from skillhub.services.tools_config import AppConfig


class _CtxHolder:
    _ctx: Optional[HubContext] = None
    _lock = RLock()

    @classmethod
    def init(cls, settings: Optional[Settings] = None, *, console_logging: bool = True) -> HubContext:
        with cls._lock:
            cls._ctx = cls._build(settings or Settings.from_sources(), console_logging=console_logging)
            set_ctx(cls._ctx)
            return cls._ctx

    @staticmethod
    def _build(settings: Settings, *, console_logging: bool = True) -> HubContext:
        paths = PathProvider.from_settings(settings)
        paths.ensure_tree()

        bus = LocalEventBus()
        root_logger = setup_logging(paths.logs_dir(), settings.log_level, console=console_logging)
        attach_event_logger(bus, root_logger.getChild("events"))

        config = AppConfig.load(paths.config_file())
        store = LocalHubStore(paths.hub_dir())
        adapters = build_adapters(config.profiles(), home=paths.user_home())
        state_store = JsonSyncStateStore(paths.sync_state_file()) if settings.persist_sync_state else None
        engine = SyncEngine(store, adapters, bus=bus, state_store=state_store)

        return HubContext(settings=settings, paths=paths, bus=bus, store=store, config=config, engine=engine)


def init_ctx(settings: Optional[Settings] = None, *, console_logging: bool = True) -> HubContext:
    """Build the application context (composition root) and publish it."""
    return _CtxHolder.init(settings, console_logging=console_logging)
