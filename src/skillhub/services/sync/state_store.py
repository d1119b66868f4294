from __future__ import annotations
import logging
from pathlib import Path

from skillhub.domain import SyncState
from skillhub.services.fs import read_json, write_json_atomic

_log = logging.getLogger(__name__)


class JsonSyncStateStore:
    """SyncState serialized as pretty JSON under the hub root."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> SyncState:
        if not self.path.exists():
            return SyncState()
        try:
            return SyncState.from_dict(read_json(self.path))
        except (OSError, ValueError, KeyError, TypeError) as exc:
            _log.warning("sync_state.unreadable", extra={"extra": {"path": str(self.path), "error": str(exc)}})
            return SyncState()

    def save(self, state: SyncState) -> None:
        write_json_atomic(self.path, state.to_dict())
