from .drift import detect_drift
from .engine import StrategyResolver, SyncEngine
from .state_store import JsonSyncStateStore

__all__ = ["SyncEngine", "StrategyResolver", "JsonSyncStateStore", "detect_drift"]
