from .events import EventBus
from .hub import HubStore
from .tools import ToolAdapter

__all__ = ["EventBus", "HubStore", "ToolAdapter"]
