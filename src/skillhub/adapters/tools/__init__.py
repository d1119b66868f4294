from .fs_tool import FsToolAdapter
from .openclaw import OpenClawAdapter
from .registry import build_adapters, default_profiles, make_adapter

__all__ = ["FsToolAdapter", "OpenClawAdapter", "build_adapters", "default_profiles", "make_adapter"]
