from .path_provider import PathProvider

__all__ = ["PathProvider"]
