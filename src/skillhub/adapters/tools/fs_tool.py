from __future__ import annotations
from pathlib import Path
from typing import Optional

from skillhub.domain import BUILTIN_TOOLS, ToolProfile
from skillhub.errors import ToolNotFound


class FsToolAdapter:
    """
    Tool whose skills live in one directory under the user's home
    (catalogue default) or under a custom path from the profile.
    """

    def __init__(self, profile: ToolProfile, *, home: Path):
        self.profile = profile
        self.home = Path(home)

    @property
    def tool(self) -> str:
        return self.profile.tool

    @property
    def display_name(self) -> str:
        return self.profile.display_name()

    def _primary_path(self) -> Optional[Path]:
        return self.profile.global_skills_dir(self.home)

    def detect(self) -> bool:
        if self.profile.is_custom:
            return True
        if self.profile.custom_global_path is not None:
            return Path(self.profile.custom_global_path).expanduser().exists()
        spec = BUILTIN_TOOLS.get(self.tool)
        marker = spec.marker_dir(self.home) if spec else None
        return bool(marker and marker.exists())

    def skills_dir(self) -> Path:
        path = self._primary_path()
        if path is None:
            raise ToolNotFound(self.tool, "no global skills directory")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ToolNotFound(self.tool, f"cannot create {path}: {exc}") from exc
        return path

    def skills_dirs(self) -> list[Path]:
        path = self._primary_path()
        return [path] if path is not None and path.is_dir() else []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.tool!r})"
