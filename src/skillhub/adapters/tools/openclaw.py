from __future__ import annotations
import shutil
from pathlib import Path
from typing import Callable, Optional

from skillhub.adapters.tools.fs_tool import FsToolAdapter
from skillhub.domain import OPENCLAW, ToolProfile


def _npm_skills_dir(which: Callable[[str], Optional[str]]) -> Optional[Path]:
    # <prefix>/bin/openclaw -> <prefix>/lib/node_modules/openclaw/skills
    exe = which("openclaw")
    if not exe:
        return None
    prefix = Path(exe).resolve().parent.parent
    candidate = prefix / "lib" / "node_modules" / "openclaw" / "skills"
    return candidate if candidate.is_dir() else None


class OpenClawAdapter(FsToolAdapter):
    """Writes to the workspace directory; also reads skills bundled with the npm installation."""

    def __init__(self, profile: Optional[ToolProfile] = None, *, home: Path, which: Callable[[str], Optional[str]] = shutil.which):
        super().__init__(profile or ToolProfile(tool=OPENCLAW), home=home)
        self._which = which

    def _workspace_path(self) -> Path:
        return self.home / ".openclaw" / "workspace" / "skills"

    def _primary_path(self) -> Optional[Path]:
        if self.profile.custom_global_path is not None:
            return Path(self.profile.custom_global_path).expanduser()
        return self._workspace_path()

    def detect(self) -> bool:
        return self._which("openclaw") is not None or (self.home / ".openclaw").exists()

    def skills_dirs(self) -> list[Path]:
        dirs: list[Path] = []
        for candidate in (self._primary_path(), self._workspace_path(), _npm_skills_dir(self._which)):
            if candidate is not None and candidate.is_dir() and candidate not in dirs:
                dirs.append(candidate)
        return dirs
