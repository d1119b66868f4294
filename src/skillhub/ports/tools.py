from __future__ import annotations
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ToolAdapter(Protocol):
    """Directory resolver for one tool. The engine never looks past this contract."""

    @property
    def tool(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    def detect(self) -> bool: ...

    def skills_dir(self) -> Path:
        """Primary (writable) skills directory, created if absent. Raises ToolNotFound."""
        ...

    def skills_dirs(self) -> list[Path]:
        """All existing candidate directories, primary first."""
        ...
