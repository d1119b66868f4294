from __future__ import annotations
from pathlib import Path
from typing import Optional, Protocol

from skillhub.domain import InstallRecord


class HubStore(Protocol):
    def skills_dir(self) -> Path: ...
    def skill_path(self, skill_id: str) -> Path: ...
    def is_installed(self, skill_id: str) -> bool: ...
    def get_record(self, skill_id: str) -> Optional[InstallRecord]: ...
    def record_projection(self, skill_id: str, tool: str) -> None: ...
    def forget_projection(self, skill_id: str, tool: str) -> None: ...
