# src/skillhub/adapters/fs/path_provider.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from skillhub.services.settings import Settings


@dataclass(slots=True)
class PathProvider:
    """Single source of truth for paths. Always pathlib.Path, never environment lookups."""

    hub: Path
    config: Path
    home: Path

    @classmethod
    def from_settings(cls, settings: Settings) -> "PathProvider":
        return cls(
            hub=Path(settings.hub_root).expanduser().resolve(),
            config=Path(settings.config_dir).expanduser().resolve(),
            home=Path(settings.user_home).expanduser().resolve(),
        )

    # --- hub ---
    def hub_dir(self) -> Path:
        return self.hub

    def skills_dir(self) -> Path:
        return self.hub / "skills"

    def metadata_dir(self) -> Path:
        return self.hub / "metadata"

    def state_dir(self) -> Path:
        return self.hub / "state"

    def sync_state_file(self) -> Path:
        return self.state_dir() / "sync_state.json"

    def logs_dir(self) -> Path:
        return self.hub / "logs"

    # --- config / home ---
    def config_dir(self) -> Path:
        return self.config

    def config_file(self) -> Path:
        return self.config / "config.yaml"

    def user_home(self) -> Path:
        return self.home

    def ensure_tree(self) -> None:
        for p in (
            self.hub_dir(),
            self.skills_dir(),
            self.metadata_dir(),
            self.state_dir(),
            self.logs_dir(),
            self.config_dir(),
        ):
            p.mkdir(parents=True, exist_ok=True)
