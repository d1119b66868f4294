# src/skillhub/services/settings.py
from __future__ import annotations
from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Optional, Dict

from dotenv import dotenv_values

_TRUE = {"1", "true", "yes", "on"}


def _default_hub_root() -> Path:
    data_home = os.getenv("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "skillhub" / "store"


def _default_config_dir() -> Path:
    config_home = os.getenv("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "skillhub"


@dataclass(frozen=True, slots=True)
class Settings:
    hub_root: Path
    config_dir: Path
    user_home: Path
    log_level: str = "INFO"
    persist_sync_state: bool = False

    @staticmethod
    def from_sources(env_file: Optional[str] = ".env") -> "Settings":
        """ENV > .env > defaults."""
        env_file_vars: Dict[str, Optional[str]] = dotenv_values(env_file) if env_file and Path(env_file).exists() else {}

        def pick_env(key: str, default: str = "") -> str:
            return os.environ.get(key) or env_file_vars.get(key) or default

        hub_root = pick_env("SKILLHUB_HOME") or str(_default_hub_root())
        config_dir = pick_env("SKILLHUB_CONFIG_DIR") or str(_default_config_dir())
        user_home = pick_env("SKILLHUB_USER_HOME") or str(Path.home())

        return Settings(
            hub_root=Path(hub_root).expanduser().resolve(),
            config_dir=Path(config_dir).expanduser().resolve(),
            user_home=Path(user_home).expanduser().resolve(),
            log_level=pick_env("SKILLHUB_LOG_LEVEL", "INFO").upper(),
            persist_sync_state=pick_env("SKILLHUB_PERSIST_SYNC_STATE", "0").strip().lower() in _TRUE,
        )

    def with_overrides(self, **kw) -> "Settings":
        # перегружать можно только безопасные поля
        allowed = {"hub_root", "config_dir", "user_home", "log_level", "persist_sync_state"}
        safe = {k: v for k, v in kw.items() if k in allowed and v is not None}
        for key in ("hub_root", "config_dir", "user_home"):
            if key in safe:
                safe[key] = Path(safe[key]).expanduser().resolve()
        return replace(self, **safe)
