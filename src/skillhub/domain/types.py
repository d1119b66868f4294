# src/skillhub/domain/types.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class Event:
    type: str
    payload: Mapping[str, Any]
    source: str
    ts: float


class SyncStrategy(str, Enum):
    """How a skill is projected into a tool directory."""

    AUTO = "auto"  # link first, copy on failure
    LINK = "link"
    COPY = "copy"

    @classmethod
    def parse(cls, value: "str | SyncStrategy") -> "SyncStrategy":
        if isinstance(value, SyncStrategy):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown sync strategy: {value!r} (expected auto, link or copy)") from None


def timestamp_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
