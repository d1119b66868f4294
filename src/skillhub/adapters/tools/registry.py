from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, Optional

from skillhub.adapters.tools.fs_tool import FsToolAdapter
from skillhub.adapters.tools.openclaw import OpenClawAdapter
from skillhub.domain import BUILTIN_TOOLS, OPENCLAW, ToolProfile
from skillhub.ports import ToolAdapter

_log = logging.getLogger(__name__)


def make_adapter(profile: ToolProfile, *, home: Path) -> ToolAdapter:
    if profile.tool == OPENCLAW:
        return OpenClawAdapter(profile, home=home)
    return FsToolAdapter(profile, home=home)


def default_profiles() -> list[ToolProfile]:
    return [ToolProfile(tool=t) for t in (*BUILTIN_TOOLS, OPENCLAW)]


def build_adapters(
    profiles: Optional[Iterable[ToolProfile]] = None,
    *,
    home: Path,
    detected_only: bool = True,
) -> list[ToolAdapter]:
    """
    Build the adapter registry once, in tool-id order.
    Disabled profiles are skipped; with ``detected_only`` so are tools not found on this machine.
    """
    out: list[ToolAdapter] = []
    for profile in sorted(profiles if profiles is not None else default_profiles(), key=lambda p: p.tool):
        if not profile.enabled:
            continue
        adapter = make_adapter(profile, home=home)
        detected = adapter.detect()
        profile.detected = detected
        if detected_only and not detected:
            _log.debug("tool not detected: %s", profile.tool)
            continue
        out.append(adapter)
    return out
