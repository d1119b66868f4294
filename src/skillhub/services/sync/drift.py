from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

from skillhub.domain import DriftInfo, DriftType, timestamp_now
from skillhub.services.fs import entry_exists, resolve_link


def _same_path(a: Path, b: Path) -> bool:
    # lexical comparison: ".." segments of a relative link are collapsed, symlinks are not followed
    return os.path.abspath(a) == os.path.abspath(b)


def detect_drift(target_path: Path, expected_source: Path) -> Optional[DriftInfo]:
    """
    Compare what is on disk at ``target_path`` with a projection of ``expected_source``.
    Order: missing, wrong link target, broken link. Copies are checked for existence only.
    """
    target_path = Path(target_path)
    if not entry_exists(target_path):
        return DriftInfo(DriftType.MISSING, "Skill directory not found", timestamp_now())

    if target_path.is_symlink():
        try:
            link_target = resolve_link(target_path)
        except OSError as exc:
            return DriftInfo(DriftType.BROKEN_LINK, f"Cannot read link: {exc}", timestamp_now())
        if not _same_path(link_target, expected_source):
            return DriftInfo(
                DriftType.WRONG_TARGET,
                f"Link points to {link_target} instead of {expected_source}",
                timestamp_now(),
            )
        if not link_target.exists():
            return DriftInfo(DriftType.BROKEN_LINK, "Symlink target does not exist", timestamp_now())

    return None
