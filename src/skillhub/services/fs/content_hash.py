from __future__ import annotations
import hashlib
from pathlib import Path

_CHUNK = 1 << 16


def compute_content_hash(root: Path | str) -> str:
    """SHA-256 over the bytes of every regular file below ``root``, in sorted path order."""
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"no such directory: {root}")
    h = hashlib.sha256()
    if root.is_file():
        h.update(root.read_bytes())
        return h.hexdigest()
    files = sorted((p for p in root.rglob("*") if p.is_file()), key=lambda p: p.relative_to(root).as_posix())
    for f in files:
        with f.open("rb") as fh:
            for chunk in iter(lambda: fh.read(_CHUNK), b""):
                h.update(chunk)
    return h.hexdigest()
