from __future__ import annotations
import json, os, shutil, tempfile, uuid
from pathlib import Path
from typing import Any


def write_text_atomic(path: Path | str, data: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=p.name + ".", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp, p)
    finally:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass


def write_json_atomic(path: Path | str, obj: Any) -> None:
    write_text_atomic(path, json.dumps(obj, ensure_ascii=False, indent=2))


def read_json(path: Path | str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def entry_exists(path: Path | str) -> bool:
    """True for anything at the path, dangling symlinks included."""
    return os.path.lexists(path)


def remove_entry(path: Path | str) -> bool:
    """Remove whatever sits at ``path``: symlinks and files are unlinked, directories removed recursively."""
    p = Path(path)
    if p.is_symlink() or (p.exists() and not p.is_dir()):
        p.unlink()
        return True
    if p.is_dir():
        shutil.rmtree(p)
        return True
    return False


def resolve_link(link: Path | str) -> Path:
    """Target of a symlink; relative targets are resolved against the link's parent directory."""
    p = Path(link)
    target = Path(os.readlink(p))
    if not target.is_absolute():
        target = p.parent / target
    return target


def create_symlink(source: Path | str, target: Path | str) -> None:
    """Replace ``target`` with a directory symlink to ``source``."""
    src, dst = Path(source), Path(target)
    dst.parent.mkdir(parents=True, exist_ok=True)
    remove_entry(dst)
    os.symlink(src, dst, target_is_directory=True)


def copy_dir_staged(source: Path | str, target: Path | str) -> None:
    """
    Full recursive copy of ``source`` into ``target``.
    The copy is staged in a hidden sibling and renamed into place, so ``target``
    is never observed half-written; symlinks inside ``source`` are followed.
    """
    src, dst = Path(source), Path(target)
    dst.parent.mkdir(parents=True, exist_ok=True)
    staging = dst.parent / f".{dst.name}.tmp-{uuid.uuid4().hex[:8]}"
    try:
        if src.is_dir():
            shutil.copytree(src, staging, symlinks=False, ignore_dangling_symlinks=True)
        else:
            staging.mkdir()
            shutil.copy2(src, staging / src.name)
        remove_entry(dst)
        os.rename(staging, dst)
    finally:
        if staging.exists():
            shutil.rmtree(staging, ignore_errors=True)
