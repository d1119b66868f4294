from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import GitError, InvalidGitRepositoryError, NoSuchPathError

from skillhub.domain import InstallRecord, SkillSource, SkillVersion, is_valid_skill_id, timestamp_now, validate_skill_id
from skillhub.errors import SkillNotFound, SyncIOError
from skillhub.services.fs import compute_content_hash, copy_dir_staged, remove_entry, write_json_atomic

_log = logging.getLogger(__name__)


def _git_commit(path: Path) -> Optional[str]:
    """HEAD of the git work tree enclosing ``path``, if any."""
    try:
        repo = Repo(path, search_parent_directories=True)
        return repo.head.commit.hexsha
    except (InvalidGitRepositoryError, NoSuchPathError):
        return None
    except (GitError, ValueError):
        # пустой репозиторий без коммитов
        return None


class LocalHubStore:
    """
    Hub on the local filesystem:
      - {root}/skills/<id>/...    skill content
      - {root}/metadata/<id>.json  install record (pretty JSON)
    Records are cached in memory and written through on every change.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser().resolve()
        self.skills_dir().mkdir(parents=True, exist_ok=True)
        self.metadata_dir().mkdir(parents=True, exist_ok=True)
        self._records: dict[str, InstallRecord] = {}
        self._load_records()

    # --- layout ---
    def skills_dir(self) -> Path:
        return self.root / "skills"

    def metadata_dir(self) -> Path:
        return self.root / "metadata"

    def skill_path(self, skill_id: str) -> Path:
        return self.skills_dir() / skill_id

    def _metadata_path(self, skill_id: str) -> Path:
        return self.metadata_dir() / f"{skill_id}.json"

    # --- records ---
    def is_installed(self, skill_id: str) -> bool:
        return skill_id in self._records

    def get_record(self, skill_id: str) -> Optional[InstallRecord]:
        return self._records.get(skill_id)

    def list_installed(self) -> list[InstallRecord]:
        return [self._records[k] for k in sorted(self._records)]

    def list_skill_ids(self) -> list[str]:
        """Skill directories physically present in the hub, with or without a record."""
        root = self.skills_dir()
        if not root.exists():
            return []
        return sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))

    def record_projection(self, skill_id: str, tool: str) -> None:
        rec = self._records.get(skill_id)
        if rec is None or tool in rec.projected_tools:
            return
        rec.projected_tools.append(tool)
        self._save_record(rec)

    def forget_projection(self, skill_id: str, tool: str) -> None:
        rec = self._records.get(skill_id)
        if rec is None or tool not in rec.projected_tools:
            return
        rec.projected_tools.remove(tool)
        self._save_record(rec)

    # --- content ---
    def import_skill(
        self,
        source_path: Path | str,
        *,
        skill_id: Optional[str] = None,
        version: str = "0.0.0",
        source: Optional[SkillSource] = None,
        scan_passed: bool = True,
    ) -> InstallRecord:
        """Copy a local directory (or a single file) into the hub and write its install record."""
        src = Path(source_path).expanduser()
        if not src.exists():
            raise FileNotFoundError(f"source not found: {src}")
        sid = validate_skill_id(skill_id or (src.name if src.is_dir() else src.stem))
        dest = self.skill_path(sid)
        try:
            copy_dir_staged(src, dest)
        except OSError as exc:
            raise SyncIOError("import", dest, exc) from exc

        record = InstallRecord(
            skill_id=sid,
            version=SkillVersion(
                version=version,
                content_hash=compute_content_hash(dest),
                commit=_git_commit(src if src.is_dir() else src.parent),
                timestamp=timestamp_now(),
            ),
            source=source or SkillSource(kind="local", location=str(src.resolve())),
            scan_passed=scan_passed,
        )
        self._save_record(record)
        self._records[sid] = record
        _log.info("hub.imported", extra={"extra": {"skill_id": sid, "hash": record.version.content_hash}})
        return record

    def remove_skill(self, skill_id: str) -> None:
        skill_id = validate_skill_id(skill_id)
        remove_entry(self.skill_path(skill_id))
        meta = self._metadata_path(skill_id)
        if meta.exists():
            meta.unlink()
        self._records.pop(skill_id, None)

    def calculate_hash(self, skill_id: str) -> str:
        path = self.skill_path(skill_id)
        if not is_valid_skill_id(skill_id) or not path.is_dir():
            raise SkillNotFound(skill_id)
        return compute_content_hash(path)

    def refresh_version(self, skill_id: str, version: Optional[str] = None) -> InstallRecord:
        """Recompute the content hash of an installed skill and persist the new version snapshot."""
        rec = self._records.get(skill_id)
        if rec is None:
            raise SkillNotFound(skill_id, "no install record")
        path = self.skill_path(skill_id)
        rec.version = SkillVersion(
            version=version or rec.version.version,
            content_hash=self.calculate_hash(skill_id),
            commit=_git_commit(path) or rec.version.commit,
            timestamp=timestamp_now(),
        )
        self._save_record(rec)
        return rec

    # --- persistence ---
    def _save_record(self, record: InstallRecord) -> None:
        write_json_atomic(self._metadata_path(record.skill_id), record.to_dict())

    def _load_records(self) -> None:
        for path in sorted(self.metadata_dir().glob("*.json")):
            try:
                record = InstallRecord.from_dict(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError, KeyError, TypeError) as exc:
                _log.warning("hub.metadata.unreadable", extra={"extra": {"path": str(path), "error": str(exc)}})
                continue
            self._records[record.skill_id] = record
