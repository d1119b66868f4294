from .safe_io import (
    copy_dir_staged,
    create_symlink,
    entry_exists,
    read_json,
    remove_entry,
    resolve_link,
    write_json_atomic,
    write_text_atomic,
)
from .content_hash import compute_content_hash

__all__ = [
    "copy_dir_staged",
    "create_symlink",
    "entry_exists",
    "read_json",
    "remove_entry",
    "resolve_link",
    "write_json_atomic",
    "write_text_atomic",
    "compute_content_hash",
]
