"""Path utilities (safe resolution under an output root)."""

from __future__ import annotations
from pathlib import Path, PurePosixPath

__all__ = ["safe_file_path"]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    """Join an archive-relative POSIX path onto ``base_dir``.

    Raises ValueError when the result would escape ``base_dir``.
    """
    rel = PurePosixPath(file_path)
    if rel.is_absolute():
        raise ValueError(f"absolute path: {file_path}")
    base = base_dir.resolve()
    resolved = (base / Path(*rel.parts)).resolve()
    resolved.relative_to(base)  # raises ValueError if escapes
    if resolved == base:
        raise ValueError(f"path names the output root: {file_path!r}")
    return base_dir / Path(*rel.parts)
