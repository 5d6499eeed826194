"""Error definitions for PCK decoding and extraction."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_BAD_MAGIC = "E_BAD_MAGIC"
E_ARCHIVE_VERSION = "E_ARCHIVE_VERSION"
E_CTEX_VERSION = "E_CTEX_VERSION"
E_ARCHIVE_FLAGS = "E_ARCHIVE_FLAGS"
E_ENTRY_FLAGS = "E_ENTRY_FLAGS"
E_SHORT_READ = "E_SHORT_READ"
E_OUT_OF_BOUNDS = "E_OUT_OF_BOUNDS"
E_READ_IO = "E_READ_IO"
E_WRITE_IO = "E_WRITE_IO"
E_BAD_PATH = "E_BAD_PATH"


@dataclass
class PckError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class FormatError(PckError):
    pass


class UnsupportedVersionError(PckError):
    pass


class UnsupportedFlagsError(PckError):
    pass


class ArchiveIOError(PckError):
    pass


@dataclass(slots=True)
class IntegrityWarning:
    """Digest mismatch for one extracted entry (recoverable)."""

    index: int
    path: str
    expected: str
    actual: str

    def __str__(self) -> str:
        return (
            f"MD5 mismatch for {self.path} "
            f"(expected={self.expected} actual={self.actual})"
        )


__all__ = [
    "PckError",
    "FormatError",
    "UnsupportedVersionError",
    "UnsupportedFlagsError",
    "ArchiveIOError",
    "IntegrityWarning",
    "E_BAD_MAGIC",
    "E_ARCHIVE_VERSION",
    "E_CTEX_VERSION",
    "E_ARCHIVE_FLAGS",
    "E_ENTRY_FLAGS",
    "E_SHORT_READ",
    "E_OUT_OF_BOUNDS",
    "E_READ_IO",
    "E_WRITE_IO",
    "E_BAD_PATH",
]
