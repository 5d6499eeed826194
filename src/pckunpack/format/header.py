"""Archive header parsing.

Layout (little-endian)::

    magic(4) version(u32) engine_major(u32) engine_minor(u32)
    engine_patch(u32) flags(u32) files_base(u64) reserved(16 x u32)
    entry_count(u32)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .constants import (
    MAGIC,
    FORMAT_VERSION,
    RESERVED_WORDS,
    ARCHIVE_FLAG_NAMES,
    KNOWN_ARCHIVE_FLAGS,
)
from .errors import (
    FormatError,
    UnsupportedFlagsError,
    UnsupportedVersionError,
    E_ARCHIVE_FLAGS,
    E_ARCHIVE_VERSION,
    E_BAD_MAGIC,
)
from .reader import BinaryReader

__all__ = [
    "PckHeader",
    "parse_header",
    "describe_flags",
    "describe_archive_flags",
]


@dataclass(slots=True)
class PckHeader:
    format_version: int
    engine_version: Tuple[int, int, int]
    flags: int
    files_base: int
    entry_count: int
    magic: bytes = MAGIC

    @property
    def engine_version_string(self) -> str:
        return ".".join(str(v) for v in self.engine_version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "magic": self.magic.decode("ascii", errors="replace"),
            "format_version": self.format_version,
            "engine_version": list(self.engine_version),
            "flags": self.flags,
            "files_base": self.files_base,
            "entry_count": self.entry_count,
        }


def describe_flags(flags: int, names: Dict[int, str]) -> List[str]:
    if flags == 0:
        return ["None"]
    return [name for bit, name in names.items() if flags & bit]


def describe_archive_flags(flags: int) -> List[str]:
    return describe_flags(flags, ARCHIVE_FLAG_NAMES)


def parse_header(reader: BinaryReader) -> PckHeader:
    """Read and validate the archive header, leaving the cursor on the table.

    Any nonzero flags value aborts, including values made only of known
    bits: neither encrypted directories nor relative file bases are handled.
    """
    magic = reader.read_exact(len(MAGIC), "magic")
    if magic != MAGIC:
        raise FormatError(
            E_BAD_MAGIC,
            f"Invalid file header: expected {MAGIC!r}, got {magic!r}",
        )
    version = reader.u32("format_version")
    if version != FORMAT_VERSION:
        raise UnsupportedVersionError(
            E_ARCHIVE_VERSION,
            f"Unsupported PCK file version {version}",
            {"expected": FORMAT_VERSION, "actual": version},
        )
    engine = (
        reader.u32("engine_major"),
        reader.u32("engine_minor"),
        reader.u32("engine_patch"),
    )
    flags = reader.u32("flags")
    if flags != 0:
        raise UnsupportedFlagsError(
            E_ARCHIVE_FLAGS,
            "Unsupported flags: " + " ".join(describe_archive_flags(flags)),
            {"flags": flags, "unknown_bits": flags & ~KNOWN_ARCHIVE_FLAGS},
        )
    files_base = reader.u64("files_base")
    reader.skip(RESERVED_WORDS * 4, "reserved")
    entry_count = reader.u32("entry_count")
    return PckHeader(
        format_version=version,
        engine_version=engine,
        flags=flags,
        files_base=files_base,
        entry_count=entry_count,
        magic=magic,
    )
