"""Directory table parsing (one record per packaged file, read in order)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .constants import (
    DIGEST_SIZE,
    ENTRY_FLAG_NAMES,
    KNOWN_ENTRY_FLAGS,
    PACK_FILE_ENCRYPTED,
    PATH_ALIGNMENT,
)
from .errors import UnsupportedFlagsError, E_ENTRY_FLAGS
from .header import describe_flags
from .reader import BinaryReader, padding

__all__ = ["PckEntry", "parse_directory", "describe_entry_flags"]


@dataclass(slots=True)
class PckEntry:
    index: int
    path: str
    offset: int
    size: int
    digest: bytes
    flags: int = 0

    @property
    def encrypted(self) -> bool:
        return bool(self.flags & PACK_FILE_ENCRYPTED)

    @property
    def digest_hex(self) -> str:
        return self.digest.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "path": self.path,
            "offset": self.offset,
            "size": self.size,
            "md5": self.digest_hex,
            "flags": self.flags,
        }


def describe_entry_flags(flags: int) -> List[str]:
    return describe_flags(flags, ENTRY_FLAG_NAMES)


def _read_entry(reader: BinaryReader, index: int) -> PckEntry:
    path_len = reader.u32(f"dir[{index}].path_len")
    raw_path = reader.read_exact(path_len, f"dir[{index}].path")
    reader.skip(padding(PATH_ALIGNMENT, path_len), f"dir[{index}].pad")
    offset = reader.u64(f"dir[{index}].offset")
    size = reader.u64(f"dir[{index}].size")
    digest = reader.read_exact(DIGEST_SIZE, f"dir[{index}].md5")
    flags = reader.u32(f"dir[{index}].flags")
    # undecodable bytes survive as surrogates so distinct paths stay distinct
    path = raw_path.rstrip(b"\x00").decode("utf-8", errors="surrogateescape")
    if flags != 0:
        raise UnsupportedFlagsError(
            E_ENTRY_FLAGS,
            f"Unsupported file flags for {path}: "
            + " ".join(describe_entry_flags(flags)),
            {
                "index": index,
                "flags": flags,
                "unknown_bits": flags & ~KNOWN_ENTRY_FLAGS,
            },
        )
    return PckEntry(
        index=index,
        path=path,
        offset=offset,
        size=size,
        digest=digest,
        flags=flags,
    )


def parse_directory(reader: BinaryReader, count: int) -> List[PckEntry]:
    """Read ``count`` entries from the current cursor position."""
    return [_read_entry(reader, i) for i in range(count)]
