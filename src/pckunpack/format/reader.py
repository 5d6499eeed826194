"""Little-endian binary primitives over a seekable stream.

``BinaryReader`` owns the cursor for both the archive file and in-memory
buffers (``io.BytesIO``). Every read is exact: a short read is an error, never
a partial result.
"""

from __future__ import annotations

import io
import os
import struct
from typing import BinaryIO

from .errors import ArchiveIOError, E_OUT_OF_BOUNDS, E_SHORT_READ

__all__ = ["BinaryReader", "padding"]

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


def padding(alignment: int, n: int) -> int:
    """Bytes needed to advance ``n`` to the next multiple of ``alignment``."""
    return (alignment - (n % alignment)) % alignment


class BinaryReader:
    def __init__(self, stream: BinaryIO):
        self._stream = stream
        pos = stream.tell()
        self.size = stream.seek(0, os.SEEK_END)
        stream.seek(pos)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BinaryReader":
        return cls(io.BytesIO(data))

    def tell(self) -> int:
        return self._stream.tell()

    def remaining(self) -> int:
        return self.size - self.tell()

    def seek(self, offset: int) -> None:
        if offset < 0 or offset > self.size:
            raise ArchiveIOError(
                E_OUT_OF_BOUNDS,
                f"Seek target {offset} outside of stream (size={self.size})",
                {"offset": offset, "size": self.size},
            )
        self._stream.seek(offset)

    def read_exact(self, size: int, label: str = "data") -> bytes:
        offset = self.tell()
        data = self._stream.read(size)
        if len(data) != size:
            raise ArchiveIOError(
                E_SHORT_READ,
                f"Short read for {label}: {offset}+{size}>{self.size}",
                {"label": label, "offset": offset, "wanted": size},
            )
        return data

    def skip(self, size: int, label: str = "padding") -> None:
        # Read rather than seek so skipping past the end is reported.
        self.read_exact(size, label)

    def u32(self, label: str = "u32") -> int:
        return _U32.unpack(self.read_exact(4, label))[0]

    def u64(self, label: str = "u64") -> int:
        return _U64.unpack(self.read_exact(8, label))[0]
