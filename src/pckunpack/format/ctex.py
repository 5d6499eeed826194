"""Compiled texture (``GST2``) container decoding.

Layout (little-endian)::

    signature(4) version(u32) width(u32) height(u32) unused[16..36)
    format_and_count(u32 @ 36)
    from 0x34: repeated { mip_size(u32) mip_data(mip_size) }

The field at offset 36 is read twice: once as the data format and once as the
mipmap count. The count is therefore whatever the format value is.

The mipmap scan stops quietly when fewer than four bytes remain for the next
size field, so truncated containers yield the mipmaps read so far.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .constants import (
    CTEX_FORMAT_OFFSET,
    CTEX_MIPMAP_BASE,
    CTEX_PREFIX_SIZE,
    CTEX_SIGNATURE,
    CTEX_VERSION,
    DataFormat,
)
from .errors import (
    ArchiveIOError,
    UnsupportedVersionError,
    E_CTEX_VERSION,
    E_OUT_OF_BOUNDS,
    E_SHORT_READ,
    E_WRITE_IO,
)
from .reader import BinaryReader
from ..logging import get_logger

__all__ = [
    "Mipmap",
    "CompiledTexture",
    "is_compiled_texture",
    "parse_compiled_texture",
    "decode_compiled_texture",
]


@dataclass(slots=True)
class Mipmap:
    index: int
    offset: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class CompiledTexture:
    version: int
    width: int
    height: int
    format_value: int
    mipmap_count: int
    mipmaps: List[Mipmap] = field(default_factory=list)
    signature: bytes = CTEX_SIGNATURE

    @property
    def data_format(self) -> Optional[DataFormat]:
        try:
            return DataFormat(self.format_value)
        except ValueError:
            return None

    @property
    def truncated(self) -> bool:
        return len(self.mipmaps) < self.mipmap_count


def is_compiled_texture(data: bytes) -> bool:
    return data[: len(CTEX_SIGNATURE)] == CTEX_SIGNATURE


def _scan_mipmaps(data: bytes, count: int) -> List[Mipmap]:
    mipmaps: List[Mipmap] = []
    base = CTEX_MIPMAP_BASE
    for i in range(count):
        if base + 4 > len(data):
            break
        size = int.from_bytes(data[base : base + 4], "little")
        start = base + 4
        end = start + size
        if end > len(data):
            raise ArchiveIOError(
                E_OUT_OF_BOUNDS,
                f"Mipmap {i} payload exceeds buffer: {start}+{size}>{len(data)}",
                {"mipmap": i, "offset": start, "size": size},
            )
        mipmaps.append(Mipmap(index=i, offset=start, data=data[start:end]))
        base = end
    return mipmaps


def parse_compiled_texture(data: bytes) -> Optional[CompiledTexture]:
    """Decode a compiled texture buffer, or return None on a foreign signature."""
    if not is_compiled_texture(data):
        return None
    if len(data) < CTEX_PREFIX_SIZE:
        raise ArchiveIOError(
            E_SHORT_READ,
            f"Compiled texture too short: {len(data)}<{CTEX_PREFIX_SIZE}",
            {"size": len(data)},
        )
    reader = BinaryReader.from_bytes(data)
    reader.skip(len(CTEX_SIGNATURE), "signature")
    version = reader.u32("ctex.version")
    if version != CTEX_VERSION:
        raise UnsupportedVersionError(
            E_CTEX_VERSION,
            f"Unsupported GST2 version {version}",
            {"expected": CTEX_VERSION, "actual": version},
        )
    width = reader.u32("ctex.width")
    height = reader.u32("ctex.height")
    reader.seek(CTEX_FORMAT_OFFSET)
    format_value = reader.u32("ctex.format")
    reader.seek(CTEX_FORMAT_OFFSET)
    mipmap_count = reader.u32("ctex.mipmaps")
    return CompiledTexture(
        version=version,
        width=width,
        height=height,
        format_value=format_value,
        mipmap_count=mipmap_count,
        mipmaps=_scan_mipmaps(data, mipmap_count),
    )


def decode_compiled_texture(destination: Path, data: bytes) -> List[Path]:
    """Split the mipmaps of ``data`` into ``<destination>_<index>`` files.

    Returns the written paths; an empty list when ``data`` is not a
    compiled texture.
    """
    logger = get_logger()
    texture = parse_compiled_texture(data)
    if texture is None:
        logger.debug("Skipping %s: not a GST2 container", destination.name)
        return []
    fmt = texture.data_format
    logger.debug(
        "GST2 %s: version=%d size=%dx%d format=%s mipmaps=%d",
        destination.name,
        texture.version,
        texture.width,
        texture.height,
        fmt.name if fmt is not None else "?",
        texture.mipmap_count,
    )
    written: List[Path] = []
    for mip in texture.mipmaps:
        target = destination.with_name(f"{destination.name}_{mip.index}")
        logger.debug("Mipmap %d size: %d", mip.index, mip.size)
        try:
            target.write_bytes(mip.data)
        except OSError as exc:
            raise ArchiveIOError(
                E_WRITE_IO,
                f"Failed to write mipmap {target}: {exc}",
                {"path": str(target)},
            ) from exc
        written.append(target)
    if texture.truncated:
        logger.debug(
            "GST2 %s truncated: %d of %d mipmaps readable",
            destination.name,
            len(texture.mipmaps),
            texture.mipmap_count,
        )
    return written
