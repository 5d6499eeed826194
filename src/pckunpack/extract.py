"""Payload extraction and integrity verification.

Control flow is strictly sequential: header, directory table (one forward
pass), then per entry in table order: seek, read, write, verify, and decode
compiled textures from the in-memory payload. Every error other than a
digest mismatch aborts the run.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List

from .format.constants import CTEX_EXTENSION, OUTPUT_ROOT, SCHEME_PREFIX
from .format.ctex import decode_compiled_texture
from .format.directory import PckEntry, describe_entry_flags, parse_directory
from .format.errors import (
    ArchiveIOError,
    IntegrityWarning,
    E_BAD_PATH,
    E_OUT_OF_BOUNDS,
    E_READ_IO,
    E_WRITE_IO,
)
from .format.header import PckHeader, describe_archive_flags, parse_header
from .format.reader import BinaryReader
from .logging import get_logger
from .reporting import get_reporter, section, task
from .utils.paths import safe_file_path

__all__ = [
    "EntryResult",
    "ExtractResult",
    "compute_digest",
    "normalize_destination",
    "open_archive",
    "read_table",
    "read_payload",
    "extract_entry",
    "extract_archive",
]


@dataclass(slots=True)
class EntryResult:
    entry: PckEntry
    destination: Path
    bytes_written: int
    digest_ok: bool
    mipmaps: List[Path] = field(default_factory=list)


@dataclass(slots=True)
class ExtractResult:
    archive: Path
    output_root: Path
    header: PckHeader
    entries: List[PckEntry]
    results: List[EntryResult] = field(default_factory=list)
    warnings: List[IntegrityWarning] = field(default_factory=list)

    @property
    def bytes_written(self) -> int:
        return sum(r.bytes_written for r in self.results)

    @property
    def mipmap_count(self) -> int:
        return sum(len(r.mipmaps) for r in self.results)


def compute_digest(data: bytes) -> bytes:
    return hashlib.md5(data).digest()


def normalize_destination(path: str, output_root: Path | str = OUTPUT_ROOT) -> Path:
    """Map an archive path onto the output tree.

    The scheme prefix is stripped when present; paths without it (including
    ones shorter than the prefix) are kept as they are. Paths that are empty
    after stripping or that would leave the output root are rejected.
    """
    rel = path[len(SCHEME_PREFIX) :] if path.startswith(SCHEME_PREFIX) else path
    try:
        return safe_file_path(Path(output_root), rel)
    except ValueError as exc:
        raise ArchiveIOError(
            E_BAD_PATH,
            f"Refusing to extract {path!r}: {exc}",
            {"path": path},
        ) from exc


def open_archive(archive: Path | str) -> BinaryIO:
    archive = Path(archive)
    try:
        return archive.open("rb")
    except OSError as exc:
        raise ArchiveIOError(
            E_READ_IO,
            f"Cannot open {archive}: {exc}",
            {"path": str(archive)},
        ) from exc


def read_table(reader: BinaryReader) -> tuple[PckHeader, List[PckEntry]]:
    """Parse the header and directory table, reporting what was found."""
    logger = get_logger()
    rep = get_reporter()
    header = parse_header(reader)
    logger.debug("PCK file version: %d", header.format_version)
    logger.debug("Engine version: %s", header.engine_version_string)
    logger.debug("Flags: %s", " ".join(describe_archive_flags(header.flags)))
    rep.status(
        "Header summary: "
        + f"version={header.format_version} engine={header.engine_version_string} "
        + f"files_base={header.files_base} entries={header.entry_count}"
    )
    entries = parse_directory(reader, header.entry_count)
    for e in entries:
        logger.debug(
            "dir[%d] %s offset=%d size=%d md5=%s flags=%s",
            e.index,
            e.path,
            e.offset,
            e.size,
            e.digest_hex,
            " ".join(describe_entry_flags(e.flags)),
        )
    rep.status(
        "Directory summary: "
        + f"entries={len(entries)} payload_bytes={sum(e.size for e in entries)}"
    )
    return header, entries


def read_payload(
    reader: BinaryReader, header: PckHeader, entry: PckEntry
) -> bytes:
    start = header.files_base + entry.offset
    if start + entry.size > reader.size:
        raise ArchiveIOError(
            E_OUT_OF_BOUNDS,
            f"Payload of {entry.path} exceeds archive: "
            f"{start}+{entry.size}>{reader.size}",
            {"index": entry.index, "offset": start, "size": entry.size},
        )
    reader.seek(start)
    return reader.read_exact(entry.size, entry.path)


def _write_file(destination: Path, data: bytes) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        raise ArchiveIOError(
            E_WRITE_IO,
            f"Failed to write {destination}: {exc}",
            {"path": str(destination)},
        ) from exc


def extract_entry(
    reader: BinaryReader,
    header: PckHeader,
    entry: PckEntry,
    output_root: Path | str = OUTPUT_ROOT,
) -> tuple[EntryResult, IntegrityWarning | None]:
    data = read_payload(reader, header, entry)
    destination = normalize_destination(entry.path, output_root)
    _write_file(destination, data)
    actual = compute_digest(data)
    warning = None
    if actual != entry.digest:
        warning = IntegrityWarning(
            index=entry.index,
            path=str(destination),
            expected=entry.digest_hex,
            actual=actual.hex(),
        )
        get_logger().warning("%s", warning)
    mipmaps: List[Path] = []
    if destination.name.endswith(CTEX_EXTENSION):
        mipmaps = decode_compiled_texture(destination, data)
    result = EntryResult(
        entry=entry,
        destination=destination,
        bytes_written=len(data),
        digest_ok=warning is None,
        mipmaps=mipmaps,
    )
    return result, warning


def extract_archive(
    archive: Path | str, output_root: Path | str = OUTPUT_ROOT
) -> ExtractResult:
    archive = Path(archive)
    output_root = Path(output_root)
    rep = get_reporter()
    stream = open_archive(archive)
    with stream, section(f"Extract {archive.name}"):
        reader = BinaryReader(stream)
        header, entries = read_table(reader)
        result = ExtractResult(
            archive=archive,
            output_root=output_root,
            header=header,
            entries=entries,
        )
        total = len(entries)
        with task(
            "extract.entries", "Extract entries", total=total
        ) as final:
            for entry in entries:
                entry_result, warning = extract_entry(
                    reader, header, entry, output_root
                )
                result.results.append(entry_result)
                if warning is not None:
                    result.warnings.append(warning)
                rep.advance(
                    "extract.entries",
                    current_item=entry.path,
                )
            final.update(
                entries=len(result.results),
                bytes=result.bytes_written,
                mipmaps=result.mipmap_count,
                warnings=len(result.warnings),
            )
    rep.status(
        "Extract summary: "
        + f"entries={len(result.results)} bytes={result.bytes_written} "
        + f"mipmaps={result.mipmap_count} warnings={len(result.warnings)} "
        + f"output={output_root}"
    )
    return result
