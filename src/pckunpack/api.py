"""High-level API for pckunpack."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .extract import (
    ExtractResult,
    compute_digest,
    extract_archive,
    open_archive,
    read_payload,
    read_table,
)
from .format.constants import OUTPUT_ROOT
from .format.reader import BinaryReader
from .logging import get_logger
from .reporting import get_reporter, task

__all__ = [
    "ExtractOptions",
    "ExtractResult",
    "extract_pck",
    "inspect_pck",
    "verify_pck",
]


@dataclass(slots=True)
class ExtractOptions:
    archive: Path
    output_root: Path = Path(OUTPUT_ROOT)


def extract_pck(options: ExtractOptions) -> ExtractResult:
    logger = get_logger()
    result = extract_archive(options.archive, options.output_root)
    logger.info(
        "Extracted %s: %d entries into %s",
        Path(options.archive).name,
        len(result.results),
        options.output_root,
    )
    return result


def inspect_pck(path: str | Path) -> Dict[str, Any]:
    """Header and directory of an archive as a JSON-serialisable dict."""
    with open_archive(path) as f:
        reader = BinaryReader(f)
        header, entries = read_table(reader)
        return {
            "file_size": reader.size,
            "header": header.to_dict(),
            "entries": [e.to_dict() for e in entries],
        }


def verify_pck(path: str | Path) -> List[str]:
    """Recompute every payload digest without writing anything.

    Returns one issue string per mismatching entry. Structural errors raise
    just as they do during extraction.
    """
    issues: List[str] = []
    rep = get_reporter()
    with open_archive(path) as f:
        reader = BinaryReader(f)
        header, entries = read_table(reader)
        with task("verify.entries", "Verify entries", total=len(entries)) as final:
            for entry in entries:
                actual = compute_digest(read_payload(reader, header, entry))
                if actual != entry.digest:
                    issues.append(
                        f"MD5 mismatch for {entry.path} "
                        f"(expected={entry.digest_hex} actual={actual.hex()})"
                    )
                rep.advance("verify.entries", current_item=entry.path)
            final.update(entries=len(entries), warnings=len(issues))
    rep.status(f"Verify summary: entries={len(entries)} issues={len(issues)}")
    return issues
