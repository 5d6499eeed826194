"""Inspect / verify entry points (no files written)."""

from pathlib import Path
import json

import pytest

from pckunpack.api import inspect_pck, verify_pck
from pckunpack.format.errors import ArchiveIOError, UnsupportedVersionError

from pck_builder import build_pck

FILES = [("res://a.txt", b"hello"), ("res://b/c.bin", b"\x00" * 9)]


def test_inspect_reports_header_and_entries(tmp_path: Path):
    p = tmp_path / "a.pck"
    p.write_bytes(build_pck(FILES, engine=(4, 1, 3)))
    info = inspect_pck(p)
    json.dumps(info)  # must be serialisable
    assert info["file_size"] == p.stat().st_size
    assert info["header"]["engine_version"] == [4, 1, 3]
    assert info["header"]["entry_count"] == 2
    assert [e["path"] for e in info["entries"]] == [f for f, _ in FILES]
    assert [e["size"] for e in info["entries"]] == [5, 9]
    assert list(tmp_path.iterdir()) == [p]


def test_verify_clean_archive(tmp_path: Path):
    p = tmp_path / "a.pck"
    p.write_bytes(build_pck(FILES))
    assert verify_pck(p) == []
    assert list(tmp_path.iterdir()) == [p]


def test_verify_reports_mismatch(tmp_path: Path):
    p = tmp_path / "a.pck"
    p.write_bytes(build_pck(FILES, digests=[None, b"\x11" * 16]))
    issues = verify_pck(p)
    assert len(issues) == 1
    assert "res://b/c.bin" in issues[0]
    assert "11" * 16 in issues[0]


def test_verify_propagates_structural_errors(tmp_path: Path):
    p = tmp_path / "a.pck"
    p.write_bytes(build_pck(FILES, version=1))
    with pytest.raises(UnsupportedVersionError):
        verify_pck(p)


@pytest.mark.parametrize("entry_point", [inspect_pck, verify_pck])
def test_missing_archive_raises_archive_io_error(entry_point, tmp_path: Path):
    with pytest.raises(ArchiveIOError) as ei:
        entry_point(tmp_path / "missing.pck")
    assert ei.value.code == "E_READ_IO"
