import hashlib

import pytest

from pckunpack.format.directory import describe_entry_flags, parse_directory
from pckunpack.format.errors import ArchiveIOError, UnsupportedFlagsError
from pckunpack.format.header import parse_header
from pckunpack.format.reader import BinaryReader

from pck_builder import build_pck

FILES = [
    ("res://a.txt", b"hello"),  # path length 11 -> 1 pad byte
    ("res://dir/bb.bin", b"\x00\x01\x02"),  # 16 -> no padding
    ("res://c", b""),  # 7 -> 1
    ("res://textures/icon.png.ctex", b"x" * 10),
]


def _parse(data: bytes):
    r = BinaryReader.from_bytes(data)
    header = parse_header(r)
    return header, parse_directory(r, header.entry_count), r


def test_entries_preserve_table_order():
    header, entries, r = _parse(build_pck(FILES))
    assert header.entry_count == len(FILES)
    assert [e.path for e in entries] == [p for p, _ in FILES]
    assert [e.index for e in entries] == list(range(len(FILES)))
    # cursor ends exactly where payload data begins
    assert r.tell() == header.files_base


def test_offsets_sizes_and_digests():
    _, entries, _ = _parse(build_pck(FILES))
    offset = 0
    for entry, (_, payload) in zip(entries, FILES):
        assert entry.offset == offset
        assert entry.size == len(payload)
        assert entry.digest == hashlib.md5(payload).digest()
        assert entry.digest_hex == hashlib.md5(payload).hexdigest()
        assert not entry.encrypted
        offset += len(payload)


def test_trailing_nul_bytes_stripped():
    data = build_pck([("res://a.txt", b"hi")], path_nul_padding=5)
    _, entries, _ = _parse(data)
    assert entries[0].path == "res://a.txt"


@pytest.mark.parametrize("flags", [1, 2, 0xFF])
def test_entry_flags_abort(flags):
    data = build_pck(FILES, entry_flags=[0, flags, 0, 0])
    with pytest.raises(UnsupportedFlagsError) as ei:
        _parse(data)
    assert ei.value.code == "E_ENTRY_FLAGS"
    assert ei.value.context["index"] == 1
    assert ei.value.context["flags"] == flags


def test_encrypted_entry_flag_named_in_message():
    data = build_pck([("res://secret", b"s")], entry_flags=[1])
    with pytest.raises(UnsupportedFlagsError) as ei:
        _parse(data)
    assert "PACK_FILE_ENCRYPTED" in ei.value.message
    assert ei.value.context["unknown_bits"] == 0


def test_describe_entry_flags():
    assert describe_entry_flags(0) == ["None"]
    assert describe_entry_flags(1) == ["PACK_FILE_ENCRYPTED"]


def test_truncated_table_aborts():
    data = build_pck(FILES)
    # cut inside the second record's digest
    cut = 100 + (4 + 12 + 16 + 16 + 4) + (4 + 16 + 16 + 8)
    with pytest.raises(ArchiveIOError) as ei:
        _parse(data[:cut])
    assert ei.value.code == "E_SHORT_READ"


def test_to_dict():
    _, entries, _ = _parse(build_pck(FILES[:1]))
    d = entries[0].to_dict()
    assert d == {
        "index": 0,
        "path": "res://a.txt",
        "offset": 0,
        "size": 5,
        "md5": hashlib.md5(b"hello").hexdigest(),
        "flags": 0,
    }


def test_undecodable_path_bytes_are_preserved():
    _, entries, _ = _parse(build_pck([("res://tex\udc80.bin", b"x")]))
    assert entries[0].path == "res://tex\udc80.bin"
    raw = entries[0].path.encode("utf-8", "surrogateescape")
    assert raw == b"res://tex\x80.bin"
