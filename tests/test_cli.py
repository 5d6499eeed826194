from pathlib import Path
import json

from pckunpack.cli import main
from pckunpack.reporting import get_reporter, JsonLinesReporter, PlainReporter

from pck_builder import build_ctex, build_pck


def _archive(tmp: Path, data: bytes) -> Path:
    p = tmp / "game.pck"
    p.write_bytes(data)
    return p


def test_cli_extracts_into_export(tmp_path: Path, monkeypatch, capsys):
    archive = _archive(tmp_path, build_pck([("res://a.txt", b"hello")]))
    monkeypatch.chdir(tmp_path)
    assert main([str(archive)]) == 0
    assert (tmp_path / "export" / "a.txt").read_bytes() == b"hello"
    assert isinstance(get_reporter(), PlainReporter)
    err = capsys.readouterr().err
    assert "Header summary: version=2 engine=4.2.0" in err
    assert "Extract summary: entries=1 bytes=5 mipmaps=0 warnings=0" in err


def test_cli_warning_keeps_exit_zero(tmp_path: Path, monkeypatch, capsys):
    data = build_pck([("res://a.txt", b"hello")], digests=[b"\x00" * 16])
    archive = _archive(tmp_path, data)
    monkeypatch.chdir(tmp_path)
    assert main([str(archive)]) == 0
    err = capsys.readouterr().err
    assert "WARN: MD5 mismatch for" in err
    assert (tmp_path / "export" / "a.txt").exists()


def test_cli_fatal_error_exit_one(tmp_path: Path, monkeypatch, capsys):
    archive = _archive(tmp_path, build_pck([("res://a", b"x")], flags=1))
    monkeypatch.chdir(tmp_path)
    assert main([str(archive)]) == 1
    err = capsys.readouterr().err
    assert "ERROR: E_ARCHIVE_FLAGS: Unsupported flags: PACK_DIR_ENCRYPTED" in err
    assert not (tmp_path / "export").exists()


def test_cli_json_reporter(tmp_path: Path, monkeypatch, capsys):
    files = [
        ("res://a.txt", b"hello"),
        ("res://t/icon.ctex", build_ctex([b"m" * 8, b"n" * 2])),
    ]
    archive = _archive(tmp_path, build_pck(files))
    monkeypatch.chdir(tmp_path)
    assert main(["-r", "json", str(archive)]) == 0
    assert isinstance(get_reporter(), JsonLinesReporter)
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    summaries = {
        e["summary_type"]: e for e in events if e["event"] == "summary"
    }
    assert summaries["header"]["entries"] == "2"
    assert summaries["extract"]["mipmaps"] == "2"
    progress = [e["current_item"] for e in events if e["event"] == "task_progress"]
    assert progress == ["res://a.txt", "res://t/icon.ctex"]
    end = next(e for e in events if e["event"] == "task_end")
    assert end["status"] == "success"
    assert end["entries"] == 2
    assert end["bytes"] == 5 + len(files[1][1])


def test_cli_json_reporter_error_event(tmp_path: Path, monkeypatch, capsys):
    archive = _archive(tmp_path, build_pck([], magic=b"NOPE"))
    monkeypatch.chdir(tmp_path)
    assert main(["--reporter", "json", str(archive)]) == 1
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    errors = [e for e in events if e.get("level") == "error"]
    assert errors[0]["code"] == "E_BAD_MAGIC"


def test_cli_verbose_prints_directory(tmp_path: Path, monkeypatch, capsys):
    archive = _archive(tmp_path, build_pck([("res://a.txt", b"hello")]))
    monkeypatch.chdir(tmp_path)
    assert main(["-v", str(archive)]) == 0
    err = capsys.readouterr().err
    assert "VERB1: Engine version: 4.2.0" in err
    assert "VERB1: dir[0] res://a.txt offset=0 size=5" in err


def test_cli_rich_without_tty_falls_back(tmp_path: Path, monkeypatch):
    archive = _archive(tmp_path, build_pck([("res://a.txt", b"hello")]))
    monkeypatch.chdir(tmp_path)
    assert main(["-r", "rich", str(archive)]) == 0
    assert isinstance(get_reporter(), PlainReporter)
