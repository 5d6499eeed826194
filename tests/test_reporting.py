import io
import json

import pytest
from rich.console import Console

from pckunpack.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_reporter,
    set_verbosity,
    task,
)


def test_plain_task_lines():
    buf = io.StringIO()
    rep = PlainReporter(stream=buf, use_color=False)
    rep.start_task("t", "Extract entries", total=2)
    rep.advance("t", current_item="res://a")
    rep.advance("t", current_item="res://b")
    rep.end_task("t", entries=2, bytes=10)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "   [1/2] res://a"
    assert lines[1] == "   [2/2] res://b"
    assert lines[2].startswith(" ✔ Extract entries 2/2 (")
    assert lines[2].endswith("[entries=2 bytes=10]")


def test_plain_verbose_gated():
    buf = io.StringIO()
    rep = PlainReporter(stream=buf, use_color=False)
    rep.verbose("hidden")
    set_verbosity(1)
    rep.verbose("shown")
    assert buf.getvalue() == "VERB1: shown\n"


def test_plain_color():
    buf = io.StringIO()
    PlainReporter(stream=buf, use_color=True).warning("careful")
    assert buf.getvalue() == "\x1b[33mWARN\x1b[0m: careful\n"


def test_jsonl_summary_event():
    buf = io.StringIO()
    rep = JsonLinesReporter(stream=buf)
    rep.status("Directory summary: entries=3 payload_bytes=42")
    rep.status("Unrelated: a=b")
    events = [json.loads(line) for line in buf.getvalue().splitlines()]
    assert events[0] == {
        "event": "summary",
        "summary_type": "directory",
        "level": "info",
        "raw": "Directory summary: entries=3 payload_bytes=42",
        "entries": "3",
        "payload_bytes": "42",
    }
    assert [e["event"] for e in events] == ["summary", "status", "status"]


def test_task_context_marks_failure():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    with pytest.raises(RuntimeError):
        with task("x", "Doomed", total=1):
            raise RuntimeError("boom")
    end = json.loads(buf.getvalue().splitlines()[-1])
    assert end["event"] == "task_end"
    assert end["status"] == TaskStatus.FAILED.name.lower()


def test_task_context_attaches_final_stats():
    buf = io.StringIO()
    set_reporter(JsonLinesReporter(stream=buf))
    with task("x", "Counted", total=0) as final:
        final.update(entries=0, warnings=1)
    end = json.loads(buf.getvalue().splitlines()[-1])
    assert end["status"] == "success"
    assert end["warnings"] == 1


def test_rich_reporter_renders_to_console():
    out = io.StringIO()
    rep = RichReporter(console=Console(file=out, width=100, color_system=None))
    rep.section("Archive [game.pck]")
    rep.start_task("t", "Extract entries", total=1)
    rep.advance("t", current_item="res://[odd].txt")
    rep.end_task("t", entries=1, bytes=5)
    rep.warning("MD5 mismatch for export/[x]")
    text = out.getvalue()
    assert "Archive [game.pck]" in text
    assert "Extract entries 1/1" in text
    assert "[entries=1 bytes=5]" in text
    assert "WARN: MD5 mismatch for export/[x]" in text
    assert rep.progress is None
