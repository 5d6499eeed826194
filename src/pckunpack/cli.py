"""Command line interface for pckunpack."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .api import ExtractOptions, extract_pck
from .format.errors import PckError
from .logging import configure_logging
from .reporting import (
    set_reporter,
    get_reporter,
    PlainReporter,
    JsonLinesReporter,
    SilentReporter,
    RichReporter,
    set_verbosity,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pckunpack",
        description="Extract the contents of a PCK resource archive",
    )
    p.add_argument("archive", type=Path, help="Path to the .pck file")
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    args = build_parser().parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        extract_pck(ExtractOptions(archive=args.archive))
    except PckError as exc:
        rep.flush()
        rep.error(str(exc), code=exc.code, context=exc.context or {})
        return 1
    rep.flush()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
