from __future__ import annotations

from typing import Any

from .base import Reporter


class SilentReporter(Reporter):
    """Discards everything (quiet mode and tests)."""

    def _ignore(self, *args: Any, **kwargs: Any) -> None:
        pass

    start_task = _ignore
    advance = _ignore
    end_task = _ignore
    status = _ignore
    verbose = _ignore
    error = _ignore
    warning = _ignore
    section = _ignore
