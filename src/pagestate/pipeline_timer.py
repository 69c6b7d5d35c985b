# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Stage timer for the load pipeline (classify -> preload -> filter -> fetch -> assemble).

Created before the first await so a failed or cancelled request can still
report which stage it was in and how long each finished stage took.
"""

from __future__ import annotations

import time

_STAGE_HINTS = {
    "classify": "Sitemap lookup failed. Check the API URL and that the sitemap endpoint is reachable.",
    "preload": "Settings, placeholders, or the theme locale file could not be loaded.",
    "filter": "Site settings produced an unusable product filter.",
    "fetch": "A required backend call (checkout fields, categories, cart, or catalog) failed.",
    "assemble": "Backend payloads could not be combined into a state tree.",
}


def _ms(start_ns: int, end_ns: int) -> float:
    return round((end_ns - start_ns) / 1e6, 1)


def hint_for_stage(stage: str) -> str:
    return _STAGE_HINTS.get(stage, f"Failed during '{stage}' stage.")


class PipelineTimer:
    """Records ``(stage, start_ns, end_ns)`` spans; at most one stage is open."""

    __slots__ = ("_done", "_open", "_start_ns")

    def __init__(self) -> None:
        self._done: list[tuple[str, int, int]] = []
        self._open: tuple[str, int] | None = None
        self._start_ns = time.monotonic_ns()

    def stage(self, name: str) -> None:
        """Close the open stage (if any) and open *name*."""
        now = time.monotonic_ns()
        self._close(now)
        self._open = (name, now)

    def finalize(self) -> None:
        """Close the open stage. Safe to call more than once."""
        self._close(time.monotonic_ns())

    def _close(self, now: int) -> None:
        if self._open is not None:
            name, start = self._open
            self._done.append((name, start, now))
            self._open = None

    def elapsed_per_stage(self) -> dict[str, float]:
        """``{stage: ms}`` in pipeline order, the open stage measured up to now."""
        result = {name: _ms(start, end) for name, start, end in self._done}
        if self._open is not None:
            name, start = self._open
            result[name] = _ms(start, time.monotonic_ns())
        return result

    def total_ms(self) -> float:
        return _ms(self._start_ns, time.monotonic_ns())

    def failure_report(self) -> dict:
        """Where a failed load stopped. Call before ``finalize()``; the open stage is the one that failed."""
        if self._open is None:
            failed_at, failed_ms = "unknown", 0
        else:
            failed_at, start = self._open
            failed_ms = _ms(start, time.monotonic_ns())
        return {
            "completed_stages": [{"stage": name, "ms": _ms(start, end)} for name, start, end in self._done],
            "failed_at": failed_at,
            "failed_stage_ms": failed_ms,
            "total_ms": self.total_ms(),
            "hint": hint_for_stage(failed_at),
        }
