# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Theme text bundles: ``<theme_dir>/assets/locales/<locale>.json``.

Read off the event loop. Unlike theme settings, a missing or broken locale
file fails the request (``LocalizationReadError``).
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any

from .errors import LocalizationReadError

logger = logging.getLogger(__name__)

# en, pt-BR, zh_Hans, es-419 ... — no separators that could leave the directory
_LOCALE_RE = re.compile(r"^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$")


def locale_file(theme_dir: Path, locale: str) -> Path:
    """Locale JSON path inside *theme_dir*; rejects malformed locale codes."""
    if not _LOCALE_RE.match(locale):
        raise LocalizationReadError(f"Invalid locale code: {locale!r}", locale=locale)
    return Path(theme_dir) / "assets" / "locales" / f"{locale}.json"


class ThemeTextStore:
    """``TextStore`` backed by the theme's locale directory."""

    def __init__(self, theme_dir: Path | str) -> None:
        self._theme_dir = Path(theme_dir)

    async def load(self, locale: str) -> dict[str, Any]:
        path = locale_file(self._theme_dir, locale)
        return await asyncio.to_thread(_read_json, path, locale)


def _read_json(path: Path, locale: str) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LocalizationReadError(f"Cannot read locale file {path.name}: {e.strerror or e}", locale=locale) from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LocalizationReadError(f"Invalid JSON in locale file {path.name}: {e.msg}", locale=locale) from e
    if not isinstance(data, dict):
        raise LocalizationReadError(f"Locale file {path.name} must contain a JSON object", locale=locale)
    logger.debug("Loaded %d text keys for locale %s", len(data), locale)
    return data
