# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RFC 9457 Problem Details for failed initial-state loads.

Maps engine exceptions to structured problem objects a web framework (or the
CLI) can render. The engine itself never builds HTTP responses; a failed load
is always a failed request, never a degraded page.

Type URI namespace: ``https://pagestate.dev/errors/{slug}``
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .errors import (
    BackendUnavailableError,
    ConfigError,
    LocalizationReadError,
    PageStateError,
    UpstreamError,
)

_ERROR_BASE = "https://pagestate.dev/errors"

MAX_DETAIL_LENGTH = 200


class ProblemType(StrEnum):
    UPSTREAM_ERROR = "upstream-error"
    BACKEND_UNAVAILABLE = "backend-unavailable"
    LOCALIZATION_ERROR = "localization-error"
    CONFIG_ERROR = "config-error"

    @property
    def uri(self) -> str:
        """Full type URI for RFC 9457 ``type`` field."""
        return f"{_ERROR_BASE}/{self.value}"


# (status, title, CLI hint)
_TYPE_METADATA: dict[ProblemType, tuple[int, str, str]] = {
    ProblemType.UPSTREAM_ERROR: (502, "Backend Error", "Check the backend logs for the failing service."),
    ProblemType.BACKEND_UNAVAILABLE: (503, "Backend Unavailable", "Check --api-url and that the API is running."),
    ProblemType.LOCALIZATION_ERROR: (500, "Locale Unavailable", "Check --theme-dir and the assets/locales files."),
    ProblemType.CONFIG_ERROR: (500, "Configuration Error", "Set PAGESTATE_API_URL and THEME_DIR, or pass flags."),
}

# Most specific first: BackendUnavailableError is an UpstreamError.
_EXCEPTION_TYPES: tuple[tuple[type[PageStateError], ProblemType], ...] = (
    (BackendUnavailableError, ProblemType.BACKEND_UNAVAILABLE),
    (UpstreamError, ProblemType.UPSTREAM_ERROR),
    (LocalizationReadError, ProblemType.LOCALIZATION_ERROR),
    (ConfigError, ProblemType.CONFIG_ERROR),
)

# ── Secret sanitization patterns ─────────────────────────────────────

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"Bearer\s+\S+"), "Bearer <redacted>"),
    (
        re.compile(r"(?:API_KEY|SECRET|TOKEN|PASSWORD|CREDENTIAL)\s*[=:]\s*\S+", re.IGNORECASE),
        "<redacted>",
    ),
    (re.compile(r"Basic\s+[A-Za-z0-9+/=]{8,}"), "Basic <redacted>"),
    (re.compile(r"://[^@\s]+@"), "://<redacted>@"),
    (re.compile(r"eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}"), "<redacted>"),
]

_PATH_PATTERN = re.compile(
    r"(/(?:Users|home|tmp|var|etc|opt|root|srv|usr|private|mnt|media)/[\w./-]+"
    r"|[A-Z]:\\[\w.\\-]+)"
)


def sanitize_detail(text: str) -> str:
    """Scrub secrets and filesystem paths from *text*, then truncate."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    text = _PATH_PATTERN.sub("<path>", text)
    if len(text) > MAX_DETAIL_LENGTH:
        text = text[:MAX_DETAIL_LENGTH] + "..."
    return text


_STANDARD_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """RFC 9457 Problem Detail object."""

    type: str = "about:blank"
    title: str = ""
    status: int = 500
    detail: str = ""
    instance: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)
    hint: str = field(default="", repr=False)

    def to_dict(self) -> dict[str, Any]:
        """RFC 9457 JSON dict.  Empty optional fields omitted, extensions merged at top level."""
        d: dict[str, Any] = {"type": self.type, "status": self.status}
        if self.title:
            d["title"] = self.title
        if self.detail:
            d["detail"] = self.detail
        if self.instance:
            d["instance"] = self.instance
        for k, v in self.extensions.items():
            if k not in _STANDARD_FIELDS:
                d[k] = v
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_cli_text(self) -> str:
        lines = [f"Error: {self.detail}"]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        return "\n".join(lines)


def from_exception(exc: BaseException, *, instance: str = "") -> ProblemDetail:
    """Build a ProblemDetail from an engine (or unexpected) exception."""
    for exc_type, problem_type in _EXCEPTION_TYPES:
        if isinstance(exc, exc_type):
            break
    else:
        # Unknown failures: no internal detail leaks beyond the sanitized message.
        return ProblemDetail(status=500, detail=sanitize_detail(str(exc) or type(exc).__name__), instance=instance)

    status, title, hint = _TYPE_METADATA[problem_type]
    ext: dict[str, Any] = {}
    if isinstance(exc, UpstreamError):
        if exc.service:
            ext["service"] = exc.service
        if exc.status is not None:
            ext["upstream_status"] = exc.status
    if isinstance(exc, LocalizationReadError) and exc.locale:
        ext["locale"] = sanitize_detail(exc.locale)
    return ProblemDetail(
        type=problem_type.uri,
        title=title,
        status=status,
        detail=sanitize_detail(str(exc)),
        instance=instance,
        extensions=ext,
        hint=hint,
    )
