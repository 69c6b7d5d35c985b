# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Logging for the state loader: structlog processors rendered through stdlib handlers.

Every record, whether from ``logging.getLogger(__name__)`` in engine modules
or from structlog, picks up the request context the loader binds
(``request_path``, ``locale``) and has credential fields masked before it
is rendered. ``json_output=True`` gives one JSON object per line.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

# httpx logs every request at INFO; the loader's stage lines cover that.
_QUIET_LOGGERS = ("httpx", "httpcore")

# Event keys that may carry a visitor session or the backend token.
_CREDENTIAL_KEYS = frozenset({"cookie", "session_cookie", "api_token", "authorization"})
_MASK = "***"


def mask_credentials(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Replace credential values with a fixed mask, keeping the key visible."""
    for key in event_dict:
        if key.lower() in _CREDENTIAL_KEYS and event_dict[key]:
            event_dict[key] = _MASK
    return event_dict


def configure(*, json_output: bool = False, level: str = "INFO") -> None:
    """Install the structlog bridge on the root logger (replacing existing handlers).

    Args:
        json_output: JSON lines for log shipping instead of the console renderer.
        level: Root logger level name; unknown names fall back to INFO.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        mask_credentials,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
