# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Initial state loader — orchestrates classify, preload, filter, fetch, assemble.

Dependency order:
    classify(path)
    -> settings | localized text | placeholders   (concurrent)
    -> build_filter(page, query, settings)
    -> fetch(page, filter, cookie)               (concurrent, 7 slots)
    -> assemble(...)

Any hard failure propagates unchanged; there is no partial payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import structlog

from . import Location
from .data_fetcher import fetch, gather_all
from .page_classifier import classify
from .pipeline_timer import PipelineTimer
from .product_filter import build_filter
from .services import Services, require_ok
from .state_assembler import StateTree, assemble

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InitialState:
    """Everything a renderer needs for the first paint of one request."""

    state: StateTree
    localized_text: dict[str, Any]
    placeholders: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.to_dict(),
            "themeText": self.localized_text,
            "placeholders": self.placeholders,
        }


def make_location(request_path: str, request_query: str) -> Location:
    """Client router location; the query is kept raw with its leading ``?``."""
    query = request_query.lstrip("?")
    return Location(pathname=request_path, search=f"?{query}" if query else "")


async def _settings(services: Services) -> dict[str, Any]:
    payload = require_ok(await services.settings.retrieve(), "settings")
    return payload if isinstance(payload, dict) else {}


async def _placeholders(services: Services) -> Any:
    return require_ok(await services.placeholders.list(), "placeholders")


async def load_state(
    request_path: str,
    request_query: str,
    session_cookie: str,
    locale: str,
    *,
    services: Services,
) -> InitialState:
    """Resolve one storefront request into its initial state payload."""
    timer = PipelineTimer()
    location = make_location(request_path, request_query)

    with structlog.contextvars.bound_contextvars(request_path=request_path, locale=locale):
        try:
            timer.stage("classify")
            page_ref = await classify(request_path, services.sitemap)

            timer.stage("preload")
            settings, localized_text, placeholders = await gather_all(
                _settings(services),
                services.text.load(locale),
                _placeholders(services),
            )

            timer.stage("filter")
            product_filter = build_filter(page_ref, location.search, settings)

            timer.stage("fetch")
            bundle = await fetch(page_ref, product_filter, session_cookie, services)

            timer.stage("assemble")
            state = assemble(page_ref, settings, bundle, location, product_filter)
        except Exception as e:
            report = timer.failure_report()
            logger.warning(
                "Initial state load failed at %s after %.1f ms: %s (%s)",
                report["failed_at"],
                report["total_ms"],
                e,
                report["hint"],
            )
            raise
        finally:
            timer.finalize()

        logger.info(
            "Initial state loaded: page_type=%s total_ms=%.1f stages=%s",
            page_ref.type.value,
            timer.total_ms(),
            timer.elapsed_per_stage(),
        )

    return InitialState(state=state, localized_text=localized_text, placeholders=placeholders)
