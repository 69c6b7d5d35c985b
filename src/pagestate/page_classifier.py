# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Sitemap-backed page classifier.

One resolver call per request, no retries:
  200 -> PageRef(type, resource) from the sitemap entry
  404 -> PageRef(NOT_FOUND) — a normal outcome, rendered as a not-found page
  *   -> UpstreamError
"""

from __future__ import annotations

import logging

from . import PageRef, PageType
from .errors import UpstreamError
from .services import SitemapService

logger = logging.getLogger(__name__)


async def classify(path: str, resolver: SitemapService) -> PageRef:
    """Resolve *path* against the enabled sitemap entries."""
    response = await resolver.retrieve(path, enabled=True)

    if response.status == 404:
        logger.debug("Sitemap has no entry for %s", path)
        return PageRef(type=PageType.NOT_FOUND, resource=None, path=path)
    if response.status != 200:
        raise UpstreamError(f"Page response code = {response.status}", status=response.status, service="sitemap")

    entry = response.json if isinstance(response.json, dict) else {}
    try:
        page_type = PageType(entry.get("type"))
    except ValueError:
        raise UpstreamError(
            f"Unknown page type {entry.get('type')!r} for {path}", status=response.status, service="sitemap"
        ) from None

    resource = entry.get("resource")
    return PageRef(
        type=page_type,
        resource=str(resource) if resource is not None else None,
        path=entry.get("path") or path,
    )
