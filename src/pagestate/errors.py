# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page State exception hierarchy.

All engine errors inherit from PageStateError, so callers can catch the base
class for any failed request. A path the sitemap reports as missing is not an
error: it resolves to a NotFound page.
"""

from __future__ import annotations


class PageStateError(Exception):
    """Base exception for all Page State errors."""


class UpstreamError(PageStateError):
    """A required backend call returned a non-success status."""

    def __init__(self, message: str, *, status: int | None, service: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.service = service


class BackendUnavailableError(UpstreamError):
    """A backend call failed before any status was received (connect, timeout)."""

    def __init__(self, message: str, *, service: str = "") -> None:
        super().__init__(message, status=None, service=service)


class LocalizationReadError(PageStateError):
    """Theme locale file missing, unreadable, or not valid JSON."""

    def __init__(self, message: str, *, locale: str = "") -> None:
        super().__init__(message)
        self.locale = locale


class ConfigError(PageStateError):
    """Engine configuration is incomplete or invalid."""
