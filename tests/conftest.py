# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import pagestate  # noqa: F401
except ImportError:
    raise ImportError("pagestate is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from tests._fakes import FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    """Fresh in-memory backend; every path is a 404 until ``sitemap`` is set."""
    return FakeBackend()


@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch):
    """Safety net: unit tests must never reach a real backend.

    ``StorefrontApi`` tests pass an ``httpx.MockTransport`` explicitly; any
    client built without one fails loudly instead of opening a socket.
    """
    import httpx

    real_init = httpx.AsyncClient.__init__

    def _guarded_init(self, *args, **kwargs):
        if kwargs.get("transport") is None:
            raise RuntimeError("Test tried to open a real HTTP connection. Pass an httpx.MockTransport.")
        real_init(self, *args, **kwargs)

    monkeypatch.setattr(httpx.AsyncClient, "__init__", _guarded_init)
