# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Backend service contracts — protocol-based data access layer.

Each backend resource the engine reads is a runtime-checkable Protocol whose
async methods return an ``ApiResponse``. ``api_client.StorefrontApi``
implements all of them over HTTP; tests supply in-memory fakes.

Status interpretation stays with the caller: services never raise on a
non-2xx status, only on transport failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .errors import UpstreamError

QueryParams = Sequence[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """Status code + decoded JSON body (None when the body is not JSON)."""

    status: int
    json: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def require_ok(response: ApiResponse, service: str) -> Any:
    """Return the payload of a successful response, else raise UpstreamError."""
    if not response.ok:
        raise UpstreamError(f"{service} response code = {response.status}", status=response.status, service=service)
    return response.json


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class SitemapService(Protocol):
    async def retrieve(self, path: str, *, enabled: bool = True) -> ApiResponse: ...


@runtime_checkable
class ProductService(Protocol):
    async def list(self, params: QueryParams) -> ApiResponse: ...

    async def retrieve(self, product_id: str) -> ApiResponse: ...


@runtime_checkable
class CategoryService(Protocol):
    async def list(self, params: QueryParams) -> ApiResponse: ...


@runtime_checkable
class CartService(Protocol):
    async def retrieve(self, cookie: str) -> ApiResponse: ...


@runtime_checkable
class CheckoutFieldService(Protocol):
    async def list(self) -> ApiResponse: ...


@runtime_checkable
class PageService(Protocol):
    async def retrieve(self, page_id: str) -> ApiResponse: ...


@runtime_checkable
class ThemeSettingsService(Protocol):
    async def retrieve(self) -> ApiResponse: ...


@runtime_checkable
class PlaceholderService(Protocol):
    async def list(self) -> ApiResponse: ...


@runtime_checkable
class SettingsService(Protocol):
    async def retrieve(self) -> ApiResponse: ...


@runtime_checkable
class TextStore(Protocol):
    """Localized text bundles keyed by locale code. Failure is a hard error."""

    async def load(self, locale: str) -> dict[str, Any]: ...


@dataclass(frozen=True, slots=True)
class Services:
    """Every collaborator the engine consumes, passed explicitly per call."""

    sitemap: SitemapService
    products: ProductService
    categories: CategoryService
    cart: CartService
    checkout_fields: CheckoutFieldService
    pages: PageService
    theme_settings: ThemeSettingsService
    placeholders: PlaceholderService
    settings: SettingsService
    text: TextStore
