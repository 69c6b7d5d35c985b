# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""httpx implementation of the backend service protocols.

One ``httpx.AsyncClient`` per ``StorefrontApi``; resources are thin views
sharing it. Responses are returned as ``ApiResponse`` whatever the status;
only transport failures raise (``BackendUnavailableError``).

Endpoints (relative to the REST base URL):
    GET /sitemap?path=...&enabled=true
    GET /products, /products/{id}
    GET /product_categories
    GET /settings, /settings/checkout/fields
    GET /pages/{id}
    GET /theme/settings, /theme/placeholders
Cart (relative to the storefront AJAX base URL, session cookie forwarded):
    GET /cart
"""

from __future__ import annotations

import logging
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any
from urllib.parse import quote

import httpx

from .config import EngineConfig
from .errors import BackendUnavailableError
from .services import ApiResponse, QueryParams, Services, TextStore

logger = logging.getLogger(__name__)


class StorefrontApi:
    """REST + AJAX backend client. Use as an async context manager or call ``aclose()``."""

    def __init__(self, config: EngineConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_base = config.api_base_url.rstrip("/")
        self._ajax_base = config.cart_base_url.rstrip("/")
        self._auth_headers = {"Authorization": f"Bearer {config.api_token}"} if config.api_token else {}
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            transport=transport,
            cookies=_no_cookie_jar(),
            headers={"Accept": "application/json"},
        )

        self.sitemap = _Sitemap(self)
        self.products = _Products(self)
        self.categories = _Categories(self)
        self.cart = _Cart(self)
        self.checkout_fields = _CheckoutFields(self)
        self.pages = _Pages(self)
        self.theme_settings = _ThemeSettings(self)
        self.placeholders = _Placeholders(self)
        self.settings = _Settings(self)

    async def __aenter__(self) -> StorefrontApi:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def services(self, text: TextStore) -> Services:
        """Bundle this client's resources with a text store for ``load_state``."""
        return Services(
            sitemap=self.sitemap,
            products=self.products,
            categories=self.categories,
            cart=self.cart,
            checkout_fields=self.checkout_fields,
            pages=self.pages,
            theme_settings=self.theme_settings,
            placeholders=self.placeholders,
            settings=self.settings,
            text=text,
        )

    async def get(
        self,
        service: str,
        path: str,
        *,
        params: QueryParams | None = None,
        ajax: bool = False,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """GET *path* and wrap the result; transport errors become BackendUnavailableError."""
        url = f"{self._ajax_base if ajax else self._api_base}{path}"
        request_headers = dict(headers or {}) if ajax else {**self._auth_headers, **(headers or {})}
        try:
            response = await self._client.get(url, params=list(params) if params else None, headers=request_headers)
        except httpx.HTTPError as e:
            raise BackendUnavailableError(f"{service} request failed: {type(e).__name__}", service=service) from e
        logger.debug("%s GET %s -> %d", service, path, response.status_code)
        return ApiResponse(status=response.status_code, json=_decode_json(response))


def _no_cookie_jar() -> CookieJar:
    """Jar that rejects every Set-Cookie; session cookies belong to one request only."""
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


def _decode_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _segment(value: str) -> str:
    return quote(str(value), safe="")


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class _Resource:
    __slots__ = ("_api",)

    def __init__(self, api: StorefrontApi) -> None:
        self._api = api


class _Sitemap(_Resource):
    async def retrieve(self, path: str, *, enabled: bool = True) -> ApiResponse:
        params = [("path", path), ("enabled", "true" if enabled else "false")]
        return await self._api.get("sitemap", "/sitemap", params=params)


class _Products(_Resource):
    async def list(self, params: QueryParams) -> ApiResponse:
        return await self._api.get("products", "/products", params=params)

    async def retrieve(self, product_id: str) -> ApiResponse:
        return await self._api.get("products", f"/products/{_segment(product_id)}")


class _Categories(_Resource):
    async def list(self, params: QueryParams) -> ApiResponse:
        return await self._api.get("product_categories", "/product_categories", params=params)


class _Cart(_Resource):
    async def retrieve(self, cookie: str) -> ApiResponse:
        headers = {"Cookie": cookie} if cookie else {}
        return await self._api.get("cart", "/cart", ajax=True, headers=headers)


class _CheckoutFields(_Resource):
    async def list(self) -> ApiResponse:
        return await self._api.get("checkout_fields", "/settings/checkout/fields")


class _Pages(_Resource):
    async def retrieve(self, page_id: str) -> ApiResponse:
        return await self._api.get("pages", f"/pages/{_segment(page_id)}")


class _ThemeSettings(_Resource):
    async def retrieve(self) -> ApiResponse:
        return await self._api.get("theme_settings", "/theme/settings")


class _Placeholders(_Resource):
    async def list(self) -> ApiResponse:
        return await self._api.get("placeholders", "/theme/placeholders")


class _Settings(_Resource):
    async def retrieve(self) -> ApiResponse:
        return await self._api.get("settings", "/settings")
