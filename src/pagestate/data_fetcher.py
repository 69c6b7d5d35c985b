# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Concurrent backend fetch for one classified page.

Seven independent slots, joined all-complete-or-first-error:

  checkout fields | categories | cart        always, required
  product list                               category/search pages only
  single product                             product pages only
  content page                               content pages only
  theme settings                             always, soft-fail -> {}

Slots that do not apply to the page type resolve locally without a call.
The first hard failure cancels the remaining in-flight calls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from . import CATEGORIES_FIELDS, FetchBundle, PageRef, PageType, ProductFilter
from .services import Services, ThemeSettingsService, require_ok

logger = logging.getLogger(__name__)


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """``asyncio.gather`` that cancels the siblings of the first failure.

    Results keep argument order. Cancelling the caller cancels every task.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def _resolved(value: Any) -> Any:
    return value


async def _theme_settings(service: ThemeSettingsService) -> Any:
    """Theme settings never fail the request: any error becomes ``{}``."""
    try:
        return require_ok(await service.retrieve(), "theme_settings")
    except Exception:
        logger.debug("Theme settings unavailable, using defaults", exc_info=True)
        return {}


async def _checkout_fields(services: Services) -> Any:
    return require_ok(await services.checkout_fields.list(), "checkout_fields")


async def _categories(services: Services) -> Any:
    params = [("enabled", "true"), ("fields", CATEGORIES_FIELDS)]
    return require_ok(await services.categories.list(params), "product_categories")


async def _cart(services: Services, cookie: str) -> Any:
    return require_ok(await services.cart.retrieve(cookie), "cart")


async def _product_list(services: Services, product_filter: ProductFilter) -> Any:
    return require_ok(await services.products.list(product_filter.to_api_params(enabled=True)), "products")


async def _product(services: Services, product_id: str) -> Any:
    return require_ok(await services.products.retrieve(product_id), "products")


async def _page(services: Services, page_id: str) -> Any:
    return require_ok(await services.pages.retrieve(page_id), "pages")


async def fetch(page_ref: PageRef, product_filter: ProductFilter, cookie: str, services: Services) -> FetchBundle:
    """Issue every backend call *page_ref* needs and join the results."""
    kind = page_ref.type

    products = _product_list(services, product_filter) if kind.has_listing else _resolved(None)
    product = (
        _product(services, page_ref.resource)
        if kind is PageType.PRODUCT and page_ref.resource is not None
        else _resolved({})
    )
    page = (
        _page(services, page_ref.resource) if kind is PageType.PAGE and page_ref.resource is not None else _resolved({})
    )

    (
        checkout_fields,
        categories,
        cart,
        products_result,
        product_result,
        page_result,
        theme_settings,
    ) = await gather_all(
        _checkout_fields(services),
        _categories(services),
        _cart(services, cookie),
        products,
        product,
        page,
        _theme_settings(services.theme_settings),
    )

    return FetchBundle(
        checkout_fields=checkout_fields,
        categories=categories,
        cart=cart,
        products=products_result if isinstance(products_result, dict) else None,
        product=product_result if product_result is not None else {},
        page=page_result if page_result is not None else {},
        theme_settings=theme_settings if theme_settings is not None else {},
    )
