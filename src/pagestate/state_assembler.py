# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Assemble the initial state tree from classification, settings, and fetched data.

The tree is structurally complete for every page type: aggregates default to
0, flags to False, collections to empty, whatever the bundle contains.
Transient UI flags and payment/shipping lists are placeholders the client
fills in after hydration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from . import FetchBundle, Location, PageRef, PageType, ProductFilter


@dataclass(frozen=True, slots=True)
class ListingSummary:
    """Aggregates of a product listing payload."""

    items: list[Any] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    min_price: float = 0
    max_price: float = 0
    attributes: list[Any] = field(default_factory=list)


@dataclass(slots=True)
class StateTree:
    """Initial ``app`` state for one request. ``to_dict()`` gives the client shape."""

    settings: Mapping[str, Any]
    location: Location
    current_page: PageRef
    page_details: Any
    category_details: Any
    product_details: Any
    categories: list[Any]
    listing: ListingSummary
    product_filter: dict[str, Any]
    cart: Any
    checkout_fields: Any
    theme_settings: Any
    order: Any = None
    payment_methods: list[Any] = field(default_factory=list)
    shipping_methods: list[Any] = field(default_factory=list)
    loading_products: bool = False
    loading_more_products: bool = False
    loading_shipping_methods: bool = False
    loading_payment_methods: bool = False
    processing_checkout: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "app": {
                "settings": dict(self.settings),
                "location": self.location.to_dict(),
                "currentPage": self.current_page.to_dict(),
                "pageDetails": self.page_details,
                "categoryDetails": self.category_details,
                "productDetails": self.product_details,
                "categories": self.categories,
                "products": self.listing.items,
                "productsTotalCount": self.listing.total_count,
                "productsHasMore": self.listing.has_more,
                "productsMinPrice": self.listing.min_price,
                "productsMaxPrice": self.listing.max_price,
                "productsAttributes": self.listing.attributes,
                "paymentMethods": self.payment_methods,
                "shippingMethods": self.shipping_methods,
                "loadingProducts": self.loading_products,
                "loadingMoreProducts": self.loading_more_products,
                "loadingShippingMethods": self.loading_shipping_methods,
                "loadingPaymentMethods": self.loading_payment_methods,
                "processingCheckout": self.processing_checkout,
                "productFilter": self.product_filter,
                "cart": self.cart,
                "order": self.order,
                "checkoutFields": self.checkout_fields,
                "themeSettings": self.theme_settings,
            }
        }


def find_category(categories: Any, category_id: str | None) -> Any:
    """Category whose ``id`` equals *category_id*, or None.

    Ids compare as strings: page resources are strings, catalog ids may be numbers.
    """
    if category_id is None or not isinstance(categories, list):
        return None
    return next(
        (c for c in categories if isinstance(c, dict) and c.get("id") is not None and str(c["id"]) == category_id),
        None,
    )


def summarize_listing(products: Mapping[str, Any] | None) -> ListingSummary:
    """Extract listing aggregates; every missing value falls back to its zero."""
    if not products:
        return ListingSummary()
    price = products.get("price")
    if not isinstance(price, Mapping):
        price = {}
    return ListingSummary(
        items=list(products.get("data") or []),
        total_count=products.get("total_count") or 0,
        has_more=bool(products.get("has_more")),
        min_price=price.get("min") or 0,
        max_price=price.get("max") or 0,
        attributes=list(products.get("attributes") or []),
    )


def recorded_filter(product_filter: ProductFilter, settings: Mapping[str, Any]) -> dict[str, Any]:
    """Filter as the client stores it: explicit ``onSale`` and zeroed bounds."""
    return {
        "onSale": None,
        "search": product_filter.search or "",
        "categoryId": product_filter.category_id,
        "priceFrom": product_filter.price_from or 0,
        "priceTo": product_filter.price_to or 0,
        "attributes": product_filter.attributes_dict(),
        "sort": product_filter.sort or settings.get("default_product_sorting"),
        "fields": product_filter.fields,
        "limit": product_filter.limit,
    }


def assemble(
    page_ref: PageRef,
    settings: Mapping[str, Any],
    bundle: FetchBundle,
    location: Location,
    product_filter: ProductFilter,
) -> StateTree:
    category_details = None
    if page_ref.type is PageType.CATEGORY:
        category_details = find_category(bundle.categories, page_ref.resource)

    return StateTree(
        settings=settings,
        location=location,
        current_page=page_ref,
        page_details=bundle.page,
        category_details=category_details,
        product_details=bundle.product,
        categories=bundle.categories if isinstance(bundle.categories, list) else [],
        listing=summarize_listing(bundle.products),
        product_filter=recorded_filter(product_filter, settings),
        cart=bundle.cart,
        checkout_fields=bundle.checkout_fields,
        theme_settings=bundle.theme_settings,
    )
