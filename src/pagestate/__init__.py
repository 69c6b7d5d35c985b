# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Page State: server-side initial state for storefront page renders.

Resolves a storefront request (path, query string, session cookie, locale)
into the complete state tree a renderer needs, in one pass:
- classify: path -> page type + backend resource
- filter: product-listing parameters for category/search pages
- fetch: concurrent backend calls for the page type
- assemble: one structurally complete state tree with derived defaults
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

# Canonical product projection used when site settings do not specify one.
PRODUCT_FIELDS = (
    "path,id,name,category_id,category_ids,category_name,sku,images,enabled,discontinued,"
    "stock_status,stock_quantity,price,on_sale,regular_price,attributes,tags,position"
)
CATEGORIES_FIELDS = "image,name,description,meta_description,meta_title,sort,parent_id,position,slug,id"
DEFAULT_PRODUCTS_LIMIT = 30


class PageType(StrEnum):
    """Discriminant of a resolved storefront path (values match the sitemap API)."""

    PAGE = "page"
    PRODUCT = "product"
    CATEGORY = "product-category"
    SEARCH = "search"
    NOT_FOUND = "404"

    @property
    def has_listing(self) -> bool:
        return self in (PageType.CATEGORY, PageType.SEARCH)


@dataclass(frozen=True, slots=True)
class PageRef:
    """Classified request path."""

    type: PageType
    resource: str | None
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "resource": self.resource, "path": self.path}


@dataclass(frozen=True, slots=True)
class ProductFilter:
    """Product listing parameters. Built once per request, never mutated."""

    search: str | None = None
    category_id: str | None = None
    price_from: int | None = None
    price_to: int | None = None
    attributes: tuple[tuple[str, str], ...] = ()  # ("attributes.Color", "Red"), order preserved
    sort: str | None = None
    fields: str = PRODUCT_FIELDS
    limit: int = DEFAULT_PRODUCTS_LIMIT

    def with_overrides(self, **changes: Any) -> ProductFilter:
        return replace(self, **changes)

    def attributes_dict(self) -> dict[str, str | list[str]]:
        """Group attribute pairs by key; repeated keys become lists."""
        grouped: dict[str, str | list[str]] = {}
        for key, value in self.attributes:
            existing = grouped.get(key)
            if existing is None:
                grouped[key] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                grouped[key] = [existing, value]
        return grouped

    def to_api_params(self, *, enabled: bool | None = None) -> list[tuple[str, str]]:
        """Render as product list query parameters (unset values omitted)."""
        params: list[tuple[str, str]] = []
        scalars = (
            ("search", self.search),
            ("category_id", self.category_id),
            ("price_from", self.price_from),
            ("price_to", self.price_to),
            ("sort", self.sort),
            ("fields", self.fields),
            ("limit", self.limit),
        )
        for name, value in scalars:
            if value is None or value == "":
                continue
            params.append((name, str(value)))
        params.append(("offset", "0"))
        if enabled is not None:
            params.append(("enabled", "true" if enabled else "false"))
        params.extend(self.attributes)
        return params


@dataclass(frozen=True, slots=True)
class FetchBundle:
    """Raw payloads of the concurrent backend calls for one request."""

    checkout_fields: Any = None
    categories: Any = None
    cart: Any = None
    products: dict[str, Any] | None = None  # listing payload; None when not fetched
    product: Any = field(default_factory=dict)
    page: Any = field(default_factory=dict)
    theme_settings: Any = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Location:
    """Router location as seen by the client on first render."""

    pathname: str
    search: str = ""  # raw query string including leading "?"
    hash: str = ""
    has_history: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasHistory": self.has_history,
            "pathname": self.pathname,
            "search": self.search,
            "hash": self.hash,
        }
