# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Product listing filter derivation.

Two steps, always in this order:
  1. page-type rules  — category/search pages read the URL query
  2. site overlay     — ``fields`` and ``limit`` come from site settings
                        (or canonical defaults) for every page type

Query-derived values (search text, sort, price bounds, attributes) are never
touched by step 2.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

from . import DEFAULT_PRODUCTS_LIMIT, PRODUCT_FIELDS, PageRef, PageType, ProductFilter

ATTRIBUTE_PREFIX = "attributes."
SEARCH_SORT = "search"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_query(url_query: str) -> list[tuple[str, str]]:
    """Parse a raw query string (leading ``?`` optional), keeping order and blanks."""
    return parse_qsl(url_query.lstrip("?"), keep_blank_values=True)


def _parse_int(value: str | None) -> int:
    """Leading integer of *value*; 0 when absent or unparseable ("12.5" -> 12)."""
    if not value:
        return 0
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else 0


def _first(pairs: list[tuple[str, str]], key: str) -> str | None:
    return next((v for k, v in pairs if k == key), None)


def filter_for_category(url_query: str, default_sort: str | None) -> ProductFilter:
    """Price bounds + ``attributes.*`` facets from the query; sort from settings."""
    pairs = parse_query(url_query)
    return ProductFilter(
        price_from=_parse_int(_first(pairs, "price_from")),
        price_to=_parse_int(_first(pairs, "price_to")),
        attributes=tuple((k, v) for k, v in pairs if k.startswith(ATTRIBUTE_PREFIX)),
        sort=default_sort or None,
    )


def filter_for_search(url_query: str) -> ProductFilter:
    """Search text + price bounds from the query, relevance sort, no category."""
    pairs = parse_query(url_query)
    return ProductFilter(
        search=_first(pairs, "search"),
        category_id=None,
        price_from=_parse_int(_first(pairs, "price_from")),
        price_to=_parse_int(_first(pairs, "price_to")),
        sort=SEARCH_SORT,
    )


def product_fields(settings: Mapping[str, Any]) -> str:
    fields = settings.get("product_fields")
    if isinstance(fields, str) and fields != "":
        return fields
    return PRODUCT_FIELDS


def products_limit(settings: Mapping[str, Any]) -> int:
    """Site page size when it is a positive integer, else the default of 30."""
    limit = settings.get("products_limit")
    if isinstance(limit, str) and limit.strip().isdecimal():
        limit = int(limit)
    if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
        return limit
    return DEFAULT_PRODUCTS_LIMIT


def build_filter(page_ref: PageRef, url_query: str, settings: Mapping[str, Any]) -> ProductFilter:
    """Derive the listing filter for *page_ref*, then overlay site-wide projection and page size."""
    if page_ref.type is PageType.CATEGORY:
        base = filter_for_category(url_query, settings.get("default_product_sorting")).with_overrides(
            category_id=page_ref.resource
        )
    elif page_ref.type is PageType.SEARCH:
        base = filter_for_search(url_query)
    else:
        base = ProductFilter()

    return base.with_overrides(fields=product_fields(settings), limit=products_limit(settings))
