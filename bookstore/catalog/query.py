"""
Catalog query engine.

Both listings work on the whole product collection held in memory:
filter, then sort, then (admin only) paginate. Sorting is stable, so
products that compare equal keep their stored order.
"""

from __future__ import annotations

import math
import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .schemas import (
    AdminFilters,
    AppliedAdminFilters,
    Pagination,
    ProductList,
    ProductPage,
    PublicFilters,
    Statistics,
)
from ..validation import coerce_number


Product = Dict[str, Any]

PUBLIC_SORTS = ("price_asc", "price_desc", "title_asc", "title_desc")
STRING_FIELDS = {"title", "author", "category"}
NUMERIC_FIELDS = {"price", "stock", "rating"}

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50
LOW_STOCK_THRESHOLD = 10

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _lower(s: Any) -> str:
    return "" if s is None else str(s).lower()


def collation_key(value: Any) -> Tuple[str, str]:
    """Sort key approximating a locale-aware string comparison.

    Accents are stripped and case folded for the primary key, so
    "Ștefan" sorts next to "stefan"; the raw text breaks ties.
    """
    text = "" if value is None else str(value)
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), text


def numeric_key(value: Any) -> float:
    return coerce_number(value)


def date_key(value: Any) -> datetime:
    """Parse a timestamp; anything unparsable sorts as oldest.

    Strings are read as ISO-8601 and numbers as epoch milliseconds, so
    numeric fields outside the known sort fields still order correctly.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, timezone.utc)
        except (OverflowError, OSError, ValueError):
            return _OLDEST
    if not isinstance(value, str) or not value.strip():
        return _OLDEST
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return _OLDEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _coerce_positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 1 else default


def query_public(
    products: List[Product],
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> ProductList:
    """Filter and sort the storefront listing.

    Parameters
    ----------
    products : List[Product]
        The whole product collection.
    category : Optional[str]
        Exact category match, case-insensitive.
    search : Optional[str]
        Case-insensitive substring matched against title or author.
    sort : Optional[str]
        One of ``price_asc``, ``price_desc``, ``title_asc`` or
        ``title_desc``. Any other value keeps the stored order.

    Returns
    -------
    ProductList
        Every active product that matches, with the total and an echo of
        the filters.
    """
    items = [p for p in products if p.get("isActive") is True]

    if category:
        ncat = category.lower()
        items = [p for p in items if _lower(p.get("category")) == ncat]

    if search:
        nq = search.lower()
        items = [
            p
            for p in items
            if nq in _lower(p.get("title")) or nq in _lower(p.get("author"))
        ]

    if sort == "price_asc":
        items.sort(key=lambda p: numeric_key(p.get("price")))
    elif sort == "price_desc":
        items.sort(key=lambda p: numeric_key(p.get("price")), reverse=True)
    elif sort == "title_asc":
        items.sort(key=lambda p: collation_key(p.get("title")))
    elif sort == "title_desc":
        items.sort(key=lambda p: collation_key(p.get("title")), reverse=True)

    return ProductList(
        products=items,
        total=len(items),
        filters=PublicFilters(
            category=category or None,
            search=search or None,
            sort=sort or None,
        ),
    )


def _sort_key_for(field: str) -> Callable[[Product], Any]:
    if field in STRING_FIELDS:
        return lambda p: collation_key(p.get(field))
    if field in NUMERIC_FIELDS:
        return lambda p: numeric_key(p.get(field))
    # createdAt, updatedAt and any unrecognised field compare as dates
    return lambda p: date_key(p.get(field))


def compute_statistics(products: List[Product]) -> Statistics:
    stocks = [numeric_key(p.get("stock")) for p in products]
    active = sum(1 for p in products if p.get("isActive"))
    return Statistics(
        total=len(products),
        active=active,
        inactive=len(products) - active,
        low_stock=sum(1 for s in stocks if 0 < s < LOW_STOCK_THRESHOLD),
        out_of_stock=sum(1 for p in products if p.get("stock") == 0),
    )


def query_admin(products: List[Product], filters: AdminFilters) -> ProductPage:
    """Filter, sort and paginate the back-office listing.

    Unlike the public listing, inactive products are included unless the
    ``status`` filter says otherwise, the category filter is a substring
    match, and the search also looks at the ISBN. Statistics describe the
    whole filtered set, not just the returned page.
    """
    items = list(products)

    if filters.status == "active":
        items = [p for p in items if p.get("isActive") is True]
    elif filters.status == "inactive":
        items = [p for p in items if p.get("isActive") is False]

    if filters.category and filters.category != "all":
        ncat = filters.category.lower()
        items = [p for p in items if ncat in _lower(p.get("category"))]

    if filters.search:
        raw = filters.search
        nq = raw.lower()
        items = [
            p
            for p in items
            if nq in _lower(p.get("title"))
            or nq in _lower(p.get("author"))
            or (bool(p.get("isbn")) and raw in str(p.get("isbn")))
        ]

    sort_field = filters.sort_by or "createdAt"
    descending = filters.sort_order != "asc"
    items.sort(key=_sort_key_for(sort_field), reverse=descending)

    page = _coerce_positive_int(filters.page, DEFAULT_PAGE)
    limit = _coerce_positive_int(filters.limit, DEFAULT_LIMIT)
    start = (page - 1) * limit
    end = start + limit
    total = len(items)

    return ProductPage(
        products=items[start:end],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_products=total,
            products_per_page=limit,
            has_next_page=end < total,
            has_prev_page=start > 0,
        ),
        statistics=compute_statistics(items),
        filters=AppliedAdminFilters(
            category=filters.category or "all",
            search=filters.search or "",
            status=filters.status,
            sort_by=sort_field,
            sort_order=filters.sort_order,
        ),
    )
