"""
Pydantic schema definitions for the catalog module.

Products travel as plain documents (``dict``) because admin updates may
add fields the ``Product`` model does not know about. The wrappers here
bundle a result set with the metadata each listing returns: the public
listing echoes the filters it applied, and the admin listing adds
pagination and stock statistics.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models import CamelModel


class PublicFilters(BaseModel):
    category: Optional[str] = None
    search: Optional[str] = None
    sort: Optional[str] = None


class ProductList(BaseModel):
    """Result of the public listing: every match, no pagination."""

    products: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    filters: PublicFilters = Field(default_factory=PublicFilters)


class AdminFilters(CamelModel):
    """Filters accepted by the admin listing.

    ``page`` and ``limit`` stay loosely typed because they arrive as raw
    query strings and are coerced (with defaults) by the query engine.
    """

    category: Optional[str] = None
    search: Optional[str] = None
    status: str = "all"
    sort_by: str = "createdAt"
    sort_order: str = "desc"
    page: Optional[Any] = None
    limit: Optional[Any] = None


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_products: int
    products_per_page: int
    has_next_page: bool
    has_prev_page: bool


class Statistics(CamelModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    low_stock: int = 0
    out_of_stock: int = 0


class AppliedAdminFilters(CamelModel):
    category: str = "all"
    search: str = ""
    status: str = "all"
    sort_by: str = "createdAt"
    sort_order: str = "desc"


class ProductPage(CamelModel):
    products: List[Dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination
    statistics: Statistics
    filters: AppliedAdminFilters
