"""
Route definitions for the product listings.

Endpoints:
- GET /api/products        : public listing (active products only)
- GET /api/admin/products  : admin listing with pagination and statistics
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth import require_admin
from ..deps import get_store
from ..models import Identity
from ..storage import DocumentStore, load_products
from .query import query_admin, query_public
from .schemas import AdminFilters


logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


@router.get("/api/products")
def list_products(
    category: Optional[str] = Query(default=None, description="Exact category"),
    search: Optional[str] = Query(default=None, description="Search in title/author"),
    sort: Optional[str] = Query(
        default=None, description="price_asc, price_desc, title_asc or title_desc"
    ),
    store: DocumentStore = Depends(get_store),
):
    result = query_public(load_products(store), category=category, search=search, sort=sort)
    return {"success": True, **result.model_dump()}


@router.get("/api/admin/products")
def list_admin_products(
    category: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    status: str = Query(default="all", description="active, inactive or all"),
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    store: DocumentStore = Depends(get_store),
    admin: Identity = Depends(require_admin),
):
    filters = AdminFilters(
        category=category,
        search=search,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    logger.info("Admin product listing by %s: %s", admin.email, filters.model_dump())
    result = query_admin(load_products(store), filters)
    return {"success": True, **result.model_dump(by_alias=True)}
