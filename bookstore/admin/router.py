"""
Route definitions for the back office.

Endpoints:
- POST   /api/admin/login               : exchange admin credentials for a token
- POST   /api/admin/products            : create a product
- GET    /api/admin/products/{id}       : one product, active or not
- PUT    /api/admin/products/{id}       : shallow update
- DELETE /api/admin/products/{id}       : deactivate, or remove with ?permanent=true

The filtered admin listing lives with the other listings in ``catalog``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from ..auth import login, require_admin
from ..config import Settings, get_settings
from ..deps import get_store
from ..models import Identity
from ..storage import DocumentStore
from . import products


router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login")
def admin_login(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    payload = payload or {}
    user, token = login(store, payload.get("email"), payload.get("password"), settings)
    return {
        "success": True,
        "message": "Admin login successful",
        "token": token,
        "user": user,
    }


@router.post("/products", status_code=201)
def create_product(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
    admin: Identity = Depends(require_admin),
):
    product = products.create_product(store, payload or {}, created_by=admin.id)
    return {"success": True, "message": "Product created", "product": product}


@router.get("/products/{product_id}")
def get_product(
    product_id: int,
    store: DocumentStore = Depends(get_store),
    admin: Identity = Depends(require_admin),
):
    return {"success": True, "product": products.get_product(store, product_id)}


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
    admin: Identity = Depends(require_admin),
):
    product = products.update_product(store, product_id, payload or {})
    return {"success": True, "message": "Product updated", "product": product}


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    permanent: bool = Query(default=False),
    store: DocumentStore = Depends(get_store),
    admin: Identity = Depends(require_admin),
):
    message = products.delete_product(store, product_id, permanent=permanent)
    return {"success": True, "message": message}
