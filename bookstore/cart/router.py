"""
Route definitions for the shared cart.

Endpoints:
- GET    /api/cart              : current cart
- POST   /api/cart              : add a product ({productId, quantity})
- DELETE /api/cart/{product_id} : remove a product
- POST   /api/clear-cart        : empty the cart
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ..deps import get_store
from ..storage import DocumentStore
from . import engine


router = APIRouter(tags=["cart"])


@router.get("/api/cart")
def get_cart(store: DocumentStore = Depends(get_store)):
    return {"success": True, "cart": engine.get_cart(store).to_document()}


@router.post("/api/cart")
def add_to_cart(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
):
    payload = payload or {}
    cart = engine.add_item(store, payload.get("productId"), payload.get("quantity"))
    return {"success": True, "message": "Product added to cart", "cart": cart.to_document()}


@router.delete("/api/cart/{product_id}")
def remove_from_cart(product_id: str, store: DocumentStore = Depends(get_store)):
    cart = engine.remove_item(store, product_id)
    return {"success": True, "message": "Product removed from cart", "cart": cart.to_document()}


@router.post("/api/clear-cart")
def clear_cart(store: DocumentStore = Depends(get_store)):
    cart = engine.clear_cart(store)
    return {"success": True, "message": "Cart cleared", "cart": cart.to_document()}
