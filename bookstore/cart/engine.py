"""
Shared shopping cart.

There is a single cart document for the whole shop. Line items are keyed
by product id: adding a product already in the cart bumps its quantity.
``total`` and ``totalItems`` are recomputed from the items before every
save and are never edited on their own.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ..errors import ProductNotFoundError, StockError, ValidationError
from ..models import Cart, CartItem, utc_now_iso
from ..storage import CART, DocumentStore, load_products
from ..validation import coerce_number, parse_int


logger = logging.getLogger(__name__)


def get_cart(store: DocumentStore) -> Cart:
    document = store.read(CART)
    try:
        return Cart.model_validate(document)
    except PydanticValidationError as exc:
        logger.warning("Stored cart is malformed, starting from an empty cart: %s", exc)
        return Cart()


def save_cart(store: DocumentStore, cart: Cart) -> Cart:
    cart.recompute()
    cart.last_updated = utc_now_iso()
    store.write(CART, cart.to_document())
    return cart


def add_item(store: DocumentStore, product_id: Any, quantity: Optional[Any] = None) -> Cart:
    """Add ``quantity`` (default 1) of an active product to the cart.

    Stock is checked against the requested quantity only; the quantity
    already in the cart is not taken into account.
    """
    if product_id is None or product_id == "":
        raise ValidationError("Product ID is required", ["productId"])
    pid = parse_int(product_id, "productId")
    qty = 1 if quantity is None else parse_int(quantity, "quantity")
    if qty < 1:
        raise ValidationError("quantity must be at least 1", ["quantity"])

    product = next(
        (
            p
            for p in load_products(store)
            if p.get("id") == pid and p.get("isActive") is True
        ),
        None,
    )
    if product is None:
        raise ProductNotFoundError()
    if coerce_number(product.get("stock")) < qty:
        raise StockError()

    cart = get_cart(store)
    existing = next((item for item in cart.items if item.product_id == pid), None)
    if existing is not None:
        existing.quantity += qty
    else:
        cart.items.append(
            CartItem(
                product_id=pid,
                quantity=qty,
                title=str(product.get("title") or ""),
                author=str(product.get("author") or ""),
                price=coerce_number(product.get("discountPrice"))
                or coerce_number(product.get("price")),
                image_url=product.get("imageUrl"),
            )
        )

    logger.info("Added %s x product %s to cart", qty, pid)
    return save_cart(store, cart)


def remove_item(store: DocumentStore, product_id: Any) -> Cart:
    """Drop every line for ``product_id``.

    Ids that are unknown or not numeric match no line and leave the items
    as they are.
    """
    cart = get_cart(store)
    try:
        pid = parse_int(product_id, "productId")
    except ValidationError:
        logger.info("No cart line for product id %r", product_id)
        return save_cart(store, cart)
    cart.items = [item for item in cart.items if item.product_id != pid]
    logger.info("Removed product %s from cart", pid)
    return save_cart(store, cart)


def clear_cart(store: DocumentStore) -> Cart:
    cart = get_cart(store)
    cart.items = []
    logger.info("Cart cleared")
    return save_cart(store, cart)
