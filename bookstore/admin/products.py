"""
Back-office product management.

Creation validates and normalises its input before the record is built.
Updates are a shallow merge with no validation at all; that asymmetry
is deliberate and covered by tests. Every mutation rewrites the whole
product document.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from ..errors import (
    InvalidDiscountError,
    MissingFieldsError,
    NegativeValueError,
    ProductNotFoundError,
)
from ..models import Product, Specifications, utc_now_iso
from ..storage import DocumentStore, load_products, save_products
from ..validation import parse_int, parse_number


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "author", "price", "stock")


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip() or default


def _tags(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(t).strip() for t in value if str(t).strip()]


def next_product_id(products: List[Dict[str, Any]]) -> int:
    """Id for a new product: the last stored product's id plus one.

    This follows storage order, not the maximum id, so a collection that
    is not kept in append order can yield an id that is already taken.
    """
    if not products:
        return 1
    return parse_int(products[-1].get("id"), "id") + 1


def validate_new_product(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Check creation input and return the parsed numeric values.

    Raises ``MissingFieldsError`` listing every absent (or falsy) required
    field, ``InvalidNumberError`` for non-numeric values,
    ``NegativeValueError`` and ``InvalidDiscountError``.
    """
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
    if missing:
        raise MissingFieldsError(missing)

    price = parse_number(fields["price"], "price")
    stock = parse_int(fields["stock"], "stock")
    discount_price = (
        parse_number(fields["discountPrice"], "discountPrice")
        if fields.get("discountPrice")
        else None
    )
    rating = parse_number(fields["rating"], "rating") if fields.get("rating") else None
    review_count = (
        parse_int(fields["reviewCount"], "reviewCount") if fields.get("reviewCount") else 0
    )

    if price < 0:
        raise NegativeValueError("Price cannot be negative", ["price"])
    if stock < 0:
        raise NegativeValueError("Stock cannot be negative", ["stock"])
    if discount_price is not None and discount_price > price:
        raise InvalidDiscountError(
            "Discount price cannot be greater than the original price", ["discountPrice"]
        )

    return {
        "price": price,
        "stock": stock,
        "discount_price": discount_price,
        "rating": rating,
        "review_count": review_count,
    }


def create_product(
    store: DocumentStore, fields: Dict[str, Any], created_by: Optional[Union[int, str]] = None
) -> Dict[str, Any]:
    numbers = validate_new_product(fields)
    products = load_products(store)
    now = utc_now_iso()

    product = Product(
        id=next_product_id(products),
        title=_text(fields["title"]),
        author=_text(fields["author"]),
        isbn=_text(fields.get("isbn")),
        category=_text(fields.get("category"), "General"),
        description=_text(fields.get("description")),
        image_url=_text(fields.get("imageUrl"), "/images/default-book.jpg"),
        is_active=True,
        featured=bool(fields.get("featured")),
        tags=_tags(fields.get("tags")),
        specifications=Specifications(
            pages=_text(fields.get("pages")),
            language=_text(fields.get("language"), "Romanian"),
            publisher=_text(fields.get("publisher")),
            year=_text(fields.get("year")),
            format=_text(fields.get("format"), "Paperback"),
        ),
        created_at=now,
        updated_at=now,
        created_by=created_by,
        **numbers,
    )
    document = product.to_document()

    products.append(document)
    save_products(store, products)
    logger.info("Product created: %s", document["id"])
    return document


def _find(products: List[Dict[str, Any]], product_id: int) -> Tuple[int, Dict[str, Any]]:
    for index, product in enumerate(products):
        if product.get("id") == product_id:
            return index, product
    raise ProductNotFoundError()


def get_product(store: DocumentStore, product_id: int) -> Dict[str, Any]:
    """Look a product up by id, whether active or not."""
    _, product = _find(load_products(store), product_id)
    return product


def update_product(
    store: DocumentStore, product_id: int, patch: Dict[str, Any]
) -> Dict[str, Any]:
    products = load_products(store)
    index, product = _find(products, product_id)

    changes = {k: v for k, v in patch.items() if k != "id"}
    updated = {**product, **changes, "updatedAt": utc_now_iso()}
    products[index] = updated

    save_products(store, products)
    logger.info("Product updated: %s (%s)", product_id, ", ".join(sorted(changes)) or "no fields")
    return updated


def delete_product(store: DocumentStore, product_id: int, permanent: bool = False) -> str:
    products = load_products(store)
    index, product = _find(products, product_id)

    if permanent:
        del products[index]
        message = "Product permanently deleted"
    else:
        product["isActive"] = False
        product["updatedAt"] = utc_now_iso()
        message = "Product deactivated"

    save_products(store, products)
    logger.info("%s: %s", message, product_id)
    return message
