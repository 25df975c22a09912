"""Checkout orchestration between the cart and the payment gateway."""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..cart.engine import get_cart
from ..errors import ValidationError
from ..storage import DocumentStore
from ..validation import parse_number
from .gateway import CheckoutGateway, CheckoutItem, CheckoutSession


logger = logging.getLogger(__name__)


def _parse_items(raw_items: Any) -> List[CheckoutItem]:
    if not isinstance(raw_items, list):
        raise ValidationError("cartItems must be a list", ["cartItems"])
    items: List[CheckoutItem] = []
    for index, raw in enumerate(raw_items):
        try:
            items.append(CheckoutItem.model_validate(raw))
        except PydanticValidationError as exc:
            fields = [
                f"cartItems[{index}].{'.'.join(str(p) for p in err['loc'])}"
                for err in exc.errors()
            ]
            raise ValidationError("Invalid cart item", fields) from exc
    return items


def create_checkout_session(
    gateway: CheckoutGateway,
    store: DocumentStore,
    amount: Any,
    cart_items: Optional[Any],
    origin: str,
) -> CheckoutSession:
    """Validate the request and open a payment session.

    When ``cart_items`` is omitted the persisted cart is charged.
    """
    if not amount:
        raise ValidationError("Invalid amount", ["amount"])
    try:
        total = parse_number(amount, "amount")
    except ValidationError:
        raise ValidationError("Invalid amount", ["amount"]) from None
    if total < 1:
        raise ValidationError("Invalid amount", ["amount"])

    if cart_items is None:
        items = [
            CheckoutItem(
                title=i.title,
                author=i.author,
                price=i.price,
                quantity=i.quantity,
                image_url=i.image_url,
            )
            for i in get_cart(store).items
        ]
    else:
        items = _parse_items(cart_items)

    logger.info("Creating checkout session for %s (%d items)", total, len(items))
    return gateway.create_session(total, items, origin)


def check_payment_status(gateway: CheckoutGateway, session_id: str) -> str:
    return gateway.get_session_status(session_id)
