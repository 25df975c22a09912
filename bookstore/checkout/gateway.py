"""
Payment gateway integration for checkout.

``StripeCheckoutGateway`` talks to the Stripe REST API directly with
form-encoded requests over ``urllib``. It creates hosted checkout
sessions and reads back their payment status. There are no retries:
any network, HTTP or decoding failure is raised as ``PaymentError``.

Tests and alternative providers implement the same two methods; see
``CheckoutGateway``.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..config import Settings
from ..errors import PaymentError
from ..models import CamelModel


logger = logging.getLogger(__name__)


class CheckoutItem(CamelModel):
    title: str
    author: str = ""
    price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1)
    image_url: Optional[str] = None


class CheckoutSession(BaseModel):
    session_id: str
    session_url: Optional[str] = None


class CheckoutGateway:
    """Interface of an external payment provider."""

    def create_session(
        self, amount: float, items: List[CheckoutItem], origin: str
    ) -> CheckoutSession:
        raise NotImplementedError

    def get_session_status(self, session_id: str) -> str:
        raise NotImplementedError


def encode_form(params: Any, prefix: Optional[str] = None) -> List[Tuple[str, str]]:
    """Flatten nested dicts/lists into Stripe's bracketed form keys.

    ``{"line_items": [{"quantity": 1}]}`` becomes
    ``[("line_items[0][quantity]", "1")]``. ``None`` values are skipped.
    """
    pairs: List[Tuple[str, str]] = []
    entries = params.items() if isinstance(params, dict) else enumerate(params)
    for key, value in entries:
        name = f"{prefix}[{key}]" if prefix is not None else str(key)
        if isinstance(value, (dict, list, tuple)):
            pairs.extend(encode_form(value, name))
        elif value is None:
            continue
        elif isinstance(value, bool):
            pairs.append((name, "true" if value else "false"))
        else:
            pairs.append((name, str(value)))
    return pairs


def build_line_items(
    items: List[CheckoutItem], currency: str, shipping_amount: int
) -> List[Dict[str, Any]]:
    """One Stripe line item per cart item plus a flat shipping line.

    Amounts are converted to minor units (1 RON = 100 bani).
    """
    line_items: List[Dict[str, Any]] = []
    for item in items:
        product_data: Dict[str, Any] = {"name": item.title}
        if item.author:
            product_data["description"] = f"by {item.author}"
        # Stripe only accepts absolute image URLs
        if item.image_url and item.image_url.startswith(("http://", "https://")):
            product_data["images"] = [item.image_url]
        line_items.append(
            {
                "price_data": {
                    "currency": currency,
                    "product_data": product_data,
                    "unit_amount": int(round(item.price * 100)),
                },
                "quantity": item.quantity,
            }
        )
    line_items.append(
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": "Shipping", "description": "Delivery cost"},
                "unit_amount": shipping_amount,
            },
            "quantity": 1,
        }
    )
    return line_items


class StripeCheckoutGateway(CheckoutGateway):
    def __init__(self, settings: Settings, timeout: float = 10):
        self.settings = settings
        self.timeout = timeout

    def _request(self, method: str, path: str, params: Optional[dict] = None) -> dict:
        if not self.settings.stripe_secret_key:
            raise PaymentError("Payment gateway is not configured")

        url = f"{self.settings.stripe_api_base.rstrip('/')}/{path.lstrip('/')}"
        data = None
        if params is not None:
            data = urllib.parse.urlencode(encode_form(params)).encode("utf-8")
        request = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={
                "Authorization": f"Bearer {self.settings.stripe_secret_key}",
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                body = response.read().decode("utf-8", errors="ignore")
            return json.loads(body)
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            logger.error("Stripe %s %s returned %s: %s", method, path, exc.code, detail)
            raise PaymentError("Payment gateway rejected the request") from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            logger.error("Stripe %s %s failed: %s", method, path, exc)
            raise PaymentError("Payment gateway unavailable") from exc

    def create_session(
        self, amount: float, items: List[CheckoutItem], origin: str
    ) -> CheckoutSession:
        base = origin.rstrip("/")
        params = {
            "payment_method_types": ["card"],
            "line_items": build_line_items(
                items,
                self.settings.checkout_currency,
                self.settings.checkout_shipping_amount,
            ),
            "mode": "payment",
            "success_url": (
                f"{base}/payment-success?session_id={{CHECKOUT_SESSION_ID}}&clear_cart=true"
            ),
            "cancel_url": f"{base}/",
            "metadata": {"order_type": "book_store"},
        }
        data = self._request("POST", "/checkout/sessions", params)
        if not data.get("id"):
            raise PaymentError("Payment gateway returned no session")
        logger.info("Checkout session created: %s (amount %s)", data["id"], amount)
        return CheckoutSession(session_id=data["id"], session_url=data.get("url"))

    def get_session_status(self, session_id: str) -> str:
        quoted = urllib.parse.quote(session_id, safe="")
        data = self._request("GET", f"/checkout/sessions/{quoted}")
        status = data.get("payment_status")
        if not status:
            raise PaymentError("Payment gateway returned no status")
        return status
