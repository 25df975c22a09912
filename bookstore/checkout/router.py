"""
Route definitions for checkout.

Endpoints:
- POST /api/create-checkout-session            : {amount, cartItems?} -> session id/url
- GET  /api/check-payment-status/{session_id}  : payment status of a session
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request

from ..config import Settings, get_settings
from ..deps import get_checkout_gateway, get_store
from ..storage import DocumentStore
from . import service


router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/create-checkout-session")
def create_checkout_session(
    request: Request,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    store: DocumentStore = Depends(get_store),
    gateway=Depends(get_checkout_gateway),
    settings: Settings = Depends(get_settings),
):
    payload = payload or {}
    origin = request.headers.get("origin") or settings.frontend_url
    session = service.create_checkout_session(
        gateway, store, payload.get("amount"), payload.get("cartItems"), origin
    )
    return {"success": True, "sessionId": session.session_id, "sessionUrl": session.session_url}


@router.get("/check-payment-status/{session_id}")
def check_payment_status(session_id: str, gateway=Depends(get_checkout_gateway)):
    status = service.check_payment_status(gateway, session_id)
    return {"success": True, "paymentStatus": status}
