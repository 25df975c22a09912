"""FastAPI dependency providers for the shared collaborators."""

from fastapi import Request

from .storage import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_checkout_gateway(request: Request):
    """Return the payment gateway (a ``CheckoutGateway``) bound to the app."""
    return request.app.state.checkout_gateway
