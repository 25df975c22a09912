# bookstore/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .admin import admin_router
from .cart import cart_router
from .catalog import catalog_router
from .checkout import checkout_router
from .checkout.gateway import StripeCheckoutGateway
from .config import get_settings
from .errors import BookstoreError
from .storage import JsonDocumentStore


settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Book Store API",
    description=(
        "Catalogue, shared cart, back-office product management and "
        "Stripe checkout for an online bookstore."
    ),
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.store = JsonDocumentStore(settings.data_dir)
app.state.checkout_gateway = StripeCheckoutGateway(settings)

app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(admin_router)
app.include_router(checkout_router)


@app.exception_handler(BookstoreError)
def handle_bookstore_error(request: Request, exc: BookstoreError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def handle_request_validation_error(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"][1:]) or str(err["loc"][0]) for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request", "fields": fields},
    )


@app.exception_handler(StarletteHTTPException)
def handle_http_error(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": message})


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


@app.get("/")
def api_info():
    return {
        "message": "Book Store API",
        "description": "REST API for the bookstore catalogue",
        "version": app.version,
        "endpoints": [
            "GET /api/products",
            "GET /api/cart",
            "POST /api/cart",
            "DELETE /api/cart/{productId}",
            "POST /api/clear-cart",
            "POST /api/admin/login",
            "GET /api/admin/products",
            "POST /api/create-checkout-session",
            "GET /api/check-payment-status/{sessionId}",
        ],
    }


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
