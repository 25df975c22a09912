from .router import router as cart_router  # noqa: F401
