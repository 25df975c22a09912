from .router import router as checkout_router  # noqa: F401
