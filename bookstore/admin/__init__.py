from .router import router as admin_router  # noqa: F401
