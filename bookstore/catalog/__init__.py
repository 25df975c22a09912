"""
Catalog package: the product query pipeline shared by the storefront
and the back office.

``query.py`` filters, searches, sorts and paginates the in-memory
product collection and computes stock statistics; ``router.py`` exposes
the public listing and the admin listing over HTTP.
"""

from .router import router as catalog_router  # noqa: F401
