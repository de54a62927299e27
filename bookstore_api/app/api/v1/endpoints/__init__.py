"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for one domain
(users, books, wishlist, orders, ratings).  The routers are aggregated
in ``router.py`` at the package level.
"""
