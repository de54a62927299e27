"""
Top-level router for version 1 of the API.

This router aggregates the domain routers.  Each domain router defines
its full paths internally because several of them serve more than one
top-level path (``/books`` and ``/my-books``, ``/orders`` and
``/my-orders``).
"""

from fastapi import APIRouter

from .endpoints import books, info, orders, ratings, users, wishlist

router = APIRouter()

router.include_router(info.router, tags=["info"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(wishlist.router, prefix="/wishlist", tags=["wishlist"])
router.include_router(books.router, tags=["books"])
router.include_router(orders.router, tags=["orders"])
router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
