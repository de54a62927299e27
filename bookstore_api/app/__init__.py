"""
Application package.

The project is organised by layer: ``core`` (configuration, logging,
database and security helpers), ``schemas`` (request/response models),
``services`` (business logic per domain) and ``api`` (versioned
routers).  Each domain (users, books, wishlist, orders, ratings) has a
module in each layer.
"""

from .main import app  # noqa: F401
