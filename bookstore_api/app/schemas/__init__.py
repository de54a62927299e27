"""
Pydantic schema definitions for API payloads.

Each domain (users, books, wishlist, orders, ratings) defines its own
models for request and response bodies.  Documents themselves are
schema-less; the request models only pin down the fields the services
act on and let everything else through.
"""
