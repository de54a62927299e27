"""
Top-level package for the Library Bookstore API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``bookstore_api.app.main:app``.
"""

__all__ = []
