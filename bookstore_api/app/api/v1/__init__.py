"""
Version 1 of the API.

This subpackage bundles the endpoints used by the current web client.
Breaking changes belong in a new version subpackage.
"""
