"""
Service layer abstraction.

Each service encapsulates the business logic for one domain and is
constructed with the database handle, so endpoints and tests decide
which store it talks to.  Services raise the errors defined in
``core.errors``; they know nothing about HTTP.
"""
