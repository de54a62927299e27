"""
Order endpoints for API v1.

Buyers place and cancel orders; librarians see the orders for their
books and move them from ``pending`` to ``shipped`` to ``delivered``.
Both listings are newest first.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from bookstore_api.app.api.v1.errors import to_http_exception
from bookstore_api.app.core.db import get_database
from bookstore_api.app.core.errors import ServiceError
from bookstore_api.app.schemas.common import InsertResult, UpdateResult
from bookstore_api.app.schemas.order import OrderCreate, OrderStatusUpdate
from bookstore_api.app.services.order_service import OrderService

router = APIRouter()


@router.post("/orders", response_model=InsertResult)
def create_order(order: OrderCreate, db: Database = Depends(get_database)) -> InsertResult:
    try:
        return OrderService(db).create(order)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/my-orders", response_model=List[Dict[str, Any]])
def list_my_orders(email: Optional[str] = Query(None), db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    try:
        return OrderService(db).list_by_buyer(email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.get("/orders/librarian/{email}", response_model=List[Dict[str, Any]])
def list_librarian_orders(email: str, db: Database = Depends(get_database)) -> List[Dict[str, Any]]:
    try:
        return OrderService(db).list_by_librarian(email)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/orders/cancel/{order_id}", response_model=UpdateResult)
def cancel_order(order_id: str, db: Database = Depends(get_database)) -> UpdateResult:
    """Cancel an order.  Delivered orders answer 400."""
    try:
        return OrderService(db).cancel(order_id)
    except ServiceError as e:
        raise to_http_exception(e)


@router.patch("/orders/status/{order_id}", response_model=UpdateResult)
def advance_order(order_id: str, data: OrderStatusUpdate, db: Database = Depends(get_database)) -> UpdateResult:
    """Advance an order to the next status.

    Only ``pending -> shipped`` and ``shipped -> delivered`` are
    accepted; any other request answers 400 and leaves the order as it
    was.
    """
    try:
        return OrderService(db).advance(order_id, data.status)
    except ServiceError as e:
        raise to_http_exception(e)
