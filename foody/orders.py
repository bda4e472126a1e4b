# foody/orders.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from .errors import InvalidOrder
from .menu import find_foods, food_to_dict
from .models import Order

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Pending"


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def order_to_dict(order: Order, items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {
        "id": order.id,
        "userId": order.user_id,
        "items": items if items is not None else list(order.items or []),
        "totalAmount": order.total_amount,
        "address": order.address,
        "status": order.status,
        "createdAt": _iso(order.created_at),
        "updatedAt": _iso(order.updated_at),
    }


def _line_ok(line: Any) -> bool:
    if not isinstance(line, dict):
        return False
    return bool(line.get("foodId")) and line.get("quantity") is not None


def validate_order(items: Optional[Sequence[Dict[str, Any]]], total_amount: Any, address: Optional[str]) -> None:
    """Reject an order request; the three checks share a single message."""
    if not items or not all(_line_ok(line) for line in items):
        raise InvalidOrder()
    if not total_amount:
        raise InvalidOrder()
    if not address:
        raise InvalidOrder()


def place_order(
    db: Session,
    user_id: int,
    items: Optional[Sequence[Dict[str, Any]]],
    total_amount: Any,
    address: Optional[str],
) -> Order:
    """Persist a new order for ``user_id``.

    ``items`` and ``total_amount`` are stored as sent. The total is not
    recomputed from catalog prices and repeated submissions are not
    deduplicated.
    """
    validate_order(items, total_amount, address)

    order = Order(
        user_id=user_id,
        items=[{"foodId": line["foodId"], "quantity": line["quantity"]} for line in items],
        total_amount=total_amount,
        address=address,
        status=DEFAULT_STATUS,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info("Order %s placed by user %s (%d lines)", order.id, user_id, len(order.items))
    return order


def user_orders(db: Session, user_id: int) -> List[Order]:
    return db.query(Order).filter(Order.user_id == user_id).order_by(Order.id).all()


def populate_items(db: Session, orders: Sequence[Order]) -> List[Dict[str, Any]]:
    """Serialize ``orders`` with each ``foodId`` swapped for its food record.

    A reference to a food that no longer exists becomes None.
    """
    food_ids = [line.get("foodId") for o in orders for line in (o.items or [])]
    foods = find_foods(db, food_ids)

    out: List[Dict[str, Any]] = []
    for o in orders:
        items = []
        for line in o.items or []:
            food = foods.get(str(line.get("foodId")))
            items.append(
                {
                    "foodId": food_to_dict(food) if food else None,
                    "quantity": line.get("quantity"),
                }
            )
        out.append(order_to_dict(o, items=items))
    return out


def my_orders(db: Session, user_id: int) -> List[Dict[str, Any]]:
    return populate_items(db, user_orders(db, user_id))
