# foody/users.py
from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .auth import hash_password, verify_password
from .errors import Conflict, NotFound
from .models import Order, User


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def user_to_dict(u: User) -> Dict[str, Any]:
    return {
        "id": u.id,
        "username": u.username,
        "createdAt": _iso(u.created_at),
        "updatedAt": _iso(u.updated_at),
    }


def normalize_username(username: str) -> str:
    return (username or "").strip()


def register_user(db: Session, username: str, password: str) -> User:
    username = normalize_username(username)
    if db.query(User).filter(User.username == username).first():
        raise Conflict("User already exists")

    u = User(username=username, password_hash=hash_password(password))
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    u = db.query(User).filter(User.username == normalize_username(username)).first()
    if not u or not verify_password(password, u.password_hash):
        return None
    return u


def get_profile(db: Session, user_id: int) -> User:
    u = db.get(User, user_id)
    if not u:
        raise NotFound("User not found")
    return u


def get_stats(db: Session, user_id: int) -> Dict[str, Any]:
    count, spent, last = (
        db.query(func.count(Order.id), func.sum(Order.total_amount), func.max(Order.created_at))
        .filter(Order.user_id == user_id)
        .one()
    )
    return {
        "orderCount": int(count or 0),
        "totalSpent": round(float(spent or 0.0), 2),
        "lastOrderAt": _iso(last),
    }
