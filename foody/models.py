# foody/models.py
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text

from .db import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _food_id() -> str:
    return uuid4().hex


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)


class Food(Base):
    __tablename__ = "foods"
    # opaque string ids: clients only ever echo them back
    id = Column(String, primary_key=True, default=_food_id)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    items = Column(JSON, nullable=False, default=list)  # [{"foodId": str, "quantity": int}]
    total_amount = Column(Float, nullable=False)
    address = Column(Text, nullable=False)
    status = Column(String, default="Pending")
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)
