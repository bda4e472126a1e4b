# foody/client/cart.py
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from .storage import StorageResult

logger = logging.getLogger(__name__)

CART_KEY = "cart"
MIN_QTY = 1
MAX_QTY = 99

Listener = Callable[[List["CartLine"]], None]


@dataclass
class CartLine:
    id: str
    name: str
    price: float
    quantity: int = 1
    description: Optional[str] = None
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_item(cls, item: Mapping[str, Any], quantity: int = 1) -> "CartLine":
        return cls(
            id=str(item["id"]),
            name=str(item.get("name", "Item")),
            price=float(item.get("price", 0.0) or 0.0),
            quantity=quantity,
            description=item.get("description"),
            image=item.get("image"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def clamp_quantity(q: int) -> int:
    return max(MIN_QTY, min(MAX_QTY, int(q)))


def load_cart(raw: Optional[str]) -> List[CartLine]:
    """Parse a stored cart snapshot.

    Repeated ids are merged into one line. Raises ValueError on anything
    malformed, including quantities below 1.
    """
    if not raw:
        return []
    try:
        v = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"cart snapshot is not JSON: {e}") from e
    if not isinstance(v, list):
        raise ValueError("cart snapshot is not a list")

    lines: Dict[str, CartLine] = {}
    for x in v:
        if not isinstance(x, dict) or "id" not in x:
            raise ValueError(f"bad cart line: {x!r}")
        qty = int(x.get("quantity", 1))
        if qty < MIN_QTY:
            raise ValueError(f"bad cart quantity: {x!r}")

        line = CartLine.from_item(x, quantity=qty)
        if line.id in lines:
            lines[line.id].quantity += qty
        else:
            lines[line.id] = line
    return list(lines.values())


def dump_cart(cart: List[CartLine]) -> str:
    return json.dumps([line.to_dict() for line in cart], ensure_ascii=False)


class CartStore:
    """Client-side cart, one line per food id, saved after every change.

    The stored snapshot is read lazily on first access. A missing or broken
    snapshot gives an empty cart, and a failed save leaves the in-memory
    cart as the source of truth; both are only logged.
    """

    def __init__(self, storage, key: str = CART_KEY):
        self._storage = storage
        self._key = key
        self._lines: Optional[List[CartLine]] = None
        self._listeners: List[Listener] = []

    # -------------------
    # Loading / saving
    # -------------------
    def _ensure_loaded(self) -> List[CartLine]:
        if self._lines is None:
            self._lines = self._restore()
        return self._lines

    def _restore(self) -> List[CartLine]:
        result: StorageResult = self._storage.get_item(self._key)
        if not result.ok:
            logger.warning("Failed to read cart from storage: %s", result.error)
            return []
        try:
            return load_cart(result.value)
        except (ValueError, TypeError) as e:
            logger.warning("Failed to parse cart from storage: %s", e)
            return []

    def _persist(self) -> None:
        result: StorageResult = self._storage.set_item(self._key, dump_cart(self._ensure_loaded()))
        if not result.ok:
            logger.warning("Failed to save cart to storage: %s", result.error)

    def _changed(self) -> None:
        self._persist()
        snapshot = self.lines
        for listener in list(self._listeners):
            listener(snapshot)

    # -------------------
    # Reads
    # -------------------
    @property
    def lines(self) -> List[CartLine]:
        return [CartLine(**line.to_dict()) for line in self._ensure_loaded()]

    @property
    def count(self) -> int:
        return len(self._ensure_loaded())

    def get(self, item_id: str) -> Optional[CartLine]:
        for line in self._ensure_loaded():
            if line.id == str(item_id):
                return line
        return None

    def total(self) -> float:
        return sum(line.line_total for line in self._ensure_loaded())

    # -------------------
    # Mutations
    # -------------------
    def add(self, item: Mapping[str, Any]) -> CartLine:
        line = self.get(str(item["id"]))
        if line:
            line.quantity += 1
        else:
            line = CartLine.from_item(item)
            self._ensure_loaded().append(line)
        self._changed()
        return line

    def remove(self, item_id: str) -> None:
        cart = self._ensure_loaded()
        kept = [line for line in cart if line.id != str(item_id)]
        if len(kept) == len(cart):
            return
        self._lines = kept
        self._changed()

    def set_quantity(self, item_id: str, quantity: int) -> None:
        if quantity < MIN_QTY:
            return
        line = self.get(item_id)
        if not line:
            return
        line.quantity = int(quantity)
        self._changed()

    def clear(self) -> None:
        self._lines = []
        self._changed()

    # -------------------
    # Notifications
    # -------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def to_order_request(self, address: str) -> Dict[str, Any]:
        return {
            "items": [{"foodId": line.id, "quantity": int(line.quantity)} for line in self._ensure_loaded()],
            "totalAmount": round(self.total(), 2),
            "address": address.strip(),
        }
