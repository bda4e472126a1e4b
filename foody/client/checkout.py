# foody/client/checkout.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from .api import ApiError
from .cart import CartStore

logger = logging.getLogger(__name__)

ADDRESS_REQUIRED = "Please enter a valid delivery address"
ORDER_FAILED = "Failed to place order. Please try again."


class CheckoutState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class CheckoutFlow:
    """Turns the cart into an order.

    idle -> submitting -> success | failed. A failed submission is reported
    through the return value and ``error``, after which the flow is idle
    again. Another ``submit`` may follow either outcome. Whatever goes wrong,
    the flow never stays in submitting.
    """

    def __init__(self, cart: CartStore, api):
        self.cart = cart
        self.api = api
        self.state = CheckoutState.IDLE
        self.address = ""
        self.error = ""
        self.last_order: Optional[Dict[str, Any]] = None

    @property
    def loading(self) -> bool:
        return self.state is CheckoutState.SUBMITTING

    async def submit(self, address: Optional[str] = None) -> CheckoutState:
        if self.loading:
            return self.state
        if address is not None:
            self.address = address

        if not self.address.strip():
            self.error = ADDRESS_REQUIRED
            self.state = CheckoutState.IDLE
            return self.state

        self.error = ""
        self.state = CheckoutState.SUBMITTING
        payload = self.cart.to_order_request(self.address)

        order = None
        try:
            order = await self.api.place_order(payload)
        except ApiError as e:
            logger.warning("Order placement failed (%s): %s", e.status_code, e.message)
            self.error = e.message or ORDER_FAILED
            self.state = CheckoutState.IDLE
            return CheckoutState.FAILED
        finally:
            if order is None and self.state is CheckoutState.SUBMITTING:
                # unexpected error escaping place_order
                self.error = ORDER_FAILED
                self.state = CheckoutState.IDLE

        self.last_order = order
        self.cart.clear()
        self.address = ""
        self.state = CheckoutState.SUCCESS
        return self.state
