# foody/client/views.py
"""Explicit data fetches for the home, menu, order history and profile screens.

Each view refreshes on demand and again whenever the session token changes.
A refresh that finishes after a newer one has started is discarded.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .api import ApiError, FoodyApi

logger = logging.getLogger(__name__)


class _View(ABC):
    def __init__(self, api: FoodyApi):
        self.api = api
        self.loading = False
        self.error = ""
        self._generation = 0

    def _begin(self) -> int:
        self._generation += 1
        self.loading = True
        self.error = ""
        return self._generation

    def _current(self, generation: int) -> bool:
        return generation == self._generation

    def _finish(self, generation: int) -> None:
        if self._current(generation):
            self.loading = False

    def _reset(self) -> None:
        pass

    async def set_token(self, token: Optional[str]) -> None:
        # any in-flight refresh now belongs to the previous identity
        self._generation += 1
        self._reset()
        if token:
            self.api.save_token(token)
            await self.refresh()
        else:
            self.api.logout()
            self.loading = False

    @abstractmethod
    async def refresh(self) -> None:
        ...


class MenuView(_View):
    def __init__(self, api: FoodyApi):
        super().__init__(api)
        self.foods: List[Dict[str, Any]] = []

    def _reset(self) -> None:
        self.foods = []

    async def refresh(self) -> None:
        gen = self._begin()
        try:
            foods = await self.api.list_foods()
            if self._current(gen):
                self.foods = foods
        except ApiError as e:
            logger.warning("Failed to load menu: %s", e)
            if self._current(gen):
                self.error = "Failed to load the cosmic menu"
        finally:
            self._finish(gen)


class OrderHistoryView(_View):
    def __init__(self, api: FoodyApi):
        super().__init__(api)
        self.orders: List[Dict[str, Any]] = []

    def _reset(self) -> None:
        self.orders = []

    async def refresh(self) -> None:
        gen = self._begin()
        try:
            orders = await self.api.my_orders()
            if self._current(gen):
                self.orders = orders
        except ApiError as e:
            if self._current(gen):
                self.error = e.message or "Failed to load order history"
        finally:
            self._finish(gen)


def profile_error_message(e: ApiError) -> str:
    if e.status_code is None:
        return "Server not responding"
    if e.status_code == 401:
        return "Please login again"
    if e.status_code == 404:
        return "Profile not found"
    return e.message or "Failed to load profile"


class ProfileView(_View):
    def __init__(self, api: FoodyApi):
        super().__init__(api)
        self.user: Optional[Dict[str, Any]] = None
        self.stats: Optional[Dict[str, Any]] = None

    def _reset(self) -> None:
        self.user = None
        self.stats = None

    async def refresh(self) -> None:
        gen = self._begin()
        try:
            user = await self.api.profile()
            if not self._current(gen):
                return
            self.user = user

            try:
                stats = await self.api.stats()
                if self._current(gen):
                    self.stats = stats
            except ApiError as e:
                logger.warning("Stats not available: %s", e)
        except ApiError as e:
            if self._current(gen):
                self.error = profile_error_message(e)
        finally:
            self._finish(gen)


class HomeView(_View):
    """Dashboard: the profile and the number of orders, fetched together."""

    def __init__(self, api: FoodyApi):
        super().__init__(api)
        self.user: Optional[Dict[str, Any]] = None
        self.orders_count = 0

    def _reset(self) -> None:
        self.user = None
        self.orders_count = 0

    async def refresh(self) -> None:
        gen = self._begin()
        try:
            user, orders = await asyncio.gather(self.api.profile(), self.api.my_orders())
            if self._current(gen):
                self.user = user
                self.orders_count = len(orders)
        except ApiError as e:
            if self._current(gen):
                self.error = e.message or "Failed to load profile data"
        finally:
            self._finish(gen)
