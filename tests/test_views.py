import asyncio

import pytest

from foody.client.api import ApiError
from foody.client.storage import MemoryStorage
from foody.client.views import HomeView, MenuView, OrderHistoryView, ProfileView, _View, profile_error_message


class FakeApi:
    def __init__(self):
        self.storage = MemoryStorage()
        self.orders = [{"id": 1}]
        self.gate = None
        self.fail = {}

    def save_token(self, token):
        self.storage.set_item("token", token)

    def logout(self):
        self.storage.remove_item("token")

    async def _maybe(self, name, value):
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail:
            raise self.fail[name]
        return value

    async def list_foods(self):
        return await self._maybe("foods", [{"id": "p1", "name": "Pizza", "price": 10}])

    async def my_orders(self):
        return await self._maybe("orders", list(self.orders))

    async def profile(self):
        return await self._maybe("profile", {"id": 1, "username": "alice"})

    async def stats(self):
        return await self._maybe("stats", {"orderCount": 1})


def test_menu_view():
    api = FakeApi()
    view = MenuView(api)
    asyncio.run(view.refresh())
    assert view.foods[0]["name"] == "Pizza"
    assert not view.loading

    api.fail["foods"] = ApiError(500, "Failed to fetch foods")
    asyncio.run(view.refresh())
    assert view.error == "Failed to load the cosmic menu"


def test_history_view_messages():
    api = FakeApi()
    view = OrderHistoryView(api)
    api.fail["orders"] = ApiError(401, "Invalid token")
    asyncio.run(view.refresh())
    assert view.error == "Invalid token"

    api.fail["orders"] = ApiError(None)
    asyncio.run(view.refresh())
    assert view.error == "Failed to load order history"

    del api.fail["orders"]
    asyncio.run(view.refresh())
    assert view.error == ""
    assert view.orders == [{"id": 1}]


def test_token_change_refetches():
    api = FakeApi()
    view = OrderHistoryView(api)
    asyncio.run(view.set_token("t1"))
    assert api.storage.get_item("token").value == "t1"
    assert view.orders == [{"id": 1}]

    asyncio.run(view.set_token(None))
    assert view.orders == []
    assert api.storage.get_item("token").value is None


def test_superseded_refresh_is_discarded():
    async def scenario():
        api = FakeApi()
        api.gate = asyncio.Event()
        view = OrderHistoryView(api)

        stale = asyncio.create_task(view.refresh())
        await asyncio.sleep(0)
        assert view.loading

        await view.set_token(None)
        api.gate.set()
        await stale
        return view

    view = asyncio.run(scenario())
    assert view.orders == []
    assert not view.loading


def test_profile_view_loads_stats():
    api = FakeApi()
    view = ProfileView(api)
    asyncio.run(view.refresh())
    assert view.user["username"] == "alice"
    assert view.stats == {"orderCount": 1}


def test_profile_view_tolerates_missing_stats(caplog):
    api = FakeApi()
    api.fail["stats"] = ApiError(404, "Not Found")
    view = ProfileView(api)
    asyncio.run(view.refresh())
    assert view.user is not None
    assert view.stats is None
    assert view.error == ""
    assert "Stats not available" in caplog.text


def test_profile_error_messages():
    assert profile_error_message(ApiError(401, "Invalid token")) == "Please login again"
    assert profile_error_message(ApiError(404, "User not found")) == "Profile not found"
    assert profile_error_message(ApiError(500, "Boom")) == "Boom"
    assert profile_error_message(ApiError(500)) == "Failed to load profile"
    assert profile_error_message(ApiError(None)) == "Server not responding"

    api = FakeApi()
    api.fail["profile"] = ApiError(401, "Invalid token")
    view = ProfileView(api)
    asyncio.run(view.refresh())
    assert view.error == "Please login again"
    assert view.user is None


def test_home_view_loads_profile_and_order_count():
    api = FakeApi()
    api.orders = [{"id": 1}, {"id": 2}]
    view = HomeView(api)
    asyncio.run(view.refresh())
    assert view.user["username"] == "alice"
    assert view.orders_count == 2
    assert view.error == ""
    assert not view.loading


def test_home_view_errors():
    api = FakeApi()
    api.fail["orders"] = ApiError(401, "Invalid token")
    view = HomeView(api)
    asyncio.run(view.refresh())
    assert view.error == "Invalid token"
    assert view.user is None
    assert view.orders_count == 0

    api.fail = {"profile": ApiError(None)}
    asyncio.run(view.refresh())
    assert view.error == "Failed to load profile data"

    asyncio.run(view.set_token(None))
    assert view.user is None
    assert view.orders_count == 0


def test_view_base_is_abstract():
    with pytest.raises(TypeError):
        _View(FakeApi())
