import asyncio

import httpx
import pytest

from foody.client.api import ApiError, FoodyApi
from foody.client.cart import CartStore
from foody.client.checkout import CheckoutFlow, CheckoutState
from foody.client.storage import LocalStorage
from foody.main import app


def _api(storage):
    return FoodyApi("http://foody.test", storage=storage, transport=httpx.ASGITransport(app=app))


def test_full_session_against_api(tmp_path, foods):
    storage = LocalStorage(tmp_path / "storage.json")
    api = _api(storage)

    async def scenario():
        assert await api.register("alice", "pw1") == "User registered successfully"
        with pytest.raises(ApiError) as exc:
            await api.register("alice", "pw1")
        assert exc.value.status_code == 400
        assert exc.value.message == "User already exists"

        with pytest.raises(ApiError) as exc:
            await api.login("alice", "wrong")
        assert exc.value.message == "Invalid username or password"
        assert api.token is None

        await api.login("alice", "pw1")
        assert api.token

        menu = await api.list_foods()
        cart = CartStore(storage)
        for food in menu:
            if food["name"] in {"Pizza", "Burger"}:
                cart.add(food)
        cart.add(next(f for f in menu if f["name"] == "Pizza"))

        flow = CheckoutFlow(cart, api)
        assert await flow.submit("1 Main St") is CheckoutState.SUCCESS
        assert flow.last_order["totalAmount"] == 26
        assert flow.last_order["status"] == "Pending"

        return await api.my_orders()

    orders = asyncio.run(scenario())
    assert len(orders) == 1
    names = sorted((line["foodId"]["name"], line["quantity"]) for line in orders[0]["items"])
    assert names == [("Burger", 1), ("Pizza", 2)]

    # a new session against the same storage keeps the token and the (now empty) cart
    assert LocalStorage(tmp_path / "storage.json").get_item("token").value == api.token
    assert CartStore(storage).count == 0


def test_requests_without_token_are_unauthorized(tmp_path):
    api = _api(LocalStorage(tmp_path / "storage.json"))
    with pytest.raises(ApiError) as exc:
        asyncio.run(api.my_orders())
    assert exc.value.status_code == 401


def test_logout_forgets_token(tmp_path):
    storage = LocalStorage(tmp_path / "storage.json")
    storage.set_item("token", "abc")
    api = _api(storage)
    api.logout()
    assert api.token is None


def test_transport_failure_has_no_status():
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    api = FoodyApi("http://foody.test", transport=httpx.MockTransport(boom))
    with pytest.raises(ApiError) as exc:
        asyncio.run(api.list_foods())
    assert exc.value.status_code is None
    assert exc.value.message is None
