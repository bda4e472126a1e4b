from foody.models import User


def test_profile(client, headers):
    res = client.get("/users/profile", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["username"] == "alice"
    assert "password_hash" not in body
    assert body["createdAt"]


def test_profile_requires_token(client):
    res = client.get("/users/profile")
    assert res.status_code == 401


def test_profile_of_deleted_user(client, headers, db):
    db.query(User).delete()
    db.commit()
    res = client.get("/users/profile", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "User not found"


def test_stats(client, headers):
    assert client.get("/users/stats", headers=headers).json() == {
        "orderCount": 0,
        "totalSpent": 0.0,
        "lastOrderAt": None,
    }

    for total in (20, 6.5):
        client.post(
            "/orders",
            json={"items": [{"foodId": "f1", "quantity": 1}], "totalAmount": total, "address": "1 Main St"},
            headers=headers,
        )

    stats = client.get("/users/stats", headers=headers).json()
    assert stats["orderCount"] == 2
    assert stats["totalSpent"] == 26.5
    assert stats["lastOrderAt"]


def test_unknown_route_uses_message_body(client):
    res = client.get("/nowhere")
    assert res.status_code == 404
    assert res.json() == {"message": "Not Found"}
