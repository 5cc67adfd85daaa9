from datetime import datetime, timedelta, timezone

from sqlalchemy import update

from app.core.auth import User

from app.core.security import create_access_token
from app.services.provisioning import DEFAULT_CATEGORIES
from conftest import PASSWORD


async def register(client, email: str, password: str = PASSWORD) -> dict:
    response = await client.post("/api/v1/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


async def bearer(client, email: str, password: str = PASSWORD) -> dict:
    response = await client.post("/api/v1/auth/token", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def expense_body(category_id: str, **extra) -> dict:
    body = {
        "amount": 25.99,
        "description": "Lunch",
        "category_id": category_id,
        "date": (datetime.utcnow() - timedelta(days=1)).isoformat(),
    }
    body.update(extra)
    return body


async def test_requests_without_credentials_are_rejected(client) -> None:
    response = await client.get("/api/v1/expenses")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}
    assert response.headers["www-authenticate"] == "Bearer"


async def test_garbage_bearer_token_is_rejected(client) -> None:
    response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_token_for_unknown_user_is_rejected(client) -> None:
    token = create_access_token("8d0f6e02-5b4e-4a51-9d7e-1f2a3b4c5d6e")
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_registration_seeds_categories_and_token_works(client) -> None:
    user = await register(client, "dana@example.com")
    headers = await bearer(client, "dana@example.com")

    me = await client.get("/api/v1/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]

    categories = await client.get("/api/v1/categories", headers=headers)
    assert categories.status_code == 200
    assert len(categories.json()) == len(DEFAULT_CATEGORIES)


async def test_wrong_password_gets_401(client) -> None:
    await register(client, "dana@example.com")
    response = await client.post("/api/v1/auth/token", json={"email": "dana@example.com", "password": "nope"})
    assert response.status_code == 401


async def test_fastapi_users_jwt_login_is_accepted_too(client) -> None:
    await register(client, "dana@example.com")
    login = await client.post("/api/v1/auth/jwt/login", data={"username": "dana@example.com", "password": PASSWORD})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200


async def test_session_login_then_logout(client) -> None:
    await register(client, "erin@example.com")

    login = await client.post(
        "/api/v1/auth/session/login", data={"username": "erin@example.com", "password": PASSWORD}
    )
    assert login.status_code == 200
    assert login.json()["email"] == "erin@example.com"

    me = await client.get("/api/v1/users/me")
    assert me.status_code == 200

    await client.post("/api/v1/auth/session/logout")
    assert (await client.get("/api/v1/users/me")).status_code == 401


async def test_expense_lifecycle_and_status_mapping(client) -> None:
    await register(client, "alice@example.com")
    await register(client, "bob@example.com")
    alice = await bearer(client, "alice@example.com")
    bob = await bearer(client, "bob@example.com")

    category_id = (await client.get("/api/v1/categories", headers=alice)).json()[0]["id"]
    created = await client.post("/api/v1/expenses", json=expense_body(category_id), headers=alice)
    assert created.status_code == 201
    expense = created.json()
    assert expense["amount"] == 25.99

    assert (await client.get(f"/api/v1/expenses/{expense['id']}", headers=bob)).status_code == 404
    assert (await client.get(f"/api/v1/expenses/{expense['id']}", headers=alice)).status_code == 200

    listing = await client.get("/api/v1/expenses", params={"limit": 5}, headers=alice)
    assert listing.status_code == 200
    assert listing.json()["pagination"] == {"page": 1, "limit": 5, "total": 1, "total_pages": 1}

    # Bob cannot file an expense under Alice's category
    stolen = await client.post("/api/v1/expenses", json=expense_body(category_id), headers=bob)
    assert stolen.status_code == 400

    deleted = await client.delete(f"/api/v1/expenses/{expense['id']}", headers=alice)
    assert deleted.status_code == 204


async def test_viewer_gets_403_on_team_expense(client) -> None:
    await register(client, "alice@example.com")
    await register(client, "bob@example.com")
    alice = await bearer(client, "alice@example.com")
    bob = await bearer(client, "bob@example.com")

    team = (await client.post("/api/v1/teams", json={"name": "Vacation Fund"}, headers=alice)).json()
    assert team["role"] == "ADMIN"
    invited = await client.post(f"/api/v1/teams/{team['id']}/members", json={"email": "bob@example.com"}, headers=alice)
    assert invited.status_code == 201
    assert invited.json()["role"] == "VIEWER"

    team_categories = await client.get("/api/v1/categories", params={"team_id": team["id"]}, headers=alice)
    category_id = team_categories.json()[0]["id"]
    expense = (await client.post(
        "/api/v1/expenses", json=expense_body(category_id, team_id=team["id"]), headers=alice
    )).json()

    assert (await client.patch(f"/api/v1/expenses/{expense['id']}", json={"amount": 10}, headers=bob)).status_code == 403
    assert (await client.get(f"/api/v1/expenses/{expense['id']}", headers=bob)).status_code == 200

    denied = await client.post(
        "/api/v1/expenses", json=expense_body(category_id, team_id=team["id"]), headers=bob
    )
    assert denied.status_code == 403


async def test_invalid_input_is_a_422(client) -> None:
    await register(client, "alice@example.com")
    alice = await bearer(client, "alice@example.com")
    category_id = (await client.get("/api/v1/categories", headers=alice)).json()[0]["id"]

    zero = await client.post("/api/v1/expenses", json=expense_body(category_id, amount=0), headers=alice)
    assert zero.status_code == 422

    future = expense_body(category_id, date=(datetime.utcnow() + timedelta(days=3)).isoformat())
    assert (await client.post("/api/v1/expenses", json=future, headers=alice)).status_code == 422

    bad_page = await client.get("/api/v1/expenses", params={"limit": 500}, headers=alice)
    assert bad_page.status_code == 422


async def test_user_can_delete_own_account(client) -> None:
    await register(client, "alice@example.com")
    alice = await bearer(client, "alice@example.com")

    assert (await client.delete("/api/v1/users/me", headers=alice)).status_code == 204
    assert (await client.get("/api/v1/users/me", headers=alice)).status_code == 401


async def test_session_takes_precedence_over_bearer_token(client) -> None:
    await register(client, "alice@example.com")
    await register(client, "bob@example.com")
    bob = await bearer(client, "bob@example.com")

    login = await client.post(
        "/api/v1/auth/session/login", data={"username": "alice@example.com", "password": PASSWORD}
    )
    assert login.status_code == 200

    me = await client.get("/api/v1/users/me", headers=bob)
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"


async def test_session_of_deactivated_user_falls_back_to_bearer_token(client, session_factory) -> None:
    await register(client, "alice@example.com")
    await register(client, "bob@example.com")
    bob = await bearer(client, "bob@example.com")
    await client.post("/api/v1/auth/session/login", data={"username": "alice@example.com", "password": PASSWORD})

    async with session_factory() as session:
        await session.execute(update(User).where(User.email == "alice@example.com").values(is_active=False))
        await session.commit()

    assert (await client.get("/api/v1/users/me")).status_code == 401

    me = await client.get("/api/v1/users/me", headers=bob)
    assert me.status_code == 200
    assert me.json()["email"] == "bob@example.com"


async def test_expense_summary_normalizes_timezone_aware_bounds(client) -> None:
    await register(client, "alice@example.com")
    alice = await bearer(client, "alice@example.com")
    category_id = (await client.get("/api/v1/categories", headers=alice)).json()[0]["id"]

    spent_at = datetime.utcnow().replace(microsecond=0) - timedelta(days=1)
    created = await client.post(
        "/api/v1/expenses", json=expense_body(category_id, date=spent_at.isoformat()), headers=alice
    )
    assert created.status_code == 201

    mixed = await client.get(
        "/api/v1/expenses/summary",
        params={
            "start_date": (spent_at - timedelta(days=1)).isoformat() + "Z",
            "end_date": datetime.utcnow().isoformat(),
        },
        headers=alice,
    )
    assert mixed.status_code == 200, mixed.text
    assert mixed.json()["count"] == 1
    assert mixed.json()["total"] == 25.99

    # 3h after the expense at UTC+5 is 2h before it in UTC
    plus_five = timezone(timedelta(hours=5))
    early_end = (spent_at + timedelta(hours=3)).replace(tzinfo=plus_five)
    excluded = await client.get(
        "/api/v1/expenses/summary", params={"end_date": early_end.isoformat()}, headers=alice
    )
    assert excluded.status_code == 200
    assert excluded.json()["count"] == 0

    inverted = await client.get(
        "/api/v1/expenses/summary",
        params={"start_date": datetime.utcnow().isoformat() + "Z", "end_date": spent_at.isoformat()},
        headers=alice,
    )
    assert inverted.status_code == 400
