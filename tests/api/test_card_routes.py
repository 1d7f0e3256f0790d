"""Card holder and admin routes: auth, status codes, error envelopes."""

from datetime import date, timedelta
from decimal import Decimal

from app.db.models.card_model import CardStatus
from tests.api.conftest import auth_header

NEXT_YEAR = (date.today() + timedelta(days=365)).isoformat()


# ------------------ identity ------------------ #

async def test_missing_token_is_rejected(client):
    res = await client.get("/api/v1/cards/")
    assert res.status_code == 401


async def test_garbage_token_is_rejected(client):
    res = await client.get("/api/v1/cards/", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


async def test_admin_routes_require_admin_role(client, owner):
    res = await client.get("/api/v1/admin/cards/", headers=auth_header(owner))
    assert res.status_code == 403


# ------------------ card holder ------------------ #

async def test_list_own_cards_returns_masked_page(client, owner, make_card, stranger):
    make_card(balance="10", number="4111111111111234")
    make_card(owner_id=stranger["id"])

    res = await client.get("/api/v1/cards/", headers=auth_header(owner))

    assert res.status_code == 200
    body = res.json()
    assert body["total_elements"] == 1
    card = body["content"][0]
    assert card["masked_number"] == "**** **** **** 1234"
    assert card["owner_display_name"] == "Alice Owner"
    assert card["status"] == "ACTIVE"


async def test_foreign_card_is_404(client, owner, stranger, make_card):
    card = make_card(owner_id=stranger["id"])

    res = await client.get(f"/api/v1/cards/{card['id']}", headers=auth_header(owner))

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "card_not_found"


async def test_balance_route(client, owner, make_card):
    card = make_card(balance="42.50")

    res = await client.get(f"/api/v1/cards/{card['id']}/balance", headers=auth_header(owner))

    assert res.status_code == 200
    assert Decimal(res.json()["balance"]) == Decimal("42.50")


async def test_transfer_route_and_history(client, owner, make_card, db):
    a = make_card(balance="500", number="4111111111111234")
    b = make_card(balance="300", number="4111111111115678")

    res = await client.post(
        "/api/v1/cards/transfer",
        json={"from_card_id": a["id"], "to_card_id": b["id"], "amount": "100", "description": "test"},
        headers=auth_header(owner),
    )

    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "COMPLETED"
    assert body["from_masked"] == "**** **** **** 1234"
    assert body["to_masked"] == "**** **** **** 5678"
    assert db.cards[a["id"]]["balance"] == Decimal("400")
    assert db.cards[b["id"]]["balance"] == Decimal("400")

    history = await client.get("/api/v1/cards/transfers", headers=auth_header(owner))
    assert history.status_code == 200
    assert history.json()["content"][0]["transaction_id"] == body["transaction_id"]


async def test_insufficient_funds_envelope(client, owner, make_card):
    a = make_card(balance="5")
    b = make_card()

    res = await client.post(
        "/api/v1/cards/transfer",
        json={"from_card_id": a["id"], "to_card_id": b["id"], "amount": "10"},
        headers=auth_header(owner),
    )

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "insufficient_funds"
    assert Decimal(error["details"]["available"]) == Decimal("5")


async def test_transfer_over_ceiling(client, owner, make_card):
    a = make_card(balance="5000000")
    b = make_card()

    res = await client.post(
        "/api/v1/cards/transfer",
        json={"from_card_id": a["id"], "to_card_id": b["id"], "amount": 1000001},
        headers=auth_header(owner),
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "amount_too_large"


async def test_transfer_body_validation(client, owner):
    res = await client.post("/api/v1/cards/transfer", json={"amount": "1"}, headers=auth_header(owner))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"


async def test_block_request_keeps_card_active(client, owner, make_card, db):
    card = make_card()

    res = await client.post(
        f"/api/v1/cards/{card['id']}/block-request", json={"reason": "lost"}, headers=auth_header(owner)
    )

    assert res.status_code == 200
    assert db.cards[card["id"]]["status"] is CardStatus.ACTIVE


# ------------------ admin ------------------ #

async def test_admin_creates_card(client, admin, owner, db):
    res = await client.post(
        "/api/v1/admin/cards/",
        json={"number": "4111111111111111", "expiry_date": NEXT_YEAR, "owner_id": owner["id"]},
        headers=auth_header(admin),
    )

    assert res.status_code == 201
    assert res.json()["status"] == "ACTIVE"
    assert len(db.cards) == 1


async def test_admin_create_duplicate_is_conflict(client, admin, owner, make_card):
    make_card(number="4111111111111111")

    res = await client.post(
        "/api/v1/admin/cards/",
        json={"number": "4111111111111111", "expiry_date": NEXT_YEAR, "owner_id": owner["id"]},
        headers=auth_header(admin),
    )

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "duplicate_card_number"


async def test_admin_block_and_activate(client, admin, make_card):
    card = make_card()

    blocked = await client.post(f"/api/v1/admin/cards/{card['id']}/block", headers=auth_header(admin))
    activated = await client.post(f"/api/v1/admin/cards/{card['id']}/activate", headers=auth_header(admin))

    assert blocked.json()["status"] == "BLOCKED"
    assert activated.json()["status"] == "ACTIVE"


async def test_admin_activate_expired_is_conflict(client, admin, make_card):
    card = make_card(status=CardStatus.BLOCKED, expiry_date=date.today() - timedelta(days=3))

    res = await client.post(f"/api/v1/admin/cards/{card['id']}/activate", headers=auth_header(admin))

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "invalid_state_transition"


async def test_admin_update_with_invalid_status(client, admin, make_card):
    card = make_card()

    res = await client.put(
        f"/api/v1/admin/cards/{card['id']}", json={"status": "frozen"}, headers=auth_header(admin)
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "invalid_status"


async def test_admin_delete(client, admin, make_card, db):
    card = make_card()

    res = await client.delete(f"/api/v1/admin/cards/{card['id']}", headers=auth_header(admin))

    assert res.status_code == 204
    assert card["id"] not in db.cards


async def test_admin_list_by_status_and_filter(client, admin, owner, make_card):
    make_card(status=CardStatus.BLOCKED)
    make_card()

    by_status = await client.get("/api/v1/admin/cards/status/BLOCKED", headers=auth_header(admin))
    filtered = await client.get(
        "/api/v1/admin/cards/", params={"owner_id": owner["id"], "status": "ACTIVE"}, headers=auth_header(admin)
    )

    assert len(by_status.json()) == 1
    assert filtered.json()["total_elements"] == 1
