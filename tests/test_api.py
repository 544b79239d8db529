import pytest

from tests.conftest import auth_headers, days_from_now


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_register_customer_returns_token(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "visitor@example.com",
            "password": "secret123",
            "full_name": "Visitor",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["role"] == "customer"
    assert body["access_token"]
    assert body["application_id"] is None

    me = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert me.json()["email"] == "visitor@example.com"


@pytest.mark.asyncio
async def test_register_stall_owner_waits_for_review(client):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "email": "maker@example.com",
            "password": "secret123",
            "full_name": "Maker",
            "user_type": "stall_owner",
        },
    )

    body = response.json()
    assert response.status_code == 201
    assert body["user"]["role"] == "applicant"
    assert body["access_token"] is None
    assert body["application_id"]


@pytest.mark.asyncio
async def test_login_rejects_bad_password(client):
    await client.post(
        "/api/v1/auth/register",
        json={"email": "visitor@example.com", "password": "secret123", "full_name": "Visitor"},
    )

    ok = await client.post("/api/v1/auth/login", json={"email": "visitor@example.com", "password": "secret123"})
    bad = await client.post("/api/v1/auth/login", json={"email": "visitor@example.com", "password": "wrong1234"})

    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"
    assert bad.status_code == 401


@pytest.mark.asyncio
async def test_booking_requires_authentication(client, stall):
    response = await client.post(
        "/api/v1/bookings",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(1)), "end_date": str(days_from_now(2))},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_customer_cannot_use_owner_routes(client, customer):
    response = await client.get("/api/v1/owner/bookings", headers=auth_headers(customer))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_reversed_dates_are_reported(client, stall, customer):
    response = await client.post(
        "/api/v1/bookings",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(4)), "end_date": str(days_from_now(2))},
        headers=auth_headers(customer),
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "End date should be on or after the start date"


@pytest.mark.asyncio
async def test_public_stall_listing(client, stall):
    response = await client.get("/api/v1/stalls", params={"search": "corner"})

    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [str(stall.id)]


@pytest.mark.asyncio
async def test_book_approve_pay_flow(client, stall, owner, customer, fake_gateway):
    customer_headers = auth_headers(customer)
    owner_headers = auth_headers(owner)

    quote = await client.post(
        "/api/v1/bookings/quote",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(1)), "end_date": str(days_from_now(3))},
    )
    assert quote.json()["amount"] == "300.00"
    assert quote.json()["available"] is True

    created = await client.post(
        "/api/v1/bookings",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(1)), "end_date": str(days_from_now(3))},
        headers=customer_headers,
    )
    assert created.status_code == 201
    booking_id = created.json()["id"]
    assert created.json()["status"] == "pending"
    assert created.json()["days"] == 3

    clash = await client.post(
        "/api/v1/bookings",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(3)), "end_date": str(days_from_now(4))},
        headers=customer_headers,
    )
    assert clash.status_code == 409

    owner_list = await client.get("/api/v1/owner/bookings", headers=owner_headers)
    assert [row["booking"]["id"] for row in owner_list.json()] == [booking_id]

    approved = await client.post(f"/api/v1/owner/bookings/{booking_id}/approve", headers=owner_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    checkout = await client.post(f"/api/v1/payments/bookings/{booking_id}/checkout", headers=customer_headers)
    assert checkout.status_code == 200
    order = checkout.json()
    assert order["key_id"] == "rzp_test_key"
    assert order["amount_minor"] == 30000

    confirmed = await client.post(
        f"/api/v1/payments/bookings/{booking_id}/confirm",
        json={
            "order_id": order["order_id"],
            "payment_id": "pay_42",
            "signature": fake_gateway.sign(order["order_id"], "pay_42"),
        },
        headers=customer_headers,
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "completed"
    assert confirmed.json()["booking_status"] == "approved"

    history = await client.get(f"/api/v1/payments/bookings/{booking_id}", headers=owner_headers)
    assert [p["transaction_reference"] for p in history.json()] == ["pay_42"]

    mine = await client.get("/api/v1/bookings", headers=customer_headers)
    row = mine.json()[0]
    assert row["booking"]["payment_status"] == "completed"
    assert row["can_pay"] is False

    early_feedback = await client.post(
        "/api/v1/feedback",
        json={"booking_id": booking_id, "rating": 5},
        headers=customer_headers,
    )
    assert early_feedback.status_code == 400


@pytest.mark.asyncio
async def test_bad_signature_returns_payment_required(client, stall, customer):
    headers = auth_headers(customer)
    created = await client.post(
        "/api/v1/bookings",
        json={"stall_id": str(stall.id), "start_date": str(days_from_now(1)), "end_date": str(days_from_now(1))},
        headers=headers,
    )
    booking_id = created.json()["id"]
    checkout = await client.post(f"/api/v1/payments/bookings/{booking_id}/checkout", headers=headers)

    response = await client.post(
        f"/api/v1/payments/bookings/{booking_id}/confirm",
        json={"order_id": checkout.json()["order_id"], "payment_id": "pay_1", "signature": "forged"},
        headers=headers,
    )

    assert response.status_code == 402
    booking = await client.get(f"/api/v1/bookings/{booking_id}", headers=headers)
    assert booking.json()["status"] == "cancelled"
    assert booking.json()["payment_status"] == "failed"


@pytest.mark.asyncio
async def test_feedback_endpoint(client, stall, customer, make_booking):
    booking = await make_booking(
        stall, customer, days_from_now(-3), days_from_now(-1), status="approved", payment_status="completed"
    )

    response = await client.post(
        "/api/v1/feedback",
        json={"booking_id": str(booking.id), "rating": 4, "comments": "Good crowd"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 201
    assert response.json()["rating"] == 4

    out_of_range = await client.post(
        "/api/v1/feedback",
        json={"booking_id": str(booking.id), "rating": 9},
        headers=auth_headers(customer),
    )
    assert out_of_range.status_code == 422


@pytest.mark.asyncio
async def test_admin_reviews_application(client, admin):
    registered = await client.post(
        "/api/v1/auth/register",
        json={"email": "maker@example.com", "password": "secret123", "full_name": "Maker", "user_type": "stall_owner"},
    )
    application_id = registered.json()["application_id"]
    headers = auth_headers(admin)

    pending = await client.get("/api/v1/admin/applications", params={"status": "pending"}, headers=headers)
    assert [row["application"]["id"] for row in pending.json()] == [application_id]

    approved = await client.post(f"/api/v1/admin/applications/{application_id}/approve", headers=headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    owners = await client.get("/api/v1/admin/users", params={"role": "stall_owner"}, headers=headers)
    assert [u["email"] for u in owners.json()] == ["maker@example.com"]

    dashboard = await client.get("/api/v1/admin/dashboard", headers=headers)
    assert dashboard.json()["active_owners"] == 1
