import base64
import hashlib
import hmac
import json
from decimal import Decimal

import httpx
import pytest
import respx

from stallbook.core.exceptions import GatewayError, GatewayUnconfigured
from stallbook.gateways.razorpay import RazorpayGateway, compute_signature
from stallbook.services.gateway_service import GatewayService

BASE_URL = "https://api.razorpay.test/v1/"
ORDERS_URL = "https://api.razorpay.test/v1/orders"


def make_gateway() -> RazorpayGateway:
    return RazorpayGateway(key_id="rzp_test_key", key_secret="secret", base_url=BASE_URL, timeout=5)


def test_signature_is_hmac_sha256_of_order_and_payment():
    expected = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()
    assert compute_signature("secret", "order_1", "pay_1") == expected


def test_verify_signature_accepts_matching_signature_in_any_case():
    gateway = make_gateway()
    signature = compute_signature("secret", "order_1", "pay_1")

    assert gateway.verify_signature("order_1", "pay_1", signature)
    assert gateway.verify_signature("order_1", "pay_1", signature.upper())


def test_verify_signature_rejects_mismatch_and_empty_values():
    gateway = make_gateway()
    signature = compute_signature("secret", "order_1", "pay_1")

    assert not gateway.verify_signature("order_1", "pay_2", signature)
    assert not gateway.verify_signature("order_1", "pay_1", compute_signature("other", "order_1", "pay_1"))
    assert not gateway.verify_signature("", "pay_1", signature)
    assert not gateway.verify_signature("order_1", "pay_1", "")
    assert not gateway.verify_signature("order_1", "pay_1", "zzz-not-hex-é")


def test_verify_signature_rejects_padded_signature():
    gateway = make_gateway()
    signature = compute_signature("secret", "order_1", "pay_1")

    assert not gateway.verify_signature("order_1", "pay_1", f" {signature} ")
    assert not gateway.verify_signature("order_1", "pay_1", signature + "\n")


@pytest.mark.asyncio
@respx.mock
async def test_create_order_posts_minor_units_with_basic_auth():
    route = respx.post(ORDERS_URL).respond(
        200,
        json={"id": "order_ABC", "amount": 30000, "currency": "INR", "receipt": "BK-1", "status": "created"},
    )

    order = await make_gateway().create_order(30000, "INR", "BK-1")

    assert order.order_id == "order_ABC"
    assert order.amount == Decimal("300.00")
    assert order.currency == "INR"
    assert order.receipt == "BK-1"

    request = route.calls[0].request
    assert json.loads(request.content) == {
        "amount": 30000,
        "currency": "INR",
        "receipt": "BK-1",
        "payment_capture": 1,
    }
    expected_auth = base64.b64encode(b"rzp_test_key:secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"


@pytest.mark.asyncio
@respx.mock
async def test_create_order_raises_gateway_error_on_rejection():
    respx.post(ORDERS_URL).respond(400, json={"error": {"description": "bad amount"}})

    with pytest.raises(GatewayError):
        await make_gateway().create_order(0, "INR", "BK-1")


@pytest.mark.asyncio
@respx.mock
async def test_create_order_raises_gateway_error_when_unreachable():
    respx.post(ORDERS_URL).mock(side_effect=httpx.ConnectError)

    with pytest.raises(GatewayError):
        await make_gateway().create_order(30000, "INR", "BK-1")


@pytest.mark.asyncio
@respx.mock
async def test_create_order_requires_order_id():
    respx.post(ORDERS_URL).respond(200, json={"amount": 30000})

    with pytest.raises(GatewayError):
        await make_gateway().create_order(30000, "INR", "BK-1")


def test_gateway_service_without_credentials_is_unconfigured(monkeypatch):
    from stallbook.config import settings

    monkeypatch.setattr(settings, "razorpay_key_id", None)
    monkeypatch.setattr(settings, "razorpay_key_secret", None)
    service = GatewayService()

    with pytest.raises(GatewayUnconfigured):
        service.verify_signature("order_1", "pay_1", "sig")
    with pytest.raises(GatewayUnconfigured):
        _ = service.public_key


def test_gateway_service_builds_razorpay_from_settings(monkeypatch):
    from stallbook.config import settings

    monkeypatch.setattr(settings, "razorpay_key_id", "rzp_live_key")
    monkeypatch.setattr(settings, "razorpay_key_secret", "secret")
    service = GatewayService()

    assert service.public_key == "rzp_live_key"
    assert service.verify_signature("order_1", "pay_1", compute_signature("secret", "order_1", "pay_1"))
