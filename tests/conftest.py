"""Shared fixtures for the refund sync test suite."""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from typing import Any

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

import httpx
import pytest

from refund_sync.config.settings import Settings
from refund_sync.handlers.webhook import WebhookHandler
from refund_sync.integrations.affiliate import AffiliateClient
from refund_sync.models.charge import Charge
from refund_sync.services.refund_service import RefundService

WEBHOOK_SECRET = "whsec_test_secret"
SHOPMY_KEY = "shopmy-test-key"


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Compute a valid Stripe-Signature header for `payload`."""
    ts = timestamp or int(time.time())
    signed_payload = f"{ts}.".encode() + payload
    sig = hmac.new(secret.encode(), signed_payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def make_event(event_type: str, obj: dict[str, Any], event_id: str = "evt_test_1") -> bytes:
    """Serialize a Stripe-shaped event the way Stripe sends it."""
    event = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "created": int(time.time()),
        "livemode": False,
        "data": {"object": obj},
    }
    return json.dumps(event).encode()


def make_charge(**overrides: Any) -> dict[str, Any]:
    charge = {
        "id": "ch_abc",
        "object": "charge",
        "amount": 1000,
        "amount_refunded": 0,
        "currency": "usd",
        "metadata": {},
    }
    charge.update(overrides)
    return charge


class FakeGateway:
    """Stands in for StripeGateway; serves charges from a dict."""

    def __init__(self, charges: dict[str, dict] | None = None, error: Exception | None = None):
        self.charges = charges or {}
        self.error = error
        self.calls: list[str] = []

    def retrieve_charge(self, charge_id: str) -> Charge:
        self.calls.append(charge_id)
        if self.error is not None:
            raise self.error
        return Charge.from_stripe(self.charges[charge_id])


class AffiliateRecorder:
    """httpx MockTransport handler that records ShopMy requests."""

    def __init__(self, status_code: int = 200, text: str = '{"success": true}'):
        self.status_code = status_code
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
        shopmy_brand_dev_key=SHOPMY_KEY,
        _env_file=None,
    )


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def affiliate_recorder() -> AffiliateRecorder:
    return AffiliateRecorder()


@pytest.fixture()
def affiliate_client(affiliate_recorder: AffiliateRecorder) -> AffiliateClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(affiliate_recorder))
    return AffiliateClient(SHOPMY_KEY, http_client=http_client)


@pytest.fixture()
def handler(gateway: FakeGateway, affiliate_client: AffiliateClient) -> WebhookHandler:
    return WebhookHandler(RefundService(gateway), affiliate_client, WEBHOOK_SECRET)
