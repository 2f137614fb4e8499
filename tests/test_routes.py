"""HTTP contract tests for the FastAPI app."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import FakeGateway, make_charge, make_event, sign
from refund_sync.config.settings import Settings
from refund_sync.handlers.webhook import WebhookHandler
from refund_sync.server.app import build_webhook_handler, create_app

WEBHOOK_PATH = "/api/stripe-webhook"


@pytest.fixture()
def client(test_settings, handler):
    app = create_app(test_settings, webhook_handler=handler)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def _post(client: TestClient, body: bytes, signature: str | None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post(WEBHOOK_PATH, content=body, headers=headers)


class TestWebhookRoute:
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_non_post_is_405(self, client, method):
        r = client.request(method, WEBHOOK_PATH)
        assert r.status_code == 405
        assert r.text == "Method Not Allowed"
        assert r.headers["allow"] == "POST"

    def test_missing_signature_is_400(self, client, affiliate_recorder):
        r = _post(client, make_event("refund.created", {"charge": "ch_abc"}), None)
        assert r.status_code == 400
        assert r.text.startswith("Webhook Error: ")
        assert affiliate_recorder.requests == []

    def test_bad_signature_is_400(self, client, affiliate_recorder):
        body = make_event("refund.created", {"charge": "ch_abc"})
        r = _post(client, body, "t=1,v1=deadbeef")
        assert r.status_code == 400
        assert affiliate_recorder.requests == []

    def test_ignored_type_is_200_ok(self, client, gateway, affiliate_recorder):
        body = make_event("invoice.paid", {"id": "in_1"})
        r = _post(client, body, sign(body))
        assert r.status_code == 200
        assert r.text == "ok"
        assert gateway.calls == []
        assert affiliate_recorder.requests == []

    def test_partial_refund_end_to_end(self, client, gateway, affiliate_recorder):
        gateway.charges["ch_abc"] = make_charge(amount=1000, amount_refunded=400)
        body = make_event("refund.created", {"id": "re_1", "charge": "ch_abc"})

        r = _post(client, body, sign(body))

        assert r.status_code == 200
        assert r.text == "ok"
        assert affiliate_recorder.payloads == [
            {"order_id": "ch_abc", "currency": "USD", "new_order_amount": "6.00"}
        ]

    def test_downstream_failure_is_500(self, client, gateway, affiliate_recorder):
        gateway.charges["ch_abc"] = make_charge(amount=1000, amount_refunded=1000)
        affiliate_recorder.status_code = 503
        body = make_event("charge.refunded", make_charge(amount_refunded=1000))

        r = _post(client, body, sign(body))

        assert r.status_code == 500
        assert r.text == "Internal Error"
        assert len(affiliate_recorder.requests) == 1


class TestHealth:
    def test_healthy_when_configured(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_degraded_when_secret_missing(self, handler):
        settings = Settings(stripe_webhook_secret="whsec_x", _env_file=None)
        app = create_app(settings, webhook_handler=handler)
        with TestClient(app) as c:
            data = c.get("/health").json()
        assert data["status"] == "degraded"
        assert data["checks"]["environment"]["stripe_secret_key"] == "missing"
        assert data["checks"]["environment"]["stripe_webhook_secret"] == "ok"


class TestAppWiring:
    def test_startup_builds_handler_from_settings(self, test_settings):
        app = create_app(test_settings)
        assert app.state.webhook_handler is None

        with TestClient(app):
            handler = app.state.webhook_handler
            assert isinstance(handler, WebhookHandler)
            assert handler.webhook_secret == test_settings.stripe_webhook_secret

        assert handler.affiliate_client.client.is_closed

    def test_build_webhook_handler(self, test_settings):
        handler = build_webhook_handler(test_settings)
        assert handler.affiliate_client.api_base == "https://api.shopmy.us/api"
        assert handler.refund_service.gateway.api_version == "2024-06-20"

    def test_custom_webhook_path(self, test_settings, handler):
        test_settings.webhook_path = "/hooks/stripe"
        app = create_app(test_settings, webhook_handler=handler)
        with TestClient(app) as c:
            assert c.get("/hooks/stripe").status_code == 405
            assert c.get(WEBHOOK_PATH).status_code == 404
