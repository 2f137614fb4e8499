"""API routes for the Stripe refund webhook."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import PlainTextResponse

from refund_sync.config.constants import RESPONSE_METHOD_NOT_ALLOWED
from refund_sync.config.settings import Settings
from refund_sync.core.logger import setup_logger
from refund_sync.handlers.webhook import WebhookHandler

logger = setup_logger(__name__)

NON_POST_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_webhook_handler(request: Request) -> WebhookHandler:
    """Dependency returning the handler built at startup."""
    handler = getattr(request.app.state, "webhook_handler", None)
    if handler is None:
        raise RuntimeError("Webhook handler not initialized")
    return handler


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> Response:
    """
    Stripe refund webhook endpoint.

    The body is read as raw bytes and handed over untouched; Stripe signs
    the exact bytes it sent, so nothing may parse it first.

    Returns:
        200 "ok", 400 "Webhook Error: ..." or 500 "Internal Error"
    """
    raw_body = await request.body()
    result = await handler.handle(raw_body, stripe_signature)
    return PlainTextResponse(result.body, status_code=result.status_code)


async def method_not_allowed() -> Response:
    """Anything but POST on the webhook path."""
    return PlainTextResponse(
        RESPONSE_METHOD_NOT_ALLOWED,
        status_code=405,
        headers={"Allow": "POST"},
    )


async def health_check(settings: Settings = Depends(get_settings)) -> dict:
    """Health check endpoint for monitoring."""
    missing = settings.missing_secrets()
    return {
        "status": "degraded" if missing else "healthy",
        "service": "refund-sync",
        "checks": {
            "environment": {
                name: "missing" if name in missing else "ok"
                for name in (
                    "stripe_secret_key",
                    "stripe_webhook_secret",
                    "shopmy_brand_dev_key",
                )
            },
        },
    }


def build_router(webhook_path: str) -> APIRouter:
    """Create the router with the webhook mounted at `webhook_path`."""
    router = APIRouter()
    router.add_api_route(webhook_path, stripe_webhook, methods=["POST"])
    router.add_api_route(
        webhook_path,
        method_not_allowed,
        methods=NON_POST_METHODS,
        include_in_schema=False,
    )
    router.add_api_route("/health", health_check, methods=["GET"])
    return router
