"""FastAPI application setup and configuration."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from refund_sync.api.client import StripeGateway
from refund_sync.config.settings import Settings, settings as default_settings
from refund_sync.core.logger import setup_logger
from refund_sync.handlers.webhook import WebhookHandler
from refund_sync.integrations.affiliate import AffiliateClient
from refund_sync.server.routes import build_router
from refund_sync.services.refund_service import RefundService

logger = setup_logger(__name__)


def build_webhook_handler(settings: Settings) -> WebhookHandler:
    """Construct the Stripe and ShopMy clients once and wire them into a handler."""
    gateway = StripeGateway(settings.stripe_secret_key, api_version=settings.stripe_api_version)
    affiliate_client = AffiliateClient(
        settings.shopmy_brand_dev_key,
        api_base=settings.shopmy_api_base,
        timeout=settings.affiliate_timeout_seconds,
    )
    return WebhookHandler(
        RefundService(gateway),
        affiliate_client,
        settings.stripe_webhook_secret,
    )


def create_app(
    settings: Optional[Settings] = None,
    webhook_handler: Optional[WebhookHandler] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Configuration (defaults to the environment-loaded settings)
        webhook_handler: Prebuilt handler; built from settings at startup when omitted
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Build provider clients on startup and release them on shutdown.

        An injected handler is used as-is and left open; its owner closes it.
        """
        logger.info("Starting application resources...")

        for name in settings.missing_secrets():
            logger.error(f"Missing required configuration: {name.upper()}")

        owns_handler = app.state.webhook_handler is None
        if owns_handler:
            app.state.webhook_handler = build_webhook_handler(settings)
            logger.info("Stripe and ShopMy clients initialized")

        logger.info(f"Listening for Stripe webhooks on {settings.webhook_path}")

        yield

        logger.info("Starting graceful shutdown...")

        if owns_handler:
            try:
                await app.state.webhook_handler.affiliate_client.aclose()
                logger.info("ShopMy client closed")
            except Exception as e:
                logger.error(f"Error closing ShopMy client: {e}", exc_info=True)

        logger.info("Graceful shutdown completed")

    app = FastAPI(
        title="Stripe Refund Sync",
        version="1.0.0",
        description="Receives Stripe refund webhooks and syncs order totals to ShopMy",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.webhook_handler = webhook_handler

    app.include_router(build_router(settings.webhook_path))

    return app
