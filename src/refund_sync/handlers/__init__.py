"""Handlers module - Stripe webhook handling."""

from refund_sync.handlers.webhook import HandlerResult, Outcome, WebhookHandler

__all__ = ["HandlerResult", "Outcome", "WebhookHandler"]
