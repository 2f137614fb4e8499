"""Integrations module - Third-party service integrations (ShopMy affiliate API)."""

from refund_sync.integrations.affiliate import AffiliateClient

__all__ = ["AffiliateClient"]
