"""Stripe Webhook Signature Verification.

Verifies that incoming webhooks genuinely come from Stripe. The signature
scheme itself is implemented by the stripe library; this module only feeds
it the untouched request bytes and turns the result into a typed event.
"""

from typing import Optional

import stripe
from pydantic import ValidationError

from refund_sync.config.constants import SIGNATURE_TOLERANCE_SECONDS
from refund_sync.core.exceptions import AuthenticationError
from refund_sync.core.logger import setup_logger
from refund_sync.models.webhook import WebhookEvent

logger = setup_logger(__name__)


def verify_event(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance: int = SIGNATURE_TOLERANCE_SECONDS,
) -> WebhookEvent:
    """
    Verify a Stripe webhook and parse it into a WebhookEvent.

    Args:
        raw_body: Raw request body exactly as received (NOT parsed JSON)
        signature_header: Value of the Stripe-Signature header
        secret: Webhook signing secret (whsec_...)
        tolerance: Maximum age of the signed timestamp in seconds

    Returns:
        The verified, parsed event

    Raises:
        AuthenticationError: Signature missing or invalid, body not raw bytes,
            or the verified body is not a Stripe event
    """
    # A str or dict here means something already decoded or parsed the body
    if not isinstance(raw_body, (bytes, bytearray)):
        raise AuthenticationError(
            f"Webhook payload must be raw bytes, got {type(raw_body).__name__}"
        )

    if not secret:
        logger.error("Webhook signing secret is not configured")
        raise AuthenticationError("Webhook signing secret is not configured")

    if not signature_header:
        raise AuthenticationError("No stripe-signature header value was provided.")

    try:
        payload = bytes(raw_body).decode("utf-8")
    except UnicodeDecodeError as e:
        raise AuthenticationError(f"Invalid UTF-8 in request body: {e}") from e

    try:
        stripe.WebhookSignature.verify_header(payload, signature_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise AuthenticationError(e.user_message or str(e)) from e

    try:
        return WebhookEvent.model_validate_json(payload)
    except ValidationError as e:
        raise AuthenticationError(
            f"Invalid payload: {e.error_count()} validation error(s)"
        ) from e
