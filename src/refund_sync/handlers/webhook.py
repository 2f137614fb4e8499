"""Webhook event handling: verify -> resolve charge -> forward to ShopMy."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from refund_sync.config.constants import (
    RESPONSE_INTERNAL_ERROR,
    RESPONSE_OK,
    WEBHOOK_ERROR_PREFIX,
)
from refund_sync.core.exceptions import AuthenticationError, RefundSyncError
from refund_sync.core.logger import setup_logger
from refund_sync.core.signature import verify_event
from refund_sync.integrations.affiliate import AffiliateClient
from refund_sync.models.charge import AffiliateInstruction
from refund_sync.models.webhook import EventKind
from refund_sync.services.refund_service import RefundService

logger = setup_logger(__name__)


class Outcome(str, Enum):
    """Terminal state of one webhook request."""

    IGNORED = "ignored"
    DISPATCHED = "dispatched"
    FAILED_AUTH = "failed-auth"
    FAILED_DOWNSTREAM = "failed-downstream"


@dataclass
class HandlerResult:
    """What the HTTP layer should answer, plus what was done."""

    outcome: Outcome
    status_code: int
    body: str
    instruction: Optional[AffiliateInstruction] = None


class WebhookHandler:
    """Processes one Stripe webhook request per call; holds no per-request state."""

    def __init__(
        self,
        refund_service: RefundService,
        affiliate_client: AffiliateClient,
        webhook_secret: Optional[str],
    ):
        """
        Initialize handler with its collaborators.

        Args:
            refund_service: Resolves charges and decides instructions
            affiliate_client: Sends instructions to ShopMy
            webhook_secret: Stripe webhook signing secret
        """
        self.refund_service = refund_service
        self.affiliate_client = affiliate_client
        self.webhook_secret = webhook_secret

    async def handle(self, raw_body: bytes, signature_header: Optional[str]) -> HandlerResult:
        """
        Handle an incoming Stripe webhook.

        Args:
            raw_body: Unmodified request body bytes
            signature_header: Stripe-Signature header value

        Returns:
            HandlerResult with status 200 (processed or ignored), 400 (bad
            signature) or 500 (charge lookup or ShopMy failure)
        """
        try:
            event = verify_event(raw_body, signature_header, self.webhook_secret)
        except AuthenticationError as e:
            logger.warning(f"Webhook verify failed: {e}")
            return HandlerResult(Outcome.FAILED_AUTH, 400, f"{WEBHOOK_ERROR_PREFIX}{e}")

        log_extra = {"event_id": event.id, "event_type": event.type}
        kind = event.kind

        if kind is None:
            logger.debug(f"Ignoring event type {event.type}", extra=log_extra)
            return HandlerResult(Outcome.IGNORED, 200, RESPONSE_OK)

        try:
            instruction = await self.refund_service.instruction_for(kind, event)
            await self.affiliate_client.send(instruction)
        except RefundSyncError as e:
            logger.error(f"ShopMy sync error: {e}", extra=log_extra, exc_info=True)
            return HandlerResult(Outcome.FAILED_DOWNSTREAM, 500, RESPONSE_INTERNAL_ERROR)
        except Exception as e:
            logger.error(f"Unexpected error syncing refund: {e}", extra=log_extra, exc_info=True)
            return HandlerResult(Outcome.FAILED_DOWNSTREAM, 500, RESPONSE_INTERNAL_ERROR)

        logger.info(
            f"Synced {event.type} to ShopMy {instruction.path} for order {instruction.order_id}",
            extra=log_extra,
        )
        return HandlerResult(Outcome.DISPATCHED, 200, RESPONSE_OK, instruction)
