"""Refund service: resolve the charge behind an event and decide what ShopMy needs."""

import asyncio

from pydantic import ValidationError

from refund_sync.api.client import StripeGateway
from refund_sync.config.constants import CURRENCY_DECIMAL_PLACES, MINOR_UNITS_PER_MAJOR
from refund_sync.core.exceptions import UpstreamLookupError
from refund_sync.core.logger import setup_logger
from refund_sync.models.charge import (
    AffiliateInstruction,
    CancelInstruction,
    Charge,
    UpdateInstruction,
)
from refund_sync.models.webhook import ChargeObject, EventKind, RefundObject, WebhookEvent

logger = setup_logger(__name__)


def format_amount(minor_units: int) -> str:
    """Format minor units as a major-unit decimal string, e.g. 600 -> "6.00"."""
    return f"{minor_units / MINOR_UNITS_PER_MAJOR:.{CURRENCY_DECIMAL_PLACES}f}"


def resolve_charge_id(kind: EventKind, event: WebhookEvent) -> str:
    """
    Find the charge an event refers to.

    Refund events point at their charge; charge.refunded carries the charge itself.

    Raises:
        UpstreamLookupError: The event object has no usable charge reference
    """
    try:
        match kind:
            case EventKind.REFUND_CREATED | EventKind.REFUND_UPDATED:
                charge_id = RefundObject.model_validate(event.data.object).charge
            case EventKind.CHARGE_REFUNDED:
                charge_id = ChargeObject.model_validate(event.data.object).id
    except ValidationError as e:
        raise UpstreamLookupError(f"Malformed {kind.value} object: {e}") from e

    if not charge_id:
        raise UpstreamLookupError(f"No charge reference in {kind.value} event {event.id}")

    return charge_id


def decide_instruction(charge: Charge) -> AffiliateInstruction:
    """
    Turn live charge totals into a ShopMy instruction.

    Fully refunded (and non-zero) charges cancel the order. Everything else,
    including zero-amount charges, updates the order to the remaining total.
    """
    if charge.fully_refunded:
        return CancelInstruction(order_id=charge.order_id)

    return UpdateInstruction(
        order_id=charge.order_id,
        currency=charge.currency.upper(),
        new_order_amount=format_amount(charge.remaining),
    )


class RefundService:
    """Builds affiliate instructions for refund events."""

    def __init__(self, gateway: StripeGateway):
        """Initialize service with a Stripe gateway."""
        self.gateway = gateway

    async def fetch_charge(self, charge_id: str) -> Charge:
        # Stripe SDK is blocking; keep the event loop free
        return await asyncio.to_thread(self.gateway.retrieve_charge, charge_id)

    async def instruction_for(self, kind: EventKind, event: WebhookEvent) -> AffiliateInstruction:
        """
        Resolve the event's charge and decide the instruction.

        Args:
            kind: Known event kind
            event: Verified webhook event

        Returns:
            CancelInstruction or UpdateInstruction

        Raises:
            UpstreamLookupError: Charge reference missing or Stripe lookup failed
        """
        charge_id = resolve_charge_id(kind, event)
        charge = await self.fetch_charge(charge_id)

        logger.info(
            f"Charge {charge.id}: amount={charge.amount}, "
            f"refunded={charge.amount_refunded}, currency={charge.currency}"
        )

        return decide_instruction(charge)
