"""Stripe API client for charge lookups."""

from typing import Optional

import stripe
from pydantic import ValidationError

from refund_sync.core.exceptions import UpstreamLookupError
from refund_sync.core.logger import setup_logger
from refund_sync.models.charge import Charge

logger = setup_logger(__name__)

DEFAULT_API_VERSION = "2024-06-20"


class StripeGateway:
    """Blocking Stripe client; the live charge is the source of truth for refund totals."""

    def __init__(
        self,
        api_key: Optional[str],
        api_version: str = DEFAULT_API_VERSION,
        client: Optional[stripe.StripeClient] = None,
    ):
        """
        Initialize gateway with credentials.

        Args:
            api_key: Stripe secret key (sk_...)
            api_version: Pinned Stripe API version
            client: Prebuilt StripeClient (tests, custom HTTP clients)
        """
        self.api_version = api_version

        if client is not None:
            self.client = client
        elif api_key:
            self.client = stripe.StripeClient(api_key, stripe_version=api_version)
        else:
            self.client = None
            logger.error("Stripe secret key not set, charge lookups will fail")

    def retrieve_charge(self, charge_id: str) -> Charge:
        """
        Fetch a charge by ID.

        Args:
            charge_id: Stripe charge ID (ch_...)

        Returns:
            Charge with current amount and amount_refunded

        Raises:
            UpstreamLookupError: Stripe call failed or returned an unusable charge
        """
        if self.client is None:
            raise UpstreamLookupError("Stripe secret key is not configured")

        logger.info(f"Fetching charge {charge_id} from Stripe")

        try:
            stripe_charge = self.client.v1.charges.retrieve(charge_id)
        except stripe.StripeError as e:
            raise UpstreamLookupError(f"Stripe charge lookup failed for {charge_id}: {e}") from e

        # StripeObject is not a dict; flatten it (metadata included) first
        if isinstance(stripe_charge, stripe.StripeObject):
            stripe_charge = stripe_charge.to_dict()

        try:
            return Charge.from_stripe(stripe_charge)
        except ValidationError as e:
            raise UpstreamLookupError(f"Unusable charge record {charge_id}: {e}") from e
