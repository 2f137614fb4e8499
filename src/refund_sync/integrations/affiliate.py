"""Forward refund instructions to the ShopMy affiliate API."""

from typing import Optional

import httpx

from refund_sync.core.exceptions import DownstreamError
from refund_sync.core.logger import setup_logger
from refund_sync.models.charge import AffiliateInstruction

logger = setup_logger(__name__)

DEFAULT_API_BASE = "https://api.shopmy.us/api"
AFFILIATE_TIMEOUT = 10.0


class AffiliateClient:
    """Sends cancel/update instructions to ShopMy. One request, no retries."""

    def __init__(
        self,
        api_key: Optional[str],
        api_base: str = DEFAULT_API_BASE,
        timeout: float = AFFILIATE_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize affiliate client.

        Args:
            api_key: ShopMy brand developer key, sent as a bearer token
            api_base: Base URL of the ShopMy API
            timeout: Request timeout in seconds
            http_client: Shared AsyncClient (owned by the caller when given)
        """
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=timeout)

        if not api_key:
            logger.error("ShopMy API key not set, affiliate calls will be rejected")

    def url_for(self, path: str) -> str:
        return f"{self.api_base}/Affiliates/{path}"

    async def send(self, instruction: AffiliateInstruction) -> None:
        """
        POST an instruction to its Affiliates endpoint.

        Raises:
            DownstreamError: Non-2xx response or transport failure
        """
        path = instruction.path
        url = self.url_for(path)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key or ''}",
        }

        logger.info(f"Sending ShopMy {path} for order {instruction.order_id}")

        try:
            response = await self.client.post(url, json=instruction.payload(), headers=headers)
        except httpx.HTTPError as e:
            raise DownstreamError(f"ShopMy {path} failed: {e}") from e

        if not response.is_success:
            raise DownstreamError(
                f"ShopMy {path} failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info(f"ShopMy {path} accepted (status={response.status_code})")

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
