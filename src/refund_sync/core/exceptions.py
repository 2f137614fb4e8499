"""Error types raised while processing a refund webhook."""

from typing import Optional


class RefundSyncError(Exception):
    """Base class for webhook processing errors."""


class AuthenticationError(RefundSyncError):
    """Webhook signature is missing, invalid, or the body was altered."""


class UpstreamLookupError(RefundSyncError):
    """The charge behind a refund event could not be retrieved."""


class DownstreamError(RefundSyncError):
    """Affiliate API rejected or failed to receive an instruction."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
