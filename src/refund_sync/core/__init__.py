"""Core module - Logging, errors and signature verification."""

from refund_sync.core.exceptions import (
    AuthenticationError,
    DownstreamError,
    RefundSyncError,
    UpstreamLookupError,
)
from refund_sync.core.logger import setup_logger
from refund_sync.core.signature import verify_event

__all__ = [
    "AuthenticationError",
    "DownstreamError",
    "RefundSyncError",
    "UpstreamLookupError",
    "setup_logger",
    "verify_event",
]
