"""Pydantic models for Stripe webhook events."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class EventKind(str, Enum):
    """Stripe event types that trigger an affiliate sync."""

    REFUND_CREATED = "refund.created"
    REFUND_UPDATED = "refund.updated"
    CHARGE_REFUNDED = "charge.refunded"

    @classmethod
    def from_type(cls, event_type: str) -> Optional["EventKind"]:
        """Map a raw event type to a known kind, or None when unhandled."""
        try:
            return cls(event_type)
        except ValueError:
            return None


class EventData(BaseModel):
    """Envelope around the object an event is about."""

    object: Dict[str, Any] = Field(..., description="Refund, charge or other Stripe object")

    class Config:
        extra = "allow"


class WebhookEvent(BaseModel):
    """Base webhook event structure from Stripe."""

    id: Optional[str] = Field(None, description="Event ID (evt_...)")
    type: str = Field(..., description="Event type, e.g. refund.created")
    data: EventData
    created: Optional[int] = Field(None, description="Unix timestamp of the event")
    livemode: Optional[bool] = None

    class Config:
        extra = "allow"

    @property
    def kind(self) -> Optional[EventKind]:
        """Known event kind, or None for types this service ignores."""
        return EventKind.from_type(self.type)


class RefundObject(BaseModel):
    """Refund record carried by refund.created / refund.updated."""

    id: Optional[str] = None
    charge: Optional[str] = Field(None, description="ID of the refunded charge")
    amount: Optional[int] = None
    status: Optional[str] = None

    class Config:
        extra = "allow"

    @field_validator("charge", mode="before")
    @classmethod
    def _expanded_charge_to_id(cls, value: Any) -> Any:
        # Expanded charge objects arrive as dicts
        if isinstance(value, dict):
            return value.get("id")
        return value


class ChargeObject(BaseModel):
    """Charge snapshot carried by charge.refunded."""

    id: str = Field(..., min_length=1)
    amount: Optional[int] = None
    amount_refunded: Optional[int] = None

    class Config:
        extra = "allow"
