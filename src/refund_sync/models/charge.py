"""Pydantic models for charges and affiliate instructions."""

from typing import Any, ClassVar, Dict, Mapping, Union

from pydantic import BaseModel, Field, field_validator

from refund_sync.config.constants import (
    AFFILIATE_CANCEL_PATH,
    AFFILIATE_UPDATE_PATH,
    DEFAULT_CURRENCY,
)

CHARGE_FIELDS = ("id", "amount", "amount_refunded", "currency", "metadata")


class Charge(BaseModel):
    """Live charge record as returned by the Stripe API."""

    id: str = Field(..., min_length=1, description="Charge ID (ch_...)")
    amount: int = Field(0, ge=0, description="Charged amount in minor units")
    amount_refunded: int = Field(0, ge=0, description="Refunded to date, minor units")
    currency: str = Field(DEFAULT_CURRENCY, description="ISO currency code")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "ignore"

    @field_validator("amount", "amount_refunded", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, value: Any) -> Any:
        return value or DEFAULT_CURRENCY

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_to_dict(cls, value: Any) -> Any:
        return dict(value) if value else {}

    @classmethod
    def from_stripe(cls, obj: Mapping[str, Any]) -> "Charge":
        """Build a Charge from a charge mapping (`StripeObject.to_dict()` output)."""
        return cls.model_validate({key: obj.get(key) for key in CHARGE_FIELDS})

    @property
    def order_id(self) -> str:
        """Merchant order ID from metadata, falling back to the charge ID."""
        return str(self.metadata.get("order_id") or self.id)

    @property
    def remaining(self) -> int:
        """Amount still owed after refunds, in minor units."""
        return self.amount - self.amount_refunded

    @property
    def fully_refunded(self) -> bool:
        """True once a non-zero charge has been refunded in full."""
        return self.amount_refunded >= self.amount and self.amount > 0


class CancelInstruction(BaseModel):
    """Tell the affiliate service the order no longer exists."""

    path: ClassVar[str] = AFFILIATE_CANCEL_PATH

    order_id: str

    def payload(self) -> Dict[str, Any]:
        return self.model_dump()


class UpdateInstruction(BaseModel):
    """Tell the affiliate service the order's new (reduced) total."""

    path: ClassVar[str] = AFFILIATE_UPDATE_PATH

    order_id: str
    currency: str
    new_order_amount: str = Field(..., pattern=r"^-?\d+\.\d{2}$")

    def payload(self) -> Dict[str, Any]:
        return self.model_dump()


AffiliateInstruction = Union[CancelInstruction, UpdateInstruction]
