"""Payment Schemas — checkout initiation and verification requests.

Invariants:
    - amount is strictly positive
    - verification needs at least one of transaction_id / tx_ref
    - transaction_id is the gateway's numeric id, digits only
"""

from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from app.schemas.forms import reject_blank


class PaymentInitRequest(BaseModel):
    """Checkout request for a course fee."""
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    email: EmailStr
    phone: str = Field(max_length=30)
    name: str | None = Field(None, max_length=200)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def strip_required(cls, v):
        return reject_blank(v)


class PaymentVerifyRequest(BaseModel):
    """Verification by gateway transaction id, or by our own tx_ref."""
    transaction_id: str | None = Field(None, max_length=64, pattern=r"^\d+$")
    tx_ref: str | None = Field(None, max_length=100)

    @field_validator("transaction_id", "tx_ref", mode="before")
    @classmethod
    def coerce_identifier(cls, v):
        # Gateways redirect with numeric ids; accept them as strings
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if isinstance(v, str):
            return v.strip() or None
        return v

    @model_validator(mode="after")
    def require_identifier(self):
        if not self.transaction_id and not self.tx_ref:
            raise PydanticCustomError(
                "blank_field", "transaction_id or tx_ref is required",
            )
        return self
