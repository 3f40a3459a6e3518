"""Form Schemas — contact, enrollment, and partnering submissions.

Invariants:
    - Required text fields are stripped; blank after stripping counts as missing
    - Enrollment needs either `location` or both `city` and `state`
    - Email fields are validated addresses (EmailStr)

Design Decisions:
    - Blank check runs in mode="before" so "" on an EmailStr reports blank_field,
      not an address-format error
"""

from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError


def reject_blank(v):
    """Strip strings and reject blank ones with a presence-style error."""
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise PydanticCustomError("blank_field", "Field is required")
    return v


class ContactForm(BaseModel):
    """Contact form — name, reply address, free-text message."""
    name: str = Field(max_length=200)
    email: EmailStr
    message: str = Field(max_length=5000)

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def strip_required(cls, v):
        return reject_blank(v)


class EnrollmentForm(BaseModel):
    """Class enrollment — where the student is and what they want to take."""
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    location: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    class_type: str = Field(max_length=100)
    gender: str = Field(max_length=50)
    pre_knowledge: str = Field(max_length=2000)
    course: str = Field(max_length=200)

    @field_validator(
        "first_name", "last_name", "class_type", "gender",
        "pre_knowledge", "course", mode="before",
    )
    @classmethod
    def strip_required(cls, v):
        return reject_blank(v)

    @field_validator("location", "city", "state", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @model_validator(mode="after")
    def require_location(self):
        if self.location or (self.city and self.state):
            return self
        raise PydanticCustomError(
            "blank_field", "location, or both city and state, are required",
        )


class PartneringForm(BaseModel):
    """Partnership application — every field is required."""
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr
    phone: str = Field(max_length=30)
    address: str = Field(max_length=500)
    gender: str = Field(max_length=50)
    reason: str = Field(max_length=5000)
    program: str = Field(max_length=200)

    @field_validator(
        "first_name", "last_name", "email", "phone", "address",
        "gender", "reason", "program", mode="before",
    )
    @classmethod
    def strip_required(cls, v):
        return reject_blank(v)


class SubmissionResponse(BaseModel):
    """Success envelope for form submissions."""
    message: str
    id: UUID
