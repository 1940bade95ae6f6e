# health_companion/schemas/contact/contact.py
from pydantic import BaseModel, Field, validator

from ...db.models.enums import ContactCategory, ContactPriority, ContactStatus
from ..auth.auth import normalize_email


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class ContactSubmitRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: str = Field(..., max_length=254)
    subject: str = Field(..., min_length=5, max_length=200)
    message: str = Field(..., min_length=10, max_length=2000)
    category: ContactCategory = ContactCategory.GENERAL

    @validator('name', 'subject', 'message', pre=True)
    def strip_text(cls, v):
        return _strip(v)

    @validator('email')
    def validate_email(cls, v):
        return normalize_email(v)


class StatusUpdateRequest(BaseModel):
    status: ContactStatus


class PriorityUpdateRequest(BaseModel):
    priority: ContactPriority


class AssignRequest(BaseModel):
    assignedTo: str = Field(..., min_length=1)


class ReplyRequest(BaseModel):
    message: str = Field(..., min_length=10, max_length=2000)

    @validator('message', pre=True)
    def strip_message(cls, v):
        return _strip(v)
