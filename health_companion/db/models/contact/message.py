# health_companion/db/models/contact/message.py
from typing import Optional, Dict, Any
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime
import uuid

class ContactMessage(SQLModel, table=True):
    __tablename__ = "contact_messages"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=100)
    email: str = Field(max_length=254, index=True)
    subject: str = Field(max_length=200)
    message: str = Field(max_length=2000)
    status: str = Field(default="unread", max_length=10, index=True)
    priority: str = Field(default="medium", max_length=10, index=True)
    category: str = Field(default="general", max_length=20, index=True)
    submitted_by: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(max_length=45, default=None)
    user_agent: Optional[str] = Field(default=None)
    referrer: Optional[str] = Field(default=None)
    source: str = Field(default="contact_form", max_length=20)
    assigned_to: Optional[str] = Field(default=None)
    response: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
