# health_companion/db/models/users/user.py
from typing import Optional, Dict, Any
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime
import uuid

from ..enums import Role
from ....core.config import settings

DEFAULT_AVATAR = "https://via.placeholder.com/150/4F46E5/FFFFFF?text=U"


def default_health_profile() -> Dict[str, Any]:
    return {
        "age": None,
        "gender": None,
        "weight": None,
        "height": None,
        "bloodGroup": None,
        "allergies": [],
        "medicalHistory": [],
        "currentMedications": [],
    }


def default_preferences() -> Dict[str, Any]:
    return {
        "notifications": {"email": True, "sms": False, "push": True},
        "theme": "auto",
    }


class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(max_length=50)
    email: str = Field(max_length=254, unique=True, index=True)
    phone: Optional[str] = Field(max_length=20, default=None, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    google_id: Optional[str] = Field(default=None, unique=True, index=True)
    avatar: Optional[str] = Field(max_length=255, default=DEFAULT_AVATAR)
    is_verified: bool = Field(default=False)
    verification_code: Optional[str] = Field(max_length=settings.OTP_LENGTH, default=None)
    verification_expires_at: Optional[datetime] = Field(default=None)
    role: str = Field(default=Role.USER.value, max_length=10)
    health_profile: Dict[str, Any] = Field(default_factory=default_health_profile, sa_column=Column(JSON))
    preferences: Dict[str, Any] = Field(default_factory=default_preferences, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
