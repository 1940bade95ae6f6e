# health_companion/schemas/users/user.py
from pydantic import BaseModel, Field, validator
from typing import Optional, List

from ...db.models.enums import Gender, BloodGroup, Theme


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50, description="User's full name")
    avatar: Optional[str] = Field(None, max_length=255, description="Avatar image URL")

    @validator('name', pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @validator('avatar')
    def validate_avatar(cls, v):
        if v is not None and not v.startswith(('http://', 'https://')):
            raise ValueError('Invalid avatar URL')
        return v


class HealthProfileUpdate(BaseModel):
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[Gender] = None
    weight: Optional[float] = Field(None, ge=20, le=500, description="kg")
    height: Optional[float] = Field(None, ge=100, le=250, description="cm")
    bloodGroup: Optional[BloodGroup] = None
    allergies: Optional[List[str]] = None
    medicalHistory: Optional[List[str]] = None
    currentMedications: Optional[List[str]] = None


class NotificationPreferences(BaseModel):
    email: Optional[bool] = None
    sms: Optional[bool] = None
    push: Optional[bool] = None


class PreferencesUpdate(BaseModel):
    notifications: Optional[NotificationPreferences] = None
    theme: Optional[Theme] = None


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=6, max_length=128)


class DeleteAccountRequest(BaseModel):
    password: str = Field(..., min_length=1, description="Required for account deletion")
