# health_companion/schemas/auth/auth.py
from pydantic import BaseModel, Field, validator
import re

from ...core.config import settings

PHONE_PATTERN = re.compile(r'^\+?[\d\s\-()]+$')
EMAIL_PATTERN = re.compile(r'^[\w.+\-]+@[\w\-]+(\.[\w\-]+)*\.[A-Za-z]{2,}$')


def normalize_phone(v: str) -> str:
    v = v.strip()
    if not PHONE_PATTERN.match(v) or not any(ch.isdigit() for ch in v):
        raise ValueError('Invalid phone number')
    return v


def normalize_email(v: str) -> str:
    v = v.strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError('Invalid email address')
    return v


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50, description="User's full name")
    phone: str = Field(..., max_length=20, description="Phone number, optionally with country code")
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=6, max_length=128)

    @validator('name', pre=True)
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @validator('phone')
    def validate_phone(cls, v):
        return normalize_phone(v)

    @validator('email')
    def validate_email(cls, v):
        return normalize_email(v)


class VerifyOTPRequest(BaseModel):
    phone: str = Field(..., max_length=20)
    otp: str = Field(..., description="Numeric one-time code, OTP_LENGTH digits")

    @validator('phone')
    def validate_phone(cls, v):
        return normalize_phone(v)

    @validator('otp')
    def validate_otp(cls, v):
        if len(v) != settings.OTP_LENGTH:
            raise ValueError(f"OTP must be {settings.OTP_LENGTH} digits")
        return v


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Phone or email")
    password: str = Field(..., min_length=1)

    @validator('identifier', pre=True)
    def strip_identifier(cls, v):
        return v.strip() if isinstance(v, str) else v


class ResendOTPRequest(BaseModel):
    phone: str = Field(..., max_length=20)

    @validator('phone')
    def validate_phone(cls, v):
        return normalize_phone(v)
