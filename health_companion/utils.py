import hashlib
from typing import Dict, Optional
from fastapi import Request
from passlib.context import CryptContext
from .core.config import settings

# =========================
# Password Hashing
# =========================
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    """Salted, cost-factored bcrypt hash."""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Unknown or malformed hash
        return False


# =========================
# Request helpers
# =========================
def hash_phone_number(phone: str) -> str:
    """Hash phone number for logs (one-way hash)"""
    return hashlib.sha256(phone.encode()).hexdigest()


def get_client_info(request: Request) -> Dict[str, Optional[str]]:
    """Extract client information for request metadata"""
    forwarded = request.headers.get("x-forwarded-for")
    ip_address = forwarded.split(",")[0].strip() if forwarded else None
    if not ip_address:
        ip_address = request.client.host if request.client else None
    return {
        "ip_address": ip_address,
        "user_agent": request.headers.get("user-agent") or "Unknown",
        "referer": request.headers.get("referer") or "Direct",
    }
