from typing import Protocol, Optional, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class UserDto:
    id: str
    name: str
    email: str
    phone: Optional[str]
    password_hash: str
    is_verified: bool
    role: str
    avatar: Optional[str] = None
    verification_code: Optional[str] = None
    verification_expires_at: Optional[datetime] = None
    health_profile: Dict[str, Any] = field(default_factory=dict)
    preferences: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def public_dict(self) -> Dict[str, Any]:
        """Outward representation; never includes the password hash or verification code."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "isVerified": self.is_verified,
            "role": self.role,
            "avatar": self.avatar,
            "healthProfile": self.health_profile,
            "preferences": self.preferences,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class UserRepository(Protocol):
    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        ...

    def get_by_phone(self, phone: str) -> Optional[UserDto]:
        ...

    def get_by_email(self, email: str) -> Optional[UserDto]:
        ...

    def get_by_identifier(self, identifier: str) -> Optional[UserDto]:
        ...

    def exists_by_email_or_phone(self, email: str, phone: Optional[str]) -> bool:
        ...

    def create(self, name: str, email: str, phone: Optional[str], password_hash: str,
               verification_code: str, verification_expires_at: datetime) -> UserDto:
        ...

    def set_verification_code(self, user_id: str, code: Optional[str], expires_at: Optional[datetime]) -> None:
        ...

    def consume_verification_code(self, user_id: str, code: str) -> bool:
        """Mark verified and clear the code only if `code` is still the stored one."""
        ...

    def update_profile_fields(self, user_id: str, name: Optional[str], avatar: Optional[str]) -> Optional[UserDto]:
        ...

    def update_health_profile(self, user_id: str, health_profile: Dict[str, Any]) -> Optional[UserDto]:
        ...

    def update_preferences(self, user_id: str, preferences: Dict[str, Any]) -> Optional[UserDto]:
        ...

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        ...

    def delete(self, user_id: str) -> bool:
        ...

    def promote_to_admin(self, user_id: str) -> None:
        ...
