from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable
import logging
import secrets

from ..ports.user_repo import UserRepository, UserDto

logger = logging.getLogger(__name__)


@dataclass
class OTPService:
    """Issues and checks the single outstanding verification code stored on a user record."""
    user_repo: UserRepository
    length: int = 6
    expiry_minutes: int = 10
    clock: Callable[[], datetime] = field(default=datetime.utcnow)

    def new_code(self) -> str:
        # Uniform over the fixed-width range, e.g. 100000-999999 for six digits
        low = 10 ** (self.length - 1)
        return str(low + secrets.randbelow(9 * low))

    def expiry_from_now(self) -> datetime:
        return self.clock() + timedelta(minutes=self.expiry_minutes)

    def generate_code(self, user: UserDto) -> str:
        """Store a fresh code on the user, replacing any outstanding one."""
        code = self.new_code()
        expires_at = self.expiry_from_now()
        self.user_repo.set_verification_code(user.id, code, expires_at)
        user.verification_code = code
        user.verification_expires_at = expires_at
        logger.debug(f"Issued verification code for user {user.id}, expires {expires_at.isoformat()}")
        return code

    def validate_code(self, user: UserDto, submitted: str) -> bool:
        """True iff a code exists, has not expired and matches exactly. Does not consume it."""
        if not user.verification_code or not user.verification_expires_at:
            return False
        if user.verification_expires_at <= self.clock():
            return False
        if not isinstance(submitted, str):
            return False
        return secrets.compare_digest(user.verification_code.encode(), submitted.encode())

    resend_code = generate_code
