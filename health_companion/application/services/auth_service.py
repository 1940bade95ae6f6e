from typing import Optional, Tuple
from dataclasses import dataclass
import logging

from sqlalchemy.exc import IntegrityError

from ..ports.user_repo import UserRepository, UserDto
from ..ports.quiz_repo import QuizRepository
from ..ports.otp_provider import OTPSender
from ..ports.audit_logger import AuditLogger
from ..ports.rate_limiter import RateLimiter
from .otp_service import OTPService
from .token_service import TokenService
from ...exceptions import (
    DuplicateIdentity,
    InvalidCredentials,
    NotFound,
    RateLimited,
    ValidationFailed,
    VerificationRequired,
)
from ...utils import hash_password, verify_password

logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    user_repo: UserRepository
    otp_service: OTPService
    otp_sender: OTPSender
    token_service: TokenService
    quiz_repo: Optional[QuizRepository] = None
    audit: Optional[AuditLogger] = None
    rate_limiter: Optional[RateLimiter] = None
    resend_max_requests: int = 5
    resend_window_seconds: int = 3600

    def _audit(self, action: str, phone: Optional[str] = None, user_id: Optional[str] = None,
               ip_address: Optional[str] = None, success: bool = True, **details) -> None:
        if self.audit is not None:
            self.audit.log(action, phone=phone, user_id=user_id, ip_address=ip_address,
                           success=success, details=details or None)

    def _deliver(self, phone: str, code: str) -> bool:
        delivered = self.otp_sender.send_code(phone, code)
        if not delivered:
            logger.warning("OTP delivery failed; continuing without it")
        return delivered

    def register(self, name: str, phone: str, email: str, password: str,
                 ip_address: Optional[str] = None) -> UserDto:
        email = email.strip().lower()
        if self.user_repo.exists_by_email_or_phone(email, phone):
            self._audit("register", phone=phone, ip_address=ip_address, success=False, reason="duplicate")
            raise DuplicateIdentity()

        try:
            user = self.user_repo.create(
                name=name,
                email=email,
                phone=phone,
                password_hash=hash_password(password),
                verification_code=self.otp_service.new_code(),
                verification_expires_at=self.otp_service.expiry_from_now(),
            )
        except IntegrityError:
            # Lost a race with a concurrent registration for the same identity
            self._audit("register", phone=phone, ip_address=ip_address, success=False, reason="duplicate")
            raise DuplicateIdentity()

        self._deliver(phone, user.verification_code)
        self._audit("register", phone=phone, user_id=user.id, ip_address=ip_address)
        logger.info(f"Registered user {user.id}")
        return user

    def verify_otp(self, phone: str, code: str, ip_address: Optional[str] = None) -> Tuple[str, UserDto]:
        user = self.user_repo.get_by_phone(phone)
        if not user:
            raise NotFound("User not found")

        if not self.otp_service.validate_code(user, code):
            self._audit("verify_otp", phone=phone, user_id=user.id, ip_address=ip_address, success=False)
            raise ValidationFailed("Invalid or expired OTP")

        # Clearing the code is what makes it single-use; a concurrent verify loses here
        if not self.user_repo.consume_verification_code(user.id, code):
            self._audit("verify_otp", phone=phone, user_id=user.id, ip_address=ip_address, success=False)
            raise ValidationFailed("Invalid or expired OTP")
        user.is_verified = True
        user.verification_code = None
        user.verification_expires_at = None

        token = self.token_service.issue(user.id)
        self._audit("verify_otp", phone=phone, user_id=user.id, ip_address=ip_address)
        return token, user

    def login(self, identifier: str, password: str, ip_address: Optional[str] = None) -> Tuple[str, UserDto]:
        user = self.user_repo.get_by_identifier(identifier.strip())
        if not user or not verify_password(password, user.password_hash):
            self._audit("login", user_id=user.id if user else None, ip_address=ip_address, success=False)
            raise InvalidCredentials()

        if not user.is_verified:
            self._audit("login", phone=user.phone, user_id=user.id, ip_address=ip_address,
                        success=False, reason="unverified")
            raise VerificationRequired(user.id)

        token = self.token_service.issue(user.id)
        self._audit("login", phone=user.phone, user_id=user.id, ip_address=ip_address)
        return token, user

    def resend_otp(self, phone: str, ip_address: Optional[str] = None) -> UserDto:
        user = self.user_repo.get_by_phone(phone)
        if not user:
            raise NotFound("User not found")

        if self.rate_limiter is not None and not self.rate_limiter.allow(
            f"otp:{phone}", self.resend_max_requests, self.resend_window_seconds
        ):
            self._audit("resend_otp", phone=phone, user_id=user.id, ip_address=ip_address,
                        success=False, reason="rate_limited")
            raise RateLimited("Too many OTP requests. Please try again later.")

        code = self.otp_service.resend_code(user)
        self._deliver(phone, code)
        self._audit("resend_otp", phone=phone, user_id=user.id, ip_address=ip_address)
        return user

    def refresh(self, user_id: str) -> str:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return self.token_service.issue(user.id)

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        if not verify_password(current_password, user.password_hash):
            self._audit("change_password", user_id=user_id, success=False)
            raise ValidationFailed("Current password is incorrect")
        self.user_repo.set_password_hash(user_id, hash_password(new_password))
        self._audit("change_password", user_id=user_id)

    def delete_account(self, user_id: str, password: str) -> None:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        if not verify_password(password, user.password_hash):
            self._audit("delete_account", user_id=user_id, success=False)
            raise ValidationFailed("Password is incorrect")
        if self.quiz_repo is not None:
            removed = self.quiz_repo.delete_all_for_user(user_id)
            logger.info(f"Removed {removed} quiz sessions for deleted user {user_id}")
        self.user_repo.delete(user_id)
        self._audit("delete_account", phone=user.phone, user_id=user_id)
