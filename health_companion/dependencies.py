import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .core.config import settings
from .database import get_session
from .application.ports.audit_logger import AuditLogger
from .application.ports.otp_provider import OTPSender
from .application.ports.rate_limiter import RateLimiter
from .application.ports.user_repo import UserDto
from .application.services.auth_gate import AuthGate
from .application.services.auth_service import AuthService
from .application.services.contact_service import ContactService
from .application.services.otp_service import OTPService
from .application.services.profile_service import ProfileService
from .application.services.quiz_service import QuizService
from .application.services.token_service import TokenService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.otp.twilio_provider import build_otp_sender
from .infrastructure.persistence.sqlalchemy.repositories.contact_repository_sql import SqlContactRepository
from .infrastructure.persistence.sqlalchemy.repositories.quiz_repository_sql import SqlQuizRepository
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.rate_limit import build_rate_limiter

logger = logging.getLogger(__name__)

# Auth scheme
bearer_scheme = HTTPBearer(auto_error=False)

BODY_METHODS = ("POST", "PUT", "PATCH", "DELETE")


# ------------------------
# Singletons
# ------------------------
@lru_cache()
def get_otp_sender() -> OTPSender:
    return build_otp_sender()


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    return build_rate_limiter(settings.REDIS_URL)


@lru_cache()
def get_audit_logger() -> AuditLogger:
    return StdAuditLogger()


def get_token_service() -> TokenService:
    return TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


# ------------------------
# Repositories & services
# ------------------------
def get_user_repo(session: Session = Depends(get_session)) -> SqlUserRepository:
    return SqlUserRepository(session)


def get_quiz_repo(session: Session = Depends(get_session)) -> SqlQuizRepository:
    return SqlQuizRepository(session)


def get_contact_repo(session: Session = Depends(get_session)) -> SqlContactRepository:
    return SqlContactRepository(session)


def get_otp_service(user_repo: SqlUserRepository = Depends(get_user_repo)) -> OTPService:
    return OTPService(
        user_repo=user_repo,
        length=settings.OTP_LENGTH,
        expiry_minutes=settings.OTP_EXPIRY_MINUTES,
    )


def get_auth_service(
    user_repo: SqlUserRepository = Depends(get_user_repo),
    quiz_repo: SqlQuizRepository = Depends(get_quiz_repo),
    otp_service: OTPService = Depends(get_otp_service),
    otp_sender: OTPSender = Depends(get_otp_sender),
    token_service: TokenService = Depends(get_token_service),
    audit: AuditLogger = Depends(get_audit_logger),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> AuthService:
    return AuthService(
        user_repo=user_repo,
        otp_service=otp_service,
        otp_sender=otp_sender,
        token_service=token_service,
        quiz_repo=quiz_repo,
        audit=audit,
        rate_limiter=rate_limiter,
        resend_max_requests=settings.OTP_RESEND_MAX_REQUESTS,
        resend_window_seconds=settings.OTP_RESEND_WINDOW_SEC,
    )


def get_auth_gate(
    token_service: TokenService = Depends(get_token_service),
    user_repo: SqlUserRepository = Depends(get_user_repo),
) -> AuthGate:
    return AuthGate(token_service=token_service, user_repo=user_repo)


def get_quiz_service(quiz_repo: SqlQuizRepository = Depends(get_quiz_repo)) -> QuizService:
    return QuizService(repo=quiz_repo, question_quota=settings.QUIZ_QUESTION_QUOTA)


def get_profile_service(
    user_repo: SqlUserRepository = Depends(get_user_repo),
    quiz_repo: SqlQuizRepository = Depends(get_quiz_repo),
) -> ProfileService:
    return ProfileService(user_repo=user_repo, quiz_repo=quiz_repo)


def get_contact_service(
    contact_repo: SqlContactRepository = Depends(get_contact_repo),
    user_repo: SqlUserRepository = Depends(get_user_repo),
) -> ContactService:
    return ContactService(repo=contact_repo, user_repo=user_repo)


# ------------------------
# Authorization gate
# ------------------------
async def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Bearer header first, then the `token` cookie, then a `token` field in a JSON body."""
    if credentials and credentials.credentials:
        return credentials.credentials
    cookie_token = request.cookies.get("token")
    if cookie_token:
        return cookie_token
    if request.method in BODY_METHODS:
        try:
            body = await request.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("token"), str) and body["token"]:
            return body["token"]
    return None


def get_current_user(
    token: Optional[str] = Depends(extract_token),
    gate: AuthGate = Depends(get_auth_gate),
) -> UserDto:
    return gate.authenticate(token)


def get_optional_user(
    token: Optional[str] = Depends(extract_token),
    gate: AuthGate = Depends(get_auth_gate),
) -> Optional[UserDto]:
    return gate.try_authenticate(token)


def require_admin(
    token: Optional[str] = Depends(extract_token),
    gate: AuthGate = Depends(get_auth_gate),
) -> UserDto:
    return gate.authenticate(token, require_admin=True)
