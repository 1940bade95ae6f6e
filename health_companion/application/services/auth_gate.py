from dataclasses import dataclass
from typing import Optional
import logging

from fastapi import HTTPException

from ..ports.user_repo import UserRepository, UserDto
from .token_service import TokenService
from ...exceptions import Forbidden, NotVerified, StaleIdentity, Unauthenticated

logger = logging.getLogger(__name__)


@dataclass
class AuthGate:
    """Resolves a bearer token to a verified user, in the order:
    missing token, bad signature, expiry, missing user, unverified, role."""
    token_service: TokenService
    user_repo: UserRepository

    def authenticate(self, token: Optional[str], require_admin: bool = False) -> UserDto:
        if not token:
            raise Unauthenticated()

        user_id = self.token_service.user_id_from(token)

        user = self.user_repo.get_by_id(user_id)
        if not user:
            logger.warning(f"Token references missing user {user_id}")
            raise StaleIdentity()

        if not user.is_verified:
            raise NotVerified()

        if require_admin and not user.is_admin:
            logger.warning(f"Non-admin user {user_id} denied admin route")
            raise Forbidden()

        return user

    def try_authenticate(self, token: Optional[str]) -> Optional[UserDto]:
        """Optional variant: never fails, anonymous on any gate error."""
        try:
            return self.authenticate(token)
        except HTTPException:
            return None
