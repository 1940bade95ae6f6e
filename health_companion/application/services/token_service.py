from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict
import logging
import jwt

from ...exceptions import InvalidToken, TokenExpired

logger = logging.getLogger(__name__)


@dataclass
class TokenService:
    """Issues and verifies stateless HS256 bearer tokens bound to a user id."""
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 7 * 24 * 60
    clock: Callable[[], datetime] = field(default=datetime.utcnow)

    def issue(self, user_id: str) -> str:
        now = self.clock()
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        # Signature is checked before expiry, so a tampered expired token is InvalidToken
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise TokenExpired()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid token: {e}")
            raise InvalidToken()
        if not payload.get("sub"):
            raise InvalidToken()
        return payload

    def user_id_from(self, token: str) -> str:
        return str(self.verify(token)["sub"])
