from typing import Optional, Dict, Any
from datetime import datetime
from sqlmodel import Session, select
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError

from .....db.models import User
from .....db.models.enums import Role
from .....application.ports.user_repo import UserRepository, UserDto

class SqlUserRepository(UserRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, user: User) -> UserDto:
        return UserDto(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            password_hash=user.password_hash,
            is_verified=bool(user.is_verified),
            role=user.role,
            avatar=user.avatar,
            verification_code=user.verification_code,
            verification_expires_at=user.verification_expires_at,
            health_profile=dict(user.health_profile or {}),
            preferences=dict(user.preferences or {}),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _get(self, user_id: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.id == user_id)).first()

    def _save(self, user: User) -> User:
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        user = self._get(user_id)
        return self._to_dto(user) if user else None

    def get_by_phone(self, phone: str) -> Optional[UserDto]:
        user = self.session.exec(select(User).where(User.phone == phone)).first()
        return self._to_dto(user) if user else None

    def get_by_email(self, email: str) -> Optional[UserDto]:
        user = self.session.exec(select(User).where(User.email == email.lower())).first()
        return self._to_dto(user) if user else None

    def get_by_identifier(self, identifier: str) -> Optional[UserDto]:
        user = self.session.exec(
            select(User).where(or_(User.email == identifier.lower(), User.phone == identifier))
        ).first()
        return self._to_dto(user) if user else None

    def exists_by_email_or_phone(self, email: str, phone: Optional[str]) -> bool:
        clauses = [User.email == email.lower()]
        if phone:
            clauses.append(User.phone == phone)
        return self.session.exec(select(User.id).where(or_(*clauses))).first() is not None

    def create(self, name: str, email: str, phone: Optional[str], password_hash: str,
               verification_code: str, verification_expires_at: datetime) -> UserDto:
        user = User(
            name=name,
            email=email.lower(),
            phone=phone,
            password_hash=password_hash,
            verification_code=verification_code,
            verification_expires_at=verification_expires_at,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return self._to_dto(user)

    def set_verification_code(self, user_id: str, code: Optional[str], expires_at: Optional[datetime]) -> None:
        user = self._get(user_id)
        if not user:
            return
        user.verification_code = code
        user.verification_expires_at = expires_at
        self._save(user)

    def consume_verification_code(self, user_id: str, code: str) -> bool:
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .where(User.verification_code == code)
            .values(
                is_verified=True,
                verification_code=None,
                verification_expires_at=None,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount == 1

    def update_profile_fields(self, user_id: str, name: Optional[str], avatar: Optional[str]) -> Optional[UserDto]:
        user = self._get(user_id)
        if not user:
            return None
        if name:
            user.name = name
        if avatar:
            user.avatar = avatar
        return self._to_dto(self._save(user))

    def update_health_profile(self, user_id: str, health_profile: Dict[str, Any]) -> Optional[UserDto]:
        user = self._get(user_id)
        if not user:
            return None
        # Reassign so the JSON column is marked dirty
        user.health_profile = dict(health_profile)
        return self._to_dto(self._save(user))

    def update_preferences(self, user_id: str, preferences: Dict[str, Any]) -> Optional[UserDto]:
        user = self._get(user_id)
        if not user:
            return None
        user.preferences = dict(preferences)
        return self._to_dto(self._save(user))

    def set_password_hash(self, user_id: str, password_hash: str) -> None:
        user = self._get(user_id)
        if not user:
            return
        user.password_hash = password_hash
        self._save(user)

    def delete(self, user_id: str) -> bool:
        user = self._get(user_id)
        if not user:
            return False
        self.session.delete(user)
        self.session.commit()
        return True

    def promote_to_admin(self, user_id: str) -> None:
        user = self._get(user_id)
        if not user:
            return
        user.role = Role.ADMIN.value
        self._save(user)
