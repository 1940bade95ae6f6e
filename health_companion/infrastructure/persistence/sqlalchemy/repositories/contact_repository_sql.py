from typing import Any, List, Optional
from datetime import datetime
from sqlmodel import Session, select
from sqlalchemy import func

from .....db.models import ContactMessage
from .....application.ports.contact_repo import ContactRepository, ContactDto


class SqlContactRepository(ContactRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, c: ContactMessage) -> ContactDto:
        return ContactDto(
            id=c.id,
            name=c.name,
            email=c.email,
            subject=c.subject,
            message=c.message,
            status=c.status,
            priority=c.priority,
            category=c.category,
            submitted_by=c.submitted_by,
            ip_address=c.ip_address,
            user_agent=c.user_agent,
            referrer=c.referrer,
            source=c.source,
            assigned_to=c.assigned_to,
            response=c.response,
            created_at=c.created_at,
            updated_at=c.updated_at,
        )

    def _filtered(self, stmt, status: Optional[str], priority: Optional[str], category: Optional[str]):
        if status:
            stmt = stmt.where(ContactMessage.status == status)
        if priority:
            stmt = stmt.where(ContactMessage.priority == priority)
        if category:
            stmt = stmt.where(ContactMessage.category == category)
        return stmt

    def create(self, name: str, email: str, subject: str, message: str, category: str, priority: str,
               submitted_by: Optional[str], ip_address: Optional[str], user_agent: Optional[str],
               referrer: Optional[str]) -> ContactDto:
        contact = ContactMessage(
            name=name,
            email=email,
            subject=subject,
            message=message,
            category=category,
            priority=priority,
            submitted_by=submitted_by,
            ip_address=ip_address,
            user_agent=user_agent,
            referrer=referrer,
        )
        self.session.add(contact)
        self.session.commit()
        self.session.refresh(contact)
        return self._to_dto(contact)

    def get_by_id(self, message_id: str) -> Optional[ContactDto]:
        c = self.session.exec(select(ContactMessage).where(ContactMessage.id == message_id)).first()
        return self._to_dto(c) if c else None

    def list(self, offset: int, limit: int, status: Optional[str] = None, priority: Optional[str] = None,
             category: Optional[str] = None) -> List[ContactDto]:
        stmt = self._filtered(select(ContactMessage), status, priority, category)
        rows = self.session.exec(
            stmt.order_by(ContactMessage.created_at.desc()).offset(offset).limit(limit)
        ).all()
        return [self._to_dto(r) for r in rows]

    def count(self, status: Optional[str] = None, priority: Optional[str] = None, category: Optional[str] = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(ContactMessage), status, priority, category)
        return int(self.session.exec(stmt).one())

    def update_fields(self, message_id: str, **fields: Any) -> Optional[ContactDto]:
        c = self.session.exec(select(ContactMessage).where(ContactMessage.id == message_id)).first()
        if not c:
            return None
        for key, value in fields.items():
            setattr(c, key, value)
        c.updated_at = datetime.utcnow()
        self.session.add(c)
        self.session.commit()
        self.session.refresh(c)
        return self._to_dto(c)

    def delete(self, message_id: str) -> bool:
        c = self.session.exec(select(ContactMessage).where(ContactMessage.id == message_id)).first()
        if not c:
            return False
        self.session.delete(c)
        self.session.commit()
        return True

    def list_since(self, since: Optional[datetime]) -> List[ContactDto]:
        stmt = select(ContactMessage)
        if since is not None:
            stmt = stmt.where(ContactMessage.created_at >= since)
        rows = self.session.exec(stmt.order_by(ContactMessage.created_at)).all()
        return [self._to_dto(r) for r in rows]
