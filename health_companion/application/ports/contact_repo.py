from typing import Protocol, Optional, List, Dict, Any
from dataclasses import dataclass
from datetime import datetime


@dataclass
class ContactDto:
    id: str
    name: str
    email: str
    subject: str
    message: str
    status: str
    priority: str
    category: str
    submitted_by: Optional[str]
    ip_address: Optional[str]
    user_agent: Optional[str]
    referrer: Optional[str]
    source: str
    assigned_to: Optional[str]
    response: Optional[Dict[str, Any]]
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "status": self.status,
            "priority": self.priority,
            "category": self.category,
            "submittedBy": self.submitted_by,
            "metadata": {
                "ipAddress": self.ip_address,
                "userAgent": self.user_agent,
                "referrer": self.referrer,
                "source": self.source,
            },
            "assignedTo": self.assigned_to,
            "response": self.response,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class ContactRepository(Protocol):
    def create(self, name: str, email: str, subject: str, message: str, category: str, priority: str,
               submitted_by: Optional[str], ip_address: Optional[str], user_agent: Optional[str],
               referrer: Optional[str]) -> ContactDto:
        ...

    def get_by_id(self, message_id: str) -> Optional[ContactDto]:
        ...

    def list(self, offset: int, limit: int, status: Optional[str] = None, priority: Optional[str] = None,
             category: Optional[str] = None) -> List[ContactDto]:
        ...

    def count(self, status: Optional[str] = None, priority: Optional[str] = None, category: Optional[str] = None) -> int:
        ...

    def update_fields(self, message_id: str, **fields: Any) -> Optional[ContactDto]:
        ...

    def delete(self, message_id: str) -> bool:
        ...

    def list_since(self, since: Optional[datetime]) -> List[ContactDto]:
        ...
