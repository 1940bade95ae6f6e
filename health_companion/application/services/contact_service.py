from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple
from collections import Counter, defaultdict
import logging

from ..ports.contact_repo import ContactRepository, ContactDto
from ..ports.user_repo import UserRepository
from .quiz_service import paginate
from ...exceptions import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

STATS_PERIODS = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}


def derive_priority(category: str, subject: str) -> str:
    lowered = subject.lower()
    if "urgent" in lowered or "emergency" in lowered:
        return "urgent"
    if category == "support" or "help" in lowered:
        return "high"
    return "medium"


@dataclass
class ContactService:
    repo: ContactRepository
    user_repo: Optional[UserRepository] = None
    clock: Callable[[], datetime] = field(default=datetime.utcnow)

    def submit(self, name: str, email: str, subject: str, message: str, category: str = "general",
               submitted_by: Optional[str] = None, ip_address: Optional[str] = None,
               user_agent: Optional[str] = None, referrer: Optional[str] = None) -> ContactDto:
        priority = derive_priority(category, subject)
        contact = self.repo.create(
            name=name,
            email=email.strip().lower(),
            subject=subject,
            message=message,
            category=category,
            priority=priority,
            submitted_by=submitted_by,
            ip_address=ip_address,
            user_agent=user_agent,
            referrer=referrer,
        )
        logger.info(f"Contact message {contact.id} submitted with priority {priority}")
        return contact

    def list_messages(self, page: int = 1, limit: int = 20, status: Optional[str] = None,
                      priority: Optional[str] = None,
                      category: Optional[str] = None) -> Tuple[List[ContactDto], Dict[str, Any], Dict[str, int]]:
        items = self.repo.list((page - 1) * limit, limit, status=status, priority=priority, category=category)
        total = self.repo.count(status=status, priority=priority, category=category)
        statistics = {
            "total": self.repo.count(),
            "unread": self.repo.count(status="unread"),
            "urgent": self.repo.count(priority="urgent"),
            "high": self.repo.count(priority="high"),
        }
        return items, paginate(page, limit, total), statistics

    def get(self, message_id: str) -> ContactDto:
        contact = self.repo.get_by_id(message_id)
        if not contact:
            raise NotFound("Message not found")
        return contact

    def _update(self, message_id: str, **fields: Any) -> ContactDto:
        updated = self.repo.update_fields(message_id, **fields)
        if not updated:
            raise NotFound("Message not found")
        return updated

    def set_status(self, message_id: str, status: str) -> ContactDto:
        return self._update(message_id, status=status)

    def set_priority(self, message_id: str, priority: str) -> ContactDto:
        return self._update(message_id, priority=priority)

    def assign(self, message_id: str, assignee_id: str) -> ContactDto:
        self.get(message_id)
        if self.user_repo is not None and not self.user_repo.get_by_id(assignee_id):
            raise ValidationFailed("Invalid user ID")
        return self._update(message_id, assigned_to=assignee_id)

    def reply(self, message_id: str, message: str, responder_id: str) -> ContactDto:
        response = {
            "message": message,
            "respondedBy": responder_id,
            "respondedAt": self.clock().isoformat(),
        }
        contact = self._update(message_id, status="replied", response=response)
        logger.info(f"Contact message {message_id} replied by {responder_id}")
        return contact

    def delete(self, message_id: str) -> None:
        if not self.repo.delete(message_id):
            raise NotFound("Message not found")

    def stats(self, period: str = "30d") -> Dict[str, Any]:
        window = STATS_PERIODS.get(period)
        since = self.clock() - window if window else None
        rows = self.repo.list_since(since)

        daily: Dict[str, Dict[str, int]] = defaultdict(lambda: {"count": 0, "unread": 0, "urgent": 0})
        for row in rows:
            day = daily[row.created_at.strftime("%Y-%m-%d")]
            day["count"] += 1
            if row.status == "unread":
                day["unread"] += 1
            if row.priority == "urgent":
                day["urgent"] += 1

        daily_stats = [{"date": day, **counts} for day, counts in sorted(daily.items())]
        category_stats = [{"category": k, "count": v} for k, v in Counter(r.category for r in rows).most_common()]
        priority_stats = [{"priority": k, "count": v} for k, v in Counter(r.priority for r in rows).most_common()]
        return {
            "period": period,
            "dailyStats": daily_stats,
            "categoryStats": category_stats,
            "priorityStats": priority_stats,
            "total": sum(d["count"] for d in daily_stats),
        }
