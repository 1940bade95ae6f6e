import os
import tempfile
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest

# Configure before the package (and its settings singleton) is imported
_DB_DIR = tempfile.mkdtemp(prefix="health_companion_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"
for _var in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER", "REDIS_URL"):
    os.environ.pop(_var, None)

from health_companion.application.ports.contact_repo import ContactDto
from health_companion.application.ports.quiz_repo import QuizDto
from health_companion.application.ports.user_repo import UserDto


class FakeUserRepo:
    def __init__(self):
        self.users: Dict[str, UserDto] = {}

    def add(self, **fields) -> UserDto:
        now = datetime.utcnow()
        defaults = dict(
            id=str(uuid.uuid4()),
            name="Alice",
            email="alice@example.com",
            phone="+15551234567",
            password_hash="",
            is_verified=False,
            role="user",
            created_at=now,
            updated_at=now,
        )
        defaults.update(fields)
        user = UserDto(**defaults)
        self.users[user.id] = user
        return user

    def get_by_id(self, user_id: str) -> Optional[UserDto]:
        return self.users.get(user_id)

    def get_by_phone(self, phone: str) -> Optional[UserDto]:
        return next((u for u in self.users.values() if u.phone == phone), None)

    def get_by_email(self, email: str) -> Optional[UserDto]:
        return next((u for u in self.users.values() if u.email == email.lower()), None)

    def get_by_identifier(self, identifier: str) -> Optional[UserDto]:
        return self.get_by_email(identifier) or self.get_by_phone(identifier)

    def exists_by_email_or_phone(self, email: str, phone: Optional[str]) -> bool:
        return self.get_by_email(email) is not None or (phone is not None and self.get_by_phone(phone) is not None)

    def create(self, name, email, phone, password_hash, verification_code, verification_expires_at) -> UserDto:
        return self.add(
            name=name,
            email=email.lower(),
            phone=phone,
            password_hash=password_hash,
            verification_code=verification_code,
            verification_expires_at=verification_expires_at,
        )

    def set_verification_code(self, user_id, code, expires_at) -> None:
        self.users[user_id].verification_code = code
        self.users[user_id].verification_expires_at = expires_at

    def consume_verification_code(self, user_id, code) -> bool:
        user = self.users.get(user_id)
        if not user or user.verification_code != code:
            return False
        user.is_verified = True
        user.verification_code = None
        user.verification_expires_at = None
        return True

    def update_profile_fields(self, user_id, name, avatar):
        user = self.users.get(user_id)
        if not user:
            return None
        if name:
            user.name = name
        if avatar:
            user.avatar = avatar
        return user

    def update_health_profile(self, user_id, health_profile):
        self.users[user_id].health_profile = dict(health_profile)
        return self.users[user_id]

    def update_preferences(self, user_id, preferences):
        self.users[user_id].preferences = dict(preferences)
        return self.users[user_id]

    def set_password_hash(self, user_id, password_hash) -> None:
        self.users[user_id].password_hash = password_hash

    def delete(self, user_id) -> bool:
        return self.users.pop(user_id, None) is not None

    def promote_to_admin(self, user_id) -> None:
        self.users[user_id].role = "admin"


class FakeQuizRepo:
    """Honours the compare-and-swap contract; `interfere` makes the next N swaps lose a race."""

    def __init__(self):
        self.quizzes: Dict[str, QuizDto] = {}
        self.interfere = 0
        self.cas_calls = 0

    def _copy(self, q: QuizDto) -> QuizDto:
        return QuizDto(**{**q.__dict__, "responses": list(q.responses), "risk_factors": list(q.risk_factors)})

    def create(self, user_id, primary_symptom, severity, duration, device_info=None, ip_address=None) -> QuizDto:
        now = datetime.utcnow()
        quiz = QuizDto(
            id=str(uuid.uuid4()),
            session_id=f"quiz_{len(self.quizzes)}",
            user_id=user_id,
            primary_symptom=primary_symptom,
            severity=severity,
            duration=duration,
            status="in_progress",
            answer_count=0,
            device_info=device_info,
            ip_address=ip_address,
            created_at=now,
            updated_at=now,
        )
        self.quizzes[quiz.id] = quiz
        return self._copy(quiz)

    def get_for_user(self, quiz_id, user_id):
        q = self.quizzes.get(quiz_id)
        return self._copy(q) if q and q.user_id == user_id else None

    def get_in_progress_for_user(self, quiz_id, user_id):
        q = self.get_for_user(quiz_id, user_id)
        return q if q and q.status == "in_progress" else None

    def compare_and_set_answers(self, quiz_id, user_id, expected_count, responses, status, ai_analysis) -> bool:
        self.cas_calls += 1
        q = self.quizzes.get(quiz_id)
        if self.interfere:
            self.interfere -= 1
            # Another writer appended first
            q.responses.append({"questionId": "other", "question": "other", "answer": "x", "category": "general"})
            q.answer_count += 1
            return False
        if not q or q.user_id != user_id or q.status != "in_progress" or q.answer_count != expected_count:
            return False
        q.responses = list(responses)
        q.answer_count = len(responses)
        q.status = status
        q.ai_analysis = ai_analysis
        return True

    def list_for_user(self, user_id, offset, limit, status=None) -> List[QuizDto]:
        rows = [q for q in self.quizzes.values() if q.user_id == user_id and (not status or q.status == status)]
        rows.sort(key=lambda q: q.created_at, reverse=True)
        return [self._copy(q) for q in rows[offset:offset + limit]]

    def count_for_user(self, user_id, status=None) -> int:
        return len([q for q in self.quizzes.values() if q.user_id == user_id and (not status or q.status == status)])

    def delete_for_user(self, quiz_id, user_id) -> bool:
        q = self.quizzes.get(quiz_id)
        if not q or q.user_id != user_id:
            return False
        del self.quizzes[quiz_id]
        return True

    def delete_all_for_user(self, user_id) -> int:
        ids = [k for k, q in self.quizzes.items() if q.user_id == user_id]
        for k in ids:
            del self.quizzes[k]
        return len(ids)


class FakeContactRepo:
    def __init__(self):
        self.items: Dict[str, ContactDto] = {}

    def create(self, name, email, subject, message, category, priority, submitted_by,
               ip_address, user_agent, referrer, created_at=None) -> ContactDto:
        now = created_at or datetime.utcnow()
        contact = ContactDto(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            subject=subject,
            message=message,
            status="unread",
            priority=priority,
            category=category,
            submitted_by=submitted_by,
            ip_address=ip_address,
            user_agent=user_agent,
            referrer=referrer,
            source="contact_form",
            assigned_to=None,
            response=None,
            created_at=now,
            updated_at=now,
        )
        self.items[contact.id] = contact
        return contact

    def _match(self, c, status=None, priority=None, category=None) -> bool:
        return ((not status or c.status == status) and (not priority or c.priority == priority)
                and (not category or c.category == category))

    def get_by_id(self, message_id):
        return self.items.get(message_id)

    def list(self, offset, limit, status=None, priority=None, category=None):
        rows = [c for c in self.items.values() if self._match(c, status, priority, category)]
        rows.sort(key=lambda c: c.created_at, reverse=True)
        return rows[offset:offset + limit]

    def count(self, status=None, priority=None, category=None) -> int:
        return len([c for c in self.items.values() if self._match(c, status, priority, category)])

    def update_fields(self, message_id, **fields: Any):
        c = self.items.get(message_id)
        if not c:
            return None
        for key, value in fields.items():
            setattr(c, key, value)
        return c

    def delete(self, message_id) -> bool:
        return self.items.pop(message_id, None) is not None

    def list_since(self, since):
        return [c for c in self.items.values() if since is None or c.created_at >= since]


class FakeSender:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent: List[tuple] = []

    def send_code(self, phone: str, code: str) -> bool:
        self.sent.append((phone, code))
        return self.ok

    def last_code(self, phone: str) -> Optional[str]:
        for sent_phone, code in reversed(self.sent):
            if sent_phone == phone:
                return code
        return None


class FakeAudit:
    def __init__(self):
        self.entries: List[dict] = []

    def log(self, action, phone=None, user_id=None, request_id=None, ip_address=None, success=True, details=None):
        self.entries.append({"action": action, "user_id": user_id, "success": success, "details": details})


class FixedClock:
    def __init__(self, now: Optional[datetime] = None):
        self.now = now or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def user_repo():
    return FakeUserRepo()


@pytest.fixture
def quiz_repo():
    return FakeQuizRepo()


@pytest.fixture
def contact_repo():
    return FakeContactRepo()


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def audit():
    return FakeAudit()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def db():
    """Fresh tables on the test database; returns the engine."""
    from health_companion.database import create_db_and_tables, drop_db_and_tables, engine

    drop_db_and_tables()
    create_db_and_tables()
    return engine


@pytest.fixture
def client(sender):
    """TestClient over a fresh database with SMS delivery captured by `sender`."""
    from fastapi.testclient import TestClient

    from health_companion.database import create_db_and_tables, drop_db_and_tables
    from health_companion.dependencies import get_otp_sender, get_rate_limiter
    from health_companion.main import app

    drop_db_and_tables()
    create_db_and_tables()
    get_rate_limiter().reset()
    app.dependency_overrides[get_otp_sender] = lambda: sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
