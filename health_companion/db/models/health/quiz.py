# health_companion/db/models/health/quiz.py
from typing import Optional, List, Dict, Any
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime
import secrets
import string
import time
import uuid

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """Session token independent of the primary key: quiz_<epoch ms>_<9 base36 chars>."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"quiz_{int(time.time() * 1000)}_{suffix}"


class QuizSession(SQLModel, table=True):
    __tablename__ = "quiz_sessions"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    session_id: str = Field(default_factory=generate_session_id, unique=True, index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    primary_symptom: str = Field(max_length=32, index=True)
    severity: str = Field(max_length=16)
    duration: str = Field(max_length=16)
    responses: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    risk_factors: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    ai_analysis: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    status: str = Field(default="in_progress", max_length=20, index=True)
    answer_count: int = Field(default=0)
    device_info: Optional[str] = Field(default=None)
    ip_address: Optional[str] = Field(max_length=45, default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
