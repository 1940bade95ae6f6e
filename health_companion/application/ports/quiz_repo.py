from typing import Protocol, Optional, List, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class QuizDto:
    id: str
    session_id: str
    user_id: str
    primary_symptom: str
    severity: str
    duration: str
    status: str
    answer_count: int
    responses: List[Dict[str, Any]] = field(default_factory=list)
    risk_factors: List[Dict[str, Any]] = field(default_factory=list)
    ai_analysis: Optional[Dict[str, Any]] = None
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "user": self.user_id,
            "symptoms": {
                "primary": self.primary_symptom,
                "severity": self.severity,
                "duration": self.duration,
            },
            "responses": list(self.responses),
            "riskFactors": list(self.risk_factors),
            "aiAnalysis": self.ai_analysis,
            "status": self.status,
            "metadata": {
                "deviceInfo": self.device_info,
                "ipAddress": self.ip_address,
            },
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_history_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symptoms": {
                "primary": self.primary_symptom,
                "severity": self.severity,
                "duration": self.duration,
            },
            "status": self.status,
            "aiAnalysis": self.ai_analysis,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class QuizRepository(Protocol):
    def create(self, user_id: str, primary_symptom: str, severity: str, duration: str,
               device_info: Optional[str], ip_address: Optional[str]) -> QuizDto:
        ...

    def get_for_user(self, quiz_id: str, user_id: str) -> Optional[QuizDto]:
        ...

    def get_in_progress_for_user(self, quiz_id: str, user_id: str) -> Optional[QuizDto]:
        ...

    def compare_and_set_answers(self, quiz_id: str, user_id: str, expected_count: int,
                                responses: List[Dict[str, Any]], status: str,
                                ai_analysis: Optional[Dict[str, Any]]) -> bool:
        """Write the new answer list only if the session is still in progress with
        `expected_count` answers. Returns False when another writer got there first."""
        ...

    def list_for_user(self, user_id: str, offset: int, limit: int, status: Optional[str] = None) -> List[QuizDto]:
        ...

    def count_for_user(self, user_id: str, status: Optional[str] = None) -> int:
        ...

    def delete_for_user(self, quiz_id: str, user_id: str) -> bool:
        ...

    def delete_all_for_user(self, user_id: str) -> int:
        ...
