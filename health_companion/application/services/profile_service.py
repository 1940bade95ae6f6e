from dataclasses import dataclass
from typing import Any, Dict, Optional
from collections import Counter

from ..ports.user_repo import UserRepository, UserDto
from ..ports.quiz_repo import QuizRepository
from ...exceptions import NotFound

HEALTH_PROFILE_FIELDS = (
    "age", "gender", "weight", "height", "bloodGroup",
    "allergies", "medicalHistory", "currentMedications",
)


@dataclass
class ProfileService:
    user_repo: UserRepository
    quiz_repo: Optional[QuizRepository] = None

    def _require(self, user_id: str) -> UserDto:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def get_profile(self, user_id: str) -> UserDto:
        return self._require(user_id)

    def update_profile(self, user_id: str, name: Optional[str] = None, avatar: Optional[str] = None) -> UserDto:
        self._require(user_id)
        updated = self.user_repo.update_profile_fields(user_id, name, avatar)
        if not updated:
            raise NotFound("User not found")
        return updated

    def update_health_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Only keys present in `changes` are touched."""
        user = self._require(user_id)
        profile = dict(user.health_profile or {})
        for key in HEALTH_PROFILE_FIELDS:
            if key in changes:
                profile[key] = changes[key]
        updated = self.user_repo.update_health_profile(user_id, profile)
        return updated.health_profile if updated else profile

    def update_preferences(self, user_id: str, notifications: Optional[Dict[str, bool]] = None,
                           theme: Optional[str] = None) -> Dict[str, Any]:
        user = self._require(user_id)
        prefs = dict(user.preferences or {})
        current = dict(prefs.get("notifications") or {})
        if notifications:
            for channel in ("email", "sms", "push"):
                if notifications.get(channel) is not None:
                    current[channel] = notifications[channel]
        prefs["notifications"] = current
        if theme is not None:
            prefs["theme"] = theme
        updated = self.user_repo.update_preferences(user_id, prefs)
        return updated.preferences if updated else prefs

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        user = self._require(user_id)
        recent = self.quiz_repo.list_for_user(user_id, 0, 5) if self.quiz_repo else []
        if self.quiz_repo:
            stats = {
                "total": self.quiz_repo.count_for_user(user_id),
                "completed": self.quiz_repo.count_for_user(user_id, "completed"),
                "inProgress": self.quiz_repo.count_for_user(user_id, "in_progress"),
            }
        else:
            stats = {"total": 0, "completed": 0, "inProgress": 0}

        insights = []
        completed = [q for q in recent if q.status == "completed"]
        if completed:
            symptom, _ = Counter(q.primary_symptom for q in completed).most_common(1)[0]
            insights.append({
                "type": "symptom_pattern",
                "title": "Most Common Symptom",
                "description": f"You've reported {symptom.replace('_', ' ')} most frequently",
                "severity": "info",
            })

        last_activity = recent[0].created_at if recent else user.created_at
        return {
            "user": {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "isVerified": user.is_verified,
                "avatar": user.avatar,
            },
            "dashboard": {
                "recentQuizzes": [q.to_history_dict() for q in recent],
                "quizStats": stats,
                "healthInsights": insights,
                "lastActivity": last_activity.isoformat() if last_activity else None,
            },
        }
