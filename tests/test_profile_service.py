import pytest

from health_companion.application.services.profile_service import ProfileService
from health_companion.exceptions import NotFound


@pytest.fixture
def svc(user_repo, quiz_repo):
    return ProfileService(user_repo=user_repo, quiz_repo=quiz_repo)


def test_update_profile_changes_only_supplied_fields(svc, user_repo):
    user = user_repo.add(name="Alice", avatar="https://example.com/a.png")
    updated = svc.update_profile(user.id, name="Alicia")
    assert updated.name == "Alicia"
    assert updated.avatar == "https://example.com/a.png"


def test_update_profile_unknown_user(svc):
    with pytest.raises(NotFound):
        svc.update_profile("missing", name="John")


def test_health_profile_merge_keeps_untouched_fields(svc, user_repo):
    user = user_repo.add(health_profile={"age": 30, "allergies": ["pollen"], "gender": None})
    profile = svc.update_health_profile(user.id, {"age": 31, "bloodGroup": "O+", "unknown": 1})
    assert profile == {"age": 31, "allergies": ["pollen"], "gender": None, "bloodGroup": "O+"}


def test_preferences_merge(svc, user_repo):
    user = user_repo.add(preferences={"notifications": {"email": True, "sms": True, "push": True}, "theme": "light"})
    prefs = svc.update_preferences(user.id, notifications={"email": False, "sms": None, "push": None})
    assert prefs == {"notifications": {"email": False, "sms": True, "push": True}, "theme": "light"}

    prefs = svc.update_preferences(user.id, theme="dark")
    assert prefs["theme"] == "dark"
    assert prefs["notifications"]["email"] is False


def test_dashboard_summarises_recent_quizzes(svc, user_repo, quiz_repo):
    user = user_repo.add(is_verified=True)
    for symptom in ("fever", "fever", "cough"):
        q = quiz_repo.create(user.id, symptom, "mild", "1_3_days")
        quiz_repo.quizzes[q.id].status = "completed"
    quiz_repo.create(user.id, "nausea", "mild", "1_3_days")

    data = svc.dashboard(user.id)
    stats = data["dashboard"]["quizStats"]
    assert stats == {"total": 4, "completed": 3, "inProgress": 1}
    assert len(data["dashboard"]["recentQuizzes"]) == 4
    insight = data["dashboard"]["healthInsights"][0]
    assert insight["title"] == "Most Common Symptom"
    assert "fever" in insight["description"]
    assert data["user"]["id"] == user.id


def test_dashboard_without_quizzes(svc, user_repo):
    user = user_repo.add(is_verified=True)
    data = svc.dashboard(user.id)
    assert data["dashboard"]["healthInsights"] == []
    assert data["dashboard"]["lastActivity"] == user.created_at.isoformat()
