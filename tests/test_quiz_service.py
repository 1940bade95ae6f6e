import pytest

from health_companion.application.services.quiz_service import QuizService, paginate, summarize
from health_companion.exceptions import NotFound, ServerError


@pytest.fixture
def svc(quiz_repo):
    return QuizService(repo=quiz_repo, question_quota=5)


def answer_n(svc, quiz, user_id, n, start=1):
    result = None
    for i in range(start, start + n):
        result = svc.answer(quiz.id, user_id, f"q{i}", "Yes")
    return result


def test_start_returns_first_question(svc):
    quiz, question = svc.start("u1", "fever", "severe", "less_than_24h")
    assert quiz.status == "in_progress"
    assert quiz.answer_count == 0
    assert question["id"] == "fever_temp"


def test_answer_records_defaults_and_returns_next_question(svc):
    quiz, _ = svc.start("u1", "fever", "mild", "1_3_days")
    result = svc.answer(quiz.id, "u1", "fever_temp", "Don't know")

    assert result.completed is False
    assert result.quiz.responses == [{
        "questionId": "fever_temp",
        "question": "Question fever_temp",
        "answer": "Don't know",
        "category": "general",
    }]
    assert result.next_question["id"] == "fever_chills"
    assert result.progress == {"current": 1, "total": 5, "percentage": 20}


def test_fourth_answer_does_not_complete(svc):
    quiz, _ = svc.start("u1", "fever", "severe", "less_than_24h")
    result = answer_n(svc, quiz, "u1", 4)
    assert result.completed is False
    assert result.quiz.status == "in_progress"
    assert result.quiz.ai_analysis is None
    # Bank has four questions, so there is nothing after the fourth
    assert result.next_question is None


def test_fifth_answer_completes_with_analysis(svc):
    quiz, _ = svc.start("u1", "fever", "severe", "less_than_24h")
    result = answer_n(svc, quiz, "u1", 5)
    assert result.completed is True
    assert result.quiz.status == "completed"
    assert result.quiz.ai_analysis["confidence"] == 80
    assert result.quiz.ai_analysis["possibleConditions"][0]["condition"] == "High Fever"
    assert result.progress["percentage"] == 100


def test_answer_on_completed_quiz_is_not_found(svc):
    quiz, _ = svc.start("u1", "cough", "mild", "more_than_week")
    answer_n(svc, quiz, "u1", 5)
    with pytest.raises(NotFound):
        svc.answer(quiz.id, "u1", "q6", "Yes")


def test_answer_on_someone_elses_quiz_is_not_found(svc):
    quiz, _ = svc.start("u1", "cough", "mild", "more_than_week")
    with pytest.raises(NotFound):
        svc.answer(quiz.id, "u2", "q1", "Yes")


def test_lost_race_is_retried_and_appends_after_the_winner(svc, quiz_repo):
    quiz, _ = svc.start("u1", "headache", "mild", "1_3_days")
    quiz_repo.interfere = 1
    result = svc.answer(quiz.id, "u1", "q1", "Yes")
    assert quiz_repo.cas_calls == 2
    assert [r["questionId"] for r in result.quiz.responses] == ["other", "q1"]
    assert result.quiz.answer_count == 2


def test_concurrent_completion_only_analyses_once(svc, quiz_repo):
    quiz, _ = svc.start("u1", "headache", "mild", "1_3_days")
    answer_n(svc, quiz, "u1", 3)
    # A rival writer lands the fourth answer; this request becomes the fifth
    quiz_repo.interfere = 1
    result = svc.answer(quiz.id, "u1", "q4", "Yes")
    assert result.completed is True
    assert result.quiz.answer_count == 5
    with pytest.raises(NotFound):
        svc.answer(quiz.id, "u1", "q6", "Yes")


def test_gives_up_after_repeated_conflicts(svc, quiz_repo):
    quiz, _ = svc.start("u1", "headache", "mild", "1_3_days")
    quiz_repo.interfere = 10
    with pytest.raises(ServerError):
        svc.answer(quiz.id, "u1", "q1", "Yes")


def test_get_and_delete_are_owner_only(svc):
    quiz, _ = svc.start("u1", "nausea", "mild", "1_3_days")
    assert svc.get(quiz.id, "u1").id == quiz.id
    with pytest.raises(NotFound):
        svc.get(quiz.id, "u2")
    with pytest.raises(NotFound):
        svc.delete(quiz.id, "u2")
    svc.delete(quiz.id, "u1")
    with pytest.raises(NotFound):
        svc.get(quiz.id, "u1")


def test_history_paginates_and_filters(svc):
    for _ in range(3):
        svc.start("u1", "fever", "mild", "1_3_days")
    done, _ = svc.start("u1", "fever", "severe", "1_3_days")
    answer_n(svc, done, "u1", 5)
    svc.start("u2", "fever", "mild", "1_3_days")

    items, pagination = svc.history("u1", page=1, limit=3)
    assert len(items) == 3
    assert pagination == {"current": 1, "total": 2, "hasNext": True, "hasPrev": False}

    completed, _ = svc.history("u1", status="completed")
    assert [q.id for q in completed] == [done.id]


def test_summary_of_completed_quiz(svc):
    quiz, _ = svc.start("u1", "fever", "severe", "less_than_24h")
    result = answer_n(svc, quiz, "u1", 5)
    summary = summarize(result.quiz)
    assert summary["riskLevel"] == "moderate"
    assert summary["possibleConditions"][0]["condition"] == "High Fever"
    assert summary["topRecommendation"]["action"] == "Seek immediate medical attention"


def test_paginate_empty():
    assert paginate(1, 10, 0) == {"current": 1, "total": 0, "hasNext": False, "hasPrev": False}
