from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import logging
import math

from ..ports.quiz_repo import QuizRepository, QuizDto
from . import question_bank
from .symptom_analyzer import analyze, risk_level
from ...exceptions import NotFound, ServerError

logger = logging.getLogger(__name__)

IN_PROGRESS = "in_progress"
COMPLETED = "completed"

# Bounded retries for the compare-and-swap on answer_count
MAX_ANSWER_ATTEMPTS = 3


def summarize(quiz: QuizDto) -> Dict[str, Any]:
    analysis = quiz.ai_analysis or {}
    recommendations = analysis.get("recommendations") or []
    return {
        "primarySymptom": quiz.primary_symptom,
        "severity": quiz.severity,
        "duration": quiz.duration,
        "riskLevel": risk_level(quiz.primary_symptom, quiz.severity),
        "possibleConditions": (analysis.get("possibleConditions") or [])[:3],
        "topRecommendation": recommendations[0] if recommendations else None,
    }


def paginate(page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "current": page,
        "total": math.ceil(total / limit) if limit else 0,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
    }


@dataclass
class AnswerResult:
    quiz: QuizDto
    completed: bool
    next_question: Optional[Dict[str, Any]] = None
    progress: Dict[str, int] = field(default_factory=dict)


@dataclass
class QuizService:
    repo: QuizRepository
    question_quota: int = 5

    def start(self, user_id: str, primary_symptom: str, severity: str, duration: str,
              device_info: Optional[str] = None, ip_address: Optional[str] = None) -> Tuple[QuizDto, Optional[Dict[str, Any]]]:
        quiz = self.repo.create(user_id, primary_symptom, severity, duration, device_info, ip_address)
        logger.info(f"Started quiz {quiz.id} for user {user_id} ({primary_symptom}/{severity}/{duration})")
        return quiz, question_bank.next_question(primary_symptom, 1)

    def answer(self, quiz_id: str, user_id: str, question_id: str, answer: Any,
               question: Optional[str] = None, category: Optional[str] = None) -> AnswerResult:
        for attempt in range(1, MAX_ANSWER_ATTEMPTS + 1):
            quiz = self.repo.get_in_progress_for_user(quiz_id, user_id)
            if not quiz:
                raise NotFound("Quiz not found or already completed")

            record = {
                "questionId": question_id,
                "question": question or f"Question {question_id}",
                "answer": answer,
                "category": category or "general",
            }
            responses = list(quiz.responses) + [record]
            completed = len(responses) >= self.question_quota
            status = COMPLETED if completed else IN_PROGRESS
            analysis = analyze(quiz.primary_symptom, quiz.severity, quiz.duration) if completed else None

            if self.repo.compare_and_set_answers(quiz.id, user_id, quiz.answer_count, responses, status, analysis):
                quiz.responses = responses
                quiz.answer_count = len(responses)
                quiz.status = status
                quiz.ai_analysis = analysis
                return self._result(quiz, completed)

            logger.info(f"Concurrent answer on quiz {quiz_id}, retrying (attempt {attempt})")

        logger.error(f"Gave up recording answer on quiz {quiz_id} after {MAX_ANSWER_ATTEMPTS} attempts")
        raise ServerError("Server error while submitting answer")

    def _result(self, quiz: QuizDto, completed: bool) -> AnswerResult:
        current = len(quiz.responses)
        progress = {
            "current": current,
            "total": self.question_quota,
            "percentage": round(current / self.question_quota * 100),
        }
        if completed:
            logger.info(f"Quiz {quiz.id} completed")
            return AnswerResult(quiz=quiz, completed=True, progress=progress)
        return AnswerResult(
            quiz=quiz,
            completed=False,
            next_question=question_bank.next_question(quiz.primary_symptom, current + 1),
            progress=progress,
        )

    def get(self, quiz_id: str, user_id: str) -> QuizDto:
        quiz = self.repo.get_for_user(quiz_id, user_id)
        if not quiz:
            raise NotFound("Quiz not found")
        return quiz

    def history(self, user_id: str, page: int = 1, limit: int = 10,
                status: Optional[str] = None) -> Tuple[List[QuizDto], Dict[str, Any]]:
        quizzes = self.repo.list_for_user(user_id, (page - 1) * limit, limit, status)
        total = self.repo.count_for_user(user_id, status)
        return quizzes, paginate(page, limit, total)

    def delete(self, quiz_id: str, user_id: str) -> None:
        if not self.repo.delete_for_user(quiz_id, user_id):
            raise NotFound("Quiz not found")
        logger.info(f"Deleted quiz {quiz_id} for user {user_id}")
