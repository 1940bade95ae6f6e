from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from typing import Optional
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.quiz_service import QuizService, summarize
from ..db.models.enums import QuizStatus
from ..dependencies import get_current_user, get_quiz_service
from ..exceptions import ServerError
from ..schemas.common.common import ErrorResponse, MessageResponse
from ..schemas.quiz.quiz import AnswerRequest, StartQuizRequest
from ..utils import get_client_info

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/quiz",
    tags=["Symptom Quiz"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("/start", status_code=status.HTTP_201_CREATED)
def start_quiz(
    body: StartQuizRequest,
    request: Request,
    current_user: UserDto = Depends(get_current_user),
    quizzes: QuizService = Depends(get_quiz_service),
):
    client = get_client_info(request)
    try:
        quiz, next_question = quizzes.start(
            current_user.id,
            body.primarySymptom.value,
            body.severity.value,
            body.duration.value,
            device_info=client["user_agent"],
            ip_address=client["ip_address"],
        )
        return {
            "message": "Quiz started successfully",
            "quizId": quiz.id,
            "sessionId": quiz.session_id,
            "nextQuestion": next_question,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error starting quiz for user {current_user.id}: {e}")
        raise ServerError("Server error while starting quiz")


@router.post("/answer")
def submit_answer(
    body: AnswerRequest,
    current_user: UserDto = Depends(get_current_user),
    quizzes: QuizService = Depends(get_quiz_service),
):
    try:
        result = quizzes.answer(
            body.quizId,
            current_user.id,
            body.questionId,
            body.answer,
            question=body.question,
            category=body.category.value if body.category else None,
        )
        if result.completed:
            return {
                "message": "Quiz completed successfully",
                "quiz": result.quiz.to_dict(),
                "analysis": result.quiz.ai_analysis,
                "summary": summarize(result.quiz),
            }
        return {
            "message": "Answer recorded successfully",
            "quiz": result.quiz.to_dict(),
            "nextQuestion": result.next_question,
            "progress": result.progress,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting answer on quiz {body.quizId}: {e}")
        raise ServerError("Server error while submitting answer")


# Declared before /{quiz_id} so "history" is not captured as an id
@router.get("/history")
def quiz_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    status: Optional[QuizStatus] = Query(None),
    current_user: UserDto = Depends(get_current_user),
    quizzes: QuizService = Depends(get_quiz_service),
):
    try:
        items, pagination = quizzes.history(
            current_user.id, page=page, limit=limit, status=status.value if status else None
        )
        return {
            "quizzes": [q.to_history_dict() for q in items],
            "pagination": pagination,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving quiz history for user {current_user.id}: {e}")
        raise ServerError("Server error while fetching quiz history")


@router.get("/{quiz_id}")
def get_quiz(
    quiz_id: str,
    current_user: UserDto = Depends(get_current_user),
    quizzes: QuizService = Depends(get_quiz_service),
):
    quiz = quizzes.get(quiz_id, current_user.id)
    return {"quiz": quiz.to_dict(), "summary": summarize(quiz)}


@router.delete("/{quiz_id}", response_model=MessageResponse)
def delete_quiz(
    quiz_id: str,
    current_user: UserDto = Depends(get_current_user),
    quizzes: QuizService = Depends(get_quiz_service),
):
    try:
        quizzes.delete(quiz_id, current_user.id)
        return {"message": "Quiz deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting quiz {quiz_id}: {e}")
        raise ServerError("Server error while deleting quiz")
