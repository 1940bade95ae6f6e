# health_companion/schemas/quiz/quiz.py
from pydantic import BaseModel, Field, validator
from typing import Any, Optional

from ...db.models.enums import Symptom, Severity, Duration, QuestionCategory


class StartQuizRequest(BaseModel):
    primarySymptom: Symptom
    severity: Severity
    duration: Duration


class AnswerRequest(BaseModel):
    quizId: str = Field(..., min_length=1)
    questionId: str = Field(..., min_length=1)
    answer: Any
    question: Optional[str] = None
    category: Optional[QuestionCategory] = None

    @validator('answer')
    def validate_answer(cls, v):
        if v is None or v == "" or v == [] or v == {}:
            raise ValueError('Answer is required')
        return v
