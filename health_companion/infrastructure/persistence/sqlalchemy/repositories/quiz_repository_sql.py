from typing import List, Optional, Dict, Any
from datetime import datetime
from sqlmodel import Session, select
from sqlalchemy import update, delete, func

from .....db.models import QuizSession
from .....application.ports.quiz_repo import QuizRepository, QuizDto


class SqlQuizRepository(QuizRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, q: QuizSession) -> QuizDto:
        return QuizDto(
            id=q.id,
            session_id=q.session_id,
            user_id=q.user_id,
            primary_symptom=q.primary_symptom,
            severity=q.severity,
            duration=q.duration,
            status=q.status,
            answer_count=q.answer_count,
            responses=list(q.responses or []),
            risk_factors=list(q.risk_factors or []),
            ai_analysis=q.ai_analysis,
            device_info=q.device_info,
            ip_address=q.ip_address,
            created_at=q.created_at,
            updated_at=q.updated_at,
        )

    def create(self, user_id: str, primary_symptom: str, severity: str, duration: str,
               device_info: Optional[str], ip_address: Optional[str]) -> QuizDto:
        quiz = QuizSession(
            user_id=user_id,
            primary_symptom=primary_symptom,
            severity=severity,
            duration=duration,
            device_info=device_info,
            ip_address=ip_address,
        )
        self.session.add(quiz)
        self.session.commit()
        self.session.refresh(quiz)
        return self._to_dto(quiz)

    def get_for_user(self, quiz_id: str, user_id: str) -> Optional[QuizDto]:
        q = self.session.exec(
            select(QuizSession)
            .where(QuizSession.id == quiz_id)
            .where(QuizSession.user_id == user_id)
        ).first()
        return self._to_dto(q) if q else None

    def get_in_progress_for_user(self, quiz_id: str, user_id: str) -> Optional[QuizDto]:
        q = self.session.exec(
            select(QuizSession)
            .where(QuizSession.id == quiz_id)
            .where(QuizSession.user_id == user_id)
            .where(QuizSession.status == "in_progress")
        ).first()
        return self._to_dto(q) if q else None

    def compare_and_set_answers(self, quiz_id: str, user_id: str, expected_count: int,
                                responses: List[Dict[str, Any]], status: str,
                                ai_analysis: Optional[Dict[str, Any]]) -> bool:
        stmt = (
            update(QuizSession)
            .where(QuizSession.id == quiz_id)
            .where(QuizSession.user_id == user_id)
            .where(QuizSession.status == "in_progress")
            .where(QuizSession.answer_count == expected_count)
            .values(
                responses=responses,
                answer_count=len(responses),
                status=status,
                ai_analysis=ai_analysis,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount == 1

    def list_for_user(self, user_id: str, offset: int, limit: int, status: Optional[str] = None) -> List[QuizDto]:
        stmt = select(QuizSession).where(QuizSession.user_id == user_id)
        if status:
            stmt = stmt.where(QuizSession.status == status)
        rows = self.session.exec(
            stmt.order_by(QuizSession.created_at.desc()).offset(offset).limit(limit)
        ).all()
        return [self._to_dto(r) for r in rows]

    def count_for_user(self, user_id: str, status: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(QuizSession).where(QuizSession.user_id == user_id)
        if status:
            stmt = stmt.where(QuizSession.status == status)
        return int(self.session.exec(stmt).one())

    def delete_for_user(self, quiz_id: str, user_id: str) -> bool:
        q = self.session.exec(
            select(QuizSession)
            .where(QuizSession.id == quiz_id)
            .where(QuizSession.user_id == user_id)
        ).first()
        if not q:
            return False
        self.session.delete(q)
        self.session.commit()
        return True

    def delete_all_for_user(self, user_id: str) -> int:
        result = self.session.execute(
            delete(QuizSession).where(QuizSession.user_id == user_id).execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount or 0
