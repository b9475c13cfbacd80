"""Response Collector - persists quiz answers for a profile."""
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.errors import StorageFailure
from skillvision.models.quiz_response import QuizResponse
from skillvision.schemas.quiz import QuizAnswerIn


async def save_answers(db: AsyncSession, student_id: int, answers: Sequence[QuizAnswerIn]) -> List[QuizResponse]:
    """
    Insert one row per answer and commit.

    Rows are committed before generation starts and are never rolled back by
    later pipeline failures.
    """
    rows = [
        QuizResponse(student_id=student_id, question_id=a.question_id, response_text=a.response_text)
        for a in answers
    ]
    try:
        db.add_all(rows)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageFailure("Failed to save quiz responses") from exc
    return rows


async def list_answers(db: AsyncSession, student_id: int) -> List[QuizResponse]:
    """All answers for a student, oldest first"""
    try:
        result = await db.execute(
            select(QuizResponse)
            .where(QuizResponse.student_id == student_id)
            .order_by(QuizResponse.created_at.asc(), QuizResponse.id.asc())
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("Failed to load quiz responses") from exc
    return list(result.scalars().all())

