"""Learning progress upserts, one row per (student, skill)."""
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.errors import StorageFailure
from skillvision.models.learning_progress import LearningProgress
from skillvision.models.skill_recommendation import SkillRecommendation
from skillvision.schemas.quiz import ProgressUpdate


async def upsert_progress(db: AsyncSession, student_id: int, data: ProgressUpdate) -> LearningProgress:
    try:
        result = await db.execute(
            select(LearningProgress).where(
                LearningProgress.student_id == student_id,
                LearningProgress.skill_id == data.skill_id,
            )
        )
        progress = result.scalar_one_or_none()
        if progress is None:
            progress = LearningProgress(student_id=student_id, skill_id=data.skill_id)
            db.add(progress)

        progress.progress_percentage = data.progress_percentage
        progress.completed_projects = data.completed_projects or ""
        progress.notes = data.notes or ""

        await db.commit()
        await db.refresh(progress)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageFailure("Failed to update learning progress") from exc
    return progress


async def skill_belongs_to(db: AsyncSession, student_id: int, skill_id: int) -> bool:
    try:
        result = await db.execute(
            select(SkillRecommendation.id).where(
                SkillRecommendation.id == skill_id,
                SkillRecommendation.student_id == student_id,
            )
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("Failed to load skill recommendation") from exc
    return result.scalar_one_or_none() is not None


async def list_progress(db: AsyncSession, student_id: int) -> List[LearningProgress]:
    try:
        result = await db.execute(
            select(LearningProgress)
            .where(LearningProgress.student_id == student_id)
            .order_by(LearningProgress.updated_at.desc(), LearningProgress.id.desc())
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("Failed to load learning progress") from exc
    return list(result.scalars().all())
