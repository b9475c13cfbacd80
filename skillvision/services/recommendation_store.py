"""Recommendation Store - append-only recommendation history per profile."""
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.errors import StorageFailure
from skillvision.models.skill_recommendation import SkillRecommendation
from skillvision.schemas.recommendation import FormattedBlocks, GeneratedSkill
from skillvision.utils.logger import get_logger

logger = get_logger("recommendation_store")


async def save_recommendation(
    db: AsyncSession,
    student_id: int,
    skill: GeneratedSkill,
    blocks: FormattedBlocks,
) -> SkillRecommendation:
    """Single insert; recommendations are never updated in place"""
    recommendation = SkillRecommendation(
        student_id=student_id,
        skill_name=skill.skill_name,
        skill_category=skill.skill_category,
        pillar=skill.pillar.value,
        confidence_score=skill.confidence_score,
        description=skill.description,
        learning_path_text=blocks.learning_path_text,
        mini_project_text=blocks.mini_project_text,
    )
    try:
        db.add(recommendation)
        await db.commit()
        await db.refresh(recommendation)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageFailure("Failed to save skill recommendation") from exc

    logger.info(
        "Skill recommendation saved",
        extra={"student_id": student_id, "recommendation_id": recommendation.id},
    )
    return recommendation


async def list_recommendations(db: AsyncSession, student_id: int) -> List[SkillRecommendation]:
    """Highest confidence first, then newest first"""
    try:
        result = await db.execute(
            select(SkillRecommendation)
            .where(SkillRecommendation.student_id == student_id)
            .order_by(
                SkillRecommendation.confidence_score.desc(),
                SkillRecommendation.created_at.desc(),
                SkillRecommendation.id.desc(),
            )
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("Failed to load skill recommendations") from exc
    return list(result.scalars().all())
