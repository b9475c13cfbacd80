"""Profile Store - one active student profile per user (latest created wins)."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.errors import ProfileNotFound, StorageFailure
from skillvision.models.student import Student
from skillvision.schemas.quiz import StudentCreate
from skillvision.utils.logger import get_logger

logger = get_logger("profile_store")


async def create_profile(db: AsyncSession, user_id: str, data: StudentCreate) -> Student:
    student = Student(
        user_id=user_id,
        name=data.name,
        age=data.age,
        education_level=data.education_level,
        interests=data.interests,
        strategic_preference=data.strategic_preference.value,
    )
    try:
        db.add(student)
        await db.commit()
        await db.refresh(student)
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StorageFailure("Failed to create student profile") from exc

    logger.info("Student profile created", extra={"student_id": student.id})
    return student


async def get_active_profile(db: AsyncSession, user_id: str) -> Optional[Student]:
    """Most recently created profile for the user, or None"""
    try:
        result = await db.execute(
            select(Student)
            .where(Student.user_id == user_id)
            .order_by(Student.created_at.desc(), Student.id.desc())
            .limit(1)
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("Failed to load student profile") from exc
    return result.scalar_one_or_none()


async def require_active_profile(db: AsyncSession, user_id: str) -> Student:
    student = await get_active_profile(db, user_id)
    if student is None:
        raise ProfileNotFound(f"No student profile for user {user_id}")
    return student
