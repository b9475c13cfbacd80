"""Skill Recommendation Routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.database import get_db
from skillvision.middleware.auth import get_user_id
from skillvision.services.profile_store import get_active_profile
from skillvision.services.recommendation_store import list_recommendations

router = APIRouter()


@router.get("")
async def get_recommendations(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    student = await get_active_profile(db, user_id)
    if student is None:
        return {"recommendations": []}

    recommendations = await list_recommendations(db, student.id)
    return {"recommendations": [r.to_dict() for r in recommendations]}
