"""Learning Progress Routes"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.database import get_db
from skillvision.middleware.auth import get_user_id
from skillvision.schemas.quiz import ProgressUpdate
from skillvision.services.profile_store import get_active_profile, require_active_profile
from skillvision.services.progress_store import list_progress, skill_belongs_to, upsert_progress

router = APIRouter()


@router.post("")
async def record_progress(
    data: ProgressUpdate,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    student = await require_active_profile(db, user_id)

    if not await skill_belongs_to(db, student.id, data.skill_id):
        raise HTTPException(status_code=404, detail="Skill recommendation not found")

    progress = await upsert_progress(db, student.id, data)
    return {"id": progress.id}


@router.get("")
async def get_progress(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    student = await get_active_profile(db, user_id)
    if student is None:
        return {"progress": []}

    rows = await list_progress(db, student.id)
    return {"progress": [p.to_dict() for p in rows]}
