"""Student Profile Routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.database import get_db
from skillvision.middleware.auth import get_user_id
from skillvision.schemas.quiz import StudentCreate
from skillvision.services.profile_store import create_profile, get_active_profile

router = APIRouter()


@router.post("", status_code=201)
async def create_student(
    data: StudentCreate,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    student = await create_profile(db, user_id, data)
    return {"id": student.id}


@router.get("/me")
async def get_my_student(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
):
    student = await get_active_profile(db, user_id)
    return {"student": student.to_dict() if student else None}
