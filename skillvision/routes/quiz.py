"""Quiz Routes - question set and submission"""

from fastapi import APIRouter, Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.config import get_settings
from skillvision.database import get_db
from skillvision.middleware.auth import get_user_id
from skillvision.middleware.correlation import request_user_id_var
from skillvision.schemas.quiz import QUIZ_QUESTIONS, QuizSubmission
from skillvision.services.generative_client import GenerativeClient, get_generative_client
from skillvision.services.skill_pipeline import SkillRecommendationPipeline
from skillvision.utils.logger import get_logger

router = APIRouter()
logger = get_logger("routes.quiz")
settings = get_settings()


def _rate_limit_key(request: Request) -> str:
    """Per verified caller (set by get_user_id), per IP otherwise"""
    user_id = request_user_id_var.get("")
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


limiter = Limiter(key_func=_rate_limit_key, enabled=settings.rate_limit_enabled)


@router.get("/questions")
async def list_questions():
    return {"questions": [q.model_dump() for q in QUIZ_QUESTIONS]}


@router.post("/submit")
@limiter.limit(settings.submit_rate_limit)
async def submit_quiz(
    request: Request,
    data: QuizSubmission,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    generator: GenerativeClient = Depends(get_generative_client),
):
    """
    Run the recommendation pipeline for one quiz submission.
    Failures surface through the PipelineError handler in main.
    """
    logger.info(f"Quiz submitted with {len(data.responses)} responses")
    pipeline = SkillRecommendationPipeline(generator)
    recommendation = await pipeline.submit(db, user_id, data.responses)
    return {"recommendations": [recommendation.to_dict()]}
