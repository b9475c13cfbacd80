"""
Skill recommendation pipeline - one quiz submission, start to finish.

Flow:
1. Resolve the caller's active profile
2. Persist quiz answers (committed, never rolled back)
3. Build the prompt from the profile and the persisted answers
4. Call the generative backend (no retry here)
5. Validate/normalize the raw output
6. Format the learning path and mini-project blocks
7. Store the recommendation
"""
from enum import Enum
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from skillvision.errors import EmptyGeneration, MalformedOutput, PipelineError, SchemaMismatch, UpstreamUnavailable
from skillvision.models.skill_recommendation import SkillRecommendation
from skillvision.schemas.quiz import QuizAnswerIn
from skillvision.schemas.recommendation import recommendation_json_schema
from skillvision.services.formatter import format_recommendation
from skillvision.services.generative_client import GenerativeClient
from skillvision.services.profile_store import require_active_profile
from skillvision.services.prompt_builder import build_recommendation_prompt
from skillvision.services.recommendation_store import save_recommendation
from skillvision.services.recommendation_validator import normalize_recommendation
from skillvision.services.response_collector import save_answers
from skillvision.utils.logger import get_logger
from skillvision.utils.metrics import inc

logger = get_logger("pipeline")


class SubmissionStage(str, Enum):
    RECEIVED = "received"
    ANSWERS_PERSISTED = "answers_persisted"
    PROMPT_BUILT = "prompt_built"
    GENERATION_REQUESTED = "generation_requested"
    GENERATION_FAILED = "generation_failed"
    GENERATION_SUCCEEDED = "generation_succeeded"
    VALIDATION_FAILED = "validation_failed"
    NORMALIZED = "normalized"
    FORMATTED = "formatted"
    STORED = "stored"


_GENERATION_ERRORS = (UpstreamUnavailable, EmptyGeneration)
_VALIDATION_ERRORS = (MalformedOutput, SchemaMismatch)


class SkillRecommendationPipeline:
    """Request-scoped orchestration; holds no per-submission state between calls"""

    def __init__(self, generator: GenerativeClient):
        self.generator = generator

    async def submit(
        self,
        db: AsyncSession,
        user_id: str,
        answers: Sequence[QuizAnswerIn],
    ) -> SkillRecommendation:
        stage = SubmissionStage.RECEIVED
        student_id: Optional[int] = None
        try:
            student = await require_active_profile(db, user_id)
            student_id = student.id
            self._log_stage(stage, student_id)

            saved = await save_answers(db, student_id, answers)
            stage = SubmissionStage.ANSWERS_PERSISTED
            self._log_stage(stage, student_id)

            prompt = build_recommendation_prompt(student, saved)
            stage = SubmissionStage.PROMPT_BUILT
            self._log_stage(stage, student_id)

            stage = SubmissionStage.GENERATION_REQUESTED
            self._log_stage(stage, student_id)
            raw_text = await self.generator.generate(prompt, recommendation_json_schema())
            stage = SubmissionStage.GENERATION_SUCCEEDED
            self._log_stage(stage, student_id)

            skill = normalize_recommendation(raw_text)
            stage = SubmissionStage.NORMALIZED
            self._log_stage(stage, student_id)

            blocks = format_recommendation(skill)
            stage = SubmissionStage.FORMATTED
            self._log_stage(stage, student_id)

            recommendation = await save_recommendation(db, student_id, skill, blocks)
            stage = SubmissionStage.STORED
            self._log_stage(stage, student_id)

        except PipelineError as exc:
            if isinstance(exc, _GENERATION_ERRORS):
                stage = SubmissionStage.GENERATION_FAILED
            elif isinstance(exc, _VALIDATION_ERRORS):
                stage = SubmissionStage.VALIDATION_FAILED
            self._log_failure(exc, stage, student_id)
            raise

        inc("pipeline.stored")
        return recommendation

    def _log_stage(self, stage: SubmissionStage, student_id: Optional[int]) -> None:
        logger.debug(f"submission.{stage.value}", extra={"stage": stage.value, "student_id": student_id})

    def _log_failure(self, exc: PipelineError, stage: SubmissionStage, student_id: Optional[int]) -> None:
        inc(f"pipeline.{exc.kind}")
        extra = {
            "stage": stage.value,
            "student_id": student_id,
            "error_kind": exc.kind,
            "error": str(exc)[:300],
        }
        if isinstance(exc, SchemaMismatch):
            extra["field"] = exc.field
        raw_excerpt = getattr(exc, "raw_excerpt", "")
        if raw_excerpt:
            extra["raw_excerpt"] = raw_excerpt
        cause = exc.__cause__
        if cause is not None:
            extra["error_type"] = type(cause).__name__
        if exc.detail:
            extra["error"] = f"{extra['error']} ({exc.detail})"
        logger.error("submission.failed", extra=extra)
        exc.logged = True
