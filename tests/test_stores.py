"""
Tests for profile, quiz-response, recommendation and progress persistence.
"""
import pytest
from factories import make_answers, make_skill_payload, make_student
from sqlalchemy.exc import OperationalError

from skillvision.errors import ProfileNotFound, StorageFailure
from skillvision.schemas.quiz import ProgressUpdate
from skillvision.schemas.recommendation import GeneratedSkill
from skillvision.services.formatter import format_recommendation
from skillvision.services.profile_store import create_profile, get_active_profile, require_active_profile
from skillvision.services.progress_store import list_progress, skill_belongs_to, upsert_progress
from skillvision.services.recommendation_store import list_recommendations, save_recommendation
from skillvision.services.response_collector import list_answers, save_answers


def _skill(**overrides) -> GeneratedSkill:
    return GeneratedSkill.model_validate(make_skill_payload(**overrides))


async def _save(db, student_id, **overrides):
    skill = _skill(**overrides)
    return await save_recommendation(db, student_id, skill, format_recommendation(skill))


class BrokenSession:
    """Session whose commit fails like a lost database connection"""

    def __init__(self):
        self.rolled_back = False

    def add(self, obj):
        pass

    def add_all(self, objs):
        pass

    async def commit(self):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    async def rollback(self):
        self.rolled_back = True

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


class TestProfileStore:
    async def test_create_and_fetch(self, db):
        created = await create_profile(db, "user_sara", make_student())
        active = await get_active_profile(db, "user_sara")
        assert active.id == created.id
        assert active.name == "Sara"
        assert active.strategic_preference == "thriving_economy"

    async def test_latest_profile_is_active(self, db):
        await create_profile(db, "user_sara", make_student())
        second = await create_profile(db, "user_sara", make_student(name="Sara A."))
        assert (await get_active_profile(db, "user_sara")).id == second.id

    async def test_profiles_are_per_user(self, db):
        await create_profile(db, "user_sara", make_student())
        assert await get_active_profile(db, "user_other") is None

    async def test_require_raises_without_profile(self, db):
        with pytest.raises(ProfileNotFound):
            await require_active_profile(db, "user_nobody")


class TestResponseCollector:
    async def test_answers_saved_in_order(self, db):
        student = await create_profile(db, "user_sara", make_student())
        await save_answers(db, student.id, make_answers())
        rows = await list_answers(db, student.id)
        assert [r.question_id for r in rows] == [a.question_id for a in make_answers()]

    async def test_resubmission_appends(self, db):
        student = await create_profile(db, "user_sara", make_student())
        await save_answers(db, student.id, make_answers(option=0))
        await save_answers(db, student.id, make_answers(option=1))
        rows = await list_answers(db, student.id)
        assert len(rows) == 20
        assert rows[-1].response_text == make_answers(option=1)[-1].response_text

    async def test_storage_failure(self):
        session = BrokenSession()
        with pytest.raises(StorageFailure):
            await save_answers(session, 1, make_answers())
        assert session.rolled_back


class TestRecommendationStore:
    async def test_round_trip(self, db):
        student = await create_profile(db, "user_sara", make_student())
        saved = await _save(db, student.id, skill_name="Drone Mapping", vision_2030_pillar="Ambitious Nation",
                            confidence_score=0.42)
        fetched = (await list_recommendations(db, student.id))[0]
        assert fetched.id == saved.id
        assert fetched.skill_name == "Drone Mapping"
        assert fetched.pillar == "Ambitious Nation"
        assert fetched.confidence_score == pytest.approx(0.42)
        assert "Estimated Time:" in fetched.mini_project_text

    async def test_ordering_confidence_then_recency(self, db):
        student = await create_profile(db, "user_sara", make_student())
        low = await _save(db, student.id, confidence_score=0.5)
        older_high = await _save(db, student.id, confidence_score=0.9)
        newer_high = await _save(db, student.id, confidence_score=0.9)
        ids = [r.id for r in await list_recommendations(db, student.id)]
        assert ids == [newer_high.id, older_high.id, low.id]

    async def test_list_is_idempotent(self, db):
        student = await create_profile(db, "user_sara", make_student())
        for score in (0.3, 0.8, 0.6):
            await _save(db, student.id, confidence_score=score)
        first = [r.id for r in await list_recommendations(db, student.id)]
        second = [r.id for r in await list_recommendations(db, student.id)]
        assert first == second

    async def test_list_empty_for_new_profile(self, db):
        student = await create_profile(db, "user_sara", make_student())
        assert await list_recommendations(db, student.id) == []

    async def test_storage_failure(self):
        skill = _skill()
        session = BrokenSession()
        with pytest.raises(StorageFailure):
            await save_recommendation(session, 1, skill, format_recommendation(skill))
        assert session.rolled_back

    async def test_list_storage_failure(self):
        with pytest.raises(StorageFailure):
            await list_recommendations(BrokenSession(), 1)


class TestProgressStore:
    async def test_upsert_updates_same_row(self, db):
        student = await create_profile(db, "user_sara", make_student())
        rec = await _save(db, student.id)

        first = await upsert_progress(db, student.id, ProgressUpdate(skill_id=rec.id, progress_percentage=20))
        second = await upsert_progress(
            db, student.id,
            ProgressUpdate(skill_id=rec.id, progress_percentage=60, notes="sensor works"),
        )
        assert first.id == second.id
        rows = await list_progress(db, student.id)
        assert len(rows) == 1
        assert rows[0].progress_percentage == 60
        assert rows[0].notes == "sensor works"

    async def test_skill_ownership(self, db):
        sara = await create_profile(db, "user_sara", make_student())
        other = await create_profile(db, "user_other", make_student(name="Omar"))
        rec = await _save(db, sara.id)
        assert await skill_belongs_to(db, sara.id, rec.id)
        assert not await skill_belongs_to(db, other.id, rec.id)
