# Database models package
from skillvision.models.student import Student
from skillvision.models.quiz_response import QuizResponse
from skillvision.models.skill_recommendation import SkillRecommendation
from skillvision.models.learning_progress import LearningProgress

__all__ = [
    "Student",
    "QuizResponse",
    "SkillRecommendation",
    "LearningProgress",
]
