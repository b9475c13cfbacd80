"""
Pydantic schemas for student intake: profile creation, the fixed quiz
question set, quiz submissions and learning progress.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator


class StrategicPreference(str, Enum):
    """Vision 2030 pillar the student leans toward at onboarding"""
    THRIVING_ECONOMY = "thriving_economy"
    AMBITIOUS_NATION = "ambitious_nation"
    VIBRANT_SOCIETY = "vibrant_society"
    ALL = "all"


# ========== Quiz Question Set ==========
class QuizQuestion(BaseModel):
    id: str
    question: str
    options: List[str]


QUIZ_QUESTIONS: List[QuizQuestion] = [
    QuizQuestion(
        id="problem_solving",
        question="When faced with a complex problem, what is your preferred approach?",
        options=[
            "Break it down into smaller parts and tackle each systematically",
            "Research extensively before taking any action",
            "Brainstorm creative solutions with others",
            "Use tried-and-tested methods that have worked before",
            "Experiment with different approaches until one works",
        ],
    ),
    QuizQuestion(
        id="technology_comfort",
        question="How comfortable are you with learning new technologies?",
        options=[
            "Very comfortable - I love exploring new tech",
            "Somewhat comfortable - I can adapt when needed",
            "Neutral - depends on the technology",
            "Prefer to stick with what I know well",
            "I find technology challenging but I try",
        ],
    ),
    QuizQuestion(
        id="work_environment",
        question="What type of work environment energizes you most?",
        options=[
            "Collaborative team settings with lots of interaction",
            "Independent work with minimal supervision",
            "Fast-paced environments with constant change",
            "Structured environments with clear processes",
            "Creative spaces that encourage innovation",
        ],
    ),
    QuizQuestion(
        id="communication_style",
        question="How do you prefer to communicate ideas?",
        options=[
            "Visual presentations and infographics",
            "Written reports and documentation",
            "Verbal discussions and meetings",
            "Hands-on demonstrations",
            "Digital platforms and social media",
        ],
    ),
    QuizQuestion(
        id="learning_preference",
        question="What is your preferred way of learning new skills?",
        options=[
            "Online courses and tutorials",
            "Hands-on practice and experimentation",
            "Reading books and articles",
            "Learning from mentors and experts",
            "Group workshops and seminars",
        ],
    ),
    QuizQuestion(
        id="future_impact",
        question="What kind of impact do you want to make in the future?",
        options=[
            "Solve environmental and sustainability challenges",
            "Improve healthcare and quality of life",
            "Advance technology and innovation",
            "Enhance education and knowledge sharing",
            "Strengthen communities and social connections",
        ],
    ),
    QuizQuestion(
        id="saudi_vision_interest",
        question="Which Saudi Vision 2030 initiative excites you most?",
        options=[
            "NEOM and smart city development",
            "Saudi Green Initiative and environmental projects",
            "Digital transformation and AI initiatives",
            "Cultural and entertainment sector growth",
            "Healthcare system modernization",
        ],
    ),
    QuizQuestion(
        id="skill_development",
        question="When developing a new skill, you prefer:",
        options=[
            "Step-by-step structured learning paths",
            "Project-based learning with real outcomes",
            "Theoretical understanding first, then practice",
            "Learning alongside peers in groups",
            "Self-directed exploration and discovery",
        ],
    ),
    QuizQuestion(
        id="career_motivation",
        question="What motivates you most in your career aspirations?",
        options=[
            "Making a positive impact on society",
            "Financial success and stability",
            "Recognition and professional achievement",
            "Continuous learning and growth",
            "Work-life balance and personal fulfillment",
        ],
    ),
    QuizQuestion(
        id="global_challenges",
        question="Which global challenge would you most like to contribute to solving?",
        options=[
            "Climate change and environmental protection",
            "Healthcare accessibility and medical breakthroughs",
            "Education inequality and access to knowledge",
            "Economic development and poverty reduction",
            "Technology ethics and digital rights",
        ],
    ),
]

QUESTION_IDS = frozenset(q.id for q in QUIZ_QUESTIONS)


# ========== Intake Schemas ==========
class StudentCreate(BaseModel):
    """Onboarding form"""
    name: str = Field(..., min_length=1, max_length=200)
    age: int = Field(..., ge=13, le=30)
    education_level: str = Field(..., min_length=1, max_length=100)
    interests: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("interests", "current_interests"),
    )
    strategic_preference: StrategicPreference = Field(
        ...,
        validation_alias=AliasChoices("strategic_preference", "vision_2030_preference"),
    )

    @field_validator("name", "education_level", "interests")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class QuizAnswerIn(BaseModel):
    """One answered question; `response` is the option text picked by the student"""
    model_config = ConfigDict(populate_by_name=True)

    question_id: str
    response_text: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("response", "response_text"),
    )

    @field_validator("question_id")
    @classmethod
    def _known_question(cls, value: str) -> str:
        if value not in QUESTION_IDS:
            raise ValueError(f"Unknown question_id: {value}")
        return value


class QuizSubmission(BaseModel):
    """Partial answer sets are accepted"""
    responses: List[QuizAnswerIn] = Field(default_factory=list, max_length=len(QUIZ_QUESTIONS) * 2)


class ProgressUpdate(BaseModel):
    skill_id: int
    progress_percentage: int = Field(..., ge=0, le=100)
    completed_projects: Optional[str] = ""
    notes: Optional[str] = ""
