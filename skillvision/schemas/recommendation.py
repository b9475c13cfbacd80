"""
Pydantic schemas for the generated skill recommendation.
Defines the structured-output contract the model must satisfy; anything
that fails these models is rejected, never coerced.
"""
from enum import Enum
from typing import Annotated, List
from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)


class Pillar(str, Enum):
    """Vision 2030 pillars (closed set, exact match)"""
    THRIVING_ECONOMY = "Thriving Economy"
    AMBITIOUS_NATION = "Ambitious Nation"
    VIBRANT_SOCIETY = "Vibrant Society"


PILLAR_VALUES = tuple(p.value for p in Pillar)

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, strict=True)]


class MiniProject(BaseModel):
    """Starter project the student can begin immediately"""
    title: NonEmptyStr
    description: NonEmptyStr
    estimated_time: NonEmptyStr
    difficulty: NonEmptyStr


class FreeResource(BaseModel):
    """
    A free learning resource.
    `url` may be empty when `description` tells the student how to find it.
    """
    title: NonEmptyStr
    type: NonEmptyStr
    provider: NonEmptyStr
    url: str = ""
    description: str = ""

    @field_validator("url", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _locatable(self):
        if not self.url and not self.description:
            raise ValueError("resource needs a url or a description of how to find it")
        return self


class LearningPlan(BaseModel):
    how_to_start: NonEmptyStr
    free_resources: List[FreeResource] = Field(..., min_length=1)


class GeneratedSkill(BaseModel):
    """The single normalized recommendation extracted from the model output"""
    skill_name: NonEmptyStr
    skill_category: str = ""
    pillar: Pillar = Field(..., validation_alias=AliasChoices("vision_2030_pillar", "pillar"))
    confidence_score: float = Field(..., ge=0.0, le=1.0, strict=True)
    description: str = ""
    mini_project: MiniProject
    learning_plan: LearningPlan
    vision_2030_connection: str = ""

    @field_validator("skill_category", "description", "vision_2030_connection", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class GeneratedEnvelope(BaseModel):
    """Top-level object the model is asked to return: {"skill": {...}}"""
    skill: GeneratedSkill


def recommendation_json_schema() -> dict:
    """JSON schema handed to the model as the structured-output hint"""
    return GeneratedEnvelope.model_json_schema(by_alias=True)


class FormattedBlocks(BaseModel):
    """Storable text blocks rendered from a GeneratedSkill"""
    learning_path_text: str
    mini_project_text: str

