"""
Result Validator/Normalizer - turns raw model text into a GeneratedSkill.

The only repair performed is stripping a markdown code fence around the
JSON. Everything else is all-or-nothing: a missing or invalid field aborts
the submission.
"""
import json
from typing import Any

from pydantic import ValidationError

from skillvision.errors import MalformedOutput, SchemaMismatch
from skillvision.schemas.recommendation import GeneratedSkill
from skillvision.utils.logger import get_logger

logger = get_logger("validator")

RAW_EXCERPT_CHARS = 500


def excerpt(raw_text: str, limit: int = RAW_EXCERPT_CHARS) -> str:
    """Head of the raw response for logs"""
    raw_text = raw_text or ""
    if len(raw_text) <= limit:
        return raw_text
    return raw_text[:limit] + "..."


def strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` wrapper if the model added one"""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
        text = text.strip()
    return text


def parse_structured(raw_text: str) -> Any:
    """Step 1: parse the raw text as JSON"""
    try:
        return json.loads(strip_code_fence(raw_text or ""))
    except (ValueError, RecursionError) as exc:
        raise MalformedOutput(
            f"Model output is not valid JSON: {exc}",
            raw_excerpt=excerpt(raw_text),
        ) from exc


def _error_field(error: dict) -> str:
    path = ".".join(str(part) for part in error.get("loc", ()))
    return f"skill.{path}" if path else "skill"


def normalize_recommendation(raw_text: str) -> GeneratedSkill:
    """
    Parse and validate one model response.

    Raises:
        MalformedOutput: not parseable as JSON
        SchemaMismatch: no top-level "skill" object, conflicting pillar keys,
            or a required field is missing or invalid (field path in `.field`)
    """
    data = parse_structured(raw_text)

    # Step 2: the one expected top-level recommendation object
    if not isinstance(data, dict) or not isinstance(data.get("skill"), dict):
        raise SchemaMismatch("skill", "Response has no top-level 'skill' object", raw_excerpt=excerpt(raw_text))

    skill = data["skill"]
    if "vision_2030_pillar" in skill and "pillar" in skill and skill["vision_2030_pillar"] != skill["pillar"]:
        raise SchemaMismatch(
            "skill.pillar",
            "Conflicting 'vision_2030_pillar' and 'pillar' values",
            raw_excerpt=excerpt(raw_text),
        )

    # Steps 3-5: typed validation of the skill, mini project and learning plan
    try:
        return GeneratedSkill.model_validate(skill)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0]
        field = _error_field(first)
        logger.debug(
            f"Recommendation failed validation with {len(errors)} errors",
            extra={"field": field, "error": first.get("msg")},
        )
        raise SchemaMismatch(
            field,
            f"Invalid or missing field {field}: {first.get('msg')}",
            raw_excerpt=excerpt(raw_text),
        ) from exc
