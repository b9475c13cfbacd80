"""
Prompt Builder - renders a student profile and quiz answers into the single
instruction sent to the generative model.

Rendering is pure: same profile and answers give a byte-identical prompt.
"""
from typing import Iterable

from skillvision.schemas.recommendation import PILLAR_VALUES


SYSTEM_PROMPT = (
    "You are an expert educational advisor specializing in Saudi Vision 2030 "
    "career guidance. Return only valid JSON."
)

_PILLARS_TEXT = ", ".join(PILLAR_VALUES[:-1]) + f", or {PILLAR_VALUES[-1]}"

OUTPUT_CONTRACT = f"""Return a JSON object with this structure:
{{
  "skill": {{
    "skill_name": "The specific skill name",
    "skill_category": "The category (Technology, Healthcare, Business, Creative, etc.)",
    "vision_2030_pillar": "ONE of: {_PILLARS_TEXT}",
    "confidence_score": 0.90,
    "description": "A compelling 2-3 sentence explanation of why this skill is the perfect match for this student's interests and strengths, based on their quiz responses",
    "mini_project": {{
      "title": "A catchy project name",
      "description": "A detailed description of one practical mini-project (100-150 words) the student can start working on immediately. Make it exciting, achievable, and relevant to Saudi context.",
      "estimated_time": "e.g., 2-3 weeks",
      "difficulty": "Beginner/Intermediate/Advanced"
    }},
    "learning_plan": {{
      "how_to_start": "3-4 clear, actionable steps explaining exactly how a beginner should start learning this skill (50-80 words)",
      "free_resources": [
        {{
          "title": "Resource name",
          "type": "YouTube Channel/Free Course/Tutorial Series",
          "provider": "Platform name",
          "url": "actual URL if available, otherwise an empty string",
          "description": "What this resource covers and, when there is no URL, how to find it"
        }}
      ]
    }},
    "vision_2030_connection": "A specific 2-3 sentence explanation of how this skill directly contributes to the chosen Vision 2030 pillar and Saudi Arabia's transformation goals. Mention specific initiatives or sectors."
  }}
}}

Rules:
- "vision_2030_pillar" must be exactly one of: {", ".join(f'"{p}"' for p in PILLAR_VALUES)}
- "confidence_score" is a number between 0 and 1
- Include at least 2 FREE resources (YouTube channels, Coursera free courses, edX, Khan Academy, etc.)"""

GUIDELINES = """Important Guidelines:
- Be specific and practical
- Focus on FREE resources only
- Make the mini-project achievable and exciting
- Ensure the Vision 2030 connection is clear and specific
- Write in an encouraging, motivational tone
- Base your recommendation on actual patterns in the student's responses"""


def _enum_value(value) -> str:
    return str(getattr(value, "value", value))


def render_answers(answers: Iterable) -> str:
    """`question_id: response_text` lines in submission order"""
    lines = [f"{a.question_id}: {a.response_text}" for a in answers]
    if not lines:
        return "(no quiz responses provided)"
    return "\n".join(lines)


def build_recommendation_prompt(profile, answers: Iterable) -> str:
    """
    Build the recommendation request for one quiz submission.

    Args:
        profile: object with name, age, education_level, interests, strategic_preference
        answers: ordered objects with question_id and response_text (may be empty)
    """
    return f"""Carefully analyze this Saudi student's profile and quiz responses. Your goal is to identify THE ONE future skill that best matches their strengths, interests, and Vision 2030 opportunities.

Student Profile:
- Name: {profile.name}
- Age: {profile.age}
- Education Level: {profile.education_level}
- Current Interests: {profile.interests}
- Vision 2030 Preference: {_enum_value(profile.strategic_preference)}

Quiz Responses:
{render_answers(answers)}

Task:
1. CAREFULLY analyze all responses to understand the student's learning style, preferences, and aspirations
2. Identify ONE future skill that is the absolute best match for this student
3. Suggest ONE practical mini-project they can start immediately to learn this skill
4. Create a personalized learning plan with at least 2 FREE online resources
5. Explain how to get started in simple, actionable steps
6. Connect this skill to ONE specific Saudi Vision 2030 pillar ({_PILLARS_TEXT})

{OUTPUT_CONTRACT}

{GUIDELINES}
"""
