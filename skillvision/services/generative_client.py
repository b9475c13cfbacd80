"""
Generative Client - one chat-completions request per quiz submission.

Returns the raw text of the model's answer. Structured output is requested
(JSON mode or a JSON schema) but never trusted: the validator re-checks
everything.
"""
import asyncio
import json
from functools import lru_cache
from typing import Optional

import openai
from openai import AsyncOpenAI

from skillvision.config import get_settings
from skillvision.errors import EmptyGeneration, UpstreamUnavailable
from skillvision.services.gateway import CircuitOpenError, ServiceGateway, get_gateway
from skillvision.services.prompt_builder import SYSTEM_PROMPT
from skillvision.utils.logger import get_logger
from skillvision.utils.metrics import track_duration

logger = get_logger("generative_client")


# Canned answer used in TEST_MODE
MOCK_RECOMMENDATION = {
    "skill": {
        "skill_name": "Applied Machine Learning",
        "skill_category": "Technology",
        "vision_2030_pillar": "Thriving Economy",
        "confidence_score": 0.9,
        "description": "Your curiosity about technology and preference for hands-on experimentation make machine learning a natural fit.",
        "mini_project": {
            "title": "Smart Date Palm Classifier",
            "description": "Collect photos of different date varieties and train a simple image classifier that recognizes them.",
            "estimated_time": "2-3 weeks",
            "difficulty": "Beginner",
        },
        "learning_plan": {
            "how_to_start": "Learn basic Python, then follow a beginner machine learning course and rebuild each example yourself.",
            "free_resources": [
                {
                    "title": "Machine Learning Crash Course",
                    "type": "Free Course",
                    "provider": "Google",
                    "url": "https://developers.google.com/machine-learning/crash-course",
                    "description": "Core machine learning concepts with interactive exercises",
                },
                {
                    "title": "Python for Beginners",
                    "type": "YouTube Channel",
                    "provider": "freeCodeCamp",
                    "url": "",
                    "description": "Search 'freeCodeCamp Python for Beginners' on YouTube",
                },
            ],
        },
        "vision_2030_connection": "AI talent is central to the Thriving Economy pillar and the national data and AI strategy.",
    }
}


class GenerativeClient:
    """Thin async wrapper around the OpenAI chat completions API"""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        response_format: Optional[str] = None,
        gateway: Optional[ServiceGateway] = None,
        test_mode: Optional[bool] = None,
    ):
        settings = get_settings()
        self.test_mode = settings.test_mode if test_mode is None else test_mode
        self.model = model or settings.openai_model
        self.temperature = settings.openai_temperature if temperature is None else temperature
        self.response_format = response_format or settings.openai_response_format
        self.gateway = gateway

        if not 0 < self.temperature <= 1:
            raise ValueError(f"temperature must be in (0, 1], got {self.temperature}")

        if client is None and not self.test_mode:
            if not settings.openai_api_key:
                raise ValueError(
                    "OPENAI_API_KEY not found. Set it in the environment, "
                    "or set TEST_MODE=true to use mock data."
                )
            # Retries are owned by the gateway config, not the SDK
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.openai_timeout_seconds,
                max_retries=0,
            )
        self.client = client

    def _response_format(self, schema_hint: Optional[dict]) -> dict:
        if self.response_format == "json_schema" and schema_hint:
            return {
                "type": "json_schema",
                "json_schema": {"name": "skill_recommendation", "schema": schema_hint, "strict": False},
            }
        return {"type": "json_object"}

    async def generate(self, prompt: str, schema_hint: Optional[dict] = None) -> str:
        """
        Send the prompt and return the raw model text.

        Raises:
            UpstreamUnavailable: network error, API error, timeout or open circuit
            EmptyGeneration: the backend answered with no content
        """
        if self.test_mode or self.client is None:
            logger.info("[TEST MODE] Returning mock recommendation")
            return json.dumps(MOCK_RECOMMENDATION)

        gateway = self.gateway or get_gateway()
        try:
            async with track_duration("openai", "generate"):
                response = await gateway.execute(
                    self.client.chat.completions.create,
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.temperature,
                    response_format=self._response_format(schema_hint),
                )
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailable("Generative backend timed out") from exc
        except CircuitOpenError as exc:
            raise UpstreamUnavailable(str(exc)) from exc
        except openai.APIError as exc:
            raise UpstreamUnavailable(f"Generative backend error: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise EmptyGeneration("Generative backend returned no choices")

        message = choices[0].message
        content = getattr(message, "content", None)
        if not content or not content.strip():
            refusal = getattr(message, "refusal", None)
            raise EmptyGeneration(
                "Generative backend returned no content",
                detail=f"finish_reason={choices[0].finish_reason} refusal={refusal}",
            )

        logger.info(f"OpenAI returned {len(content)} characters", extra={"model": self.model})
        return content


@lru_cache()
def get_generative_client() -> GenerativeClient:
    """FastAPI dependency; overridden in tests"""
    return GenerativeClient()
