"""
Load test script for SkillVision AI backend.

Simulates a realistic student flow:
  1. Health check
  2. Fetch quiz questions
  3. Create a profile (once per simulated user)
  4. Submit the quiz
  5. List recommendations

Run:
    pip install locust
    locust -f tests/load/locustfile.py --host http://localhost:8000

Then open http://localhost:8089 to configure users/spawn rate and start.
Point the backend at TEST_MODE=true unless you mean to spend OpenAI credits.
"""

import os
import time
import uuid
from locust import HttpUser, task, between, SequentialTaskSet


# ---------------------------------------------------------------------------
# Configuration - override with env vars for different environments
# ---------------------------------------------------------------------------
AUTH_TOKEN = os.getenv("LOAD_TEST_TOKEN", "")        # HS256 JWT when JWT_SECRET is set
USER_PREFIX = os.getenv("LOAD_TEST_USER_PREFIX", "load-test")


def auth_headers(user_id):
    headers = {"X-User-ID": user_id, "X-Correlation-ID": f"load-test-{time.monotonic()}"}
    if AUTH_TOKEN:
        headers["Authorization"] = f"Bearer {AUTH_TOKEN}"
    return headers


# ---------------------------------------------------------------------------
# Sequential flow: questions -> submit -> recommendations
# ---------------------------------------------------------------------------
class QuizFlow(SequentialTaskSet):
    """Simulate a student answering the quiz and reading the result."""

    answers = None

    @task
    def fetch_questions(self):
        with self.client.get("/api/quiz/questions", name="/api/quiz/questions", catch_response=True) as resp:
            if resp.status_code != 200:
                resp.failure(f"Questions failed: {resp.status_code}")
                return
            questions = resp.json().get("questions", [])
            self.answers = [
                {"question_id": q["id"], "response": q["options"][0]}
                for q in questions
            ]

    @task
    def submit_quiz(self):
        if self.answers is None:
            return

        with self.client.post(
            "/api/quiz/submit",
            json={"responses": self.answers},
            headers=auth_headers(self.user.user_id),
            name="/api/quiz/submit",
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                if not resp.json().get("recommendations"):
                    resp.failure("No recommendation in response")
            elif resp.status_code == 429:
                resp.success()  # rate limited, expected under load
            else:
                resp.failure(f"Submit failed: {resp.status_code} {resp.json().get('correlation_id', '')}")

    @task
    def list_recommendations(self):
        self.client.get(
            "/api/recommendations",
            headers=auth_headers(self.user.user_id),
            name="/api/recommendations",
        )

    @task
    def stop(self):
        self.interrupt()


# ---------------------------------------------------------------------------
# User class
# ---------------------------------------------------------------------------
class StudentUser(HttpUser):
    """Simulates a typical student session."""

    wait_time = between(1, 3)

    def on_start(self):
        self.user_id = f"{USER_PREFIX}-{uuid.uuid4().hex[:8]}"
        self.client.post(
            "/api/students",
            json={
                "name": "Load Test",
                "age": 17,
                "education_level": "High School Student",
                "interests": "robotics, AI",
                "strategic_preference": "all",
            },
            headers=auth_headers(self.user_id),
            name="/api/students",
        )

    @task(3)
    def health_check(self):
        """Lightweight probe - should always be fast."""
        self.client.get("/health", name="/health")

    @task(1)
    def my_profile(self):
        self.client.get(
            "/api/students/me",
            headers=auth_headers(self.user_id),
            name="/api/students/me",
        )

    @task(1)
    def metrics(self):
        """Fetch in-process metrics."""
        self.client.get("/metrics", name="/metrics")

    tasks = {QuizFlow: 1}
