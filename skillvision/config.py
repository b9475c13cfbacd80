from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import os

class Settings(BaseSettings):
    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.7
    openai_timeout_seconds: float = 45.0
    openai_max_retries: int = 0  # No retry by default; resubmitting is the caller's retry
    openai_max_concurrent: int = 10
    openai_response_format: str = "json_object"  # json_object | json_schema

    # Test Mode - canned recommendation, no OpenAI calls
    test_mode: bool = False

    # Database - hosted platforms provide DATABASE_URL, fallback to SQLite for local
    database_url: Optional[str] = None

    # Auth - when set, Bearer JWTs (HS256) are required instead of X-User-ID
    jwt_secret: str = ""

    # App Settings
    app_name: str = "SkillVision AI"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = True
    submit_rate_limit: str = "10/minute"

    # API Settings
    backend_host: str = "0.0.0.0"
    backend_port: int = int(os.getenv("PORT", "8000"))

    class Config:
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Auto-detect database URL
        if self.database_url is None:
            self.database_url = "sqlite+aiosqlite:///./database/skillvision.db"
        # postgres:// and postgresql:// need the asyncpg driver for the async engine
        if self.database_url.startswith("postgres://"):
            self.database_url = self.database_url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif self.database_url.startswith("postgresql://"):
            self.database_url = self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

@lru_cache()
def get_settings() -> Settings:
    return Settings()
