# /teacherboard/config.py

"""
Central configuration for the Teacher Board backend.

All values come from the environment (a local `.env` file is loaded first for
development). Settings are read once and cached; tests that need different
values build their own `Settings` instance instead of mutating this one.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry behaviour for document store commits that hit transient errors."""
    max_retries: int = 3
    retry_delay_ms: int = 200


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./teacherboard.db"
    secret_key: str = "dev-secret-key-change-me"
    access_token_expire_minutes: int = 720
    auth_provider: str = "google"
    google_client_id: str = ""
    firebase_project_id: str = ""
    google_api_key: str = ""
    default_gemini_model: str = "gemini-2.0-flash-exp"
    public_base_url: str = ""
    student_view_timeout_seconds: float = 10.0
    cors_allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    auto_create_tables: bool = True
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)


@lru_cache()
def get_settings() -> Settings:
    origins = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./teacherboard.db"),
        secret_key=os.getenv("SECRET_KEY", "dev-secret-key-change-me"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720")),
        auth_provider=os.getenv("AUTH_PROVIDER", "google").lower(),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        firebase_project_id=os.getenv("FIREBASE_PROJECT_ID", ""),
        google_api_key=os.getenv("GOOGLE_API_KEY", ""),
        default_gemini_model=os.getenv("DEFAULT_GEMINI_MODEL", "gemini-2.0-flash-exp"),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "").rstrip("/"),
        student_view_timeout_seconds=float(os.getenv("STUDENT_VIEW_TIMEOUT_SECONDS", "10")),
        cors_allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        auto_create_tables=_get_bool("AUTO_CREATE_TABLES", True),
        retry_policy=RetryPolicy(
            max_retries=int(os.getenv("STORE_MAX_RETRIES", "3")),
            retry_delay_ms=int(os.getenv("STORE_RETRY_DELAY_MS", "200")),
        ),
    )
