from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env lives at the project root: pt_tracker/core/config.py -> core -> pt_tracker -> root
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"


class Settings(BaseSettings):
    secret_key: str = "change-me-in-production"
    database_url: str = "sqlite:///./pt_tracker.db"
    # CORS: comma separated origins; "*" for the mobile dev build
    cors_origins: str = "*"
    rate_limit_per_minute: int = 60
    # Login endpoints get their own limit (access codes are short)
    rate_limit_login_per_minute: int = 10
    # Single trainer account. The bcrypt hash wins when both are set.
    trainer_password: str = ""
    trainer_password_hash: str = ""
    upload_dir: str = str(_ROOT / "uploads")
    push_api_url: str = EXPO_PUSH_URL
    push_access_token: str = ""
    push_timeout_seconds: float = 10.0
    scheduler_enabled: bool = True
    reminder_interval_seconds: int = 5 * 60
    environment: str = "development"

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("trainer_password", "trainer_password_hash", "push_access_token", mode="before")
    @classmethod
    def strip_secret(cls, v: str | None) -> str:
        """Trailing newlines from copy-pasted secrets break comparisons."""
        return (v or "").strip()


settings = Settings()


def cors_origins_list() -> list[str]:
    if not settings.cors_origins or settings.cors_origins.strip() == "*":
        return ["*"]
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]


def is_trainer_login_configured() -> bool:
    return bool(settings.trainer_password_hash or settings.trainer_password)
