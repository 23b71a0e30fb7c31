"""
Smart Inventory Predictor Configuration

Uses pydantic-settings for type-safe environment variable loading.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_WORKFLOW_TRIGGER_URL = "https://asia-south1.workflow.boltic.app/e173dead-7474-44c1-8558-d60f325116b0"

# Find .env file: check CWD first, then parent (project root)
_env_file = Path(".env")
if not _env_file.exists():
    _parent_env = Path(__file__).resolve().parent.parent.parent / ".env"
    if _parent_env.exists():
        _env_file = _parent_env


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Smart Inventory Predictor"
    app_version: str = "1.0.0"
    app_env: str = "local"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Upstream forecasting workflow
    workflow_trigger_url: str = DEFAULT_WORKFLOW_TRIGGER_URL
    workflow_timeout_seconds: float = 30.0

    # CORS
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(_env_file),
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    settings = Settings()
    _enforce_runtime_guardrails(settings)
    return settings


def _enforce_runtime_guardrails(settings: Settings) -> None:
    if not settings.workflow_trigger_url.strip():
        raise ValueError("Refusing to start without a workflow trigger URL")
    if settings.workflow_timeout_seconds <= 0:
        raise ValueError("Workflow timeout must be a positive number of seconds")

    env = settings.app_env.strip().lower()
    is_local = env in {"", "local", "dev", "development", "test"}
    if is_local:
        return

    if settings.debug:
        raise ValueError("Refusing to start with debug=true outside local/dev/test")
