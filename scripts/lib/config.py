"""
Runtime configuration for Intent Signal Hub.

Values come from environment variables (a project-root .env is loaded first).
The Settings object is passed explicitly to the data layer and the HubSpot
client instead of being read ad hoc at each call site.

Usage:
    from scripts.lib.config import get_settings
    settings = get_settings()
    settings.batch_size   # 50
"""
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_settings: Optional["Settings"] = None


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


class Settings(BaseModel):
    supabase_url: str = ""
    supabase_key: str = ""
    intent_table: str = "intent_data"
    batch_size: int = Field(50, ge=1)

    pause_api_calls: bool = False
    hubspot_api_key: str = ""

    log_level: str = "INFO"
    log_to_file: bool = True

    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:8001"]
    )
    port: int = 8001
    environment: str = "development"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        origins = os.getenv("CORS_ORIGINS", "")
        kwargs = {}
        if origins:
            kwargs["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=(
                os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
                or os.getenv("SUPABASE_KEY", "")
            ),
            intent_table=os.getenv("INTENT_TABLE", "intent_data"),
            batch_size=int(os.getenv("INTENT_BATCH_SIZE", "50")),
            pause_api_calls=_env_bool("PAUSE_API_CALLS"),
            hubspot_api_key=os.getenv("HUBSPOT_API_KEY", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_to_file=_env_bool("LOG_TO_FILE", "true"),
            port=int(os.getenv("DASHBOARD_PORT", "8001")),
            environment=os.getenv("ENVIRONMENT", "development"),
            debug=_env_bool("DEBUG"),
            **kwargs,
        )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def get_settings() -> Settings:
    """Return the process-wide settings, loading .env on first use."""
    global _settings
    if _settings is None:
        load_dotenv(PROJECT_ROOT / ".env")
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings (tests and reloads)."""
    global _settings
    _settings = None
