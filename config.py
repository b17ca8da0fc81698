import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv


load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    summary_enabled: bool = True
    summary_interval_seconds: float = 60
    rate_limit: str = "100/minute"
    rate_limit_enabled: bool = True
    max_body_size: int = 64 * 1024
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def get_settings() -> Settings:
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        summary_enabled=_env_bool("SUMMARY_ENABLED", True),
        summary_interval_seconds=_env_float("SUMMARY_INTERVAL_SECONDS", 60),
        rate_limit=os.getenv("RATE_LIMIT", "100/minute"),
        rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
        max_body_size=_env_int("MAX_BODY_SIZE", 64 * 1024),
        cors_origins=origins or ["*"],
    )
