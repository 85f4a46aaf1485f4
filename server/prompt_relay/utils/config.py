# prompt_relay/utils/config.py
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env(key: str, default: str = "") -> str:
    return str(os.environ.get(key, default)).strip()


@dataclass(frozen=True)
class RelaySettings:
    api_key: str
    text_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-3.0-generate-002"
    video_model: str = "veo-2.0-generate-001"
    video_poll_interval_sec: float = 5.0
    video_poll_max_attempts: int = 120
    video_poll_timeout_sec: float = 900.0
    request_timeout_sec: int = 180
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 8000

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)


def load_settings() -> RelaySettings:
    """Read the relay settings from the environment (and .env, if present)."""
    origins = [o.strip() for o in _env("RELAY_CORS_ORIGINS", "*").split(",") if o.strip()]
    return RelaySettings(
        api_key=_env("API_KEY") or _env("GEMINI_API_KEY"),
        text_model=_env("RELAY_TEXT_MODEL", "gemini-2.5-flash"),
        image_model=_env("RELAY_IMAGE_MODEL", "imagen-3.0-generate-002"),
        video_model=_env("RELAY_VIDEO_MODEL", "veo-2.0-generate-001"),
        video_poll_interval_sec=float(_env("RELAY_VIDEO_POLL_INTERVAL", "5")),
        video_poll_max_attempts=int(_env("RELAY_VIDEO_POLL_MAX_ATTEMPTS", "120")),
        video_poll_timeout_sec=float(_env("RELAY_VIDEO_POLL_TIMEOUT", "900")),
        request_timeout_sec=int(_env("RELAY_REQUEST_TIMEOUT", "180")),
        log_level=_env("RELAY_LOG_LEVEL", "INFO").upper(),
        cors_origins=origins or ["*"],
        host=_env("RELAY_HOST", "0.0.0.0"),
        port=int(_env("RELAY_PORT", "8000")),
    )
