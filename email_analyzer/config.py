import math
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

APP_NAME = "Email Analyzer API"
APP_DESCRIPTION = "Forwards email bodies to an OpenAI assistant and returns its analysis"
APP_VERSION = "1.0.0"

RESPONSE_MODES = ("verbatim", "structured")

# OpenAI run statuses that mean "keep waiting"
TRANSIENT_RUN_STATUSES = ("queued", "in_progress", "cancelling")


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings(BaseModel):
    """Process-wide configuration, read once and never mutated."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[str] = None
    assistant_id: Optional[str] = None
    port: int = 3000
    environment: str = "development"
    response_mode: str = "verbatim"
    poll_interval: float = 1.0
    max_wait: float = 15.0
    log_dir: str = "."
    log_level: str = "INFO"

    @property
    def file_logging(self) -> bool:
        return self.response_mode == "verbatim"

    @classmethod
    def from_env(cls) -> "Settings":
        mode = (os.getenv("RESPONSE_MODE") or "verbatim").strip().lower()
        if mode not in RESPONSE_MODES:
            mode = "verbatim"

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            assistant_id=os.getenv("ASSISTANT_ID") or None,
            port=_env_int("PORT", 3000),
            environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV") or "development",
            response_mode=mode,
            poll_interval=_env_float("RUN_POLL_INTERVAL", 1.0),
            max_wait=_env_float("RUN_MAX_WAIT", 15.0),
            log_dir=os.getenv("LOG_DIR") or ".",
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
