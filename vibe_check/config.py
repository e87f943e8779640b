# config.py
import os
from typing import Optional

from pydantic import BaseModel


class Settings(BaseModel):
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_max_tokens: int = 2048
    anthropic_timeout: float = 60.0

    # unset REDIS_URL -> in-memory rate limiting
    redis_url: Optional[str] = None
    redis_token: Optional[str] = None
    redis_timeout: float = 2.0

    rate_limit_max: int = 3
    rate_limit_window: int = 3600  # seconds

    fetch_timeout: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514"),
            anthropic_max_tokens=int(os.getenv("ANTHROPIC_MAX_TOKENS", 2048)),
            anthropic_timeout=float(os.getenv("ANTHROPIC_TIMEOUT", 60)),
            redis_url=os.getenv("REDIS_URL") or None,
            redis_token=os.getenv("REDIS_TOKEN") or None,
            redis_timeout=float(os.getenv("REDIS_TIMEOUT", 2)),
            rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", 3)),
            rate_limit_window=int(os.getenv("RATE_LIMIT_WINDOW", 3600)),
            fetch_timeout=float(os.getenv("FETCH_TIMEOUT", 10)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def redis_configured(self) -> bool:
        return bool(self.redis_url)
