# services.py
import logging
from typing import Optional

import anthropic
import httpx

from vibe_check.config import Settings
from vibe_check.core.audit import AnalysisInvoker
from vibe_check.core.fetchers import DEFAULT_FETCH_TIMEOUT
from vibe_check.rate_limit import RateLimitService, build_rate_limiter, close_redis, init_redis

log = logging.getLogger("vibe-check")


class AuditServices:
    """Process-wide collaborators of the audit endpoint, built once at startup."""

    def __init__(self, rate_limiter: RateLimitService, http_client: httpx.AsyncClient,
                 invoker: AnalysisInvoker, redis_client=None, fetch_timeout: float = DEFAULT_FETCH_TIMEOUT):
        self.rate_limiter = rate_limiter
        self.http_client = http_client
        self.invoker = invoker
        self.redis_client = redis_client
        self.fetch_timeout = fetch_timeout

    async def aclose(self):
        await self.http_client.aclose()
        await self.invoker.client.close()
        await close_redis(self.redis_client)


def build_invoker(settings: Settings) -> AnalysisInvoker:
    if not settings.anthropic_api_key:
        log.warning("ANTHROPIC_API_KEY not set; audits will fail with ai_service_error")
    llm_client = anthropic.AsyncAnthropic(
        api_key=settings.anthropic_api_key or "",
        timeout=settings.anthropic_timeout,
        max_retries=0,
    )
    return AnalysisInvoker(
        llm_client,
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
        api_key_configured=bool(settings.anthropic_api_key),
    )


async def build_services(settings: Optional[Settings] = None) -> AuditServices:
    settings = settings or Settings.from_env()

    redis_client = await init_redis(settings)
    rate_limiter = build_rate_limiter(settings, redis_client)
    invoker = build_invoker(settings)

    http_client = httpx.AsyncClient(timeout=settings.fetch_timeout)
    log.info("Audit services ready (rate limit backend=%s)", rate_limiter.backend)
    return AuditServices(rate_limiter, http_client, invoker, redis_client=redis_client,
                         fetch_timeout=settings.fetch_timeout)
