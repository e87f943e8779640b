# rate_limit.py
import time
import uuid
import random
import logging
import datetime
from typing import Callable, Dict, Mapping, Optional, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from vibe_check.config import Settings
from vibe_check.models.schema import RateLimitDecision

log = logging.getLogger("vibe-check")

KEY_PREFIX = "vibe-check-audit"
CLEANUP_PROBABILITY = 0.1

# KEYS[1] = window key
# ARGV = now_ms, window_ms, limit, member
SLIDING_WINDOW_LUA = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', key, '-inf', now - window)
local count = redis.call('ZCARD', key)
local allowed = 0
if count < limit then
    redis.call('ZADD', key, now, ARGV[4])
    count = count + 1
    allowed = 1
end
redis.call('PEXPIRE', key, window)

local reset = now + window
local oldest = redis.call('ZRANGE', key, 0, 0, 'WITHSCORES')
if oldest[2] then
    reset = tonumber(oldest[2]) + window
end
return {allowed, limit - count, reset}
"""


def _from_epoch(seconds: float) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(seconds, tz=datetime.timezone.utc)


class RateLimiter(Protocol):
    async def limit(self, identifier: str) -> RateLimitDecision: ...


class RedisRateLimiter:
    """Sliding-window log in a sorted set; one atomic script per call."""

    def __init__(self, redis, max_requests: int = 3, window_seconds: int = 3600,
                 prefix: str = KEY_PREFIX, clock: Callable[[], float] = time.time):
        self.redis = redis
        self.max_requests = max_requests
        self.window_ms = window_seconds * 1000
        self.prefix = prefix
        self.clock = clock
        self._script = redis.register_script(SLIDING_WINDOW_LUA)

    async def limit(self, identifier: str) -> RateLimitDecision:
        now_ms = int(self.clock() * 1000)
        allowed, remaining, reset_ms = await self._script(
            keys=[f"{self.prefix}:{identifier}"],
            args=[now_ms, self.window_ms, self.max_requests, f"{now_ms}-{uuid.uuid4().hex}"],
        )
        return RateLimitDecision(
            allowed=bool(int(allowed)),
            remaining=max(0, int(remaining)),
            reset_at=_from_epoch(int(reset_ms) / 1000),
        )


class InMemoryRateLimiter:
    """
    Per-process fallback used when no Redis is configured.
    Not shared between workers; relies on the event loop for exclusion
    (no await between reading and writing a record).
    """

    def __init__(self, max_requests: int = 3, window_seconds: int = 3600,
                 clock: Callable[[], float] = time.time,
                 rng: Callable[[], float] = random.random):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.rng = rng
        self.requests: Dict[str, dict] = {}

    async def limit(self, identifier: str) -> RateLimitDecision:
        now = self.clock()

        if self.rng() < CLEANUP_PROBABILITY:
            self.cleanup()

        record = self.requests.get(identifier)
        if record is None or now >= record["reset_at"]:
            reset_at = now + self.window_seconds
            self.requests[identifier] = {"count": 1, "reset_at": reset_at}
            return RateLimitDecision(
                allowed=True, remaining=self.max_requests - 1, reset_at=_from_epoch(reset_at)
            )

        if record["count"] >= self.max_requests:
            return RateLimitDecision(allowed=False, remaining=0, reset_at=_from_epoch(record["reset_at"]))

        record["count"] += 1
        return RateLimitDecision(
            allowed=True,
            remaining=self.max_requests - record["count"],
            reset_at=_from_epoch(record["reset_at"]),
        )

    def cleanup(self):
        now = self.clock()
        expired = [k for k, v in self.requests.items() if now >= v["reset_at"]]
        for k in expired:
            del self.requests[k]


class RateLimitService:
    def __init__(self, limiter: RateLimiter, max_requests: int = 3,
                 clock: Callable[[], float] = time.time):
        self.limiter = limiter
        self.max_requests = max_requests
        self.clock = clock

    @property
    def backend(self) -> str:
        return "redis" if isinstance(self.limiter, RedisRateLimiter) else "memory"

    async def check(self, identifier: str) -> RateLimitDecision:
        try:
            decision = await self.limiter.limit(identifier)
        except (RedisError, OSError, TimeoutError) as e:
            # fail open: an unavailable store must not block traffic
            log.error("Rate limit check failed for %s, allowing request: %s", identifier, e)
            return RateLimitDecision(allowed=True, remaining=0, reset_at=_from_epoch(self.clock()))
        if not decision.allowed:
            log.info("Rate limit exceeded for %s (resets %s)", identifier, decision.reset_at.isoformat())
        return decision

    def message(self, decision: RateLimitDecision) -> str:
        return (
            f"Rate limit exceeded. You can perform {self.max_requests} audits per hour. "
            f"Try again at {decision.reset_at.strftime('%H:%M:%S')} UTC."
        )


def get_client_ip(headers: Mapping[str, str]) -> str:
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip

    cf_connecting_ip = headers.get("cf-connecting-ip")
    if cf_connecting_ip:
        return cf_connecting_ip

    return "anonymous"


# ---------- redis lifecycle ----------
async def init_redis(settings: Settings) -> Optional[aioredis.Redis]:
    if not settings.redis_configured:
        log.info("REDIS_URL not set, using in-memory rate limiting")
        return None
    client = aioredis.Redis.from_url(
        settings.redis_url,
        password=settings.redis_token,
        decode_responses=True,
        socket_timeout=settings.redis_timeout,
        socket_connect_timeout=settings.redis_timeout,
    )
    try:
        await client.ping()
        log.info("Connected to Redis for rate limiting")
    except (RedisError, OSError) as e:
        log.error("Failed to connect to Redis, using in-memory rate limiting: %s", e)
        await client.aclose()
        return None
    return client


async def close_redis(client: Optional[aioredis.Redis]):
    if client:
        await client.aclose()


def build_rate_limiter(settings: Settings, redis_client: Optional[aioredis.Redis]) -> RateLimitService:
    if redis_client is not None:
        limiter = RedisRateLimiter(
            redis_client, max_requests=settings.rate_limit_max, window_seconds=settings.rate_limit_window
        )
    else:
        limiter = InMemoryRateLimiter(
            max_requests=settings.rate_limit_max, window_seconds=settings.rate_limit_window
        )
    return RateLimitService(limiter, max_requests=settings.rate_limit_max)
