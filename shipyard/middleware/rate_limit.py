"""
Rate Limiting Middleware

Per-client rate limiting of the GraphQL endpoint using Redis.

Every operation, including sign in and password reset, goes through the
single /graphql route, so limiting that route per client address is what
slows down password guessing.

ARCHITECTURE: Token bucket in Redis, one bucket per client address.
If Redis is down the limiter lets requests through.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Optional
import redis
import time
import logging
from shipyard.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Token bucket rate limiter per client address.

    Uses Redis for distributed rate limiting.
    """

    def __init__(self, app, redis_client: Optional[redis.Redis] = None):
        super().__init__(app)

        self.limited_paths = ["/graphql"]
        self.redis_client = redis_client
        self.redis_available = False

        if not settings.RATE_LIMIT_ENABLED:
            logger.info("Rate limiting disabled by configuration")
            return

        try:
            if self.redis_client is None:
                self.redis_client = redis.from_url(
                    settings.REDIS_URL,
                    decode_responses=True,
                    socket_connect_timeout=5
                )
            self.redis_client.ping()
            self.redis_available = True
            logger.info("Redis connection established for rate limiting")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.error(f"Redis connection failed: {e}")
            # FALLBACK: Disable rate limiting if Redis is down

    async def dispatch(self, request: Request, call_next):
        """Apply rate limiting per client."""

        if not any(request.url.path.startswith(path) for path in self.limited_paths):
            return await call_next(request)

        # Graceful degradation: we choose availability over strict limiting
        if not self.redis_available:
            return await call_next(request)

        client_id = self._get_client_identifier(request)
        allowed, retry_after = self._check_rate_limit(client_id)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for client {client_id}",
                extra={"client": client_id}
            )
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Rate limit exceeded. Please try again later.",
                    "retry_after": retry_after
                },
                headers={"Retry-After": str(retry_after)}
            )

        return await call_next(request)

    def _check_rate_limit(self, client_id: str) -> tuple[bool, int]:
        """
        Check if request is allowed under rate limit.

        Returns: (allowed: bool, retry_after: int)

        Uses token bucket algorithm:
        - Bucket holds max tokens (burst capacity)
        - Tokens added at fixed rate
        - Each request consumes one token
        """
        rate_limit = settings.RATE_LIMIT_PER_MINUTE
        burst = settings.RATE_LIMIT_BURST

        key = f"rate_limit:{client_id}"
        key_timestamp = f"{key}:timestamp"

        try:
            current_tokens = self.redis_client.get(key)
            last_update = self.redis_client.get(key_timestamp)

            now = time.time()

            if current_tokens is None:
                # First request - initialize bucket and consume one token
                self.redis_client.setex(key, 60, burst - 1)
                self.redis_client.setex(key_timestamp, 60, now)
                return True, 0

            current_tokens = float(current_tokens)
            last_update = float(last_update) if last_update else now

            # Refill for the time since the last request
            elapsed = now - last_update
            tokens_to_add = elapsed * (rate_limit / 60.0)
            new_tokens = min(burst, current_tokens + tokens_to_add)

            if new_tokens >= 1:
                new_tokens -= 1
                self.redis_client.setex(key, 60, new_tokens)
                self.redis_client.setex(key_timestamp, 60, now)
                return True, 0

            tokens_needed = 1 - new_tokens
            retry_after = int((tokens_needed / (rate_limit / 60.0)) + 1)
            return False, retry_after

        except redis.RedisError as e:
            logger.error(f"Redis error in rate limiting: {e}")
            return True, 0

    def _get_client_identifier(self, request: Request) -> str:
        """
        Get identifier for rate limiting.

        The peer address, unless the peer is a trusted proxy. Proxies append
        to X-Forwarded-For, so the rightmost hop not added by one of them is
        the client; anything to its left was sent by the client itself.
        """
        peer = request.client.host if request.client else "unknown"
        trusted = settings.TRUSTED_PROXIES

        forwarded = request.headers.get("X-Forwarded-For")
        if not forwarded or peer not in trusted:
            return peer

        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        for hop in reversed(hops):
            if hop not in trusted:
                return hop
        return peer
