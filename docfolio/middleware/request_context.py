"""Request context middleware: request id, timing, logging and rate limiting.

Everything happens in one pass of a single middleware. The rate limiter is
the pure function ``check_rate_limit`` so it can be tested on its own.
"""

import logging
import threading
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import request_id_var
from ..exceptions import ErrorCode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------

# {client_key: (available_tokens, last_refill_timestamp)}
_rate_buckets: dict[str, tuple[float, float]] = {}
_rate_lock = threading.Lock()

_sweep_counter = 0
_SWEEP_EVERY = 100
_STALE_AFTER = 120.0


def check_rate_limit(
    bucket: dict[str, tuple[float, float]],
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> tuple[bool, float]:
    """Take one token for *key* from its bucket if one is available.

    Args:
        bucket: Per-client state, modified in place.
        key: Client identifier.
        max_per_minute: Sustained rate; also the burst size. 0 disables the limit.
        now: Current monotonic time, injectable for tests.

    Returns:
        ``(allowed, retry_after)`` where *retry_after* is the seconds until
        the next token, or 0.0 when the request is allowed.
    """
    global _sweep_counter

    if max_per_minute <= 0:
        return True, 0.0

    if now is None:
        now = time.monotonic()

    _sweep_counter += 1
    if _sweep_counter % _SWEEP_EVERY == 0:
        cutoff = now - _STALE_AFTER
        for stale in [k for k, (_, ts) in bucket.items() if ts < cutoff]:
            del bucket[stale]

    per_second = max_per_minute / 60.0

    if key in bucket:
        tokens, last = bucket[key]
        tokens = min(float(max_per_minute), tokens + (now - last) * per_second)
    else:
        tokens = float(max_per_minute)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / per_second


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

_UNLIMITED_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})


def _client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, throttles per client and logs the outcome."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request_id_var.set(rid)

        if request.url.path not in _UNLIMITED_PATHS:
            key = _client_key(request)
            with _rate_lock:
                allowed, retry_after = check_rate_limit(
                    _rate_buckets, key, settings.rate_limit_per_minute
                )
            if not allowed:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client": key, "path": request.url.path, "retry_after": round(retry_after, 1)},
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "success": False,
                        "message": "Too many requests",
                        "error": ErrorCode.RATE_LIMITED.value,
                        "details": {"retry_after": round(retry_after, 1)},
                    },
                    headers={
                        "Retry-After": str(int(retry_after) + 1),
                        "X-Request-ID": rid,
                    },
                )

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = rid
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
