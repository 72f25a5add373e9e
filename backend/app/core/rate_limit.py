import time
from collections import defaultdict, deque
from typing import Deque, Dict

from fastapi import HTTPException, Request, status

from app.core.config import get_settings

settings = get_settings()

WINDOW_SECONDS = 60

# Simple in-memory rate limiter: client key -> attempt timestamps (seconds)
_rate_buckets: Dict[str, Deque[float]] = defaultdict(deque)


def _drop_idle_buckets(now: float) -> None:
    idle = [key for key, bucket in _rate_buckets.items() if not bucket or now - bucket[-1] > WINDOW_SECONDS]
    for key in idle:
        del _rate_buckets[key]


def check_invite_attempts(request: Request) -> None:
    """Throttle invitation code guesses per client address."""
    limit = settings.INVITE_ATTEMPTS_PER_MINUTE
    now = time.monotonic()
    _drop_idle_buckets(now)
    key = request.client.host if request.client else "unknown"
    bucket = _rate_buckets[key]
    while bucket and now - bucket[0] > WINDOW_SECONDS:
        bucket.popleft()
    if len(bucket) >= limit:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many attempts, please try again later",
        )
    bucket.append(now)


def reset_invite_attempts() -> None:
    _rate_buckets.clear()
