# core/rate_limiter.py

from collections import defaultdict
from threading import Lock
from typing import Dict, List, Optional, Tuple
import time

from fastapi import HTTPException, Request


# Sliding-window limiter, process-local.
# Keys are "<scope>:<identity>" so signup and verification
# requests never share a budget.
_rate_limit_store: Dict[str, List[float]] = defaultdict(list)
_lock = Lock()


def check_rate_limit(
    identifier: str,
    max_requests: int = 10,
    window_seconds: int = 60,
) -> Tuple[bool, int]:
    """
    Record one hit for identifier and report whether it is allowed.

    Returns:
        (allowed, remaining)
    """
    now = time.time()
    window_start = now - window_seconds

    with _lock:
        hits = [ts for ts in _rate_limit_store[identifier] if ts > window_start]

        if len(hits) >= max_requests:
            _rate_limit_store[identifier] = hits
            return False, 0

        hits.append(now)
        _rate_limit_store[identifier] = hits
        return True, max_requests - len(hits)


def get_rate_limit_identifier(request: Request, scope: str, user_id: Optional[str] = None) -> str:
    """
    Prefer the authenticated user; otherwise the client IP
    (first hop of X-Forwarded-For when behind a proxy).
    """
    if user_id:
        return f"{scope}:user:{user_id}"

    client_ip = request.client.host if request.client else "unknown"
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()

    return f"{scope}:ip:{client_ip}"


def require_rate_limit(
    request: Request,
    scope: str,
    user_id: Optional[str] = None,
    max_requests: int = 10,
    window_seconds: int = 60,
) -> int:
    """
    Raises:
        HTTPException: 429 Too Many Requests if the limit is exceeded
    """
    identifier = get_rate_limit_identifier(request, scope, user_id)
    allowed, remaining = check_rate_limit(identifier, max_requests, window_seconds)

    if not allowed:
        raise HTTPException(
            status_code=429,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds.",
            headers={
                "X-RateLimit-Limit": str(max_requests),
                "X-RateLimit-Window": str(window_seconds),
                "Retry-After": str(window_seconds),
            },
        )

    return remaining


def reset_rate_limits():
    with _lock:
        _rate_limit_store.clear()
