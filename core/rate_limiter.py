# core/rate_limiter.py

from typing import Dict, List, Optional, Tuple
from collections import defaultdict
from threading import Lock
import time

from fastapi import HTTPException, Request


# Sliding-window limiter kept in process memory
_rate_limit_store: Dict[str, List[float]] = defaultdict(list)
_store_lock = Lock()


def check_rate_limit(identifier: str, max_requests: int, window_seconds: int) -> Tuple[bool, int]:
    """
    Record one hit for `identifier` unless the window is already full.

    Returns:
        Tuple of (allowed: bool, remaining: int)
    """
    now = time.time()
    window_start = now - window_seconds

    with _store_lock:
        hits = [ts for ts in _rate_limit_store[identifier] if ts > window_start]

        if len(hits) >= max_requests:
            _rate_limit_store[identifier] = hits
            return False, 0

        hits.append(now)
        _rate_limit_store[identifier] = hits
        return True, max_requests - len(hits)


def reset_rate_limits():
    with _store_lock:
        _rate_limit_store.clear()


def client_identifier(request: Request) -> str:
    """Client IP, honoring the first X-Forwarded-For hop behind a proxy."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return f"ip:{forwarded_for.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def rate_limited(scope: str, max_requests: int, window_seconds: int):
    """
    FastAPI dependency factory.

    Usage:
        @router.post("/submit", dependencies=[Depends(rate_limited("submit", 5, 3600))])
    """

    def dependency(request: Request) -> Optional[int]:
        identifier = f"{scope}:{client_identifier(request)}"
        allowed, remaining = check_rate_limit(identifier, max_requests, window_seconds)
        if not allowed:
            raise HTTPException(
                status_code=429,
                detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds.",
                headers={
                    "X-RateLimit-Limit": str(max_requests),
                    "Retry-After": str(window_seconds),
                },
            )
        return remaining

    return dependency
