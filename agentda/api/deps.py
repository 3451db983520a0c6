"""Shared request dependencies: caller identity and rate limiting."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Response

from agentda.config import settings
from agentda.ratelimit import FixedWindowRateLimiter, get_rate_limiter


def caller_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Identity of the signed-in caller, set by the auth proxy in front of the API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id


def enforce_rate_limit(
    response: Response,
    identifier: Annotated[str, Depends(caller_id)],
    limiter: Annotated[FixedWindowRateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Admit the request or fail with 429; always report the window state."""
    decision = limiter.check(identifier)
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
    }
    if not decision.allowed:
        raise HTTPException(status_code=429, detail="Rate limit exceeded", headers=headers)
    for name, value in headers.items():
        response.headers[name] = value


def require_llm_key() -> None:
    if not settings.anthropic_api_key:
        raise HTTPException(status_code=503, detail="Service configuration error")
