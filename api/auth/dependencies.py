"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, HTTPException, status

from . import service

# Cookie the identity provider's frontend SDK stores the session token in.
SESSION_COOKIE = "__session"


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header.",
        )

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format.",
        )

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization must be: Bearer <token>.",
        )
    return token


async def get_session_token(
    authorization: str | None = Header(default=None),
    session_cookie: str | None = Cookie(default=None, alias=SESSION_COOKIE),
) -> str:
    # Header wins; fall back to the cookie for same-site browser calls.
    if authorization is None and (session_cookie or "").strip():
        return session_cookie.strip()
    return _extract_bearer_token(authorization)


async def get_current_user(session_token: str = Depends(get_session_token)) -> dict:
    return await service.get_user_from_session_token(session_token)


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    return await service.require_admin_profile(str(current_user["id"]))
