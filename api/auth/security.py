"""
Session-token verification for the external identity provider.

The provider (Clerk) signs short-lived session JWTs. Two modes:
- `AUTH_JWKS_URL` set: RS256, public keys fetched from the provider's JWKS.
- otherwise: shared-secret signing (`AUTH_JWT_SECRET`, `AUTH_JWT_ALG`),
  used for local development and tests.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import jwt

from core import settings


class AuthSecurityError(RuntimeError):
    pass


# kid -> JWK dict, plus the time it was fetched.
_jwks_cache: dict[str, Any] = {"keys": {}, "fetched_at": 0.0}


def jwks_url() -> str:
    return settings.env_str("AUTH_JWKS_URL")


def jwks_cache_seconds() -> int:
    return settings.env_int("AUTH_JWKS_CACHE_SECONDS", 3600)


def jwks_min_refetch_seconds() -> int:
    return settings.env_int("AUTH_JWKS_MIN_REFETCH_SECONDS", 30)


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, configure AUTH_JWKS_URL instead.
    return settings.env_str("AUTH_JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return settings.env_str("AUTH_JWT_ALG", "HS256")


def jwt_issuer() -> str:
    return settings.env_str("AUTH_JWT_ISSUER")


def authorized_parties() -> list[str]:
    return settings.env_list("AUTH_AUTHORIZED_PARTIES")


def clock_skew_seconds() -> int:
    return settings.env_int("AUTH_CLOCK_SKEW_SECONDS", 5)


def now_epoch_s() -> float:
    return time.time()


def clear_jwks_cache() -> None:
    _jwks_cache["keys"] = {}
    _jwks_cache["fetched_at"] = 0.0


async def fetch_jwks(url: str, *, timeout_s: float = 10.0) -> dict[str, dict]:
    """
    Download the provider's key set and index it by `kid`.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout_s) as client:
            resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise AuthSecurityError(f"Failed to fetch JWKS: {exc}") from exc

    if resp.status_code != 200:
        raise AuthSecurityError(f"JWKS request failed: {resp.status_code} {resp.text[:300]}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise AuthSecurityError("JWKS response is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise AuthSecurityError("JWKS response must be a JSON object.")

    keys = data.get("keys")
    if not isinstance(keys, list):
        raise AuthSecurityError("JWKS response has no keys.")

    return {str(k["kid"]): k for k in keys if isinstance(k, dict) and k.get("kid")}


async def _jwk_for_kid(kid: str) -> dict:
    url = jwks_url()
    age = now_epoch_s() - float(_jwks_cache["fetched_at"])
    is_stale = age > jwks_cache_seconds()

    # Unknown kid usually means the provider rotated keys; refetch, but at
    # most once per min-refetch window so forged kids can't drive fetches.
    may_refetch = age >= jwks_min_refetch_seconds()
    if is_stale or (kid not in _jwks_cache["keys"] and may_refetch):
        _jwks_cache["keys"] = await fetch_jwks(url)
        _jwks_cache["fetched_at"] = now_epoch_s()

    jwk = _jwks_cache["keys"].get(kid)
    if jwk is None:
        raise AuthSecurityError("Signing key not found for session token.")
    return jwk


async def _verification_key(token: str) -> tuple[Any, list[str]]:
    if not jwks_url():
        return jwt_secret(), [jwt_algorithm()]

    try:
        header = jwt.get_unverified_header(token)
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Malformed session token.") from exc

    kid = str(header.get("kid") or "").strip()
    if not kid:
        raise AuthSecurityError("Session token has no key id.")

    jwk = await _jwk_for_kid(kid)
    try:
        key = jwt.PyJWK(jwk).key
    except (jwt.PyJWTError, ValueError) as exc:
        raise AuthSecurityError("Provider signing key is unusable.") from exc
    return key, ["RS256"]


async def decode_session_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Session token is empty.")

    key, algorithms = await _verification_key(raw)
    issuer = jwt_issuer()
    options: dict[str, Any] = {"require": ["exp", "sub"]}

    try:
        payload = jwt.decode(
            raw,
            key,
            algorithms=algorithms,
            issuer=issuer or None,
            options=options,
            leeway=clock_skew_seconds(),
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Session token is expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid session token.") from exc

    parties = authorized_parties()
    if parties:
        azp = str(payload.get("azp") or "").strip()
        if azp not in parties:
            raise AuthSecurityError("Session token was issued for another origin.")

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise AuthSecurityError("Session token has no subject.")

    return payload
