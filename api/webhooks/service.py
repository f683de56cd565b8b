"""
Identity-provider webhook handling.

The provider delivers user lifecycle events through Svix. Each delivery is
signature-checked, then mirrored into the `adm_profile` role table:
- user.created -> insert profile with role 'public'
- user.updated -> sync primary email
- user.deleted -> delete profile
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import asyncpg
from fastapi import HTTPException, status
from svix.webhooks import Webhook, WebhookVerificationError

from core import settings
from profiles import repository as profiles_repository

logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")
DEFAULT_ROLE = "public"


class WebhookConfigError(RuntimeError):
    pass


def webhook_secret() -> str:
    secret = settings.env_str("CLERK_WEBHOOK_SECRET")
    if not secret:
        raise WebhookConfigError("CLERK_WEBHOOK_SECRET is not set.")
    return secret


def svix_headers(headers: Mapping[str, str]) -> dict[str, str]:
    values = {name: (headers.get(name) or "").strip() for name in SVIX_HEADERS}
    if not all(values.values()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error: Missing Svix headers",
        )
    return values


def verify_event(payload: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
    """
    Check the Svix signature and return the parsed event.
    """
    signed_headers = svix_headers(headers)
    try:
        wh = Webhook(webhook_secret())
    except WebhookConfigError as exc:
        logger.error("webhook_misconfigured error=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook is not configured.",
        ) from exc

    try:
        # Only the signature check is used; newer svix releases return None here.
        wh.verify(payload, signed_headers)
    except WebhookVerificationError as exc:
        logger.warning("webhook_rejected svix_id=%s error=%s", signed_headers["svix-id"], exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook signature.",
        ) from exc

    try:
        event = json.loads(payload)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook payload is not valid JSON.",
        ) from exc

    if not isinstance(event, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook payload must be a JSON object.",
        )
    return event


def primary_email(user: Mapping[str, Any]) -> str | None:
    """
    Pick the user's primary email, falling back to the first listed address.
    """
    addresses = user.get("email_addresses") or []
    if not isinstance(addresses, list):
        return None

    primary_id = user.get("primary_email_address_id")
    candidates = [a for a in addresses if isinstance(a, dict)]
    for address in candidates:
        if primary_id and address.get("id") == primary_id:
            return address.get("email_address") or None
    if candidates:
        return candidates[0].get("email_address") or None
    return None


async def _on_user_created(user: Mapping[str, Any]) -> None:
    user_id = str(user.get("id") or "").strip()
    if not user_id:
        logger.warning("webhook_user_created_without_id")
        return None

    row = await profiles_repository.insert_profile(
        clerk_user_id=user_id,
        email=primary_email(user),
        role=DEFAULT_ROLE,
    )
    if row is None:
        logger.info("profile_exists user_id=%s", user_id)
    else:
        logger.info("profile_created user_id=%s", user_id)


async def _on_user_updated(user: Mapping[str, Any]) -> None:
    user_id = str(user.get("id") or "").strip()
    if not user_id:
        return None
    row = await profiles_repository.update_email(user_id, email=primary_email(user))
    logger.info("profile_email_synced user_id=%s found=%s", user_id, row is not None)


async def _on_user_deleted(user: Mapping[str, Any]) -> None:
    user_id = str(user.get("id") or "").strip()
    if not user_id:
        return None
    deleted = await profiles_repository.delete_profile(user_id)
    logger.info("profile_deleted user_id=%s found=%s", user_id, deleted)


_HANDLERS = {
    "user.created": _on_user_created,
    "user.updated": _on_user_updated,
    "user.deleted": _on_user_deleted,
}


async def handle_event(event: Mapping[str, Any]) -> dict:
    event_type = str(event.get("type") or "")
    data = event.get("data")
    logger.info("webhook_event type=%s", event_type)

    handler = _HANDLERS.get(event_type)
    if handler is not None and isinstance(data, dict):
        try:
            await handler(data)
        except asyncpg.PostgresError:
            # Provider retries are not useful for a bad row; acknowledge and keep the log.
            logger.exception("profile_sync_failed type=%s user_id=%s", event_type, data.get("id"))
    return {"ok": True}
