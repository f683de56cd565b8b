"""
Webhook endpoints called by the identity provider.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from . import service

router = APIRouter()


@router.post("/api/webhook/clerk")
async def clerk_webhook(request: Request) -> dict:
    # Signature covers the exact bytes; do not let FastAPI parse the body.
    payload = await request.body()
    event = service.verify_event(payload, request.headers)
    return await service.handle_event(event)
