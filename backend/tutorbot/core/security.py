"""Shared-secret gate for the admin endpoints."""

import json
import logging
import secrets

from fastapi import Depends, HTTPException, Request

from tutorbot.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

ADMIN_HEADER = "x-admin-password"
_BODY_FIELDS = ("adminPassword", "password")


async def _password_from_body(request: Request) -> str | None:
    if request.method in ("GET", "HEAD", "DELETE"):
        return None
    body = await request.body()
    if not body:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    for field in _BODY_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            return value
    return None


def password_matches(supplied: str | None, expected: str) -> bool:
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())


async def require_admin(request: Request, config: Settings = Depends(get_settings)) -> None:
    """Reject the request with 403 unless it carries the admin secret.

    The header wins; a JSON body field is only consulted when the header is absent.
    """
    supplied = request.headers.get(ADMIN_HEADER)
    if supplied is None:
        supplied = await _password_from_body(request)

    if not password_matches(supplied, config.admin_password):
        logger.warning(f"Admin access denied for {request.method} {request.url.path}")
        raise HTTPException(status_code=403, detail="Access denied")
