from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Depends, Header, Request

from batchembed.settings import AppSettings

from .deps import get_settings_dep
from .errors import UnauthorizedError


def require_api_key(
    request: Request,
    settings: AppSettings = Depends(get_settings_dep),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    proxy_secret: Optional[str] = Header(default=None, alias="X-RapidAPI-Proxy-Secret"),
) -> str:
    """Accept the RapidAPI proxy secret first, then a bearer API key."""
    if settings.RAPIDAPI_PROXY_SECRET and proxy_secret:
        if hmac.compare_digest(proxy_secret.encode(), settings.RAPIDAPI_PROXY_SECRET.encode()):
            request.state.auth_type = "rapidapi"
            return "rapidapi"

    if not authorization:
        raise UnauthorizedError("Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid Authorization header format. Use: Bearer <token>")

    token = parts[1].strip()
    if not any(hmac.compare_digest(token.encode(), key.encode()) for key in settings.api_key_list()):
        raise UnauthorizedError("Invalid API key")

    request.state.auth_type = "api_key"
    return "api_key"
