"""Authentication dependency for admin API endpoints.

Bearer token in the Authorization header, compared against
ADMIN_API_KEY from the settings attached to the running app.

Behavior matrix:
  ADMIN_API_KEY set + valid token   → allow
  ADMIN_API_KEY set + wrong/missing → 401 Unauthorized
  ADMIN_API_KEY empty + DEBUG=true  → allow (local dev convenience)
  ADMIN_API_KEY empty + DEBUG=false → 403 Forbidden (locked in production)
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

log = logging.getLogger("booking.auth")

_bearer_scheme = HTTPBearer(auto_error=False)


async def require_admin_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> None:
    """FastAPI dependency — protect HTTP admin endpoints with bearer token."""
    settings = request.app.state.settings
    key = settings.admin_api_key

    if not key:
        # No key configured
        if settings.debug:
            return  # local dev, no auth
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key not configured. Set ADMIN_API_KEY in .env.",
        )

    if credentials is None or not hmac.compare_digest(credentials.credentials, key):
        log.warning("Rejected admin request to %s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
