"""
Admin access routes.

A single shared secret (ADMIN_PASSWORD) gates the admin view. Clients send
it in the X-Admin-Key header on admin routes.
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Header
import structlog

from config import get_settings
from models.inventory import AdminSessionRequest, AdminSessionResponse
from exceptions import AuthenticationError

logger = structlog.get_logger(__name__)

router = APIRouter()


def check_admin_password(candidate: Optional[str]) -> bool:
    """Compare against the configured secret. False when none is configured."""
    expected = get_settings().admin_password
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


async def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    """
    Dependency for admin-only routes.

    Raises:
        AuthenticationError: Header missing or wrong
    """
    if not check_admin_password(x_admin_key):
        logger.warning("admin_auth_failed", has_key=bool(x_admin_key))
        raise AuthenticationError()


# ===================
# ROUTES
# ===================

@router.post("/session", response_model=AdminSessionResponse)
async def open_admin_session(data: AdminSessionRequest):
    """
    Check the admin password.

    Raises:
        401: Incorrect password
    """
    if not check_admin_password(data.password):
        logger.warning("admin_login_failed")
        raise AuthenticationError("Incorrect password. Try again.")

    logger.info("admin_login")
    return AdminSessionResponse(authorized=True)
