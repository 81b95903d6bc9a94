"""
HTTP Basic auth for the operator shipping routes (rate lookup, label purchase).

Storefront quoting stays public; only routers included with require_auth()
are protected.
"""

import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from reefcultures.core.config import Settings, get_settings

security = HTTPBasic()

DEV_OPERATOR_PASSWORD = "changeme"


def _operator_password(settings: Settings) -> str:
    """
    Raises:
        HTTPException: 500 when BASIC_AUTH_PASSWORD is unset in production
    """
    if settings.BASIC_AUTH_PASSWORD:
        return settings.BASIC_AUTH_PASSWORD
    if settings.ENVIRONMENT == "production":
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Operator password not configured"
        )
    return DEV_OPERATOR_PASSWORD


def _same(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf8"), expected.encode("utf8"))


def get_current_username(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """Return the operator name when the Basic credentials match BASIC_AUTH_USERNAME/PASSWORD."""
    settings = get_settings()
    expected_password = _operator_password(settings)

    # Evaluate both so a wrong username costs the same as a wrong password
    username_ok = _same(credentials.username, settings.BASIC_AUTH_USERNAME)
    password_ok = _same(credentials.password, expected_password)

    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid operator credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def require_auth():
    """Router-level dependency: app.include_router(admin_router, dependencies=[require_auth()])"""
    return Depends(get_current_username)
