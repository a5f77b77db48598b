import logging
from typing import Optional

from fastapi import Request

from smartsync.errors import AuthError
from smartsync.services import credentials

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "token"


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
            return parts[1]
    return None


def resolve_token(request: Request) -> Optional[str]:
    """Return the credential from the Authorization header or the cookie session.

    The bearer header has precedence; the session is the fallback for
    same-origin clients. Returns None when neither carries a token.
    """
    token = _bearer(request.headers.get("authorization"))
    if token:
        return token
    return request.session.get(SESSION_TOKEN_KEY) or None


def get_current_user_id(request: Request) -> str:
    token = resolve_token(request)
    if not token:
        logger.info("No token found in header or session for %s", request.url.path)
        raise AuthError("Unauthorized")
    try:
        return credentials.verify(token)
    except AuthError as e:
        logger.warning("Token verification failed for %s: %s", request.url.path, e.message)
        raise


def get_optional_user_id(request: Request) -> Optional[str]:
    token = resolve_token(request)
    if not token:
        return None
    try:
        return credentials.verify(token)
    except AuthError:
        return None


def remember_token(request: Request, token: str) -> None:
    request.session[SESSION_TOKEN_KEY] = token
