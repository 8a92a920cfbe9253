from fastapi import Request

from backend.core import config


def _extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def extract_token(request: Request) -> str | None:
    """Token from the auth cookie, falling back to the Authorization header."""
    token = request.cookies.get(config.AUTH_COOKIE_NAME)
    if token:
        return token
    return _extract_bearer_token(request.headers.get("authorization"))


def extract_role_claim(request: Request) -> str | None:
    return request.cookies.get(config.ROLE_COOKIE_NAME)
