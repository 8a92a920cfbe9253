import enum
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

from backend.auth.dependencies import extract_role_claim, extract_token
from backend.auth.permissions import ROLE_HOME_PATHS
from backend.auth.tokens import TokenService
from backend.core import config
from backend.errors import InvalidTokenError
from backend.models.user import Role

logger = logging.getLogger(__name__)

# The API validates tokens itself; docs are served to anyone.
UNGUARDED_PREFIXES = ("/api", "/docs", "/redoc", "/openapi.json")


class AccessDecision(str, enum.Enum):
    ALLOW = "allow"
    REDIRECT_TO_ENTRY = "redirect"


class AccessGuard:
    def __init__(self, token_service: TokenService | None = None, public_paths: set[str] | None = None):
        self.token_service = token_service or TokenService()
        self.public_paths = public_paths if public_paths is not None else {config.ENTRY_PATH}

    def decide(self, path: str, token: str | None, role_claim: str | None, now_ms: int | None = None) -> AccessDecision:
        if path in self.public_paths:
            return AccessDecision.ALLOW

        if not token:
            return AccessDecision.REDIRECT_TO_ENTRY

        try:
            claims = self.token_service.validate(token, now_ms=now_ms)
        except InvalidTokenError:
            return AccessDecision.REDIRECT_TO_ENTRY
        if claims.stale:
            return AccessDecision.REDIRECT_TO_ENTRY

        # The role comes from the client-held cookie, not from the token or the database.
        required_role = self._required_role(path)
        if required_role is not None:
            claim = (role_claim or "").lower()
            if required_role.value.lower() not in claim:
                return AccessDecision.REDIRECT_TO_ENTRY

        return AccessDecision.ALLOW

    @staticmethod
    def _required_role(path: str) -> Role | None:
        for role, prefix in ROLE_HOME_PATHS.items():
            if path.startswith(prefix):
                return role
        return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Runs the access guard before any page handler and redirects to the entry path on deny."""

    def __init__(self, app, guard: AccessGuard | None = None):
        super().__init__(app)
        self.guard = guard or AccessGuard()

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.startswith(UNGUARDED_PREFIXES):
            return await call_next(request)

        decision = self.guard.decide(path, extract_token(request), extract_role_claim(request))
        if decision is AccessDecision.REDIRECT_TO_ENTRY:
            logger.info("Redirecting unauthorised request for %s", path)
            return RedirectResponse(url=config.ENTRY_PATH, status_code=307)
        return await call_next(request)
