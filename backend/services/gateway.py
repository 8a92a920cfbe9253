"""Boundary between the HTTP layer and the identity core.

Every operation returns a ``GatewayResult``; domain errors are mapped to their
status and message here and anything unexpected becomes a generic 500.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable

from sqlalchemy.orm import Session

from backend.auth.passwords import PasswordHasher
from backend.auth.permissions import home_path_for, permissions_for
from backend.auth.tokens import TokenService
from backend.database import SessionLocal, read_session
from backend.errors import AuthCoreError, AuthError, ExpiredTokenError, InternalError, InvalidTokenError, ValidationError
from backend.schemas.auth import LoginInput, ProfilePatch, RegistrationInput, parse_input, parse_role, serialize_user
from backend.services.provisioning import ProfileProvisioner
from backend.stores.credential_store import CredentialStore

logger = logging.getLogger(__name__)

NO_MATCHING_ACCOUNT = 'No account matches these credentials'
WRONG_PASSWORD = 'Wrong password'


@dataclass
class GatewayResult:
    status_code: int
    body: dict = field(default_factory=dict)


class AuthGateway:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        hasher: PasswordHasher | None = None,
        tokens: TokenService | None = None,
    ):
        self.session_factory = session_factory
        self.hasher = hasher or PasswordHasher()
        self.tokens = tokens or TokenService()
        self.provisioner = ProfileProvisioner(session_factory, self.hasher)

    def login(self, payload) -> GatewayResult:
        try:
            data = parse_input(LoginInput, payload)
            if not (data.email and data.password and data.role):
                raise ValidationError()
            role = parse_role(data.role)

            with read_session(self.session_factory) as session:
                user = CredentialStore(session).find_for_login(data.email, role.value)
                if user is None:
                    logger.warning('Login rejected: no %s account for the given email', role.value)
                    raise AuthError(NO_MATCHING_ACCOUNT)
                if not self.hasher.verify(data.password, user.password_hash):
                    logger.warning('Login rejected: wrong password for user %s', user.id)
                    raise AuthError(WRONG_PASSWORD)
                user_body = serialize_user(user)

            token = self.tokens.issue(user_body['id'])
        except AuthCoreError as exc:
            return _error(exc)
        except Exception:
            logger.exception('Login failed')
            return _error(InternalError('Server error during login'))

        logger.info('User %s logged in', user_body['id'])
        return GatewayResult(200, {
            'message': 'Login successful',
            'token': token,
            'user': user_body,
            'redirectTo': home_path_for(role),
        })

    def register(self, payload) -> GatewayResult:
        try:
            data = parse_input(RegistrationInput, payload)
            user_body = self.provisioner.register(data)
        except AuthCoreError as exc:
            return _error(exc)
        except Exception:
            logger.exception('Registration failed')
            return _error(InternalError('Failed to create user'))

        return GatewayResult(200, {'message': 'User created successfully', 'user': user_body})

    def check_session(self, token: str | None) -> GatewayResult:
        if not token:
            return _unauthenticated('missing', 'No token provided')

        try:
            user_id = self._authenticated_user_id(token)
        except ExpiredTokenError:
            return _unauthenticated('expired', 'Token has expired')
        except InvalidTokenError:
            return _unauthenticated('malformed', 'Invalid token')

        try:
            with read_session(self.session_factory) as session:
                user = CredentialStore(session).get_by_id(user_id)
                if user is None:
                    return _unauthenticated('user-not-found', 'User not found')
                user_body = serialize_user(user)
            permissions = permissions_for(parse_role(user_body['role']))
        except Exception:
            logger.exception('Session check failed')
            return GatewayResult(500, {
                'authenticated': False,
                'message': 'Error while checking authentication status',
            })

        return GatewayResult(200, {
            'authenticated': True,
            'user': user_body,
            'permissions': permissions,
            'message': 'User is authenticated',
        })

    def update_profile(self, token: str | None, payload) -> GatewayResult:
        try:
            if not token:
                raise AuthError('Authentication required')
            user_id = self._authenticated_user_id(token)
            patch = parse_input(ProfilePatch, payload)
            user_body = self.provisioner.update(user_id, patch)
        except AuthCoreError as exc:
            return _error(exc)
        except Exception:
            logger.exception('Profile update failed')
            return _error(InternalError('Failed to update profile'))

        return GatewayResult(200, {'message': 'Profile updated successfully', 'user': user_body})

    def logout(self) -> GatewayResult:
        # Tokens are not stored server-side; the caller drops its token and role markers.
        return GatewayResult(200, {'message': 'Logged out successfully', 'authenticated': False})

    def _authenticated_user_id(self, token: str) -> str:
        claims = self.tokens.validate(token)
        if claims.stale:
            raise ExpiredTokenError()
        return claims.user_id


def _error(exc: AuthCoreError) -> GatewayResult:
    return GatewayResult(exc.status_code, {'message': exc.message})


def _unauthenticated(reason: str, message: str) -> GatewayResult:
    return GatewayResult(401, {'authenticated': False, 'reason': reason, 'message': message})


@lru_cache
def get_gateway() -> AuthGateway:
    return AuthGateway()
