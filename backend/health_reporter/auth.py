"""
Auth module: session credential signing/verification and the session gate.

Credentials are stateless HS256 JWTs carrying only the subject id. Validity is
signature + expiry; there is no server-side session table and no revocation.
Rotating JWT_SECRET is the only way to invalidate outstanding credentials.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from jose import jwt, JWTError
from fastapi import Request
from health_reporter.exceptions import (
    ConfigurationError,
    CredentialError,
    ExpiredCredential,
    MalformedCredential,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(days=7)
TOKEN_LIFETIME_SECONDS = int(TOKEN_LIFETIME.total_seconds())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies session credentials."""

    def __init__(self, secret: str, clock: Callable[[], datetime] = utcnow):
        if not secret:
            raise ConfigurationError("JWT_SECRET environment variable is not set")
        self._secret = secret
        self._clock = clock

    def issue(self, subject_id: str) -> str:
        """Create a signed credential for ``subject_id`` valid for 7 days."""
        issued_at = int(self._clock().timestamp())
        payload = {
            "sub": subject_id,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME_SECONDS,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        """
        Return the subject id embedded in ``token``.

        Raises ExpiredCredential once the clock is past ``exp`` and
        MalformedCredential for anything else wrong with the token. Expiry is
        checked against the injected clock rather than jose's wall clock so the
        service stays pure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise MalformedCredential(str(e)) from e

        subject_id = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(subject_id, str) or not subject_id:
            raise MalformedCredential("credential has no subject")
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise MalformedCredential("credential has no expiry")
        if self._clock().timestamp() > exp:
            raise ExpiredCredential("credential expired")
        return subject_id


class SessionGate:
    """Decides admit/deny for a request from its session credential."""

    def __init__(self, tokens: TokenService, cookie_name: str = "session-token"):
        self.tokens = tokens
        self.cookie_name = cookie_name

    def extract_credential(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name)
        if token:
            return token
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header[7:].strip() or None
        return None

    def authenticate(self, request: Request) -> str:
        """Return the caller's subject id or raise Unauthenticated.

        Expired and malformed credentials are deliberately indistinguishable.
        """
        token = self.extract_credential(request)
        if token is None:
            raise Unauthenticated()
        try:
            return self.tokens.verify(token)
        except CredentialError as e:
            logger.debug("Rejected credential on %s: %s", request.url.path, type(e).__name__)
            raise Unauthenticated() from None


async def get_current_subject(request: Request) -> str:
    """
    FastAPI dependency. Returns the subject id admitted by the gate middleware,
    or authenticates the request itself for routes outside the gated prefixes.
    Raises Unauthenticated (401) otherwise.
    """
    subject_id = getattr(request.state, "subject_id", None)
    if subject_id:
        return subject_id
    gate: SessionGate = request.app.state.gate
    subject_id = gate.authenticate(request)
    request.state.subject_id = subject_id
    return subject_id
