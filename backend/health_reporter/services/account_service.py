import asyncio
import logging
import uuid
from typing import Optional
import bcrypt
from sqlalchemy import select
from health_reporter.auth import TokenService
from health_reporter.database import Database
from health_reporter.exceptions import InvalidCredentials, ValidationError
from health_reporter.models.user import User

logger = logging.getLogger(__name__)


def _secret_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases refuse longer input
    return password.encode("utf-8")[:72]


class AccountService:
    """Account lookup, password checks and credential issuance at login."""

    def __init__(self, db: Database, tokens: TokenService, bcrypt_rounds: int = 12):
        self.db = db
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        # Compared against when the email is unknown, so both failure paths
        # spend the same bcrypt work.
        self._dummy_hash = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=bcrypt_rounds))

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode("utf-8")

    async def get_by_email(self, email: str) -> Optional[User]:
        async with self.db.session() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def create_account(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required")
        user = User(id=str(uuid.uuid4()), email=email, password_hash=self.hash_password(password))
        async with self.db.session() as session:
            async with session.begin():
                session.add(user)
        logger.info("Created account %s", user.id)
        return user

    async def ensure_account(self, email: str, password: str) -> User:
        """Create the account unless one with this email exists. Idempotent."""
        existing = await self.get_by_email(email)
        if existing:
            return existing
        return await self.create_account(email, password)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Verify ``email``/``password`` and issue a session credential.

        Unknown email and wrong password both raise the same InvalidCredentials.
        """
        user = await self.get_by_email(email)
        stored_hash = user.password_hash.encode("utf-8") if user else self._dummy_hash
        password_ok = await asyncio.to_thread(bcrypt.checkpw, _secret_bytes(password), stored_hash)
        if user is None or not password_ok:
            raise InvalidCredentials()
        return user, self.tokens.issue(user.id)
