"""Account service — signup, login and the current user's profile.

Learn: validation messages are part of the client contract, so they are
checked here rather than by pydantic. Email uniqueness is enforced twice:
a lookup for the friendly message, and the unique index on users.email
for two signups racing each other.
"""

import re

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from bookshelf.auth.jwt import Principal, TokenService
from bookshelf.auth.password import hash_password, verify_password
from bookshelf.db.models import User
from bookshelf.db.repositories import UserRepository
from bookshelf.errors import Conflict, InvalidCredentials, NotFound, ValidationError

logger = structlog.get_logger()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$")
PASSWORD_RE = re.compile(r"(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,}")

PASSWORD_RULES = (
    "Password must have at least 6 characters and contain at least one "
    "number, one lowercase and one uppercase letter."
)


class AccountService:
    """Credential handling on top of the user repository."""

    def __init__(self, db: AsyncSession, tokens: TokenService, bcrypt_rounds: int = 10):
        self.db = db
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        self.users = UserRepository(db)

    async def signup(self, email: str | None, password: str | None, name: str | None) -> User:
        if not email or not password or not name:
            raise ValidationError("Provide email, password and name")
        if not EMAIL_RE.search(email):
            raise ValidationError("Provide a valid email address.")
        if not PASSWORD_RE.search(password):
            raise ValidationError(PASSWORD_RULES)

        if await self.users.find_by_email(email):
            raise Conflict("User already exists.")

        password_hash = await run_in_threadpool(
            hash_password, password, self.bcrypt_rounds
        )
        try:
            user = await self.users.create(email=email, name=name, password_hash=password_hash)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User already exists.")

        logger.info("account.signup", user_id=user.id)
        return user

    async def login(self, email: str | None, password: str | None) -> tuple[str, int]:
        """Check credentials and return (token, user_id)."""
        if not email or not password:
            raise ValidationError("Provide email and password.")
        if not EMAIL_RE.search(email):
            raise ValidationError("Provide a valid email address.")

        user = await self.users.find_by_email(email)
        if not user:
            raise InvalidCredentials("Wrong credentials.")

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("account.login_failed", user_id=user.id)
            raise InvalidCredentials("Wrong credentials.")

        principal = Principal(id=user.id, email=user.email, name=user.name)
        token = self.tokens.issue(principal)
        logger.info("account.login", user_id=user.id)
        return token, user.id

    async def profile(self, principal: Principal) -> User:
        """The caller's user record with their library and books."""
        user = await self.users.find_by_id(principal.id, with_resources=True)
        if not user:
            raise NotFound("User not found.")
        return user
