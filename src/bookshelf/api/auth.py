"""Auth API — signup, login, token check, current user.

Learn: Routes for the account lifecycle:
- POST /signup → create a user (201, never echoes the password hash)
- POST /login → email/password → {authToken, id}
- GET /verify → 200 if the Bearer token is valid
- GET /user → the caller with their library and books
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.dependencies import get_current_user, get_token_service
from bookshelf.auth.jwt import Principal, TokenService
from bookshelf.config import settings
from bookshelf.db.engine import get_db
from bookshelf.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserProfile,
    UserRead,
)
from bookshelf.services.account_service import AccountService

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AccountService:
    return AccountService(db, tokens, bcrypt_rounds=settings.bcrypt_rounds)


@router.post("/signup", response_model=UserRead, status_code=201)
async def signup(body: SignupRequest, svc: AccountService = Depends(_svc)):
    """Create a new user account."""
    return await svc.signup(email=body.email, password=body.password, name=body.name)


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, svc: AccountService = Depends(_svc)):
    """Login with email and password → signed token."""
    token, user_id = await svc.login(email=body.email, password=body.password)
    return LoginResponse(auth_token=token, id=user_id)


@router.get("/verify")
async def verify(principal: Principal = Depends(get_current_user)):
    return {"loggedIn": True}


@router.get("/user", response_model=UserProfile)
async def current_user(
    principal: Principal = Depends(get_current_user),
    svc: AccountService = Depends(_svc),
):
    """Get the current user with their library and books."""
    return await svc.profile(principal)
