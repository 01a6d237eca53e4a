from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, Header
from jwt import PyJWTError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from app.db import get_session
from app.auth_deps import get_current_user, get_caller
from app.errors import Conflict, Unauthenticated, Forbidden, NotFound
from app.models.user import User
from app.schemas.auth import RegisterRequest, LoginRequest, UserPublic, TokenPair, VerificationUpdate
from app.security import hash_password, verify_password, make_access_token, make_refresh_token, decode_token
from app.services.permissions import Caller

router = APIRouter(prefix="/auth", tags=["auth"])
log = structlog.get_logger()

def _to_public(user: User) -> UserPublic:
    return UserPublic(
        id=user.id, email=user.email, username=user.username, role=user.role,
        verification_status=user.verification_status, created_at=user.created_at,
    )

@router.post("/register", status_code=201, response_model=UserPublic)
async def register(payload: RegisterRequest, session: AsyncSession = Depends(get_session)):
    email = payload.email.lower()
    username = payload.username.lower()
    if await session.scalar(select(User.id).where(User.email == email)):
        raise Conflict("Email already registered")
    if await session.scalar(select(User.id).where(User.username == username)):
        raise Conflict("Username already taken")
    user = User(
        email=email,
        username=username,
        full_name=payload.full_name,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("Email or username already registered")
    await session.refresh(user)
    log.info("user_registered", user_id=str(user.id), role=user.role)
    return _to_public(user)

@router.post("/login", response_model=TokenPair)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    user = await session.scalar(select(User).where(User.email == payload.email.lower()))
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return TokenPair(access=make_access_token(str(user.id)), refresh=make_refresh_token(str(user.id)))

@router.post("/refresh", response_model=TokenPair)
async def refresh(authorization: str | None = Header(None), session: AsyncSession = Depends(get_session)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthenticated("Missing refresh token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_token(token)
    except PyJWTError:
        raise Unauthenticated("Invalid token")
    if data.get("type") != "refresh":
        raise Unauthenticated("Wrong token type")
    sub = data.get("sub")
    try:
        user = await session.get(User, uuid.UUID(str(sub)))
    except ValueError:
        raise Unauthenticated("Invalid token")
    if not user:
        raise Unauthenticated("User not found")
    return TokenPair(access=make_access_token(sub), refresh=make_refresh_token(sub))

@router.get("/me", response_model=UserPublic)
async def me(user: User = Depends(get_current_user)):
    return _to_public(user)

@router.put("/users/{user_id}/verification", response_model=UserPublic)
async def set_verification(
    user_id: uuid.UUID,
    payload: VerificationUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    if not caller.is_admin:
        raise Forbidden("Only admins can verify students")
    user = await session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    user.verification_status = payload.status
    await session.commit()
    await session.refresh(user)
    log.info("user_verification_set", user_id=str(user.id), status=user.verification_status, admin_id=str(caller.user_id))
    return _to_public(user)
