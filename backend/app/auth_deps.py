from __future__ import annotations
import uuid
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jwt import PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_session
from app.errors import Unauthenticated
from app.security import decode_token
from app.models.user import User
from app.services.permissions import Caller

# auto_error=False: missing credentials become our own 401, and anonymous
# endpoints (share, view, like-status) can use the same scheme
security = HTTPBearer(auto_error=False)

async def _resolve_user(credentials: HTTPAuthorizationCredentials | None, session: AsyncSession) -> User | None:
    if credentials is None:
        return None
    try:
        data = decode_token(credentials.credentials)
    except PyJWTError:
        raise Unauthenticated("Invalid token")
    if data.get("type") != "access":
        raise Unauthenticated("Wrong token type")
    try:
        user_id = uuid.UUID(str(data.get("sub")))
    except ValueError:
        raise Unauthenticated("Invalid token")
    user = await session.get(User, user_id)
    if not user:
        raise Unauthenticated("User not found")
    return user

def caller_of(user: User) -> Caller:
    return Caller(user_id=user.id, role=user.role, verification_status=user.verification_status)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> User:
    user = await _resolve_user(credentials, session)
    if user is None:
        raise Unauthenticated("Missing access token")
    return user

async def get_caller(user: User = Depends(get_current_user)) -> Caller:
    return caller_of(user)

async def get_optional_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> Caller | None:
    """Caller when a valid token is sent, None for anonymous requests. A bad token is still a 401."""
    user = await _resolve_user(credentials, session)
    return caller_of(user) if user else None
