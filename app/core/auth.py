# app/core/auth.py
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import decode_user_id
from app.database import get_db
from app.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> User:
    """Active user named by the bearer token; 401 for a missing or unusable token."""
    user_id = decode_user_id(credentials.credentials) if credentials else None
    if user_id is None:
        raise unauthorized()

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise unauthorized()
    return user


def require_role(role: str):
    async def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            raise HTTPException(status.HTTP_403_FORBIDDEN, f"{role.capitalize()} access required")
        return current_user
    return check_role


get_current_admin = require_role("admin")
