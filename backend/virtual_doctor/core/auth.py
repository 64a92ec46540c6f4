"""
Authentication dependencies
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from virtual_doctor.core.database import get_db
from virtual_doctor.models.user import User
from virtual_doctor.services.auth_service import AuthService

SESSION_COOKIE = "session_token"

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Session token from the Authorization header, falling back to the cookie"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Get current user if authenticated, otherwise return None (no exception)
    """
    token = get_session_token(request, credentials)
    if not token:
        return None
    return AuthService(db).validate_session(token)


async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """
    Require authentication: return User or raise 401
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
