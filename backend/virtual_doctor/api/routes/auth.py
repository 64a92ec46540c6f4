"""
Authentication API routes
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session

from virtual_doctor.core.auth import (SESSION_COOKIE, get_current_user_required,
                                      get_session_token, security)
from virtual_doctor.core.config import get_settings
from virtual_doctor.core.database import get_db
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.core.metrics import auth_attempts_total
from virtual_doctor.models.user import User, UserRole
from virtual_doctor.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignupRequest(BaseModel):
    """User registration request"""
    role: UserRole = UserRole.PATIENT
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=8, max_length=72)
    gender: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1, max_length=50)
    dob: date
    insurance: Optional[str] = None
    medical_history: Optional[str] = None
    license: Optional[str] = None
    specialty: Optional[str] = None
    hospital: Optional[str] = None
    admin_code: Optional[str] = None


class LoginRequest(BaseModel):
    """User login request"""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User response model"""
    id: str
    role: str
    name: str
    email: str
    gender: str
    phone: str
    dob: date
    is_active: bool
    created_at: str
    last_login: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=str(user.id),
            role=user.role,
            name=user.name,
            email=user.email,
            gender=user.gender,
            phone=user.phone,
            dob=user.dob,
            is_active=user.is_active,
            created_at=user.created_at.isoformat(),
            last_login=user.last_login.isoformat() if user.last_login else None,
        )


class LoginResponse(BaseModel):
    """Login response model"""
    token: str
    user: UserResponse
    expires_at: str


def set_session_cookie(response: Response, token: str):
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_duration_hours * 60 * 60,
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    db: Session = Depends(get_db)
):
    """Register a new user"""
    try:
        user = AuthService(db).register_user(
            role=request.role.value,
            name=request.name,
            email=request.email,
            password=request.password,
            gender=request.gender,
            phone=request.phone,
            dob=request.dob,
            insurance=request.insurance,
            medical_history=request.medical_history,
            license=request.license,
            specialty=request.specialty,
            hospital=request.hospital,
            admin_code=request.admin_code,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Login and create a session"""
    auth_service = AuthService(db)

    user = auth_service.authenticate(request.email, request.password)
    if not user:
        auth_attempts_total.labels(outcome="failure").inc()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    session = auth_service.create_session(user.id)
    set_session_cookie(response, session.token)
    auth_attempts_total.labels(outcome="success").inc()

    return LoginResponse(
        token=session.token,
        user=UserResponse.from_user(user),
        expires_at=session.expires_at.isoformat()
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
):
    """Logout and invalidate session"""
    token = get_session_token(request, credentials)
    try:
        if token:
            AuthService(db).logout(token)
    finally:
        # Clear the cookie even if invalidation fails
        response.delete_cookie(key=SESSION_COOKIE)
    return None


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: User = Depends(get_current_user_required)):
    """Get current user information"""
    return UserResponse.from_user(user)
