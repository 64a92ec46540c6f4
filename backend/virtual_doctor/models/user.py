"""
User and Session models for authentication
"""
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Boolean, Column, Date, DateTime, ForeignKey, String,
                        Text, Uuid)
from sqlalchemy.orm import relationship

from virtual_doctor.core.database import Base
from virtual_doctor.utils.datetime_utils import utc_now


class UserRole(str, Enum):
    """User role enumeration"""
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"


class User(Base):
    """Registered account"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    role = Column(String(50), nullable=False, default=UserRole.PATIENT.value)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    gender = Column(String(50), nullable=False)
    phone = Column(String(50), nullable=False)
    dob = Column(Date, nullable=False)

    # Patient details
    insurance = Column(String(255), nullable=True)
    medical_history = Column(Text, nullable=True)

    # Doctor details
    license = Column(String(255), nullable=True)
    specialty = Column(String(255), nullable=True)
    hospital = Column(String(255), nullable=True)

    # Admin details
    admin_code = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    last_login = Column(DateTime, nullable=True)

    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class Session(Base):
    """Login session identified by an opaque cookie token"""
    __tablename__ = "sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    last_activity = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User", back_populates="sessions")

    def __repr__(self):
        return f"<Session(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
