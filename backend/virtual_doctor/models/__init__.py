"""
SQLAlchemy models
"""
from virtual_doctor.core.database import Base
from virtual_doctor.models.user import Session, User, UserRole  # noqa: F401

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Session",
]
