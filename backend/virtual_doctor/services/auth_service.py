"""
Authentication service for user management and sessions
"""
import secrets
from datetime import date
from typing import Optional
from uuid import UUID

import bcrypt
from sqlalchemy.orm import Session

from virtual_doctor.core.config import get_settings
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.models.user import Session as UserSession
from virtual_doctor.models.user import User, UserRole
from virtual_doctor.utils.datetime_utils import utc_in, utc_now

logger = LoggingConfig.get_logger(__name__)


class AuthService:
    """Service for user authentication and session management"""

    def __init__(self, db: Session):
        self.db = db
        self.session_duration_hours = get_settings().session_duration_hours

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(
            User.email == self.normalize_email(email)
        ).first()

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        gender: str,
        phone: str,
        dob: date,
        role: str = UserRole.PATIENT.value,
        insurance: Optional[str] = None,
        medical_history: Optional[str] = None,
        license: Optional[str] = None,
        specialty: Optional[str] = None,
        hospital: Optional[str] = None,
        admin_code: Optional[str] = None,
    ) -> User:
        """
        Register a new user

        Args:
            name: Display name
            email: Email address (unique, case-insensitive)
            password: Plain text password, stored only as a bcrypt hash
            gender: Gender
            phone: Phone number
            dob: Date of birth
            role: patient, doctor or admin
            insurance, medical_history: Patient details
            license, specialty, hospital: Doctor details
            admin_code: Admin details

        Returns:
            Created User object

        Raises:
            ValueError: If the role is unknown or the email already exists
        """
        if role not in [r.value for r in UserRole]:
            raise ValueError(f"Invalid role. Allowed roles: {[r.value for r in UserRole]}")

        email = self.normalize_email(email)
        if self.get_user_by_email(email):
            raise ValueError("Email already in use")

        user = User(
            role=role,
            name=name,
            email=email,
            password_hash=self._hash_password(password),
            gender=gender,
            phone=phone,
            dob=dob,
            insurance=insurance or None,
            medical_history=medical_history or None,
            license=license or None,
            specialty=specialty or None,
            hospital=hospital or None,
            admin_code=admin_code or None,
            is_active=True,
        )

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Registered new user: {user.id} (role: {role})")
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user by email and password

        Returns:
            User object if authentication successful, None otherwise
        """
        user = self.get_user_by_email(email)

        if not user:
            logger.warning("Authentication failed: no user with this email")
            return None

        if not user.is_active:
            logger.warning(f"Authentication failed: user {user.id} is inactive")
            return None

        if not self._verify_password(password, user.password_hash):
            logger.warning(f"Authentication failed: invalid password for user {user.id}")
            return None

        user.last_login = utc_now()
        self.db.commit()

        logger.info(f"User {user.id} authenticated successfully")
        return user

    def create_session(self, user_id: UUID, duration_hours: Optional[int] = None) -> UserSession:
        """
        Create a new session for a user

        Args:
            user_id: User ID
            duration_hours: Session duration in hours (default from settings)

        Returns:
            Created Session object
        """
        session = UserSession(
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            expires_at=utc_in(hours=duration_hours or self.session_duration_hours),
        )

        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info(f"Created session for user {user_id}")
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """
        Validate a session token and return the associated user

        Returns:
            User object if session is valid, None otherwise
        """
        session = self.db.query(UserSession).filter(
            UserSession.token == token
        ).first()

        if not session:
            return None

        if session.expires_at < utc_now():
            logger.info(f"Session {session.id} expired")
            self.db.delete(session)
            self.db.commit()
            return None

        session.last_activity = utc_now()
        self.db.commit()

        user = self.db.query(User).filter(User.id == session.user_id).first()
        if not user or not user.is_active:
            return None

        return user

    def logout(self, token: str) -> bool:
        """
        Logout by invalidating a session

        Returns:
            True if session was found and deleted, False otherwise
        """
        session = self.db.query(UserSession).filter(
            UserSession.token == token
        ).first()

        if not session:
            return False

        self.db.delete(session)
        self.db.commit()
        logger.info(f"Session {session.id} invalidated")
        return True

    def logout_all_user_sessions(self, user_id: UUID) -> int:
        """
        Logout all sessions for a user

        Returns:
            Number of sessions deleted
        """
        sessions = self.db.query(UserSession).filter(
            UserSession.user_id == user_id
        ).all()

        for session in sessions:
            self.db.delete(session)

        self.db.commit()
        logger.info(f"Invalidated {len(sessions)} sessions for user {user_id}")
        return len(sessions)

    def cleanup_expired_sessions(self) -> int:
        """
        Remove all expired sessions from the database

        Returns:
            Number of sessions deleted
        """
        expired_sessions = self.db.query(UserSession).filter(
            UserSession.expires_at < utc_now()
        ).all()

        for session in expired_sessions:
            self.db.delete(session)

        self.db.commit()
        if expired_sessions:
            logger.info(f"Cleaned up {len(expired_sessions)} expired sessions")
        return len(expired_sessions)

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash"""
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
