"""
Tests for AuthService
"""
from datetime import date, timedelta

import pytest

from virtual_doctor.models.user import Session as UserSession
from virtual_doctor.models.user import UserRole
from virtual_doctor.services.auth_service import AuthService
from virtual_doctor.utils.datetime_utils import utc_now


@pytest.fixture
def auth_service(db):
    return AuthService(db)


@pytest.fixture
def patient(auth_service):
    return auth_service.register_user(
        name="Pat Patient",
        email="Pat@Example.com",
        password="correct-horse",
        gender="female",
        phone="555-0100",
        dob=date(1990, 5, 17),
        insurance="ACME Health",
    )


def test_register_user(patient):
    assert patient.id is not None
    assert patient.role == UserRole.PATIENT.value
    assert patient.email == "pat@example.com"
    assert patient.insurance == "ACME Health"
    assert patient.is_active is True
    assert patient.password_hash != "correct-horse"


def test_register_doctor_details(auth_service):
    doctor = auth_service.register_user(
        name="Dr. Who",
        email="doc@example.com",
        password="tardis-1963",
        gender="male",
        phone="555-0199",
        dob=date(1963, 11, 23),
        role="doctor",
        license="LIC-42",
        specialty="General practice",
        hospital="Royal Hope",
    )

    assert doctor.role == "doctor"
    assert doctor.license == "LIC-42"
    assert doctor.insurance is None


def test_register_duplicate_email_case_insensitive(auth_service, patient):
    with pytest.raises(ValueError, match="Email already in use"):
        auth_service.register_user(
            name="Other",
            email="PAT@example.com",
            password="another-pass",
            gender="male",
            phone="555-0101",
            dob=date(1980, 1, 1),
        )


def test_register_invalid_role(auth_service):
    with pytest.raises(ValueError, match="Invalid role"):
        auth_service.register_user(
            name="Nurse",
            email="nurse@example.com",
            password="password123",
            gender="female",
            phone="555-0102",
            dob=date(1985, 2, 2),
            role="nurse",
        )


def test_authenticate(auth_service, patient):
    user = auth_service.authenticate("pat@example.com", "correct-horse")

    assert user is not None
    assert user.id == patient.id
    assert user.last_login is not None


def test_authenticate_wrong_password(auth_service, patient):
    assert auth_service.authenticate("pat@example.com", "wrong-horse") is None


def test_authenticate_unknown_email(auth_service):
    assert auth_service.authenticate("ghost@example.com", "whatever") is None


def test_authenticate_inactive_user(auth_service, patient, db):
    patient.is_active = False
    db.commit()

    assert auth_service.authenticate("pat@example.com", "correct-horse") is None


def test_session_lifecycle(auth_service, patient):
    session = auth_service.create_session(patient.id)

    assert session.token
    assert session.expires_at > utc_now()
    assert auth_service.validate_session(session.token).id == patient.id

    assert auth_service.logout(session.token) is True
    assert auth_service.validate_session(session.token) is None
    assert auth_service.logout(session.token) is False


def test_expired_session_is_removed(auth_service, patient, db):
    session = auth_service.create_session(patient.id)
    session.expires_at = utc_now() - timedelta(minutes=1)
    db.commit()

    assert auth_service.validate_session(session.token) is None
    assert db.query(UserSession).filter(UserSession.token == session.token).first() is None


def test_validate_unknown_token(auth_service):
    assert auth_service.validate_session("not-a-token") is None


def test_logout_all_user_sessions(auth_service, patient):
    tokens = [auth_service.create_session(patient.id).token for _ in range(3)]

    assert auth_service.logout_all_user_sessions(patient.id) == 3
    for token in tokens:
        assert auth_service.validate_session(token) is None


def test_cleanup_expired_sessions(auth_service, patient, db):
    live = auth_service.create_session(patient.id)
    stale = auth_service.create_session(patient.id)
    stale.expires_at = utc_now() - timedelta(hours=1)
    db.commit()

    assert auth_service.cleanup_expired_sessions() == 1
    assert auth_service.validate_session(live.token) is not None
