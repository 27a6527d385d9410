"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.application import Application, WorkAuthorization  # noqa: E402
from models.employee import Employee  # noqa: E402
from models.user import User  # noqa: E402
from workflow.states import Citizenship, Gender, ReviewStatus, Role, VisaType  # noqa: E402

COMPLETE_PROFILE = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "ssn": "123-45-6789",
    "date_of_birth": date(1990, 5, 17),
    "gender": Gender.FEMALE,
    "citizenship": Citizenship.WORK_AUTHORIZATION,
    "address_building": "Unit 4",
    "address_street": "12 Analytical Way",
    "address_city": "Princeton",
    "address_state": "NJ",
    "address_zip": "08540",
    "cell_phone": "6095550101",
    "work_phone": "6095550102",
}


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    RATE_LIMIT = "1000 per minute"


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def app_ctx(app: Flask):
    """Run the test body inside an application context."""

    with app.app_context():
        yield app


def create_hr(username: str = "hr", password: str = "HrPass123") -> User:
    user = User(username=username, email=f"{username}@acme-corp.com", role=Role.HR)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


def create_employee(
    username: str = "ada",
    *,
    password: str = "AdaPass123",
    complete: bool = True,
    status: ReviewStatus = ReviewStatus.NEVER_SUBMITTED,
    visa_type: VisaType | None = None,
    **profile,
) -> tuple[User, Application]:
    """Persist an employee user with its employee record and application."""

    email = f"{username}@acme-corp.com"
    fields = dict(COMPLETE_PROFILE) if complete else {}
    fields.update(profile)

    employee = Employee(email=email)
    application = Application(email=email, employee=employee, status=status, **fields)
    if visa_type is not None:
        application.work_authorization = WorkAuthorization(visa_type=visa_type)
    user = User(username=username, email=email, role=Role.EMPLOYEE, employee=employee)
    user.set_password(password)
    db.session.add_all([employee, application, user])
    db.session.commit()
    return user, application


def auth_headers(app: Flask, user: User | int) -> dict[str, str]:
    user_id = user if isinstance(user, int) else user.id
    with app.app_context():
        token = create_access_token(identity=str(user_id))
    return {"Authorization": f"Bearer {token}"}
