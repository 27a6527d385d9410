"""Authentication blueprint providing register and login endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token
from sqlalchemy import func, or_
from werkzeug.exceptions import Conflict, Unauthorized

from models import db
from models.application import Application
from models.employee import Employee
from models.user import User
from utils.request_validation import parse_json_request
from workflow.engine import unit_of_work
from workflow.errors import ValidationError
from workflow.states import ReviewStatus, Role

auth_bp = Blueprint("auth", __name__)


def _normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register an employee account with its employee record and blank application."""
    payload = parse_json_request(request, required_keys=("username", "email", "password"))
    username = str(payload.get("username")).strip()
    email = _normalize_email(str(payload.get("email")))
    password = str(payload.get("password")).strip()

    if not username or not password:
        raise ValidationError("Username, email and password are required.")

    existing = User.query.filter(
        or_(func.lower(User.username) == username.lower(), func.lower(User.email) == email)
    ).first()
    if existing is not None or Employee.query.filter_by(email=email).first() is not None:
        raise Conflict("A user with that username or email already exists.")

    with unit_of_work("registration"):
        try:
            employee = Employee(email=email)
            application = Application(
                email=email, employee=employee, status=ReviewStatus.NEVER_SUBMITTED
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        user = User(username=username, email=email, role=Role.EMPLOYEE, employee=employee)
        user.set_password(password)
        db.session.add_all([employee, application, user])

    current_app.logger.info("Registered employee %s (application %s)", username, application.id)
    return (
        jsonify({"message": "Register successful!", "user": user.to_dict()}),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user by username or email and return a JWT access token."""
    payload = parse_json_request(request)
    login_name = str(payload.get("username") or payload.get("email") or "").strip()
    password = str(payload.get("password") or "").strip()

    if not login_name or not password:
        raise ValidationError("Username (or email) and password are required.")

    user = User.query.filter(
        or_(
            func.lower(User.username) == login_name.lower(),
            func.lower(User.email) == login_name.lower(),
        )
    ).first()
    if user is None or not user.check_password(password):
        raise Unauthorized("Invalid username or password.")

    token = create_access_token(
        identity=str(user.id), additional_claims={"role": user.role.value}
    )
    return (
        jsonify({"access_token": token, "user": user.to_dict()}),
        HTTPStatus.OK,
    )
