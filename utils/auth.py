"""Current-user lookup and role guards for JWT-protected routes."""

from __future__ import annotations

from flask_jwt_extended import get_jwt_identity
from werkzeug.exceptions import Forbidden, NotFound

from models import db
from models.application import Application
from models.user import User
from workflow.states import Role


def _get_current_user() -> User | None:
    try:
        identity = get_jwt_identity()
    except RuntimeError:
        return None
    if identity is None:
        return None
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def require_user() -> User:
    user = _get_current_user()
    if user is None:
        raise NotFound("User not found.")
    return user


def require_hr() -> User:
    user = require_user()
    if not user.is_hr:
        raise Forbidden("HR privileges required.")
    return user


def require_employee() -> User:
    user = require_user()
    if user.role != Role.EMPLOYEE:
        raise Forbidden("Employee account required.")
    return user


def own_application(user: User) -> Application:
    """The application belonging to an employee user."""

    application = user.employee.application if user.employee else None
    if application is None:
        raise NotFound("Application not found")
    return application
