"""Startup helpers."""

from __future__ import annotations

from flask import current_app

from models import db
from models.user import User
from workflow.states import Role


def ensure_hr_account(username: str, email: str, password: str) -> tuple[User, bool]:
    """Create the HR account unless one already exists.

    Returns the HR user and whether it was created by this call.
    """

    existing = User.query.filter_by(role=Role.HR).first()
    if existing is not None:
        current_app.logger.info("HR account already exists: %s", existing.username)
        return existing, False

    if not password:
        raise ValueError("An HR password is required to create the HR account.")

    hr_user = User(username=username, email=email.strip().lower(), role=Role.HR)
    hr_user.set_password(password)
    db.session.add(hr_user)
    db.session.commit()
    current_app.logger.info("HR account created: %s", username)
    return hr_user, True
