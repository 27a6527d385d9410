"""User model definition."""

from werkzeug.security import check_password_hash, generate_password_hash

from workflow.states import Role

from . import db
from .mixins import enum_type, serialize_value, utcnow


class User(db.Model):
    """A login account; employees own exactly one employee record."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(enum_type(Role, "user_role"), nullable=False, default=Role.EMPLOYEE)
    employee_id = db.Column(
        db.Integer, db.ForeignKey("employees.id"), nullable=True, unique=True
    )
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    employee = db.relationship("Employee", back_populates="user")

    @property
    def is_hr(self) -> bool:
        return self.role == Role.HR

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        application = self.employee.application if self.employee else None
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": serialize_value(self.role),
            "employee_id": self.employee_id,
            "application_id": application.id if application else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.username}>"
