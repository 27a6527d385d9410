"""Employee record model."""

from workflow.states import VisaType

from . import db
from .mixins import PersonalProfileMixin, enum_type, serialize_value


class Employee(PersonalProfileMixin, db.Model):
    """The persistent employee profile, filled from an approved application."""

    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    employment_visa_type = db.Column(enum_type(VisaType, "visa_type"), nullable=True)
    employment_visa_title = db.Column(db.String(120), nullable=False, default="")
    employment_start_date = db.Column(db.Date, nullable=True)
    employment_end_date = db.Column(db.Date, nullable=True)

    user = db.relationship("User", back_populates="employee", uselist=False)
    application = db.relationship(
        "Application",
        back_populates="employee",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        """Serialize the employee profile."""

        data = {"id": self.id}
        data.update(self.profile_dict())
        data["employment"] = {
            "visa_type": serialize_value(self.employment_visa_type),
            "visa_title": self.employment_visa_title or "",
            "start_date": serialize_value(self.employment_start_date),
            "end_date": serialize_value(self.employment_end_date),
        }
        data["application_id"] = self.application.id if self.application else None
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Employee {self.email}>"
