"""Personal-profile columns shared by applications and employee records."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from enum import Enum

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import validates

from workflow.states import Citizenship, Gender, enum_values

from . import db


PHONE_PATTERN = re.compile(r"^(\+?\d{1,3}[- ]?)?\d{10}$")
SSN_PATTERN = re.compile(r"^\d{3}-?\d{2}-?\d{4}$")


def utcnow() -> datetime:
    return datetime.now(UTC)


def enum_type(enum_cls: type[Enum], name: str) -> db.Enum:
    """Column type storing an enum by value (``"F1(CPT/OPT)"``, not ``F1_CPT_OPT``)."""

    return db.Enum(
        enum_cls,
        name=name,
        values_callable=enum_values,
        validate_strings=True,
    )


def _contact_person(prefix: str) -> dict[str, str]:
    return {
        "first_name": f"{prefix}_first_name",
        "last_name": f"{prefix}_last_name",
        "middle_name": f"{prefix}_middle_name",
        "phone": f"{prefix}_phone",
        "email": f"{prefix}_email",
        "relationship": f"{prefix}_relationship",
    }


PROFILE_SCALARS = (
    "email",
    "first_name",
    "last_name",
    "middle_name",
    "preferred_name",
    "ssn",
    "date_of_birth",
    "gender",
    "citizenship",
)

# Nested object name -> {nested key: column attribute}.
PROFILE_SECTIONS: dict[str, dict[str, str]] = {
    "address": {
        "building": "address_building",
        "street": "address_street",
        "city": "address_city",
        "state": "address_state",
        "zip": "address_zip",
    },
    "contact_info": {
        "cell_phone": "cell_phone",
        "work_phone": "work_phone",
    },
    "emergency_contact": _contact_person("emergency"),
    "documents": {
        "profile_picture_url": "profile_picture_url",
        "driver_license_url": "driver_license_url",
    },
}

REFERENCE_SECTION = _contact_person("reference")


def check_phone(value: str | None) -> str:
    value = (value or "").strip()
    if value and not PHONE_PATTERN.match(value):
        raise ValueError(f"{value} is not a valid phone number!")
    return value


def check_ssn(value: str | None) -> str:
    value = (value or "").strip()
    if value and not SSN_PATTERN.match(value):
        raise ValueError(f"{value} is not a valid ssn number!")
    return value


def check_email(value: str | None) -> str:
    value = (value or "").strip()
    if not value:
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError(f"{value} is not a valid email address!") from None
    return value


def serialize_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class PersonalProfileMixin:
    """Name, contact, identity and address columns plus their validators."""

    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(120), nullable=False, default="")
    last_name = db.Column(db.String(120), nullable=False, default="")
    middle_name = db.Column(db.String(120), nullable=False, default="")
    preferred_name = db.Column(db.String(120), nullable=False, default="")
    ssn = db.Column(db.String(16), nullable=False, default="")
    date_of_birth = db.Column(db.Date, nullable=True)
    gender = db.Column(enum_type(Gender, "gender"), nullable=True)
    citizenship = db.Column(enum_type(Citizenship, "citizenship"), nullable=True)

    address_building = db.Column(db.String(120), nullable=False, default="")
    address_street = db.Column(db.String(255), nullable=False, default="")
    address_city = db.Column(db.String(120), nullable=False, default="")
    address_state = db.Column(db.String(64), nullable=False, default="")
    address_zip = db.Column(db.String(16), nullable=False, default="")

    cell_phone = db.Column(db.String(32), nullable=False, default="")
    work_phone = db.Column(db.String(32), nullable=False, default="")

    emergency_first_name = db.Column(db.String(120), nullable=False, default="")
    emergency_last_name = db.Column(db.String(120), nullable=False, default="")
    emergency_middle_name = db.Column(db.String(120), nullable=False, default="")
    emergency_phone = db.Column(db.String(32), nullable=False, default="")
    emergency_email = db.Column(db.String(255), nullable=False, default="")
    emergency_relationship = db.Column(db.String(64), nullable=False, default="")

    profile_picture_url = db.Column(db.String(512), nullable=False, default="")
    driver_license_url = db.Column(db.String(512), nullable=False, default="")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    @validates("cell_phone", "work_phone", "emergency_phone")
    def _validate_phone(self, key: str, value: str | None) -> str:
        return check_phone(value)

    @validates("email", "emergency_email")
    def _validate_email(self, key: str, value: str | None) -> str:
        return check_email(value)

    @validates("ssn")
    def _validate_ssn(self, key: str, value: str | None) -> str:
        return check_ssn(value)

    def section_dict(self, section: dict[str, str]) -> dict[str, object]:
        return {key: serialize_value(getattr(self, attr)) for key, attr in section.items()}

    def profile_dict(self) -> dict[str, object]:
        """Serialize the profile in its nested form (``address.city`` etc.)."""

        data: dict[str, object] = {
            name: serialize_value(getattr(self, name)) for name in PROFILE_SCALARS
        }
        for name, section in PROFILE_SECTIONS.items():
            data[name] = self.section_dict(section)
        return data
