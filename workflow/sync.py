"""Projection of an approved application onto the employee record."""

from __future__ import annotations

from models.application import Application
from models.employee import Employee
from models.mixins import PROFILE_SCALARS, PROFILE_SECTIONS

# Scalars whose empty value is ``None`` rather than ``""``.
NULLABLE_SCALARS = frozenset({"date_of_birth", "gender", "citizenship"})


def sync_employee(application: Application, employee: Employee) -> Employee:
    """Copy the finalized application fields onto ``employee``.

    Missing values are written as empty strings (or ``None`` for dates and
    enums) so nothing from a previous projection survives.
    """

    for name in PROFILE_SCALARS:
        value = getattr(application, name)
        if name in NULLABLE_SCALARS:
            setattr(employee, name, value or None)
        else:
            setattr(employee, name, value or "")

    for section in PROFILE_SECTIONS.values():
        for attr in section.values():
            setattr(employee, attr, getattr(application, attr) or "")

    work_authorization = application.work_authorization
    if work_authorization is not None:
        employee.employment_visa_type = work_authorization.visa_type
        employee.employment_visa_title = work_authorization.visa_title or ""
        employee.employment_start_date = work_authorization.start_date
        employee.employment_end_date = work_authorization.end_date
    else:
        employee.employment_visa_type = None
        employee.employment_visa_title = ""
        employee.employment_start_date = None
        employee.employment_end_date = None

    return employee
