"""Validated request structures, one per workflow operation.

Each ``from_payload`` takes the decoded JSON body and either returns a frozen
value or raises ``ValidationError``; the engine never sees a raw field bag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from models.mixins import PROFILE_SECTIONS, REFERENCE_SECTION

from .errors import ValidationError
from .states import (
    Citizenship,
    Decision,
    DocumentName,
    Gender,
    ReviewStatus,
    VisaType,
    coerce_enum,
)

# Owned by the workflow or by HR; clients can never write them directly.
PROTECTED_FIELDS = frozenset(
    {
        "id",
        "employee_id",
        "email",
        "status",
        "feedback",
        "documents",
        "work_authorization",
        "version",
        "created_at",
        "updated_at",
    }
)

UPDATABLE_STRINGS = ("first_name", "last_name", "middle_name", "preferred_name", "ssn")
UPDATABLE_SECTIONS: dict[str, dict[str, str]] = {
    "address": PROFILE_SECTIONS["address"],
    "contact_info": PROFILE_SECTIONS["contact_info"],
    "emergency_contact": PROFILE_SECTIONS["emergency_contact"],
    "references": REFERENCE_SECTION,
}


def parse_date(value: object, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be an ISO 8601 date.")
    try:
        # Accept full ISO timestamps as sent by date pickers.
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise ValueError(f"{field_name} must be an ISO 8601 date.") from None


def parse_text(value: object, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string.")
    return value.strip()


def _optional_enum(enum_cls, value: object, field_name: str):
    if value is None or value == "":
        return None
    return coerce_enum(enum_cls, value, field_name)


def _feedback(payload: Mapping[str, object], decision: Decision) -> str:
    raw = payload.get("feedback")
    if raw is not None and not isinstance(raw, str):
        raise ValidationError("feedback must be a string.")
    feedback = (raw or "").strip()
    if decision is Decision.REJECTED and not feedback:
        raise ValidationError("Feedback is required when rejecting.")
    return feedback


def _decision(payload: Mapping[str, object]) -> Decision:
    raw = payload.get("status", payload.get("decision"))
    try:
        return coerce_enum(Decision, raw, "status")
    except ValueError as exc:
        raise ValidationError(str(exc)) from None


@dataclass(frozen=True)
class ApplicationDecision:
    decision: Decision
    feedback: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "ApplicationDecision":
        decision = _decision(payload)
        return cls(decision=decision, feedback=_feedback(payload, decision))


@dataclass(frozen=True)
class DocumentDecision:
    document_name: DocumentName
    decision: Decision
    feedback: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "DocumentDecision":
        try:
            name = coerce_enum(DocumentName, payload.get("document_name"), "document_name")
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
        decision = _decision(payload)
        return cls(document_name=name, decision=decision, feedback=_feedback(payload, decision))


def _reject_unknown(payload: Mapping[str, object], allowed: set[str]) -> None:
    protected = sorted(key for key in payload if key in PROTECTED_FIELDS)
    if protected:
        raise ValidationError(
            "Fields cannot be updated directly: {}.".format(", ".join(protected)),
            fields=protected,
        )
    unknown = sorted(key for key in payload if key not in allowed)
    if unknown:
        raise ValidationError(
            "Unknown fields: {}.".format(", ".join(unknown)), fields=unknown
        )


@dataclass(frozen=True)
class ApplicationUpdate:
    """Column attribute -> new value, restricted to employee-editable fields."""

    changes: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "ApplicationUpdate":
        allowed = set(UPDATABLE_STRINGS) | set(UPDATABLE_SECTIONS) | {
            "date_of_birth",
            "gender",
            "citizenship",
        }
        _reject_unknown(payload, allowed)

        changes: dict[str, object] = {}
        errors: list[str] = []

        for name in UPDATABLE_STRINGS:
            if name in payload:
                try:
                    changes[name] = parse_text(payload[name], name)
                except ValueError as exc:
                    errors.append(str(exc))

        try:
            if "date_of_birth" in payload:
                changes["date_of_birth"] = parse_date(payload["date_of_birth"], "date_of_birth")
        except ValueError as exc:
            errors.append(str(exc))

        for name, enum_cls in (("gender", Gender), ("citizenship", Citizenship)):
            if name in payload:
                try:
                    changes[name] = _optional_enum(enum_cls, payload[name], name)
                except ValueError as exc:
                    errors.append(str(exc))

        for section, columns in UPDATABLE_SECTIONS.items():
            if section not in payload:
                continue
            values = payload[section]
            if not isinstance(values, Mapping):
                errors.append(f"{section} must be an object.")
                continue
            unknown = sorted(key for key in values if key not in columns)
            if unknown:
                errors.append(
                    "{} has unknown fields: {}.".format(section, ", ".join(unknown))
                )
                continue
            for key, value in values.items():
                try:
                    changes[columns[key]] = parse_text(value, f"{section}.{key}")
                except ValueError as exc:
                    errors.append(str(exc))

        if errors:
            raise ValidationError("; ".join(errors))
        if not changes:
            raise ValidationError("No updatable fields were provided.")
        return cls(changes=changes)


@dataclass(frozen=True)
class WorkAuthorizationUpdate:
    changes: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "WorkAuthorizationUpdate":
        if "documents" in payload:
            raise ValidationError(
                "Fields cannot be updated directly: documents.", fields=["documents"]
            )
        allowed = {"visa_type", "visa_title", "start_date", "end_date"}
        unknown = sorted(key for key in payload if key not in allowed)
        if unknown:
            raise ValidationError(
                "Unknown fields: {}.".format(", ".join(unknown)), fields=unknown
            )

        changes: dict[str, object] = {}
        errors: list[str] = []
        if "visa_type" in payload:
            try:
                changes["visa_type"] = coerce_enum(VisaType, payload["visa_type"], "visa_type")
            except ValueError as exc:
                errors.append(str(exc))
        if "visa_title" in payload:
            try:
                changes["visa_title"] = parse_text(payload["visa_title"], "visa_title")
            except ValueError as exc:
                errors.append(str(exc))
        for name in ("start_date", "end_date"):
            if name in payload:
                try:
                    changes[name] = parse_date(payload[name], name)
                except ValueError as exc:
                    errors.append(str(exc))

        if errors:
            raise ValidationError("; ".join(errors))
        if not changes:
            raise ValidationError("No updatable fields were provided.")
        return cls(changes=changes)


@dataclass(frozen=True)
class DocumentCriterion:
    name: DocumentName
    status: ReviewStatus


def parse_search_criteria(payload: Mapping[str, object]) -> list[DocumentCriterion]:
    raw = payload.get("documents")
    if not isinstance(raw, list) or not raw:
        raise ValidationError("An array of documents with name and status is required.")

    criteria: list[DocumentCriterion] = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("Each document criterion must be an object.")
        try:
            criteria.append(
                DocumentCriterion(
                    name=coerce_enum(DocumentName, item.get("name"), "name"),
                    status=coerce_enum(ReviewStatus, item.get("status"), "status"),
                )
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from None
    return criteria
