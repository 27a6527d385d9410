"""Tests for request payload parsing."""

from __future__ import annotations

from datetime import date

import pytest

from workflow.errors import ValidationError
from workflow.inputs import (
    ApplicationDecision,
    ApplicationUpdate,
    DocumentDecision,
    WorkAuthorizationUpdate,
    parse_search_criteria,
)
from workflow.states import Decision, DocumentName, Gender, ReviewStatus, VisaType


def test_rejection_requires_feedback():
    with pytest.raises(ValidationError):
        ApplicationDecision.from_payload({"status": "Rejected", "feedback": "   "})

    decision = ApplicationDecision.from_payload({"status": "Rejected", "feedback": " Missing SSN "})
    assert decision.decision is Decision.REJECTED
    assert decision.feedback == "Missing SSN"


def test_unknown_decision_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        ApplicationDecision.from_payload({"status": "Maybe"})
    assert "Approved, Rejected" in excinfo.value.description


def test_document_decision_requires_chain_name():
    with pytest.raises(ValidationError):
        DocumentDecision.from_payload({"document_name": "DriverLicense", "status": "Approved"})

    decision = DocumentDecision.from_payload({"document_name": "I-20", "decision": "Approved"})
    assert decision.document_name is DocumentName.I_20
    assert decision.feedback == ""


def test_update_maps_nested_sections_to_columns():
    update = ApplicationUpdate.from_payload(
        {
            "first_name": " Ada ",
            "date_of_birth": "1990-05-17T00:00:00.000Z",
            "gender": "Female",
            "address": {"city": "Princeton"},
            "references": {"phone": "6095550199"},
        }
    )

    assert update.changes == {
        "first_name": "Ada",
        "date_of_birth": date(1990, 5, 17),
        "gender": Gender.FEMALE,
        "address_city": "Princeton",
        "reference_phone": "6095550199",
    }


@pytest.mark.parametrize("key", ["email", "status", "feedback", "documents", "version", "id"])
def test_update_refuses_protected_fields(key):
    with pytest.raises(ValidationError) as excinfo:
        ApplicationUpdate.from_payload({key: "x", "first_name": "Ada"})
    assert excinfo.value.extra["fields"] == [key]


def test_update_refuses_unknown_nested_keys():
    with pytest.raises(ValidationError) as excinfo:
        ApplicationUpdate.from_payload({"address": {"country": "US"}})
    assert "country" in excinfo.value.description


def test_work_authorization_update():
    update = WorkAuthorizationUpdate.from_payload(
        {"visa_type": "F1(CPT/OPT)", "start_date": "2024-01-01", "end_date": None}
    )
    assert update.changes == {
        "visa_type": VisaType.F1_CPT_OPT,
        "start_date": date(2024, 1, 1),
        "end_date": None,
    }

    with pytest.raises(ValidationError):
        WorkAuthorizationUpdate.from_payload({"documents": []})
    with pytest.raises(ValidationError):
        WorkAuthorizationUpdate.from_payload({"visa_type": "J1"})


def test_search_criteria():
    criteria = parse_search_criteria(
        {"documents": [{"name": "OPTReceipt", "status": "Approved"}]}
    )
    assert criteria[0].name is DocumentName.OPT_RECEIPT
    assert criteria[0].status is ReviewStatus.APPROVED

    for payload in ({}, {"documents": []}, {"documents": [{"name": "I-20", "status": "Done"}]}):
        with pytest.raises(ValidationError):
            parse_search_criteria(payload)
