"""Tests for the review-state transition tables."""

from __future__ import annotations

import itertools

import pytest

from workflow.states import (
    DOCUMENT_TRANSITIONS,
    Decision,
    DocumentName,
    InvalidTransition,
    ReviewAction,
    ReviewStatus,
    VisaType,
    application_transition,
    coerce_enum,
    document_transition,
)


@pytest.mark.parametrize(
    "current, action, expected",
    [
        (ReviewStatus.NEVER_SUBMITTED, ReviewAction.SUBMIT, ReviewStatus.PENDING),
        (ReviewStatus.REJECTED, ReviewAction.SUBMIT, ReviewStatus.PENDING),
        (ReviewStatus.PENDING, ReviewAction.APPROVE, ReviewStatus.APPROVED),
        (ReviewStatus.PENDING, ReviewAction.REJECT, ReviewStatus.REJECTED),
    ],
)
def test_allowed_transitions(current, action, expected):
    assert application_transition(current, action) is expected
    assert document_transition(current, action) is expected


def test_document_pairs_outside_the_table_are_refused():
    for current, action in itertools.product(ReviewStatus, ReviewAction):
        if (current, action) in DOCUMENT_TRANSITIONS:
            continue
        with pytest.raises(InvalidTransition):
            document_transition(current, action)


def test_approved_document_is_not_decided_again():
    with pytest.raises(InvalidTransition) as excinfo:
        document_transition(ReviewStatus.APPROVED, ReviewAction.APPROVE)

    assert excinfo.value.current is ReviewStatus.APPROVED
    assert "Cannot approve document while it is Approved." == str(excinfo.value)


@pytest.mark.parametrize("current", list(ReviewStatus))
def test_application_can_be_decided_from_any_status(current):
    assert application_transition(current, ReviewAction.APPROVE) is ReviewStatus.APPROVED
    assert application_transition(current, ReviewAction.REJECT) is ReviewStatus.REJECTED


@pytest.mark.parametrize("current", [ReviewStatus.PENDING, ReviewStatus.APPROVED])
def test_application_submit_only_from_editable_statuses(current):
    with pytest.raises(InvalidTransition):
        application_transition(current, ReviewAction.SUBMIT)


def test_transition_accepts_raw_status_strings():
    assert document_transition("Pending", ReviewAction.REJECT) is ReviewStatus.REJECTED


def test_decision_maps_to_action():
    assert Decision.APPROVED.action is ReviewAction.APPROVE
    assert Decision.REJECTED.action is ReviewAction.REJECT


def test_coerce_enum_uses_wire_values():
    assert coerce_enum(VisaType, "F1(CPT/OPT)", "visa_type") is VisaType.F1_CPT_OPT
    assert coerce_enum(DocumentName, "I-983", "document_name") is DocumentName.I_983

    with pytest.raises(ValueError) as excinfo:
        coerce_enum(DocumentName, "Passport", "document_name")
    assert "OPTReceipt, I-983, I-20" in str(excinfo.value)
