"""Lookups over the F1 document chain and the reviewer-facing next step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from .states import CHAIN_ORDER, NEXT_DOCUMENT, DocumentName, ReviewStatus


class ChainRecord(Protocol):
    name: DocumentName
    status: ReviewStatus
    feedback: str
    url: str | None


def latest_record(records: Sequence[ChainRecord], name: DocumentName) -> ChainRecord | None:
    """Return the most recently appended record for ``name``."""

    for record in reversed(records):
        if record.name == name:
            return record
    return None


def first_pending(records: Sequence[ChainRecord], name: DocumentName) -> ChainRecord | None:
    for record in records:
        if record.name == name and record.status == ReviewStatus.PENDING:
            return record
    return None


def has_stage(records: Sequence[ChainRecord], name: DocumentName) -> bool:
    return any(record.name == name for record in records)


@dataclass(frozen=True)
class ChainProgress:
    document_name: DocumentName | None
    status: ReviewStatus | None
    message: str

    @property
    def complete(self) -> bool:
        return self.document_name is None

    def to_dict(self) -> dict:
        return {
            "document_name": self.document_name.value if self.document_name else None,
            "status": self.status.value if self.status else None,
            "message": self.message,
            "complete": self.complete,
        }


def chain_progress(records: Sequence[ChainRecord]) -> ChainProgress:
    """Describe the first chain stage still waiting on the employee or HR."""

    for name in CHAIN_ORDER:
        record = latest_record(records, name)
        if record is None or record.status == ReviewStatus.NEVER_SUBMITTED:
            return ChainProgress(
                name,
                ReviewStatus.NEVER_SUBMITTED,
                f"Waiting for employee to submit {name.value}.",
            )
        if record.status == ReviewStatus.REJECTED:
            feedback = record.feedback or "No feedback provided."
            return ChainProgress(
                name,
                ReviewStatus.REJECTED,
                f"Waiting for employee to resubmit {name.value}. Feedback: {feedback}",
            )
        if record.status == ReviewStatus.PENDING:
            return ChainProgress(
                name, ReviewStatus.PENDING, f"Waiting for HR to approve {name.value}."
            )
    return ChainProgress(None, None, "All documents have been approved.")


def next_stage(name: DocumentName) -> DocumentName | None:
    return NEXT_DOCUMENT.get(name)
