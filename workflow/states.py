"""Review states, decisions and the transition tables for the onboarding flow."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar


class ReviewStatus(str, Enum):
    """Status shared by applications and work-authorization documents."""

    NEVER_SUBMITTED = "NeverSubmitted"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Decision(str, Enum):
    """An HR reviewer's verdict."""

    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def action(self) -> "ReviewAction":
        if self is Decision.APPROVED:
            return ReviewAction.APPROVE
        return ReviewAction.REJECT


class ReviewAction(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


class DocumentName(str, Enum):
    """Documents in the F1 work-authorization chain."""

    OPT_RECEIPT = "OPTReceipt"
    I_983 = "I-983"
    I_20 = "I-20"


class ProfileFileName(str, Enum):
    """Flat uploads stored on the application, outside the chain."""

    PROFILE_PICTURE = "ProfilePicture"
    DRIVER_LICENSE = "DriverLicense"


class VisaType(str, Enum):
    H1B = "H1-B"
    L2 = "L2"
    F1_CPT_OPT = "F1(CPT/OPT)"
    H4 = "H4"
    OTHER = "Other"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Citizenship(str, Enum):
    GREEN_CARD = "GreenCard"
    CITIZEN = "Citizen"
    WORK_AUTHORIZATION = "WorkAuthorization"


class Role(str, Enum):
    HR = "HR"
    EMPLOYEE = "Employee"


CHAIN_ORDER: tuple[DocumentName, ...] = (
    DocumentName.OPT_RECEIPT,
    DocumentName.I_983,
    DocumentName.I_20,
)

# The last stage has no successor.
NEXT_DOCUMENT: dict[DocumentName, DocumentName] = {
    DocumentName.OPT_RECEIPT: DocumentName.I_983,
    DocumentName.I_983: DocumentName.I_20,
}

# Statuses from which the employee may edit the form or (re)upload a file.
EDITABLE_STATUSES = frozenset({ReviewStatus.NEVER_SUBMITTED, ReviewStatus.REJECTED})

# HR may decide an application in any status; the outer lifecycle has no
# terminal state and re-approval restarts the F1 chain.
APPLICATION_TRANSITIONS: dict[tuple[ReviewStatus, ReviewAction], ReviewStatus] = {
    (ReviewStatus.NEVER_SUBMITTED, ReviewAction.SUBMIT): ReviewStatus.PENDING,
    (ReviewStatus.REJECTED, ReviewAction.SUBMIT): ReviewStatus.PENDING,
    **{(status, ReviewAction.APPROVE): ReviewStatus.APPROVED for status in ReviewStatus},
    **{(status, ReviewAction.REJECT): ReviewStatus.REJECTED for status in ReviewStatus},
}

DOCUMENT_TRANSITIONS: dict[tuple[ReviewStatus, ReviewAction], ReviewStatus] = {
    (ReviewStatus.NEVER_SUBMITTED, ReviewAction.SUBMIT): ReviewStatus.PENDING,
    (ReviewStatus.REJECTED, ReviewAction.SUBMIT): ReviewStatus.PENDING,
    (ReviewStatus.PENDING, ReviewAction.APPROVE): ReviewStatus.APPROVED,
    (ReviewStatus.PENDING, ReviewAction.REJECT): ReviewStatus.REJECTED,
}


class InvalidTransition(ValueError):
    """Raised when an action is not allowed from the current status."""

    def __init__(self, entity: str, current: ReviewStatus, action: ReviewAction):
        self.entity = entity
        self.current = current
        self.action = action
        super().__init__(
            f"Cannot {action.value} {entity} while it is {current.value}."
        )


def _transition(
    table: dict[tuple[ReviewStatus, ReviewAction], ReviewStatus],
    entity: str,
    current: ReviewStatus,
    action: ReviewAction,
) -> ReviewStatus:
    try:
        return table[(ReviewStatus(current), action)]
    except KeyError:
        raise InvalidTransition(entity, ReviewStatus(current), action) from None


def application_transition(current: ReviewStatus, action: ReviewAction) -> ReviewStatus:
    """Return the application status reached by ``action`` from ``current``."""

    return _transition(APPLICATION_TRANSITIONS, "application", current, action)


def document_transition(current: ReviewStatus, action: ReviewAction) -> ReviewStatus:
    """Return the document status reached by ``action`` from ``current``."""

    return _transition(DOCUMENT_TRANSITIONS, "document", current, action)


E = TypeVar("E", bound=Enum)


def enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def coerce_enum(enum_cls: type[E], value: object, field: str) -> E:
    """Convert a raw payload value to ``enum_cls`` or raise ``ValueError``."""

    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(enum_values(enum_cls))
        raise ValueError(f"{field} must be one of: {allowed}.") from None
