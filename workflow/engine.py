"""Decision engine for onboarding applications and the F1 document chain.

Each public operation is one unit of work: it loads the application
aggregate, applies a transition and commits, or rolls everything back.
Every mutation touches the aggregate row so its version counter advances;
a concurrent writer holding a stale copy fails with ``ConcurrentUpdateError``
instead of overwriting the other decision.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Sequence

from flask import current_app
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from models import db
from models.application import Application, ChainDocument, WorkAuthorization
from models.employee import Employee

from .chain import first_pending, has_stage, latest_record, next_stage
from .errors import ConcurrentUpdateError, NotFoundError, PersistenceError, ValidationError
from .inputs import (
    ApplicationDecision,
    ApplicationUpdate,
    DocumentCriterion,
    DocumentDecision,
    WorkAuthorizationUpdate,
)
from .states import (
    EDITABLE_STATUSES,
    Decision,
    DocumentName,
    InvalidTransition,
    ProfileFileName,
    ReviewAction,
    ReviewStatus,
    application_transition,
    coerce_enum,
    document_transition,
)
from .submission import find_empty_fields
from .sync import sync_employee

PROFILE_FILE_COLUMNS = {
    ProfileFileName.PROFILE_PICTURE: "profile_picture_url",
    ProfileFileName.DRIVER_LICENSE: "driver_license_url",
}


@contextmanager
def unit_of_work(operation: str) -> Iterator[None]:
    """Commit on success; roll back and translate database failures."""

    try:
        yield
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        current_app.logger.warning("Stale application version during %s", operation)
        raise ConcurrentUpdateError(
            "The application was changed by another request. Reload it and try again."
        ) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Database failure during %s", operation)
        raise PersistenceError(f"Failed to save {operation}.") from exc
    except BaseException:
        db.session.rollback()
        raise


def get_application(application_id: int) -> Application:
    application = db.session.get(Application, application_id)
    if application is None:
        raise NotFoundError("Application not found")
    return application


def list_applications(status: ReviewStatus | None = None) -> list[Application]:
    query = Application.query
    if status is not None:
        query = query.filter(Application.status == status)
    return query.order_by(Application.id.asc()).all()


def search_applications(criteria: Sequence[DocumentCriterion]) -> list[Application]:
    """Applications whose chain matches every ``(name, status)`` criterion."""

    if not criteria:
        raise ValidationError("At least one document criterion is required.")

    query = Application.query
    for criterion in criteria:
        query = query.filter(
            Application.work_authorization.has(
                WorkAuthorization.documents.any(
                    and_(
                        ChainDocument.name == criterion.name,
                        ChainDocument.status == criterion.status,
                    )
                )
            )
        )
    return query.order_by(Application.id.asc()).all()


def _require_editable(application: Application) -> None:
    if application.status not in EDITABLE_STATUSES:
        raise ValidationError(
            f"Application cannot be edited while it is {application.status.value}."
        )


def update_application(application_id: int, update: ApplicationUpdate) -> Application:
    with unit_of_work("application update"):
        application = get_application(application_id)
        _require_editable(application)
        try:
            for attr, value in update.changes.items():
                setattr(application, attr, value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        application.touch()

    current_app.logger.info(
        "Application %s updated fields=%s", application_id, sorted(update.changes)
    )
    return application


def update_work_authorization(
    application_id: int, update: WorkAuthorizationUpdate
) -> Application:
    """Edit visa metadata; the document chain is never touched here."""

    with unit_of_work("work authorization update"):
        application = get_application(application_id)
        _require_editable(application)
        work_authorization = application.work_authorization
        if work_authorization is None:
            work_authorization = WorkAuthorization()
            application.work_authorization = work_authorization
        for attr, value in update.changes.items():
            setattr(work_authorization, attr, value)
        start, end = work_authorization.start_date, work_authorization.end_date
        if start and end and end < start:
            raise ValidationError("end_date must not be before start_date.")
        application.touch()

    current_app.logger.info("Application %s work authorization updated", application_id)
    return application


def submit_application(application_id: int) -> Application:
    """Move a complete application to Pending, or report its empty fields."""

    with unit_of_work("application submission"):
        application = get_application(application_id)
        try:
            new_status = application_transition(application.status, ReviewAction.SUBMIT)
        except InvalidTransition as exc:
            raise ValidationError(str(exc)) from exc

        empty_fields = find_empty_fields(application.form_dict())
        if empty_fields:
            raise ValidationError("Some fields are required", empty_fields=empty_fields)

        application.status = new_status
        application.touch()

    current_app.logger.info("Application %s submitted", application_id)
    return application


def _reset_chain(application: Application) -> None:
    # Re-approval restarts the chain rather than appending to an old attempt.
    application.work_authorization.documents = [
        ChainDocument(
            position=0,
            name=DocumentName.OPT_RECEIPT,
            status=ReviewStatus.NEVER_SUBMITTED,
            url=None,
            feedback="",
        )
    ]


def decide_application(application_id: int, decision: ApplicationDecision) -> Application:
    """Approve or reject an application in any status.

    Approval clears feedback, restarts the F1 document chain and projects the
    application onto the employee record; all of it commits together.
    """

    with unit_of_work("application decision"):
        application = get_application(application_id)
        previous = application.status
        new_status = application_transition(previous, decision.decision.action)

        if decision.decision is Decision.REJECTED:
            application.status = new_status
            application.feedback = decision.feedback
        else:
            employee = db.session.get(Employee, application.employee_id)
            if employee is None:
                raise NotFoundError("Employee not found")
            application.status = new_status
            application.feedback = ""
            if application.work_authorization is not None and application.work_authorization.is_f1:
                _reset_chain(application)
            sync_employee(application, employee)
        application.touch()

    current_app.logger.info(
        "Application %s %s (was %s)",
        application_id,
        decision.decision.value.lower(),
        previous.value,
    )
    return application


def decide_document(application_id: int, decision: DocumentDecision) -> Application:
    """Approve or reject the pending chain document named in ``decision``."""

    with unit_of_work("document decision"):
        application = get_application(application_id)
        record = first_pending(application.chain, decision.document_name)
        if record is None:
            raise NotFoundError("Pending document not found or already processed")

        record.status = document_transition(record.status, decision.decision.action)
        if decision.decision is Decision.REJECTED:
            record.feedback = decision.feedback
        else:
            record.feedback = ""
            following = next_stage(decision.document_name)
            if following is not None and not has_stage(application.chain, following):
                application.work_authorization.documents.append(
                    ChainDocument(
                        name=following,
                        status=ReviewStatus.NEVER_SUBMITTED,
                        url=None,
                        feedback="",
                    )
                )
        application.touch()

    current_app.logger.info(
        "Application %s document %s %s",
        application_id,
        decision.document_name.value,
        decision.decision.value.lower(),
    )
    return application


def parse_upload_name(raw: object) -> DocumentName | ProfileFileName:
    for enum_cls in (DocumentName, ProfileFileName):
        try:
            return enum_cls(raw)
        except ValueError:
            continue
    allowed = [member.value for member in DocumentName] + [
        member.value for member in ProfileFileName
    ]
    raise ValidationError("Invalid file name. Allowed names: {}.".format(", ".join(allowed)))


def check_upload_allowed(
    application: Application, name: DocumentName | ProfileFileName
) -> ChainDocument | None:
    """Return the chain record an upload of ``name`` would fill, if any.

    Raises when the slot does not exist yet or is not awaiting a file.
    """

    if isinstance(name, ProfileFileName):
        return None
    record = latest_record(application.chain, name)
    if record is None:
        raise NotFoundError(f"Document {name.value} section not found")
    try:
        document_transition(record.status, ReviewAction.SUBMIT)
    except InvalidTransition as exc:
        raise ValidationError(
            f"Document {name.value} is {record.status.value} and cannot be replaced."
        ) from exc
    return record


def record_upload(
    application_id: int, name: DocumentName | ProfileFileName | str, stored_path: str
) -> Application:
    """Attach a stored file to its slot; chain documents become Pending."""

    if isinstance(name, str) and not isinstance(name, (DocumentName, ProfileFileName)):
        name = parse_upload_name(name)

    with unit_of_work("document upload"):
        application = get_application(application_id)
        record = check_upload_allowed(application, name)
        if record is None:
            column = PROFILE_FILE_COLUMNS[name]
            setattr(application, column, stored_path)
            employee = db.session.get(Employee, application.employee_id)
            if employee is not None:
                setattr(employee, column, stored_path)
        else:
            record.url = stored_path
            record.status = document_transition(record.status, ReviewAction.SUBMIT)
        application.touch()

    current_app.logger.info(
        "Application %s received upload %s", application_id, name.value
    )
    return application


def parse_status_filter(raw: str | None) -> ReviewStatus | None:
    if not raw:
        return None
    try:
        return coerce_enum(ReviewStatus, raw, "status")
    except ValueError as exc:
        raise ValidationError(str(exc)) from None
