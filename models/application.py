"""Onboarding application aggregate and its work-authorization document chain."""

from __future__ import annotations

from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import validates

from workflow.chain import chain_progress
from workflow.states import DocumentName, ReviewStatus, VisaType

from . import db
from .mixins import (
    REFERENCE_SECTION,
    PersonalProfileMixin,
    check_email,
    check_phone,
    enum_type,
    serialize_value,
    utcnow,
)


class ChainDocument(db.Model):
    """One approval-tracked slot in the work-authorization document chain."""

    __tablename__ = "chain_documents"

    id = db.Column(db.Integer, primary_key=True)
    work_authorization_id = db.Column(
        db.Integer,
        db.ForeignKey("work_authorizations.id"),
        nullable=False,
        index=True,
    )
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(enum_type(DocumentName, "chain_document_name"), nullable=False)
    url = db.Column(db.String(512), nullable=True)
    status = db.Column(
        enum_type(ReviewStatus, "review_status"),
        nullable=False,
        default=ReviewStatus.NEVER_SUBMITTED,
    )
    feedback = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    work_authorization = db.relationship("WorkAuthorization", back_populates="documents")

    def __repr__(self) -> str:
        return f"<ChainDocument {self.name} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "name": serialize_value(self.name),
            "url": self.url,
            "status": serialize_value(self.status),
            "feedback": self.feedback or "",
        }


class WorkAuthorization(db.Model):
    """Visa metadata plus the ordered, append-only document chain."""

    __tablename__ = "work_authorizations"

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(
        db.Integer,
        db.ForeignKey("applications.id"),
        nullable=False,
        unique=True,
    )
    visa_type = db.Column(
        enum_type(VisaType, "visa_type"), nullable=False, default=VisaType.OTHER
    )
    visa_title = db.Column(db.String(120), nullable=False, default="")
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)

    application = db.relationship("Application", back_populates="work_authorization")
    documents = db.relationship(
        "ChainDocument",
        back_populates="work_authorization",
        order_by="ChainDocument.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    @property
    def is_f1(self) -> bool:
        return self.visa_type == VisaType.F1_CPT_OPT

    def to_dict(self) -> dict:
        data = {
            "visa_type": serialize_value(self.visa_type),
            "visa_title": self.visa_title or "",
            "start_date": serialize_value(self.start_date),
            "end_date": serialize_value(self.end_date),
            "documents": [document.to_dict() for document in self.documents],
        }
        progress = chain_progress(self.documents) if self.is_f1 else None
        data["progress"] = progress.to_dict() if progress else None
        return data


class Application(PersonalProfileMixin, db.Model):
    """The onboarding application an employee fills in and HR reviews."""

    __tablename__ = "applications"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(
        db.Integer,
        db.ForeignKey("employees.id"),
        nullable=False,
        unique=True,
    )
    reference_first_name = db.Column(db.String(120), nullable=False, default="")
    reference_last_name = db.Column(db.String(120), nullable=False, default="")
    reference_middle_name = db.Column(db.String(120), nullable=False, default="")
    reference_phone = db.Column(db.String(32), nullable=False, default="")
    reference_email = db.Column(db.String(255), nullable=False, default="")
    reference_relationship = db.Column(db.String(64), nullable=False, default="")

    status = db.Column(
        enum_type(ReviewStatus, "review_status"),
        nullable=False,
        default=ReviewStatus.NEVER_SUBMITTED,
        index=True,
    )
    feedback = db.Column(db.Text, nullable=False, default="")
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    employee = db.relationship("Employee", back_populates="application")
    work_authorization = db.relationship(
        "WorkAuthorization",
        back_populates="application",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @validates("reference_phone")
    def _validate_reference_phone(self, key: str, value: str | None) -> str:
        return check_phone(value)

    @validates("reference_email")
    def _validate_reference_email(self, key: str, value: str | None) -> str:
        return check_email(value)

    @property
    def chain(self) -> list[ChainDocument]:
        if self.work_authorization is None:
            return []
        return list(self.work_authorization.documents)

    def touch(self) -> None:
        """Mark the aggregate row dirty so its version advances on flush."""

        self.updated_at = utcnow()

    def form_dict(self) -> dict:
        """The fields the employee fills in, in nested form."""

        data = self.profile_dict()
        data["references"] = self.section_dict(REFERENCE_SECTION)
        return data

    def to_dict(self) -> dict:
        data = {"id": self.id, "employee_id": self.employee_id}
        data.update(self.form_dict())
        data.update(
            {
                "work_authorization": self.work_authorization.to_dict()
                if self.work_authorization
                else None,
                "status": serialize_value(self.status),
                "feedback": self.feedback or "",
                "version": self.version,
                "created_at": serialize_value(self.created_at),
                "updated_at": serialize_value(self.updated_at),
            }
        )
        return data

    def __repr__(self) -> str:
        return f"<Application id={self.id} status={self.status}>"
