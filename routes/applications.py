"""Onboarding application blueprint for employees and HR reviewers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_jwt_extended import jwt_required
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import NotFound

from storage import storage_for
from utils.auth import own_application, require_employee, require_hr
from utils.request_validation import parse_json_request
from workflow import engine
from workflow.chain import latest_record
from workflow.errors import ValidationError
from workflow.inputs import (
    ApplicationDecision,
    ApplicationUpdate,
    DocumentDecision,
    WorkAuthorizationUpdate,
    parse_search_criteria,
)
from workflow.states import DocumentName, coerce_enum

applications_bp = Blueprint("applications", __name__)

MAX_UPLOAD_SIZE_DEFAULT = 10 * 1024 * 1024  # 10 MB
ALLOWED_EXTENSIONS_DEFAULT = {"pdf"}
ALLOWED_MIMETYPES = {"application/pdf"}


def _allowed_extensions() -> set[str]:
    configured = current_app.config.get("ALLOWED_UPLOAD_TYPES")
    if not configured:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if isinstance(configured, str):
        values: Iterable[str] = configured.split(",")
    else:
        values = configured

    normalized = {
        raw.strip().lower().lstrip(".") for raw in values if isinstance(raw, str) and raw.strip()
    }
    return normalized or set(ALLOWED_EXTENSIONS_DEFAULT)


def _validate_upload(file: FileStorage) -> str:
    """Check type and size and return the file's extension."""

    if file.filename is None or file.filename.strip() == "":
        raise ValidationError("A document file is required.")

    extension = Path(file.filename).suffix.lower().lstrip(".")
    if extension not in _allowed_extensions() or (
        file.mimetype and file.mimetype not in ALLOWED_MIMETYPES
    ):
        raise ValidationError("Only PDF files are allowed.")

    max_size = int(current_app.config.get("MAX_UPLOAD_SIZE", MAX_UPLOAD_SIZE_DEFAULT))
    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size == 0:
        raise ValidationError("The uploaded file is empty.")
    if size > max_size:
        raise ValidationError(
            f"File exceeds the maximum upload size of {max_size // (1024 * 1024)}MB."
        )
    return extension


def _application_response(message: str, application, status: int = 200):
    return jsonify({"message": message, "application": application.to_dict()}), status


# Employee section


@applications_bp.route("/mine", methods=["GET"])
@jwt_required()
def get_my_application():
    """Return the signed-in employee's application."""

    application = own_application(require_employee())
    return _application_response("Get successfully", application)


@applications_bp.route("/mine", methods=["PUT"])
@jwt_required()
def update_my_application():
    """Patch the employee-editable fields of the application."""

    application = own_application(require_employee())
    update = ApplicationUpdate.from_payload(parse_json_request(request))
    application = engine.update_application(application.id, update)
    return _application_response("Update successfully", application)


@applications_bp.route("/mine/work-authorization", methods=["PUT"])
@jwt_required()
def update_my_work_authorization():
    """Set visa type, title and dates; chain documents are HR-driven."""

    application = own_application(require_employee())
    update = WorkAuthorizationUpdate.from_payload(parse_json_request(request))
    application = engine.update_work_authorization(application.id, update)
    return _application_response("Update successfully", application)


@applications_bp.route("/mine/submit", methods=["PUT"])
@jwt_required()
def submit_my_application():
    """Submit the application for HR review once every required field is filled."""

    application = own_application(require_employee())
    application = engine.submit_application(application.id)
    return _application_response("Submit successfully", application)


@applications_bp.route("/mine/documents", methods=["POST"])
@jwt_required()
def upload_document():
    """Store an uploaded PDF and attach it to its document slot."""

    user = require_employee()
    application = own_application(user)

    file = request.files.get("file")
    if not isinstance(file, FileStorage):
        raise ValidationError("No file uploaded")
    extension = _validate_upload(file)

    raw_name = request.form.get("document_name") or Path(file.filename or "").stem
    name = engine.parse_upload_name(raw_name)
    # Refuse before writing so an approved file is never overwritten on disk.
    engine.check_upload_allowed(application, name)

    stored_path = storage_for().save(file, f"{name.value}.{extension}", folder=str(user.id))
    application = engine.record_upload(application.id, name, stored_path)

    return (
        jsonify(
            {
                "message": "Upload successfully",
                "file_path": stored_path,
                "application": application.to_dict(),
            }
        ),
        201,
    )


# HR section


@applications_bp.route("", methods=["GET"])
@jwt_required()
def list_applications():
    """List applications, optionally filtered by ``?status=``."""

    require_hr()
    status = engine.parse_status_filter(request.args.get("status"))
    applications = engine.list_applications(status)
    return jsonify(
        {
            "results": [application.to_dict() for application in applications],
            "count": len(applications),
        }
    )


@applications_bp.route("/search", methods=["POST"])
@jwt_required()
def search_applications():
    """Find applications whose chain matches every ``{name, status}`` pair."""

    require_hr()
    criteria = parse_search_criteria(parse_json_request(request))
    applications = engine.search_applications(criteria)
    return jsonify(
        {
            "results": [application.to_dict() for application in applications],
            "count": len(applications),
        }
    )


@applications_bp.route("/<int:application_id>", methods=["GET"])
@jwt_required()
def get_application(application_id: int):
    require_hr()
    return _application_response("Get successfully", engine.get_application(application_id))


@applications_bp.route("/<int:application_id>/decide", methods=["PUT"])
@jwt_required()
def decide_application(application_id: int):
    """Approve or reject an application; re-approval restarts the F1 chain."""

    require_hr()
    decision = ApplicationDecision.from_payload(parse_json_request(request))
    application = engine.decide_application(application_id, decision)
    return _application_response(
        f"Application has been {decision.decision.value.lower()}", application
    )


@applications_bp.route("/<int:application_id>/documents/decide", methods=["PUT"])
@jwt_required()
def decide_document(application_id: int):
    """Approve or reject the pending work-authorization document."""

    require_hr()
    decision = DocumentDecision.from_payload(parse_json_request(request))
    application = engine.decide_document(application_id, decision)
    return _application_response(
        f"Document {decision.document_name.value} has been "
        f"{decision.decision.value.lower()}",
        application,
    )


@applications_bp.route("/<int:application_id>/documents/<document_name>/file", methods=["GET"])
@jwt_required()
def download_document(application_id: int, document_name: str):
    """Allow HR to download the latest file stored for a chain document."""

    require_hr()
    try:
        name = coerce_enum(DocumentName, document_name, "document_name")
    except ValueError as exc:
        raise ValidationError(str(exc)) from None

    application = engine.get_application(application_id)
    record = latest_record(application.chain, name)
    if record is None or not record.url:
        raise NotFound("Document has not been uploaded.")

    storage = storage_for()
    if not storage.exists(record.url):
        raise NotFound("Stored file could not be found.")

    return send_file(
        storage.absolute_path(record.url),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=Path(record.url).name,
    )
