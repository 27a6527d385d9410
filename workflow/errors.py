"""HTTP-aware error types raised by the onboarding workflow.

Every error is a Werkzeug ``HTTPException`` so the application-wide JSON
handler renders it; ``extra`` carries structured detail such as the list of
empty fields returned by a failed submission.
"""

from __future__ import annotations

from werkzeug.exceptions import BadRequest, InternalServerError, NotFound


class _WorkflowErrorMixin:
    def __init__(self, description: str | None = None, **extra: object):
        super().__init__(description)  # type: ignore[call-arg]
        self.extra: dict[str, object] = extra


class ValidationError(_WorkflowErrorMixin, BadRequest):
    """Missing or malformed input; nothing was changed."""


class NotFoundError(_WorkflowErrorMixin, NotFound):
    """The target is absent, or not in a state that allows the operation."""


class PersistenceError(_WorkflowErrorMixin, InternalServerError):
    """The database rejected or failed the write; the transaction was rolled back."""


class ConcurrentUpdateError(PersistenceError):
    """Another request changed the application first."""

    code = 409
