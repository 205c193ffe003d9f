"""Error taxonomy shared by the store, services and web layer.

Every error carries a stable machine-readable ``kind`` and the HTTP status
the web layer answers with. The message is safe to show to the caller,
except for StoreFailureError whose detail is logged and replaced.
"""

from __future__ import annotations


class StudyTrackError(Exception):
    """Base class for expected failures."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(StudyTrackError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class InvalidArgumentError(StudyTrackError):
    """Raised when a value is outside its allowed range or shape."""

    kind = "invalid_argument"
    status_code = 400


class ValidationError(StudyTrackError):
    """Raised when a payload fails schema validation."""

    kind = "validation_error"
    status_code = 400


class UnauthorizedError(StudyTrackError):
    """Raised when a personal-data call has no verified identity."""

    kind = "unauthorized"
    status_code = 401


class StoreFailureError(StudyTrackError):
    """Unexpected persistence fault."""

    kind = "store_failure"
    status_code = 500

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)
