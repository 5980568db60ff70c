"""Error taxonomy for the attendance subsystem.

Every error carries a stable ``code`` and the HTTP status it maps to. The
handlers registered in ``union_meetings.main`` render them as
``{"error": ..., "code": ...}``.
"""


class AttendanceError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "AttendanceError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class Unauthenticated(AttendanceError):
    code = "Unauthenticated"
    status_code = 401


class NotFound(AttendanceError):
    code = "NotFound"
    status_code = 404


class WindowNotOpenYet(AttendanceError):
    code = "WindowNotOpenYet"
    status_code = 409


class WindowClosed(AttendanceError):
    code = "WindowClosed"
    status_code = 409


class InvalidStatusOverride(AttendanceError):
    code = "InvalidStatusOverride"
    status_code = 400


class StorageError(AttendanceError):
    """Persistence failure. The message never includes driver details."""

    code = "StorageError"
    status_code = 500

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)
