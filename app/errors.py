"""
Rejections raised by the timetable core.

Every rejection carries a machine readable ``kind`` and an HTTP status so the
API layer can render it without knowing which stage produced it:

- ``Unauthenticated`` / ``InvalidToken``: no usable identity
- ``Forbidden``: valid identity, wrong role
- ``MissingFields`` / ``InvalidRange`` / ``InvalidWeekdays``: fix your input
- ``ClassConflict`` / ``RoomConflict``: pick a different time or room
- ``NotFound``: no such entry
- ``Internal``: store failure, try again later
"""
from typing import Optional


class Rejection(Exception):
    kind = "Internal"
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, conflict_id: Optional[int] = None):
        self.detail = detail or self.default_detail
        self.conflict_id = conflict_id
        super().__init__(self.detail)

    def to_dict(self) -> dict:
        body = {"error": self.kind, "detail": self.detail}
        if self.conflict_id is not None:
            body["conflict_id"] = self.conflict_id
        return body


class Unauthenticated(Rejection):
    kind = "Unauthenticated"
    status_code = 401
    default_detail = "Access token required"


class InvalidToken(Unauthenticated):
    kind = "InvalidToken"
    status_code = 403
    default_detail = "Invalid or expired token"


class Forbidden(Rejection):
    kind = "Forbidden"
    status_code = 403
    default_detail = "Teacher access required"


class MissingFields(Rejection):
    kind = "MissingFields"
    status_code = 400
    default_detail = "Missing required fields"


class InvalidRange(Rejection):
    kind = "InvalidRange"
    status_code = 400
    default_detail = "Start time must be before end time"


class InvalidWeekdays(Rejection):
    kind = "InvalidWeekdays"
    status_code = 400
    default_detail = "At least one weekday must be selected"


class ConflictRejection(Rejection):
    status_code = 409


class ClassConflict(ConflictRejection):
    kind = "ClassConflict"
    default_detail = "Time conflict detected"


class RoomConflict(ConflictRejection):
    kind = "RoomConflict"
    default_detail = "Room is not available at this time"


class BadRequest(Rejection):
    kind = "BadRequest"
    status_code = 400
    default_detail = "Bad request"


class Duplicate(Rejection):
    kind = "Duplicate"
    status_code = 409
    default_detail = "Username already exists"


class NotFound(Rejection):
    kind = "NotFound"
    status_code = 404
    default_detail = "Class not found"


class Internal(Rejection):
    pass
