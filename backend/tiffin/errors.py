"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``tiffin.main`` renders them as
``{"detail": ..., "error": ...}``.
"""


class TiffinError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRange(TiffinError):
    pass


class RangeTooLarge(TiffinError):
    pass


class InvalidWeekday(TiffinError):
    pass


class InvalidBulkRequest(TiffinError):
    pass


class InvalidPeriod(TiffinError):
    pass


class NoMatchingRecords(TiffinError):
    status_code = 404


class NotFound(TiffinError):
    status_code = 404


class Forbidden(TiffinError):
    status_code = 403


class Conflict(TiffinError):
    status_code = 409


class Unauthenticated(TiffinError):
    status_code = 401


class InvalidMealCount(TiffinError):
    pass
