"""
Domain errors for the scheduling and check-in core.

Each error carries the HTTP status the API layer answers with; the core itself
never imports FastAPI.
"""


class FrontDeskError(Exception):
    """Base class for all errors raised by the core"""

    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(FrontDeskError):
    """Malformed input: bad time label, unknown weekday, garbled token"""

    status_code = 422


class NotFoundError(FrontDeskError):
    """Referenced record does not exist"""

    status_code = 404


class InvalidTransition(FrontDeskError):
    """State machine call not allowed from the current state"""

    status_code = 409


class PreconditionFailed(FrontDeskError):
    """Attendance marked before the appointment was confirmed"""

    status_code = 409


class InvalidToken(FrontDeskError):
    """Well-formed check-in token pointing at an unknown appointment"""

    status_code = 404


class DataAccessError(FrontDeskError):
    """Underlying record store failure"""

    status_code = 503


class ResourceAcquisitionError(FrontDeskError):
    """Camera unavailable or access denied; the caller may retry"""

    status_code = 503

    def __init__(self, message: str = "", permission_denied: bool = False):
        super().__init__(message)
        self.permission_denied = permission_denied
        self.retryable = True
