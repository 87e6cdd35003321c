"""Domain errors surfaced verbatim at the API boundary"""


class VendorHubError(Exception):
    """Base class for caller-recoverable errors."""

    status_code = 400
    code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(VendorHubError):
    """Malformed or out-of-range input."""

    status_code = 422
    code = "validation_error"


class NotFoundError(VendorHubError):
    """Referenced entity id does not exist."""

    status_code = 404
    code = "not_found"


class ConflictError(VendorHubError):
    """Valid request, but the target's state no longer permits it."""

    status_code = 409
    code = "conflict"


class AuthenticationError(VendorHubError):
    status_code = 401
    code = "not_authenticated"


class PermissionDeniedError(VendorHubError):
    status_code = 403
    code = "forbidden"
