"""
HTTP exceptions carrying a machine-readable error code.

Raised from route handlers and dependencies; the application's exception
handler renders them with `error_response`, so clients always receive
`{"success": false, "error": {"message", "code"}}`.

Example:
    from common.utils import ForbiddenException

    if viewer.role != "admin":
        raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED")
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException

from common.utils.responses import error_response


class APIException(HTTPException):
    """HTTPException with an error code and optional details."""

    status_code_default = 500
    code_default = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.code = code or self.code_default
        self.details = details

        detail: Dict[str, Any] = {"message": message, "code": self.code}
        if details is not None:
            detail["details"] = details

        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail,
            headers=headers,
        )

    def to_response(self) -> Dict[str, Any]:
        """Error envelope for this exception."""
        return error_response(self.message, code=self.code, details=self.details)


class UnauthorizedException(APIException):
    """401: missing, malformed or rejected ID token."""
    status_code_default = 401
    code_default = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", code: Optional[str] = None):
        super().__init__(message, code)


class ForbiddenException(APIException):
    """403: signed in, but the role may not do this."""
    status_code_default = 403
    code_default = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", code: Optional[str] = None):
        super().__init__(message, code)


class ValidationException(APIException):
    """422: input passed schema validation but is still unusable."""
    status_code_default = 422
    code_default = "VALIDATION_ERROR"


class ServiceUnavailableException(APIException):
    """503: the feature is switched off or its backend is unreachable."""
    status_code_default = 503
    code_default = "SERVICE_UNAVAILABLE"

    def __init__(self, message: str = "Service unavailable", code: Optional[str] = None):
        super().__init__(message, code)
