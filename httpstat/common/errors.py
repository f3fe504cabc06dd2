"""
Error Definitions

Defines the exceptions raised outside the measurement core. Recording and
projecting durations never raise; only the measuring client reports failures.
"""

from typing import Any, Optional


class HttpStatError(Exception):
    """
    Base Exception

    Base class for all custom exceptions, containing error message, code, and details.
    """

    def __init__(
        self,
        message: str,
        code: str = "httpstat_error",
        details: Optional[dict[str, Any]] = None,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            code: Error code
            details: Extra error details
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary format (for reporting)

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "code": self.code,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result


class RequestFailedError(HttpStatError):
    """
    Request Failed Error

    Raised by the measuring client when the transport fails (connect error,
    timeout, protocol error). Details carry the durations measured up to the
    failure; unreached phases are zero.
    """

    def __init__(
        self,
        message: str = "Request failed",
        code: str = "request_failed",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, details=details)
