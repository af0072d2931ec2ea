"""
Exception classes for EdgeGrid Python SDK
"""

from typing import Optional, Dict, Any


class EdgeGridSDKError(Exception):
    """Base exception for all EdgeGrid SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(EdgeGridSDKError):
    """Exception raised for validation failures"""
    pass


class ServerCommunicationError(EdgeGridSDKError):
    """Exception raised for server communication errors"""

    def __init__(self, message: str, error_code: str = "SERVER_ERROR",
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status


class AcceptedError(ServerCommunicationError):
    """
    Raised when the API answers 202 Accepted.

    The request started an asynchronous job on the platform side; the raw
    response payload is kept so callers can poll for the result.
    """

    def __init__(self, raw: bytes = b"", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "job scheduled with Akamai. check back later.",
            "ACCEPTED",
            http_status=202,
            details=details
        )
        self.raw = raw


class ApiError(ServerCommunicationError):
    """Exception raised for non-2xx API responses"""

    def __init__(self, message: str, http_status: int, response: Any = None,
                 errors: Optional[list] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "API_ERROR", http_status, details)
        self.response = response
        self.errors = errors or []
