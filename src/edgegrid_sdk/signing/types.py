"""
Type definitions for request signing functionality

This module provides type definitions and data classes for the EdgeGrid
EG1-HMAC-SHA256 request signing scheme.
"""

from typing import Dict, List, Optional, Union, Callable, Any, Mapping, Tuple, IO
from dataclasses import dataclass, field

from ..credentials.types import CredentialValue


# Body size the content hash is computed over when none is configured
DEFAULT_MAX_BODY = 131072

AUTH_SCHEME = "EG1-HMAC-SHA256"


@dataclass(frozen=True)
class SignableRequest:
    """
    Read-only view of the outbound request used for canonicalization

    Attributes:
        method: HTTP method as sent (e.g. "GET", "POST")
        scheme: URL scheme
        host: URL host, with port if present
        path: URL path, as it appears in the URL
        raw_query: Raw query string without the leading "?"
        headers: Request headers
        body: Request body bytes (empty if none)
    """
    method: str
    scheme: str
    host: str
    path: str
    raw_query: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass
class SigningConfig:
    """
    Configuration for request signing

    Attributes:
        headers_to_sign: Header names (case-insensitive) included in the signature
        max_body: Maximum number of POST body bytes covered by the content hash
        timestamp: Fixed timestamp for deterministic signing (tests only)
        nonce: Fixed nonce for deterministic signing (tests only)
        nonce_generator: Optional custom nonce generator function
        timestamp_generator: Optional custom timestamp generator function
    """
    headers_to_sign: List[str] = field(default_factory=list)
    max_body: int = DEFAULT_MAX_BODY
    timestamp: Optional[str] = None
    nonce: Optional[str] = None
    nonce_generator: Optional[Callable[[], str]] = None
    timestamp_generator: Optional[Callable[[], str]] = None

    def __post_init__(self):
        """Validate signing configuration"""
        if isinstance(self.max_body, bool) or not isinstance(self.max_body, int) or self.max_body <= 0:
            raise SigningError(
                "max_body must be a positive integer",
                SigningErrorCodes.INVALID_MAX_BODY,
                {"max_body": self.max_body}
            )

        if not isinstance(self.headers_to_sign, (list, tuple)):
            raise SigningError(
                "headers_to_sign must be a list of header names",
                SigningErrorCodes.INVALID_HEADERS
            )

        for name in self.headers_to_sign:
            if not isinstance(name, str) or not name.strip():
                raise SigningError(
                    f"Invalid header name in headers_to_sign: {name!r}",
                    SigningErrorCodes.INVALID_HEADERS,
                    {"header": name}
                )

        self.headers_to_sign = list(self.headers_to_sign)


@dataclass(frozen=True)
class SigningContext:
    """
    Immutable snapshot of one request's signature computation

    Each build step returns a new snapshot with exactly one more field set.

    Attributes:
        request: Request being signed
        credentials: Resolved credentials
        timestamp: Formatted signing timestamp
        nonce: Replay-prevention nonce
        headers_to_sign: Header names included in the signature
        max_body: Content hash body cap
        path_query: Canonical path plus query
        canonical_headers: Tab-joined canonical signed headers
        content_hash: Base64 SHA-256 of the POST body, or empty
        auth_header: Authorization header preamble (no signature)
        signing_key: Key derived from the client secret and timestamp
        signing_data: Tab-joined string-to-sign
        signature: Base64 HMAC-SHA256 of the signing data
    """
    request: SignableRequest
    credentials: CredentialValue
    timestamp: str
    nonce: str
    headers_to_sign: Tuple[str, ...] = ()
    max_body: int = DEFAULT_MAX_BODY
    path_query: Optional[str] = None
    canonical_headers: Optional[str] = None
    content_hash: Optional[str] = None
    auth_header: Optional[str] = None
    signing_key: Optional[str] = None
    signing_data: Optional[str] = None
    signature: Optional[str] = None

    @property
    def authorization(self) -> str:
        """Final Authorization header value"""
        if self.auth_header is None or self.signature is None:
            raise SigningError(
                "Signing context is not fully built",
                SigningErrorCodes.SIGNING_FAILED
            )
        return f"{self.auth_header}signature={self.signature}"


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


# Common signing error codes
class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    INVALID_MAX_BODY = "INVALID_MAX_BODY"
    INVALID_HEADERS = "INVALID_HEADERS"

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_URL = "INVALID_URL"
    UNSUPPORTED_BODY = "UNSUPPORTED_BODY"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"
    CONTEXT_FIELD_ALREADY_SET = "CONTEXT_FIELD_ALREADY_SET"


# Type aliases for convenience
NonceGenerator = Callable[[], str]
TimestampGenerator = Callable[[], str]
RequestBody = Union[str, bytes, IO[bytes], None]
