"""
EdgeGrid EG1-HMAC-SHA256 request signer

This module provides the signer that attaches an EdgeGrid Authorization
header to outbound HTTP requests. It resolves credentials through a shared
Credentials cache, builds the canonical request and signature, and writes the
header onto the request.
"""

import logging
from typing import Any, Optional

from requests.structures import CaseInsensitiveDict

from ..credentials.credentials import Credentials
from .types import (
    RequestBody,
    SignableRequest,
    SigningConfig,
    SigningContext,
    SigningError,
    SigningErrorCodes,
)
from .utils import parse_url, read_body
from .canonical_request import build_signing_context, new_signing_context
from .signing_config import validate_signing_config

logger = logging.getLogger(__name__)


class EdgeGridSigner:
    """
    EdgeGrid request signer

    Safe to share between threads: each sign() call builds its own signing
    context, and refreshes of the shared credentials are serialized by the
    Credentials cache.
    """

    def __init__(self, credentials: Credentials, config: Optional[SigningConfig] = None):
        """
        Initialize the signer.

        Args:
            credentials: Credential cache to sign with
            config: Signing configuration (defaults if None)

        Raises:
            SigningError: If configuration is invalid
        """
        self.credentials = credentials
        self.config = config or SigningConfig()
        validate_signing_config(self.config)

    def sign(self, request: Any, body: RequestBody = None) -> CaseInsensitiveDict:
        """
        Sign an HTTP request in place.

        Sets the Authorization header on `request`. Only POST bodies are read:
        if a POST request body is a stream or an iterable it is replaced with
        an unread copy of the same bytes. Bodies of other methods are left
        untouched.

        Args:
            request: requests.PreparedRequest or any object with method, url,
                headers and body attributes
            body: Body to hash instead of request.body; bytes, str or a
                seekable stream, which is rewound after reading

        Returns:
            CaseInsensitiveDict: The request's headers, Authorization included

        Raises:
            CredentialError: If credentials cannot be retrieved
            SigningError: If the request is malformed or `body` is a stream
                that cannot be rewound
        """
        creds = self.credentials.get()

        if request.headers is None:
            request.headers = CaseInsensitiveDict()

        body_bytes = self._read_request_body(request, body)
        signable = self._to_signable_request(request, body_bytes)
        ctx = build_signing_context(new_signing_context(signable, creds, self.config))

        request.headers['Authorization'] = ctx.authorization
        logger.debug(f"Signed {signable.method} request to {signable.host}{signable.path}")
        return request.headers

    def build_context(self, request: Any, body: RequestBody = None) -> SigningContext:
        """
        Compute the full signing context without modifying the request.

        Args:
            request: Request to sign
            body: Optional body overriding request.body

        Returns:
            SigningContext: Fully built context

        Raises:
            SigningError: If a POST body is a stream that cannot be rewound
        """
        creds = self.credentials.get()
        body_bytes = b""
        if _hashes_body(request.method):
            body_bytes = _read_and_rewind(request.body if body is None else body)
        signable = self._to_signable_request(request, body_bytes)
        return build_signing_context(new_signing_context(signable, creds, self.config))

    def _read_request_body(self, request: Any, body: RequestBody) -> bytes:
        if not _hashes_body(request.method):
            return b""

        if body is not None:
            return _read_and_rewind(body)

        body_bytes, fresh_body = read_body(request.body)
        if fresh_body is not request.body:
            request.body = fresh_body
        return body_bytes

    def _to_signable_request(self, request: Any, body_bytes: bytes) -> SignableRequest:
        url_parts = parse_url(request.url)
        return SignableRequest(
            method=request.method,
            scheme=url_parts['scheme'],
            host=url_parts['host'],
            path=url_parts['path'],
            raw_query=url_parts['raw_query'],
            headers=dict(request.headers or {}),
            body=body_bytes
        )


def _hashes_body(method: str) -> bool:
    # Only POST bodies take part in the content hash
    return method == "POST"


def _read_and_rewind(body: RequestBody) -> bytes:
    if body is None or isinstance(body, (bytes, bytearray, str)):
        return read_body(body)[0]

    position = _tell(body)
    if position is None:
        raise SigningError(
            f"Body stream cannot be rewound after hashing: {type(body).__name__}",
            SigningErrorCodes.UNSUPPORTED_BODY,
            {"body_type": type(body).__name__}
        )
    body_bytes, _ = read_body(body)
    body.seek(position)
    return body_bytes


def _tell(stream: Any) -> Optional[int]:
    if not hasattr(stream, 'read') or not hasattr(stream, 'seek'):
        return None
    try:
        return stream.tell()
    except (OSError, ValueError):
        return None


def create_signer(credentials: Credentials, config: Optional[SigningConfig] = None) -> EdgeGridSigner:
    """
    Create a new EdgeGrid signer.

    Args:
        credentials: Credential cache
        config: Signing configuration

    Returns:
        EdgeGridSigner: Configured signer instance
    """
    return EdgeGridSigner(credentials, config)


def sign_request(
    request: Any,
    credentials: Credentials,
    config: Optional[SigningConfig] = None,
    body: RequestBody = None
) -> CaseInsensitiveDict:
    """
    Sign a request with the given credentials and configuration.

    Args:
        request: Request to sign
        credentials: Credential cache
        config: Optional signing configuration
        body: Optional body overriding request.body

    Returns:
        CaseInsensitiveDict: The request's headers, Authorization included
    """
    signer = create_signer(credentials, config)
    return signer.sign(request, body)
