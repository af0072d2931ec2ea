"""
Utility functions for request signing

This module provides utility functions for EdgeGrid request signing,
including nonce generation, timestamp formatting, HMAC signatures, content
hashing, body handling and URL parsing.
"""

import io
import re
import time
import uuid
import base64
import hashlib
from typing import Dict, Optional, Tuple, Any
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, hmac

from .types import (
    SigningError,
    SigningErrorCodes,
    RequestBody,
)


EDGEGRID_TIMESTAMP_FORMAT = "%Y%m%dT%H:%M:%S+0000"

_TIMESTAMP_PATTERN = re.compile(r'^\d{4}[0-1]\d[0-3]\dT[0-2]\d:[0-5]\d:[0-5]\d\+0000$')


def generate_nonce() -> str:
    """
    Generate a UUID v4 nonce for replay protection.

    Returns:
        str: UUID v4 string for use as nonce
    """
    return str(uuid.uuid4())


def generate_timestamp(timestamp: Optional[float] = None) -> str:
    """
    Format a timestamp the way EdgeGrid expects it.

    The service reads the value as GMT, so the time is always rendered in
    UTC with a literal +0000 offset.

    Args:
        timestamp: Unix timestamp (uses current time if None)

    Returns:
        str: Timestamp such as "20140321T19:34:21+0000"
    """
    if timestamp is None:
        timestamp = time.time()
    return time.strftime(EDGEGRID_TIMESTAMP_FORMAT, time.gmtime(timestamp))


def validate_timestamp(timestamp: str) -> bool:
    """
    Validate EdgeGrid timestamp format.

    Args:
        timestamp: Timestamp string to validate

    Returns:
        bool: True if timestamp matches YYYYMMDDTHH:MM:SS+0000
    """
    if not isinstance(timestamp, str):
        return False
    return bool(_TIMESTAMP_PATTERN.match(timestamp))


def create_signature(data: str, key: str) -> str:
    """
    Base64 encoding of the HMAC-SHA256 of `data` keyed with `key`.

    Args:
        data: Message to authenticate
        key: HMAC key

    Returns:
        str: Base64-encoded digest
    """
    h = hmac.HMAC(key.encode('utf-8'), hashes.SHA256())
    h.update(data.encode('utf-8'))
    return base64.b64encode(h.finalize()).decode('ascii')


def calculate_content_hash(body: bytes, max_body: int) -> str:
    """
    Base64 SHA-256 of the body, truncated to `max_body` bytes.

    Args:
        body: Request body
        max_body: Number of leading bytes covered by the hash

    Returns:
        str: Base64-encoded digest, empty string for an empty body
    """
    if not body:
        return ""
    digest = hashlib.sha256(body[:max_body]).digest()
    return base64.b64encode(digest).decode('ascii')


def collapse_whitespace(value: str) -> str:
    """
    Trim a header value and collapse inner whitespace runs to one space.

    Args:
        value: Header value

    Returns:
        str: Normalized value
    """
    return ' '.join(value.split())


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower().strip()


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: URL string to parse

    Returns:
        dict: Dictionary with parsed URL components:
            - scheme: URL scheme
            - host: host with port, without user info
            - path: path exactly as it appears in the URL
            - raw_query: query string without the "?"

    Raises:
        SigningError: If URL format is invalid
    """
    if not isinstance(url, str) or not url:
        raise SigningError(
            f"Invalid URL: {url!r}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    parsed = urlsplit(url)
    if not parsed.scheme or not parsed.netloc:
        raise SigningError(
            f"Invalid URL format: {url}",
            SigningErrorCodes.INVALID_URL,
            {"url": url}
        )

    return {
        "scheme": parsed.scheme,
        "host": parsed.netloc.rpartition('@')[2],
        "path": parsed.path,
        "raw_query": parsed.query,
    }


def read_body(body: RequestBody) -> Tuple[bytes, Any]:
    """
    Read a request body for hashing without consuming it for transmission.

    Args:
        body: None, bytes, str (UTF-8), a readable binary/text stream or an
            iterable of bytes/str chunks

    Returns:
        tuple: (body bytes, body to send). Streams and iterables are
            replaced by an unread io.BytesIO over the same bytes; other bodies
            are returned as they are.

    Raises:
        SigningError: If the body type cannot be read
    """
    if body is None:
        return b"", None

    if isinstance(body, (bytes, bytearray)):
        return bytes(body), body

    if isinstance(body, str):
        return body.encode('utf-8'), body

    if hasattr(body, 'read'):
        data = _to_bytes(body.read(), body)
        return data, io.BytesIO(data)

    if hasattr(body, '__iter__'):
        data = b"".join(_to_bytes(chunk, body) for chunk in body)
        return data, io.BytesIO(data)

    raise SigningError(
        f"Unsupported request body type: {type(body).__name__}",
        SigningErrorCodes.UNSUPPORTED_BODY,
        {"body_type": type(body).__name__}
    )


def _to_bytes(data: Any, body: Any) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    raise SigningError(
        f"Unsupported request body type: {type(body).__name__}",
        SigningErrorCodes.UNSUPPORTED_BODY,
        {"body_type": type(body).__name__}
    )
