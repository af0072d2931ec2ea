"""
Canonical request construction for EdgeGrid signatures

The remote service rebuilds the same string-to-sign from the request it
receives, so every byte produced here has to match its algorithm exactly.
Signing runs as a fixed pipeline of steps over an immutable SigningContext;
each step reads only fields set by earlier steps and sets exactly one new
field.
"""

from dataclasses import replace
from typing import Callable, Iterable, Mapping, Optional, Tuple

from ..credentials.types import CredentialValue
from .types import (
    AUTH_SCHEME,
    SignableRequest,
    SigningConfig,
    SigningContext,
    SigningError,
    SigningErrorCodes,
)
from .utils import (
    calculate_content_hash,
    collapse_whitespace,
    create_signature,
    generate_nonce,
    generate_timestamp,
    normalize_header_name,
)


def build_path_query(path: str, raw_query: str) -> str:
    """Path alone, or path?rawquery when there is a query string"""
    if not raw_query:
        return path
    return f"{path}?{raw_query}"


def canonicalize_headers(headers: Mapping[str, str], headers_to_sign: Iterable[str]) -> str:
    """
    Canonical form of the signed request headers.

    Only headers named in `headers_to_sign` (case-insensitive) are kept.
    Retained names are sorted as they appear on the request, then rendered as
    lowercase ``name:value`` with the value trimmed, whitespace runs collapsed
    and lowercased. Entries are joined with tabs.

    Args:
        headers: Request headers
        headers_to_sign: Header names to include

    Returns:
        str: Canonical headers, empty if nothing is signed
    """
    wanted = {normalize_header_name(name) for name in headers_to_sign}
    if not wanted:
        return ""

    retained = sorted(name for name in headers if name.lower() in wanted)
    return '\t'.join(
        f"{name.lower()}:{collapse_whitespace(_header_value(headers[name])).lower()}"
        for name in retained
    )


def _header_value(value) -> str:
    # requests sends bytes header values as-is, i.e. latin-1
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('latin-1')
    return str(value)


def build_content_hash(method: str, body: bytes, max_body: int) -> str:
    """Content hash of a POST body; empty for other methods or an empty body"""
    if method != "POST":
        return ""
    return calculate_content_hash(body, max_body)


def build_auth_header(credentials: CredentialValue, timestamp: str, nonce: str) -> str:
    """Authorization header preamble, trailing semicolon included"""
    return (
        f"{AUTH_SCHEME} client_token={credentials.client_token};"
        f"access_token={credentials.access_token};"
        f"timestamp={timestamp};"
        f"nonce={nonce};"
    )


def derive_signing_key(client_secret: str, timestamp: str) -> str:
    """Signing key: the timestamp HMAC'd with the client secret as key"""
    return create_signature(timestamp, client_secret)


def build_signing_data(
    request: SignableRequest,
    path_query: str,
    canonical_headers: str,
    content_hash: str,
    auth_header: str
) -> str:
    """Tab-joined string-to-sign"""
    return '\t'.join([
        request.method,
        request.scheme,
        request.host,
        path_query,
        canonical_headers,
        content_hash,
        auth_header,
    ])


def _set_once(ctx: SigningContext, field_name: str, value: str) -> SigningContext:
    if getattr(ctx, field_name) is not None:
        raise SigningError(
            f"Signing context field already set: {field_name}",
            SigningErrorCodes.CONTEXT_FIELD_ALREADY_SET,
            {"field": field_name}
        )
    return replace(ctx, **{field_name: value})


def _require(ctx: SigningContext, *field_names: str) -> None:
    missing = [name for name in field_names if getattr(ctx, name) is None]
    if missing:
        raise SigningError(
            f"Signing context is missing: {', '.join(missing)}",
            SigningErrorCodes.SIGNING_FAILED,
            {"missing": missing}
        )


def with_path_query(ctx: SigningContext) -> SigningContext:
    return _set_once(ctx, 'path_query', build_path_query(ctx.request.path, ctx.request.raw_query))


def with_canonical_headers(ctx: SigningContext) -> SigningContext:
    return _set_once(
        ctx,
        'canonical_headers',
        canonicalize_headers(ctx.request.headers, ctx.headers_to_sign)
    )


def with_content_hash(ctx: SigningContext) -> SigningContext:
    return _set_once(
        ctx,
        'content_hash',
        build_content_hash(ctx.request.method, ctx.request.body, ctx.max_body)
    )


def with_auth_header(ctx: SigningContext) -> SigningContext:
    return _set_once(ctx, 'auth_header', build_auth_header(ctx.credentials, ctx.timestamp, ctx.nonce))


def with_signing_key(ctx: SigningContext) -> SigningContext:
    return _set_once(ctx, 'signing_key', derive_signing_key(ctx.credentials.client_secret, ctx.timestamp))


def with_signing_data(ctx: SigningContext) -> SigningContext:
    _require(ctx, 'path_query', 'canonical_headers', 'content_hash', 'auth_header')
    return _set_once(
        ctx,
        'signing_data',
        build_signing_data(
            ctx.request,
            ctx.path_query,
            ctx.canonical_headers,
            ctx.content_hash,
            ctx.auth_header
        )
    )


def with_signature(ctx: SigningContext) -> SigningContext:
    _require(ctx, 'signing_data', 'signing_key')
    return _set_once(ctx, 'signature', create_signature(ctx.signing_data, ctx.signing_key))


# Order matters: each step only reads fields set by the steps before it.
BUILD_STEPS: Tuple[Callable[[SigningContext], SigningContext], ...] = (
    with_path_query,
    with_canonical_headers,
    with_content_hash,
    with_auth_header,
    with_signing_key,
    with_signing_data,
    with_signature,
)


def new_signing_context(
    request: SignableRequest,
    credentials: CredentialValue,
    config: Optional[SigningConfig] = None
) -> SigningContext:
    """
    Start a signing context, resolving timestamp and nonce.

    Args:
        request: Request to sign
        credentials: Resolved credentials
        config: Signing configuration (defaults if None)

    Returns:
        SigningContext: Context with no derived fields set
    """
    config = config or SigningConfig()

    timestamp = config.timestamp
    if not timestamp:
        timestamp = (config.timestamp_generator or generate_timestamp)()

    nonce = config.nonce
    if not nonce:
        nonce = (config.nonce_generator or generate_nonce)()

    return SigningContext(
        request=request,
        credentials=credentials,
        timestamp=timestamp,
        nonce=nonce,
        headers_to_sign=tuple(config.headers_to_sign),
        max_body=config.max_body,
    )


def build_signing_context(ctx: SigningContext) -> SigningContext:
    """
    Run every build step over a fresh context.

    Args:
        ctx: Context from new_signing_context()

    Returns:
        SigningContext: Fully built context; see SigningContext.authorization
    """
    for step in BUILD_STEPS:
        ctx = step(ctx)
    return ctx
