"""
EdgeGrid Python SDK - Request Signing Module

EG1-HMAC-SHA256 request signing. This module builds the canonical request,
derives the per-timestamp signing key and attaches the Authorization header
the EdgeGrid-protected API endpoints require.
"""

from .types import (
    SignableRequest,
    SigningConfig,
    SigningContext,
    SigningError,
    SigningErrorCodes,
    DEFAULT_MAX_BODY,
    AUTH_SCHEME,
)

from .edgegrid_signer import (
    EdgeGridSigner,
    create_signer,
    sign_request,
)

from .canonical_request import (
    BUILD_STEPS,
    build_auth_header,
    build_content_hash,
    build_path_query,
    build_signing_context,
    build_signing_data,
    canonicalize_headers,
    derive_signing_key,
    new_signing_context,
)

from .signing_config import (
    SigningConfigBuilder,
    create_signing_config,
    validate_signing_config,
    load_signing_config_from_env,
)

from .utils import (
    generate_nonce,
    generate_timestamp,
    validate_timestamp,
    create_signature,
    calculate_content_hash,
    collapse_whitespace,
    parse_url,
    read_body,
)

from .integration import (
    EdgeGridAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'EdgeGridSigner',
    'create_signer',
    'sign_request',
    # Types
    'SignableRequest',
    'SigningConfig',
    'SigningContext',
    'SigningError',
    'SigningErrorCodes',
    'DEFAULT_MAX_BODY',
    'AUTH_SCHEME',
    # Canonicalization
    'BUILD_STEPS',
    'build_auth_header',
    'build_content_hash',
    'build_path_query',
    'build_signing_context',
    'build_signing_data',
    'canonicalize_headers',
    'derive_signing_key',
    'new_signing_context',
    # Configuration
    'SigningConfigBuilder',
    'create_signing_config',
    'validate_signing_config',
    'load_signing_config_from_env',
    # Utilities
    'generate_nonce',
    'generate_timestamp',
    'validate_timestamp',
    'create_signature',
    'calculate_content_hash',
    'collapse_whitespace',
    'parse_url',
    'read_body',
    # HTTP Integration
    'EdgeGridAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
