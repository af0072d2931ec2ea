"""
EdgeGrid Python SDK
EG1-HMAC-SHA256 request signing with pluggable credential providers
"""

from .version import __version__
from .credentials import (
    CredentialValue,
    CredentialProvider,
    Expirer,
    Expiry,
    Credentials,
    CredentialError,
    CredentialConfigurationError,
    CredentialResourceError,
    CredentialErrorCode,
    StaticProvider,
    EnvProvider,
    SharedCredentialsProvider,
    new_static_credentials,
    new_static_credentials_from_value,
    new_env_credentials,
    new_shared_credentials,
)
from .signing import (
    EdgeGridSigner,
    create_signer,
    sign_request,
    SignableRequest,
    SigningConfig,
    SigningContext,
    SigningError,
    SigningErrorCodes,
    SigningConfigBuilder,
    create_signing_config,
    load_signing_config_from_env,
    EdgeGridAuth,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)
from .exceptions import (
    EdgeGridSDKError,
    ValidationError,
    ServerCommunicationError,
    AcceptedError,
    ApiError,
)
from .http_client import (
    EdgeGridHttpClient,
    ClientConfig,
    create_client,
    check_response,
)

# Public API exports
__all__ = [
    '__version__',
    # Credentials
    'CredentialValue',
    'CredentialProvider',
    'Expirer',
    'Expiry',
    'Credentials',
    'CredentialError',
    'CredentialConfigurationError',
    'CredentialResourceError',
    'CredentialErrorCode',
    'StaticProvider',
    'EnvProvider',
    'SharedCredentialsProvider',
    'new_static_credentials',
    'new_static_credentials_from_value',
    'new_env_credentials',
    'new_shared_credentials',
    # Request Signing
    'EdgeGridSigner',
    'create_signer',
    'sign_request',
    'SignableRequest',
    'SigningConfig',
    'SigningContext',
    'SigningError',
    'SigningErrorCodes',
    'SigningConfigBuilder',
    'create_signing_config',
    'load_signing_config_from_env',
    # Request Signing - HTTP Integration
    'EdgeGridAuth',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
    # Exceptions
    'EdgeGridSDKError',
    'ValidationError',
    'ServerCommunicationError',
    'AcceptedError',
    'ApiError',
    # HTTP Client
    'EdgeGridHttpClient',
    'ClientConfig',
    'create_client',
    'check_response',
]
