"""
EdgeGrid Python SDK - Credentials Module

Credential values, the pluggable providers that produce them (static,
environment, shared .edgerc file) and the concurrency-safe cache the signer
reads them through.
"""

from .types import (
    CredentialValue,
    CredentialProvider,
    Expirer,
    Expiry,
)

from .errors import (
    CredentialError,
    CredentialConfigurationError,
    CredentialResourceError,
    CredentialErrorCode,
    CREDENTIAL_ERROR_MESSAGES,
)

from .credentials import (
    Credentials,
    ReadWriteLock,
)

from .static_provider import (
    StaticProvider,
    STATIC_PROVIDER_NAME,
    new_static_credentials,
    new_static_credentials_from_value,
)

from .env_provider import (
    EnvProvider,
    ENV_PROVIDER_NAME,
    new_env_credentials,
)

from .shared_provider import (
    SharedCredentialsProvider,
    SHARED_CREDS_PROVIDER_NAME,
    DEFAULT_PROFILE,
    load_profile,
    new_shared_credentials,
)

__all__ = [
    # Types
    'CredentialValue',
    'CredentialProvider',
    'Expirer',
    'Expiry',
    # Errors
    'CredentialError',
    'CredentialConfigurationError',
    'CredentialResourceError',
    'CredentialErrorCode',
    'CREDENTIAL_ERROR_MESSAGES',
    # Cache
    'Credentials',
    'ReadWriteLock',
    # Providers
    'StaticProvider',
    'STATIC_PROVIDER_NAME',
    'new_static_credentials',
    'new_static_credentials_from_value',
    'EnvProvider',
    'ENV_PROVIDER_NAME',
    'new_env_credentials',
    'SharedCredentialsProvider',
    'SHARED_CREDS_PROVIDER_NAME',
    'DEFAULT_PROFILE',
    'load_profile',
    'new_shared_credentials',
]
