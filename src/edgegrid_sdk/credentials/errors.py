"""
Credential error kinds for EdgeGrid Python SDK

Every way a credential provider can fail has its own code and a fixed
message, so callers can tell a missing secret apart from a missing file and
decide whether to prompt for reconfiguration or give up on the request.
"""

from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import EdgeGridSDKError


class CredentialErrorCode(str, Enum):
    """Error codes raised by credential providers and the credential cache"""

    # Configuration errors
    STATIC_CREDENTIALS_EMPTY = "STATIC_CREDENTIALS_EMPTY"
    ENV_CLIENT_SECRET_NOT_FOUND = "ENV_CLIENT_SECRET_NOT_FOUND"
    ENV_CLIENT_TOKEN_NOT_FOUND = "ENV_CLIENT_TOKEN_NOT_FOUND"
    ENV_ACCESS_TOKEN_NOT_FOUND = "ENV_ACCESS_TOKEN_NOT_FOUND"
    ENV_HOST_NOT_FOUND = "ENV_HOST_NOT_FOUND"
    SHARED_CLIENT_SECRET_NOT_FOUND = "SHARED_CLIENT_SECRET_NOT_FOUND"
    SHARED_CLIENT_TOKEN_NOT_FOUND = "SHARED_CLIENT_TOKEN_NOT_FOUND"
    SHARED_ACCESS_TOKEN_NOT_FOUND = "SHARED_ACCESS_TOKEN_NOT_FOUND"
    SHARED_HOST_NOT_FOUND = "SHARED_HOST_NOT_FOUND"

    # Resource errors
    SHARED_FILE_NOT_FOUND = "SHARED_FILE_NOT_FOUND"
    SHARED_FILE_INVALID = "SHARED_FILE_INVALID"
    SHARED_PROFILE_NOT_FOUND = "SHARED_PROFILE_NOT_FOUND"
    HOME_DIR_NOT_FOUND = "HOME_DIR_NOT_FOUND"
    EXPIRES_AT_UNSUPPORTED = "EXPIRES_AT_UNSUPPORTED"


CREDENTIAL_ERROR_MESSAGES: Dict[CredentialErrorCode, str] = {
    CredentialErrorCode.STATIC_CREDENTIALS_EMPTY: "EmptyStaticCreds: static credentials are empty",
    CredentialErrorCode.ENV_CLIENT_SECRET_NOT_FOUND: "AKAMAI_CLIENT_SECRET not found in environment",
    CredentialErrorCode.ENV_CLIENT_TOKEN_NOT_FOUND: "AKAMAI_CLIENT_TOKEN not found in environment",
    CredentialErrorCode.ENV_ACCESS_TOKEN_NOT_FOUND: "AKAMAI_ACCESS_TOKEN not found in environment",
    CredentialErrorCode.ENV_HOST_NOT_FOUND: "AKAMAI_HOST not found in environment",
    CredentialErrorCode.SHARED_CLIENT_SECRET_NOT_FOUND: "client_secret not found in .edgerc",
    CredentialErrorCode.SHARED_CLIENT_TOKEN_NOT_FOUND: "client_token not found in .edgerc",
    CredentialErrorCode.SHARED_ACCESS_TOKEN_NOT_FOUND: "access_token not found in .edgerc",
    CredentialErrorCode.SHARED_HOST_NOT_FOUND: "host not found in .edgerc",
    CredentialErrorCode.SHARED_FILE_NOT_FOUND: ".edgerc file not found",
    CredentialErrorCode.SHARED_FILE_INVALID: ".edgerc file could not be parsed",
    CredentialErrorCode.SHARED_PROFILE_NOT_FOUND: "could not load profile from .edgerc",
    CredentialErrorCode.HOME_DIR_NOT_FOUND: "could not find user's homedir",
    CredentialErrorCode.EXPIRES_AT_UNSUPPORTED: "provider does not support expires_at()",
}


class CredentialError(EdgeGridSDKError):
    """
    Error raised when credentials cannot be produced

    Attributes:
        code: CredentialErrorCode naming the exact failure
        message: Static message for the code
        details: Optional additional error details
    """

    def __init__(self, code: CredentialErrorCode, details: Optional[Dict[str, Any]] = None):
        super().__init__(CREDENTIAL_ERROR_MESSAGES[code], code.value, details)
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, details={self.details})"


class CredentialConfigurationError(CredentialError):
    """A required credential field is missing or empty in its source"""
    pass


class CredentialResourceError(CredentialError):
    """The credential source itself (file, profile, home directory) is unavailable"""
    pass


_RESOURCE_CODES = frozenset({
    CredentialErrorCode.SHARED_FILE_NOT_FOUND,
    CredentialErrorCode.SHARED_FILE_INVALID,
    CredentialErrorCode.SHARED_PROFILE_NOT_FOUND,
    CredentialErrorCode.HOME_DIR_NOT_FOUND,
    CredentialErrorCode.EXPIRES_AT_UNSUPPORTED,
})


def credential_error(code: CredentialErrorCode, **details: Any) -> CredentialError:
    """
    Build the error for a credential failure code.

    Args:
        code: Failure code
        **details: Extra context (file path, profile name); never secret values

    Returns:
        CredentialError: CredentialResourceError or CredentialConfigurationError
    """
    if code in _RESOURCE_CODES:
        return CredentialResourceError(code, details)
    return CredentialConfigurationError(code, details)
