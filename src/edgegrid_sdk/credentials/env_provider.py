"""
Environment variable credential provider

Reads the credentials from the running process' environment:

    AKAMAI_CLIENT_SECRET
    AKAMAI_CLIENT_TOKEN
    AKAMAI_ACCESS_TOKEN
    AKAMAI_HOST

Example:
    >>> creds = new_env_credentials()
    >>> value = creds.get()
"""

import os

from .credentials import Credentials
from .errors import CredentialErrorCode, credential_error
from .types import CredentialValue

ENV_PROVIDER_NAME = "EnvProvider"

ENV_CLIENT_SECRET = "AKAMAI_CLIENT_SECRET"
ENV_CLIENT_TOKEN = "AKAMAI_CLIENT_TOKEN"
ENV_ACCESS_TOKEN = "AKAMAI_ACCESS_TOKEN"
ENV_HOST = "AKAMAI_HOST"

# Checked in this order; the first missing variable decides the error.
_REQUIRED_VARIABLES = (
    (ENV_CLIENT_SECRET, CredentialErrorCode.ENV_CLIENT_SECRET_NOT_FOUND),
    (ENV_CLIENT_TOKEN, CredentialErrorCode.ENV_CLIENT_TOKEN_NOT_FOUND),
    (ENV_ACCESS_TOKEN, CredentialErrorCode.ENV_ACCESS_TOKEN_NOT_FOUND),
    (ENV_HOST, CredentialErrorCode.ENV_HOST_NOT_FOUND),
)


class EnvProvider:
    """Retrieves credentials from environment variables"""

    def __init__(self):
        self._retrieved = False

    def retrieve(self) -> CredentialValue:
        """
        Read the four credential variables.

        Raises:
            CredentialConfigurationError: For the first variable that is unset
                or empty
        """
        self._retrieved = False

        values = []
        for name, code in _REQUIRED_VARIABLES:
            value = os.environ.get(name, "")
            if not value:
                raise credential_error(code, variable=name)
            values.append(value)

        client_secret, client_token, access_token, host = values
        self._retrieved = True
        return CredentialValue(
            client_secret=client_secret,
            client_token=client_token,
            access_token=access_token,
            host=host,
            provider_name=ENV_PROVIDER_NAME,
        )

    def is_expired(self) -> bool:
        """Expired until the first successful retrieve"""
        return not self._retrieved


def new_env_credentials() -> Credentials:
    """Create a credential cache over the environment provider"""
    return Credentials(EnvProvider())
