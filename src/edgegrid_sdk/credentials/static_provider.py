"""
Static credential provider

Credentials set programmatically (code or application config). They never
expire.
"""

from dataclasses import replace

from .credentials import Credentials
from .errors import CredentialErrorCode, credential_error
from .types import CredentialValue

STATIC_PROVIDER_NAME = "StaticProvider"


class StaticProvider:
    """A fixed set of credentials which never expire"""

    def __init__(self, value: CredentialValue):
        self.value = value

    def retrieve(self) -> CredentialValue:
        """
        Return the fixed credentials.

        Raises:
            CredentialConfigurationError: If any of the four fields is empty
        """
        if not self.value.is_complete():
            raise credential_error(CredentialErrorCode.STATIC_CREDENTIALS_EMPTY)

        if not self.value.provider_name:
            return replace(self.value, provider_name=STATIC_PROVIDER_NAME)
        return self.value

    def is_expired(self) -> bool:
        return False


def new_static_credentials(
    client_secret: str,
    client_token: str,
    access_token: str,
    host: str
) -> Credentials:
    """
    Create a credential cache over static values.

    Args:
        client_secret: Client secret
        client_token: Client token
        access_token: Access token
        host: API host

    Returns:
        Credentials: Cache wrapping a StaticProvider
    """
    return Credentials(StaticProvider(CredentialValue(
        client_secret=client_secret,
        client_token=client_token,
        access_token=access_token,
        host=host,
    )))


def new_static_credentials_from_value(value: CredentialValue) -> Credentials:
    """Same as new_static_credentials but takes a whole CredentialValue"""
    return Credentials(StaticProvider(value))
