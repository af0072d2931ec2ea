"""
Type definitions for EdgeGrid credentials

This module provides the credential value carried into every signature, the
two-operation provider contract every credential source implements, and the
shared expiry helper providers can embed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class CredentialValue:
    """
    Secret material identifying the API client

    Attributes:
        client_secret: Client secret, used only as the HMAC key
        client_token: Client token sent in the Authorization header
        access_token: Access token sent in the Authorization header
        host: API host (authority only, no scheme)
        provider_name: Name of the provider that produced the value
    """
    client_secret: str = ""
    client_token: str = ""
    access_token: str = ""
    host: str = ""
    provider_name: str = ""

    def is_complete(self) -> bool:
        """True when all four secret/identity fields are non-empty"""
        return bool(self.client_secret and self.client_token and self.access_token and self.host)

    def __repr__(self) -> str:
        return (
            f"CredentialValue(client_token={self.client_token!r}, host={self.host!r}, "
            f"provider_name={self.provider_name!r})"
        )


@runtime_checkable
class CredentialProvider(Protocol):
    """Interface for components that supply credentials"""

    def retrieve(self) -> CredentialValue:
        """
        Produce a complete credential value.

        Raises:
            CredentialError: If any required field or resource is missing
        """
        ...

    def is_expired(self) -> bool:
        """True when the provider's credentials need to be retrieved again"""
        ...


@runtime_checkable
class Expirer(Protocol):
    """Providers that know when their credentials stop being valid"""

    def expires_at(self) -> datetime:
        """Time at which the credentials are no longer valid"""
        ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Expiry:
    """
    Shared expiration logic for credential providers.

    Embed it in a provider and call set_expiration() after a successful
    retrieve; is_expired() and expires_at() then satisfy the provider and
    Expirer contracts.

    Attributes:
        current_time: Clock used by is_expired(); injectable for tests
    """

    def __init__(self, current_time: Optional[Callable[[], datetime]] = None):
        self._expiration = datetime.min.replace(tzinfo=timezone.utc)
        self.current_time = current_time or _utc_now

    def set_expiration(self, expiration: datetime, window: Optional[timedelta] = None) -> None:
        """
        Set the time is_expired() checks against.

        Args:
            expiration: When the credentials expire
            window: If positive, expire this much earlier than `expiration`
        """
        if window is not None and window > timedelta(0):
            expiration = expiration - window
        self._expiration = expiration

    def is_expired(self) -> bool:
        return self._expiration < self.current_time()

    def expires_at(self) -> datetime:
        return self._expiration
