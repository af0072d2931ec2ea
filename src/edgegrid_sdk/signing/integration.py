"""
HTTP client integration for request signing

This module plugs the EdgeGrid signer into the requests library, so every
request sent through a session carries a fresh Authorization header.
"""

import logging
from typing import Optional

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from ..credentials.credentials import Credentials
from .types import SigningConfig
from .edgegrid_signer import EdgeGridSigner

logger = logging.getLogger(__name__)


class EdgeGridAuth(AuthBase):
    """
    requests authentication handler applying EdgeGrid signing.

    Usage:
        >>> session = requests.Session()
        >>> session.auth = EdgeGridAuth(EdgeGridSigner(credentials))
    """

    def __init__(self, signer: EdgeGridSigner):
        self.signer = signer

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        config: Optional[SigningConfig] = None
    ) -> 'EdgeGridAuth':
        """Build the handler around a new signer"""
        return cls(EdgeGridSigner(credentials, config))

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        self.signer.sign(request)
        return request


class SigningSession:
    """
    HTTP session wrapper with automatic request signing capability.

    This class wraps a requests.Session and signs every outgoing request.
    Signing failures (for example unavailable credentials) are raised to the
    caller and the request is not sent.
    """

    def __init__(
        self,
        signer: EdgeGridSigner,
        session: Optional[Session] = None
    ):
        """
        Initialize signing session.

        Args:
            signer: Signer applied to every request
            session: Optional existing requests session to wrap
        """
        self.session = session or requests.Session()
        self.signer = signer
        self.session.auth = EdgeGridAuth(signer)
        logger.info("Configured EdgeGrid request signing for session")

    def request(
        self,
        method: str,
        url: str,
        **kwargs
    ) -> requests.Response:
        """
        Make a signed HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: HTTP response
        """
        logger.debug(f"Sending signed {method} request to {url}")
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def options(self, url: str, **kwargs) -> requests.Response:
        """Make OPTIONS request."""
        return self.request('OPTIONS', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    credentials: Credentials,
    config: Optional[SigningConfig] = None,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        credentials: Credential cache used to sign requests
        config: Optional signing configuration
        **session_kwargs: Attributes to set on the requests.Session
            (e.g. verify, headers)

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()

    # Apply session configuration
    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)

    return SigningSession(EdgeGridSigner(credentials, config), session=session)


def sign_prepared_request(
    prepared_request: PreparedRequest,
    credentials: Credentials,
    config: Optional[SigningConfig] = None
) -> PreparedRequest:
    """
    Sign a prepared request.

    Args:
        prepared_request: Prepared request to sign
        credentials: Credential cache
        config: Optional signing configuration

    Returns:
        PreparedRequest: The same request with its Authorization header set

    Raises:
        CredentialError: If credentials cannot be retrieved
    """
    EdgeGridSigner(credentials, config).sign(prepared_request)
    return prepared_request
