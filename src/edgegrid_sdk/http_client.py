"""
HTTP client for EdgeGrid-protected APIs

This module provides the client that builds signed API requests against the
per-client API host, sends them and maps HTTP status codes to SDK errors.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse

import requests
from requests.models import PreparedRequest

from .version import __version__
from .exceptions import AcceptedError, ApiError, ServerCommunicationError, ValidationError
from .credentials.credentials import Credentials
from .credentials.shared_provider import DEFAULT_PROFILE, new_shared_credentials
from .signing.edgegrid_signer import EdgeGridSigner
from .signing.types import SigningConfig

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"edgegrid-python-sdk/{__version__}"


@dataclass
class ClientConfig:
    """Configuration for EdgeGrid API connections."""
    base_url: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        """Validate client configuration."""
        if self.base_url is not None:
            self.base_url = _normalize_base_url(self.base_url)

        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive")


def _normalize_base_url(base_url: str) -> str:
    # Relative paths only resolve under the base URL with a trailing slash
    if not base_url.endswith('/'):
        base_url += '/'

    parsed = urlparse(base_url)
    if not parsed.scheme or not parsed.netloc:
        raise ValidationError(f"Invalid base URL format: {base_url}")
    return base_url


def build_base_url(host: str) -> str:
    """
    API base URL for a credentials host.

    Args:
        host: Host from the credentials, normally without scheme

    Returns:
        str: https://<host>/
    """
    if '://' not in host:
        host = f"https://{host}"
    return _normalize_base_url(host)


def check_response(response: requests.Response) -> None:
    """
    Check an API response for errors.

    Anything outside the 2xx range is an error. 202 Accepted is reported as
    AcceptedError: the platform scheduled an asynchronous job and the results
    are not ready yet.

    Args:
        response: HTTP response

    Raises:
        AcceptedError: On 202, with the raw payload
        ApiError: On any non-2xx status
    """
    status = response.status_code
    if status == 202:
        raise AcceptedError(raw=response.content or b"")

    if 200 <= status <= 299:
        return

    message = response.reason or ""
    errors: list = []
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        message = data.get('message') or data.get('title') or data.get('detail') or message
        errors = data.get('errors') or []

    request = getattr(response, 'request', None)
    method = getattr(request, 'method', '')
    url = getattr(request, 'url', '')

    raise ApiError(
        f"{method} {url}: {status} {message}".strip(),
        http_status=status,
        response=response,
        errors=errors,
        details={'body': data} if data is not None else None
    )


class EdgeGridHttpClient:
    """
    HTTP client for EdgeGrid-protected APIs.

    Credentials are resolved once at construction to find the API host;
    each request is then signed through the same credentials cache, so a
    later expire() is honoured on the next request.
    """

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        config: Optional[ClientConfig] = None,
        signing_config: Optional[SigningConfig] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the HTTP client.

        Args:
            credentials: Credential cache; defaults to the "default" profile of
                the shared .edgerc file
            config: Client configuration settings
            signing_config: Signing configuration
            session: Optional requests session to send through

        Raises:
            CredentialError: If credentials cannot be retrieved
        """
        if credentials is None:
            credentials = new_shared_credentials(profile=DEFAULT_PROFILE)

        self.credentials = credentials
        self.config = config or ClientConfig()

        creds = credentials.get()
        self.base_url = self.config.base_url or build_base_url(creds.host)
        self.signer = EdgeGridSigner(credentials, signing_config)
        self.session = session or requests.Session()

        logger.info(f"Initialized EdgeGrid HTTP client for {self.base_url}")

    def new_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> PreparedRequest:
        """
        Create a signed API request.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: Optional JSON-serializable body
            params: Optional query parameters
            headers: Optional extra headers

        Returns:
            PreparedRequest: Request with the Authorization header set

        Raises:
            CredentialError: If credentials cannot be retrieved
        """
        url = urljoin(self.base_url, path)
        request_headers = dict(headers or {})

        data = None
        if body is not None:
            data = json.dumps(body).encode('utf-8')
            request_headers['Content-Type'] = 'application/json'

        if self.config.user_agent:
            request_headers['User-Agent'] = self.config.user_agent

        request = requests.Request(method, url, headers=request_headers, data=data, params=params)
        prepared = self.session.prepare_request(request)
        self.signer.sign(prepared)
        return prepared

    def do(self, prepared: PreparedRequest) -> requests.Response:
        """
        Send a request and check the response status.

        Args:
            prepared: Signed request from new_request()

        Returns:
            requests.Response: Successful response

        Raises:
            AcceptedError: On 202 Accepted
            ApiError: On non-2xx responses
            ServerCommunicationError: On network errors
        """
        logger.debug(f"Making {prepared.method} request to {prepared.url}")
        try:
            response = self.session.send(
                prepared,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
        except requests.exceptions.Timeout:
            raise ServerCommunicationError(f"Request timeout after {self.config.timeout} seconds")
        except requests.exceptions.ConnectionError as e:
            raise ServerCommunicationError(f"Connection error: {e}")
        except requests.exceptions.RequestException as e:
            raise ServerCommunicationError(f"Request failed: {e}")

        check_response(response)
        return response

    def request_json(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make a signed request and decode the JSON response.

        Returns:
            Decoded JSON, or None for an empty response body

        Raises:
            ServerCommunicationError: On transport, status or decoding errors
        """
        response = self.do(self.new_request(method, path, body=body, params=params))
        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ServerCommunicationError(f"Invalid JSON response: {e}", http_status=response.status_code)

    def close(self):
        """Close the HTTP session."""
        self.session.close()
        logger.debug("HTTP session closed")

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def create_client(
    credentials: Optional[Credentials] = None,
    timeout: float = 30.0,
    verify_ssl: bool = True,
    signing_config: Optional[SigningConfig] = None
) -> EdgeGridHttpClient:
    """
    Create EdgeGrid HTTP client with default configuration.

    Args:
        credentials: Credential cache (shared .edgerc "default" profile if None)
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify SSL certificates
        signing_config: Optional signing configuration

    Returns:
        EdgeGridHttpClient: Configured HTTP client
    """
    config = ClientConfig(timeout=timeout, verify_ssl=verify_ssl)
    return EdgeGridHttpClient(credentials, config=config, signing_config=signing_config)
