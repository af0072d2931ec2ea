"""
Shared credentials file provider

Reads credentials from an INI-style ``.edgerc`` file, one section per
profile:

    [default]
    client_secret = ...
    client_token = ...
    access_token = ...
    host = akab-xxxx.luna.akamaiapis.net

The file is the explicit filename, else ``$AKAMAI_EDGERC_FILE``, else
``~/.edgerc``. The profile is the explicit profile, else ``$AKAMAI_PROFILE``,
else ``default``.
"""

import configparser
import os
from pathlib import Path
from typing import Optional, Union

from .credentials import Credentials
from .errors import CredentialErrorCode, credential_error
from .types import CredentialValue

SHARED_CREDS_PROVIDER_NAME = "SharedCredentialsProvider"

ENV_EDGERC_FILE = "AKAMAI_EDGERC_FILE"
ENV_EDGERC_PROFILE = "AKAMAI_PROFILE"
DEFAULT_EDGERC_FILENAME = ".edgerc"
DEFAULT_PROFILE = "default"

_REQUIRED_KEYS = (
    ("client_secret", CredentialErrorCode.SHARED_CLIENT_SECRET_NOT_FOUND),
    ("client_token", CredentialErrorCode.SHARED_CLIENT_TOKEN_NOT_FOUND),
    ("access_token", CredentialErrorCode.SHARED_ACCESS_TOKEN_NOT_FOUND),
    ("host", CredentialErrorCode.SHARED_HOST_NOT_FOUND),
)


class SharedCredentialsProvider:
    """
    Retrieves credentials from a profile of the shared credentials file.

    Attributes:
        filename: Path to the credentials file; empty means resolve from the
            environment or the home directory on each retrieve
        profile: Profile (section) name; empty means resolve from the
            environment or use "default"
    """

    def __init__(self, filename: Union[str, Path, None] = None, profile: Optional[str] = None):
        self.filename = str(filename) if filename else ""
        self.profile = profile or ""
        self._retrieved = False

    def retrieve(self) -> CredentialValue:
        """
        Load the profile from the credentials file.

        Raises:
            CredentialResourceError: If the home directory, file or profile
                cannot be found, or the file cannot be parsed
            CredentialConfigurationError: If a required key is missing or empty
        """
        self._retrieved = False
        creds = load_profile(self.resolve_filename(), self.resolve_profile())
        self._retrieved = True
        return creds

    def is_expired(self) -> bool:
        """Expired until the first successful retrieve"""
        return not self._retrieved

    def resolve_filename(self) -> str:
        """
        Path of the credentials file to read.

        Raises:
            CredentialResourceError: If the user's home directory is unknown
        """
        if self.filename:
            return self.filename

        env_filename = os.environ.get(ENV_EDGERC_FILE, "")
        if env_filename:
            return env_filename

        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            raise credential_error(CredentialErrorCode.HOME_DIR_NOT_FOUND)
        return str(home / DEFAULT_EDGERC_FILENAME)

    def resolve_profile(self) -> str:
        """Name of the profile section to read"""
        return self.profile or os.environ.get(ENV_EDGERC_PROFILE, "") or DEFAULT_PROFILE


def load_profile(filename: str, profile: str) -> CredentialValue:
    """
    Read one profile of a credentials file.

    Args:
        filename: Path to the INI file
        profile: Section name

    Returns:
        CredentialValue: Complete credentials from the profile

    Raises:
        CredentialResourceError: If the file or section cannot be loaded
        CredentialConfigurationError: If a required key is missing or empty
    """
    # Duplicate keys and sections are tolerated, the last one wins
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        inline_comment_prefixes=(';', '#')
    )
    try:
        with open(filename, "r", encoding="utf-8") as f:
            parser.read_file(f)
    except OSError:
        raise credential_error(CredentialErrorCode.SHARED_FILE_NOT_FOUND, filename=filename)
    except configparser.Error as e:
        raise credential_error(
            CredentialErrorCode.SHARED_FILE_INVALID,
            filename=filename,
            original_error=str(e)
        )

    if not parser.has_section(profile):
        raise credential_error(
            CredentialErrorCode.SHARED_PROFILE_NOT_FOUND,
            filename=filename,
            profile=profile
        )

    section = parser[profile]
    values = []
    for key, code in _REQUIRED_KEYS:
        value = section.get(key, "")
        if not value:
            raise credential_error(code, filename=filename, profile=profile)
        values.append(value)

    client_secret, client_token, access_token, host = values
    return CredentialValue(
        client_secret=client_secret,
        client_token=client_token,
        access_token=access_token,
        host=host,
        provider_name=SHARED_CREDS_PROVIDER_NAME,
    )


def new_shared_credentials(
    filename: Union[str, Path, None] = None,
    profile: Optional[str] = None
) -> Credentials:
    """
    Create a credential cache over the shared credentials file provider.

    Args:
        filename: Optional credentials file path
        profile: Optional profile name

    Returns:
        Credentials: Cache wrapping a SharedCredentialsProvider
    """
    return Credentials(SharedCredentialsProvider(filename, profile))
