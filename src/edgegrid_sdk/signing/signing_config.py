"""
Configuration management for request signing

This module provides configuration management for EdgeGrid request signing,
including a fluent configuration builder, validation and loading from the
process environment.
"""

import os
from typing import List, Optional

from .types import (
    DEFAULT_MAX_BODY,
    SigningConfig,
    SigningError,
    SigningErrorCodes,
    NonceGenerator,
    TimestampGenerator,
)
from .utils import validate_timestamp


ENV_HEADERS_TO_SIGN = "AKAMAI_HEADERS_TO_SIGN"
ENV_MAX_BODY = "AKAMAI_MAX_BODY"


class SigningConfigBuilder:
    """
    Builder for creating signing configurations with fluent API
    """

    def __init__(self):
        self._headers_to_sign: List[str] = []
        self._max_body: int = DEFAULT_MAX_BODY
        self._timestamp: Optional[str] = None
        self._nonce: Optional[str] = None
        self._nonce_generator: Optional[NonceGenerator] = None
        self._timestamp_generator: Optional[TimestampGenerator] = None

    def headers(self, headers: List[str]) -> 'SigningConfigBuilder':
        """
        Set headers to include in signature.

        Args:
            headers: List of header names to include

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._headers_to_sign = list(headers)
        return self

    def add_header(self, header: str) -> 'SigningConfigBuilder':
        """
        Add header to the signed headers.

        Args:
            header: Header name to add

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        if header.lower() not in [h.lower() for h in self._headers_to_sign]:
            self._headers_to_sign.append(header)
        return self

    def max_body(self, max_body: int) -> 'SigningConfigBuilder':
        """
        Set how many POST body bytes the content hash covers.

        Args:
            max_body: Positive byte count

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._max_body = max_body
        return self

    def timestamp(self, timestamp: str) -> 'SigningConfigBuilder':
        """Pin the signing timestamp (deterministic tests only)"""
        self._timestamp = timestamp
        return self

    def nonce(self, nonce: str) -> 'SigningConfigBuilder':
        """Pin the nonce (deterministic tests only)"""
        self._nonce = nonce
        return self

    def nonce_generator(self, generator: NonceGenerator) -> 'SigningConfigBuilder':
        """
        Set custom nonce generator.

        Args:
            generator: Function that returns nonce strings

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._nonce_generator = generator
        return self

    def timestamp_generator(self, generator: TimestampGenerator) -> 'SigningConfigBuilder':
        """
        Set custom timestamp generator.

        Args:
            generator: Function that returns formatted EdgeGrid timestamps

        Returns:
            SigningConfigBuilder: Self for method chaining
        """
        self._timestamp_generator = generator
        return self

    def build(self) -> SigningConfig:
        """
        Build the signing configuration.

        Returns:
            SigningConfig: Complete signing configuration

        Raises:
            SigningError: If configuration is invalid
        """
        config = SigningConfig(
            headers_to_sign=list(self._headers_to_sign),
            max_body=self._max_body,
            timestamp=self._timestamp,
            nonce=self._nonce,
            nonce_generator=self._nonce_generator,
            timestamp_generator=self._timestamp_generator
        )
        validate_signing_config(config)
        return config


def create_signing_config() -> SigningConfigBuilder:
    """
    Create a new signing configuration builder.

    Returns:
        SigningConfigBuilder: New configuration builder
    """
    return SigningConfigBuilder()


def validate_signing_config(config: SigningConfig) -> None:
    """
    Validate signing configuration.

    Args:
        config: Signing configuration to validate

    Raises:
        SigningError: If configuration is invalid
    """
    if not isinstance(config, SigningConfig):
        raise SigningError(
            "Configuration must be SigningConfig instance",
            SigningErrorCodes.INVALID_CONFIG
        )

    if config.timestamp is not None and not validate_timestamp(config.timestamp):
        raise SigningError(
            f"Invalid timestamp: {config.timestamp}",
            SigningErrorCodes.INVALID_CONFIG,
            {"timestamp": config.timestamp}
        )

    if config.nonce is not None and not isinstance(config.nonce, str):
        raise SigningError(
            "Nonce must be a string",
            SigningErrorCodes.INVALID_CONFIG
        )


def load_signing_config_from_env() -> SigningConfig:
    """
    Build a signing configuration from the process environment.

    Reads AKAMAI_HEADERS_TO_SIGN (comma-separated header names) and
    AKAMAI_MAX_BODY (integer byte count); unset variables keep the defaults.

    Returns:
        SigningConfig: Signing configuration

    Raises:
        SigningError: If AKAMAI_MAX_BODY is not a positive integer
    """
    builder = create_signing_config()

    headers = os.environ.get(ENV_HEADERS_TO_SIGN, "")
    if headers.strip():
        builder.headers([h.strip() for h in headers.split(',') if h.strip()])

    max_body = os.environ.get(ENV_MAX_BODY, "")
    if max_body.strip():
        try:
            builder.max_body(int(max_body))
        except ValueError:
            raise SigningError(
                f"{ENV_MAX_BODY} must be an integer, got {max_body!r}",
                SigningErrorCodes.INVALID_MAX_BODY,
                {"max_body": max_body}
            )

    return builder.build()
