"""
Concurrency-safe credential cache

Credentials wraps one provider and hands out its value to any number of
signing threads. Readers of a still-valid value share a read lock; a refresh
runs under the exclusive lock and re-checks expiry after acquiring it, so N
callers that observe expiry at once trigger a single provider.retrieve().
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from .errors import CredentialErrorCode, credential_error
from .types import CredentialProvider, CredentialValue, Expirer

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Lock allowing many concurrent readers or one writer.

    Waiting writers block new readers so a refresh is not starved by a steady
    stream of cache hits.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class Credentials:
    """
    Provides concurrency safe retrieval of EdgeGrid credentials.

    The cache starts out expired, so the first get() always calls the
    provider. A failed retrieve leaves the cache expired and raises the
    provider's error unchanged; the previously cached value is never returned
    in that case.
    """

    def __init__(self, provider: CredentialProvider):
        """
        Initialize the cache.

        Args:
            provider: Credential source; shared, not copied
        """
        self._provider = provider
        self._creds = CredentialValue()
        self._force_refresh = True
        self._lock = ReadWriteLock()

    @property
    def provider(self) -> CredentialProvider:
        return self._provider

    def get(self) -> CredentialValue:
        """
        Return the cached credentials, refreshing them if expired.

        Returns:
            CredentialValue: Valid credentials

        Raises:
            CredentialError: Whatever the provider raised on refresh
        """
        with self._lock.read_lock():
            if not self._is_expired():
                return self._creds

        with self._lock.write_lock():
            if self._is_expired():
                logger.debug(f"Refreshing credentials from {type(self._provider).__name__}")
                creds = self._provider.retrieve()
                self._creds = creds
                self._force_refresh = False
            return self._creds

    def expire(self) -> None:
        """
        Force the next get() to call the provider's retrieve().

        Overrides the provider's own expiry state.
        """
        with self._lock.write_lock():
            self._force_refresh = True
        logger.debug("Credentials marked as expired")

    def is_expired(self) -> bool:
        """True if expire() was called or the provider reports expiry"""
        with self._lock.read_lock():
            return self._is_expired()

    def expires_at(self) -> datetime:
        """
        Expiration time reported by the provider.

        Returns:
            datetime: Provider expiration, or datetime.min (UTC) when the cache
                has been forced to refresh

        Raises:
            CredentialResourceError: If the provider cannot report expiry
        """
        with self._lock.read_lock():
            if not isinstance(self._provider, Expirer):
                raise credential_error(
                    CredentialErrorCode.EXPIRES_AT_UNSUPPORTED,
                    provider=type(self._provider).__name__
                )
            if self._force_refresh:
                return datetime.min.replace(tzinfo=timezone.utc)
            return self._provider.expires_at()

    def _is_expired(self) -> bool:
        return self._force_refresh or self._provider.is_expired()
