"""
Test suite for EdgeGrid credential providers and the credential cache

This module tests the static, environment and shared-file providers, the
error codes they raise, and the concurrency-safe Credentials cache.
"""

import pytest
import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from edgegrid_sdk.credentials import (
    CredentialValue,
    CredentialProvider,
    Expirer,
    Expiry,
    Credentials,
    CredentialError,
    CredentialConfigurationError,
    CredentialResourceError,
    CredentialErrorCode,
    StaticProvider,
    STATIC_PROVIDER_NAME,
    EnvProvider,
    ENV_PROVIDER_NAME,
    new_env_credentials,
    SharedCredentialsProvider,
    SHARED_CREDS_PROVIDER_NAME,
    load_profile,
    new_shared_credentials,
    new_static_credentials,
    new_static_credentials_from_value,
)
from edgegrid_sdk.exceptions import EdgeGridSDKError


ENV_VARIABLES = (
    "AKAMAI_CLIENT_SECRET",
    "AKAMAI_CLIENT_TOKEN",
    "AKAMAI_ACCESS_TOKEN",
    "AKAMAI_HOST",
    "AKAMAI_EDGERC_FILE",
    "AKAMAI_PROFILE",
)

EDGERC = """\
[default]
client_secret = default-secret=
client_token = akab-default-client-token
access_token = akab-default-access-token
host = akab-default.luna.akamaiapis.net

[ccu]
client_secret = ccu-secret
client_token = akab-ccu-client-token
access_token = akab-ccu-access-token
host = akab-ccu.luna.akamaiapis.net
max-body = 131072

[no-secret]
client_token = akab-client-token
access_token = akab-access-token
host = akab-host.luna.akamaiapis.net

[no-client-token]
client_secret = secret
access_token = akab-access-token
host = akab-host.luna.akamaiapis.net

[no-access-token]
client_secret = secret
client_token = akab-client-token
host = akab-host.luna.akamaiapis.net

[empty-host]
client_secret = secret
client_token = akab-client-token
access_token = akab-access-token
host =
"""


# Test fixtures and helpers

@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any AKAMAI_* variables."""
    for name in ENV_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def edgerc_file(tmp_path):
    """Shared credentials file with several profiles."""
    path = tmp_path / "edgerc"
    path.write_text(EDGERC, encoding="utf-8")
    return path


@pytest.fixture
def full_env(clean_env):
    """Environment with all four credential variables set."""
    clean_env.setenv("AKAMAI_CLIENT_SECRET", "env-secret")
    clean_env.setenv("AKAMAI_CLIENT_TOKEN", "akab-env-client-token")
    clean_env.setenv("AKAMAI_ACCESS_TOKEN", "akab-env-access-token")
    clean_env.setenv("AKAMAI_HOST", "akab-env.luna.akamaiapis.net")
    return clean_env


def make_value(**overrides):
    fields = dict(
        client_secret="secret",
        client_token="akab-client-token",
        access_token="akab-access-token",
        host="akab-host.luna.akamaiapis.net",
    )
    fields.update(overrides)
    return CredentialValue(**fields)


class CountingProvider:
    """Provider that records retrieve() calls; expired until retrieved."""

    def __init__(self, value=None, delay=0.0, always_fresh=False):
        self.value = value or make_value(provider_name="CountingProvider")
        self.delay = delay
        self.always_fresh = always_fresh
        self.calls = 0
        self.retrieved = False
        self._lock = threading.Lock()

    def retrieve(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        self.retrieved = True
        return self.value

    def is_expired(self):
        if self.always_fresh:
            return False
        return not self.retrieved


class FailingProvider:
    """Provider that fails a fixed number of times before succeeding."""

    def __init__(self, failures=1):
        self.failures = failures
        self.calls = 0

    def retrieve(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise CredentialConfigurationError(CredentialErrorCode.ENV_HOST_NOT_FOUND)
        return make_value(provider_name="FailingProvider")

    def is_expired(self):
        return self.calls <= self.failures


class AlwaysFailingProvider:
    """Provider that always fails and records overlapping retrieve() calls."""

    def __init__(self, delay=0.02):
        self.delay = delay
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def retrieve(self):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            raise CredentialConfigurationError(CredentialErrorCode.ENV_HOST_NOT_FOUND)
        finally:
            with self._lock:
                self.in_flight -= 1

    def is_expired(self):
        return True


class ExpiringProvider(Expiry):
    """Provider that embeds Expiry and expires an hour after retrieval."""

    def __init__(self, now):
        super().__init__(current_time=lambda: self.now)
        self.now = now
        self.calls = 0

    def retrieve(self):
        self.calls += 1
        self.set_expiration(self.now + timedelta(hours=1))
        return make_value(provider_name="ExpiringProvider")


class TestCredentialValue:
    """Test the credential value type"""

    def test_is_complete(self):
        """Test completeness requires all four fields"""
        assert make_value().is_complete()
        assert not make_value(client_secret="").is_complete()
        assert not make_value(client_token="").is_complete()
        assert not make_value(access_token="").is_complete()
        assert not make_value(host="").is_complete()
        assert not CredentialValue().is_complete()

    def test_provider_name_not_required(self):
        """Test provider name does not affect completeness"""
        assert make_value(provider_name="").is_complete()

    def test_repr_hides_secret(self):
        """Test the client secret never appears in repr"""
        value = make_value(client_secret="super-secret-value")
        assert "super-secret-value" not in repr(value)
        assert "akab-client-token" in repr(value)

    def test_immutable(self):
        """Test values cannot be modified"""
        value = make_value()
        with pytest.raises(AttributeError):
            value.host = "other"


class TestCredentialErrors:
    """Test credential error kinds"""

    def test_error_carries_code_and_message(self):
        """Test error code and static message"""
        error = CredentialConfigurationError(CredentialErrorCode.ENV_HOST_NOT_FOUND)
        assert error.code == CredentialErrorCode.ENV_HOST_NOT_FOUND
        assert error.error_code == "ENV_HOST_NOT_FOUND"
        assert str(error) == "AKAMAI_HOST not found in environment"

    def test_error_hierarchy(self):
        """Test credential errors share the SDK base"""
        assert issubclass(CredentialConfigurationError, CredentialError)
        assert issubclass(CredentialResourceError, CredentialError)
        assert issubclass(CredentialError, EdgeGridSDKError)

    def test_every_code_has_message(self):
        """Test no code is missing a message"""
        for code in CredentialErrorCode:
            assert str(CredentialError(code))


class TestStaticProvider:
    """Test static credentials"""

    def test_retrieve(self):
        """Test static values are returned with the default provider name"""
        value = StaticProvider(make_value()).retrieve()
        assert value.client_secret == "secret"
        assert value.host == "akab-host.luna.akamaiapis.net"
        assert value.provider_name == STATIC_PROVIDER_NAME

    def test_retrieve_keeps_custom_provider_name(self):
        """Test a set provider name is preserved"""
        value = StaticProvider(make_value(provider_name="AppConfig")).retrieve()
        assert value.provider_name == "AppConfig"

    @pytest.mark.parametrize("field_name", ["client_secret", "client_token", "access_token", "host"])
    def test_retrieve_empty_field(self, field_name):
        """Test any empty field fails with the same code"""
        provider = StaticProvider(make_value(**{field_name: ""}))
        with pytest.raises(CredentialConfigurationError) as exc_info:
            provider.retrieve()
        assert exc_info.value.code == CredentialErrorCode.STATIC_CREDENTIALS_EMPTY

    def test_never_expires(self):
        """Test static provider is never expired"""
        provider = StaticProvider(make_value())
        assert not provider.is_expired()
        provider.retrieve()
        assert not provider.is_expired()

    def test_satisfies_provider_protocol(self):
        """Test protocol conformance"""
        provider = StaticProvider(make_value())
        assert isinstance(provider, CredentialProvider)
        assert not isinstance(provider, Expirer)

    def test_convenience_constructors(self):
        """Test new_static_credentials helpers"""
        creds = new_static_credentials("secret", "akab-client-token", "akab-access-token", "host")
        assert creds.get().client_token == "akab-client-token"

        creds = new_static_credentials_from_value(make_value())
        assert creds.get().provider_name == STATIC_PROVIDER_NAME


class TestEnvProvider:
    """Test environment credentials"""

    def test_retrieve(self, full_env):
        """Test all variables are read"""
        provider = EnvProvider()
        value = provider.retrieve()
        assert value.client_secret == "env-secret"
        assert value.client_token == "akab-env-client-token"
        assert value.access_token == "akab-env-access-token"
        assert value.host == "akab-env.luna.akamaiapis.net"
        assert value.provider_name == ENV_PROVIDER_NAME

    def test_expired_until_retrieved(self, full_env):
        """Test expiry follows successful retrieval"""
        provider = EnvProvider()
        assert provider.is_expired()
        provider.retrieve()
        assert not provider.is_expired()

    @pytest.mark.parametrize("variable,code", [
        ("AKAMAI_CLIENT_SECRET", CredentialErrorCode.ENV_CLIENT_SECRET_NOT_FOUND),
        ("AKAMAI_CLIENT_TOKEN", CredentialErrorCode.ENV_CLIENT_TOKEN_NOT_FOUND),
        ("AKAMAI_ACCESS_TOKEN", CredentialErrorCode.ENV_ACCESS_TOKEN_NOT_FOUND),
        ("AKAMAI_HOST", CredentialErrorCode.ENV_HOST_NOT_FOUND),
    ])
    def test_missing_variable(self, full_env, variable, code):
        """Test each missing variable has its own code"""
        full_env.delenv(variable)
        with pytest.raises(CredentialConfigurationError) as exc_info:
            EnvProvider().retrieve()
        assert exc_info.value.code == code
        assert exc_info.value.details["variable"] == variable

    def test_empty_variable_is_missing(self, full_env):
        """Test an empty variable counts as missing"""
        full_env.setenv("AKAMAI_ACCESS_TOKEN", "")
        with pytest.raises(CredentialConfigurationError) as exc_info:
            EnvProvider().retrieve()
        assert exc_info.value.code == CredentialErrorCode.ENV_ACCESS_TOKEN_NOT_FOUND

    def test_secret_checked_first(self, clean_env):
        """Test an empty environment reports the client secret"""
        with pytest.raises(CredentialConfigurationError) as exc_info:
            EnvProvider().retrieve()
        assert exc_info.value.code == CredentialErrorCode.ENV_CLIENT_SECRET_NOT_FOUND

    def test_failed_retrieve_stays_expired(self, full_env):
        """Test a failure after success resets the retrieved flag"""
        provider = EnvProvider()
        provider.retrieve()
        full_env.delenv("AKAMAI_HOST")
        with pytest.raises(CredentialConfigurationError):
            provider.retrieve()
        assert provider.is_expired()

    def test_new_env_credentials(self, full_env):
        """Test cache over the environment"""
        assert new_env_credentials().get().host == "akab-env.luna.akamaiapis.net"


class TestSharedCredentialsProvider:
    """Test shared .edgerc file credentials"""

    def test_explicit_file_and_profile(self, clean_env, edgerc_file):
        """Test explicit filename and profile"""
        value = SharedCredentialsProvider(edgerc_file, "ccu").retrieve()
        assert value.client_secret == "ccu-secret"
        assert value.client_token == "akab-ccu-client-token"
        assert value.host == "akab-ccu.luna.akamaiapis.net"
        assert value.provider_name == SHARED_CREDS_PROVIDER_NAME

    def test_default_profile(self, clean_env, edgerc_file):
        """Test the default profile and values ending in '='"""
        value = SharedCredentialsProvider(edgerc_file).retrieve()
        assert value.client_secret == "default-secret="
        assert value.host == "akab-default.luna.akamaiapis.net"

    def test_profile_from_environment(self, clean_env, edgerc_file):
        """Test AKAMAI_PROFILE selects the profile"""
        clean_env.setenv("AKAMAI_PROFILE", "ccu")
        value = SharedCredentialsProvider(edgerc_file).retrieve()
        assert value.client_token == "akab-ccu-client-token"

    def test_explicit_profile_beats_environment(self, clean_env, edgerc_file):
        """Test explicit profile has priority"""
        clean_env.setenv("AKAMAI_PROFILE", "ccu")
        value = SharedCredentialsProvider(edgerc_file, "default").retrieve()
        assert value.client_token == "akab-default-client-token"

    def test_file_from_environment(self, clean_env, edgerc_file):
        """Test AKAMAI_EDGERC_FILE selects the file"""
        clean_env.setenv("AKAMAI_EDGERC_FILE", str(edgerc_file))
        value = SharedCredentialsProvider().retrieve()
        assert value.client_token == "akab-default-client-token"

    def test_file_in_home_directory(self, clean_env, tmp_path):
        """Test ~/.edgerc is the fallback"""
        (tmp_path / ".edgerc").write_text(EDGERC, encoding="utf-8")
        clean_env.setenv("HOME", str(tmp_path))
        provider = SharedCredentialsProvider()
        assert provider.resolve_filename() == str(tmp_path / ".edgerc")
        assert provider.retrieve().client_token == "akab-default-client-token"

    def test_home_directory_not_found(self, clean_env):
        """Test unknown home directory"""
        with patch("edgegrid_sdk.credentials.shared_provider.Path.home", side_effect=RuntimeError("no home")):
            with pytest.raises(CredentialResourceError) as exc_info:
                SharedCredentialsProvider().retrieve()
        assert exc_info.value.code == CredentialErrorCode.HOME_DIR_NOT_FOUND

    def test_file_not_found(self, clean_env, tmp_path):
        """Test missing file"""
        with pytest.raises(CredentialResourceError) as exc_info:
            SharedCredentialsProvider(tmp_path / "missing").retrieve()
        assert exc_info.value.code == CredentialErrorCode.SHARED_FILE_NOT_FOUND

    def test_file_invalid(self, clean_env, tmp_path):
        """Test unparseable file"""
        path = tmp_path / "edgerc"
        path.write_text("client_secret = no section header\n", encoding="utf-8")
        with pytest.raises(CredentialResourceError) as exc_info:
            SharedCredentialsProvider(path).retrieve()
        assert exc_info.value.code == CredentialErrorCode.SHARED_FILE_INVALID

    def test_profile_not_found(self, clean_env, edgerc_file):
        """Test missing profile"""
        with pytest.raises(CredentialResourceError) as exc_info:
            SharedCredentialsProvider(edgerc_file, "papi").retrieve()
        assert exc_info.value.code == CredentialErrorCode.SHARED_PROFILE_NOT_FOUND
        assert exc_info.value.details["profile"] == "papi"

    @pytest.mark.parametrize("profile,code", [
        ("no-secret", CredentialErrorCode.SHARED_CLIENT_SECRET_NOT_FOUND),
        ("no-client-token", CredentialErrorCode.SHARED_CLIENT_TOKEN_NOT_FOUND),
        ("no-access-token", CredentialErrorCode.SHARED_ACCESS_TOKEN_NOT_FOUND),
        ("empty-host", CredentialErrorCode.SHARED_HOST_NOT_FOUND),
    ])
    def test_missing_key(self, clean_env, edgerc_file, profile, code):
        """Test each missing key has its own code"""
        with pytest.raises(CredentialConfigurationError) as exc_info:
            load_profile(str(edgerc_file), profile)
        assert exc_info.value.code == code

    def test_expired_until_retrieved(self, clean_env, edgerc_file):
        """Test expiry follows successful retrieval"""
        provider = SharedCredentialsProvider(edgerc_file)
        assert provider.is_expired()
        provider.retrieve()
        assert not provider.is_expired()

    def test_duplicates_tolerated(self, clean_env, tmp_path):
        """Test repeated sections and keys merge, the last value winning"""
        path = tmp_path / "edgerc"
        path.write_text(
            "[default]\n"
            "client_secret = old-secret\n"
            "client_token = akab-client-token\n"
            "client_secret = new-secret\n"
            "[default]\n"
            "access_token = akab-access-token\n"
            "host = akab-host.luna.akamaiapis.net\n",
            encoding="utf-8"
        )
        value = load_profile(str(path), "default")
        assert value.client_secret == "new-secret"
        assert value.access_token == "akab-access-token"

    def test_inline_comments_stripped(self, clean_env, tmp_path):
        """Test trailing ; and # comments are not part of the value"""
        path = tmp_path / "edgerc"
        path.write_text(
            "[default]\n"
            "client_secret = secret= ; rotated monthly\n"
            "client_token = akab-client-token # staging\n"
            "access_token = akab-access-token\n"
            "host = akab-host.luna.akamaiapis.net\n",
            encoding="utf-8"
        )
        value = load_profile(str(path), "default")
        assert value.client_secret == "secret="
        assert value.client_token == "akab-client-token"

    def test_new_shared_credentials(self, clean_env, edgerc_file):
        """Test cache over the shared file"""
        creds = new_shared_credentials(edgerc_file, "ccu")
        assert creds.get().access_token == "akab-ccu-access-token"


class TestExpiry:
    """Test the shared expiry helper"""

    def test_initially_expired(self):
        """Test a fresh helper is expired"""
        expiry = Expiry()
        assert expiry.is_expired()
        assert expiry.expires_at() == datetime.min.replace(tzinfo=timezone.utc)

    def test_set_expiration(self):
        """Test expiration against the injected clock"""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        clock = {"now": now}
        expiry = Expiry(current_time=lambda: clock["now"])

        expiry.set_expiration(now + timedelta(minutes=10))
        assert not expiry.is_expired()
        assert expiry.expires_at() == now + timedelta(minutes=10)

        clock["now"] = now + timedelta(minutes=11)
        assert expiry.is_expired()

    def test_expiry_window(self):
        """Test the window moves expiration earlier"""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        expiry = Expiry(current_time=lambda: now)

        expiry.set_expiration(now + timedelta(minutes=10), window=timedelta(minutes=15))
        assert expiry.expires_at() == now - timedelta(minutes=5)
        assert expiry.is_expired()

    def test_non_positive_window_ignored(self):
        """Test zero or negative windows leave expiration unchanged"""
        target = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        expiry = Expiry()
        expiry.set_expiration(target, window=timedelta(0))
        assert expiry.expires_at() == target
        expiry.set_expiration(target, window=timedelta(minutes=-5))
        assert expiry.expires_at() == target


class TestCredentialsCache:
    """Test the concurrency-safe credential cache"""

    def test_first_get_retrieves(self):
        """Test the cache starts expired"""
        provider = CountingProvider(always_fresh=True)
        creds = Credentials(provider)
        assert creds.is_expired()
        assert creds.get().provider_name == "CountingProvider"
        assert provider.calls == 1
        assert not creds.is_expired()

    def test_cached_value_reused(self):
        """Test repeated gets hit the cache"""
        provider = CountingProvider()
        creds = Credentials(provider)
        first = creds.get()
        for _ in range(5):
            assert creds.get() is first
        assert provider.calls == 1

    def test_expire_forces_refresh(self):
        """Test expire() overrides a provider that never expires"""
        provider = CountingProvider(always_fresh=True)
        creds = Credentials(provider)
        creds.get()
        creds.expire()
        assert creds.is_expired()
        creds.get()
        assert provider.calls == 2

    def test_failed_refresh_propagates_and_stays_stale(self):
        """Test the provider error is raised unchanged and retried next time"""
        provider = FailingProvider(failures=1)
        creds = Credentials(provider)

        with pytest.raises(CredentialConfigurationError) as exc_info:
            creds.get()
        assert exc_info.value.code == CredentialErrorCode.ENV_HOST_NOT_FOUND
        assert creds.is_expired()

        assert creds.get().provider_name == "FailingProvider"
        assert provider.calls == 2

    def test_failed_refresh_does_not_return_old_value(self):
        """Test a stale value is never served after a failed refresh"""
        provider = StaticProvider(make_value())
        creds = Credentials(provider)
        creds.get()

        provider.value = make_value(host="")
        creds.expire()
        with pytest.raises(CredentialConfigurationError):
            creds.get()
        with pytest.raises(CredentialConfigurationError):
            creds.get()

    def test_concurrent_gets_retrieve_once(self):
        """Test N concurrent callers on an expired cache trigger one retrieve"""
        provider = CountingProvider(delay=0.05)
        creds = Credentials(provider)
        thread_count = 16
        barrier = threading.Barrier(thread_count)
        results = []
        errors = []

        def worker():
            barrier.wait()
            try:
                results.append(creds.get())
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert not errors
        assert len(results) == thread_count
        assert provider.calls == 1
        assert all(value is results[0] for value in results)

    def test_concurrent_gets_after_expire(self):
        """Test concurrent refresh after expire() is also single-flight"""
        provider = CountingProvider(always_fresh=True, delay=0.05)
        creds = Credentials(provider)
        creds.get()
        creds.expire()

        thread_count = 8
        barrier = threading.Barrier(thread_count)

        def worker():
            barrier.wait()
            creds.get()

        threads = [threading.Thread(target=worker) for _ in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert provider.calls == 2

    def test_concurrent_gets_all_fail_alike(self):
        """Test concurrent callers on a failing provider all get the same error"""
        provider = AlwaysFailingProvider()
        creds = Credentials(provider)
        thread_count = 8
        barrier = threading.Barrier(thread_count)
        codes = []
        results = []

        def worker():
            barrier.wait()
            try:
                results.append(creds.get())
            except CredentialError as e:
                codes.append(e.code)

        threads = [threading.Thread(target=worker) for _ in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert not results
        assert codes == [CredentialErrorCode.ENV_HOST_NOT_FOUND] * thread_count
        # No negative caching: every waiter retries, one at a time
        assert provider.calls == thread_count
        assert provider.max_in_flight == 1
        assert creds.is_expired()

    def test_provider_property(self):
        """Test the wrapped provider is exposed"""
        provider = CountingProvider()
        assert Credentials(provider).provider is provider

    def test_expires_at_unsupported(self):
        """Test providers without expires_at()"""
        creds = Credentials(StaticProvider(make_value()))
        with pytest.raises(CredentialResourceError) as exc_info:
            creds.expires_at()
        assert exc_info.value.code == CredentialErrorCode.EXPIRES_AT_UNSUPPORTED

    def test_expires_at(self):
        """Test expires_at() before and after retrieval"""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        provider = ExpiringProvider(now)
        creds = Credentials(provider)
        assert isinstance(provider, Expirer)

        assert creds.expires_at() == datetime.min.replace(tzinfo=timezone.utc)

        creds.get()
        assert creds.expires_at() == now + timedelta(hours=1)

        creds.expire()
        assert creds.expires_at() == datetime.min.replace(tzinfo=timezone.utc)

    def test_provider_expiry_triggers_refresh(self):
        """Test provider-reported expiry leads to a new retrieve"""
        now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        provider = ExpiringProvider(now)
        creds = Credentials(provider)

        creds.get()
        creds.get()
        assert provider.calls == 1

        provider.now = now + timedelta(hours=2)
        assert creds.is_expired()
        creds.get()
        assert provider.calls == 2
