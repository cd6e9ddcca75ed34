"""Unit tests for provider settings and connection configuration."""

import pytest

from keycloak_realm_provider.errors import ConfigurationError
from keycloak_realm_provider.settings import (
    KeycloakEnvironment,
    ProviderConfig,
    Settings,
    load_provider_config,
)

KEYCLOAK_VARIABLES = (
    "KEYCLOAK_URL",
    "KEYCLOAK_USERNAME",
    "KEYCLOAK_PASSWORD",
    "KEYCLOAK_REALM",
    "KEYCLOAK_BASE_PATH",
    "KEYCLOAK_INSECURE",
    "KEYCLOAK_CLIENT_ID",
    "KEYCLOAK_TIMEOUT",
)


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove KEYCLOAK_* variables inherited from the test runner."""
    for variable in KEYCLOAK_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch


class TestSettings:
    """Test ambient provider settings."""

    def test_defaults(self, clean_environment):
        for variable in ("LOG_LEVEL", "JSON_LOGS", "KEYCLOAK_DRY_RUN", "OTEL_TRACING_ENABLED"):
            clean_environment.delenv(variable, raising=False)

        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.json_logs is True
        assert settings.dry_run is False
        assert settings.tracing_enabled is False
        assert settings.tracing_sample_rate == 1.0

    def test_environment_overrides(self, clean_environment):
        clean_environment.setenv("LOG_LEVEL", "DEBUG")
        clean_environment.setenv("KEYCLOAK_DRY_RUN", "true")
        clean_environment.setenv("OTEL_SAMPLE_RATE", "0.25")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.dry_run is True
        assert settings.tracing_sample_rate == 0.25


class TestKeycloakEnvironment:
    """Test reading KEYCLOAK_* variables."""

    def test_reads_prefixed_variables(self, clean_environment):
        clean_environment.setenv("KEYCLOAK_URL", "http://kc:8080")
        clean_environment.setenv("KEYCLOAK_BASE_PATH", "/auth")
        clean_environment.setenv("KEYCLOAK_INSECURE", "true")

        env = KeycloakEnvironment()

        assert env.url == "http://kc:8080"
        assert env.base_path == "/auth"
        assert env.insecure is True
        assert env.username is None


class TestProviderConfig:
    """Test validation of connection parameters."""

    def test_defaults(self):
        config = ProviderConfig(url="http://kc:8080", username="admin", password="pw")

        assert config.realm == "master"
        assert config.base_path == "/"
        assert config.insecure is False
        assert config.client_id == "admin-cli"
        assert config.timeout == 60
        assert config.server_base_url == "http://kc:8080"

    @pytest.mark.parametrize(
        "base_path,expected",
        [
            ("/", "/"),
            ("", "/"),
            ("auth", "/auth"),
            ("/auth/", "/auth"),
        ],
    )
    def test_base_path_normalized(self, base_path, expected):
        config = ProviderConfig(
            url="http://kc:8080/", username="admin", password="pw", base_path=base_path
        )
        assert config.base_path == expected

    def test_server_base_url_joins_base_path(self):
        config = ProviderConfig(
            url="http://kc:8080/", username="admin", password="pw", base_path="/auth"
        )
        assert config.server_base_url == "http://kc:8080/auth"

    def test_password_not_exposed_in_repr(self):
        config = ProviderConfig(url="http://kc:8080", username="admin", password="pw")
        assert "pw" not in repr(config)


class TestLoadProviderConfig:
    """Test merging declared configuration with the environment."""

    def test_declared_values(self):
        config = load_provider_config(
            {"url": "http://kc:8080", "username": "admin", "password": "pw"},
            KeycloakEnvironment.model_construct(),
        )
        assert config.url == "http://kc:8080"

    def test_environment_fallback(self):
        env = KeycloakEnvironment.model_construct(
            url="http://env:8080", username="env-admin", password="env-pw", realm="ops"
        )

        config = load_provider_config({}, env)

        assert config.url == "http://env:8080"
        assert config.username == "env-admin"
        assert config.realm == "ops"

    def test_declared_values_win(self):
        env = KeycloakEnvironment.model_construct(
            url="http://env:8080", username="env-admin", password="env-pw"
        )

        config = load_provider_config({"url": "http://declared:8080", "password": ""}, env)

        assert config.url == "http://declared:8080"
        # Empty declared values fall back to the environment
        assert config.password.get_secret_value() == "env-pw"

    def test_reads_process_environment(self, clean_environment):
        clean_environment.setenv("KEYCLOAK_URL", "http://kc:8080")
        clean_environment.setenv("KEYCLOAK_USERNAME", "admin")
        clean_environment.setenv("KEYCLOAK_PASSWORD", "pw")

        config = load_provider_config()

        assert config.server_base_url == "http://kc:8080"

    def test_missing_required_values(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_provider_config({}, KeycloakEnvironment.model_construct())

        message = str(exc_info.value)
        assert "url" in message
        assert "username" in message
        assert "password" in message
        assert exc_info.value.category == "configuration"

    def test_invalid_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_provider_config(
                {"url": "ftp://kc", "username": "admin", "password": "pw"},
                KeycloakEnvironment.model_construct(),
            )
        assert "url" in str(exc_info.value)
