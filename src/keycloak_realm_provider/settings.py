"""Centralized provider settings using pydantic-settings.

This module provides two layers of configuration:

- ``Settings``: ambient provider behaviour (logging, tracing, dry-run) loaded
  from environment variables.
- ``ProviderConfig``: the Keycloak connection parameters, resolved from the
  declared Pulumi provider configuration with the ``KEYCLOAK_*`` environment
  variables as fallback.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_ADMIN_CLIENT_ID,
    DEFAULT_ADMIN_REALM,
    DEFAULT_BASE_PATH,
    DEFAULT_INSECURE,
    DEFAULT_REQUEST_TIMEOUT,
    KEYCLOAK_ENV_PREFIX,
)
from .errors import ConfigurationError, ValidationError
from .utils.validation import validate_url

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Provider behaviour loaded from environment variables.

    All settings have sensible defaults. Override via environment variables
    as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )

    # Provider behavior
    dry_run: bool = Field(
        default=False,
        validation_alias="KEYCLOAK_DRY_RUN",
        description="Preview mode: create/update echo inputs without calling Keycloak",
    )

    # Tracing
    tracing_enabled: bool = Field(
        default=False,
        validation_alias="OTEL_TRACING_ENABLED",
        description="Enable OpenTelemetry tracing of realm operations",
    )
    tracing_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_EXPORTER_OTLP_ENDPOINT",
        description="OTLP collector endpoint (gRPC)",
    )
    tracing_service_name: str = Field(
        default="pulumi-keycloak-realm",
        validation_alias="OTEL_SERVICE_NAME",
        description="Service name reported on spans",
    )
    tracing_sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        validation_alias="OTEL_SAMPLE_RATE",
        description="Sampling rate for root spans (0.0-1.0)",
    )


class KeycloakEnvironment(BaseSettings):
    """Keycloak connection parameters read from ``KEYCLOAK_*`` variables.

    Every field is optional here; required-ness is enforced by
    ``ProviderConfig`` after declared values have been merged in.
    """

    model_config = SettingsConfigDict(
        env_prefix=KEYCLOAK_ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = None
    username: str | None = None
    password: str | None = None
    realm: str | None = None
    base_path: str | None = None
    insecure: bool | None = None
    client_id: str | None = None
    timeout: int | None = None


class ProviderConfig(BaseModel):
    """Resolved connection parameters for the Keycloak admin API."""

    url: str = Field(
        ..., min_length=1, description="Keycloak server URL (e.g., http://localhost:8080)"
    )
    username: str = Field(..., min_length=1, description="Keycloak admin username")
    password: SecretStr = Field(..., description="Keycloak admin password")
    realm: str = Field(DEFAULT_ADMIN_REALM, description="Keycloak admin realm")
    base_path: str = Field(DEFAULT_BASE_PATH, description="Base path for Keycloak API")
    insecure: bool = Field(
        DEFAULT_INSECURE, description="Whether to allow insecure connections"
    )
    client_id: str = Field(
        DEFAULT_ADMIN_CLIENT_ID, description="Client used for the admin login"
    )
    timeout: int = Field(
        DEFAULT_REQUEST_TIMEOUT, gt=0, description="Request timeout in seconds"
    )

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        try:
            validate_url(v, "Keycloak URL")
        except ValidationError as e:
            raise ValueError(e.args[0]) from e
        return v.rstrip("/")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("password must not be empty")
        return v

    @field_validator("base_path")
    @classmethod
    def normalize_base_path(cls, v: str) -> str:
        stripped = v.strip("/")
        return f"/{stripped}" if stripped else "/"

    @property
    def server_base_url(self) -> str:
        """Server URL with the base path applied, without a trailing slash."""
        if self.base_path == "/":
            return self.url
        return f"{self.url}{self.base_path}"


def load_provider_config(
    declared: Mapping[str, Any] | None = None,
    environment: KeycloakEnvironment | None = None,
) -> ProviderConfig:
    """
    Resolve the provider connection configuration.

    Declared values (from the Pulumi provider configuration) take precedence;
    unset or empty declared values fall back to the ``KEYCLOAK_*`` environment
    variables, and finally to the defaults of ``ProviderConfig``.

    Args:
        declared: Values declared in the stack configuration, keyed by field name
        environment: Pre-loaded environment values (read from the process if omitted)

    Returns:
        Validated ProviderConfig

    Raises:
        ConfigurationError: If a required parameter is missing or invalid
    """
    env = environment if environment is not None else KeycloakEnvironment()

    merged: dict[str, Any] = env.model_dump(exclude_none=True)
    for key, value in (declared or {}).items():
        if value is None or value == "":
            continue
        merged[key] = value

    try:
        config = ProviderConfig.model_validate(merged)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(
            f"Invalid Keycloak provider configuration: {problems}"
        ) from e

    logger.debug(
        f"Resolved Keycloak provider configuration for {config.server_base_url} "
        f"(admin realm: {config.realm}, insecure: {config.insecure})"
    )
    return config


# Global settings instance - initialized once at module import
settings = Settings()
