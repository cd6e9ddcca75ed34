"""
Provider error hierarchy with categorization and user guidance.

This module defines the error types raised by the Keycloak realm provider.
Every error carries a category so the lifecycle adapter and the logs can
tell configuration problems apart from Keycloak failures.
"""


class ProviderError(Exception):
    """
    Base error class for all provider-related exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize provider error.

        Args:
            message: Human-readable error description
            category: Error category (validation, configuration, authentication, api, operation)
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.category = category
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(ProviderError):
    """Error in the desired realm state, or an operation that is refused."""

    def __init__(
        self, message: str, field: str | None = None, user_action: str | None = None
    ):
        action = user_action or "Check the realm resource inputs and fix validation errors"
        if field:
            message = f"Validation error in field '{field}': {message}"
        super().__init__(message=message, category="validation", user_action=action)
        self.field = field


class ConfigurationError(ProviderError):
    """Missing or invalid provider connection configuration."""

    def __init__(self, message: str, user_action: str | None = None):
        super().__init__(
            message=message,
            category="configuration",
            user_action=user_action
            or "Set the provider configuration or the KEYCLOAK_* environment variables",
        )


class KeycloakAdminError(ProviderError):
    """Error communicating with the Keycloak Admin API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        cause: Exception | None = None,
    ):
        if status_code:
            message = f"HTTP {status_code}: {message}"
        super().__init__(
            message=f"Keycloak Admin API error: {message}",
            category="api",
            cause=cause,
        )
        self.status_code = status_code
        self.response_body = response_body

    def body_preview(self, limit: int = 2048) -> str | None:
        """Return a truncated preview of the response body for logging."""

        if self.response_body is None:
            return None

        if len(self.response_body) <= limit:
            return self.response_body

        return f"{self.response_body[:limit]}...<truncated>"


class AuthenticationError(KeycloakAdminError):
    """Admin login against Keycloak failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message=f"Authentication failed: {message}",
            status_code=status_code,
            cause=cause,
        )
        self.category = "authentication"
        self.user_action = "Check Keycloak URL, admin realm and admin credentials"


class RealmOperationError(ProviderError):
    """A lifecycle operation on a realm could not be completed."""

    def __init__(
        self,
        operation: str,
        realm_name: str,
        cause: Exception | None = None,
        user_action: str | None = None,
    ):
        message = f"Failed to {operation} realm '{realm_name}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(
            message=message,
            category="operation",
            user_action=user_action,
            cause=cause,
        )
        self.operation = operation
        self.realm_name = realm_name
