"""
Error handling module for the Keycloak realm provider.

This module provides the error hierarchy used by the admin client, the
merge engine and the Pulumi lifecycle adapter.
"""

from .provider_errors import (
    AuthenticationError,
    ConfigurationError,
    KeycloakAdminError,
    ProviderError,
    RealmOperationError,
    ValidationError,
)

__all__ = [
    "ProviderError",
    "ValidationError",
    "ConfigurationError",
    "AuthenticationError",
    "KeycloakAdminError",
    "RealmOperationError",
]
