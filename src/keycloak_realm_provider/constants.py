"""
Constants used throughout the Keycloak realm provider.

This module defines:
- Connection defaults for the Keycloak admin API
- The realm attributes managed by the merge strategy
- Desired-state defaults applied to inputs
- Message templates for not-found detection and logging
"""

# Connection defaults
DEFAULT_ADMIN_REALM = "master"
DEFAULT_BASE_PATH = "/"
DEFAULT_INSECURE = False
DEFAULT_ADMIN_CLIENT_ID = "admin-cli"
DEFAULT_REQUEST_TIMEOUT = 60  # seconds

# Environment variable prefix for the connection configuration
KEYCLOAK_ENV_PREFIX = "KEYCLOAK_"

# Pulumi provider configuration keys (declared in the stack config)
PROVIDER_CONFIG_KEYS = {
    "url": "url",
    "username": "username",
    "password": "password",
    "realm": "realm",
    "basePath": "base_path",
    "insecure": "insecure",
}

# Realm attributes written by this provider (Keycloak API names).
# Everything else in a realm representation is passed through untouched.
MANAGED_REALM_ATTRIBUTES = (
    "realm",
    "enabled",
    "displayName",
    "displayNameHtml",
    "loginTheme",
    "accountTheme",
    "adminTheme",
    "emailTheme",
    "smtpServer",
)

# Realms the provider refuses to delete
PROTECTED_REALMS = frozenset({"master"})

# Desired-state defaults
DEFAULT_REALM_ENABLED = True  # creation only
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_STARTTLS = True
DEFAULT_SMTP_AUTH = False

# Error texts the admin API uses for a missing realm
NOT_FOUND_MESSAGES = ("404", "realm not found")

# Resource type reported in logs and spans
RESOURCE_TYPE_REALM = "keycloak:Realm"
