"""
Utils package - Utility modules for the Keycloak realm provider.

Contains helper modules for:
- Keycloak Admin API interactions
- The SMTP settings codec
- Input validation
"""

from keycloak_realm_provider.utils.validation import validate_realm_name, validate_url

__all__ = [
    "validate_realm_name",
    "validate_url",
]
