"""
Validation utilities for the Keycloak realm provider.

This module provides validation functions for realm names and connection
URLs. Failures are raised as ``ValidationError`` with a message suitable for
reporting as a Pulumi check failure.
"""

import logging
from urllib.parse import urlparse

from ..errors import ValidationError

logger = logging.getLogger(__name__)

# Characters Keycloak cannot carry in a realm name (it is part of every URL)
INVALID_REALM_NAME_CHARS = ["/", "\\", "?", "#", "%", "&", "=", "+", " "]


def validate_realm_name(realm_name: str) -> None:
    """
    Validate Keycloak realm name format.

    Args:
        realm_name: Realm name to validate

    Raises:
        ValidationError: If realm name is invalid
    """
    if not realm_name:
        raise ValidationError("Realm name cannot be empty")

    if len(realm_name) > 255:
        raise ValidationError(
            f"Realm name '{realm_name}' is too long (max 255 characters)"
        )

    for char in INVALID_REALM_NAME_CHARS:
        if char in realm_name:
            raise ValidationError(
                f"Realm name '{realm_name}' contains invalid character: '{char}'"
            )

    if realm_name == "master":
        logger.warning("Managing the 'master' realm - ensure this is intentional")

    logger.debug(f"Validated realm name: {realm_name}")


def validate_url(url: str, url_type: str = "URL") -> None:
    """
    Validate URL format.

    Args:
        url: URL to validate
        url_type: Type of URL for error messages

    Raises:
        ValidationError: If URL is invalid
    """
    if not url:
        raise ValidationError(f"{url_type} cannot be empty")

    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ValidationError(f"{url_type} '{url}' must use http or https scheme")

    if not parsed.netloc:
        raise ValidationError(f"{url_type} '{url}' must include a host")
