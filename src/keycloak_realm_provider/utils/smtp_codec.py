"""
SMTP settings codec.

Keycloak models a realm's SMTP configuration as a flat string-to-string map.
This module converts between that map and ``SmtpServerConfig``:

- booleans travel as the literals ``"true"`` / ``"false"``
- the port travels as a decimal string
- credentials are only sent, and only read back, when ``auth`` is true
"""

import re
from collections.abc import Mapping
from enum import Enum

from ..models.realm import SmtpServerConfig

_DIGITS = re.compile(r"[0-9]+")

TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

MIN_PORT = 1
MAX_PORT = 65535


class SmtpKey(str, Enum):
    """Keys of the Keycloak ``smtpServer`` map."""

    HOST = "host"
    PORT = "port"
    FROM = "from"
    FROM_DISPLAY_NAME = "fromDisplayName"
    STARTTLS = "starttls"
    AUTH = "auth"
    USER = "user"
    PASSWORD = "password"


def _bool_literal(value: bool) -> str:
    return TRUE_LITERAL if value else FALSE_LITERAL


def parse_port(value: str | None) -> int | None:
    """
    Decode a port from its wire form.

    Only ASCII decimal digits are accepted. Anything else (empty, signs,
    spaces, letters) decodes to None instead of raising, so an unexpected
    value written by another tool does not break a read.
    """
    if not value or not _DIGITS.fullmatch(value):
        return None
    return int(value)


def encode_smtp(config: SmtpServerConfig) -> dict[str, str]:
    """
    Encode SMTP settings into the Keycloak ``smtpServer`` map.

    Only fields that are set are encoded. ``auth`` is always present: when it
    is not true it is encoded as ``"false"`` and username/password are
    dropped from the payload.

    Args:
        config: SMTP settings to encode

    Returns:
        The string map to send as ``smtpServer``
    """
    result: dict[SmtpKey, str] = {}

    if config.host is not None:
        result[SmtpKey.HOST] = config.host

    if config.port is not None:
        result[SmtpKey.PORT] = str(config.port)

    if config.from_address is not None:
        result[SmtpKey.FROM] = config.from_address

    if config.from_name is not None:
        result[SmtpKey.FROM_DISPLAY_NAME] = config.from_name

    if config.start_tls is not None:
        result[SmtpKey.STARTTLS] = _bool_literal(config.start_tls)

    if config.auth:
        result[SmtpKey.AUTH] = TRUE_LITERAL
        if config.username is not None:
            result[SmtpKey.USER] = config.username
        if config.password is not None:
            result[SmtpKey.PASSWORD] = config.password
    else:
        result[SmtpKey.AUTH] = FALSE_LITERAL

    return {key.value: value for key, value in result.items()}


def decode_smtp(smtp_map: Mapping[str, str] | None) -> SmtpServerConfig | None:
    """
    Decode the Keycloak ``smtpServer`` map into SMTP settings.

    Args:
        smtp_map: The map as returned by the admin API

    Returns:
        SmtpServerConfig, or None when the realm has no SMTP configuration
    """
    if not smtp_map:
        return None

    values: dict[str, object] = {}

    if SmtpKey.HOST in smtp_map:
        values["host"] = smtp_map[SmtpKey.HOST]

    if SmtpKey.PORT in smtp_map:
        port = parse_port(smtp_map[SmtpKey.PORT])
        if port is not None and MIN_PORT <= port <= MAX_PORT:
            values["port"] = port

    if SmtpKey.FROM in smtp_map:
        values["from_address"] = smtp_map[SmtpKey.FROM]

    if SmtpKey.FROM_DISPLAY_NAME in smtp_map:
        values["from_name"] = smtp_map[SmtpKey.FROM_DISPLAY_NAME]

    if SmtpKey.STARTTLS in smtp_map:
        values["start_tls"] = smtp_map[SmtpKey.STARTTLS] == TRUE_LITERAL

    if SmtpKey.AUTH in smtp_map:
        auth = smtp_map[SmtpKey.AUTH] == TRUE_LITERAL
        values["auth"] = auth

        if auth:
            if SmtpKey.USER in smtp_map:
                values["username"] = smtp_map[SmtpKey.USER]
            if SmtpKey.PASSWORD in smtp_map:
                values["password"] = smtp_map[SmtpKey.PASSWORD]

    return SmtpServerConfig.model_validate(values)
