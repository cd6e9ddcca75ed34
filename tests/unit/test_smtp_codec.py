"""Unit tests for the SMTP settings codec."""

import pytest

from keycloak_realm_provider.models.realm import SmtpServerConfig
from keycloak_realm_provider.utils.smtp_codec import (
    SmtpKey,
    decode_smtp,
    encode_smtp,
    parse_port,
)


class TestEncodeSmtp:
    """Test encoding SMTP settings into the smtpServer map."""

    def test_encode_with_auth_includes_credentials(self):
        """Credentials travel only when auth is true."""
        config = SmtpServerConfig(
            host="smtp.example.com",
            port=587,
            from_address="noreply@example.com",
            from_name="Example",
            start_tls=True,
            auth=True,
            username="mailer",
            password="secret",
        )

        assert encode_smtp(config) == {
            "host": "smtp.example.com",
            "port": "587",
            "from": "noreply@example.com",
            "fromDisplayName": "Example",
            "starttls": "true",
            "auth": "true",
            "user": "mailer",
            "password": "secret",
        }

    def test_encode_without_auth_drops_credentials(self):
        """auth false drops user and password even when they are set."""
        config = SmtpServerConfig(
            host="smtp.example.com",
            auth=False,
            username="mailer",
            password="secret",
        )

        encoded = encode_smtp(config)

        assert encoded["auth"] == "false"
        assert "user" not in encoded
        assert "password" not in encoded

    def test_encode_missing_auth_is_false(self):
        """An unset auth flag is encoded as false."""
        encoded = encode_smtp(SmtpServerConfig(host="smtp.example.com"))
        assert encoded == {"host": "smtp.example.com", "auth": "false"}

    def test_encode_only_present_fields(self):
        """Fields that are not set are not put on the wire."""
        encoded = encode_smtp(SmtpServerConfig(port=25, start_tls=False))
        assert encoded == {"port": "25", "starttls": "false", "auth": "false"}

    def test_encoded_keys_are_plain_strings(self):
        """Keys are plain str values usable as JSON keys."""
        encoded = encode_smtp(SmtpServerConfig(host="smtp.example.com"))
        assert all(type(key) is str for key in encoded)


class TestDecodeSmtp:
    """Test decoding the smtpServer map."""

    def test_decode_empty_map_is_none(self):
        """A realm without SMTP configuration decodes to None."""
        assert decode_smtp({}) is None
        assert decode_smtp(None) is None

    def test_decode_full_map(self):
        """All keys decode into their fields."""
        config = decode_smtp(
            {
                "host": "smtp.example.com",
                "port": "465",
                "from": "noreply@example.com",
                "fromDisplayName": "Example",
                "starttls": "false",
                "auth": "true",
                "user": "mailer",
                "password": "secret",
            }
        )

        assert config == SmtpServerConfig(
            host="smtp.example.com",
            port=465,
            from_address="noreply@example.com",
            from_name="Example",
            start_tls=False,
            auth=True,
            username="mailer",
            password="secret",
        )

    def test_decode_ignores_credentials_without_auth(self):
        """user/password are only read when auth decodes to true."""
        config = decode_smtp(
            {"host": "smtp.example.com", "auth": "false", "user": "x", "password": "y"}
        )

        assert config.auth is False
        assert config.username is None
        assert config.password is None

    def test_decode_booleans_by_true_literal(self):
        """Anything other than the literal "true" is false."""
        config = decode_smtp({"starttls": "TRUE", "auth": "yes"})
        assert config.start_tls is False
        assert config.auth is False

    def test_decode_valid_port(self):
        """"587" decodes to 587."""
        assert decode_smtp({"port": "587"}).port == 587

    def test_decode_invalid_port_is_absent(self):
        """"abc" decodes to an absent port, not an error."""
        config = decode_smtp({"host": "smtp.example.com", "port": "abc"})
        assert config.port is None
        assert config.host == "smtp.example.com"

    def test_decode_out_of_range_port_is_absent(self):
        """A port outside 1-65535 is treated as absent."""
        assert decode_smtp({"port": "70000"}).port is None
        assert decode_smtp({"port": "0"}).port is None

    def test_round_trip_with_auth(self):
        """Encoding then decoding keeps every field when auth is true."""
        config = SmtpServerConfig(
            host="smtp.example.com",
            port=2525,
            from_address="noreply@example.com",
            start_tls=True,
            auth=True,
            username="mailer",
            password="secret",
        )
        assert decode_smtp(encode_smtp(config)) == config

    def test_round_trip_without_auth_loses_credentials(self):
        """Without auth the credentials do not survive the round trip."""
        config = SmtpServerConfig(
            host="smtp.example.com", auth=False, username="mailer", password="secret"
        )
        decoded = decode_smtp(encode_smtp(config))
        assert decoded == config.model_copy(update={"username": None, "password": None})


class TestParsePort:
    """Test port parsing from the wire form."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("587", 587),
            ("25", 25),
            ("0025", 25),
            ("abc", None),
            ("", None),
            (None, None),
            ("-1", None),
            ("+25", None),
            (" 25", None),
            ("25 ", None),
            ("2.5", None),
            ("٣", None),
        ],
    )
    def test_parse_port(self, value, expected):
        """Only ASCII decimal digits parse."""
        assert parse_port(value) == expected


class TestSmtpKey:
    """Test the key set of the smtpServer map."""

    def test_key_values(self):
        """Wire keys match what Keycloak expects."""
        assert {key.value for key in SmtpKey} == {
            "host",
            "port",
            "from",
            "fromDisplayName",
            "starttls",
            "auth",
            "user",
            "password",
        }
