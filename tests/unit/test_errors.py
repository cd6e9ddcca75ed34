"""Unit tests for the provider error hierarchy."""

from keycloak_realm_provider.errors import (
    AuthenticationError,
    ConfigurationError,
    KeycloakAdminError,
    ProviderError,
    RealmOperationError,
    ValidationError,
)


class TestProviderError:
    """Test the base error."""

    def test_message_with_user_action(self):
        error = ProviderError("Something broke", "api", user_action="Retry later")
        assert str(error) == "Something broke\nAction required: Retry later"

    def test_message_without_user_action(self):
        assert str(ProviderError("Something broke", "api")) == "Something broke"


class TestValidationError:
    """Test validation errors."""

    def test_field_is_prefixed(self):
        error = ValidationError("must not be empty", field="name")

        assert error.field == "name"
        assert error.category == "validation"
        assert error.args[0] == "Validation error in field 'name': must not be empty"
        assert error.user_action is not None


class TestConfigurationError:
    def test_default_user_action(self):
        error = ConfigurationError("url missing")
        assert "KEYCLOAK_" in error.user_action
        assert error.category == "configuration"


class TestKeycloakAdminError:
    """Test admin API errors."""

    def test_status_in_message(self):
        error = KeycloakAdminError("GET realms/demo failed", status_code=500)

        assert error.args[0] == "Keycloak Admin API error: HTTP 500: GET realms/demo failed"
        assert error.status_code == 500
        assert error.category == "api"

    def test_body_preview_truncates(self):
        error = KeycloakAdminError("x", response_body="a" * 10)

        assert error.body_preview(4) == "aaaa...<truncated>"
        assert error.body_preview(10) == "a" * 10
        assert KeycloakAdminError("x").body_preview() is None


class TestAuthenticationError:
    def test_is_admin_error(self):
        error = AuthenticationError("invalid_grant", status_code=401)

        assert isinstance(error, KeycloakAdminError)
        assert error.category == "authentication"
        assert "Authentication failed: invalid_grant" in str(error)


class TestRealmOperationError:
    def test_context_in_message(self):
        cause = KeycloakAdminError("boom", status_code=500)
        error = RealmOperationError("update", "demo", cause=cause)

        assert error.operation == "update"
        assert error.realm_name == "demo"
        assert error.cause is cause
        assert str(error).startswith("Failed to update realm 'demo': Keycloak Admin API error")
