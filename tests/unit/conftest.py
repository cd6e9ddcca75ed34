"""Shared pytest fixtures for realm provider unit tests."""

import pytest

from keycloak_realm_provider.services.realm_lifecycle import RealmLifecycle
from keycloak_realm_provider.settings import KeycloakEnvironment

from tests.fakes import FakeKeycloakAdmin


@pytest.fixture
def declared_config():
    """Connection values as declared in a stack configuration."""
    return {
        "url": "http://keycloak:8080",
        "username": "admin",
        "password": "admin-password",
    }


@pytest.fixture
def empty_environment():
    """A KeycloakEnvironment with no KEYCLOAK_* variables set."""
    return KeycloakEnvironment.model_construct()


@pytest.fixture
def fake_admin():
    """An empty in-memory Keycloak."""
    return FakeKeycloakAdmin()


@pytest.fixture
def admin_factory(fake_admin):
    """Factory handing out the fake admin and recording each configuration."""

    def factory(config):
        factory.configs.append(config)
        return fake_admin

    factory.configs = []
    return factory


@pytest.fixture
def lifecycle(declared_config, admin_factory, empty_environment):
    """RealmLifecycle wired to the in-memory Keycloak."""
    return RealmLifecycle(
        declared_config=declared_config,
        keycloak_admin_factory=admin_factory,
        environment=empty_environment,
    )
