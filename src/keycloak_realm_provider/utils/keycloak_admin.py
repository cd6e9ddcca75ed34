"""
Keycloak Admin API client utilities.

This module provides a small synchronous interface to the Keycloak Admin
REST API for managing realms.

The client handles:
- Authentication with Keycloak admin credentials (password grant)
- Realm create/read/update/delete keyed by realm name
- Translation of HTTP failures into ``KeycloakAdminError``
- A single place where "realm not found" is recognised

Token refresh, retries and response caching are intentionally absent:
every provider operation builds a fresh client and logs in again.
"""

import logging
from typing import Any
from urllib.parse import quote, urljoin

import httpx
from pydantic import BaseModel

from ..constants import DEFAULT_ADMIN_CLIENT_ID, DEFAULT_ADMIN_REALM, NOT_FOUND_MESSAGES
from ..errors import AuthenticationError, KeycloakAdminError
from ..models.realm import RealmRepresentation
from ..settings import ProviderConfig

logger = logging.getLogger(__name__)


def is_not_found(error: KeycloakAdminError) -> bool:
    """
    Decide whether an admin API failure means "the realm does not exist".

    Keycloak answers a missing realm with HTTP 404; some proxies and older
    versions only surface the error text, so the body is matched against the
    known not-found messages as well.
    """
    if error.status_code == 404:
        return True

    body = (error.response_body or "").strip().lower()
    if not body:
        return False
    return body in NOT_FOUND_MESSAGES or any(
        message in body for message in NOT_FOUND_MESSAGES if not message.isdigit()
    )


class KeycloakAdminClient:
    """
    Client for the realm endpoints of the Keycloak Admin API.

    Instances are cheap and short-lived: one per provider operation. Use as a
    context manager so the underlying connection pool is closed.
    """

    def __init__(
        self,
        server_url: str,
        username: str,
        password: str,
        realm: str = DEFAULT_ADMIN_REALM,
        client_id: str = DEFAULT_ADMIN_CLIENT_ID,
        verify_ssl: bool = True,
        timeout: int = 60,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize Keycloak Admin client.

        Args:
            server_url: Base URL of the Keycloak server, including any base path
            username: Admin username
            password: Admin password
            realm: Admin realm (default: master)
            client_id: Client ID for admin API access
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.server_url = server_url.rstrip("/")
        self.username = username
        self.password = password
        self.admin_realm = realm
        self.client_id = client_id
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.transport = transport

        self.access_token: str | None = None
        self._client: httpx.Client | None = None

        logger.debug(f"Initialized Keycloak Admin client for {self.server_url}")

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                verify=self.verify_ssl,
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                follow_redirects=False,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the connection pool and forget the access token."""
        self.access_token = None
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "KeycloakAdminClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def authenticate(self) -> None:
        """
        Authenticate with Keycloak and obtain an access token.

        Raises:
            AuthenticationError: If the login is rejected or Keycloak is unreachable
        """
        auth_url = (
            f"{self.server_url}/realms/{quote(self.admin_realm, safe='')}"
            "/protocol/openid-connect/token"
        )

        auth_data = {
            "username": self.username,
            "password": self.password,
            "grant_type": "password",
            "client_id": self.client_id,
        }

        try:
            response = self._get_client().post(
                auth_url,
                data=auth_data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
            token_data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Failed to authenticate with Keycloak: {e}",
                extra={"http_status": e.response.status_code},
            )
            raise AuthenticationError(
                str(e), status_code=e.response.status_code, cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to authenticate with Keycloak: {e}")
            raise AuthenticationError(str(e), cause=e) from e

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            raise AuthenticationError("token response did not contain an access token")

        self.access_token = access_token
        logger.debug("Successfully authenticated with Keycloak")

    def _make_request(
        self,
        method: str,
        endpoint: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make an authenticated request to the Keycloak Admin API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (relative to admin base)
            json: JSON request body data
            params: Query parameters

        Returns:
            Response object with body already read

        Raises:
            AuthenticationError: If ``authenticate`` has not been called
            KeycloakAdminError: On API errors
        """
        if not self.access_token:
            raise AuthenticationError("client is not authenticated")

        url = urljoin(f"{self.server_url}/admin/", endpoint.lstrip("/"))

        try:
            response = self._get_client().request(
                method=method,
                url=url,
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {self.access_token}"},
            )
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            response_body = e.response.text or "<no content>"

            error = KeycloakAdminError(
                f"{method} {endpoint} failed",
                status_code=status_code,
                response_body=response_body,
                cause=e,
            )
            log = logger.debug if is_not_found(error) else logger.error
            log(
                f"Request failed: {method} {url} - {e}",
                extra={
                    "http_status": status_code,
                    "response_body": error.body_preview(1024),
                },
            )
            raise error from e

        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise KeycloakAdminError(f"{method} {endpoint} failed: {e}", cause=e) from e

    def _make_validated_request(
        self,
        method: str,
        endpoint: str,
        request_model: RealmRepresentation | None = None,
        response_model: type[BaseModel] | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Make an authenticated request with Pydantic validation.

        Realm payloads are serialized with ``to_api_payload`` so attributes
        the remote never returned are not invented on the way back.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (relative to admin base)
            request_model: Realm model to serialize as request body
            response_model: Pydantic model class to validate response data
            **kwargs: Additional arguments passed to _make_request

        Returns:
            Validated response model instance if response_model is provided,
            otherwise the raw Response object
        """
        if request_model is not None:
            kwargs["json"] = request_model.to_api_payload()

        response = self._make_request(method, endpoint, **kwargs)

        if response_model is not None and response.status_code < 300:
            return response_model.model_validate(response.json())

        return response

    # Realm Management Methods

    def get_realm(self, realm_name: str) -> RealmRepresentation | None:
        """
        Get the full realm representation from Keycloak.

        Args:
            realm_name: Name of the realm to retrieve

        Returns:
            RealmRepresentation, or None if the realm does not exist

        Raises:
            KeycloakAdminError: If the request fails for any other reason
        """
        try:
            return self._make_validated_request(
                "GET",
                f"realms/{quote(realm_name, safe='')}",
                response_model=RealmRepresentation,
            )
        except KeycloakAdminError as e:
            if is_not_found(e):
                logger.debug(f"Realm '{realm_name}' not found")
                return None
            raise

    def realm_exists(self, realm_name: str) -> bool:
        """
        Check whether a realm exists.

        Raises:
            KeycloakAdminError: If existence cannot be determined
        """
        return self.get_realm(realm_name) is not None

    def create_realm(self, realm: RealmRepresentation) -> RealmRepresentation:
        """
        Create a new realm in Keycloak.

        Args:
            realm: Realm representation to create (``realm`` must be set)

        Returns:
            The representation that was sent

        Raises:
            KeycloakAdminError: If realm creation fails
        """
        logger.info(f"Creating realm: {realm.realm}")

        response = self._make_validated_request("POST", "realms", request_model=realm)

        if response.status_code != 201:
            raise KeycloakAdminError(
                f"Unexpected response creating realm '{realm.realm}'",
                status_code=response.status_code,
            )

        logger.info(f"Realm '{realm.realm}' created successfully")
        return realm

    def update_realm(
        self, realm_name: str, realm: RealmRepresentation
    ) -> RealmRepresentation:
        """
        Replace the realm representation in Keycloak.

        Args:
            realm_name: Name of the realm to update
            realm: Full realm representation to write

        Returns:
            The representation that was sent

        Raises:
            KeycloakAdminError: If realm update fails
        """
        logger.info(f"Updating realm: {realm_name}")

        response = self._make_validated_request(
            "PUT", f"realms/{quote(realm_name, safe='')}", request_model=realm
        )

        if response.status_code not in (200, 204):
            raise KeycloakAdminError(
                f"Unexpected response updating realm '{realm_name}'",
                status_code=response.status_code,
            )

        return realm

    def delete_realm(self, realm_name: str) -> None:
        """
        Delete a realm from Keycloak.

        Args:
            realm_name: Name of the realm to delete

        Raises:
            KeycloakAdminError: If the deletion fails (including "not found")
        """
        logger.info(f"Deleting realm '{realm_name}'")

        response = self._make_request("DELETE", f"realms/{quote(realm_name, safe='')}")

        if response.status_code not in (200, 204):
            raise KeycloakAdminError(
                f"Unexpected response deleting realm '{realm_name}'",
                status_code=response.status_code,
            )

        logger.info(f"Successfully deleted realm '{realm_name}'")


def get_keycloak_admin_client(
    config: ProviderConfig, transport: httpx.BaseTransport | None = None
) -> KeycloakAdminClient:
    """
    Factory function creating an authenticated admin client.

    Every call logs in again; tokens are never shared between operations.

    Args:
        config: Resolved provider configuration
        transport: Optional httpx transport (used by tests)

    Returns:
        Authenticated KeycloakAdminClient

    Raises:
        AuthenticationError: If the login fails
    """
    admin_client = KeycloakAdminClient(
        server_url=config.server_base_url,
        username=config.username,
        password=config.password.get_secret_value(),
        realm=config.realm,
        client_id=config.client_id,
        verify_ssl=not config.insecure,
        timeout=config.timeout,
        transport=transport,
    )

    try:
        admin_client.authenticate()
    except AuthenticationError:
        admin_client.close()
        raise

    return admin_client
