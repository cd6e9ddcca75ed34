"""
Field merge between desired realm state and the realm held by Keycloak.

The merge strategy only ever writes the managed attributes. The pure
functions in this module build the representation to send (``overlay``) and
the state to report (``projection``); the two helpers at the bottom drive
them against an admin client.
"""

import logging
from typing import Any

from ..constants import DEFAULT_REALM_ENABLED, MANAGED_REALM_ATTRIBUTES
from ..errors import KeycloakAdminError
from ..models.realm import RealmArgs, RealmRepresentation, RealmState
from ..utils.keycloak_admin import KeycloakAdminClient
from ..utils.smtp_codec import decode_smtp, encode_smtp

logger = logging.getLogger(__name__)

# Scalar fields shared by RealmArgs and RealmRepresentation
_SCALAR_FIELDS = (
    "enabled",
    "display_name",
    "display_name_html",
    "login_theme",
    "account_theme",
    "admin_theme",
    "email_theme",
)


def _managed_changes(desired: RealmArgs) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for field in _SCALAR_FIELDS:
        value = getattr(desired, field)
        if value is not None:
            changes[field] = value

    if desired.smtp_server is not None:
        changes["smtp_server"] = encode_smtp(desired.smtp_server)

    return changes


def overlay_managed_fields(
    desired: RealmArgs, current: RealmRepresentation
) -> RealmRepresentation:
    """
    Write the present desired fields onto a copy of the current realm.

    Absent desired fields leave the current value untouched. A present
    ``smtp_server`` replaces the whole remote SMTP map. Every unmanaged
    attribute of ``current`` is carried over unchanged.

    Args:
        desired: Desired managed fields
        current: Realm representation fetched from Keycloak

    Returns:
        New representation; ``current`` is not modified
    """
    return current.model_copy(update=_managed_changes(desired), deep=True)


def build_creation_payload(desired: RealmArgs) -> RealmRepresentation:
    """
    Build the representation sent when a realm does not exist yet.

    The realm is enabled unless the desired state says otherwise.
    """
    base = RealmRepresentation(realm=desired.name, enabled=DEFAULT_REALM_ENABLED)
    return overlay_managed_fields(desired, base)


def project_realm_state(
    remote: RealmRepresentation, realm_name: str | None = None
) -> RealmState:
    """
    Project a Keycloak realm onto the managed fields.

    Values are taken as Keycloak reports them; no defaults are substituted,
    so an attribute Keycloak does not return is reported as absent.

    Args:
        remote: Realm representation fetched from Keycloak
        realm_name: Name to report if the representation carries none

    Returns:
        RealmState with ``realm_id`` equal to the realm name
    """
    name = remote.realm or realm_name
    if not name:
        raise KeycloakAdminError("Realm representation has no realm name")

    return RealmState(
        realm_id=name,
        name=name,
        enabled=remote.enabled,
        display_name=remote.display_name,
        display_name_html=remote.display_name_html,
        login_theme=remote.login_theme,
        account_theme=remote.account_theme,
        admin_theme=remote.admin_theme,
        email_theme=remote.email_theme,
        smtp_server=decode_smtp(remote.smtp_server),
    )


def changed_attributes(
    before: RealmRepresentation, after: RealmRepresentation
) -> list[str]:
    """List the managed Keycloak attributes that differ between two representations."""
    old = before.model_dump(by_alias=True)
    new = after.model_dump(by_alias=True)
    return [attr for attr in MANAGED_REALM_ATTRIBUTES if old.get(attr) != new.get(attr)]


def apply_managed_fields(
    admin_client: KeycloakAdminClient, desired: RealmArgs
) -> RealmRepresentation:
    """
    Overlay the desired fields onto the realm held by Keycloak.

    Args:
        admin_client: Authenticated admin client
        desired: Desired managed fields

    Returns:
        The representation that was written

    Raises:
        KeycloakAdminError: If the realm is missing or a request fails
    """
    current = admin_client.get_realm(desired.name)
    if current is None:
        raise KeycloakAdminError(
            f"Realm '{desired.name}' not found", status_code=404
        )

    payload = overlay_managed_fields(desired, current)

    changed = changed_attributes(current, payload)
    logger.debug(
        f"Writing managed attributes of realm {desired.name}: "
        f"{', '.join(changed) if changed else 'no changes'}"
    )

    admin_client.update_realm(desired.name, payload)
    return payload


def read_realm_state(
    admin_client: KeycloakAdminClient, realm_name: str
) -> RealmState | None:
    """Fetch a realm and project it; None if it does not exist."""
    remote = admin_client.get_realm(realm_name)
    if remote is None:
        return None
    return project_realm_state(remote, realm_name)
