"""
Pulumi resource class for Keycloak realms.

Example:
    from keycloak_realm_provider.resources import Realm, RealmResourceArgs

    realm = Realm(
        "my-realm",
        RealmResourceArgs(name="my-realm", display_name="My Realm"),
    )
"""

from typing import Any

import pulumi
from pulumi.dynamic import Resource

from .provider import RealmProvider


class RealmResourceArgs:
    """Inputs of a ``Realm`` resource.

    Only ``name`` is required. Fields left as None are not managed and
    keep whatever value Keycloak holds.

    ``smtp_server`` takes a mapping with the keys ``host``, ``port``,
    ``from_address``, ``from_name``, ``start_tls``, ``auth``, ``username``
    and ``password``.
    """

    def __init__(
        self,
        name: pulumi.Input[str],
        enabled: pulumi.Input[bool] | None = None,
        display_name: pulumi.Input[str] | None = None,
        display_name_html: pulumi.Input[str] | None = None,
        login_theme: pulumi.Input[str] | None = None,
        account_theme: pulumi.Input[str] | None = None,
        admin_theme: pulumi.Input[str] | None = None,
        email_theme: pulumi.Input[str] | None = None,
        smtp_server: pulumi.Input[dict[str, Any]] | None = None,
    ):
        self.name = name
        self.enabled = enabled
        self.display_name = display_name
        self.display_name_html = display_name_html
        self.login_theme = login_theme
        self.account_theme = account_theme
        self.admin_theme = admin_theme
        self.email_theme = email_theme
        self.smtp_server = smtp_server

    def to_props(self) -> dict[str, Any]:
        return dict(vars(self))


class Realm(Resource):
    """A Keycloak realm managed with the merge strategy."""

    realm_id: pulumi.Output[str]
    name: pulumi.Output[str]
    enabled: pulumi.Output[bool | None]
    display_name: pulumi.Output[str | None]
    display_name_html: pulumi.Output[str | None]
    login_theme: pulumi.Output[str | None]
    account_theme: pulumi.Output[str | None]
    admin_theme: pulumi.Output[str | None]
    email_theme: pulumi.Output[str | None]
    smtp_server: pulumi.Output[dict[str, Any] | None]

    def __init__(
        self,
        resource_name: str,
        args: RealmResourceArgs,
        opts: pulumi.ResourceOptions | None = None,
    ):
        props = args.to_props()
        # Output-only properties must be declared to be populated
        props["realm_id"] = None
        super().__init__(
            RealmProvider(),
            resource_name,
            props,
            pulumi.ResourceOptions.merge(
                opts, pulumi.ResourceOptions(additional_secret_outputs=["smtp_server"])
            ),
        )
