"""Example program: a realm with branding, themes and SMTP settings.

Set the admin password with ``pulumi config set --secret password <value>``
or export ``KEYCLOAK_PASSWORD`` before running ``pulumi up``.
"""

import pulumi

from keycloak_realm_provider.resources import Realm, RealmResourceArgs

config = pulumi.Config()

realm = Realm(
    "example-realm",
    RealmResourceArgs(
        name=config.get("realmName") or "example",
        display_name="Example",
        display_name_html="<b>Example</b>",
        login_theme="keycloak",
        email_theme="keycloak",
        smtp_server={
            "host": "smtp.example.com",
            "from_address": "noreply@example.com",
            "from_name": "Example",
            "auth": True,
            "username": "mailer",
            "password": config.require_secret("smtpPassword"),
        },
    ),
)

pulumi.export("realm_id", realm.realm_id)
pulumi.export("display_name", realm.display_name)
