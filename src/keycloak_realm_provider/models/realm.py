"""
Pydantic models for Keycloak realm resources.

This module defines:
- ``SmtpServerConfig``: the structured SMTP settings of a realm
- ``RealmArgs``: the desired managed fields of a realm resource
- ``RealmState``: the state reported back to Pulumi
- ``RealmRepresentation``: the remote realm as returned by the admin API,
  with every unmanaged attribute carried through untouched
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_SMTP_AUTH, DEFAULT_SMTP_PORT, DEFAULT_SMTP_STARTTLS
from ..errors import ValidationError
from ..utils.validation import validate_realm_name


class SmtpServerConfig(BaseModel):
    """SMTP server configuration for a realm.

    All fields are optional so the same model can describe both desired
    input and what Keycloak reports. Defaults are applied explicitly with
    ``with_defaults`` during input checking, never when reading state.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    host: str | None = Field(None, description="SMTP server hostname")
    port: int | None = Field(None, description="SMTP server port", ge=1, le=65535)
    from_address: str | None = Field(
        None, alias="from", description="From email address"
    )
    from_name: str | None = Field(None, description="From display name")
    start_tls: bool | None = Field(None, description="Whether to use STARTTLS")
    auth: bool | None = Field(None, description="Whether SMTP authentication is required")
    username: str | None = Field(None, description="SMTP username")
    password: str | None = Field(None, description="SMTP password")

    def with_defaults(self) -> "SmtpServerConfig":
        """Return a copy with the desired-state defaults filled in."""
        return self.model_copy(
            update={
                "port": DEFAULT_SMTP_PORT if self.port is None else self.port,
                "start_tls": DEFAULT_SMTP_STARTTLS
                if self.start_tls is None
                else self.start_tls,
                "auth": DEFAULT_SMTP_AUTH if self.auth is None else self.auth,
            }
        )


class RealmArgs(BaseModel):
    """
    Desired state of a realm resource.

    Only these fields are managed by the provider. A field left unset is not
    managed: it is never written and never clears what Keycloak holds.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="The name of the realm")
    enabled: bool | None = Field(None, description="Whether the realm is enabled")
    display_name: str | None = Field(
        None, description="Display name shown in the admin console and login pages"
    )
    display_name_html: str | None = Field(
        None, description="HTML display name for the realm"
    )
    login_theme: str | None = Field(None, description="Theme used for login pages")
    account_theme: str | None = Field(
        None, description="Theme used for account management pages"
    )
    admin_theme: str | None = Field(None, description="Theme used for admin console")
    email_theme: str | None = Field(None, description="Theme used for email templates")
    smtp_server: SmtpServerConfig | None = Field(
        None, description="SMTP server configuration for email sending"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        try:
            validate_realm_name(v)
        except ValidationError as e:
            raise ValueError(e.args[0]) from e
        return v

    def normalized(self) -> "RealmArgs":
        """Return a copy with SMTP desired-state defaults applied."""
        if self.smtp_server is None:
            return self
        return self.model_copy(update={"smtp_server": self.smtp_server.with_defaults()})

    def to_inputs(self) -> dict[str, Any]:
        """Serialize to the property bag Pulumi stores as resource inputs."""
        return self.model_dump()


class RealmState(RealmArgs):
    """State of a realm resource as reported to Pulumi."""

    realm_id: str = Field(..., description="The unique identifier of the realm")

    @classmethod
    def from_args(cls, args: RealmArgs) -> "RealmState":
        """Echo desired input as state (used for previews)."""
        return cls(realm_id=args.name, **args.model_dump())

    def to_outputs(self) -> dict[str, Any]:
        """Serialize to the property bag Pulumi stores as resource outputs."""
        return self.model_dump()


class RealmRepresentation(BaseModel):
    """
    A realm as exposed by the Keycloak Admin API.

    Only the managed attributes are declared. Every other attribute the API
    returns (token lifetimes, flows, policies, ...) is kept as an extra field
    and serialized back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    realm: str | None = None
    enabled: bool | None = None
    display_name: str | None = Field(None, alias="displayName")
    display_name_html: str | None = Field(None, alias="displayNameHtml")
    login_theme: str | None = Field(None, alias="loginTheme")
    account_theme: str | None = Field(None, alias="accountTheme")
    admin_theme: str | None = Field(None, alias="adminTheme")
    email_theme: str | None = Field(None, alias="emailTheme")
    smtp_server: dict[str, str] | None = Field(None, alias="smtpServer")

    def to_api_payload(self) -> dict[str, Any]:
        """Serialize for the admin API: camelCase keys, only attributes that are set."""
        return self.model_dump(by_alias=True, exclude_unset=True)
