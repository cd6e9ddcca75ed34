"""
Realm resource lifecycle: check, diff, create, read, update and delete.

``RealmLifecycle`` holds the provider semantics independently of the Pulumi
engine. Every operation that talks to Keycloak resolves the connection
configuration, opens a fresh authenticated admin client and closes it when
done; nothing is shared between operations.
"""

import contextlib
import time
from collections.abc import Callable, Collection, Iterator, Mapping
from typing import Any, NamedTuple

from pydantic import ValidationError as PydanticValidationError

from ..constants import PROTECTED_REALMS
from ..errors import (
    AuthenticationError,
    ConfigurationError,
    RealmOperationError,
    ValidationError,
)
from ..models.realm import RealmArgs, RealmState
from ..observability.logging import ProviderLogger
from ..observability.tracing import traced_operation
from ..settings import KeycloakEnvironment, ProviderConfig, load_provider_config
from ..utils.keycloak_admin import KeycloakAdminClient, get_keycloak_admin_client
from .realm_merge import apply_managed_fields, build_creation_payload, read_realm_state

# Errors that already describe the failure well enough to surface unchanged
_PASSTHROUGH_ERRORS = (
    AuthenticationError,
    ConfigurationError,
    RealmOperationError,
    ValidationError,
)


def _without_none(value: Any) -> Any:
    # Stored state may omit null entries of nested objects
    if isinstance(value, Mapping):
        return {k: _without_none(v) for k, v in value.items() if v is not None}
    return value


class InputFailure(NamedTuple):
    """A problem with one input property."""

    property: str
    reason: str


class DiffOutcome(NamedTuple):
    """Changed managed properties, and those that force a replacement."""

    changes: list[str]
    replaces: list[str]

    @property
    def changed(self) -> bool:
        return bool(self.changes or self.replaces)


class RealmLifecycle:
    """
    Lifecycle operations for Keycloak realm resources.

    Implements the merge strategy:
    - Create writes the full managed payload in a single request, or overlays
      the managed fields when the realm already exists
    - Update overlays the managed fields onto the remote realm
    - Create and Update report state read back from Keycloak
    - Read and Delete treat a missing realm as "gone", not as a failure
    """

    def __init__(
        self,
        declared_config: Mapping[str, Any] | None = None,
        keycloak_admin_factory: Callable[[ProviderConfig], KeycloakAdminClient]
        | None = None,
        environment: KeycloakEnvironment | None = None,
    ):
        """
        Initialize realm lifecycle.

        Args:
            declared_config: Connection values declared in the stack configuration
            keycloak_admin_factory: Factory returning an authenticated admin client
            environment: Pre-loaded ``KEYCLOAK_*`` values (read on demand if omitted)
        """
        self.declared_config = dict(declared_config or {})
        self.keycloak_admin_factory = (
            keycloak_admin_factory or get_keycloak_admin_client
        )
        self.environment = environment
        self.logger = ProviderLogger(__name__)

    def _admin_client(self) -> KeycloakAdminClient:
        config = load_provider_config(self.declared_config, self.environment)
        return self.keycloak_admin_factory(config)

    @contextlib.contextmanager
    def _tracked_operation(
        self, operation: str, realm_name: str, dry_run: bool = False
    ) -> Iterator[None]:
        """Log an operation and wrap unexpected failures with realm context."""
        start_time = time.time()
        self.logger.log_operation_start(operation, realm_name, dry_run=dry_run)

        try:
            yield
        except _PASSTHROUGH_ERRORS as e:
            self.logger.log_operation_error(
                operation, realm_name, e, time.time() - start_time
            )
            raise
        except Exception as e:
            error = RealmOperationError(operation, realm_name, cause=e)
            self.logger.log_operation_error(
                operation, realm_name, error, time.time() - start_time
            )
            raise error from e

        self.logger.log_operation_success(
            operation, realm_name, time.time() - start_time
        )

    def check(
        self, olds: Mapping[str, Any] | None, news: Mapping[str, Any]
    ) -> tuple[RealmArgs | None, list[InputFailure]]:
        """
        Validate and normalize raw resource inputs.

        Does not contact Keycloak. SMTP defaults are applied here.

        Args:
            olds: Previous inputs (unused; realms carry no input history)
            news: New raw inputs

        Returns:
            Tuple of (normalized args or None, list of input failures)
        """
        try:
            args = RealmArgs.model_validate(dict(news))
        except PydanticValidationError as e:
            failures = [
                InputFailure(
                    property=".".join(str(part) for part in err["loc"]),
                    reason=err["msg"],
                )
                for err in e.errors()
            ]
            self.logger.debug(
                f"Realm inputs failed validation: {len(failures)} problem(s)",
                operation="check",
            )
            return None, failures

        return args.normalized(), []

    def diff(
        self,
        olds: Mapping[str, Any],
        news: RealmArgs,
        unknown_fields: Collection[str] = (),
    ) -> DiffOutcome:
        """
        Compare reported state with new desired inputs.

        Only managed fields present in ``news`` can produce a change; an
        absent field means "not managed" and never differs. A new ``name``
        targets a different realm and forces a replacement.

        Fields listed in ``unknown_fields`` are not known until apply (their
        values in ``news`` are ignored) and are always reported as changed.
        """
        new_values = news.model_dump()
        changes: list[str] = [f for f in unknown_fields if f != "name"]
        replaces: list[str] = []

        if "name" in unknown_fields or olds.get("name") != news.name:
            replaces.append("name")

        for field, value in new_values.items():
            if field == "name" or field in unknown_fields or value is None:
                continue
            if _without_none(olds.get(field)) != _without_none(value):
                changes.append(field)

        return DiffOutcome(changes=changes, replaces=replaces)

    @traced_operation("realm.create")
    def create(self, desired: RealmArgs, dry_run: bool = False) -> RealmState:
        """
        Create the realm, or adopt it if it already exists.

        Args:
            desired: Normalized desired state
            dry_run: Echo the desired state without calling Keycloak

        Returns:
            State read back from Keycloak (or the echoed input on dry run)
        """
        with self._tracked_operation("create", desired.name, dry_run=dry_run):
            if dry_run:
                self.logger.info(
                    f"Dry run: skipping creation of realm {desired.name}",
                    realm_name=desired.name,
                    dry_run=True,
                )
                return RealmState.from_args(desired)

            with self._admin_client() as admin_client:
                if admin_client.realm_exists(desired.name):
                    self.logger.info(
                        f"Realm {desired.name} already exists, applying managed fields",
                        realm_name=desired.name,
                    )
                    apply_managed_fields(admin_client, desired)
                else:
                    admin_client.create_realm(build_creation_payload(desired))

                return self._read_back(admin_client, desired.name)

    @traced_operation("realm.read")
    def read(self, realm_id: str) -> RealmState | None:
        """
        Read the current state of a realm.

        Returns:
            Projected state, or None if the realm no longer exists
        """
        with self._tracked_operation("read", realm_id):
            with self._admin_client() as admin_client:
                state = read_realm_state(admin_client, realm_id)

            if state is None:
                self.logger.info(
                    f"Realm {realm_id} not found", realm_name=realm_id
                )
            return state

    @traced_operation("realm.update")
    def update(self, desired: RealmArgs, dry_run: bool = False) -> RealmState:
        """
        Overlay the managed fields onto the existing realm.

        Args:
            desired: Normalized desired state
            dry_run: Echo the desired state without calling Keycloak

        Returns:
            State read back from Keycloak (or the echoed input on dry run)
        """
        with self._tracked_operation("update", desired.name, dry_run=dry_run):
            if dry_run:
                self.logger.info(
                    f"Dry run: skipping update of realm {desired.name}",
                    realm_name=desired.name,
                    dry_run=True,
                )
                return RealmState.from_args(desired)

            with self._admin_client() as admin_client:
                apply_managed_fields(admin_client, desired)
                return self._read_back(admin_client, desired.name)

    @traced_operation("realm.delete")
    def delete(self, state: RealmState) -> None:
        """
        Delete the realm. A realm that is already gone counts as deleted.

        Raises:
            ValidationError: For protected realms
            RealmOperationError: If the realm still exists after a failure,
                or its existence cannot be determined
        """
        realm_name = state.name

        with self._tracked_operation("delete", realm_name):
            if realm_name in PROTECTED_REALMS:
                raise ValidationError(
                    f"Refusing to delete protected realm '{realm_name}'",
                    field="name",
                    user_action="Remove the resource from state instead of deleting it",
                )

            with self._admin_client() as admin_client:
                try:
                    admin_client.delete_realm(realm_name)
                except Exception as e:
                    try:
                        still_exists = admin_client.realm_exists(realm_name)
                    except Exception:
                        raise RealmOperationError("delete", realm_name, cause=e) from e

                    if still_exists:
                        raise RealmOperationError("delete", realm_name, cause=e) from e

                    self.logger.info(
                        f"Realm {realm_name} already deleted", realm_name=realm_name
                    )

    def _read_back(self, admin_client: KeycloakAdminClient, realm_name: str) -> RealmState:
        state = read_realm_state(admin_client, realm_name)
        if state is None:
            raise RealmOperationError(
                "read back",
                realm_name,
                user_action="The realm disappeared after it was written; retry the operation",
            )
        return state
