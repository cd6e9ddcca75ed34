"""
Pulumi dynamic provider for Keycloak realms.

``RealmProvider`` adapts ``RealmLifecycle`` to the Pulumi engine: it turns
property bags into validated models, delegates every operation, and turns
the results back into the ``pulumi.dynamic`` result types.

The provider instance is serialized into the Pulumi program, so it holds no
connection settings when constructed; ``configure`` captures the declared
provider configuration inside the provider process.
"""

import logging
from typing import Any

from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    ConfigureRequest,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
    UpdateResult,
)
from pulumi.dynamic.config import Config
from pulumi.runtime import rpc

from .constants import PROVIDER_CONFIG_KEYS
from .models.realm import RealmArgs, RealmState
from .observability import setup_structured_logging, setup_tracing
from .services.realm_lifecycle import RealmLifecycle
from .settings import settings

logger = logging.getLogger(__name__)


def read_declared_config(config: Config) -> dict[str, Any]:
    """
    Read the declared provider configuration.

    Args:
        config: Stack configuration handed to the provider by the engine

    Returns:
        Declared values keyed by ``ProviderConfig`` field name; undeclared
        keys are omitted so the environment can fill them in. Values are
        passed on as the raw strings Pulumi stores; ``ProviderConfig``
        coerces them (``insecure: "true"`` becomes ``True``)
    """
    declared: dict[str, Any] = {}
    for key, field in PROVIDER_CONFIG_KEYS.items():
        value = config.get(key)
        if value is not None:
            declared[field] = value
    return declared


def _unknown_paths(value: Any, prefix: tuple[str, ...] = ()) -> list[tuple[str, ...]]:
    """Paths of input values that are not known yet (computed during preview)."""
    if value == rpc.UNKNOWN:
        return [prefix]
    if isinstance(value, dict):
        paths: list[tuple[str, ...]] = []
        for key, item in value.items():
            paths.extend(_unknown_paths(item, (*prefix, key)))
        return paths
    return []


def _without_paths(value: dict[str, Any], paths: list[tuple[str, ...]]) -> dict[str, Any]:
    result = dict(value)
    for path in paths:
        parent = result
        for key in path[:-1]:
            parent[key] = dict(parent[key])
            parent = parent[key]
        parent.pop(path[-1], None)
    return result


def _restore_unknowns(inputs: dict[str, Any], paths: list[tuple[str, ...]]) -> dict[str, Any]:
    for path in paths:
        parent = inputs
        for key in path[:-1]:
            if not isinstance(parent.get(key), dict):
                parent[key] = {}
            parent = parent[key]
        parent[path[-1]] = rpc.UNKNOWN
    return inputs


class RealmProvider(ResourceProvider):
    """Dynamic provider managing Keycloak realms with a merge strategy."""

    def __init__(self, keycloak_admin_factory: Any = None):
        """
        Initialize the realm provider.

        Args:
            keycloak_admin_factory: Factory for authenticated admin clients
                (defaults to the HTTP client)
        """
        self.keycloak_admin_factory = keycloak_admin_factory
        self.declared_config: dict[str, Any] = {}

    def configure(self, req: ConfigureRequest) -> None:
        setup_structured_logging(
            log_level=settings.log_level,
            enable_json_formatting=settings.json_logs,
            correlation_id_enabled=settings.correlation_ids,
        )
        setup_tracing(
            enabled=settings.tracing_enabled,
            endpoint=settings.tracing_endpoint,
            service_name=settings.tracing_service_name,
            sample_rate=settings.tracing_sample_rate,
        )

        self.declared_config = read_declared_config(req.config)
        logger.debug(
            f"Provider configured with declared keys: {sorted(self.declared_config)}"
        )

    def _lifecycle(self) -> RealmLifecycle:
        return RealmLifecycle(
            declared_config=self.declared_config,
            keycloak_admin_factory=self.keycloak_admin_factory,
        )

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        # Unknown values are validated once they resolve; a failure on an
        # unknown property (or below it) is not reported
        unknown = _unknown_paths(news)
        args, failures = self._lifecycle().check(_olds, _without_paths(news, unknown))
        unknown_properties = {".".join(path) for path in unknown}
        failures = [
            failure
            for failure in failures
            if not any(
                failure.property == prop or failure.property.startswith(f"{prop}.")
                for prop in unknown_properties
            )
        ]
        if failures:
            return CheckResult(
                news,
                [CheckFailure(failure.property, failure.reason) for failure in failures],
            )
        if args is None:
            return CheckResult(news, [])
        return CheckResult(_restore_unknowns(args.to_inputs(), unknown), [])

    def diff(
        self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]
    ) -> DiffResult:
        unknown_fields = sorted({path[0] for path in _unknown_paths(_news)})
        known = {k: v for k, v in _news.items() if k not in unknown_fields}
        if "name" in unknown_fields:
            known["name"] = _olds.get("name") or _id
        outcome = self._lifecycle().diff(
            _olds, RealmArgs.model_validate(known), unknown_fields=unknown_fields
        )
        return DiffResult(
            changes=outcome.changed,
            replaces=outcome.replaces,
            stables=[],
            delete_before_replace=bool(outcome.replaces),
        )

    def create(self, props: dict[str, Any]) -> CreateResult:
        args = RealmArgs.model_validate(props)
        state = self._lifecycle().create(args, dry_run=settings.dry_run)
        return CreateResult(id_=args.name, outs=state.to_outputs())

    def read(self, id_: str, props: dict[str, Any]) -> ReadResult:
        state = self._lifecycle().read(id_)
        if state is None:
            # An empty id tells the engine the realm is gone
            return ReadResult(id_=None, outs={})
        return ReadResult(id_=state.realm_id, outs=state.to_outputs())

    def update(
        self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]
    ) -> UpdateResult:
        args = RealmArgs.model_validate(_news)
        state = self._lifecycle().update(args, dry_run=settings.dry_run)
        return UpdateResult(outs=state.to_outputs())

    def delete(self, _id: str, _props: dict[str, Any]) -> None:
        state = RealmState(realm_id=_id, name=_props.get("name") or _id)
        self._lifecycle().delete(state)
