"""
OpenTelemetry tracing for the Keycloak realm provider.

This module provides:
- Automatic instrumentation of the httpx client used for the admin API
- Manual span creation for lifecycle operations (create, update, ...)
- A decorator that wraps lifecycle methods in spans

Tracing is disabled unless ``OTEL_TRACING_ENABLED`` is set; with tracing
disabled every span is a no-op.
"""

import contextlib
import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer

logger = logging.getLogger(__name__)

# Module-level state
_tracer_provider: TracerProvider | None = None
_initialized: bool = False

P = ParamSpec("P")
R = TypeVar("R")


def setup_tracing(
    enabled: bool = False,
    endpoint: str = "http://localhost:4317",
    service_name: str = "pulumi-keycloak-realm",
    sample_rate: float = 1.0,
    insecure: bool = True,
    use_simple_processor: bool = False,
) -> TracerProvider | None:
    """
    Initialize OpenTelemetry tracing for the provider process.

    Args:
        enabled: Enable tracing (if False, returns None and does nothing)
        endpoint: OTLP collector endpoint (gRPC)
        service_name: Service name for traces
        sample_rate: Sampling rate (0.0-1.0, 1.0 = 100% of traces)
        insecure: Use insecure connection (no TLS)
        use_simple_processor: Export spans immediately instead of batching

    Returns:
        TracerProvider if enabled, None otherwise
    """
    global _tracer_provider, _initialized

    if _initialized:
        logger.debug("Tracing already initialized, skipping")
        return _tracer_provider

    if not enabled:
        logger.debug("OpenTelemetry tracing is disabled")
        _initialized = True
        return None

    logger.info(
        f"Initializing OpenTelemetry tracing: endpoint={endpoint}, "
        f"service={service_name}, sample_rate={sample_rate}"
    )

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.namespace": "pulumi",
        }
    )

    sampler = ParentBased(root=TraceIdRatioBased(sample_rate))
    _tracer_provider = TracerProvider(resource=resource, sampler=sampler)

    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=insecure)

    if use_simple_processor:
        processor = SimpleSpanProcessor(exporter)
    else:
        processor = BatchSpanProcessor(exporter)
    _tracer_provider.add_span_processor(processor)

    trace.set_tracer_provider(_tracer_provider)

    try:
        HTTPXClientInstrumentor().instrument()
        logger.debug("Instrumented httpx client")
    except Exception as e:
        logger.warning(f"Failed to instrument httpx: {e}")

    _initialized = True
    return _tracer_provider


def shutdown_tracing() -> None:
    """Shutdown tracing and flush any pending spans."""
    global _tracer_provider, _initialized

    if _tracer_provider is not None:
        logger.debug("Shutting down OpenTelemetry tracing")
        _tracer_provider.shutdown()
        _tracer_provider = None

    with contextlib.suppress(Exception):
        HTTPXClientInstrumentor().uninstrument()

    _initialized = False


def get_tracer(name: str = __name__) -> Tracer:
    """Get a tracer instance (no-op if tracing is disabled)."""
    return trace.get_tracer(name)


def is_tracing_enabled() -> bool:
    """Check if tracing is currently enabled and initialized."""
    return _initialized and _tracer_provider is not None


def traced_operation(
    operation_name: str,
    span_kind: SpanKind = SpanKind.INTERNAL,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator wrapping a realm lifecycle method in a span.

    The realm name is taken from a ``RealmArgs``/``RealmState`` argument, a
    ``realm_id`` keyword, or a plain string first argument.

    Args:
        operation_name: Name of the span (e.g., "realm.create")
        span_kind: Kind of span

    Example:
        @traced_operation("realm.create")
        def create(self, desired, dry_run=False):
            ...
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            tracer = get_tracer(func.__module__ or __name__)

            attributes = {
                "pulumi.operation": operation_name.rsplit(".", 1)[-1],
                "keycloak.realm": _realm_name_from_call(args, kwargs),
            }

            with tracer.start_as_current_span(
                operation_name,
                kind=span_kind,
                attributes=attributes,
            ) as span:
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator


def _realm_name_from_call(args: tuple, kwargs: dict) -> str:
    """Best-effort realm name for span attributes."""
    if "realm_id" in kwargs:
        return str(kwargs["realm_id"])
    for value in list(args) + list(kwargs.values()):
        name = getattr(value, "name", None)
        if isinstance(name, str):
            return name
    for value in args:
        if isinstance(value, str):
            return value
    return "unknown"
