"""
Observability utilities for the Keycloak realm provider.

This module provides structured logging and tracing for troubleshooting
provider runs.
"""

from .logging import ProviderLogger, setup_structured_logging
from .tracing import setup_tracing, traced_operation

__all__ = [
    "ProviderLogger",
    "setup_structured_logging",
    "setup_tracing",
    "traced_operation",
]
