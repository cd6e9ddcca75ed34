"""
Services package - realm lifecycle and merge logic.

Contains:
- The field merge between desired state and the remote realm
- The realm lifecycle operations driven by the Pulumi provider
"""

from .realm_lifecycle import DiffOutcome, InputFailure, RealmLifecycle
from .realm_merge import (
    build_creation_payload,
    overlay_managed_fields,
    project_realm_state,
)

__all__ = [
    "DiffOutcome",
    "InputFailure",
    "RealmLifecycle",
    "build_creation_payload",
    "overlay_managed_fields",
    "project_realm_state",
]
