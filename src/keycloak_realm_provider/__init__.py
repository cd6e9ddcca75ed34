"""
Keycloak realm provider - a Pulumi dynamic provider for Keycloak realms.

The provider manages realms with a merge strategy:
- Only an allow-list of realm fields is ever written
- Everything configured manually in the Keycloak UI is preserved
- State is always read back from Keycloak after a write
"""

__version__ = "0.1.0"
