"""
Tests package - Test suite for the Keycloak realm provider.

Contains:
- unit/: Unit tests for individual components and lifecycle scenarios
"""
