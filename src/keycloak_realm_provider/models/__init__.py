"""
Models package - Pydantic models for type-safe realm handling.

Defines data models for:
- Desired realm state (managed fields)
- Reported realm state
- The remote realm representation
"""
