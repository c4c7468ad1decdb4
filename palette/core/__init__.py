"""
Core utilities shared across the Palette API.

This package hosts:
- configuration (env vars) and logging setup
- the domain error taxonomy
- token signing and hashing primitives

Services depend on these primitives instead of importing FastAPI or the
storage layer for cross-cutting concerns.
"""
