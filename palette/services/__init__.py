"""
High-level use cases for the Palette API.

Each service module orchestrates the repository to implement business rules
(log in, create a diary, join with an invitation code, start a history).

Routers (FastAPI endpoints) call these services instead of touching the
database session directly.
"""
