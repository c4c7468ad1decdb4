"""
Persistence adapters.

SQLRepository wraps one SQLAlchemy session; services depend on it instead of
building queries themselves.
"""
