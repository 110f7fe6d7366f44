"""Infrastructure Layer — filesystem persistence and cross-cutting concerns.

Invariants:
    - Only this layer touches the data volume
    - OS errors mapped to the store error hierarchy (core/errors.py)
"""
