"""Core Layer — pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Merge, normalization and collection edits never mutate their inputs

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
