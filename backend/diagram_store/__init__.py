"""Diagram Store — JSON-document persistence layer for a diagram editor.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
