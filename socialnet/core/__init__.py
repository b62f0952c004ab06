"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Boundary protocols declare async methods but core functions themselves are sync

Design Decisions:
    - Functional core separated from imperative shell
"""
