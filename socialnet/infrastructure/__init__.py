"""Infrastructure Layer — database units of work, external transports, cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping
"""
