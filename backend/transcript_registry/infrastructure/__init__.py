"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core/ domain logic beyond types and errors
    - All external calls wrapped with timeout and error mapping

Design Decisions:
    - Thin wrappers over raw clients (ADR: single responsibility)
"""
