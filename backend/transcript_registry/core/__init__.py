"""Core Layer — pure registry logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Rule functions return violation dicts; operations raise before mutating

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
